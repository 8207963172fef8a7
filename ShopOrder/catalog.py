"""Product catalog operations, for the storefront and for sellers."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from assets import discard_image
from errors import Unauthorized
from models import Product
from query import QueryCriteria, filter_orders, filter_products
from stats import orders_for_seller
from stores import OrderStore, ProductStore

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "price", "image_url", "stock_quantity", "category")


def _fields(data) -> dict:
    return {name: getattr(data, name) for name in EDITABLE_FIELDS}


def list_products(db: Session, criteria: Optional[QueryCriteria] = None):
    return filter_products(ProductStore(db).list(), criteria)


def get_product(db: Session, product_id: int) -> Product:
    return ProductStore(db).get(product_id)


def create_product(db: Session, data, seller_id: Optional[int] = None) -> Product:
    product = ProductStore(db).create(Product(seller_id=seller_id, **_fields(data)))
    logger.info(f"Product {product.id} created (seller {seller_id})")
    return product


def update_product(db: Session, product_id: int, data) -> Product:
    return ProductStore(db).update(product_id, **_fields(data))


def delete_product(db: Session, product_id: int):
    products = ProductStore(db)
    image_url = products.get(product_id).image_url
    products.delete(product_id)
    discard_image(image_url)


# Seller workflow

def _owned_product(products: ProductStore, product_id: int, seller_id: int, action: str) -> Product:
    product = products.get(product_id)
    if product.seller_id is None or product.seller_id != seller_id:
        raise Unauthorized(f"You don't have permission to {action} this product")
    return product


def get_seller_products(db: Session, seller_id: int, criteria: Optional[QueryCriteria] = None):
    return filter_products(ProductStore(db).by_seller(seller_id), criteria)


def update_seller_product(db: Session, product_id: int, data, seller_id: int) -> Product:
    products = ProductStore(db)
    product = _owned_product(products, product_id, seller_id, "update")
    old_image = product.image_url
    updated = products.update(product_id, **_fields(data))
    if old_image and old_image != data.image_url:
        discard_image(old_image)
    return updated


def delete_seller_product(db: Session, product_id: int, seller_id: int):
    products = ProductStore(db)
    product = _owned_product(products, product_id, seller_id, "delete")
    image_url = product.image_url
    products.delete(product_id)
    discard_image(image_url)
    logger.info(f"Seller {seller_id} deleted product {product_id}")


def get_seller_orders(db: Session, seller_id: int, criteria: Optional[QueryCriteria] = None):
    orders = orders_for_seller(OrderStore(db).list(), seller_id)
    return filter_orders(orders, criteria)
