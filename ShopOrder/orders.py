"""Order construction and order queries."""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional, Union

from sqlalchemy.orm import Session

from errors import InvalidPrice, InvalidQuantity
from models import Order, OrderItem, OrderStatus, Product, ShippingInfo
from query import QueryCriteria, filter_orders
from stores import OrderStore, ProductStore, UserStore

logger = logging.getLogger(__name__)

# Prices and totals are stored with two decimal places
CENT = Decimal("0.01")


@dataclass(frozen=True)
class LiveProduct:
    """The submitted product id resolved to a catalog product."""
    product: Product

    @property
    def product_id(self):
        return self.product.id

    @property
    def name(self):
        return self.product.name

    @property
    def seller_id(self):
        return self.product.seller_id


@dataclass(frozen=True)
class SnapshotProduct:
    """Stand-in for a product that is no longer in the catalog.

    Built from what the cart submitted, so an order survives products that
    were deleted after being added to the cart.
    """
    product_id: int
    name: Optional[str]
    price: Optional[Decimal]
    seller_id: Optional[int] = None  # unknown once the product is gone


ProductRef = Union[LiveProduct, SnapshotProduct]


def resolve_product(products: ProductStore, item) -> ProductRef:
    product = products.find(item.product_id)
    if product is None:
        logger.info(f"Product {item.product_id} not in catalog, using submitted snapshot")
        return SnapshotProduct(product_id=item.product_id, name=item.name, price=item.price)
    return LiveProduct(product)


def build_order(db: Session, items: Iterable, shipping_info, user_id: Optional[int] = None) -> Order:
    """Validate a cart and store it as a new order.

    Each item needs ``product_id``, ``name``, ``price`` and ``quantity``
    attributes; ``shipping_info`` needs the five shipping fields. The total
    is computed here from the per-item prices and quantities. Nothing is
    written unless every item is valid.
    """
    order = Order(status=OrderStatus.PENDING)
    if user_id is not None:
        order.user_id = UserStore(db).get(user_id).id

    order.shipping_info = ShippingInfo(
        name=shipping_info.name,
        email=shipping_info.email,
        address=shipping_info.address,
        city=shipping_info.city,
        zip_code=shipping_info.zip_code,
    )

    products = ProductStore(db)
    total = Decimal("0")
    for item in items:
        ref = resolve_product(products, item)
        if item.quantity is None or item.quantity <= 0:
            raise InvalidQuantity(f"Invalid quantity for product: {item.name}")
        if item.price is None or item.price != item.price.quantize(CENT):
            raise InvalidPrice(f"Invalid price for product: {item.name}")
        order.items.append(
            OrderItem(
                product_id=ref.product_id,
                product_name=ref.name if ref.name is not None else item.name,
                seller_id=ref.seller_id,
                quantity=item.quantity,
                price=item.price,
            )
        )
        total += item.price * item.quantity
    order.total = total

    db.add(order)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(order)
    logger.info(f"Order {order.id} created with {len(order.items)} item(s), total {total}")
    return order


def get_order(db: Session, order_id: int) -> Order:
    return OrderStore(db).get(order_id)


def get_orders_by_user(db: Session, user_id: int):
    return OrderStore(db).by_user(user_id)


def list_orders(db: Session, criteria: Optional[QueryCriteria] = None):
    return filter_orders(OrderStore(db).list(), criteria)


def update_order_status(db: Session, order_id: int, status: OrderStatus) -> Order:
    order = OrderStore(db).update(order_id, status=status)
    logger.info(f"Order {order_id} moved to {status.value}")
    return order


def delete_order(db: Session, order_id: int):
    OrderStore(db).delete(order_id)
    logger.info(f"Order {order_id} deleted")
