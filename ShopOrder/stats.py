"""Dashboard statistics for sellers and administrators.

Computed from full scans on every call; nothing is cached.
"""
from decimal import Decimal

from sqlalchemy.orm import Session

from models import UserRole
from stores import OrderStore, ProductStore, UserStore

LOW_STOCK_THRESHOLD = 10


def seller_owns_item(seller_id, item):
    # Owner recorded when the order was placed, so deleting the product keeps it
    return item.seller_id is not None and item.seller_id == seller_id


def orders_for_seller(orders, seller_id):
    """Orders with at least one item sold by the seller."""
    return [
        order for order in orders
        if any(seller_owns_item(seller_id, item) for item in order.items)
    ]


def seller_revenue(orders, seller_id) -> Decimal:
    revenue = Decimal("0")
    for order in orders:
        for item in order.items:
            if seller_owns_item(seller_id, item):
                revenue += item.subtotal
    return revenue


def seller_statistics(db: Session, seller_id: int) -> dict:
    seller_products = ProductStore(db).by_seller(seller_id)
    seller_orders = orders_for_seller(OrderStore(db).list(), seller_id)

    low_stock = [
        p for p in seller_products
        if p.stock_quantity is not None and p.stock_quantity < LOW_STOCK_THRESHOLD
    ]
    return {
        "total_products": len(seller_products),
        "total_orders": len(seller_orders),
        "total_revenue": seller_revenue(seller_orders, seller_id),
        "low_stock_products": len(low_stock),
    }


def system_statistics(db: Session) -> dict:
    users = UserStore(db).list()
    return {
        "total_users": len(users),
        "admin_count": sum(1 for u in users if u.role == UserRole.ADMIN),
        "seller_count": sum(1 for u in users if u.role == UserRole.SELLER),
        "user_count": sum(1 for u in users if u.role == UserRole.USER),
    }
