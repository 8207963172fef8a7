"""Catalog, account and order stores.

Thin wrappers around a SQLAlchemy session. Ownership rules are not checked
here; callers in the service layer do that.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import Conflict, NotFound
from models import Order, Product, User

logger = logging.getLogger(__name__)


class Store:
    model = None
    label = "Record"

    def __init__(self, db: Session):
        self.db = db

    def create(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def get(self, obj_id):
        obj = self.db.get(self.model, obj_id)
        if obj is None:
            raise NotFound(f"{self.label} not found")
        return obj

    def find(self, obj_id):
        return self.db.get(self.model, obj_id)

    def list(self):
        return self.db.query(self.model).order_by(self.model.id).all()

    def update(self, obj_id, **fields):
        obj = self.get(obj_id)
        for name, value in fields.items():
            setattr(obj, name, value)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, obj_id):
        obj = self.get(obj_id)
        self.db.delete(obj)
        self.db.commit()


class ProductStore(Store):
    model = Product
    label = "Product"

    def by_seller(self, seller_id):
        return self.db.query(Product).filter(Product.seller_id == seller_id).order_by(Product.id).all()


class UserStore(Store):
    model = User
    label = "User"

    def by_email(self, email):
        return self.db.query(User).filter(User.email == email).first()

    def create(self, obj):
        if self.by_email(obj.email) is not None:
            raise Conflict("Email already exists")
        self.db.add(obj)
        try:
            self.db.commit()
        except IntegrityError:
            # Unique index on users.email caught a concurrent registration
            self.db.rollback()
            raise Conflict("Email already exists")
        self.db.refresh(obj)
        logger.info(f"Created {obj.role.value} account {obj.id}")
        return obj


class OrderStore(Store):
    model = Order
    label = "Order"

    def by_user(self, user_id):
        return self.db.query(Order).filter(Order.user_id == user_id).order_by(Order.id).all()
