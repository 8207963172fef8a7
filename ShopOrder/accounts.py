"""Registration, login and administrator account management."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from errors import InvalidCredentials, Unauthorized
from models import User, UserRole
from query import QueryCriteria, filter_users
from security import create_access_token, get_password_hash, verify_password
from stores import UserStore

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = (UserRole.USER, UserRole.SELLER)


def create_user(db: Session, name: str, email: str, password: str, role: UserRole = UserRole.USER) -> User:
    user = User(name=name, email=email, password_hash=get_password_hash(password), role=role)
    return UserStore(db).create(user)


def register(db: Session, name: str, email: str, password: str, role: Optional[UserRole] = None) -> User:
    role = role or UserRole.USER
    if role not in SELF_SERVICE_ROLES:
        raise Unauthorized("Only an administrator can create ADMIN accounts")
    return create_user(db, name, email, password, role)


def login(db: Session, email: str, password: str):
    """Return ``(token, user)``; the same error for unknown email and wrong password."""
    user = UserStore(db).by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    token = create_access_token(data={"sub": user.email, "role": user.role.value})
    return token, user


def list_users(db: Session, criteria: Optional[QueryCriteria] = None):
    return filter_users(UserStore(db).list(), criteria)


def get_users_by_role(db: Session, role: UserRole):
    return [u for u in UserStore(db).list() if u.role == role]


def update_user_role(db: Session, user_id: int, role: UserRole) -> User:
    user = UserStore(db).update(user_id, role=role)
    logger.info(f"User {user_id} is now {role.value}")
    return user


def delete_user(db: Session, user_id: int):
    UserStore(db).delete(user_id)
    logger.info(f"User {user_id} deleted")


def ensure_admin(db: Session, email: str, password: str) -> User:
    users = UserStore(db)
    existing = users.by_email(email)
    if existing is not None:
        return existing
    logger.info(f"Bootstrapping administrator {email}")
    return create_user(db, "Administrator", email, password, UserRole.ADMIN)
