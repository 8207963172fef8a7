import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, Response, UploadFile, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

import accounts
import assets
import catalog
import orders
import stats
from config import ADMIN_EMAIL, ADMIN_PASSWORD, CORS_ORIGINS, LOG_LEVEL, PORT
from database import Base, SessionLocal, engine, get_db
from errors import ShopError
from models import User, UserRole
from query import QueryCriteria
from schemas import (
    CreateUserRequest,
    LoginRequest,
    OrderIn,
    OrderOut,
    ProductIn,
    ProductOut,
    RegisterRequest,
    SellerStatistics,
    SystemStatistics,
    TokenResponse,
    UpdateRoleRequest,
    UpdateStatusRequest,
    UploadResponse,
    UserOut,
)
from security import require_role

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)
assets.configure()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if ADMIN_EMAIL and ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            accounts.ensure_admin(db, ADMIN_EMAIL, ADMIN_PASSWORD)
        finally:
            db.close()
    yield


app = FastAPI(
    title="Multi-Role Shop",
    description="Products, orders and dashboards for customers, sellers and administrators",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

admin_only = require_role(UserRole.ADMIN)
seller_only = require_role(UserRole.SELLER)


@app.exception_handler(ShopError)
async def shop_error_handler(request: Request, exc: ShopError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"detail": "Internal server error"})


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Multi-Role Shop is running!"}


# Authentication
@app.post("/api/auth/register", tags=["Authentication"], summary="Register a new account",
          response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    return accounts.register(db, request.name, request.email, request.password, request.role)


@app.post("/api/auth/login", tags=["Authentication"], summary="Generate an access token",
          response_model=TokenResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    token, user = accounts.login(db, request.email, request.password)
    return {"access_token": token, "token_type": "bearer", "user": user}


# Products
@app.get("/api/products", tags=["Products"], summary="List products", response_model=List[ProductOut])
def list_products(search: Optional[str] = None, category: Optional[str] = None,
                  min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None,
                  sort: Optional[str] = None, db: Session = Depends(get_db)):
    criteria = QueryCriteria(search=search, facet=category, min_price=min_price, max_price=max_price, sort=sort)
    return catalog.list_products(db, criteria)


@app.get("/api/products/{product_id}", tags=["Products"], summary="Get a product", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return catalog.get_product(db, product_id)


@app.post("/api/products", tags=["Products"], summary="Add a platform product",
          response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def add_product(product: ProductIn, db: Session = Depends(get_db), user: User = Depends(admin_only)):
    return catalog.create_product(db, product)


@app.put("/api/products/{product_id}", tags=["Products"], summary="Update a product", response_model=ProductOut)
def update_product(product_id: int, product: ProductIn, db: Session = Depends(get_db),
                   user: User = Depends(admin_only)):
    return catalog.update_product(db, product_id, product)


@app.delete("/api/products/{product_id}", tags=["Products"], summary="Delete a product",
            status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: Session = Depends(get_db), user: User = Depends(admin_only)):
    catalog.delete_product(db, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Orders
@app.post("/api/orders", tags=["Orders"], summary="Place an order",
          response_model=OrderOut, status_code=status.HTTP_201_CREATED)
def create_order(order: OrderIn, user_id: Optional[int] = None, db: Session = Depends(get_db)):
    return orders.build_order(db, order.items, order.shipping_info, user_id=user_id)


@app.get("/api/orders/user/{user_id}", tags=["Orders"], summary="Get a customer's orders",
         response_model=List[OrderOut])
def get_customer_orders(user_id: int, db: Session = Depends(get_db)):
    return orders.get_orders_by_user(db, user_id)


@app.get("/api/orders/{order_id}", tags=["Orders"], summary="Get an order", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return orders.get_order(db, order_id)


# Seller
@app.get("/api/seller/products", tags=["Seller"], summary="List the seller's products",
         response_model=List[ProductOut])
def seller_products(search: Optional[str] = None, category: Optional[str] = None,
                    min_price: Optional[Decimal] = None, max_price: Optional[Decimal] = None,
                    sort: Optional[str] = None, db: Session = Depends(get_db),
                    seller: User = Depends(seller_only)):
    criteria = QueryCriteria(search=search, facet=category, min_price=min_price, max_price=max_price, sort=sort)
    return catalog.get_seller_products(db, seller.id, criteria)


@app.post("/api/seller/products", tags=["Seller"], summary="Add a product for the seller",
          response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def seller_add_product(product: ProductIn, db: Session = Depends(get_db), seller: User = Depends(seller_only)):
    return catalog.create_product(db, product, seller_id=seller.id)


@app.put("/api/seller/products/{product_id}", tags=["Seller"], summary="Update one of the seller's products",
         response_model=ProductOut)
def seller_update_product(product_id: int, product: ProductIn, db: Session = Depends(get_db),
                          seller: User = Depends(seller_only)):
    return catalog.update_seller_product(db, product_id, product, seller.id)


@app.delete("/api/seller/products/{product_id}", tags=["Seller"], summary="Delete one of the seller's products",
            status_code=status.HTTP_204_NO_CONTENT)
def seller_delete_product(product_id: int, db: Session = Depends(get_db), seller: User = Depends(seller_only)):
    catalog.delete_seller_product(db, product_id, seller.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/api/seller/orders", tags=["Seller"], summary="Orders containing the seller's products",
         response_model=List[OrderOut])
def seller_orders(search: Optional[str] = None, status: Optional[str] = None, sort: Optional[str] = None,
                  db: Session = Depends(get_db), seller: User = Depends(seller_only)):
    return catalog.get_seller_orders(db, seller.id, QueryCriteria(search=search, facet=status, sort=sort))


@app.get("/api/seller/statistics", tags=["Seller"], summary="Seller dashboard figures",
         response_model=SellerStatistics)
def seller_statistics(db: Session = Depends(get_db), seller: User = Depends(seller_only)):
    return stats.seller_statistics(db, seller.id)


# Admin
@app.get("/api/admin/users", tags=["Admin"], summary="List accounts", response_model=List[UserOut])
def admin_list_users(search: Optional[str] = None, role: Optional[str] = None, sort: Optional[str] = None,
                     db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    return accounts.list_users(db, QueryCriteria(search=search, facet=role, sort=sort))


@app.get("/api/admin/users/role/{role}", tags=["Admin"], summary="List accounts with a role",
         response_model=List[UserOut])
def admin_users_by_role(role: UserRole, db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    return accounts.get_users_by_role(db, role)


@app.post("/api/admin/users", tags=["Admin"], summary="Create an account",
          response_model=UserOut, status_code=status.HTTP_201_CREATED)
def admin_create_user(request: CreateUserRequest, db: Session = Depends(get_db),
                      admin: User = Depends(admin_only)):
    return accounts.create_user(db, request.name, request.email, request.password, request.role)


@app.put("/api/admin/users/{user_id}/role", tags=["Admin"], summary="Change an account's role",
         response_model=UserOut)
def admin_update_role(user_id: int, request: UpdateRoleRequest, db: Session = Depends(get_db),
                      admin: User = Depends(admin_only)):
    return accounts.update_user_role(db, user_id, request.role)


@app.delete("/api/admin/users/{user_id}", tags=["Admin"], summary="Delete an account",
            status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_user(user_id: int, db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    accounts.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/api/admin/statistics", tags=["Admin"], summary="Account counts by role",
         response_model=SystemStatistics)
def admin_statistics(db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    return stats.system_statistics(db)


@app.get("/api/admin/orders", tags=["Admin"], summary="List all orders", response_model=List[OrderOut])
def admin_list_orders(search: Optional[str] = None, status: Optional[str] = None, sort: Optional[str] = None,
                      db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    return orders.list_orders(db, QueryCriteria(search=search, facet=status, sort=sort))


@app.put("/api/admin/orders/{order_id}/status", tags=["Admin"], summary="Update the status of an order",
         response_model=OrderOut)
def admin_update_order_status(order_id: int, request: UpdateStatusRequest, db: Session = Depends(get_db),
                              admin: User = Depends(admin_only)):
    return orders.update_order_status(db, order_id, request.status)


@app.delete("/api/admin/orders/{order_id}", tags=["Admin"], summary="Delete an order",
            status_code=status.HTTP_204_NO_CONTENT)
def admin_delete_order(order_id: int, db: Session = Depends(get_db), admin: User = Depends(admin_only)):
    orders.delete_order(db, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Uploads
@app.post("/api/upload/image", tags=["Uploads"], summary="Upload a product image", response_model=UploadResponse)
def upload_image(file: UploadFile = File(...)):
    # Sync route: FastAPI runs it in the threadpool while the upload blocks
    data = file.file.read()
    return {"url": assets.upload_image(data, file.content_type)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT)
