from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from models import OrderStatus, Product, UserRole
from query import QueryCriteria, filter_orders, filter_products, filter_users


def product(name, price="10.00", description=None, category=None):
    return Product(name=name, price=Decimal(price), description=description, category=category)


def catalog():
    return [
        product("Laptop Stand", "35.00", category="Office"),
        product("Canvas Tote", "15.00", description="Fits a laptop bag insert", category="bags"),
        product("Monitor", "199.00", category="Electronics"),
        product("mouse pad", "5.00", category="Office"),
    ]


def names(records):
    return [r.name for r in records]


def test_search_matches_name_or_description():
    result = filter_products(catalog(), QueryCriteria(search="lap"))
    assert names(result) == ["Laptop Stand", "Canvas Tote"]


def test_search_is_case_insensitive_and_ignores_missing_description():
    result = filter_products(catalog(), QueryCriteria(search="MONITOR"))
    assert names(result) == ["Monitor"]


def test_empty_criteria_returns_copy():
    products = catalog()
    result = filter_products(products, QueryCriteria())
    assert result == products
    assert result is not products
    assert filter_products(products, None) == products


def test_category_filter_is_case_insensitive_exact_match():
    result = filter_products(catalog(), QueryCriteria(facet="office"))
    assert names(result) == ["Laptop Stand", "mouse pad"]
    assert filter_products(catalog(), QueryCriteria(facet="Off")) == []


def test_price_bounds_are_inclusive_and_optional():
    products = catalog()
    result = filter_products(products, QueryCriteria(min_price=Decimal("15.00"), max_price=Decimal("35.00")))
    assert names(result) == ["Laptop Stand", "Canvas Tote"]
    assert names(filter_products(products, QueryCriteria(min_price=Decimal("100")))) == ["Monitor"]
    assert names(filter_products(products, QueryCriteria(max_price=Decimal("5.00")))) == ["mouse pad"]


def test_filters_compose():
    criteria = QueryCriteria(search="o", facet="Office", max_price=Decimal("20"))
    assert names(filter_products(catalog(), criteria)) == ["mouse pad"]


def test_sort_by_price_and_name():
    products = catalog()
    assert names(filter_products(products, QueryCriteria(sort="price_asc"))) == [
        "mouse pad", "Canvas Tote", "Laptop Stand", "Monitor"]
    assert names(filter_products(products, QueryCriteria(sort="price_desc")))[0] == "Monitor"
    assert names(filter_products(products, QueryCriteria(sort="name_asc"))) == [
        "Canvas Tote", "Laptop Stand", "Monitor", "mouse pad"]
    assert names(filter_products(products, QueryCriteria(sort="name_desc")))[0] == "mouse pad"


def test_unknown_sort_keeps_order():
    products = catalog()
    assert filter_products(products, QueryCriteria(sort="rating_desc")) == products


def test_sort_is_stable_and_idempotent():
    products = [product("A", "5"), product("B", "5"), product("C", "1"), product("D", "5")]
    once = filter_products(products, QueryCriteria(sort="price_asc"))
    assert names(once) == ["C", "A", "B", "D"]
    assert filter_products(once, QueryCriteria(sort="price_asc")) == once
    descending = filter_products(products, QueryCriteria(sort="price_desc"))
    assert names(descending) == ["A", "B", "D", "C"]


def test_filter_is_subset_and_idempotent():
    products = catalog()
    criteria = QueryCriteria(search="a", min_price=Decimal("10"))
    once = filter_products(products, criteria)
    assert all(p in products for p in once)
    assert filter_products(once, criteria) == once


def test_source_is_not_mutated():
    products = catalog()
    before = list(products)
    filter_products(products, QueryCriteria(search="lap", sort="name_desc"))
    assert products == before


def users():
    return [
        SimpleNamespace(name="zoe", email="zoe@example.com", role=UserRole.USER),
        SimpleNamespace(name="Adam", email=None, role=UserRole.SELLER),
        SimpleNamespace(name="Mia", email="boss@example.com", role=UserRole.ADMIN),
    ]


def test_user_search_and_role_filter():
    assert names(filter_users(users(), QueryCriteria(search="BOSS"))) == ["Mia"]
    assert names(filter_users(users(), QueryCriteria(facet="seller"))) == ["Adam"]


def test_unknown_role_is_ignored():
    assert names(filter_users(users(), QueryCriteria(facet="superuser"))) == ["zoe", "Adam", "Mia"]


def test_user_sort_treats_missing_email_as_lowest():
    assert names(filter_users(users(), QueryCriteria(sort="email_asc"))) == ["Adam", "Mia", "zoe"]
    assert names(filter_users(users(), QueryCriteria(sort="email_desc"))) == ["zoe", "Mia", "Adam"]
    assert names(filter_users(users(), QueryCriteria(sort="name_asc"))) == ["Adam", "Mia", "zoe"]


def order(order_id, customer, status=OrderStatus.PENDING, day=1):
    return SimpleNamespace(id=order_id, customer_name=customer, status=status,
                           order_date=datetime(2024, 1, day), name=f"order-{order_id}")


def orders():
    return [
        order(12, "Carol", OrderStatus.SHIPPED, day=3),
        order(7, None, day=1),
        order(31, "alice", day=2),
    ]


def test_order_search_by_id_or_customer():
    assert [o.id for o in filter_orders(orders(), QueryCriteria(search="1"))] == [12, 31]
    assert [o.id for o in filter_orders(orders(), QueryCriteria(search="CAROL"))] == [12]


def test_order_status_filter_and_unknown_status():
    assert [o.id for o in filter_orders(orders(), QueryCriteria(facet="shipped"))] == [12]
    assert [o.id for o in filter_orders(orders(), QueryCriteria(facet="lost"))] == [12, 7, 31]


def test_order_sorts():
    assert [o.id for o in filter_orders(orders(), QueryCriteria(sort="date_asc"))] == [7, 31, 12]
    assert [o.id for o in filter_orders(orders(), QueryCriteria(sort="date_desc"))] == [12, 31, 7]
    assert [o.id for o in filter_orders(orders(), QueryCriteria(sort="customer_asc"))] == [7, 31, 12]
    assert [o.id for o in filter_orders(orders(), QueryCriteria(sort="customer_desc"))] == [12, 31, 7]
