"""Filter and sort pipeline for in-memory lists of products, users and orders.

A ``QueryProfile`` describes which fields of a record take part in each
step; ``run_query`` applies search, facet, price range and sort in that
order and returns a new list.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Type

from models import OrderStatus, UserRole


@dataclass
class QueryCriteria:
    search: Optional[str] = None
    facet: Optional[str] = None  # category, role or status depending on the profile
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort: Optional[str] = None


@dataclass(frozen=True)
class SortKey:
    key: Callable[[Any], Any]
    descending: bool = False


@dataclass(frozen=True)
class QueryProfile:
    search_fields: Tuple[Callable[[Any], Optional[str]], ...]
    facet_field: Optional[Callable[[Any], Any]] = None
    # When set, the facet value must name a member of this enum
    facet_enum: Optional[Type[Enum]] = None
    price_field: Optional[Callable[[Any], Decimal]] = None
    sort_keys: Dict[str, SortKey] = field(default_factory=dict)


def _text(value):
    return value.lower() if value is not None else ""


def _matches_search(record, profile, needle):
    for get in profile.search_fields:
        value = get(record)
        if value is not None and needle in value.lower():
            return True
    return False


def _facet_matcher(profile, facet):
    """Predicate for the facet filter, or None when the filter does not apply."""
    if profile.facet_field is None:
        return None
    if profile.facet_enum is not None:
        try:
            wanted = profile.facet_enum[facet.upper()]
        except KeyError:
            return None
        return lambda record: profile.facet_field(record) == wanted
    wanted = facet.lower()

    def matches(record):
        value = profile.facet_field(record)
        return value is not None and value.lower() == wanted
    return matches


def run_query(records: Sequence, criteria: Optional[QueryCriteria], profile: QueryProfile) -> list:
    result = list(records)
    if criteria is None:
        return result

    if criteria.search:
        needle = criteria.search.lower()
        result = [r for r in result if _matches_search(r, profile, needle)]

    if criteria.facet:
        matcher = _facet_matcher(profile, criteria.facet)
        if matcher is not None:
            result = [r for r in result if matcher(r)]

    if profile.price_field is not None:
        if criteria.min_price is not None:
            result = [r for r in result if profile.price_field(r) >= criteria.min_price]
        if criteria.max_price is not None:
            result = [r for r in result if profile.price_field(r) <= criteria.max_price]

    if criteria.sort:
        sort_key = profile.sort_keys.get(criteria.sort)
        if sort_key is not None:
            # sorted() is stable, also with reverse=True
            result = sorted(result, key=sort_key.key, reverse=sort_key.descending)

    return result


def _order_customer(order):
    return _text(order.customer_name)


PRODUCT_QUERY = QueryProfile(
    search_fields=(lambda p: p.name, lambda p: p.description),
    facet_field=lambda p: p.category,
    price_field=lambda p: p.price,
    sort_keys={
        "price_asc": SortKey(lambda p: p.price),
        "price_desc": SortKey(lambda p: p.price, descending=True),
        "name_asc": SortKey(lambda p: _text(p.name)),
        "name_desc": SortKey(lambda p: _text(p.name), descending=True),
    },
)

USER_QUERY = QueryProfile(
    search_fields=(lambda u: u.name, lambda u: u.email),
    facet_field=lambda u: u.role,
    facet_enum=UserRole,
    sort_keys={
        "name_asc": SortKey(lambda u: _text(u.name)),
        "name_desc": SortKey(lambda u: _text(u.name), descending=True),
        "email_asc": SortKey(lambda u: _text(u.email)),
        "email_desc": SortKey(lambda u: _text(u.email), descending=True),
    },
)

ORDER_QUERY = QueryProfile(
    search_fields=(lambda o: str(o.id), lambda o: o.customer_name),
    facet_field=lambda o: o.status,
    facet_enum=OrderStatus,
    sort_keys={
        "date_asc": SortKey(lambda o: o.order_date),
        "date_desc": SortKey(lambda o: o.order_date, descending=True),
        "customer_asc": SortKey(_order_customer),
        "customer_desc": SortKey(_order_customer, descending=True),
    },
)


def filter_products(products, criteria=None):
    return run_query(products, criteria, PRODUCT_QUERY)


def filter_users(users, criteria=None):
    return run_query(users, criteria, USER_QUERY)


def filter_orders(orders, criteria=None):
    return run_query(orders, criteria, ORDER_QUERY)
