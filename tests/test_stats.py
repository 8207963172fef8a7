from decimal import Decimal

import orders
import stats
from conftest import item, shipping
from models import UserRole


def test_seller_statistics_scenario(db, make_product):
    mouse = make_product("Mouse", "20.00", seller_id=5, stock=3)
    keyboard = make_product("Keyboard", "50.00", seller_id=9, stock=20)
    orders.build_order(db, [
        item(mouse.id, "Mouse", "20.00", 2),
        item(keyboard.id, "Keyboard", "50.00", 1),
    ], shipping())

    result = stats.seller_statistics(db, 5)

    assert result == {
        "total_products": 1,
        "total_orders": 1,
        "total_revenue": Decimal("40.00"),
        "low_stock_products": 1,
    }
    assert stats.seller_statistics(db, 9)["total_revenue"] == Decimal("50.00")
    assert stats.seller_statistics(db, 9)["low_stock_products"] == 0


def test_order_with_several_items_counts_once(db, make_product):
    a = make_product("A", "1.00", seller_id=5)
    b = make_product("B", "2.00", seller_id=5)
    c = make_product("C", "3.00", seller_id=5)
    other = make_product("Other", "100.00", seller_id=9)
    orders.build_order(db, [
        item(a.id, "A", "1.00", 1),
        item(b.id, "B", "2.00", 2),
        item(c.id, "C", "3.00", 1),
        item(other.id, "Other", "100.00", 2),
    ], shipping())
    orders.build_order(db, [item(other.id, "Other", "100.00", 1)], shipping())

    result = stats.seller_statistics(db, 5)
    assert result["total_orders"] == 1
    assert result["total_revenue"] == Decimal("8.00")
    assert result["total_products"] == 3
    assert stats.seller_statistics(db, 9)["total_orders"] == 2


def test_revenue_uses_purchase_price(db, make_product):
    mug = make_product("Mug", "10.00", seller_id=5, stock=50)
    orders.build_order(db, [item(mug.id, "Mug", "8.00", 3)], shipping())
    mug.price = Decimal("99.00")
    db.commit()

    assert stats.seller_statistics(db, 5)["total_revenue"] == Decimal("24.00")


def test_deleted_product_sales_stay_with_original_seller(db, make_product):
    lamp = make_product("Lamp", "30.00", seller_id=5)
    orders.build_order(db, [item(lamp.id, "Lamp", "30.00", 1)], shipping())
    lamp_id = lamp.id
    db.delete(lamp)
    db.commit()

    rug = make_product("Rug", "80.00", seller_id=9)
    assert rug.id != lamp_id

    assert stats.seller_statistics(db, 5)["total_revenue"] == Decimal("30.00")
    assert stats.seller_statistics(db, 5)["total_orders"] == 1
    assert stats.seller_statistics(db, 9)["total_orders"] == 0
    assert stats.seller_statistics(db, 9)["total_revenue"] == Decimal("0")


def test_snapshot_items_belong_to_no_seller(db):
    orders.build_order(db, [item(404, "Gone", "5.00", 1)], shipping())
    assert stats.seller_statistics(db, 5)["total_orders"] == 0


def test_missing_stock_is_not_low_stock(db, make_product):
    make_product("Unknown stock", "1.00", seller_id=5, stock=None)
    make_product("Nine", "1.00", seller_id=5, stock=9)
    make_product("Ten", "1.00", seller_id=5, stock=10)

    assert stats.seller_statistics(db, 5)["low_stock_products"] == 1


def test_seller_without_data(db):
    assert stats.seller_statistics(db, 77) == {
        "total_products": 0,
        "total_orders": 0,
        "total_revenue": Decimal("0"),
        "low_stock_products": 0,
    }


def test_system_statistics(db, make_user):
    make_user("Ann", "ann@example.com", UserRole.ADMIN)
    make_user("Sam", "sam@example.com", UserRole.SELLER)
    make_user("Sue", "sue@example.com", UserRole.SELLER)
    make_user("Uma", "uma@example.com", UserRole.USER)

    assert stats.system_statistics(db) == {
        "total_users": 4,
        "admin_count": 1,
        "seller_count": 2,
        "user_count": 1,
    }
