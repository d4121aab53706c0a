import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from shoprec.data_sources import load_training_data, parse_training_data
from shoprec.entities import Order, OrderItem, order_items_frame, orders_frame


def test_entities_accept_wire_and_python_names():
    wire = OrderItem.model_validate({"id": 1, "productId": 7, "orderId": 3, "quantity": 2})
    python = OrderItem(id=1, product_id=7, order_id=3, quantity=2)

    assert wire == python


def test_entities_are_read_only():
    item = OrderItem(id=1, product_id=7, order_id=3)
    with pytest.raises(ValidationError):
        item.quantity = 5


def test_frames_have_expected_columns(order_items, orders):
    assert order_items_frame(order_items).columns == ["id", "order_id", "product_id", "quantity"]
    assert orders_frame(orders).columns == ["order_id", "user_id"]
    assert order_items_frame([]).height == 0


def test_load_training_data(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps(
            {
                "orders": [{"id": 1, "userId": 2, "time": "2024-05-01T12:00:00+00:00"}],
                "orderItems": [{"id": 9, "productId": 4, "orderId": 1, "quantity": 3}],
            }
        ),
        encoding="utf-8",
    )

    order_items, orders = load_training_data(path)

    assert orders == [Order(id=1, user_id=2, time=datetime(2024, 5, 1, 12, tzinfo=timezone.utc))]
    assert order_items[0].quantity == 3


def test_load_training_data_rejects_bad_root(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[]", encoding="utf-8")

    with pytest.raises(ValueError):
        load_training_data(path)


def test_parse_training_data_tolerates_missing_lists():
    assert parse_training_data(None, None) == ([], [])
