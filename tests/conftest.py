from datetime import datetime, timezone

import pytest
from loguru import logger

from shoprec.entities import Order, OrderItem
from shoprec.http import close_shared_clients
from shoprec.recommend import reset_selector


def _order(order_id: int, user_id: int, day: int) -> Order:
    return Order(id=order_id, user_id=user_id, time=datetime(2024, 1, day, tzinfo=timezone.utc))


def cart(*product_ids: int) -> list[OrderItem]:
    return [
        OrderItem(id=1000 + index, product_id=pid, order_id=0, quantity=1)
        for index, pid in enumerate(product_ids)
    ]


@pytest.fixture
def orders() -> list[Order]:
    return [
        _order(1, user_id=1, day=1),
        _order(2, user_id=1, day=2),
        _order(3, user_id=2, day=3),
        _order(4, user_id=3, day=4),
        _order(5, user_id=2, day=5),
    ]


@pytest.fixture
def order_items() -> list[OrderItem]:
    # Quantity per product: 1 -> 4, 3 -> 3, 2 -> 2, 4 -> 1
    rows = [
        (1, 1, 1, 2),
        (2, 1, 2, 1),
        (3, 2, 3, 1),
        (4, 3, 1, 1),
        (5, 3, 3, 2),
        (6, 4, 2, 1),
        (7, 4, 4, 1),
        (8, 5, 1, 1),
    ]
    return [
        OrderItem(id=item_id, order_id=order_id, product_id=product_id, quantity=quantity)
        for item_id, order_id, product_id, quantity in rows
    ]


@pytest.fixture
def log_records():
    """Collect (level, message) pairs emitted through loguru."""
    records: list[tuple[str, str]] = []

    def sink(message):
        record = message.record
        records.append((record["level"].name, record["message"]))

    handler_id = logger.add(sink, level="TRACE")
    yield records
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def _isolate_process_state():
    reset_selector()
    close_shared_clients()
    yield
    reset_selector()
    close_shared_clients()
