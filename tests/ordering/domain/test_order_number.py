import re
from datetime import UTC, datetime

from ordering.order.numbering import generate_order_number

ORDER_NUMBER = re.compile(r"^ORD-\d{14}-[0-9A-F]{8}$")


class TestOrderNumber:
    def test_format(self):
        assert ORDER_NUMBER.match(generate_order_number())

    def test_timestamp_is_utc_clock(self):
        number = generate_order_number(now=lambda: datetime(2024, 5, 17, 9, 3, 7, tzinfo=UTC))
        assert number.startswith("ORD-20240517090307-")

    def test_same_tick_does_not_collide(self):
        frozen = datetime(2024, 5, 17, 9, 3, 7, tzinfo=UTC)
        numbers = {generate_order_number(now=lambda: frozen) for _ in range(500)}
        assert len(numbers) == 500
