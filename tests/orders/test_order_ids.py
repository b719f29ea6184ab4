"""Tests for order id generation and order summaries."""

from datetime import datetime, timedelta

import pytest
from conftest import FakeClock
from pydantic import ValidationError

from orders import OrderIdGenerator, Preorder, WholesaleOrder
from orders.ids import ORDERS_KEY


@pytest.fixture
def order_clock():
    return FakeClock(datetime(2026, 10, 18, 7, 45))


@pytest.fixture
def generator(doc_store, order_clock):
    return OrderIdGenerator(doc_store, order_clock)


class TestOrderIdGenerator:
    def test_sequence_per_kind(self, generator):
        assert generator.next_id("preorder") == "PRE-1018-001"
        assert generator.next_id("preorder") == "PRE-1018-002"
        assert generator.next_id("wholesale") == "WHO-1018-001"

    def test_survives_restart(self, generator, doc_store, order_clock):
        generator.next_id("preorder")
        restarted = OrderIdGenerator(doc_store, order_clock)
        assert restarted.next_id("preorder") == "PRE-1018-002"

    def test_resets_next_day(self, generator, order_clock, doc_store):
        generator.next_id("preorder")
        generator.next_id("wholesale")
        order_clock.now += timedelta(days=1)
        assert generator.next_id("wholesale") == "WHO-1019-001"
        assert doc_store.load(ORDERS_KEY) == {"day": "2026-10-19", "counters": {"wholesale": 2}}

    def test_unknown_kind(self, generator):
        with pytest.raises(ValueError, match="Unknown order kind"):
            generator.next_id("catering")

    def test_corrupt_state_starts_fresh(self, generator, doc_store):
        doc_store.save(ORDERS_KEY, {"day": "not a date"})
        assert generator.next_id("preorder") == "PRE-1018-001"


class TestPreorder:
    def test_describe(self):
        order = Preorder(customer="Dana", items="2x croissant", paid="paid", pickup="Sat 9am")
        text = order.describe("PRE-1018-001")
        assert text.splitlines()[:4] == [
            "Order ID: PRE-1018-001",
            "Customer: Dana",
            "Pickup: Sat 9am",
            "Payment: paid",
        ]
        assert "Phone" not in text
        assert text.endswith("Items:\n2x croissant")
        assert order.title("PRE-1018-001") == "📦 PRE-ORDER: Dana (PRE-1018-001)"


class TestWholesaleOrder:
    def test_business_upper_cased(self):
        order = WholesaleOrder(business=" corner cafe ", kitchen="TOVA", delivery="Mon", items="bread")
        assert order.business == "CORNER CAFE"
        assert "Kitchen: TOVA" in order.describe("WHO-1018-001")

    def test_both_needs_both_lists(self):
        with pytest.raises(ValidationError):
            WholesaleOrder(business="x", kitchen="BOTH", delivery="Mon", items_tova="bread")

    def test_single_kitchen_needs_items(self):
        with pytest.raises(ValidationError):
            WholesaleOrder(business="x", kitchen="LUMIERE", delivery="Mon")

    def test_both_describe(self):
        order = WholesaleOrder(
            business="x",
            kitchen="BOTH",
            delivery="Mon",
            items_tova="bread",
            items_lumiere="tarts",
            notes="back door",
        )
        text = order.describe("WHO-1018-002")
        assert "TOVA:\nbread\n\nLUMIERE:\ntarts" in text
        assert text.endswith("Notes: back door")
