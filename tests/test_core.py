"""
Unit tests for the derivation functions behind the dashboard and list views
"""

import copy
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from app.core.aggregation import count_orders_per_client, orders_for_client
from app.core.dashboard import summarize
from app.core.filters import apply_filters, filter_exact, search, ALL_STATUSES
from app.core.lookup import enrich_with_client_names, resolve_client_name
from app.core.totals import balance_due, calculate_total, display_total
from app.schemas.client import Client
from app.schemas.order import Order, OrderItem

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

def make_client(client_id, company_name):
    return Client(id=client_id, company_name=company_name, contact_name=f"Contact {client_id}")

def make_order(order_id, client_id=1, status="New", order_date=None, total_amount=None, items=None):
    return Order(
        id=order_id,
        client_id=client_id,
        order_number=f"ORD-{order_id}",
        status=status,
        order_date=order_date,
        total_amount=total_amount,
        order_items=items or [],
    )

@pytest.fixture
def clients():
    return [make_client(1, "Acme Co"), make_client(2, "Zenith Ltd"), make_client(3, "Globex")]

class TestCountOrdersPerClient:
    """Test cases for per-client order counts"""

    def test_counts_and_zero_entries(self, clients):
        """Every client appears, even without orders"""
        orders = [make_order(1, 1), make_order(2, 1), make_order(3, 2)]
        assert count_orders_per_client(clients, orders) == {1: 2, 2: 1, 3: 0}

    def test_numeric_string_client_ids_are_normalized(self, clients):
        """Order client ids sent as strings still count"""
        orders = [{"client_id": "1"}, SimpleNamespace(client_id="2"), {"client_id": "abc"}, {}]
        assert count_orders_per_client(clients, orders) == {1: 1, 2: 1, 3: 0}

    def test_empty_orders_yield_all_zero(self, clients):
        assert count_orders_per_client(clients, []) == {1: 0, 2: 0, 3: 0}

    def test_sum_of_counts_matches_orders_of_known_clients(self, clients):
        """Orders of unknown clients are not counted anywhere"""
        orders = [make_order(1, 1), make_order(2, 99), make_order(3, 3), make_order(4, 3)]
        counts = count_orders_per_client(clients, orders)
        known_ids = {c.id for c in clients}
        assert sum(counts.values()) == len([o for o in orders if o.client_id in known_ids])

    def test_orders_for_client_refilters(self):
        """Only the client's own orders survive, in their original order"""
        orders = [make_order(1, 2), make_order(2, 1), make_order(3, 2)]
        assert [o.id for o in orders_for_client("2", orders)] == [1, 3]
        assert orders_for_client(None, orders) == []

    def test_counting_is_stable_and_leaves_inputs_alone(self, clients):
        orders = [make_order(1, 1), {"client_id": "2"}, make_order(3, 99), SimpleNamespace(client_id="1")]
        clients_before = copy.deepcopy(clients)
        orders_before = copy.deepcopy(orders)

        first = count_orders_per_client(clients, orders)
        second = count_orders_per_client(clients, orders)

        assert first == second == {1: 2, 2: 1, 3: 0}
        assert clients == clients_before
        assert orders == orders_before

    def test_refilter_is_stable_and_leaves_inputs_alone(self):
        orders = [make_order(1, 2), {"client_id": "1"}, make_order(3, 2)]
        before = copy.deepcopy(orders)

        first = orders_for_client(2, orders)
        second = orders_for_client(2, orders)

        assert first == second
        assert first is not orders
        assert orders == before

class TestSummarize:
    """Test cases for the dashboard summary"""

    def test_empty_input(self):
        summary = summarize([], [], NOW)
        assert summary.total_clients == 0
        assert summary.active_orders == 0
        assert summary.current_month_orders == 0
        assert summary.current_month_revenue == 0
        assert summary.recent_orders == []

    def test_active_orders(self, clients):
        """Only New and InProgress are active"""
        orders = [make_order(i, status=s) for i, s in
                  enumerate(["New", "Completed", "InProgress", "Cancelled"], start=1)]
        assert summarize(clients, orders, NOW).active_orders == 2

    def test_status_match_is_case_sensitive(self, clients):
        orders = [make_order(1, status="new"), make_order(2, status="inprogress")]
        assert summarize(clients, orders, NOW).active_orders == 0

    def test_current_month_counts_and_revenue(self, clients):
        """Same calendar month and year as now; missing totals add nothing"""
        orders = [
            make_order(1, order_date=datetime(2026, 10, 1, tzinfo=timezone.utc), total_amount=100),
            make_order(2, order_date=datetime(2025, 10, 31, tzinfo=timezone.utc), total_amount=50),
            make_order(3, order_date=datetime(2026, 9, 30, 23, tzinfo=timezone.utc), total_amount=70),
            make_order(4, order_date=datetime(2026, 10, 15, tzinfo=timezone.utc), total_amount=30),
            make_order(5, order_date=datetime(2026, 10, 16, tzinfo=timezone.utc)),
            make_order(6),
        ]
        summary = summarize(clients, orders, NOW)
        assert summary.current_month_orders == 3
        assert summary.current_month_revenue == 130

    def test_month_is_taken_in_the_timezone_of_now(self, clients):
        """An order at 02:00 UTC on Nov 1st is still October five hours west"""
        eastern = timezone(timedelta(hours=-5))
        now = datetime(2026, 10, 19, 12, 0, tzinfo=eastern)
        orders = [make_order(1, order_date=datetime(2026, 11, 1, 2, 0, tzinfo=timezone.utc), total_amount=10)]
        assert summarize(clients, orders, now).current_month_orders == 1

    def test_recent_orders_keep_input_order_and_limit(self, clients):
        orders = [make_order(i, client_id=1) for i in range(12, 0, -1)]
        recent = summarize(clients, orders, NOW).recent_orders
        assert [o.id for o in recent] == list(range(12, 2, -1))
        assert all(o.client_name == "Acme Co" for o in recent)

    def test_recent_orders_use_injected_resolver(self, clients):
        """Resolver results win over the snapshot; unresolved names become Unknown"""
        orders = [make_order(1, client_id=1), make_order(2, client_id=2)]
        names = {1: "Acme (fetched)"}
        recent = summarize(clients, orders, NOW, resolve_client_name=names.get).recent_orders
        assert [o.client_name for o in recent] == ["Acme (fetched)", "Unknown"]

    def test_unknown_client_without_resolver(self, clients):
        recent = summarize(clients, [make_order(1, client_id=42)], NOW).recent_orders
        assert recent[0].client_name == "Unknown"

    def test_inputs_are_not_mutated_and_result_is_stable(self, clients):
        orders = [make_order(1, order_date=NOW, total_amount=5,
                             items=[OrderItem(quantity=1, unit_price=5)])]
        clients_before = copy.deepcopy(clients)
        orders_before = copy.deepcopy(orders)

        first = summarize(clients, orders, NOW)
        second = summarize(clients, orders, NOW)

        assert first == second
        assert clients == clients_before
        assert orders == orders_before

class TestCalculateTotal:
    """Test cases for order totals"""

    def test_empty(self):
        assert calculate_total([]) == 0

    def test_single_item(self):
        assert calculate_total([OrderItem(quantity=3, unit_price=2.5)]) == 7.5

    def test_zero_quantity_contributes_nothing(self):
        items = [OrderItem(quantity=0, unit_price=5), OrderItem(quantity=2, unit_price=3)]
        assert calculate_total(items) == 6

    def test_missing_values_count_as_zero(self):
        items = [OrderItem(quantity=None, unit_price=5), OrderItem(quantity=2), {"quantity": 1, "unit_price": 4}]
        assert calculate_total(items) == 4

    def test_non_positive_values_are_not_counted(self):
        items = [OrderItem(quantity=-1, unit_price=5), OrderItem(quantity=2, unit_price=-3),
                 OrderItem(quantity=1, unit_price=1)]
        assert calculate_total(items) == 1

    def test_does_not_mutate_items(self):
        items = [OrderItem(quantity=2, unit_price=3)]
        before = copy.deepcopy(items)
        calculate_total(items)
        assert items == before

    def test_display_total_prefers_line_items(self):
        """Persisted totals are only trusted when no items came back"""
        with_items = make_order(1, total_amount=999, items=[OrderItem(quantity=2, unit_price=10)])
        without_items = make_order(2, total_amount=40)
        missing_total = make_order(3)
        assert display_total(with_items) == 20
        assert display_total(without_items) == 40
        assert display_total(missing_total) == 0

    def test_balance_due(self):
        order = make_order(1, total_amount=100)
        order.amount_paid = 30
        assert balance_due(order) == 70
        order.amount_paid = None
        assert balance_due(order) == 100

class TestCollectionFilter:
    """Test cases for client-side search and filtering"""

    def test_empty_query_returns_everything(self):
        items = [{"name": "Acme Co"}, {"name": "Zenith"}]
        assert search(items, "", ["name"]) == items
        assert search(items, "   ", ["name"]) == items
        assert search(items, None, ["name"]) == items

    def test_case_insensitive_substring(self):
        items = [{"name": "Acme Co"}, {"name": "Zenith"}]
        assert search(items, "acme", ["name"]) == [{"name": "Acme Co"}]
        assert search(items, "NIT", ["name"]) == [{"name": "Zenith"}]

    def test_any_named_field_matches(self):
        rows = [{"company": "Acme", "email": None}, {"company": "Other", "email": "x@acme.test"}, {"company": "Z"}]
        assert search(rows, "acme", ["company", "email"]) == rows[:2]

    def test_missing_fields_do_not_raise(self):
        items = [{}, {"name": None}, SimpleNamespace(), SimpleNamespace(name="match")]
        assert search(items, "match", ["name"]) == [items[3]]

    def test_exact_filter_and_sentinel(self):
        orders = [make_order(1, status="New"), make_order(2, status="Completed")]
        assert filter_exact(orders, "status", ALL_STATUSES, ALL_STATUSES) == orders
        assert [o.id for o in filter_exact(orders, "status", "Completed", ALL_STATUSES)] == [2]
        assert filter_exact(orders, "status", "completed", ALL_STATUSES) == []

    def test_search_and_exact_filter_compose_with_and(self):
        rows = [
            {"order_number": "ORD-1", "status": "New"},
            {"order_number": "ORD-2", "status": "Completed"},
            {"order_number": "XYZ-3", "status": "New"},
        ]
        result = apply_filters(rows, "ord", ["order_number"], field="status",
                               selector="New", all_value=ALL_STATUSES)
        assert result == [rows[0]]

    def test_input_is_not_mutated(self):
        items = [{"name": "Acme Co"}, {"name": "Zenith"}]
        before = copy.deepcopy(items)
        search(items, "acme", ["name"])
        apply_filters(items, "z", ["name"], field="name", selector="Zenith")
        assert items == before

class TestClientLookup:
    """Test cases for client name resolution"""

    def test_known_client(self, clients):
        assert resolve_client_name(2, clients) == "Zenith Ltd"
        assert resolve_client_name("2", clients) == "Zenith Ltd"

    def test_unknown_client(self, clients):
        assert resolve_client_name(999, clients) == "Unknown Client"
        assert resolve_client_name(None, clients) == "Unknown Client"
        assert resolve_client_name(1, []) == "Unknown Client"

    def test_lookup_is_stable_and_leaves_clients_alone(self, clients):
        before = copy.deepcopy(clients)
        names = [resolve_client_name(client_id, clients) for client_id in (1, "3", 42, 1)]
        assert names == ["Acme Co", "Globex", "Unknown Client", "Acme Co"]
        assert clients == before

    def test_enriched_rows_carry_display_totals(self, clients):
        orders = [make_order(1, client_id=1, total_amount=99, items=[OrderItem(quantity=2, unit_price=10)]),
                  make_order(2, client_id=2, total_amount=40)]
        rows = enrich_with_client_names(orders, clients)
        assert [r.display_total for r in rows] == [20, 40]
        assert [r.total_amount for r in rows] == [99, 40]

    def test_enrich_orders_with_client_names(self, clients):
        orders = [make_order(1, client_id=1), make_order(2, client_id=7)]
        rows = enrich_with_client_names(orders, clients)
        assert [(r.id, r.client_name) for r in rows] == [(1, "Acme Co"), (2, "Unknown Client")]
        assert not hasattr(orders[0], "client_name")
