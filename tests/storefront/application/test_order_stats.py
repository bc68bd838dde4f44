from protean import current_domain

from storefront.order.order import Order
from storefront.order.stats import customer_stats, stats_summary


def _orders(service, place_order, make_product, variation_entry, size_entry):
    product = make_product(variations=[variation_entry(sizes=[size_entry(price=100.0, stock=50)])])
    pending = place_order(product, quantity=1)
    shipped = place_order(product, quantity=2)
    completed = place_order(product, quantity=3, email="bo@example.com")
    service.update_status(shipped.id, "Shipped")
    service.update_status(completed.id, "Shipped")
    service.update_status(completed.id, "Completed")
    return pending, shipped, completed


class TestStatsSummary:
    def test_counts_and_revenue(self, service, place_order, make_product, variation_entry, size_entry):
        _orders(service, place_order, make_product, variation_entry, size_entry)

        stats = stats_summary()

        assert stats.total_orders == 3
        assert stats.pending_orders == 1
        assert stats.shipped_orders == 1
        assert stats.completed_orders == 1
        assert stats.total_revenue == 200.0 + 300.0

    def test_empty_ledger(self):
        stats = stats_summary()
        assert stats.total_orders == 0
        assert stats.total_revenue == 0

    def test_filtered_by_email(self, service, place_order, make_product, variation_entry, size_entry):
        _orders(service, place_order, make_product, variation_entry, size_entry)

        stats = stats_summary(email="BO@example.com")

        assert stats.total_orders == 1
        assert stats.completed_orders == 1
        assert stats.total_revenue == 300.0


class TestCustomerStats:
    def test_spending_includes_shipping_and_every_status(self, service, place_order, make_product, variation_entry, size_entry):
        pending, shipped, _ = _orders(service, place_order, make_product, variation_entry, size_entry)

        stats = customer_stats("jane@example.com")

        assert stats.total_orders == 2
        assert stats.pending_orders == 1
        assert stats.shipped_orders == 1
        assert stats.total_spent == pending.grand_total + shipped.grand_total
        assert {o.id for o in stats.recent_orders} == {pending.id, shipped.id}


class TestLedgerPaging:
    def test_pages_newest_first(self, place_order, make_product, variation_entry, size_entry):
        product = make_product(variations=[variation_entry(sizes=[size_entry(stock=50)])])
        placed = [place_order(product) for _ in range(5)]

        ledger = current_domain.repository_for(Order)
        first = ledger.page(page=1, limit=2)
        last = ledger.page(page=3, limit=2)

        assert first.total == 5
        assert first.total_pages == 3
        assert [o.id for o in first.items] == [placed[4].id, placed[3].id]
        assert [o.id for o in last.items] == [placed[0].id]

    def test_filters_by_status_and_email(self, service, place_order, make_product, variation_entry, size_entry):
        _orders(service, place_order, make_product, variation_entry, size_entry)
        ledger = current_domain.repository_for(Order)

        assert ledger.page(status="Shipped").total == 1
        assert ledger.page(email=" JANE@example.com").total == 2
        assert ledger.page(status="Completed", email="jane@example.com").total == 0

    def test_find_by_idempotency_key(self, service, make_product, line_for, customer, us_rate):
        order = service.create_order([line_for(make_product(), 1)], customer, "us", idempotency_key="k-1")

        ledger = current_domain.repository_for(Order)
        assert ledger.find_by_idempotency_key("k-1").id == order.id
        assert ledger.find_by_idempotency_key("k-2") is None
