"""Dashboard aggregation and stored-price verification."""
from datetime import date

import pytest

from led_quote.engine import CabinetGrid, DisplayRequest, PricingEngine
from led_quote.services.dashboard_service import DashboardService

DAY = date(2026, 10, 17)


@pytest.fixture
def populated(engine, service):
    scenario = DisplayRequest(1200, 337.5, "endUser", controller="TB2", product_id="rigel-cob-p1.5")
    rental = DisplayRequest(1000, 500, "reseller", cabinet_grid=CabinetGrid(2, 1), product_id="rental-indoor-p2.6")

    service.save(engine.calculate(scenario), scenario, "Priya", {"name": "A"}, today=DAY)
    closed = service.save(engine.calculate(rental), rental, "Rahul", {"name": "B"}, today=DAY)
    service.update_status(closed.quotation_id, "closed")
    return service


def test_total_value_sums_stored_grand_totals(populated):
    dashboard = DashboardService(populated.list_quotations())
    assert dashboard.total_value() == 193251 + 73030
    assert dashboard.total_value(status="closed") == 73030
    assert dashboard.total_value(status="contacted") == 0


def test_summary_by_status(populated):
    summary = {row["status"]: row for row in DashboardService(populated.list_quotations()).summary_by_status()}
    assert summary["new"]["count"] == 1
    assert summary["new"]["total_value"] == 193251
    assert summary["closed"]["total_value"] == 73030


def test_summary_by_sales_person(populated):
    summary = DashboardService(populated.list_quotations()).summary_by_sales_person()
    assert {row["sales_person"] for row in summary} == {"Priya", "Rahul"}


def test_empty_dashboard():
    dashboard = DashboardService([])
    assert dashboard.total_value() == 0
    assert dashboard.summary_by_status() == []
    assert dashboard.stats()["quotation_count"] == 0


def test_verify_records_matches(engine, populated):
    results = DashboardService(populated.list_quotations()).verify_records(engine)
    assert len(results) == 2
    assert all(r["is_valid"] for r in results)


def test_verify_records_reports_drift(populated, small_catalog):
    # The small catalog has neither stored product
    results = DashboardService(populated.list_quotations()).verify_records(PricingEngine(small_catalog))
    assert not any(r["is_valid"] for r in results)
    assert all(r["calculated"] is None for r in results)
