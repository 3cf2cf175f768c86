from __future__ import annotations

import asyncio

import pytest

from catalog_import.models.distribution import Allocation, DistributionPlan, ProductStock, WarehouseShare
from catalog_import.services.backends import InMemoryBackend
from catalog_import.services.distribution import (
    InvalidPercentageError,
    allocate,
    apply_plan,
    build_plan,
    distribute,
    validate_percentage,
)

SHARES = (WarehouseShare(1, 60, "Paris"), WarehouseShare(2, 40, "Lyon"))


def test_allocate_percentages():
    assert allocate(100, SHARES) == {1: 60, 2: 40}


@pytest.mark.parametrize("stock", [0, None, -5])
def test_allocate_without_stock(stock):
    assert allocate(stock, SHARES) == {}


def test_allocate_is_not_a_partition():
    shares = (WarehouseShare("a", 50), WarehouseShare("b", 50), WarehouseShare("c", 50))
    assert allocate(3, shares) == {"a": 2, "b": 2, "c": 2}


def test_allocate_rounding_boundary():
    shares = (WarehouseShare(1, 50),)
    assert allocate(5, shares, "half_up") == {1: 3}
    assert allocate(5, shares, "half_even") == {1: 2}


def test_allocate_decimal_percentage():
    assert allocate(10, (WarehouseShare(1, 12.5),)) == {1: 1}
    assert allocate(20, (WarehouseShare(1, 12.5),)) == {1: 3}


def test_allocate_unknown_rounding():
    with pytest.raises(ValueError):
        allocate(10, SHARES, "ceil")


@pytest.mark.parametrize("value,expected", [(0, 0.0), (100, 100.0), ("12,5", 12.5), (" 40 ", 40.0)])
def test_validate_percentage_accepts(value, expected):
    assert validate_percentage(value) == expected


@pytest.mark.parametrize("value", [-1, 100.5, "abc", None, True])
def test_validate_percentage_rejects(value):
    with pytest.raises(InvalidPercentageError):
        validate_percentage(value)


def test_build_plan_skips_products_without_stock():
    plan = build_plan([ProductStock("P1", 10), ProductStock("P2", 0), ProductStock("P3", None)], SHARES)
    assert list(plan) == [Allocation("P1", 1, 6), Allocation("P1", 2, 4)]
    assert len(plan) == 2
    assert plan.total_quantity() == 10


def test_apply_plan_adds_stock():
    backend = InMemoryBackend()
    plan = build_plan([ProductStock("P1", 100)], SHARES)
    report = asyncio.run(apply_plan(plan, backend))
    assert not report.has_failures
    assert len(report.applied) == 2
    assert backend.quantity(1, "P1") == 60
    assert backend.quantity(2, "P1") == 40


def test_applying_same_plan_twice_doubles_stock():
    backend = InMemoryBackend()
    plan = build_plan([ProductStock("P1", 100)], SHARES)
    asyncio.run(apply_plan(plan, backend))
    asyncio.run(apply_plan(plan, backend))
    assert backend.quantity(1, "P1") == 120
    assert backend.quantity(2, "P1") == 80


def test_failed_allocation_does_not_stop_the_others(caplog):
    backend = InMemoryBackend(fail_pairs={("P1", 2)})
    plan = build_plan([ProductStock("P1", 100), ProductStock("P2", 10)], SHARES)
    report = asyncio.run(apply_plan(plan, backend, concurrency=1))
    assert report.has_failures
    assert [f.allocation for f in report.failures] == [Allocation("P1", 2, 40)]
    assert "rejected" in report.failures[0].message
    assert len(report.applied) == 3
    assert backend.calls == 4
    assert backend.quantity(2, "P1") == 0
    assert backend.quantity(1, "P2") == 6
    assert "failed to add stock for product P1 to warehouse 2" in caplog.text


def test_apply_empty_plan():
    backend = InMemoryBackend()
    report = asyncio.run(apply_plan(DistributionPlan(), backend))
    assert report.applied == ()
    assert backend.calls == 0


def test_distribute_sync_entrypoint():
    backend = InMemoryBackend()
    plan, report = distribute([ProductStock(7, 5)], (WarehouseShare(1, 50),), backend, rounding="half_even")
    assert list(plan) == [Allocation(7, 1, 2)]
    assert report.applied == (Allocation(7, 1, 2),)
    assert backend.quantity(1, 7) == 2
