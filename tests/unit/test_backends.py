from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from catalog_import.models.catalog import Product, Variant
from catalog_import.models.distribution import Allocation
from catalog_import.services.backends import BackendError, InMemoryBackend, JsonFileBackend, product_payload


def _simple() -> Product:
    return Product(
        designation="Produit Simple",
        code="PROD001",
        category_name="Epicerie",
        brand="Marque",
        description="",
        cost_price=10.0,
        price_excl_tax=15.0,
        tax_rate=20.0,
        price_incl_tax=18.0,
        sellable=True,
        has_variants=False,
        stock=100,
        row_number=2,
    )


def _with_variants() -> Product:
    variant = Variant("Couleur:Rouge", {"couleur": "Rouge"}, 1.0, 19.0, 5, True, 3, "rouge.jpg")
    return Product(
        designation="Produit avec Variantes",
        code="PROD002",
        category_name="Epicerie",
        brand="",
        description="",
        cost_price=0.0,
        price_excl_tax=15.0,
        tax_rate=20.0,
        price_incl_tax=18.0,
        sellable=True,
        has_variants=True,
        stock=None,
        row_number=3,
        variants=(variant,),
    )


def test_product_payload_simple():
    data = product_payload(_simple())
    assert data["prixHT"] == 15.0
    assert data["taxe"] == 20.0
    assert data["prixTTC"] == 18.0
    assert data["stock"] == 100
    assert data["variants"] == []


def test_product_payload_variants():
    data = product_payload(_with_variants())
    assert "stock" not in data
    assert data["has_variants"] is True
    assert data["variants"] == [
        {
            "combination_name": "Couleur:Rouge",
            "price_impact": 1.0,
            "price": 19.0,
            "stock": 5,
            "default_variant": True,
            "attributes": {"couleur": "Rouge"},
            "image": "rouge.jpg",
        }
    ]


def test_json_file_backend_writes_batch(tmp_path: Path):
    backend = JsonFileBackend(tmp_path / "out")
    backend.submit_products([_simple(), _with_variants()])
    assert backend.last_batch_path is not None
    assert backend.last_batch_path.name.startswith("products-")
    data = json.loads(backend.last_batch_path.read_text(encoding="utf-8"))
    assert [p["code"] for p in data["products"]] == ["PROD001", "PROD002"]


def test_json_file_backend_flushes_allocations(tmp_path: Path):
    backend = JsonFileBackend(tmp_path)
    asyncio.run(backend.apply_stock(Allocation("P1", 1, 60)))
    asyncio.run(backend.apply_stock(Allocation("P1", 2, 40)))
    fp = backend.flush()
    lines = [json.loads(x) for x in fp.read_text(encoding="utf-8").splitlines()]
    assert lines == [
        {"product_id": "P1", "warehouse_id": 1, "quantity": 60},
        {"product_id": "P1", "warehouse_id": 2, "quantity": 40},
    ]
    # buffer is cleared after flush
    backend.flush()
    assert len(fp.read_text(encoding="utf-8").splitlines()) == 2


def test_in_memory_backend_is_additive():
    backend = InMemoryBackend()
    asyncio.run(backend.apply_stock(Allocation("P1", 1, 3)))
    asyncio.run(backend.apply_stock(Allocation("P1", 1, 4)))
    assert backend.quantity(1, "P1") == 7
    assert backend.quantity(2, "P1") == 0


def test_in_memory_backend_failure():
    backend = InMemoryBackend(fail_pairs={("P1", 1)})
    with pytest.raises(BackendError):
        asyncio.run(backend.apply_stock(Allocation("P1", 1, 3)))
    assert backend.calls == 1


def test_in_memory_backend_records_batches():
    backend = InMemoryBackend()
    backend.submit_products([_simple()])
    assert backend.batches == [(_simple(),)]
