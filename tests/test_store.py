"""
Tests for the JSON data store and the repository accessors over it.
"""

import json
import os
import stat
from datetime import date
from decimal import Decimal

import pytest

from app.errors import StorageError
from app.models import Customer, Product, Sale, StoreDocument
from app.repository import Repository
from app.store import DataStore, next_id


def make_doc() -> StoreDocument:
    return StoreDocument(
        customers=[
            Customer(id=1, name="Alice", email="alice@example.com"),
            Customer(id=4, name="Dora", email="Dora@example.com"),
        ],
        products=[Product(id=1, name="Widget", price=Decimal("19.99"), category="Tools")],
        sales=[
            Sale(id=1, customer_id=1, product_id=1, quantity=2,
                 sale_date=date(2026, 1, 31), total_amount=Decimal("39.98")),
            Sale(id=7, customer_id=4, product_id=1, quantity=1,
                 sale_date=date(2026, 2, 1), total_amount=Decimal("19.99")),
        ],
    )


class TestDataStore:
    def test_missing_file_is_empty_document(self, tmp_path):
        doc = DataStore(tmp_path / "nope.json").load()
        assert doc.customers == [] and doc.products == [] and doc.sales == []

    def test_save_writes_camel_case_layout(self, tmp_path):
        store = DataStore(tmp_path / "nested" / "data.json")
        store.save(make_doc())

        raw = json.loads(store.path.read_text(encoding="utf-8"))
        assert set(raw) == {"customers", "products", "sales"}
        assert raw["sales"][0] == {
            "id": 1,
            "customerId": 1,
            "productId": 1,
            "quantity": 2,
            "saleDate": "2026-01-31",
            "totalAmount": "39.98",
        }

    def test_load_returns_independent_copies(self, tmp_path):
        store = DataStore(tmp_path / "data.json")
        store.save(make_doc())

        first = store.load()
        first.sales.clear()
        assert len(store.load().sales) == 2

    def test_load_accepts_numeric_amounts(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({
            "customers": [{"id": 1, "name": "Alice", "email": "a@example.com"}],
            "products": [{"id": 1, "name": "Widget", "price": 100, "category": "Tools"}],
            "sales": [{"id": 1, "customerId": 1, "productId": 1, "quantity": 2,
                       "saleDate": "2026-01-05", "totalAmount": 200}],
        }), encoding="utf-8")

        doc = DataStore(path).load()
        assert doc.sales[0].total_amount == Decimal("200")
        assert doc.sales[0].sale_date == date(2026, 1, 5)

    def test_corrupted_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "data.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="Failed to load data"):
            DataStore(path).load()

    def test_unreadable_path_raises_storage_error(self, tmp_path):
        # a directory where the file should be
        with pytest.raises(StorageError):
            DataStore(tmp_path).load()

    def test_no_temp_files_left_behind(self, tmp_path):
        store = DataStore(tmp_path / "data.json")
        store.save(make_doc())
        store.save(make_doc())
        assert [p.name for p in tmp_path.iterdir()] == ["data.json"]

    def test_save_keeps_existing_file_mode(self, tmp_path):
        store = DataStore(tmp_path / "data.json")
        store.save(make_doc())
        os.chmod(store.path, 0o640)

        store.save(make_doc())
        assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o640

    def test_new_file_follows_umask(self, tmp_path):
        old = os.umask(0o022)
        try:
            store = DataStore(tmp_path / "data.json")
            store.save(make_doc())
        finally:
            os.umask(old)
        assert stat.S_IMODE(os.stat(store.path).st_mode) == 0o644


class TestNextId:
    def test_empty_collection_starts_at_one(self):
        assert next_id([]) == 1

    def test_gaps_are_not_reused(self):
        assert next_id(make_doc().sales) == 8


class TestRepository:
    def test_lookups_by_id(self):
        repo = Repository(make_doc())
        assert repo.customer_by_id(4).name == "Dora"
        assert repo.customer_by_id(2) is None
        assert repo.product_by_id(1).price == Decimal("19.99")
        assert repo.product_by_id(99) is None

    def test_email_lookup_is_exact(self):
        repo = Repository(make_doc())
        assert repo.customer_by_email("Dora@example.com").id == 4
        assert repo.customer_by_email("dora@example.com") is None

    def test_lists_are_snapshots(self):
        doc = make_doc()
        repo = Repository(doc)
        customers = repo.list_customers()
        customers[0].name = "Mallory"
        customers.pop()
        assert doc.customers[0].name == "Alice"
        assert len(repo.list_customers()) == 2
        assert [s.id for s in repo.list_sales()] == [1, 7]
        assert len(repo.list_products()) == 1

    def test_sales_in_period(self):
        repo = Repository(make_doc())
        assert [s.id for s in repo.sales_in_period(2026, 1)] == [1]
        assert [s.id for s in repo.sales_in_period(2026, 2)] == [7]
        assert repo.sales_in_period(2025, 1) == []
        assert repo.sales_in_period(2026, 13) == []

    def test_from_store(self, tmp_path):
        store = DataStore(tmp_path / "data.json")
        store.save(make_doc())
        assert Repository.from_store(store).customer_by_id(1).email == "alice@example.com"
