from typing import Optional

from app.models import Customer, Product, Sale, StoreDocument
from app.store import DataStore


class Repository:
    """Read accessors over one loaded ``StoreDocument``."""

    def __init__(self, doc: StoreDocument) -> None:
        self.doc = doc

    @classmethod
    def from_store(cls, store: DataStore) -> "Repository":
        return cls(store.load())

    # ── snapshots ─────────────────────────────────────────────────────────────

    def list_customers(self) -> list[Customer]:
        return [c.model_copy() for c in self.doc.customers]

    def list_products(self) -> list[Product]:
        return [p.model_copy() for p in self.doc.products]

    def list_sales(self) -> list[Sale]:
        return [s.model_copy() for s in self.doc.sales]

    # ── lookups ───────────────────────────────────────────────────────────────

    def customer_by_id(self, customer_id: int) -> Optional[Customer]:
        return next((c for c in self.doc.customers if c.id == customer_id), None)

    def product_by_id(self, product_id: int) -> Optional[Product]:
        return next((p for p in self.doc.products if p.id == product_id), None)

    def customer_by_email(self, email: str) -> Optional[Customer]:
        # exact, case-sensitive match
        return next((c for c in self.doc.customers if c.email == email), None)

    def sales_in_period(self, year: int, month: int) -> list[Sale]:
        return [
            s for s in self.list_sales()
            if s.sale_date.year == year and s.sale_date.month == month
        ]
