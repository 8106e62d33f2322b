"""
Deterministic demo-data generator.

Produces:
  - 5 customers
  - 5 products in two categories
  - 40 sales spread over January to March 2026, totals computed from price
"""

import logging
import random
from datetime import date, timedelta
from decimal import Decimal

from app.models import Customer, Product, Sale, StoreDocument
from app.store import DataStore

logger = logging.getLogger(__name__)

SEED = 42
START = date(2026, 1, 1)
END   = date(2026, 3, 31)
SALES_COUNT = 40


def build_document() -> StoreDocument:
    rng = random.Random(SEED)

    # ── customers ────────────────────────────────────────────────────────────
    customers = [
        Customer(id=1, name="Ayu Lestari",    email="ayu.lestari@example.com"),
        Customer(id=2, name="Budi Santoso",   email="budi.santoso@example.com"),
        Customer(id=3, name="Citra Wulandari", email="citra.w@example.com"),
        Customer(id=4, name="Dewi Anggraini", email="dewi.a@example.com"),
        Customer(id=5, name="Eko Prasetyo",   email="eko.prasetyo@example.com"),
    ]

    # ── products ─────────────────────────────────────────────────────────────
    products = [
        Product(id=1, name="Desk Lamp",        price=Decimal("24.90"),  category="Home"),
        Product(id=2, name="Ceramic Mug",      price=Decimal("8.50"),   category="Home"),
        Product(id=3, name="USB-C Cable",      price=Decimal("12.00"),  category="Electronics"),
        Product(id=4, name="Wireless Mouse",   price=Decimal("29.99"),  category="Electronics"),
        Product(id=5, name="Noise Headphones", price=Decimal("149.00"), category="Electronics"),
    ]

    # ── sales ────────────────────────────────────────────────────────────────
    span_days = (END - START).days
    sales = []
    for sale_id in range(1, SALES_COUNT + 1):
        customer = rng.choice(customers)
        product  = rng.choice(products)
        quantity = rng.randint(1, 5)
        sales.append(Sale(
            id=sale_id,
            customer_id=customer.id,
            product_id=product.id,
            quantity=quantity,
            sale_date=START + timedelta(days=rng.randint(0, span_days)),
            total_amount=product.price * quantity,
        ))

    return StoreDocument(customers=customers, products=products, sales=sales)


def seed(store: DataStore) -> bool:
    """Write the demo document if the store is empty. Returns True if seeded."""
    current = store.load()
    if current.customers or current.products or current.sales:
        logger.info("Store at %s already holds data, skipping seed", store.path)
        return False

    doc = build_document()
    store.save(doc)
    logger.info(
        "Seeded %d customers, %d products, %d sales into %s",
        len(doc.customers), len(doc.products), len(doc.sales), store.path,
    )
    return True
