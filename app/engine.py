import logging
from decimal import Decimal

from app.models import (
    BuyerEntry,
    CustomerPurchases,
    JoinedSale,
    MonthlyReport,
    ProductSales,
    PurchaseEntry,
    ReportSummary,
    Sale,
)
from app.repository import Repository
from app.store import DataStore

logger = logging.getLogger(__name__)

_ZERO = Decimal("0")
_TWO_DP = Decimal("0.01")

UNKNOWN_CUSTOMER = "Unknown Customer"
UNKNOWN_PRODUCT = "Unknown Product"


def join_sales(sales: list[Sale], repo: Repository) -> list[JoinedSale]:
    """Enrich each sale with its customer and product, keeping the input order.

    References that no longer resolve render as placeholders instead of failing.
    """
    rows = []
    for sale in sales:
        customer = repo.customer_by_id(sale.customer_id)
        product = repo.product_by_id(sale.product_id)
        rows.append(JoinedSale(
            sale_id=sale.id,
            sale_date=sale.sale_date.isoformat(),
            quantity=sale.quantity,
            total_amount=sale.total_amount,
            customer_id=sale.customer_id,
            customer_name=customer.name if customer else UNKNOWN_CUSTOMER,
            customer_email=customer.email if customer else "",
            product_id=sale.product_id,
            product_name=product.name if product else UNKNOWN_PRODUCT,
            unit_price=product.price if product else _ZERO,
            product_category=product.category if product else "",
        ))
    return rows


def _group_by_customer(rows: list[JoinedSale]) -> list[CustomerPurchases]:
    # keyed by (id, name): one id stored under two names yields two groups
    groups: dict[tuple[int, str], CustomerPurchases] = {}
    for row in rows:
        key = (row.customer_id, row.customer_name)
        group = groups.get(key)
        if group is None:
            group = groups[key] = CustomerPurchases(
                customer_id=row.customer_id,
                customer_name=row.customer_name,
                customer_email=row.customer_email,
                total_spent=_ZERO,
                total_items=0,
                purchases=[],
            )
        group.total_spent += row.total_amount
        group.total_items += row.quantity
        group.purchases.append(PurchaseEntry(
            product_id=row.product_id,
            product_name=row.product_name,
            quantity=row.quantity,
            unit_price=row.unit_price,
            total_amount=row.total_amount,
            sale_date=row.sale_date,
        ))
    return list(groups.values())


def _group_by_product(rows: list[JoinedSale]) -> list[ProductSales]:
    groups: dict[tuple[int, str], ProductSales] = {}
    for row in rows:
        key = (row.product_id, row.product_name)
        group = groups.get(key)
        if group is None:
            group = groups[key] = ProductSales(
                product_id=row.product_id,
                product_name=row.product_name,
                product_category=row.product_category,
                total_quantity=0,
                total_revenue=_ZERO,
                customers=[],
            )
        group.total_quantity += row.quantity
        group.total_revenue += row.total_amount
        group.customers.append(BuyerEntry(
            customer_id=row.customer_id,
            customer_name=row.customer_name,
            quantity=row.quantity,
            purchase_amount=row.total_amount,
        ))
    return list(groups.values())


def _empty_report(year: int, month: int) -> MonthlyReport:
    return MonthlyReport(
        summary=ReportSummary(
            year=year,
            month=f"{month:02d}",
            total_sales=0,
            total_revenue=_ZERO,
            unique_customers=0,
            unique_products=0,
        ),
        customer_purchases=[],
        product_sales=[],
        detailed_sales=[],
    )


def monthly_report(year: int, month: int, store: DataStore) -> MonthlyReport:
    if not (1900 <= year <= 2100 and 1 <= month <= 12):
        logger.warning("Report requested for out-of-range period %s-%s", year, month)
        return _empty_report(year, month)

    repo = Repository.from_store(store)

    # ── 1. Sales inside the requested month ─────────────────────────────────
    sales = repo.sales_in_period(year, month)
    if not sales:
        return _empty_report(year, month)

    # ── 2. Join with customers and products ─────────────────────────────────
    rows = join_sales(sales, repo)

    # ── 3. Aggregate ────────────────────────────────────────────────────────
    total_revenue = sum((r.total_amount for r in rows), _ZERO).quantize(_TWO_DP)

    summary = ReportSummary(
        year=year,
        month=f"{month:02d}",
        total_sales=len(rows),
        total_revenue=total_revenue,
        unique_customers=len({r.customer_id for r in rows}),
        unique_products=len({r.product_id for r in rows}),
    )

    logger.debug(
        "Report %d-%02d: %d sales, revenue %s", year, month, len(rows), total_revenue,
    )

    return MonthlyReport(
        summary=summary,
        customer_purchases=_group_by_customer(rows),
        product_sales=_group_by_product(rows),
        detailed_sales=rows,
    )
