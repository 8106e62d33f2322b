from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ── Stored records ───────────────────────────────────────────────────────────

class Customer(BaseModel):
    id: int
    name: str
    email: str


class Product(BaseModel):
    id: int
    name: str
    price: Decimal
    category: str


class Sale(BaseModel):
    # persisted with camelCase keys, accessed with snake_case attributes
    model_config = ConfigDict(populate_by_name=True)

    id: int
    customer_id: int = Field(alias="customerId")
    product_id: int = Field(alias="productId")
    quantity: int
    sale_date: date = Field(alias="saleDate")
    total_amount: Decimal = Field(alias="totalAmount")  # frozen at creation


class StoreDocument(BaseModel):
    customers: list[Customer] = []
    products: list[Product] = []
    sales: list[Sale] = []


# ── Request models ───────────────────────────────────────────────────────────

class CustomerCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: str


class ProductCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    price: Decimal = Field(gt=0)
    category: str = Field(min_length=1, max_length=50)

    @field_validator("price", mode="before")
    @classmethod
    def price_must_be_number(cls, v):
        # JSON strings and booleans would otherwise coerce to Decimal
        if isinstance(v, (str, bool)):
            raise ValueError("Price must be a positive number")
        return v


class SaleCreate(BaseModel):
    customerId: int = Field(strict=True, ge=1)
    productId: int = Field(strict=True, ge=1)
    quantity: int = Field(strict=True, ge=1)
    saleDate: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")


# ── Report models ────────────────────────────────────────────────────────────

class JoinedSale(BaseModel):
    sale_id: int
    sale_date: str
    quantity: int
    total_amount: Decimal
    customer_id: int
    customer_name: str
    customer_email: str
    product_id: int
    product_name: str
    unit_price: Decimal
    product_category: str


class PurchaseEntry(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    unit_price: Decimal
    total_amount: Decimal
    sale_date: str


class CustomerPurchases(BaseModel):
    customer_id: int
    customer_name: str
    customer_email: str
    total_spent: Decimal
    total_items: int
    purchases: list[PurchaseEntry]


class BuyerEntry(BaseModel):
    customer_id: int
    customer_name: str
    quantity: int
    purchase_amount: Decimal


class ProductSales(BaseModel):
    product_id: int
    product_name: str
    product_category: str
    total_quantity: int
    total_revenue: Decimal
    customers: list[BuyerEntry]


class ReportSummary(BaseModel):
    year: int
    month: str  # zero-padded, e.g. "02"
    total_sales: int
    total_revenue: Decimal
    unique_customers: int
    unique_products: int


class MonthlyReport(BaseModel):
    summary: ReportSummary
    customer_purchases: list[CustomerPurchases]
    product_sales: list[ProductSales]
    detailed_sales: list[JoinedSale]
