import logging
import re
from datetime import date
from decimal import Decimal

from app.errors import DuplicateError, InvalidInputError, NotFoundError
from app.models import Customer, Product, Sale
from app.repository import Repository
from app.store import DataStore, next_id

logger = logging.getLogger(__name__)

_DATE_SHAPE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_EMAIL_SHAPE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def _parse_sale_date(value: str) -> date:
    if not isinstance(value, str) or not _DATE_SHAPE.fullmatch(value):
        raise InvalidInputError("bad date format")
    year, month, day = (int(part) for part in value.split("-"))
    try:
        return date(year, month, day)
    except ValueError:
        # e.g. month 13 or February 30th
        raise InvalidInputError("impossible date") from None


def _check_name(name: str) -> str:
    if not isinstance(name, str) or not 2 <= len(name) <= 100:
        raise InvalidInputError("name must be between 2 and 100 characters")
    return name


def create_sale(
    customer_id: int,
    product_id: int,
    quantity: int,
    sale_date: str,
    store: DataStore,
) -> Sale:
    doc = store.load()
    repo = Repository(doc)

    if repo.customer_by_id(customer_id) is None:
        raise NotFoundError("customer not found")

    product = repo.product_by_id(product_id)
    if product is None:
        raise NotFoundError("product not found")

    parsed_date = _parse_sale_date(sale_date)

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidInputError("quantity must be a positive integer")

    sale = Sale(
        id=next_id(doc.sales),
        customer_id=customer_id,
        product_id=product_id,
        quantity=quantity,
        sale_date=parsed_date,
        total_amount=product.price * quantity,
    )
    doc.sales.append(sale)
    store.save(doc)

    logger.info(
        "Created sale %d: customer=%d product=%d qty=%d total=%s",
        sale.id, customer_id, product_id, quantity, sale.total_amount,
    )
    return sale


def create_customer(name: str, email: str, store: DataStore) -> Customer:
    _check_name(name)
    if not isinstance(email, str) or not _EMAIL_SHAPE.fullmatch(email):
        raise InvalidInputError("Invalid email format")

    doc = store.load()
    if Repository(doc).customer_by_email(email) is not None:
        raise DuplicateError(f"Customer with email {email} already exists")

    customer = Customer(id=next_id(doc.customers), name=name, email=email)
    doc.customers.append(customer)
    store.save(doc)

    logger.info("Created customer %d (%s)", customer.id, email)
    return customer


def create_product(name: str, price: Decimal, category: str, store: DataStore) -> Product:
    _check_name(name)
    if isinstance(price, bool) or not isinstance(price, (int, Decimal)) or price <= 0:
        raise InvalidInputError("Price must be a positive number")
    if not isinstance(category, str) or not 1 <= len(category) <= 50:
        raise InvalidInputError("category must be between 1 and 50 characters")

    doc = store.load()
    product = Product(
        id=next_id(doc.products),
        name=name,
        price=Decimal(price),
        category=category,
    )
    doc.products.append(product)
    store.save(doc)

    logger.info("Created product %d (%s @ %s)", product.id, name, product.price)
    return product
