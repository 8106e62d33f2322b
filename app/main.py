import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.engine import join_sales, monthly_report
from app.errors import ServiceError, StorageError
from app.log import setup_logging
from app.models import CustomerCreate, ProductCreate, SaleCreate
from app.repository import Repository
from app.seed_data import seed
from app.store import DataStore
from app.writer import create_customer, create_product, create_sale

logger = logging.getLogger(__name__)

settings = get_settings()


def get_store() -> DataStore:
    return DataStore(get_settings().data_file)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_file)
    # Seed an empty store so the service is immediately usable
    if settings.seed_on_startup:
        store = app.dependency_overrides.get(get_store, get_store)()
        try:
            seed(store)
        except StorageError:
            # keep serving; /api/health reports the broken data file
            logger.exception("Skipping seed, data file %s is unusable", store.path)
    yield


app = FastAPI(
    title=settings.app_title,
    version=settings.app_version,
    description="Customers, products, sales and monthly sales reports",
    lifespan=lifespan,
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        f"{'.'.join(str(p) for p in err['loc'][1:]) or err['loc'][0]}: {err['msg']}"
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, messages)
    return JSONResponse(
        status_code=400,
        content={"error": "Bad request", "message": "; ".join(messages)},
    )


@app.exception_handler(ServiceError)
async def service_exception_handler(request: Request, exc: ServiceError):
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc)},
        )
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=400,
        content={"error": "Bad request", "message": str(exc)},
    )


# ── System ───────────────────────────────────────────────────────────────────

@app.get("/", summary="API information")
def root():
    return {
        "application": settings.app_title,
        "version": settings.app_version,
        "all_endpoints": [
            "GET /api/health",
            "GET /api/customers",
            "GET /api/products",
            "GET /api/sales",
            "GET /api/sales/monthly?year=YYYY&month=MM",
            "POST /api/customers",
            "POST /api/products",
            "POST /api/sales",
        ],
    }


@app.get("/api/health", summary="Check that the API and its data file are healthy")
def health(store: DataStore = Depends(get_store)):
    try:
        repo = Repository.from_store(store)
    except StorageError as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": "Database connection failed",
                "message": str(exc),
            },
        )
    return {
        "status": "healthy",
        "timestamp": _now(),
        "database": {
            "customers": len(repo.doc.customers),
            "products": len(repo.doc.products),
            "sales": len(repo.doc.sales),
        },
    }


# ── Customers ────────────────────────────────────────────────────────────────

@app.get("/api/customers", summary="List all customers")
def list_customers(store: DataStore = Depends(get_store)):
    customers = Repository.from_store(store).list_customers()
    return {
        "count": len(customers),
        "customers": [c.model_dump() for c in customers],
        "success": True,
        "timestamp": _now(),
    }


@app.post("/api/customers", status_code=201, summary="Create a customer")
def post_customer(body: CustomerCreate, store: DataStore = Depends(get_store)):
    customer = create_customer(body.name, body.email, store)
    return {
        "message": "Customer created successfully",
        "customer": customer.model_dump(),
        "success": True,
        "timestamp": _now(),
    }


# ── Products ─────────────────────────────────────────────────────────────────

@app.get("/api/products", summary="List all products")
def list_products(store: DataStore = Depends(get_store)):
    products = Repository.from_store(store).list_products()
    return {
        "count": len(products),
        "products": [p.model_dump() for p in products],
        "success": True,
        "timestamp": _now(),
    }


@app.post("/api/products", status_code=201, summary="Create a product")
def post_product(body: ProductCreate, store: DataStore = Depends(get_store)):
    product = create_product(body.name, body.price, body.category, store)
    return {
        "message": "Product created successfully",
        "product": product.model_dump(),
        "success": True,
        "timestamp": _now(),
    }


# ── Sales ────────────────────────────────────────────────────────────────────

@app.get("/api/sales", summary="List all sales with customer and product details")
def list_sales(store: DataStore = Depends(get_store)):
    repo = Repository.from_store(store)
    rows = join_sales(repo.list_sales(), repo)
    return {
        "count": len(rows),
        "sales": [r.model_dump() for r in rows],
        "success": True,
        "timestamp": _now(),
    }


@app.get(
    "/api/sales/monthly",
    summary="Which customer bought which products during a particular month",
)
def get_monthly_sales(
    year:  int = Query(..., ge=1900, le=2100, examples=[2026]),
    month: int = Query(..., ge=1, le=12, examples=[1]),
    store: DataStore = Depends(get_store),
):
    report = monthly_report(year, month, store)
    return {
        **report.model_dump(),
        "query": {"year": year, "month": month},
        "success": True,
        "timestamp": _now(),
    }


@app.post("/api/sales", status_code=201, summary="Record a sale")
def post_sale(body: SaleCreate, store: DataStore = Depends(get_store)):
    sale = create_sale(body.customerId, body.productId, body.quantity, body.saleDate, store)
    return {
        "message": "Sale created successfully",
        "sale": sale.model_dump(by_alias=True),
        "success": True,
        "timestamp": _now(),
    }
