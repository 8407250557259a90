"""
Storefront Catalog
FastAPI application entry point

- Rate limiting with SlowAPI
- Catalog errors rendered as structured JSON
- Error sanitization middleware for unhandled exceptions
- Health endpoint with DB ping
"""
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text

from storefront.api.routes import products, brands, categories
from storefront.core.config import settings
from storefront.core.database import AsyncSessionLocal, init_db
from storefront.core.error_handler import ErrorSanitizationMiddleware, catalog_error_handler
from storefront.core.exceptions import CatalogError
from storefront.core.rate_limit import limiter, rate_limit_exceeded_handler

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create catalog tables on startup."""
    await init_db()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    lifespan=lifespan,
    title="Storefront Catalog API",
    description="""
## Storefront Catalog API

Product catalog for the storefront admin: list, filter, sort, paginate,
create, edit and delete products, with brand and category lookups.

### Listing parameters
`page`, `pageSize`, `sortBy` (`column-direction`), `brand` (IDs), `priceRangeTo`,
`gender`, `discount` (`lower-upper`), `occasion` (tags), `category` (IDs).
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "Products", "description": "Product catalog management"},
        {"name": "Brands", "description": "Brand lookups"},
        {"name": "Categories", "description": "Category lookups"},
    ],
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Typed catalog errors -> {error, message, details}
app.add_exception_handler(CatalogError, catalog_error_handler)

# Error sanitization (catches unhandled exceptions)
app.add_middleware(ErrorSanitizationMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(products.router, prefix="/api/products", tags=["Products"])
app.include_router(brands.router, prefix="/api/brands", tags=["Brands"])
app.include_router(categories.router, prefix="/api/categories", tags=["Categories"])


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": "Storefront Catalog API",
        "version": "1.0.0",
        "status": "operational"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Health check with an actual DB ping.
    Returns 503 if database is unreachable.
    """
    health_status = {
        "status": "healthy",
        "database": "unknown",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    try:
        async with AsyncSessionLocal() as db:
            await db.execute(text("SELECT 1"))
        health_status["database"] = "connected"
    except Exception as e:
        logger.error(f"Health check DB ping failed: {type(e).__name__}: {e}")
        health_status["database"] = f"error: {type(e).__name__}"
        health_status["status"] = "unhealthy"
        return JSONResponse(status_code=503, content=health_status)

    return health_status


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
