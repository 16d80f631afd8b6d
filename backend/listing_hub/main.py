import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from listing_hub.core.config import settings
from listing_hub.core.middleware import apply_cors, apply_exception_handlers
from listing_hub.routes import health_router, products_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    Credentials are not checked here; a missing Shopify or Gemini
    setting is reported by the first request that needs it.
    """
    logger.info("=== Listing Hub Starting ===")
    if not settings.shopify_configured:
        logger.warning("Shopify credentials missing (SHOPIFY_STORE_URL / SHOPIFY_ACCESS_TOKEN)")
    if not settings.gemini_configured:
        logger.warning("GEMINI_API_KEY not set; AI Vision endpoints will return 400")
    logger.info("=== Listing Hub Ready ===")

    yield

    logger.info("=== Listing Hub Shutting Down ===")


app = FastAPI(title="Listing Hub Backend", lifespan=lifespan)
logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s:%(name)s:%(message)s")

apply_cors(app)
apply_exception_handlers(app)

app.include_router(health_router)
app.include_router(products_router)
