"""
Lazy DI container — singleton access to clients and services.

Routes depend on these getters through FastAPI `Depends`, so tests can
replace any of them with `app.dependency_overrides`.
"""

from functools import lru_cache
from typing import Optional

from listing_hub.core.config import settings
from listing_hub.clients.gemini_client import GeminiClient
from listing_hub.clients.shopify_client import ShopifyClient
from listing_hub.schemas.products import Marketplace
from listing_hub.services.ai_vision_service import AIVisionService
from listing_hub.services.bulk_upload_ai_service import BulkUploadAIService
from listing_hub.services.bulk_upload_service import BulkUploadService
from listing_hub.services.marketplace_dispatcher import (
    ComingSoonMarketplace,
    MarketplaceDispatcher,
    ShopifyMarketplace,
)
from listing_hub.services.meta_update_service import MetaUpdateService
from listing_hub.services.product_service import ProductService
from listing_hub.services.shopify_meta_service import ShopifyMetaService
from listing_hub.services.shopify_publisher import ShopifyPublisher


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_shopify_client():
    return ShopifyClient(settings)


@lru_cache(maxsize=1)
def get_gemini_client() -> Optional[GeminiClient]:
    if not settings.gemini_configured:
        return None
    return GeminiClient(settings.gemini_api_key, settings.gemini_model)


# -- Shopify Services ------------------------------------------------------

@lru_cache(maxsize=1)
def get_shopify_publisher():
    return ShopifyPublisher(client=get_shopify_client())


@lru_cache(maxsize=1)
def get_shopify_meta_service():
    return ShopifyMetaService(client=get_shopify_client())


@lru_cache(maxsize=1)
def get_marketplace_dispatcher():
    return MarketplaceDispatcher({
        Marketplace.SHOPIFY: ShopifyMarketplace(get_shopify_publisher()),
        Marketplace.AMAZON: ComingSoonMarketplace(Marketplace.AMAZON),
        Marketplace.MEESHO: ComingSoonMarketplace(Marketplace.MEESHO),
    })


# -- AI --------------------------------------------------------------------

@lru_cache(maxsize=1)
def get_ai_vision_service():
    return AIVisionService(get_gemini_client())


# -- Product Services ------------------------------------------------------

@lru_cache(maxsize=1)
def get_product_service():
    return ProductService(dispatcher=get_marketplace_dispatcher())


@lru_cache(maxsize=1)
def get_bulk_upload_service():
    return BulkUploadService(product_service=get_product_service())


@lru_cache(maxsize=1)
def get_bulk_upload_ai_service():
    return BulkUploadAIService(
        product_service=get_product_service(),
        ai_vision=get_ai_vision_service(),
    )


@lru_cache(maxsize=1)
def get_meta_update_service():
    return MetaUpdateService(shopify_meta=get_shopify_meta_service())
