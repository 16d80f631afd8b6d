"""
Marketplace dispatcher — routes a ProductRequest to its marketplace.

Each marketplace is one MarketplaceService. Shopify is backed by the
publisher; marketplaces without an integration answer with a
ComingSoonResult and make no network call.
"""
import logging
from typing import Mapping, Protocol

from listing_hub.core.constants.marketplace import MARKETPLACE_DISPLAY_NAMES
from listing_hub.core.exceptions import UnsupportedMarketplaceError
from listing_hub.schemas.products import Marketplace, ProductRequest
from listing_hub.schemas.shopify import ComingSoonResult, PublishOutcome
from listing_hub.services.shopify_publisher import ShopifyPublisher

logger = logging.getLogger(__name__)


class MarketplaceService(Protocol):
    async def create_product(self, request: ProductRequest) -> PublishOutcome:
        ...


class ShopifyMarketplace:
    def __init__(self, publisher: ShopifyPublisher) -> None:
        self._publisher = publisher

    async def create_product(self, request: ProductRequest) -> PublishOutcome:
        return await self._publisher.create_product_with_media(request)


class ComingSoonMarketplace:
    """Placeholder for a marketplace whose integration is not built yet."""

    def __init__(self, marketplace: Marketplace) -> None:
        self._marketplace = marketplace

    async def create_product(self, request: ProductRequest) -> PublishOutcome:
        name = MARKETPLACE_DISPLAY_NAMES.get(self._marketplace.value, self._marketplace.value)
        logger.info(f"{name} integration not available yet; skipping '{request.title}'")
        return ComingSoonResult(
            marketplace=self._marketplace.value,
            message=f"{name} integration coming soon",
            data={
                "title": request.title,
                "description": request.description,
                "imageCount": len(request.images),
            },
        )


class MarketplaceDispatcher:
    def __init__(self, services: Mapping[Marketplace, MarketplaceService]) -> None:
        self._services = dict(services)

    def supports(self, marketplace: Marketplace) -> bool:
        return marketplace in self._services

    async def publish(self, request: ProductRequest) -> PublishOutcome:
        service = self._services.get(request.marketplace)
        if service is None:
            raise UnsupportedMarketplaceError(getattr(request.marketplace, "value", str(request.marketplace)))
        logger.info(f"Publishing '{request.title}' to {request.marketplace.value}")
        return await service.create_product(request)
