"""
Product service — form/CSV fields to a validated ProductRequest, then publish.

Used by the single-product routes and by the bulk drivers. Raw values
arrive as strings (multipart form fields, CSV cells); numbers are
parsed here and every validation problem surfaces as a Listing Hub
ValidationError so routes and batch rows report it the same way.
"""
import logging
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from listing_hub.core.constants.marketplace import COMPARE_AT_PRICE_MULTIPLIER
from listing_hub.core.exceptions import UnsupportedMarketplaceError, ValidationError
from listing_hub.schemas.products import ImageAsset, Marketplace, ProductRequest
from listing_hub.schemas.shopify import PublishOutcome
from listing_hub.services.marketplace_dispatcher import MarketplaceDispatcher
from listing_hub.utils.type_converters import to_float, to_int

logger = logging.getLogger(__name__)


def parse_marketplace(value: Any) -> Marketplace:
    if isinstance(value, Marketplace):
        return value
    text = (value or "").strip().lower() if isinstance(value, str) else value
    if not text:
        raise ValidationError("Marketplace is required")
    try:
        return Marketplace(text)
    except ValueError:
        raise UnsupportedMarketplaceError(str(value))


def apply_compare_at_default(price: Optional[float], compare_at_price: Optional[float]) -> Optional[float]:
    """Manual entry: compare-at price defaults to 2x the price."""
    if compare_at_price is None and price is not None:
        return round(price * COMPARE_AT_PRICE_MULTIPLIER, 2)
    return compare_at_price


def _format_validation_error(exc: PydanticValidationError) -> str:
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages)


def build_product_request(
    *,
    title: Optional[str],
    description: Optional[str],
    marketplace: Any,
    price: Any = None,
    compare_at_price: Any = None,
    inventory: Any = None,
    tags: Any = None,
    features: Any = None,
    images: Optional[Sequence[ImageAsset]] = None,
    default_compare_at: bool = False,
) -> ProductRequest:
    """Validate raw fields into a ProductRequest.

    Raises:
        ValidationError: missing title/description, bad number, or a
            description over the marketplace limit.
        UnsupportedMarketplaceError: marketplace value is not recognized.
    """
    if not (title or "").strip() or not (description or "").strip():
        raise ValidationError("Title and description are required")

    market = parse_marketplace(marketplace)
    price_value = to_float(price, "price")
    compare_value = to_float(compare_at_price, "compareAtPrice")
    if default_compare_at:
        compare_value = apply_compare_at_default(price_value, compare_value)

    try:
        return ProductRequest(
            title=title,
            description=description,
            marketplace=market,
            price=price_value,
            compare_at_price=compare_value,
            inventory=to_int(inventory, "inventory"),
            tags=tags,
            features=features,
            images=list(images or []),
        )
    except PydanticValidationError as exc:
        raise ValidationError(_format_validation_error(exc)) from exc


class ProductService:
    def __init__(self, dispatcher: MarketplaceDispatcher) -> None:
        self._dispatcher = dispatcher

    async def publish(self, request: ProductRequest) -> PublishOutcome:
        return await self._dispatcher.publish(request)

    async def create_product(
        self,
        *,
        title: Optional[str],
        description: Optional[str],
        marketplace: Any,
        price: Any = None,
        compare_at_price: Any = None,
        inventory: Any = None,
        tags: Any = None,
        features: Any = None,
        images: Optional[List[ImageAsset]] = None,
    ) -> PublishOutcome:
        """Manual-entry product creation (compare-at default applies)."""
        request = build_product_request(
            title=title,
            description=description,
            marketplace=marketplace,
            price=price,
            compare_at_price=compare_at_price,
            inventory=inventory,
            tags=tags,
            features=features,
            images=images,
            default_compare_at=True,
        )
        logger.info(f"Creating product '{request.title}' on {request.marketplace.value} with {len(request.images)} images")
        return await self.publish(request)
