"""
Shopify payload builder — pure transformation from ProductRequest to GraphQL inputs.

Kept apart from the publisher so the payloads can be unit-tested
without network calls.
"""
import html
import json
import logging
import re
from typing import Any, Dict, List, Optional

from listing_hub.core.constants.marketplace import (
    FEATURES_METAFIELD_KEY,
    FEATURES_METAFIELD_NAMESPACE,
    FEATURES_METAFIELD_TYPE,
    PRODUCT_STATUS,
    STAGED_UPLOAD_HTTP_METHOD,
    STAGED_UPLOAD_RESOURCE,
)
from listing_hub.schemas.products import ImageAsset, ProductRequest

logger = logging.getLogger("shopify_payload_builder")

_HTML_TAG = re.compile(r"<[a-zA-Z][^>]*>")
_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def format_money(value: Optional[float]) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.2f}"


def description_to_html(description: str) -> str:
    """Plain text -> escaped <p> paragraphs; existing HTML passes through."""
    if _HTML_TAG.search(description):
        return description
    paragraphs = [p.strip() for p in _PARAGRAPH_BREAK.split(description) if p.strip()]
    return "".join(
        f"<p>{html.escape(p).replace(chr(10), '<br>')}</p>" for p in paragraphs
    )


def build_features_rich_text(features: List[str]) -> Dict[str, Any]:
    """Wrap each feature as an unordered-list item of a rich-text document."""
    return {
        "type": "root",
        "children": [
            {
                "type": "list",
                "listType": "unordered",
                "children": [
                    {"type": "list-item", "children": [{"type": "text", "value": feature}]}
                    for feature in features
                ],
            }
        ],
    }


def build_features_metafield(features: List[str]) -> Optional[Dict[str, Any]]:
    if not features:
        return None
    return {
        "namespace": FEATURES_METAFIELD_NAMESPACE,
        "key": FEATURES_METAFIELD_KEY,
        "type": FEATURES_METAFIELD_TYPE,
        "value": json.dumps(build_features_rich_text(features)),
    }


def build_product_input(
    request: ProductRequest,
    publication_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the ProductInput for the productCreate mutation."""
    product_input: Dict[str, Any] = {
        "title": request.title,
        "descriptionHtml": description_to_html(request.description),
        "status": PRODUCT_STATUS,
        "tags": list(request.tags),
    }
    if publication_ids:
        product_input["productPublications"] = [
            {"publicationId": pid} for pid in publication_ids
        ]
    metafield = build_features_metafield(request.features)
    if metafield:
        product_input["metafields"] = [metafield]
    return product_input


def build_staged_upload_input(image: ImageAsset) -> Dict[str, Any]:
    return {
        "filename": image.filename,
        "mimeType": image.mime_type,
        "resource": STAGED_UPLOAD_RESOURCE,
        "httpMethod": STAGED_UPLOAD_HTTP_METHOD,
        "fileSize": str(image.size),
    }


def build_media_input(resource_url: str, alt_text: str) -> Dict[str, Any]:
    return {
        "originalSource": resource_url,
        "alt": alt_text,
        "mediaContentType": "IMAGE",
    }


def build_variant_update(
    variant_id: str,
    price: Optional[float],
    compare_at_price: Optional[float],
    track_inventory: bool = False,
) -> Optional[Dict[str, Any]]:
    """Variant input for productVariantsBulkUpdate; None when nothing to set."""
    update: Dict[str, Any] = {"id": variant_id}
    if price is not None:
        update["price"] = format_money(price)
    if compare_at_price is not None:
        update["compareAtPrice"] = format_money(compare_at_price)
    if track_inventory:
        update["inventoryItem"] = {"tracked": True}
    if len(update) == 1:
        return None
    return update
