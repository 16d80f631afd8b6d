"""
Constants package — re-exports from domain-specific modules.
"""
from listing_hub.core.constants.marketplace import (
    COMPARE_AT_PRICE_MULTIPLIER,
    DEFAULT_MIME_TYPE,
    DESCRIPTION_MAX_LENGTH,
    FEATURES_METAFIELD_KEY,
    FEATURES_METAFIELD_NAMESPACE,
    FEATURES_METAFIELD_TYPE,
    IMAGE_MIME_TYPES,
    MARKETPLACE_DISPLAY_NAMES,
    PRODUCT_STATUS,
    PUBLICATIONS_PAGE_SIZE,
    STAGED_UPLOAD_FILE_FIELD,
    STAGED_UPLOAD_HTTP_METHOD,
    STAGED_UPLOAD_RESOURCE,
)

__all__ = [
    "COMPARE_AT_PRICE_MULTIPLIER",
    "DEFAULT_MIME_TYPE",
    "DESCRIPTION_MAX_LENGTH",
    "FEATURES_METAFIELD_KEY",
    "FEATURES_METAFIELD_NAMESPACE",
    "FEATURES_METAFIELD_TYPE",
    "IMAGE_MIME_TYPES",
    "MARKETPLACE_DISPLAY_NAMES",
    "PRODUCT_STATUS",
    "PUBLICATIONS_PAGE_SIZE",
    "STAGED_UPLOAD_FILE_FIELD",
    "STAGED_UPLOAD_HTTP_METHOD",
    "STAGED_UPLOAD_RESOURCE",
]
