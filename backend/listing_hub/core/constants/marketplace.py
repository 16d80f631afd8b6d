"""
Marketplace constants — description limits, image types, Shopify metafields.
"""

# Maximum description length per marketplace (characters)
DESCRIPTION_MAX_LENGTH: dict[str, int] = {
    "shopify": 65535,
    "amazon": 2000,
    "meesho": 3000,
}

# Display names used by placeholder marketplaces
MARKETPLACE_DISPLAY_NAMES: dict[str, str] = {
    "shopify": "Shopify",
    "amazon": "Amazon",
    "meesho": "Meesho",
}

# Compare-at price applied in manual-entry paths when only a price is given
COMPARE_AT_PRICE_MULTIPLIER: float = 2.0

# Image extension -> MIME type; also the folder loader's extension filter
IMAGE_MIME_TYPES: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
}
DEFAULT_MIME_TYPE: str = "application/octet-stream"

# Shopify product defaults
PRODUCT_STATUS: str = "ACTIVE"
FEATURES_METAFIELD_NAMESPACE: str = "custom"
FEATURES_METAFIELD_KEY: str = "features"
FEATURES_METAFIELD_TYPE: str = "rich_text_field"

# Staged uploads
STAGED_UPLOAD_RESOURCE: str = "IMAGE"
STAGED_UPLOAD_HTTP_METHOD: str = "POST"
STAGED_UPLOAD_FILE_FIELD: str = "file"

# How many sales channels to look up before publishing
PUBLICATIONS_PAGE_SIZE: int = 20
