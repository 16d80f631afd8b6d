"""
Custom exception hierarchy for Listing Hub.

Exceptions are categorized as:
- ConfigurationError: a credential is missing, the feature is disabled
- ValidationError: the request is rejected before any remote call
- NotFoundError: a folder, product handle or collection handle does not resolve
- RemoteAPIError: Shopify or Gemini answered with an error

Nothing is retried. Row-level and image-level failures are recorded in
the batch report / publication result; request-level failures reach the
route and are rendered as a single 400 response.
"""
from typing import Optional


class ListingHubException(Exception):
    """Base exception for Listing Hub."""
    pass


# ============================================
# CONFIGURATION
# ============================================
class ConfigurationError(ListingHubException):
    """
    A required credential or endpoint is missing.

    Reported on first use, never at startup.
    """
    pass


class NotConfiguredError(ConfigurationError):
    """AI vision was requested but no valid Gemini key was configured."""

    def __init__(self, message: str = "AI Vision not configured. Please add GEMINI_API_KEY to .env file"):
        super().__init__(message)


# ============================================
# VALIDATION
# ============================================
class ValidationError(ListingHubException):
    """Invalid input data - rejected before any remote call."""
    pass


class EmptyInputError(ValidationError):
    """CSV has no header row or no data rows."""

    def __init__(self, message: str = "CSV file is empty or missing header row"):
        super().__init__(message)


class InvalidURLFormatError(ValidationError):
    """Page URL contains neither /collections/ nor /products/."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Invalid URL format: {url}. URL must contain /collections/ or /products/"
        )


class UnsupportedMarketplaceError(ValidationError):
    """Marketplace value has no registered implementation."""

    def __init__(self, marketplace: str, operation: Optional[str] = None):
        self.marketplace = marketplace
        if operation:
            message = f"Marketplace {marketplace} is not yet supported for {operation}"
        else:
            message = f"Unsupported marketplace: {marketplace}"
        super().__init__(message)


# ============================================
# NOT FOUND
# ============================================
class NotFoundError(ListingHubException):
    """A referenced resource does not exist."""
    pass


class FolderNotFoundError(NotFoundError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Folder not found: {path}")


class NoImagesFoundError(NotFoundError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No images found in folder: {path}")


class ProductNotFoundError(NotFoundError):
    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Product not found with handle: {handle}")


class CollectionNotFoundError(NotFoundError):
    def __init__(self, handle: str):
        self.handle = handle
        super().__init__(f"Collection not found with handle: {handle}")


# ============================================
# REMOTE
# ============================================
class RemoteAPIError(ListingHubException):
    """
    Error from an external API (Shopify, Gemini).

    The remote message is forwarded verbatim for operator diagnosis.
    """
    def __init__(self, service: str, message: str, status_code: Optional[int] = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} API error: {message}")


class MalformedAIResponseError(RemoteAPIError):
    """Model response could not be parsed as JSON after cleaning."""

    def __init__(self, message: str):
        super().__init__("Gemini", f"Malformed AI response: {message}")
