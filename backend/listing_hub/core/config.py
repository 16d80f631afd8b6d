import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()

# Value shipped in the sample .env; treated the same as a missing key.
GEMINI_PLACEHOLDER_KEY = "your_gemini_api_key_here"


class Settings(BaseModel):
    # Shopify
    shopify_store_domain: Optional[str] = os.getenv("SHOPIFY_STORE_URL")
    shopify_access_token: Optional[str] = os.getenv("SHOPIFY_ACCESS_TOKEN")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION") or "2024-01"

    # Gemini (AI vision)
    gemini_api_key: Optional[str] = os.getenv("GEMINI_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Request limits
    max_upload_images: int = int(os.getenv("MAX_UPLOAD_IMAGES", "10"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def shopify_configured(self) -> bool:
        """True when both the store domain and the admin token are set."""
        return bool(self.shopify_store_domain and self.shopify_access_token)

    @property
    def gemini_configured(self) -> bool:
        """True when a real (non-placeholder) Gemini key is present."""
        key = (self.gemini_api_key or "").strip()
        return bool(key) and key != GEMINI_PLACEHOLDER_KEY


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
