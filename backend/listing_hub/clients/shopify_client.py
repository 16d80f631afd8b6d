import logging
from typing import Any, Dict, Optional

import httpx

from listing_hub.core.config import Settings
from listing_hub.core.constants.marketplace import STAGED_UPLOAD_FILE_FIELD
from listing_hub.core.exceptions import ConfigurationError, RemoteAPIError
from listing_hub.schemas.products import ImageAsset
from listing_hub.schemas.shopify import StagedUploadTarget

logger = logging.getLogger("shopify_client")

API_TIMEOUT_SECONDS = 30.0
UPLOAD_TIMEOUT_SECONDS = 120.0


class ShopifyClient:
    """HTTP transport for the Shopify Admin API and staged-upload targets."""

    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self._normalize_store_domain(raw_domain)
        self._token = settings.shopify_access_token
        self._api_version = settings.shopify_api_version
        logger.info(f"ShopifyClient initialized: domain={self._store_domain} (raw: {raw_domain}), api_version={self._api_version}")

    @staticmethod
    def _normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        Handles these formats:
        - "my-store" -> "my-store.myshopify.com"
        - "my-store.myshopify.com" -> "my-store.myshopify.com" (unchanged)
        - "https://my-store.myshopify.com" -> "my-store.myshopify.com" (strips protocol)
        """
        if not domain:
            return domain

        domain = domain.strip().replace("https://", "").replace("http://", "")
        domain = domain.rstrip("/")

        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"

        return domain

    @property
    def store_domain(self) -> Optional[str]:
        return self._store_domain

    def to_gid(self, entity: str, value: str | int) -> str:
        if isinstance(value, str) and value.startswith("gid://"):
            return value
        return f"gid://shopify/{entity}/{value}"

    def _base_url(self) -> str:
        if not self._store_domain or not self._token:
            raise ConfigurationError(
                "Shopify not configured. Please add SHOPIFY_STORE_URL and SHOPIFY_ACCESS_TOKEN to .env file"
            )
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def call_shopify(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        base = self._base_url()
        url = f"{base}{path}"
        logger.info("shopify request method=%s path=%s", method, path)

        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                resp = await client.request(method=method, url=url, headers=headers, json=json, params=params)
        except httpx.HTTPError as exc:
            logger.error("shopify transport error path=%s error=%s", path, exc)
            raise RemoteAPIError("Shopify", str(exc)) from exc

        logger.info("shopify response status=%s path=%s", resp.status_code, path)
        if resp.status_code >= 400:
            raise RemoteAPIError("Shopify", resp.text, status_code=resp.status_code)

        if resp.text:
            return resp.json()
        return {}

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a GraphQL document and return its `data` section."""
        payload = {"query": query, "variables": variables or {}}
        data = await self.call_shopify("POST", "/graphql.json", json=payload)
        if data.get("errors"):
            raise RemoteAPIError("Shopify", f"GraphQL errors: {data.get('errors')}")
        return data.get("data") or {}

    async def upload_to_staged_target(self, target: StagedUploadTarget, image: ImageAsset) -> None:
        """Multipart POST of the target's form parameters followed by the file bytes."""
        form = {param.name: param.value for param in target.parameters}
        files = {STAGED_UPLOAD_FILE_FIELD: (image.filename, image.content, image.mime_type)}
        logger.info("shopify staged upload filename=%s size=%s", image.filename, image.size)

        try:
            async with httpx.AsyncClient(timeout=UPLOAD_TIMEOUT_SECONDS) as client:
                resp = await client.post(target.url, data=form, files=files)
        except httpx.HTTPError as exc:
            logger.error("shopify staged upload transport error filename=%s error=%s", image.filename, exc)
            raise RemoteAPIError("Shopify", f"Failed to upload to staged URL: {exc}") from exc

        if resp.status_code >= 400:
            logger.error("shopify staged upload failed status=%s body=%s", resp.status_code, resp.text)
            raise RemoteAPIError(
                "Shopify",
                f"Failed to upload to staged URL: {resp.text}",
                status_code=resp.status_code,
            )
