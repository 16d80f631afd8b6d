"""
Shopify meta service — SEO title/description updates by handle.

Handles are resolved to GIDs with productByHandle / collectionByHandle,
then productUpdate / collectionUpdate sets the `seo` block.
"""
import logging
from typing import Any, Dict

from listing_hub.clients.shopify_client import ShopifyClient
from listing_hub.core.exceptions import (
    CollectionNotFoundError,
    ProductNotFoundError,
    RemoteAPIError,
)

logger = logging.getLogger("shopify_meta_service")

PRODUCT_BY_HANDLE_QUERY = """
    query getProductByHandle($handle: String!) {
        productByHandle(handle: $handle) {
            id
            title
            handle
        }
    }
"""

COLLECTION_BY_HANDLE_QUERY = """
    query getCollectionByHandle($handle: String!) {
        collectionByHandle(handle: $handle) {
            id
            title
            handle
        }
    }
"""

PRODUCT_SEO_MUTATION = """
    mutation productUpdate($input: ProductInput!) {
        productUpdate(input: $input) {
            product {
                id
                title
                handle
                seo { title description }
            }
            userErrors { field message }
        }
    }
"""

COLLECTION_SEO_MUTATION = """
    mutation collectionUpdate($input: CollectionInput!) {
        collectionUpdate(input: $input) {
            collection {
                id
                title
                handle
                seo { title description }
            }
            userErrors { field message }
        }
    }
"""


class ShopifyMetaService:
    def __init__(self, client: ShopifyClient) -> None:
        self._client = client

    async def get_product_id_by_handle(self, handle: str) -> str:
        data = await self._client.call_shopify_graphql(PRODUCT_BY_HANDLE_QUERY, {"handle": handle})
        product = data.get("productByHandle")
        if not product:
            raise ProductNotFoundError(handle)
        return product["id"]

    async def get_collection_id_by_handle(self, handle: str) -> str:
        data = await self._client.call_shopify_graphql(COLLECTION_BY_HANDLE_QUERY, {"handle": handle})
        collection = data.get("collectionByHandle")
        if not collection:
            raise CollectionNotFoundError(handle)
        return collection["id"]

    async def update_product_seo(self, handle: str, meta_title: str, meta_description: str) -> Dict[str, Any]:
        product_id = await self.get_product_id_by_handle(handle)
        logger.info(f"Updating product SEO handle={handle} id={product_id}")
        variables = {
            "input": {
                "id": product_id,
                "seo": {"title": meta_title, "description": meta_description},
            }
        }
        data = await self._client.call_shopify_graphql(PRODUCT_SEO_MUTATION, variables)
        payload = data.get("productUpdate") or {}
        errors = payload.get("userErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", f"Failed to update product SEO: {errors}")
        return payload.get("product") or {}

    async def update_collection_seo(self, handle: str, meta_title: str, meta_description: str) -> Dict[str, Any]:
        collection_id = await self.get_collection_id_by_handle(handle)
        logger.info(f"Updating collection SEO handle={handle} id={collection_id}")
        variables = {
            "input": {
                "id": collection_id,
                "seo": {"title": meta_title, "description": meta_description},
            }
        }
        data = await self._client.call_shopify_graphql(COLLECTION_SEO_MUTATION, variables)
        payload = data.get("collectionUpdate") or {}
        errors = payload.get("userErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", f"Failed to update collection SEO: {errors}")
        return payload.get("collection") or {}
