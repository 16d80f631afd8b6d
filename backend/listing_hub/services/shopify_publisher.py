"""
Shopify publisher — product creation with staged media upload.

Pipeline per request, strictly in this order:

    FetchChannels -> CreateProduct -> PriceVariant -> [StageUpload -> UploadBytes -> AttachMedia] per image

Only CreateProduct can fail the request. Channel lookup and variant
pricing are best-effort, and each image succeeds or fails on its own:
a bad image is recorded as failed and the loop moves on. A product that
was created is never rolled back.
"""
import logging
from typing import Any, Dict, List, Optional

from listing_hub.clients.shopify_client import ShopifyClient
from listing_hub.core.constants.marketplace import PUBLICATIONS_PAGE_SIZE
from listing_hub.core.exceptions import RemoteAPIError
from listing_hub.schemas.products import ImageAsset, ProductRequest
from listing_hub.schemas.shopify import (
    MediaAttachResult,
    PublicationResult,
    StagedUploadTarget,
)
from listing_hub.utils.shopify_payload_builder import (
    build_media_input,
    build_product_input,
    build_staged_upload_input,
    build_variant_update,
)

logger = logging.getLogger("shopify_publisher")

PUBLICATIONS_QUERY = """
    query publications($first: Int!) {
        publications(first: $first) {
            nodes { id name }
        }
    }
"""

PRODUCT_CREATE_MUTATION = """
    mutation createProduct($input: ProductInput!) {
        productCreate(input: $input) {
            product {
                id
                title
                handle
                description
                status
                tags
                createdAt
                metafields(first: 10) {
                    nodes { namespace key type value }
                }
                variants(first: 1) {
                    nodes { id inventoryItem { id } }
                }
            }
            userErrors { field message }
        }
    }
"""

VARIANTS_BULK_UPDATE_MUTATION = """
    mutation productVariantsBulkUpdate($productId: ID!, $variants: [ProductVariantsBulkInput!]!) {
        productVariantsBulkUpdate(productId: $productId, variants: $variants) {
            productVariants { id price compareAtPrice }
            userErrors { field message }
        }
    }
"""

LOCATIONS_QUERY = """
    query locations {
        locations(first: 1) {
            nodes { id name }
        }
    }
"""

INVENTORY_SET_MUTATION = """
    mutation InventorySetOnHand($input: InventorySetOnHandQuantitiesInput!) {
        inventorySetOnHandQuantities(input: $input) {
            userErrors { field message }
        }
    }
"""

STAGED_UPLOADS_MUTATION = """
    mutation stagedUploadsCreate($input: [StagedUploadInput!]!) {
        stagedUploadsCreate(input: $input) {
            stagedTargets {
                url
                resourceUrl
                parameters { name value }
            }
            userErrors { field message }
        }
    }
"""

PRODUCT_CREATE_MEDIA_MUTATION = """
    mutation productCreateMedia($productId: ID!, $media: [CreateMediaInput!]!) {
        productCreateMedia(productId: $productId, media: $media) {
            media {
                id
                alt
                mediaContentType
                status
                ... on MediaImage {
                    id
                    image { url altText }
                }
            }
            mediaUserErrors { field message code }
        }
    }
"""

PRODUCT_WITH_MEDIA_QUERY = """
    query getProduct($id: ID!) {
        product(id: $id) {
            id
            title
            description
            status
            media(first: 10) {
                edges {
                    node {
                        alt
                        mediaContentType
                        status
                        ... on MediaImage {
                            id
                            image { url altText }
                        }
                    }
                }
            }
        }
    }
"""


class ShopifyPublisher:
    """Creates Shopify products and attaches their images."""

    def __init__(self, client: ShopifyClient) -> None:
        self._client = client

    async def create_product_with_media(self, request: ProductRequest) -> PublicationResult:
        """Run the publication pipeline for one product request."""
        logger.info(f"Creating product: {request.title} ({len(request.images)} images)")

        publication_ids = await self.fetch_publication_ids()

        product = await self.create_product(request, publication_ids)
        product_id = product["id"]
        logger.info(f"Product created with ID: {product_id}")

        warnings = await self.apply_variant_pricing(product, request)

        media: List[MediaAttachResult] = []
        if request.images:
            logger.info(f"Uploading {len(request.images)} images...")
            media = await self.upload_and_attach_media(product_id, request.images)

        product.pop("variants", None)
        return PublicationResult(
            product=product,
            media=media,
            total_images=len(request.images),
            published_channels=len(publication_ids),
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # FetchChannels
    # ------------------------------------------------------------------

    async def fetch_publication_ids(self) -> List[str]:
        """All sales-channel ids; [] (default channel only) on any failure."""
        try:
            data = await self._client.call_shopify_graphql(
                PUBLICATIONS_QUERY, {"first": PUBLICATIONS_PAGE_SIZE}
            )
        except Exception as exc:
            logger.warning(f"shopify publications lookup failed, using default channel: {exc}")
            return []
        nodes = (data.get("publications") or {}).get("nodes") or []
        ids = [n.get("id") for n in nodes if isinstance(n, dict) and n.get("id")]
        logger.info("shopify publications loaded=%s", [n.get("name") for n in nodes if isinstance(n, dict)])
        return ids

    # ------------------------------------------------------------------
    # CreateProduct
    # ------------------------------------------------------------------

    async def create_product(
        self,
        request: ProductRequest,
        publication_ids: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        variables = {"input": build_product_input(request, publication_ids)}
        data = await self._client.call_shopify_graphql(PRODUCT_CREATE_MUTATION, variables)
        payload = data.get("productCreate") or {}
        errors = payload.get("userErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", f"Failed to create product: {errors}")

        product = payload.get("product")
        if not product or not product.get("id"):
            raise RemoteAPIError("Shopify", "Failed to create product: no product returned")

        metafields = (product.get("metafields") or {}).get("nodes")
        if metafields is not None:
            product["metafields"] = metafields
        return product

    # ------------------------------------------------------------------
    # PriceVariant
    # ------------------------------------------------------------------

    async def apply_variant_pricing(self, product: Dict[str, Any], request: ProductRequest) -> List[str]:
        """Set price, compare-at price and on-hand inventory of the default variant.

        Returns warnings for steps that failed; never raises.
        """
        if request.price is None and request.compare_at_price is None and request.inventory is None:
            return []

        variants = (product.get("variants") or {}).get("nodes") or []
        if not variants:
            message = "Variant pricing skipped: product has no default variant"
            logger.warning(message)
            return [message]

        variant = variants[0] or {}
        warnings: List[str] = []

        variant_id = variant.get("id")
        update = None
        if variant_id:
            update = build_variant_update(
                variant_id,
                request.price,
                request.compare_at_price,
                track_inventory=request.inventory is not None,
            )
        elif request.price is not None or request.compare_at_price is not None:
            message = "Variant pricing skipped: default variant has no id"
            logger.warning(message)
            warnings.append(message)

        if update:
            try:
                data = await self._client.call_shopify_graphql(
                    VARIANTS_BULK_UPDATE_MUTATION,
                    {"productId": product["id"], "variants": [update]},
                )
                errors = (data.get("productVariantsBulkUpdate") or {}).get("userErrors") or []
                if errors:
                    raise RemoteAPIError("Shopify", str(errors))
                logger.info("shopify variant priced product_id=%s price=%s compare_at=%s",
                            product["id"], request.price, request.compare_at_price)
            except Exception as exc:
                logger.warning(f"shopify variant pricing failed product_id={product['id']}: {exc}")
                warnings.append(f"Failed to set variant pricing: {exc}")

        if request.inventory is not None:
            inventory_item_id = (variant.get("inventoryItem") or {}).get("id")
            try:
                await self.set_inventory(inventory_item_id, request.inventory)
            except Exception as exc:
                logger.warning(f"shopify inventory update failed product_id={product['id']}: {exc}")
                warnings.append(f"Failed to set inventory: {exc}")

        return warnings

    async def set_inventory(self, inventory_item_id: Optional[str], quantity: int) -> None:
        """Set on-hand quantity at the store's first location."""
        if not inventory_item_id:
            raise RemoteAPIError("Shopify", "variant has no inventory item")

        data = await self._client.call_shopify_graphql(LOCATIONS_QUERY)
        locations = (data.get("locations") or {}).get("nodes") or []
        if not locations:
            raise RemoteAPIError("Shopify", "store has no locations")

        variables = {
            "input": {
                "reason": "correction",
                "setQuantities": [
                    {
                        "inventoryItemId": self._client.to_gid("InventoryItem", inventory_item_id),
                        "locationId": self._client.to_gid("Location", locations[0]["id"]),
                        "quantity": int(quantity),
                    }
                ],
            }
        }
        data = await self._client.call_shopify_graphql(INVENTORY_SET_MUTATION, variables)
        errors = (data.get("inventorySetOnHandQuantities") or {}).get("userErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", str(errors))
        logger.info("shopify inventory set item=%s location=%s quantity=%s",
                    inventory_item_id, locations[0].get("name"), quantity)

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    async def upload_and_attach_media(
        self, product_id: str, images: List[ImageAsset]
    ) -> List[MediaAttachResult]:
        """Stage, upload and attach each image; one result per image, in order."""
        results: List[MediaAttachResult] = []
        for image in images:
            try:
                target = await self.generate_staged_upload(image)
                await self._client.upload_to_staged_target(target, image)
                media = await self.attach_media_to_product(product_id, target.resource_url, image.filename)
            except Exception as exc:
                logger.error(f"Failed to upload {image.filename}: {exc}")
                results.append(MediaAttachResult(filename=image.filename, status="failed", error=str(exc)))
                continue

            results.append(MediaAttachResult(filename=image.filename, status="success", media=media))
            logger.info(f"Successfully uploaded: {image.filename}")
        return results

    async def generate_staged_upload(self, image: ImageAsset) -> StagedUploadTarget:
        variables = {"input": [build_staged_upload_input(image)]}
        data = await self._client.call_shopify_graphql(STAGED_UPLOADS_MUTATION, variables)
        payload = data.get("stagedUploadsCreate") or {}
        errors = payload.get("userErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", f"Failed to generate staged upload: {errors}")

        targets = payload.get("stagedTargets") or []
        if not targets:
            raise RemoteAPIError("Shopify", "Failed to generate staged upload: no target returned")
        return StagedUploadTarget.model_validate(targets[0])

    async def attach_media_to_product(self, product_id: str, resource_url: str, alt_text: str) -> Dict[str, Any]:
        variables = {
            "productId": product_id,
            "media": [build_media_input(resource_url, alt_text)],
        }
        data = await self._client.call_shopify_graphql(PRODUCT_CREATE_MEDIA_MUTATION, variables)
        payload = data.get("productCreateMedia") or {}
        errors = payload.get("mediaUserErrors") or []
        if errors:
            raise RemoteAPIError("Shopify", f"Failed to attach media: {errors}")

        media = payload.get("media") or []
        return media[0] if media else {}

    async def get_product_with_media(self, product_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a product and its first 10 media items."""
        gid = self._client.to_gid("Product", product_id)
        data = await self._client.call_shopify_graphql(PRODUCT_WITH_MEDIA_QUERY, {"id": gid})
        return data.get("product")
