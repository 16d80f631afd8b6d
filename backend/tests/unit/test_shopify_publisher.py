"""
Unit tests for ShopifyPublisher.

Tests the publication pipeline against a mocked ShopifyClient:
channel lookup, product creation, variant pricing and the per-image
stage/upload/attach loop with partial failures.
"""
import pytest
from unittest.mock import AsyncMock

from listing_hub.core.exceptions import RemoteAPIError
from listing_hub.schemas.products import Marketplace, ProductRequest
from listing_hub.services.shopify_publisher import ShopifyPublisher


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _staged_response(filename):
    return {
        "stagedUploadsCreate": {
            "stagedTargets": [{
                "url": "https://uploads.example/bucket",
                "resourceUrl": f"https://uploads.example/bucket/{filename}",
                "parameters": [{"name": "key", "value": f"tmp/{filename}"}],
            }],
            "userErrors": [],
        }
    }


def _graphql_router(created_product_response, publications=None, publications_error=None,
                    media_errors_for=None, variant_errors=None):
    """Build a call_shopify_graphql side effect that answers by operation."""
    calls = []

    async def _call(query, variables=None):
        calls.append((query, variables))
        if "publications(" in query:
            if publications_error:
                raise publications_error
            return {"publications": {"nodes": publications or []}}
        if "productCreate(" in query:
            return created_product_response
        if "productVariantsBulkUpdate(" in query:
            return {"productVariantsBulkUpdate": {"productVariants": [], "userErrors": variant_errors or []}}
        if "locations(" in query:
            return {"locations": {"nodes": [{"id": "gid://shopify/Location/9", "name": "Main"}]}}
        if "inventorySetOnHandQuantities(" in query:
            return {"inventorySetOnHandQuantities": {"userErrors": []}}
        if "stagedUploadsCreate(" in query:
            return _staged_response(variables["input"][0]["filename"])
        if "productCreateMedia(" in query:
            alt = variables["media"][0]["alt"]
            if media_errors_for and alt in media_errors_for:
                return {"productCreateMedia": {"media": [], "mediaUserErrors": [{"message": "bad image"}]}}
            return {"productCreateMedia": {"media": [{"id": f"media-{alt}", "alt": alt}], "mediaUserErrors": []}}
        raise AssertionError(f"unexpected query: {query}")

    return _call, calls


def _operations(calls):
    names = []
    for query, _ in calls:
        for op in ("publications(", "productCreate(", "productVariantsBulkUpdate(", "locations(",
                   "inventorySetOnHandQuantities(", "stagedUploadsCreate(", "productCreateMedia("):
            if op in query:
                names.append(op.rstrip("("))
    return names


# ---------------------------------------------------------------------------
# create_product_with_media
# ---------------------------------------------------------------------------

class TestCreateProductWithMedia:
    """Tests for the full publication pipeline."""

    @pytest.mark.asyncio
    async def test_all_images_attached(self, mock_shopify_client, sample_request, created_product_response):
        router, calls = _graphql_router(
            created_product_response,
            publications=[{"id": "gid://shopify/Publication/1", "name": "Online Store"}],
        )
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)
        publisher = ShopifyPublisher(mock_shopify_client)

        result = await publisher.create_product_with_media(sample_request)

        assert result.status == "created"
        assert result.product["id"] == "gid://shopify/Product/1001"
        assert "variants" not in result.product
        assert result.total_images == 3
        assert result.published_channels == 1
        assert [m.status for m in result.media] == ["success", "success", "success"]
        assert [m.filename for m in result.media] == ["front.png", "side.jpg", "back.gif"]
        assert result.warnings == []
        assert mock_shopify_client.upload_to_staged_target.await_count == 3

    @pytest.mark.asyncio
    async def test_stage_order(self, mock_shopify_client, sample_request, created_product_response):
        router, calls = _graphql_router(created_product_response)
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        ops = _operations(calls)
        assert ops[:3] == ["publications", "productCreate", "productVariantsBulkUpdate"]
        assert ops[3:] == ["stagedUploadsCreate", "productCreateMedia"] * 3

    @pytest.mark.asyncio
    async def test_second_upload_failure_isolated(self, mock_shopify_client, sample_request, created_product_response):
        router, _ = _graphql_router(created_product_response)
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)
        mock_shopify_client.upload_to_staged_target = AsyncMock(
            side_effect=[None, RemoteAPIError("Shopify", "upload rejected"), None]
        )

        result = await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        assert len(result.media) == 3
        assert [m.status for m in result.media] == ["success", "failed", "success"]
        assert "upload rejected" in result.media[1].error
        assert result.media[1].media is None
        assert result.product["id"] == "gid://shopify/Product/1001"

    @pytest.mark.asyncio
    async def test_every_image_failing_still_returns_product(self, mock_shopify_client, sample_request,
                                                             created_product_response):
        router, _ = _graphql_router(
            created_product_response,
            media_errors_for={"front.png", "side.jpg", "back.gif"},
        )
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        result = await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        assert all(m.status == "failed" for m in result.media)
        assert result.total_images == 3
        assert result.product["handle"] == "blue-cotton-shirt"

    @pytest.mark.asyncio
    async def test_channel_lookup_failure_does_not_abort(self, mock_shopify_client, sample_request,
                                                         created_product_response):
        router, calls = _graphql_router(
            created_product_response,
            publications_error=RemoteAPIError("Shopify", "access denied"),
        )
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        result = await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        assert result.published_channels == 0
        create_variables = next(v for q, v in calls if "productCreate(" in q)
        assert "productPublications" not in create_variables["input"]

    @pytest.mark.asyncio
    async def test_user_errors_fail_request(self, mock_shopify_client, sample_request):
        failing = {"productCreate": {"product": None, "userErrors": [{"field": ["title"], "message": "Title taken"}]}}
        router, calls = _graphql_router(failing)
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        with pytest.raises(RemoteAPIError) as exc_info:
            await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        assert "Title taken" in str(exc_info.value)
        assert "stagedUploadsCreate" not in _operations(calls)
        mock_shopify_client.upload_to_staged_target.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_variant_pricing_failure_becomes_warning(self, mock_shopify_client, sample_request,
                                                           created_product_response):
        router, _ = _graphql_router(created_product_response, variant_errors=[{"message": "price invalid"}])
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        result = await ShopifyPublisher(mock_shopify_client).create_product_with_media(sample_request)

        assert len(result.warnings) == 1
        assert "price invalid" in result.warnings[0]
        assert len(result.media) == 3

    @pytest.mark.asyncio
    async def test_no_images(self, mock_shopify_client, created_product_response):
        request = ProductRequest(title="T", description="D", marketplace=Marketplace.SHOPIFY)
        router, calls = _graphql_router(created_product_response)
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)

        result = await ShopifyPublisher(mock_shopify_client).create_product_with_media(request)

        assert result.media == []
        assert result.total_images == 0
        assert _operations(calls) == ["publications", "productCreate"]


# ---------------------------------------------------------------------------
# Variant pricing and inventory
# ---------------------------------------------------------------------------

class TestApplyVariantPricing:

    @pytest.mark.asyncio
    async def test_inventory_set_at_first_location(self, mock_shopify_client, created_product_response):
        request = ProductRequest(title="T", description="D", marketplace=Marketplace.SHOPIFY, inventory=12)
        router, calls = _graphql_router(created_product_response)
        mock_shopify_client.call_shopify_graphql = AsyncMock(side_effect=router)
        product = created_product_response["productCreate"]["product"]

        warnings = await ShopifyPublisher(mock_shopify_client).apply_variant_pricing(product, request)

        assert warnings == []
        inventory_vars = next(v for q, v in calls if "inventorySetOnHandQuantities(" in q)
        quantity = inventory_vars["input"]["setQuantities"][0]
        assert quantity == {
            "inventoryItemId": "gid://shopify/InventoryItem/3001",
            "locationId": "gid://shopify/Location/9",
            "quantity": 12,
        }
        assert inventory_vars["input"]["reason"] == "correction"

    @pytest.mark.asyncio
    async def test_nothing_requested(self, mock_shopify_client, created_product_response):
        request = ProductRequest(title="T", description="D", marketplace=Marketplace.SHOPIFY)
        product = created_product_response["productCreate"]["product"]

        warnings = await ShopifyPublisher(mock_shopify_client).apply_variant_pricing(product, request)

        assert warnings == []
        mock_shopify_client.call_shopify_graphql.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_variant_warns(self, mock_shopify_client):
        request = ProductRequest(title="T", description="D", marketplace=Marketplace.SHOPIFY, price=10)
        product = {"id": "gid://shopify/Product/1", "variants": {"nodes": []}}

        warnings = await ShopifyPublisher(mock_shopify_client).apply_variant_pricing(product, request)

        assert len(warnings) == 1

    @pytest.mark.asyncio
    async def test_variant_without_id_warns(self, mock_shopify_client):
        request = ProductRequest(title="T", description="D", marketplace=Marketplace.SHOPIFY, price=10)
        product = {"id": "gid://shopify/Product/1", "variants": {"nodes": [{"inventoryItem": None}]}}

        warnings = await ShopifyPublisher(mock_shopify_client).apply_variant_pricing(product, request)

        assert warnings == ["Variant pricing skipped: default variant has no id"]
        mock_shopify_client.call_shopify_graphql.assert_not_awaited()


# ---------------------------------------------------------------------------
# Single steps
# ---------------------------------------------------------------------------

class TestSteps:

    @pytest.mark.asyncio
    async def test_staged_upload_user_errors_raise(self, mock_shopify_client, sample_images):
        mock_shopify_client.call_shopify_graphql = AsyncMock(return_value={
            "stagedUploadsCreate": {"stagedTargets": [], "userErrors": [{"message": "too big"}]}
        })
        with pytest.raises(RemoteAPIError):
            await ShopifyPublisher(mock_shopify_client).generate_staged_upload(sample_images[0])

    @pytest.mark.asyncio
    async def test_get_product_with_media_uses_gid(self, mock_shopify_client):
        mock_shopify_client.call_shopify_graphql = AsyncMock(return_value={"product": {"id": "gid://shopify/Product/5"}})

        product = await ShopifyPublisher(mock_shopify_client).get_product_with_media("5")

        assert product == {"id": "gid://shopify/Product/5"}
        args = mock_shopify_client.call_shopify_graphql.call_args.args
        assert args[1] == {"id": "gid://shopify/Product/5"}
