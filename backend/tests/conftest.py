"""
Pytest configuration and shared fixtures for Listing Hub tests.

Provides mock clients, services, settings and sample test data.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from listing_hub.schemas.products import ImageAsset, Marketplace, ProductAnalysis, ProductRequest


# ---------------------------------------------------------------------------
# FastAPI test client
# ---------------------------------------------------------------------------

@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    from listing_hub.main import app
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from listing_hub.core.config import Settings
    return Settings(
        shopify_store_domain="test-store.myshopify.com",
        shopify_access_token="shpat_test_token",
        shopify_api_version="2024-01",
        gemini_api_key="test-gemini-key",
        gemini_model="gemini-2.5-flash",
        max_upload_images=10,
        log_level="INFO",
    )


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_client():
    """Mocked ShopifyClient (HTTP transport only)."""
    client = MagicMock()
    client.call_shopify = AsyncMock(return_value={})
    client.call_shopify_graphql = AsyncMock(return_value={})
    client.upload_to_staged_target = AsyncMock(return_value=None)
    client.to_gid = MagicMock(
        side_effect=lambda entity, val: val if str(val).startswith("gid://") else f"gid://shopify/{entity}/{val}"
    )
    return client


@pytest.fixture
def mock_gemini_client():
    """Mocked GeminiClient."""
    client = MagicMock()
    client.model_name = "gemini-2.5-flash"
    client.generate_content = AsyncMock(return_value="{}")
    return client


# ---------------------------------------------------------------------------
# Services (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_product_service():
    service = MagicMock()
    service.create_product = AsyncMock()
    service.publish = AsyncMock()
    return service


@pytest.fixture
def mock_ai_vision():
    service = MagicMock()
    service.is_configured = MagicMock(return_value=True)
    service.analyze_product_image = AsyncMock()
    service.analyze_multiple_images = AsyncMock()
    service.test_connection = AsyncMock(return_value={"success": True, "message": "AI Vision is working!"})
    return service


@pytest.fixture
def mock_shopify_meta():
    service = MagicMock()
    service.update_product_seo = AsyncMock(return_value={"id": "gid://shopify/Product/1"})
    service.update_collection_seo = AsyncMock(return_value={"id": "gid://shopify/Collection/1"})
    return service


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_images():
    """Three small in-memory images."""
    return [
        ImageAsset(content=b"\x89PNG-one", filename="front.png", mime_type="image/png"),
        ImageAsset(content=b"\xff\xd8-two", filename="side.jpg", mime_type="image/jpeg"),
        ImageAsset(content=b"GIF89a-three", filename="back.gif", mime_type="image/gif"),
    ]


@pytest.fixture
def sample_request(sample_images):
    return ProductRequest(
        title="Blue Cotton Shirt",
        description="Soft cotton shirt.",
        marketplace=Marketplace.SHOPIFY,
        price=50,
        compare_at_price=100,
        tags="shirt, cotton",
        features="Breathable\nMachine washable",
        images=sample_images,
    )


@pytest.fixture
def sample_analysis():
    return ProductAnalysis(
        title="AI Shirt",
        description="An AI-written description.",
        features=["Soft", "Durable"],
        category="Apparel",
        suggested_tags=["ai", "shirt"],
        confidence=0.9,
    )


@pytest.fixture
def created_product_response():
    """productCreate response with one default variant."""
    return {
        "productCreate": {
            "product": {
                "id": "gid://shopify/Product/1001",
                "title": "Blue Cotton Shirt",
                "handle": "blue-cotton-shirt",
                "status": "ACTIVE",
                "tags": ["shirt", "cotton"],
                "metafields": {"nodes": []},
                "variants": {
                    "nodes": [
                        {
                            "id": "gid://shopify/ProductVariant/2001",
                            "inventoryItem": {"id": "gid://shopify/InventoryItem/3001"},
                        }
                    ]
                },
            },
            "userErrors": [],
        }
    }
