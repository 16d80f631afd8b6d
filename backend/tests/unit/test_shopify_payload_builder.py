"""
Unit tests for shopify_payload_builder pure functions.

Tests money formatting, description HTML conversion, the features
rich-text metafield, ProductInput assembly and variant updates.
"""
import json

import pytest

from listing_hub.schemas.products import ImageAsset, Marketplace, ProductRequest
from listing_hub.utils.shopify_payload_builder import (
    build_features_metafield,
    build_features_rich_text,
    build_media_input,
    build_product_input,
    build_staged_upload_input,
    build_variant_update,
    description_to_html,
    format_money,
)


pytestmark = pytest.mark.unit


def _request(**overrides):
    data = {
        "title": "Shirt",
        "description": "Plain text",
        "marketplace": Marketplace.SHOPIFY,
    }
    data.update(overrides)
    return ProductRequest(**data)


# ---------------------------------------------------------------------------
# format_money / description_to_html
# ---------------------------------------------------------------------------

class TestFormatMoney:

    def test_two_decimals(self):
        assert format_money(50) == "50.00"

    def test_none(self):
        assert format_money(None) is None


class TestDescriptionToHtml:

    def test_plain_text_wrapped_and_escaped(self):
        assert description_to_html("Fish & Chips") == "<p>Fish &amp; Chips</p>"

    def test_paragraphs_and_line_breaks(self):
        result = description_to_html("First line\nsecond line\n\nNext paragraph")
        assert result == "<p>First line<br>second line</p><p>Next paragraph</p>"

    def test_existing_html_passes_through(self):
        html = "<p>Already <strong>HTML</strong></p>"
        assert description_to_html(html) == html


# ---------------------------------------------------------------------------
# Features metafield
# ---------------------------------------------------------------------------

class TestFeaturesMetafield:

    def test_rich_text_structure(self):
        doc = build_features_rich_text(["Soft", "Warm"])
        assert doc["type"] == "root"
        lst = doc["children"][0]
        assert lst["type"] == "list"
        assert lst["listType"] == "unordered"
        assert [item["children"][0]["value"] for item in lst["children"]] == ["Soft", "Warm"]
        assert all(item["type"] == "list-item" for item in lst["children"])

    def test_metafield_value_is_json_document(self):
        metafield = build_features_metafield(["Soft"])
        assert metafield["namespace"] == "custom"
        assert metafield["key"] == "features"
        assert metafield["type"] == "rich_text_field"
        assert json.loads(metafield["value"])["type"] == "root"

    def test_no_features_no_metafield(self):
        assert build_features_metafield([]) is None


# ---------------------------------------------------------------------------
# build_product_input
# ---------------------------------------------------------------------------

class TestBuildProductInput:
    """Tests for ProductInput assembly."""

    def test_minimal_input(self):
        product_input = build_product_input(_request())
        assert product_input == {
            "title": "Shirt",
            "descriptionHtml": "<p>Plain text</p>",
            "status": "ACTIVE",
            "tags": [],
        }

    def test_publications_and_features(self):
        request = _request(tags="a, b", features="One\nTwo")
        product_input = build_product_input(request, ["gid://shopify/Publication/1", "gid://shopify/Publication/2"])

        assert product_input["tags"] == ["a", "b"]
        assert product_input["productPublications"] == [
            {"publicationId": "gid://shopify/Publication/1"},
            {"publicationId": "gid://shopify/Publication/2"},
        ]
        assert len(product_input["metafields"]) == 1

    def test_empty_publication_list_omitted(self):
        assert "productPublications" not in build_product_input(_request(), [])


# ---------------------------------------------------------------------------
# Staged upload / media / variant
# ---------------------------------------------------------------------------

class TestUploadInputs:

    def test_staged_upload_input(self):
        image = ImageAsset(content=b"12345", filename="a.png", mime_type="image/png")
        assert build_staged_upload_input(image) == {
            "filename": "a.png",
            "mimeType": "image/png",
            "resource": "IMAGE",
            "httpMethod": "POST",
            "fileSize": "5",
        }

    def test_media_input_uses_filename_as_alt(self):
        media = build_media_input("https://cdn/resource", "a.png")
        assert media == {"originalSource": "https://cdn/resource", "alt": "a.png", "mediaContentType": "IMAGE"}


class TestBuildVariantUpdate:

    def test_price_and_compare_at(self):
        update = build_variant_update("gid://v/1", 50, 100)
        assert update == {"id": "gid://v/1", "price": "50.00", "compareAtPrice": "100.00"}

    def test_tracking_only(self):
        update = build_variant_update("gid://v/1", None, None, track_inventory=True)
        assert update == {"id": "gid://v/1", "inventoryItem": {"tracked": True}}

    def test_nothing_to_set(self):
        assert build_variant_update("gid://v/1", None, None) is None
