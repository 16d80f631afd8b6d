"""
Product routes — single, AI-assisted, bulk and meta-update endpoints.

Provides:
- POST /products                  – create product from form fields + images
- POST /products/analyze-image    – AI suggestions for uploaded images
- POST /products/create-with-ai   – analyze, then create with optional overrides
- GET  /products/ai-status        – AI vision configuration/connectivity
- POST /products/bulk-upload      – CSV of products, images from local folders
- POST /products/bulk-upload-ai   – CSV of ids + folders, content from AI
- POST /products/meta-update      – CSV of page URLs with SEO title/description

Request-level failures raise Listing Hub exceptions; the app-wide
handler renders them as a 400 `{success, message, error}` body.
"""
import logging
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import ValidationError as PydanticValidationError

from listing_hub.container import (
    get_ai_vision_service,
    get_bulk_upload_ai_service,
    get_bulk_upload_service,
    get_meta_update_service,
    get_product_service,
)
from listing_hub.core.config import settings
from listing_hub.core.exceptions import ValidationError
from listing_hub.schemas.products import BulkDefaults, ImageAsset
from listing_hub.services.ai_vision_service import AIVisionService
from listing_hub.services.bulk_upload_ai_service import BulkUploadAIService
from listing_hub.services.bulk_upload_service import BulkUploadService
from listing_hub.services.meta_update_service import MetaUpdateService
from listing_hub.services.product_service import ProductService, build_product_request
from listing_hub.utils.image_loader import get_mime_type
from listing_hub.utils.type_converters import blank_to_none, to_float, to_int

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

async def read_images(files: Optional[List[UploadFile]], required: bool = False) -> List[ImageAsset]:
    files = [f for f in (files or []) if f is not None and f.filename]
    if required and not files:
        raise ValidationError("Please upload at least one image")
    if len(files) > settings.max_upload_images:
        raise ValidationError(
            f"Too many images: {len(files)} uploaded (max {settings.max_upload_images})"
        )

    images: List[ImageAsset] = []
    for upload in files:
        content = await upload.read()
        mime_type = upload.content_type or get_mime_type(os.path.splitext(upload.filename)[1])
        images.append(ImageAsset(content=content, filename=upload.filename, mime_type=mime_type))
    return images


async def read_csv(csv_file: Optional[UploadFile]) -> bytes:
    if csv_file is None or not csv_file.filename:
        raise ValidationError("Please upload a CSV file")
    return await csv_file.read()


def require_marketplace(marketplace: Optional[str]) -> str:
    if not (marketplace or "").strip():
        raise ValidationError("Marketplace is required")
    return marketplace


def build_bulk_defaults(
    price: Optional[str],
    compare_at_price: Optional[str],
    inventory: Optional[str],
    tags: Optional[str],
    features: Optional[str],
) -> BulkDefaults:
    try:
        return BulkDefaults(
            price=to_float(price, "bulkPrice"),
            compare_at_price=to_float(compare_at_price, "bulkCompareAtPrice"),
            inventory=to_int(inventory, "bulkInventory"),
            tags=blank_to_none(tags),
            features=blank_to_none(features),
        )
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid bulk defaults: {exc.errors()[0].get('msg')}") from exc


# ---------------------------------------------------------------------------
# Single product
# ---------------------------------------------------------------------------

@router.post("")
async def create_product(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    marketplace: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    compare_at_price: Optional[str] = Form(None, alias="compareAtPrice"),
    inventory: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    product_service: ProductService = Depends(get_product_service),
):
    """Create a product from manually entered fields."""
    assets = await read_images(images)
    result = await product_service.create_product(
        title=title,
        description=description,
        marketplace=marketplace,
        price=price,
        compare_at_price=compare_at_price,
        inventory=inventory,
        tags=tags,
        features=features,
        images=assets,
    )
    return {
        "success": True,
        "data": result.model_dump(by_alias=True),
        "message": "Product created successfully",
    }


# ---------------------------------------------------------------------------
# AI assisted
# ---------------------------------------------------------------------------

@router.post("/analyze-image")
async def analyze_product_image(
    images: Optional[List[UploadFile]] = File(None),
    ai_vision: AIVisionService = Depends(get_ai_vision_service),
):
    """Suggest product content from the first uploaded image."""
    assets = await read_images(images, required=True)
    analysis = await ai_vision.analyze_multiple_images(assets)
    return {
        "success": True,
        "analysis": analysis.model_dump(by_alias=True),
        "imageCount": len(assets),
        "message": "Product image analyzed successfully",
    }


@router.post("/create-with-ai")
async def create_product_with_ai(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    marketplace: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    compare_at_price: Optional[str] = Form(None, alias="compareAtPrice"),
    inventory: Optional[str] = Form(None),
    tags: Optional[str] = Form(None),
    features: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    ai_vision: AIVisionService = Depends(get_ai_vision_service),
    product_service: ProductService = Depends(get_product_service),
):
    """
    Analyze the uploaded images, then create the product.

    Any field supplied in the form overrides the AI suggestion;
    marketplace defaults to shopify.
    """
    assets = await read_images(images, required=True)
    analysis = await ai_vision.analyze_multiple_images(assets)

    request = build_product_request(
        title=blank_to_none(title) or analysis.title,
        description=blank_to_none(description) or analysis.description,
        marketplace=blank_to_none(marketplace) or "shopify",
        price=price,
        compare_at_price=compare_at_price,
        inventory=inventory,
        tags=blank_to_none(tags) or analysis.suggested_tags,
        features=blank_to_none(features) or analysis.features,
        images=assets,
    )
    result = await product_service.publish(request)
    return {
        "success": True,
        "data": result.model_dump(by_alias=True),
        "aiAnalysis": analysis.model_dump(by_alias=True),
        "message": "Product created successfully with AI assistance",
    }


@router.get("/ai-status")
async def get_ai_status(ai_vision: AIVisionService = Depends(get_ai_vision_service)):
    status = await ai_vision.test_connection()
    return {"configured": ai_vision.is_configured(), **status}


# ---------------------------------------------------------------------------
# Bulk
# ---------------------------------------------------------------------------

@router.post("/bulk-upload")
async def bulk_upload_products(
    csv_file: Optional[UploadFile] = File(None, alias="csvFile"),
    marketplace: Optional[str] = Form(None),
    bulk_price: Optional[str] = Form(None, alias="bulkPrice"),
    bulk_compare_at_price: Optional[str] = Form(None, alias="bulkCompareAtPrice"),
    bulk_inventory: Optional[str] = Form(None, alias="bulkInventory"),
    bulk_tags: Optional[str] = Form(None, alias="bulkTags"),
    bulk_features: Optional[str] = Form(None, alias="bulkFeatures"),
    bulk_upload: BulkUploadService = Depends(get_bulk_upload_service),
):
    content = await read_csv(csv_file)
    defaults = build_bulk_defaults(bulk_price, bulk_compare_at_price, bulk_inventory, bulk_tags, bulk_features)
    report = await bulk_upload.process_bulk_upload(content, require_marketplace(marketplace), defaults)
    return report.model_dump(by_alias=True)


@router.post("/bulk-upload-ai")
async def bulk_upload_products_with_ai(
    csv_file: Optional[UploadFile] = File(None, alias="csvFile"),
    marketplace: Optional[str] = Form(None),
    bulk_price: Optional[str] = Form(None, alias="bulkPrice"),
    bulk_compare_at_price: Optional[str] = Form(None, alias="bulkCompareAtPrice"),
    bulk_inventory: Optional[str] = Form(None, alias="bulkInventory"),
    bulk_tags: Optional[str] = Form(None, alias="bulkTags"),
    bulk_features: Optional[str] = Form(None, alias="bulkFeatures"),
    bulk_upload_ai: BulkUploadAIService = Depends(get_bulk_upload_ai_service),
):
    content = await read_csv(csv_file)
    defaults = build_bulk_defaults(bulk_price, bulk_compare_at_price, bulk_inventory, bulk_tags, bulk_features)
    report = await bulk_upload_ai.process_bulk_upload_with_ai(content, require_marketplace(marketplace), defaults)
    return report.model_dump(by_alias=True)


@router.post("/meta-update")
async def meta_update(
    csv_file: Optional[UploadFile] = File(None, alias="csvFile"),
    marketplace: Optional[str] = Form(None),
    meta_updates: MetaUpdateService = Depends(get_meta_update_service),
):
    content = await read_csv(csv_file)
    report = await meta_updates.process_meta_updates(content, require_marketplace(marketplace))
    return report.model_dump(by_alias=True)
