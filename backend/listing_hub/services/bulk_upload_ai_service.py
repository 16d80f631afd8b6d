"""
Bulk upload with AI — title and description generated from each row's images.

CSV columns: id, folderpath (both required). The first image in the
folder is analyzed; every image is uploaded. Caller-supplied tags and
features replace the AI suggestions rather than merging with them.
"""
import logging
from typing import List, Optional

from listing_hub.core.exceptions import NotConfiguredError
from listing_hub.schemas.batches import BatchReport, BatchRowResult
from listing_hub.schemas.products import BulkDefaults, ProductAnalysis
from listing_hub.services.ai_vision_service import AIVisionService
from listing_hub.services.bulk_upload_service import ImageLoader
from listing_hub.services.product_service import (
    ProductService,
    build_product_request,
    parse_marketplace,
)
from listing_hub.utils.csv_parser import parse_csv
from listing_hub.utils.image_loader import load_images_from_folder

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields (id or folderPath)"


def merge_ai_content(analysis: ProductAnalysis, defaults: BulkDefaults) -> dict:
    """Tags and features: caller defaults when given, else the AI suggestions."""
    return {
        "tags": defaults.tags if (defaults.tags or "").strip() else analysis.suggested_tags,
        "features": defaults.features if (defaults.features or "").strip() else analysis.features,
    }


class BulkUploadAIService:
    def __init__(
        self,
        product_service: ProductService,
        ai_vision: AIVisionService,
        image_loader: ImageLoader = load_images_from_folder,
    ) -> None:
        self._products = product_service
        self._ai = ai_vision
        self._load_images = image_loader

    async def process_bulk_upload_with_ai(
        self,
        csv_content: bytes,
        marketplace: str,
        defaults: Optional[BulkDefaults] = None,
    ) -> BatchReport:
        if not self._ai.is_configured():
            raise NotConfiguredError()

        market = parse_marketplace(marketplace)
        rows = parse_csv(csv_content)
        defaults = defaults or BulkDefaults()
        logger.info(f"Bulk AI upload: {len(rows)} products for {market.value}")

        results: List[BatchRowResult] = []
        for index, row in enumerate(rows, start=1):
            product_id = (row.get("id") or "").strip()
            folder = (row.get("folderpath") or "").strip()
            logger.info(f"Processing product ID: {product_id or f'row {index}'} with AI")

            if not product_id or not folder:
                logger.error(f"Row {index} skipped: {MISSING_FIELDS_MESSAGE}")
                results.append(BatchRowResult(
                    row=index,
                    key=product_id or "Unknown",
                    product_title="Unknown",
                    success=False,
                    error=MISSING_FIELDS_MESSAGE,
                ))
                continue

            analysis: Optional[ProductAnalysis] = None
            try:
                images = self._load_images(folder)
                analysis = await self._ai.analyze_product_image(images[0].content, images[0].mime_type)
                logger.info(f"AI analysis complete for {product_id}: {analysis.title}")

                request = build_product_request(
                    title=analysis.title,
                    description=analysis.description,
                    marketplace=market,
                    price=defaults.price,
                    compare_at_price=defaults.compare_at_price,
                    inventory=defaults.inventory,
                    images=images,
                    **merge_ai_content(analysis, defaults),
                )
                outcome = await self._products.publish(request)
            except Exception as exc:
                logger.error(f"Failed to create product {product_id}: {exc}")
                results.append(BatchRowResult(
                    row=index,
                    key=product_id,
                    product_title=analysis.title if analysis else "Unknown",
                    success=False,
                    error=str(exc),
                    ai_analysis=analysis.model_dump(by_alias=True) if analysis else None,
                ))
                continue

            results.append(BatchRowResult(
                row=index,
                key=product_id,
                product_title=analysis.title,
                success=True,
                data=outcome.model_dump(by_alias=True),
                ai_analysis=analysis.model_dump(by_alias=True),
            ))
            logger.info(f"Successfully created product {product_id}: {analysis.title}")

        report = BatchReport.from_results(results, "Bulk upload with AI")
        logger.info(report.message)
        return report
