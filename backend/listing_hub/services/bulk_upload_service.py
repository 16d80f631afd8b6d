"""
Bulk upload service — one product per CSV row, images from a local folder.

CSV columns (headers are normalized, so "Folder Path" == "folderpath"):
    title, description, folderpath          required
    price, compareatprice, inventory        optional numbers
    tags, features                          optional text

A row value wins over the matching bulk default. Each row succeeds or
fails on its own; the CSV itself failing to parse fails the request.
"""
import logging
from typing import Callable, Dict, List, Optional

from listing_hub.schemas.batches import BatchReport, BatchRowResult
from listing_hub.schemas.products import BulkDefaults, ImageAsset
from listing_hub.services.product_service import ProductService, parse_marketplace
from listing_hub.utils.csv_parser import parse_csv
from listing_hub.utils.image_loader import load_images_from_folder
from listing_hub.utils.type_converters import blank_to_none

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields (title, description, or folderPath)"

ImageLoader = Callable[[str], List[ImageAsset]]


def _row_or_default(row: Dict[str, str], column: str, default):
    value = blank_to_none(row.get(column))
    return value if value is not None else default


class BulkUploadService:
    def __init__(
        self,
        product_service: ProductService,
        image_loader: ImageLoader = load_images_from_folder,
    ) -> None:
        self._products = product_service
        self._load_images = image_loader

    async def process_bulk_upload(
        self,
        csv_content: bytes,
        marketplace: str,
        defaults: Optional[BulkDefaults] = None,
    ) -> BatchReport:
        market = parse_marketplace(marketplace)
        rows = parse_csv(csv_content)
        defaults = defaults or BulkDefaults()
        logger.info(f"Bulk upload: {len(rows)} products for {market.value}")

        results: List[BatchRowResult] = []
        for index, row in enumerate(rows, start=1):
            title = (row.get("title") or "").strip()
            logger.info(f"Processing product: {title or f'row {index}'}")

            if not title or not (row.get("description") or "").strip() or not (row.get("folderpath") or "").strip():
                logger.error(f"Row {index} skipped: {MISSING_FIELDS_MESSAGE}")
                results.append(BatchRowResult(
                    row=index,
                    key=title or "Unknown",
                    product_title=title or "Unknown",
                    success=False,
                    error=MISSING_FIELDS_MESSAGE,
                ))
                continue

            try:
                images = self._load_images(row["folderpath"].strip())
                outcome = await self._products.create_product(
                    title=title,
                    description=row.get("description"),
                    marketplace=market,
                    price=_row_or_default(row, "price", defaults.price),
                    compare_at_price=_row_or_default(row, "compareatprice", defaults.compare_at_price),
                    inventory=_row_or_default(row, "inventory", defaults.inventory),
                    tags=_row_or_default(row, "tags", defaults.tags),
                    features=_row_or_default(row, "features", defaults.features),
                    images=images,
                )
            except Exception as exc:
                logger.error(f"Failed to create product {title}: {exc}")
                results.append(BatchRowResult(
                    row=index, key=title, product_title=title, success=False, error=str(exc),
                ))
                continue

            results.append(BatchRowResult(
                row=index,
                key=title,
                product_title=title,
                success=True,
                data=outcome.model_dump(by_alias=True),
            ))
            logger.info(f"Successfully created product: {title}")

        report = BatchReport.from_results(results, "Bulk upload")
        logger.info(report.message)
        return report
