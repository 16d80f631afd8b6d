"""
Meta update service — bulk SEO title/description updates from a CSV.

CSV columns: pageurl, metatitle, metadescription. The page URL decides
what is updated: `/collections/<handle>` or `/products/<handle>`.
Rows with an empty page URL are skipped and not counted.
"""
import logging
from typing import List, Optional, Tuple
from urllib.parse import unquote, urlparse

from listing_hub.core.exceptions import InvalidURLFormatError, UnsupportedMarketplaceError
from listing_hub.schemas.batches import BatchReport, BatchRowResult
from listing_hub.schemas.products import Marketplace
from listing_hub.services.product_service import parse_marketplace
from listing_hub.services.shopify_meta_service import ShopifyMetaService
from listing_hub.utils.csv_parser import parse_csv

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields (pageurl, metatitle, or metadescription)"

RESOURCE_SEGMENTS = {
    "collections": "collection",
    "products": "product",
}


def parse_page_url(url: str) -> Tuple[str, str]:
    """Classify a storefront URL.

    'https://shop.example/collections/summer?x=1' -> ('collection', 'summer')

    Raises:
        InvalidURLFormatError: no /collections/<handle> or /products/<handle> in the path.
    """
    path = urlparse(url.strip()).path if "://" in url else url.strip().split("?")[0].split("#")[0]
    segments = [s for s in path.split("/") if s]
    for position, segment in enumerate(segments[:-1]):
        resource_type = RESOURCE_SEGMENTS.get(segment.lower())
        if resource_type:
            return resource_type, unquote(segments[position + 1])
    raise InvalidURLFormatError(url)


class MetaUpdateService:
    def __init__(self, shopify_meta: ShopifyMetaService) -> None:
        self._shopify = shopify_meta

    async def update_meta(
        self,
        marketplace: Marketplace,
        resource_type: str,
        handle: str,
        meta_title: str,
        meta_description: str,
    ) -> dict:
        if marketplace != Marketplace.SHOPIFY:
            raise UnsupportedMarketplaceError(marketplace.value, "meta updates")
        if resource_type == "collection":
            return await self._shopify.update_collection_seo(handle, meta_title, meta_description)
        return await self._shopify.update_product_seo(handle, meta_title, meta_description)

    async def process_meta_updates(self, csv_content: bytes, marketplace: str) -> BatchReport:
        market = parse_marketplace(marketplace)
        rows = parse_csv(csv_content)
        logger.info(f"Meta update: {len(rows)} rows for {market.value}")

        results: List[BatchRowResult] = []
        for index, row in enumerate(rows, start=1):
            url = (row.get("pageurl") or "").strip()
            if not url:
                logger.info(f"Row {index} has no page URL, skipping")
                continue

            meta_title = (row.get("metatitle") or "").strip()
            meta_description = (row.get("metadescription") or "").strip()
            if not meta_title or not meta_description:
                results.append(BatchRowResult(row=index, key=url, success=False, error=MISSING_FIELDS_MESSAGE))
                continue

            resource_type: Optional[str] = None
            handle: Optional[str] = None
            try:
                resource_type, handle = parse_page_url(url)
                logger.info(f'Updating {resource_type}: {handle} with meta title: "{meta_title}"')
                updated = await self.update_meta(market, resource_type, handle, meta_title, meta_description)
            except Exception as exc:
                logger.error(f"Failed to update {url}: {exc}")
                results.append(BatchRowResult(
                    row=index,
                    key=url,
                    success=False,
                    error=str(exc),
                    resource_type=resource_type,
                    handle=handle,
                ))
                continue

            results.append(BatchRowResult(
                row=index,
                key=url,
                success=True,
                data=updated,
                resource_type=resource_type,
                handle=handle,
            ))
            logger.info(f"Successfully updated meta for {resource_type}: {handle}")

        report = BatchReport.from_results(results, "Meta update")
        logger.info(report.message)
        return report
