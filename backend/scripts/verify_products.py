#!/usr/bin/env python3
"""Verify catalog products and print the batch result as JSON.

Usage locally (from backend/):
    python -m scripts.verify_products --catalog data/catalog.json
    python -m scripts.verify_products --catalog data/catalog.json --page 2 --page-size 50
    python -m scripts.verify_products --catalog data/catalog.json --brand "SAMA OIL"
    python -m scripts.verify_products --catalog data/catalog.json --product-id 17
    python -m scripts.verify_products --catalog data/catalog.json --json-logs

Visual recognition runs only when RECOGNITION_API_KEY is set; without it
images are judged on their filename alone.

Exit status: 0 when every verified product passed, 1 when any product is
unverified, 2 on bad input (missing or malformed catalog, unknown product id,
invalid paging).
"""

import argparse
import json
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pydantic import ValidationError

from catalog_verifier.config import Settings
from catalog_verifier.facade import VerificationFacade
from catalog_verifier.logging_config import get_logger, setup_logging
from catalog_verifier.schemas.pipeline import BatchVerificationResult, PageRequest, ProductFilter

logger = get_logger("verify_products")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Verify catalog products for internal consistency.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--catalog",
        default=None,
        help="Catalog JSON file (default: CATALOG_PATH setting)",
    )
    parser.add_argument("--page", type=int, default=1, help="Page number, 1-based (default: 1)")
    parser.add_argument("--page-size", type=int, default=None, help="Products per page")
    parser.add_argument("--brand", default=None, help="Only products of this brand")
    parser.add_argument("--search", default=None, help="Substring of product name or classification")
    parser.add_argument("--include-deleted", action="store_true", help="Include soft-deleted products")
    parser.add_argument("--product-id", default=None, help="Verify a single product by id")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON on stderr")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    settings = Settings()
    if args.catalog:
        settings.catalog_path = args.catalog

    setup_logging(json_logs=args.json_logs or settings.json_logs, log_level=settings.log_level)

    if not Path(settings.catalog_path).is_file():
        logger.error("catalog_not_found", path=settings.catalog_path)
        return 2

    with VerificationFacade(settings) as facade:
        try:
            facade.repository  # load now so a malformed catalog is reported as bad input
        except (ValueError, ValidationError) as e:
            logger.error("catalog_invalid", path=settings.catalog_path, error=str(e))
            return 2

        if args.product_id is not None:
            item = facade.verify_product_id(args.product_id)
            if item is None:
                logger.error("product_not_found", product_id=args.product_id)
                return 2
            result = BatchVerificationResult(
                items=[item], summary=BatchVerificationResult.summarize([item])
            )
        else:
            try:
                paging = PageRequest(page=args.page, page_size=args.page_size or settings.default_page_size)
                product_filter = ProductFilter(
                    brand_name=args.brand,
                    search=args.search,
                    include_deleted=args.include_deleted,
                )
            except ValidationError as e:
                logger.error("invalid_arguments", errors=e.errors(include_url=False))
                return 2
            result = facade.verify_page(product_filter, page=paging.page, page_size=paging.page_size)

    print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))

    logger.info("verification_finished", **result.summary)
    return 0 if result.summary.get("unverified", 0) == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
