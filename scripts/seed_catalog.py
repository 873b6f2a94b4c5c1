#!/usr/bin/env python3
"""Catalog maintenance script.

Seeds the sample catalog, imports products from a spreadsheet, or clears
the catalog in the configured store.

Usage:
    python scripts/seed_catalog.py seed
    python scripts/seed_catalog.py import products.xlsx
    python scripts/seed_catalog.py clear
"""

import argparse
import asyncio
import sys
from pathlib import Path

import structlog

from ordersheet.catalog.seed import sample_products
from ordersheet.catalog.service import CatalogService
from ordersheet.catalog.importer import parse_product_workbook
from ordersheet.catalog.models import ProductDraft
from ordersheet.catalog.store import create_catalog_store
from ordersheet.domain.exceptions import CatalogImportError
from ordersheet.infrastructure.config import settings
from ordersheet.infrastructure.database import create_tables, engine
from ordersheet.infrastructure.logging_config import configure_logging

logger = structlog.get_logger()


async def seed(service: CatalogService) -> dict:
    """Add the sample products, skipping codes already present."""
    drafts = [
        ProductDraft(code=p.code, name=p.name, name2=p.name2, size_code=p.size_code)
        for p in sample_products()
    ]
    result = await service.add_many(drafts)
    return {"added": result.added_count, "duplicates": result.duplicate_codes}


async def import_file(service: CatalogService, path: Path) -> dict:
    """Import products from an .xlsx file."""
    drafts = parse_product_workbook(path.read_bytes(), filename=path.name)
    result = await service.add_many(drafts)
    return {"added": result.added_count, "duplicates": result.duplicate_codes}


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Maintain the order desk catalog")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("seed", help="Add the sample apparel catalog")
    import_parser = subparsers.add_parser("import", help="Import products from an .xlsx file")
    import_parser.add_argument("path", type=Path, help="Spreadsheet to import")
    subparsers.add_parser("clear", help="Delete every product")

    args = parser.parse_args()
    configure_logging(json_output=False)

    if settings.storage_backend == "sql":
        await create_tables()

    service = CatalogService(create_catalog_store())

    try:
        if args.command == "seed":
            result = await seed(service)
        elif args.command == "import":
            result = await import_file(service, args.path)
        else:
            await service.delete_all()
            result = {"cleared": True}
    except CatalogImportError as e:
        logger.error("Import failed", reason=e.details["reason"], path=str(args.path))
        return 1
    finally:
        if settings.storage_backend == "sql":
            await engine.dispose()

    logger.info("Catalog updated", command=args.command, **result)
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
