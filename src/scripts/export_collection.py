"""Export every document of a collection to timestamped JSON and CSV files.

Usage:
    members-export <collection> [--output-dir DIR]
"""

import argparse
import asyncio
import csv
import json
import sys
from collections.abc import Callable
from pathlib import Path

import structlog

from core.logging import setup_logging
from core.timestamps import utc_now_z
from domain.repositories.unit_of_work import IUnitOfWork
from scripts.records import export_columns, flatten_for_export

logger = structlog.get_logger()


def export_stamp() -> str:
    """Filename-safe UTC timestamp."""
    return utc_now_z().replace(":", "-").replace(".", "-")


async def export_collection(
    collection: str,
    output_dir: Path,
    uow_factory: Callable[[], IUnitOfWork],
) -> tuple[Path, Path] | None:
    """Write ``<collection>_export_<stamp>.json`` and ``.csv``.

    Returns the two paths, or None when the collection is empty.
    """
    logger.info("export_started", collection=collection)
    async with uow_factory() as uow:
        documents = await uow.documents.get_all(collection)

    if not documents:
        logger.info("export_empty_collection", collection=collection)
        return None

    logger.info("export_documents_found", count=len(documents))
    rows = [flatten_for_export(doc.id, doc.data) for doc in documents]

    output_dir.mkdir(parents=True, exist_ok=True)
    stamp = export_stamp()
    json_path = output_dir / f"{collection}_export_{stamp}.json"
    csv_path = output_dir / f"{collection}_export_{stamp}.csv"

    json_path.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info("export_json_written", path=str(json_path))

    columns = export_columns(rows)
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=columns, restval="")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("export_csv_written", path=str(csv_path))

    logger.info("export_completed", collection=collection, count=len(rows))
    return json_path, csv_path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export a collection to JSON and CSV")
    parser.add_argument("collection", help="Collection to export")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the export files (default: current directory)",
    )
    return parser


async def _run(args: argparse.Namespace) -> None:
    from infrastructure.database.session import async_session_factory, engine
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    try:
        await export_collection(
            args.collection,
            args.output_dir,
            lambda: SQLAlchemyUnitOfWork(async_session_factory),
        )
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except Exception:
        logger.exception("export_failed", collection=args.collection)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
