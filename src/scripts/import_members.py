"""Import member records from a CSV file (or a JSON export) into a collection.

Usage:
    members-import members.csv [collection] [--all] [--create-schema]
    python -m scripts.import_members members.csv members

Rows are written in batches of 500, each committed on its own. A failing
batch stops the run; batches committed before it stay in the store.
"""

import argparse
import asyncio
import sys
from collections.abc import Callable
from pathlib import Path

import structlog

from core.logging import setup_logging
from domain.entities.document import Document
from domain.repositories.unit_of_work import IUnitOfWork
from scripts.records import has_profile, read_csv, read_json, transform_record

logger = structlog.get_logger()

BATCH_SIZE = 500
DEFAULT_COLLECTION = "members"


def load_documents(path: Path, collection: str, require_profile: bool = True) -> list[Document]:
    """Read, filter and transform the records of a CSV or JSON file."""
    if path.suffix.lower() == ".json":
        raw = read_json(path)
    else:
        raw = [(None, record) for record in read_csv(path)]
    logger.info("import_records_parsed", path=str(path), count=len(raw))

    if require_profile:
        raw = [(doc_id, record) for doc_id, record in raw if has_profile(record)]
        logger.info("import_records_filtered", count=len(raw))

    documents = []
    for doc_id, record in raw:
        document = Document(collection=collection, data=transform_record(record))
        if doc_id:
            document.id = doc_id
        documents.append(document)
    return documents


async def upload(
    documents: list[Document],
    uow_factory: Callable[[], IUnitOfWork],
    batch_size: int = BATCH_SIZE,
) -> int:
    """Write documents in committed batches and return how many were written."""
    processed = 0
    while processed < len(documents):
        chunk = documents[processed : processed + batch_size]
        async with uow_factory() as uow:
            await uow.documents.add_many(chunk)
            await uow.commit()
        processed += len(chunk)
        logger.info("import_batch_committed", uploaded=processed, total=len(documents))
    return processed


async def import_members(
    path: Path,
    collection: str,
    uow_factory: Callable[[], IUnitOfWork],
    require_profile: bool = True,
    batch_size: int = BATCH_SIZE,
) -> int:
    """Import a file into a collection. Returns the number of documents written."""
    logger.info("import_started", path=str(path), collection=collection)
    documents = load_documents(path, collection, require_profile=require_profile)
    written = await upload(documents, uow_factory, batch_size=batch_size)
    logger.info("import_completed", collection=collection, written=written)
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import member records into a collection")
    parser.add_argument("path", type=Path, help="CSV file, or a JSON export")
    parser.add_argument(
        "collection",
        nargs="?",
        default=DEFAULT_COLLECTION,
        help=f"Target collection (default: {DEFAULT_COLLECTION})",
    )
    parser.add_argument(
        "--all",
        dest="require_profile",
        action="store_false",
        help="Keep rows without an avatar and a bio or headline",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create the documents table if it does not exist",
    )
    return parser


async def _run(args: argparse.Namespace) -> int:
    from infrastructure.database.models import Base
    from infrastructure.database.session import async_session_factory, engine
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    try:
        if args.create_schema:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        return await import_members(
            args.path,
            args.collection,
            lambda: SQLAlchemyUnitOfWork(async_session_factory),
            require_profile=args.require_profile,
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
        logger.exception("import_failed", path=str(args.path), collection=args.collection)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
