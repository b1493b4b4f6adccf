"""Delete every document of a collection in batches of 500.

Usage:
    members-clear [collection]
"""

import argparse
import asyncio
import sys
from collections.abc import Callable

import structlog

from core.logging import setup_logging
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

BATCH_SIZE = 500
DEFAULT_COLLECTION = "members"


async def clear_collection(
    collection: str,
    uow_factory: Callable[[], IUnitOfWork],
    batch_size: int = BATCH_SIZE,
) -> int:
    """Delete documents batch by batch until none are left. Returns the count."""
    logger.info("clear_started", collection=collection)
    total_deleted = 0
    while True:
        async with uow_factory() as uow:
            deleted = await uow.documents.delete_batch(collection, batch_size)
            if not deleted:
                break
            await uow.commit()
        total_deleted += deleted
        logger.info("clear_batch_committed", collection=collection, deleted=total_deleted)

    logger.info("clear_completed", collection=collection, deleted=total_deleted)
    return total_deleted


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Delete all documents of a collection")
    parser.add_argument(
        "collection",
        nargs="?",
        default=DEFAULT_COLLECTION,
        help=f"Collection to clear (default: {DEFAULT_COLLECTION})",
    )
    return parser


async def _run(args: argparse.Namespace) -> None:
    from infrastructure.database.session import async_session_factory, engine
    from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork

    try:
        await clear_collection(args.collection, lambda: SQLAlchemyUnitOfWork(async_session_factory))
    finally:
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(_run(args))
    except Exception:
        logger.exception("clear_failed", collection=args.collection)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
