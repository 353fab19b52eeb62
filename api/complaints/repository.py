"""
Complaint document persistence.

The "collection" is a Postgres table of jsonb documents:
- <collection>(id bigserial, document jsonb, inserted_at timestamptz)

Documents are appended as-is. There is no uniqueness constraint, so writing
the same page twice stores it twice.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import asyncpg

from core import db, settings
from core.errors import InsertError

logger = logging.getLogger(__name__)


def _json_arg(value: dict[str, Any]) -> str:
    """
    asyncpg does not automatically encode Python dicts for json/jsonb parameters.
    We pass JSON as a string and cast to jsonb in SQL.
    """
    return json.dumps(value, ensure_ascii=False)


async def ensure_collection() -> None:
    collection = settings.document_collection()
    await db.execute(
        f"""
        CREATE TABLE IF NOT EXISTS {collection} (
          id bigserial PRIMARY KEY,
          document jsonb NOT NULL,
          inserted_at timestamptz NOT NULL DEFAULT now()
        )
        """
    )


async def insert_documents(documents: Sequence[dict[str, Any]]) -> int:
    """
    Append a batch of documents in a single transaction.

    Returns the number of documents written. The batch is all-or-nothing.
    """
    if not documents:
        raise InsertError("Failed to append data to the document store", details="empty batch")

    collection = settings.document_collection()
    records = [(_json_arg(doc),) for doc in documents]

    try:
        pool = db.pool()
        async with pool.acquire() as conn:  # type: asyncpg.Connection
            async with conn.transaction():
                await conn.executemany(
                    f"INSERT INTO {collection} (document) VALUES ($1::jsonb)",
                    records,
                )
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, TypeError, ValueError) as exc:
        logger.error("insert_failed collection=%s batch=%s error=%s", collection, len(records), exc)
        raise InsertError("Failed to append data to the document store", details=str(exc)) from exc

    return len(records)
