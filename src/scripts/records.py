"""Reading and shaping member records for import and export."""

import csv
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from core.timestamps import convert_timestamp, parse_timestamp

BOOLEAN_FIELDS = ("Active", "EmailMarketing", "Member")
COUNTER_FIELDS = ("Posts", "Comments", "LikesReceived")
DATE_FIELDS = ("JoinDate", "LastActive", "InvitationDate")
TAGS_FIELD = "Tags"
SEARCH_NAME_FIELD = "searchName"

_TRUE_STRINGS = frozenset({"true", "yes", "y", "1"})


def normalize_key(header: str) -> str:
    """Turn a CSV header into a document key: ``"Avatar URL"`` -> ``"AvatarURL"``."""
    return "".join(header.split())


def read_csv(path: Path) -> list[dict[str, str]]:
    """Read a CSV file with a header row, skipping blank lines."""
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return [
            {normalize_key(k): (v or "") for k, v in row.items() if k}
            for row in reader
            if any((v or "").strip() for v in row.values() if isinstance(v, str))
        ]


def read_json(path: Path) -> list[tuple[str | None, dict[str, Any]]]:
    """Read records from a JSON export.

    Accepts a list of objects (an ``id`` key is kept as the document id) or
    an object keyed by document id.
    """
    payload = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        return [(str(doc_id), dict(record)) for doc_id, record in payload.items()]
    if isinstance(payload, list):
        records = []
        for record in payload:
            record = dict(record)
            doc_id = record.pop("id", None)
            records.append((str(doc_id) if doc_id else None, record))
        return records
    raise ValueError(f"Unsupported JSON layout in {path}: expected a list or an object")


def has_profile(record: dict[str, Any]) -> bool:
    """True when a record has an avatar and either a bio or a headline."""
    avatar = str(record.get("AvatarURL") or "").strip()
    bio = str(record.get("Bio") or "").strip()
    headline = str(record.get("Headline") or "").strip()
    return bool(avatar) and (bool(bio) or bool(headline))


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _to_count(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return max(int(float(str(value).strip() or 0)), 0)
    except ValueError:
        return 0


def _to_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(",") if tag.strip()]
    if isinstance(value, Iterable):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return []


def build_search_name(first: str, last: str, email: str) -> str:
    """Lower-cased ``"first last"``, or the email when there is no name."""
    full_name = f"{first} {last}".strip()
    return (full_name or email).lower()


def transform_record(record: dict[str, Any]) -> dict[str, Any]:
    """Trim names, coerce typed fields and derive ``searchName``.

    Unknown keys are kept as they are. Dates that cannot be parsed are
    kept in their original form.
    """
    doc = {normalize_key(k): v for k, v in record.items()}

    first = str(doc.get("FirstName") or "").strip()
    last = str(doc.get("LastName") or "").strip()
    email = str(doc.get("Email") or "").strip()
    doc["FirstName"] = first
    doc["LastName"] = last
    doc["Email"] = email

    for key in BOOLEAN_FIELDS:
        if key in doc:
            doc[key] = _to_bool(doc[key])
    for key in COUNTER_FIELDS:
        if key in doc:
            doc[key] = _to_count(doc[key])
    for key in DATE_FIELDS:
        if key in doc:
            value = doc[key]
            if value in ("", None):
                doc[key] = None
            elif parse_timestamp(value) is not None:
                doc[key] = convert_timestamp(value)
    if TAGS_FIELD in doc:
        doc[TAGS_FIELD] = _to_tags(doc[TAGS_FIELD])

    doc[SEARCH_NAME_FIELD] = build_search_name(first, last, email)
    return doc


def flatten_for_export(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
    """Export row: timestamp mappings to canonical strings, lists joined by ", "."""
    row: dict[str, Any] = {"id": doc_id}
    for key, value in data.items():
        if isinstance(value, dict) and parse_timestamp(value) is not None:
            row[key] = convert_timestamp(value)
        elif isinstance(value, list):
            row[key] = ", ".join(str(item) for item in value)
        else:
            row[key] = value
    return row


def export_columns(rows: list[dict[str, Any]]) -> list[str]:
    """Union of row keys in first-seen order, ``id`` first."""
    columns: dict[str, None] = {"id": None}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)
