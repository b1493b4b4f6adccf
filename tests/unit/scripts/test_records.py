"""Unit tests for import/export record shaping."""

import json
from pathlib import Path

import pytest

from scripts.records import (
    build_search_name,
    export_columns,
    flatten_for_export,
    has_profile,
    normalize_key,
    read_csv,
    read_json,
    transform_record,
)


class TestNormalizeKey:
    def test_removes_whitespace(self) -> None:
        assert normalize_key("Avatar URL") == "AvatarURL"
        assert normalize_key(" First Name ") == "FirstName"


class TestReadCsv:
    def test_normalizes_headers_and_skips_blank_rows(self, tmp_path: Path) -> None:
        path = tmp_path / "members.csv"
        path.write_text(
            "First Name,Last Name,Email\nJane,Doe,jane@example.com\n,,\nBob,,bob@example.com\n",
            encoding="utf-8",
        )

        rows = read_csv(path)

        assert rows == [
            {"FirstName": "Jane", "LastName": "Doe", "Email": "jane@example.com"},
            {"FirstName": "Bob", "LastName": "", "Email": "bob@example.com"},
        ]

    def test_strips_byte_order_mark(self, tmp_path: Path) -> None:
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffEmail\nx@example.com\n".encode("utf-8"))

        assert read_csv(path) == [{"Email": "x@example.com"}]


class TestReadJson:
    def test_list_keeps_ids(self, tmp_path: Path) -> None:
        path = tmp_path / "export.json"
        path.write_text(json.dumps([{"id": "abc", "FirstName": "Jane"}, {"FirstName": "Bob"}]))

        assert read_json(path) == [("abc", {"FirstName": "Jane"}), (None, {"FirstName": "Bob"})]

    def test_object_keyed_by_id(self, tmp_path: Path) -> None:
        path = tmp_path / "export.json"
        path.write_text(json.dumps({"abc": {"FirstName": "Jane"}}))

        assert read_json(path) == [("abc", {"FirstName": "Jane"})]

    def test_rejects_other_layouts(self, tmp_path: Path) -> None:
        path = tmp_path / "export.json"
        path.write_text("42")

        with pytest.raises(ValueError):
            read_json(path)


class TestHasProfile:
    def test_needs_avatar_and_bio_or_headline(self) -> None:
        assert has_profile({"AvatarURL": "a.png", "Bio": "Hello"})
        assert has_profile({"AvatarURL": "a.png", "Headline": "Engineer"})
        assert not has_profile({"AvatarURL": "a.png"})
        assert not has_profile({"Bio": "Hello", "Headline": "Engineer"})
        assert not has_profile({"AvatarURL": "  ", "Bio": "Hello"})


class TestBuildSearchName:
    def test_full_name_lowercased(self) -> None:
        assert build_search_name("John", "Doe", "john@example.com") == "john doe"

    def test_single_name(self) -> None:
        assert build_search_name("", "Doe", "") == "doe"

    def test_falls_back_to_email(self) -> None:
        assert build_search_name("", "", "Only@Example.com") == "only@example.com"


class TestTransformRecord:
    def test_trims_and_derives_search_name(self) -> None:
        doc = transform_record({"FirstName": "  John ", "LastName": "Doe ", "Email": " j@x.io "})

        assert doc["FirstName"] == "John"
        assert doc["LastName"] == "Doe"
        assert doc["Email"] == "j@x.io"
        assert doc["searchName"] == "john doe"

    def test_coerces_typed_fields(self) -> None:
        doc = transform_record(
            {
                "Active": "TRUE",
                "EmailMarketing": "no",
                "Posts": "12",
                "Comments": "",
                "LikesReceived": "-4",
                "Tags": "python, data ,",
            }
        )

        assert doc["Active"] is True
        assert doc["EmailMarketing"] is False
        assert doc["Posts"] == 12
        assert doc["Comments"] == 0
        assert doc["LikesReceived"] == 0
        assert doc["Tags"] == ["python", "data"]

    def test_converts_dates(self) -> None:
        doc = transform_record(
            {"JoinDate": "2024-01-15", "LastActive": "", "InvitationDate": "last spring"}
        )

        assert doc["JoinDate"] == "2024-01-15T00:00:00.000Z"
        assert doc["LastActive"] is None
        assert doc["InvitationDate"] == "last spring"

    def test_keeps_unknown_keys(self) -> None:
        doc = transform_record({"Favourite Colour": "green"})

        assert doc["FavouriteColour"] == "green"


class TestExport:
    def test_flatten_converts_timestamps_and_lists(self) -> None:
        row = flatten_for_export(
            "doc-1",
            {
                "JoinDate": {"_seconds": 1704067200, "_nanoseconds": 0},
                "Tags": ["a", "b"],
                "Posts": 3,
            },
        )

        assert row == {
            "id": "doc-1",
            "JoinDate": "2024-01-01T00:00:00.000Z",
            "Tags": "a, b",
            "Posts": 3,
        }

    def test_columns_are_a_union_in_first_seen_order(self) -> None:
        rows = [{"id": "1", "FirstName": "A"}, {"id": "2", "Email": "b@x.io", "FirstName": "B"}]

        assert export_columns(rows) == ["id", "FirstName", "Email"]
