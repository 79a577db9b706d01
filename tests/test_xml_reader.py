# WORKFLOW: Tests for the schema registry and the streaming XML decoder.
# Test scenarios:
# 1. Registry order and optionality per entity kind
# 2. Type conversion (timestamps as UTC, booleans, guids, tag lists)
# 3. Absent attributes (optional -> None, tag list -> [], required -> error)
# 4. Malformed input is fatal for the whole table
# 5. Id-only collection

import io
from datetime import datetime, timezone
from uuid import UUID

import pytest

from dump_factory import post_history_row, post_row, table_xml, user_row
from etl.entities import Post
from etl.errors import DumpDecodeError
from etl.schemas import (
    ENTITY_KINDS, OPTIONAL_INTEGER, STRING_LIST, TIMESTAMP, get_schema, parse_timestamp
)
from etl.xml_reader import decode_rows, read_ids


def _stream(file_name, rows):
    return io.BytesIO(table_xml(file_name, rows))


def test_registry_covers_every_kind_in_import_order():
    assert ENTITY_KINDS == ("User", "Badge", "Post", "PostHistory", "Comment", "PostLink", "Tag", "Vote")
    for kind in ENTITY_KINDS:
        schema = get_schema(kind)
        assert schema[0].attribute == "Id"
        assert schema is get_schema(kind)


def test_post_schema_types():
    schema = {spec.attribute: spec for spec in get_schema("Post")}
    assert schema["AcceptedAnswerId"].type == OPTIONAL_INTEGER
    assert schema["AcceptedAnswerId"].optional
    assert schema["Tags"].type == STRING_LIST
    assert schema["CreationDate"].type == TIMESTAMP
    assert not schema["CreationDate"].optional


def test_timestamp_keeps_wall_clock_as_utc():
    value = parse_timestamp("2008-07-31T21:42:52.667")
    assert value == datetime(2008, 7, 31, 21, 42, 52, 667000, tzinfo=timezone.utc)


def test_decode_post_row():
    rows = [post_row(5, PostTypeId=2, ParentId=4, Tags="|python|sql||", Title="Hi & bye")]
    decoded = list(decode_rows(_stream("Posts.xml", rows), get_schema("Post"), "Posts.xml"))

    assert len(decoded) == 1
    fields = decoded[0]
    assert fields["id"] == 5
    assert fields["post_type_id"] == 2
    assert fields["parent_id"] == 4
    assert fields["accepted_answer_id"] is None
    assert fields["owner_user_id"] is None
    assert fields["tags"] == ["python", "sql"]
    assert fields["title"] == "Hi & bye"
    assert fields["creation_date"].tzinfo == timezone.utc

    post = Post(**fields)
    assert post.id == 5


def test_absent_tags_yield_empty_list():
    fields = next(decode_rows(_stream("Posts.xml", [post_row(1)]), get_schema("Post")))
    assert fields["tags"] == []


def test_decode_guid_and_boolean():
    rows = [post_history_row(1, 10, UserId=3)]
    fields = next(decode_rows(_stream("PostHistory.xml", rows), get_schema("PostHistory")))
    assert fields["revision_guid"] == UUID("c4e6b6a2-1f0e-4c7b-9a4e-6f2d8b1e0a11")
    assert fields["user_id"] == 3

    badge = {"Id": "1", "UserId": "2", "Name": "Student", "Class": "3", "TagBased": "True",
             "Date": "2020-01-01T00:00:00.000"}
    fields = next(decode_rows(_stream("Badges.xml", [badge]), get_schema("Badge")))
    assert fields["tag_based"] is True
    assert fields["class_"] == 3


def test_missing_required_attribute_is_an_error():
    rows = [user_row(1, DisplayName=None)]
    with pytest.raises(DumpDecodeError) as excinfo:
        list(decode_rows(_stream("Users.xml", rows), get_schema("User"), "Users.xml"))
    assert excinfo.value.table == "Users.xml"
    assert "DisplayName" in str(excinfo.value)


def test_unconvertible_value_aborts_the_table():
    rows = [post_row(1), post_row(2, Score="lots"), post_row(3)]
    decoded = decode_rows(_stream("Posts.xml", rows), get_schema("Post"), "Posts.xml")

    assert next(decoded)["id"] == 1
    with pytest.raises(DumpDecodeError, match="Score"):
        next(decoded)


def test_invalid_boolean_is_an_error():
    badge = {"Id": "1", "UserId": "2", "Name": "Student", "Class": "3", "TagBased": "maybe",
             "Date": "2020-01-01T00:00:00.000"}
    with pytest.raises(DumpDecodeError):
        list(decode_rows(_stream("Badges.xml", [badge]), get_schema("Badge")))


def test_malformed_xml_is_an_error():
    stream = io.BytesIO(b'<?xml version="1.0"?><posts><row Id="1" ')
    with pytest.raises(DumpDecodeError, match="malformed XML"):
        list(decode_rows(stream, get_schema("Post"), "Posts.xml"))


def test_decoding_is_lazy():
    stream = _stream("Posts.xml", [post_row(i) for i in range(1, 4)])
    decoded = decode_rows(stream, get_schema("Post"))
    assert [next(decoded)["id"], next(decoded)["id"]] == [1, 2]


def test_read_ids():
    stream = _stream("Posts.xml", [post_row(7), post_row(3), post_row(9)])
    assert read_ids(stream, "Posts.xml") == {3, 7, 9}


def test_read_ids_rejects_bad_id():
    stream = io.BytesIO(b'<posts><row Id="x" /></posts>')
    with pytest.raises(DumpDecodeError):
        read_ids(stream, "Posts.xml")
