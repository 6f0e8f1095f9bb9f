"""
Tests de decodificación tipada de documentos Mongo.
"""

import os
import sys
from datetime import datetime

import pytest
from bson import ObjectId

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from errors import DocumentDecodeError
from migrators.decoding import ZERO_OBJECT_ID, DocumentDecoder


def test_missing_fields_decode_to_zero_values():
    d = DocumentDecoder("charges", {"_id": ObjectId()})

    assert d.string("name") == ""
    assert d.optional_string("inn") is None
    assert d.number("price") == 0.0
    assert d.integer("code") == 0
    assert d.boolean("is_deleted") is False
    assert d.datetime("created_at") is None
    assert d.sub_list("items") == []
    assert d.optional_document("roaming_invoice") is None


def test_missing_sub_document_is_empty():
    d = DocumentDecoder("charges", {"_id": ObjectId(), "organization": None})
    organization = d.sub("organization")

    assert organization.object_id("_id") == ZERO_OBJECT_ID
    assert organization.string("name") == ""


def test_object_id_rendering():
    oid = ObjectId()
    d = DocumentDecoder("services", {"_id": oid, "ref": str(oid).upper()})

    assert d.object_id("_id", required=True) == str(oid)
    assert len(d.object_id("_id")) == 24
    assert d.object_id("ref") == str(oid)


def test_missing_root_id_is_fatal():
    with pytest.raises(DocumentDecodeError):
        DocumentDecoder("services", {"name": "x"}).object_id("_id", required=True)


def test_wrong_types_are_fatal():
    oid = ObjectId()
    d = DocumentDecoder(
        "packages",
        {
            "_id": oid,
            "price": "99000",
            "code": 1.5,
            "is_demo": "yes",
            "created_at": "2023-01-01T00:00:00Z",
            "items": {"name": "x"},
            "service": "edi",
            "owner": 42,
        },
    )

    for call in (
        lambda: d.number("price"),
        lambda: d.integer("code"),
        lambda: d.boolean("is_demo"),
        lambda: d.datetime("created_at"),
        lambda: d.sub_list("items"),
        lambda: d.sub("service"),
        lambda: d.object_id("owner"),
    ):
        with pytest.raises(DocumentDecodeError) as excinfo:
            call()
        assert str(oid) in str(excinfo.value)
        assert "packages" in str(excinfo.value)


def test_numeric_coercions():
    d = DocumentDecoder("x", {"_id": ObjectId(), "price": 10, "code": 3.0, "flag": True})

    assert d.number("price") == 10.0
    assert d.integer("code") == 3
    with pytest.raises(DocumentDecodeError):
        d.number("flag")


def test_nested_error_reports_path():
    d = DocumentDecoder("packages", {"_id": ObjectId(), "items": [{"code": "A"}]})
    item = d.sub_list("items")[0]

    with pytest.raises(DocumentDecodeError) as excinfo:
        item.integer("code")
    assert "items[0].code" in str(excinfo.value)


def test_datetime_passthrough():
    value = datetime(2023, 1, 1)
    assert DocumentDecoder("x", {"_id": ObjectId(), "at": value}).datetime("at") == value
