"""
Migrador para la colección services.

Catálogo plano: una fila por documento, sin tablas hijas. Debe correr
primero porque packages referencia services.code.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class ServiceDocument:
    id: str
    created_at: Optional[datetime]
    name: str
    code: str

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("services", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            name=d.string("name"),
            code=d.string("code"),
        )


class ServicesMigrator(BaseMigrator):
    def __init__(self, step_name="services"):
        super().__init__(step_name)

    def decode(self, doc):
        return ServiceDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "name": record.name,
                "code": record.code,
            },
            "related": {},
        }
