"""
Migrador para la colección charges.

Cada cargo descuenta un ítem de un paquete comprado. Las columnas type,
object_id, number, date1 y date2 NO se copian: se derivan del documento
vinculado que embebe el cargo (ver charge_types.resolve_charge_reference).

Depende de organizations y bought-packages (package._id del cargo es el
_id del paquete comprado).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .charge_types import LINKED_DOCUMENT_FIELDS, resolve_charge_reference
from .decoding import DocumentDecoder


@dataclass
class ChargeDocument:
    id: str
    created_at: Optional[datetime]
    is_deleted: bool
    organization_id: str
    price: float
    bought_package_id: str
    item_code: int
    service_code: str
    linked_documents: dict = field(default_factory=dict)

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("charges", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            is_deleted=d.boolean("is_deleted"),
            organization_id=d.sub("organization").object_id("_id"),
            price=d.number("price"),
            bought_package_id=d.sub("package").object_id("_id"),
            item_code=d.sub("item").integer("code"),
            service_code=d.sub("service").string("code"),
            linked_documents={
                name: d.optional_document(name) for name in LINKED_DOCUMENT_FIELDS
            },
        )


class ChargesMigrator(BaseMigrator):
    """
    Migrador específico para charges.
    """

    def __init__(self, step_name="charges"):
        super().__init__(step_name)

    def decode(self, doc):
        return ChargeDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        reference = resolve_charge_reference(record.linked_documents, record.created_at)
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "is_deleted": record.is_deleted,
                "organization_id": record.organization_id,
                "price": record.price,
                "type": int(reference.type),
                "bought_package_id": record.bought_package_id,
                "bought_package_item_code": record.item_code,
                "service_code": record.service_code,
                "object_id": reference.object_id,
                "number": reference.number,
                "date1": reference.date1,
                "date2": reference.date2,
            },
            "related": {},
        }
