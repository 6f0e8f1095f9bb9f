"""
Migrador para la colección organizationBalanceBindings.

Ojo: en este subdocumento la organización se identifica con 'id', no '_id'.
Los nombres se copian desnormalizados (snapshot al momento del vínculo).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class OrganizationBalanceBindingDocument:
    id: str
    created_at: Optional[datetime]
    deleted_at: Optional[datetime]
    is_deleted: bool
    payer_organization_id: str
    payer_organization_name: str
    target_organization_id: str
    target_organization_name: str

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("organizationBalanceBindings", doc)
        payer = d.sub("payer_organization")
        target = d.sub("target_organization")
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            deleted_at=d.datetime("deleted_at"),
            is_deleted=d.boolean("is_deleted"),
            payer_organization_id=payer.object_id("id"),
            payer_organization_name=payer.string("name"),
            target_organization_id=target.object_id("id"),
            target_organization_name=target.string("name"),
        )


class OrganizationBalanceBindingsMigrator(BaseMigrator):
    def __init__(self, step_name="organization-balance-bindings"):
        super().__init__(step_name)

    def decode(self, doc):
        return OrganizationBalanceBindingDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "deleted_at": sanitize_datetime(record.deleted_at),
                "is_deleted": record.is_deleted,
                "payer_organization_id": record.payer_organization_id,
                "target_organization_id": record.target_organization_id,
                "payer_organization_name": record.payer_organization_name,
                "target_organization_name": record.target_organization_name,
            },
            "related": {},
        }
