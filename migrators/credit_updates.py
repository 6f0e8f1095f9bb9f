"""
Migrador para la colección creditUpdates.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class CreditUpdateDocument:
    id: str
    created_at: Optional[datetime]
    organization_id: str
    amount: float
    account_id: str

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("creditUpdates", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            organization_id=d.sub("organization").object_id("_id"),
            amount=d.number("amount"),
            account_id=d.sub("account").object_id("_id"),
        )


class CreditUpdatesMigrator(BaseMigrator):
    def __init__(self, step_name="credit-updates"):
        super().__init__(step_name)

    def decode(self, doc):
        return CreditUpdateDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "organization_id": record.organization_id,
                "amount": record.amount,
                "account_id": record.account_id,
            },
            "related": {},
        }
