"""
Migrador para la colección payments.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class PaymentDocument:
    id: str
    created_at: Optional[datetime]
    amount: float
    organization_id: str
    account_id: str
    method: int
    bank_transaction_id: Optional[str]

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("payments", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            amount=d.number("amount"),
            organization_id=d.sub("organization").object_id("_id"),
            account_id=d.sub("account").object_id("_id"),
            method=d.integer("method"),
            bank_transaction_id=d.optional_string("bank_transaction_id"),
        )


class PaymentsMigrator(BaseMigrator):
    def __init__(self, step_name="payments"):
        super().__init__(step_name)

    def decode(self, doc):
        return PaymentDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "amount": record.amount,
                "organization_id": record.organization_id,
                "account_id": record.account_id,
                "method": record.method,
                "bank_transaction_id": record.bank_transaction_id,
            },
            "related": {},
        }
