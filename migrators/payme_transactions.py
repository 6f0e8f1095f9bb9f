"""
Migrador para la colección paymeTransactions.

payme_created_at es NOT NULL en el destino. Cadena de fallback:
1. payme_created_at del documento, si es válido (1970-2100)
2. created_at del documento, si es válido
3. hora actual
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import required_datetime, sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class PaymeTransactionDocument:
    id: str
    created_at: Optional[datetime]
    payme_transaction_id: str
    payme_created_at: Optional[datetime]
    system_completed_at: Optional[datetime]
    state: int
    amount: float
    payment_id: Optional[str]
    organization_id: str
    reason: int
    system_canceled_at: Optional[datetime]

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("paymeTransactions", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            payme_transaction_id=d.string("payme_transaction_id"),
            payme_created_at=d.datetime("payme_created_at"),
            system_completed_at=d.datetime("system_completed_at"),
            state=d.integer("state"),
            amount=d.number("amount"),
            payment_id=d.optional_string("payment_id"),
            organization_id=d.sub("organization").object_id("_id"),
            reason=d.integer("reason"),
            system_canceled_at=d.datetime("system_canceled_at"),
        )


class PaymeTransactionsMigrator(BaseMigrator):
    def __init__(self, step_name="payme-transactions"):
        super().__init__(step_name)

    def decode(self, doc):
        return PaymeTransactionDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "payme_transaction_id": record.payme_transaction_id,
                "payme_created_at": required_datetime(
                    record.payme_created_at, record.created_at
                ),
                "system_completed_at": sanitize_datetime(record.system_completed_at),
                "state": record.state,
                "amount": record.amount,
                "payment_id": record.payment_id,
                "organization_id": record.organization_id,
                "reason": record.reason,
                "system_canceled_at": sanitize_datetime(record.system_canceled_at),
            },
            "related": {},
        }
