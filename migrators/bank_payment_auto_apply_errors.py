"""
Migrador para la colección bankPaymentsAutoApplyErrors.

Registro de pagos bancarios que no se pudieron aplicar automáticamente a
una organización (INN desconocido, monto ambiguo...). Copia 1:1.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class BankPaymentAutoApplyErrorDocument:
    id: str
    created_at: Optional[datetime]
    error_message: str
    amount: float
    transaction_id: str
    payer_inn: str
    payer_name: str
    description: Optional[str]
    resolved: bool

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("bankPaymentsAutoApplyErrors", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            error_message=d.string("error_message"),
            amount=d.number("amount"),
            transaction_id=d.string("transaction_id"),
            payer_inn=d.string("payer_inn"),
            payer_name=d.string("payer_name"),
            description=d.optional_string("description"),
            resolved=d.boolean("resolved"),
        )


class BankPaymentAutoApplyErrorsMigrator(BaseMigrator):
    def __init__(self, step_name="bank-payment-auto-apply-errors"):
        super().__init__(step_name)

    def decode(self, doc):
        return BankPaymentAutoApplyErrorDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "created_at": sanitize_datetime(record.created_at),
                "error_message": record.error_message,
                "amount": record.amount,
                "transaction_id": record.transaction_id,
                "payer_inn": record.payer_inn,
                "payer_name": record.payer_name,
                "description": record.description,
                "resolved": record.resolved,
            },
            "related": {},
        }
