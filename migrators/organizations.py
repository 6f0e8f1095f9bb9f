"""
Migrador para la colección organizations.

ARQUITECTURA DESTINO:
- organizations: datos principales de la organización cliente
- organization_service_demo_uses: array embebido service_demo_uses
  (organization_id, service_code, used_at)

DECISIONES DE DISEÑO:
- offer_info (subdocumento) se aplana a offer_number / offer_date
- deleted_at y offer_date pasan por sanitize_datetime (fechas cero → NULL)
- used_at = created_at de la organización (Mongo no guarda la fecha de uso)
- Organización ya migrada: se omite, pero sus usos demo se re-escriben con
  ON CONFLICT DO NOTHING para rellenar lo que haya quedado a medias
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class OrganizationDocument:
    id: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    deleted_at: Optional[datetime]
    is_deleted: bool
    name: str
    inn: Optional[str]
    pinfl: Optional[str]
    balance: float
    fiscalization_balance: float
    reserved_fiscalization_balance: float
    total_payments: float
    credit_amount: float
    organization_code: str
    referral_agent_code: Optional[str]
    white_label: str
    offer_number: str
    offer_date: Optional[datetime]
    demo_service_codes: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("organizations", doc)
        offer_info = d.sub("offer_info")
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            updated_at=d.datetime("updated_at"),
            deleted_at=d.datetime("deleted_at"),
            is_deleted=d.boolean("is_deleted"),
            name=d.string("name"),
            inn=d.optional_string("inn"),
            pinfl=d.optional_string("pinfl"),
            balance=d.number("balance"),
            fiscalization_balance=d.number("fiscalization_balance"),
            reserved_fiscalization_balance=d.number("reserved_fiscalization_balance"),
            total_payments=d.number("total_payments"),
            credit_amount=d.number("credit_amount"),
            organization_code=d.string("organization_code"),
            referral_agent_code=d.optional_string("referral_agent_code"),
            white_label=d.string("white_label"),
            offer_number=offer_info.string("number"),
            offer_date=offer_info.datetime("date"),
            demo_service_codes=[
                use.string("code") for use in d.sub_list("service_demo_uses")
            ],
        )


class OrganizationsMigrator(BaseMigrator):
    """
    Migrador específico para organizations.
    """

    rewrite_children_on_skip = True

    def __init__(self, step_name="organizations"):
        super().__init__(step_name)

    def decode(self, doc):
        return OrganizationDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": self._extract_main_record(record),
            "related": {
                "organization_service_demo_uses": self._extract_demo_uses(record),
            },
        }

    # =========================================================================
    # MÉTODOS PRIVADOS: EXTRACCIÓN
    # =========================================================================

    def _extract_main_record(self, record):
        return {
            "id": record.id,
            "created_at": sanitize_datetime(record.created_at),
            "updated_at": sanitize_datetime(record.updated_at),
            "deleted_at": sanitize_datetime(record.deleted_at),
            "is_deleted": record.is_deleted,
            "name": record.name,
            "inn": record.inn,
            "pinfl": record.pinfl,
            "balance": record.balance,
            "fiscalization_balance": record.fiscalization_balance,
            "reserved_fiscalization_balance": record.reserved_fiscalization_balance,
            "total_payments": record.total_payments,
            "credit_amount": record.credit_amount,
            "organization_code": record.organization_code,
            "referral_agent_code": record.referral_agent_code,
            "white_label": record.white_label,
            "offer_number": record.offer_number,
            "offer_date": sanitize_datetime(record.offer_date),
        }

    def _extract_demo_uses(self, record):
        used_at = sanitize_datetime(record.created_at)
        return [
            {
                "organization_id": record.id,
                "service_code": code,
                "used_at": used_at,
            }
            for code in record.demo_service_codes
        ]
