"""
Migrador para la colección packages.

ARQUITECTURA DESTINO:
- packages: paquete vendible (service embebido → service_code)
- package_items: array embebido items (límites y precios por ítem)
- package_activation_bonus_packages: array on_activation_bonus_packages
  (package_id, bonus_package_id)

Ambas tablas hijas toleran duplicados (UNIQUE sobre la tupla completa +
ON CONFLICT DO NOTHING): re-correr la migración nunca las duplica, y un
paquete ya migrado igualmente re-intenta sus hijas.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class PackageItemDocument:
    name: str
    code: int
    is_over_limit_allowed: bool
    over_limit_price: float
    brv_rate: float
    is_unlimited: bool
    limit: int

    @classmethod
    def from_decoder(cls, d):
        return cls(
            name=d.string("name"),
            code=d.integer("code"),
            is_over_limit_allowed=d.boolean("is_over_limit_allowed"),
            over_limit_price=d.number("over_limit_price"),
            brv_rate=d.number("brv_rate"),
            is_unlimited=d.boolean("is_unlimited"),
            limit=d.integer("limit"),
        )


@dataclass
class PackageDocument:
    id: str
    created_at: Optional[datetime]
    is_deleted: bool
    name: str
    price: float
    brv_rate: float
    duration_days: int
    duration_months: int
    is_demo: bool
    is_public: bool
    service_code: str
    default_set_on_new_organization: bool
    items: List[PackageItemDocument] = field(default_factory=list)
    bonus_package_ids: List[str] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("packages", doc)
        return cls(
            id=d.object_id("_id", required=True),
            created_at=d.datetime("created_at"),
            is_deleted=d.boolean("is_deleted"),
            name=d.string("name"),
            price=d.number("price"),
            brv_rate=d.number("brv_rate"),
            duration_days=d.integer("duration_days"),
            duration_months=d.integer("duration_months"),
            is_demo=d.boolean("is_demo"),
            is_public=d.boolean("is_public"),
            service_code=d.sub("service").string("code"),
            default_set_on_new_organization=d.boolean("default_set_on_new_organization"),
            items=[PackageItemDocument.from_decoder(item) for item in d.sub_list("items")],
            bonus_package_ids=[
                bonus.object_id("_id") for bonus in d.sub_list("on_activation_bonus_packages")
            ],
        )


class PackagesMigrator(BaseMigrator):
    """
    Migrador específico para packages.
    """

    rewrite_children_on_skip = True

    def __init__(self, step_name="packages"):
        super().__init__(step_name)

    def decode(self, doc):
        return PackageDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": self._extract_main_record(record),
            "related": {
                "package_items": self._extract_items(record),
                "package_activation_bonus_packages": self._extract_bonus_packages(record),
            },
        }

    def _extract_main_record(self, record):
        return {
            "id": record.id,
            "created_at": sanitize_datetime(record.created_at),
            "is_deleted": record.is_deleted,
            "name": record.name,
            "price": record.price,
            "brv_rate": record.brv_rate,
            "duration_days": record.duration_days,
            "duration_months": record.duration_months,
            "is_demo": record.is_demo,
            "is_public": record.is_public,
            "service_code": record.service_code,
            "default_set_on_new_organization": record.default_set_on_new_organization,
        }

    def _extract_items(self, record):
        return [
            {
                "package_id": record.id,
                "name": item.name,
                "code": item.code,
                "is_over_limit_allowed": item.is_over_limit_allowed,
                "over_limit_price": item.over_limit_price,
                "brv_rate": item.brv_rate,
                "is_unlimited": item.is_unlimited,
                "limit": item.limit,
            }
            for item in record.items
        ]

    def _extract_bonus_packages(self, record):
        return [
            {"package_id": record.id, "bonus_package_id": bonus_id}
            for bonus_id in record.bonus_package_ids
        ]
