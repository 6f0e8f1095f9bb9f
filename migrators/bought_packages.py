"""
Migrador para la colección boughtPackages.

ARQUITECTURA DESTINO:
- bought_packages: compra de un paquete por una organización
- bought_package_items: copia de package.package_items al momento de compra

DECISIONES DE DISEÑO:
- is_active = NOT is_deleted
- price se toma de package.price (precio de lista al comprar)
- Los ítems embebidos no tienen _id propio: cada uno recibe un ObjectId
  nuevo, por eso se insertan con INSERT simple (no pueden colisionar)
- Compra ya migrada: se omite entera, sin re-escribir ítems (con IDs
  nuevos cada corrida, re-escribirlos los duplicaría)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from bson import ObjectId

from datetimes import sanitize_datetime
from .base import BaseMigrator
from .decoding import DocumentDecoder


@dataclass
class BoughtPackageItemDocument:
    name: str
    code: int
    is_over_limit_allowed: bool
    over_limit_price: float
    is_unlimited: bool
    limit_value: int
    used_count: int


@dataclass
class BoughtPackageDocument:
    id: str
    organization_id: str
    package_id: str
    package_price: float
    bought_at: Optional[datetime]
    expires_at: Optional[datetime]
    is_auto_extend: bool
    is_deleted: bool
    items: List[BoughtPackageItemDocument] = field(default_factory=list)

    @classmethod
    def from_document(cls, doc):
        d = DocumentDecoder("boughtPackages", doc)
        package = d.sub("package")
        return cls(
            id=d.object_id("_id", required=True),
            organization_id=d.sub("organization").object_id("_id"),
            package_id=package.object_id("_id"),
            package_price=package.number("price"),
            bought_at=d.datetime("bought_at"),
            expires_at=d.datetime("expires_at"),
            is_auto_extend=d.boolean("is_auto_extend"),
            is_deleted=d.boolean("is_deleted"),
            items=[
                BoughtPackageItemDocument(
                    name=item.string("name"),
                    code=item.integer("code"),
                    is_over_limit_allowed=item.boolean("is_over_limit_allowed"),
                    over_limit_price=item.number("over_limit_price"),
                    is_unlimited=item.boolean("is_unlimited"),
                    limit_value=item.integer("limit"),
                    used_count=item.integer("used_count"),
                )
                for item in package.sub_list("package_items")
            ],
        )


class BoughtPackagesMigrator(BaseMigrator):
    """
    Migrador específico para boughtPackages.
    """

    plain_insert_tables = ("bought_package_items",)

    def __init__(self, step_name="bought-packages"):
        super().__init__(step_name)

    def decode(self, doc):
        return BoughtPackageDocument.from_document(doc)

    def get_primary_key(self, record):
        return record.id

    def extract_data(self, record):
        return {
            "main": {
                "id": record.id,
                "organization_id": record.organization_id,
                "package_id": record.package_id,
                "bought_at": sanitize_datetime(record.bought_at),
                "expires_at": sanitize_datetime(record.expires_at),
                "is_auto_extend": record.is_auto_extend,
                "is_active": not record.is_deleted,
                "price": record.package_price,
            },
            "related": {
                "bought_package_items": self._extract_items(record),
            },
        }

    def _extract_items(self, record):
        return [
            {
                "id": str(ObjectId()),
                "bought_package_id": record.id,
                "name": item.name,
                "code": item.code,
                "is_over_limit_allowed": item.is_over_limit_allowed,
                "over_limit_price": item.over_limit_price,
                "is_unlimited": item.is_unlimited,
                "limit_value": item.limit_value,
                "used_count": item.used_count,
            }
            for item in record.items
        ]
