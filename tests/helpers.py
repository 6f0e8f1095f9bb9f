"""
Funciones helper compartidas para todos los tests.

Proporciona almacenes en memoria con la misma interfaz que
stores.MongoSource / stores.PostgresDestination, y constructores de
documentos Mongo de ejemplo para cada colección billing.
"""

import os
import sys
from collections import defaultdict
from datetime import datetime

from bson import ObjectId

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from errors import DestinationReadError, DuplicateRowError
from orchestrator import load_migrator_for_step


class FakeSource:
    """Colecciones Mongo en memoria: {nombre: [documentos]}."""

    def __init__(self, collections=None):
        self.collections = {name: list(docs) for name, docs in (collections or {}).items()}
        self.streamed = []

    def stream(self, collection_name):
        self.streamed.append(collection_name)
        for doc in self.collections.get(collection_name, []):
            yield doc

    def count(self, collection_name):
        return len(self.collections.get(collection_name, []))


class FakeDestination:
    """
    Tablas PostgreSQL en memoria.

    Restricciones emuladas:
    - Filas con columna 'id': PK sobre id
    - Filas sin 'id' (tablas hijas): UNIQUE sobre la tupla completa

    failing_exists: tablas cuyo chequeo de existencia lanza
                    DestinationReadError (lectura transitoria fallida)
    """

    def __init__(self, failing_exists=()):
        self.tables = defaultdict(list)
        self.failing_exists = set(failing_exists)

    def _conflicts(self, table, row):
        if "id" in row:
            return any(existing.get("id") == row["id"] for existing in self.tables[table])
        return any(existing == row for existing in self.tables[table])

    def insert(self, table, row):
        if self._conflicts(table, row):
            raise DuplicateRowError(table, row.get("id"), "duplicate key value")
        self.tables[table].append(dict(row))

    def insert_or_ignore(self, table, row):
        if self._conflicts(table, row):
            return False
        self.tables[table].append(dict(row))
        return True

    def exists(self, table, row_id):
        if table in self.failing_exists:
            raise DestinationReadError(f"Could not check existence of {table} with id {row_id}")
        return any(row.get("id") == row_id for row in self.tables[table])

    def count(self, table):
        return len(self.tables[table])

    def row(self, table, row_id):
        for row in self.tables[table]:
            if row.get("id") == row_id:
                return row
        return None


def get_migrator(step_name):
    return load_migrator_for_step(step_name)


def get_all_migrator_instances():
    """Lista de tuplas (nombre_clase, instancia) en orden de migración."""
    instances = []
    for step_name in config.MIGRATION_ORDER:
        migrator = load_migrator_for_step(step_name)
        instances.append((type(migrator).__name__, migrator))
    return instances


# =========================================================================
# DOCUMENTOS DE EJEMPLO
# =========================================================================

CREATED_AT = datetime(2023, 5, 17, 9, 30)


def make_service(code, name=None, created_at=CREATED_AT):
    return {
        "_id": ObjectId(),
        "created_at": created_at,
        "name": name or f"Service {code}",
        "code": code,
    }


def make_organization(demo_codes=(), **overrides):
    doc = {
        "_id": ObjectId(),
        "created_at": CREATED_AT,
        "updated_at": CREATED_AT,
        "is_deleted": False,
        "name": "OOO Test",
        "inn": "301234567",
        "balance": 150000.0,
        "fiscalization_balance": 0,
        "reserved_fiscalization_balance": 0,
        "total_payments": 300000,
        "credit_amount": 0,
        "organization_code": "ORG-1",
        "white_label": "default",
        "offer_info": {"number": "OF-7", "date": datetime(2022, 1, 1)},
        "service_demo_uses": [
            {"_id": ObjectId(), "name": f"Service {code}", "code": code}
            for code in demo_codes
        ],
    }
    doc.update(overrides)
    return doc


def make_package_item(code, name=None, limit=100):
    return {
        "name": name or f"Item {code}",
        "code": code,
        "is_over_limit_allowed": True,
        "over_limit_price": 500.0,
        "brv_rate": 0.1,
        "is_unlimited": False,
        "limit": limit,
    }


def make_package(item_codes=(), bonus_ids=(), service_code="edi", **overrides):
    doc = {
        "_id": ObjectId(),
        "created_at": CREATED_AT,
        "is_deleted": False,
        "name": "Business",
        "price": 99000.0,
        "brv_rate": 0.0,
        "duration_days": 0,
        "duration_months": 1,
        "is_demo": False,
        "is_public": True,
        "service": {"_id": ObjectId(), "name": "EDI", "code": service_code},
        "items": [make_package_item(code) for code in item_codes],
        "default_set_on_new_organization": False,
        "on_activation_bonus_packages": [{"_id": bonus_id} for bonus_id in bonus_ids],
    }
    doc.update(overrides)
    return doc


def make_bought_package(organization_id, package_id, item_codes=(), **overrides):
    doc = {
        "_id": ObjectId(),
        "organization": {"_id": organization_id, "name": "OOO Test", "inn": "301234567"},
        "package": {
            "_id": package_id,
            "name": "Business",
            "price": 99000.0,
            "is_demo": False,
            "package_items": [
                dict(make_package_item(code), used_count=3) for code in item_codes
            ],
        },
        "bought_at": CREATED_AT,
        "expires_at": datetime(2023, 6, 17, 9, 30),
        "is_auto_extend": True,
        "is_deleted": False,
        "price": 1.0,
    }
    doc.update(overrides)
    return doc


def make_charge(organization_id=None, bought_package_id=None, **linked):
    doc = {
        "_id": ObjectId(),
        "created_at": CREATED_AT,
        "is_deleted": False,
        "organization": {"_id": organization_id or ObjectId(), "name": "OOO Test"},
        "price": 500.0,
        "package": {"_id": bought_package_id or ObjectId(), "name": "Business", "code": 1},
        "service": {"code": "edi"},
        "item": {"name": "Invoice", "code": 1, "limit": 100},
    }
    doc.update(linked)
    return doc
