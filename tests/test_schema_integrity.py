"""
Test de integridad de schemas.

Valida que:
1. Toda tabla referenciada en config.py se crea en dbsetup.py
2. Toda columna que escribe un migrador existe en el DDL de su tabla
3. Los nombres de tablas siguen snake_case
"""

import os
import re
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
import dbsetup
from tests.helpers import (
    get_migrator,
    make_bought_package,
    make_charge,
    make_organization,
    make_package,
    make_service,
)
from bson import ObjectId

SAMPLE_DOCUMENTS = {
    "services": lambda: make_service("edi"),
    "organizations": lambda: make_organization(demo_codes=["edi"]),
    "packages": lambda: make_package(item_codes=[1], bonus_ids=[ObjectId()]),
    "bought-packages": lambda: make_bought_package(ObjectId(), ObjectId(), item_codes=[1]),
    "charges": lambda: make_charge(roaming_invoice={"_id": "inv-1", "number": "1"}),
    "payments": lambda: {"_id": ObjectId(), "amount": 10, "method": 1},
    "payme-transactions": lambda: {"_id": ObjectId(), "payme_transaction_id": "p-1"},
    "organization-balance-bindings": lambda: {"_id": ObjectId()},
    "credit-updates": lambda: {"_id": ObjectId(), "amount": 5},
    "bank-payment-auto-apply-errors": lambda: {"_id": ObjectId(), "payer_inn": "123"},
}


def _ddl_columns(table):
    ddl = dbsetup.TABLE_DDL[table]
    body = ddl[ddl.index("(") + 1:]
    columns = set()
    for line in body.splitlines():
        match = re.match(r'\s*"?([a-z_0-9]+)"?\s+[A-Z]', line)
        if match and match.group(1) not in ("unique", "primary"):
            columns.add(match.group(1))
    return columns


def test_all_tables_created():
    print("\n🔍 Test: Tablas de config.py presentes en dbsetup.py")
    for step_name in config.MIGRATION_ORDER:
        for table in config.get_tables_for_step(step_name):
            assert table in dbsetup.TABLE_DDL, f"{step_name}: falta DDL para '{table}'"
            print(f"   ✅ {table}")


def test_table_naming():
    for table in dbsetup.TABLE_DDL:
        assert table.replace("_", "").islower(), f"Tabla '{table}' no sigue snake_case"


@pytest.mark.parametrize("step_name", config.MIGRATION_ORDER)
def test_migrator_columns_exist(step_name):
    migrator = get_migrator(step_name)
    record = migrator.decode(SAMPLE_DOCUMENTS[step_name]())
    data = migrator.extract_data(record)

    assert set(data["main"]) == _ddl_columns(migrator.table)
    assert set(data["related"]) == set(migrator.related_tables)

    for table, rows in data["related"].items():
        assert rows, f"{step_name}: el documento de ejemplo debería generar filas en {table}"
        for row in rows:
            assert set(row) == _ddl_columns(table)


def test_child_tables_have_unique_constraint():
    """Las hijas con ON CONFLICT DO NOTHING necesitan UNIQUE para deduplicar."""
    for table in (
        "organization_service_demo_uses",
        "package_items",
        "package_activation_bonus_packages",
    ):
        assert "UNIQUE" in dbsetup.TABLE_DDL[table]
