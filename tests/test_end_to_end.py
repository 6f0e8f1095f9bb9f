"""
Test end-to-end: migración completa + re-ejecución idempotente.

Escenario:
- 3 services
- 2 organizations (una con 2 usos demo)
- 1 package con 3 ítems y 1 paquete bonus
- 1 compra con 2 ítems y 2 cargos sobre ella
"""

import os
import sys

from bson import ObjectId

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from orchestrator import run_migrations
from tests.helpers import (
    FakeDestination,
    FakeSource,
    make_bought_package,
    make_charge,
    make_organization,
    make_package,
    make_service,
)


def _build_source():
    organizations = [make_organization(demo_codes=["edi", "roaming"]), make_organization()]
    bonus = ObjectId()
    package = make_package(item_codes=[1, 2, 3], bonus_ids=[bonus])
    bought = make_bought_package(organizations[0]["_id"], package["_id"], item_codes=[1, 2])

    return FakeSource(
        {
            "services": [make_service("edi"), make_service("roaming"), make_service("kassa")],
            "organizations": organizations,
            "packages": [package],
            "boughtPackages": [bought],
            "charges": [
                make_charge(organizations[0]["_id"], bought["_id"]),
                make_charge(
                    organizations[0]["_id"],
                    bought["_id"],
                    roaming_contract={"_id": "ctr-1", "number": "7"},
                ),
            ],
        }
    )


def _counts(destination):
    return {
        table: destination.count(table)
        for step_name in config.MIGRATION_ORDER
        for table in config.get_tables_for_step(step_name)
    }


def test_full_migration_and_rerun():
    print("\n🔍 Test: migración completa + re-ejecución")
    source = _build_source()
    dest = FakeDestination()

    run_migrations(source, dest)
    first = _counts(dest)

    assert first["services"] == 3
    assert first["organizations"] == 2
    assert first["organization_service_demo_uses"] == 2
    assert first["packages"] == 1
    assert first["package_items"] == 3
    assert first["package_activation_bonus_packages"] == 1
    assert first["bought_packages"] == 1
    assert first["bought_package_items"] == 2
    assert first["charges"] == 2
    assert first["payments"] == 0

    reports = run_migrations(source, dest)
    second = _counts(dest)

    assert second == first
    for report in reports:
        for counter in report.tables.values():
            assert counter.moved == 0, f"{counter.table} re-escribió filas"
            assert counter.before == counter.after
    print("   ✅ Segunda corrida sin cambios")

    charge_types = sorted(row["type"] for row in dest.tables["charges"])
    assert charge_types == [0, 7]
