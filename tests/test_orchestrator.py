"""
Tests del orquestador: orden fijo de pasos y abort en el primer fallo.
"""

import os
import sys

import pytest
from bson import ObjectId

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from errors import DocumentDecodeError, MigrationStepError
from orchestrator import load_migrator_for_step, run_migrations
from tests.helpers import FakeDestination, FakeSource, make_service


def test_steps_run_in_fixed_order():
    source = FakeSource()
    reports = run_migrations(source, FakeDestination())

    expected = [config.get_collection_config(s)["collection"] for s in config.MIGRATION_ORDER]
    assert source.streamed == expected
    assert [r.step_name for r in reports] == config.MIGRATION_ORDER


def test_subset_of_steps():
    source = FakeSource()
    reports = run_migrations(source, FakeDestination(), steps=["services", "charges"])

    assert source.streamed == ["services", "charges"]
    assert len(reports) == 2


def test_first_failure_aborts_remaining_steps():
    source = FakeSource(
        {
            "services": [make_service("edi")],
            "organizations": [{"_id": ObjectId(), "name": 42}],
            "packages": [{"_id": ObjectId(), "name": "never migrated"}],
        }
    )
    dest = FakeDestination()

    with pytest.raises(MigrationStepError) as excinfo:
        run_migrations(source, dest)

    assert excinfo.value.step_name == "organizations"
    assert isinstance(excinfo.value.cause, DocumentDecodeError)
    assert "migration organizations failed" in str(excinfo.value)
    assert source.streamed == ["services", "organizations"]
    assert dest.count("services") == 1
    assert dest.count("packages") == 0


def test_loader_failure_is_reported_with_step_name():
    def broken_loader(step_name):
        if step_name == "packages":
            raise ImportError("No module named 'migrators.packages'")
        return load_migrator_for_step(step_name)

    with pytest.raises(MigrationStepError) as excinfo:
        run_migrations(FakeSource(), FakeDestination(), loader=broken_loader)

    assert excinfo.value.step_name == "packages"
    assert isinstance(excinfo.value.__cause__, ImportError)
