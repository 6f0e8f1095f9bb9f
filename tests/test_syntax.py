"""
Test de sintaxis para todos los módulos del proyecto.

Compila los .py sin ejecutarlos. Útil para detectar errores introducidos
durante refactoring en scripts que no importa ningún otro test
(reset_database.py, billingmigra.py).
"""

import os
import py_compile
import sys

import pytest

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
from orchestrator import module_name_for_step

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# Archivos core (siempre validar)
CORE_FILES = [
    "billingmigra.py",
    "config.py",
    "datetimes.py",
    "dbsetup.py",
    "errors.py",
    "orchestrator.py",
    "progress.py",
    "reset_database.py",
    "stores.py",
    "migrators/base.py",
    "migrators/charge_types.py",
    "migrators/decoding.py",
]

# Archivos de migradores (dinámico basado en config.MIGRATION_ORDER)
MIGRATOR_FILES = [
    f"migrators/{module_name_for_step(step_name)}.py"
    for step_name in config.MIGRATION_ORDER
]


@pytest.mark.parametrize("filepath", CORE_FILES + MIGRATOR_FILES)
def test_syntax(filepath):
    full_path = os.path.join(PROJECT_ROOT, filepath)
    assert os.path.exists(full_path), f"Archivo no encontrado: {filepath}"
    py_compile.compile(full_path, doraise=True)
