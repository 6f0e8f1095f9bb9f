"""
Orquestador de la migración billing.

Ejecuta los pasos de config.MIGRATION_ORDER estrictamente en secuencia:
un paso drena su colección completa antes de que empiece el siguiente,
porque los pasos posteriores referencian filas escritas por los anteriores
(organizations → bought-packages → charges...).

Ante el primer paso que falla se aborta todo: no se ejecutan los pasos
restantes y se lanza MigrationStepError con el nombre del paso y la causa.

Carga dinámica de migradores (convención de nombres):
    bought-packages → migrators.bought_packages → BoughtPackagesMigrator
    charges         → migrators.charges         → ChargesMigrator
"""

import importlib

import config
from errors import MigrationStepError
from migrators.base import BaseMigrator


def module_name_for_step(step_name):
    return step_name.replace("-", "_")


def class_name_for_step(step_name):
    return (
        "".join(word.capitalize() for word in module_name_for_step(step_name).split("_"))
        + "Migrator"
    )


def load_migrator_for_step(step_name):
    """
    Carga dinámicamente el migrador correspondiente a un paso.

    Returns:
        BaseMigrator: Instancia del migrador específico

    Raises:
        ImportError: Si no existe el módulo migrators/<paso>.py
        AttributeError: Si el módulo no define la clase esperada
        TypeError: Si la clase no hereda de BaseMigrator

    Example:
        >>> type(load_migrator_for_step('payme-transactions')).__name__
        'PaymeTransactionsMigrator'
    """
    module = importlib.import_module(f"migrators.{module_name_for_step(step_name)}")
    migrator_class = getattr(module, class_name_for_step(step_name))

    # Verificar que hereda de BaseMigrator (type safety en runtime)
    if not issubclass(migrator_class, BaseMigrator):
        raise TypeError(f"{migrator_class.__name__} no hereda de BaseMigrator")

    return migrator_class(step_name)


def run_migrations(source, destination, steps=None, loader=load_migrator_for_step):
    """
    Ejecuta los pasos en orden y retorna sus reportes.

    Args:
        source: Almacén origen (stream/count)
        destination: Almacén destino (insert/insert_or_ignore/exists/count)
        steps: Pasos a ejecutar; por defecto config.MIGRATION_ORDER
        loader: Fábrica de migradores por nombre de paso

    Returns:
        list: StepReport de cada paso completado

    Raises:
        MigrationStepError: En el primer paso que falla
    """
    steps = list(config.MIGRATION_ORDER if steps is None else steps)
    reports = []

    for step_name in steps:
        print("\n" + "=" * 70)
        print(f"🚚 Starting migration: {step_name}")
        print("=" * 70)

        try:
            migrator = loader(step_name)
            report = migrator.migrate(source, destination)
        except Exception as e:
            print(f"❌ Migration {step_name} failed: {e}")
            raise MigrationStepError(step_name, e) from e

        reports.append(report)
        print(f"✅ Completed migration: {step_name}")

    return reports
