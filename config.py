"""
Configuración centralizada para la migración billing: MongoDB → PostgreSQL.

ARQUITECTURA:
Cada paso de migración toma UNA colección de MongoDB y la escribe en una
tabla principal de PostgreSQL, más las tablas hijas que materializan los
arrays embebidos del documento:
- services, payments, credit_updates...: una fila por documento
- organizations, packages, bought_packages: tabla principal + tablas hijas

FLUJO DE MIGRACIÓN:
1. Ejecutar los pasos en el orden de MIGRATION_ORDER (respeta FKs)
2. Cada documento se migra una sola vez (chequeo por PK = _id)
3. Las tablas hijas usan INSERT ... ON CONFLICT DO NOTHING

USO DE LAS FUNCIONES HELPER:
    # Obtener configuración de un paso
    cfg = get_collection_config('charges')
    cfg['collection']  # 'charges'
    cfg['table']       # 'charges'

    # Dependencias declaradas
    deps = validate_migration_order('bought-packages')
    # ['organizations', 'packages']
"""

import os
from dotenv import load_dotenv

from errors import ConfigurationError

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

# --- Configuración de MongoDB (Origen) ---
MONGO_URI = os.getenv("MONGO_URI") or "mongodb://localhost:27017"
MONGO_DATABASE_NAME = os.getenv("MONGO_DB") or "billingService"

# --- Configuración de PostgreSQL (Destino) ---
POSTGRES_CONFIG = {
    "dbname": os.getenv("POSTGRES_DB") or "billing_service",
    "user": os.getenv("POSTGRES_USER") or "",
    "password": os.getenv("POSTGRES_PASSWORD") or "",
    "host": os.getenv("POSTGRES_HOST") or "localhost",
    "port": os.getenv("POSTGRES_PORT") or "5432",
}
POSTGRES_SCHEMA = os.getenv("POSTGRES_SCHEMA") or "billing"
POSTGRES_TIMEZONE = os.getenv("TZ") or "UTC"

# --- Configuración de Pasos ---
# Cada paso define:
# - collection: Nombre de la colección MongoDB de origen
# - table: Tabla principal destino (PK = _id del documento)
# - related_tables: Tablas hijas (arrays embebidos desnormalizados)
# - depends_on: Pasos que DEBEN correr antes (por FKs)
# - description: Descripción de negocio

COLLECTIONS = {
    "services": {
        "collection": "services",
        "table": "services",
        "related_tables": [],
        "depends_on": [],
        "description": "Catálogo de servicios facturables",
    },
    "organizations": {
        "collection": "organizations",
        "table": "organizations",
        "related_tables": ["organization_service_demo_uses"],
        "depends_on": [],
        "description": "Organizaciones cliente y usos demo de servicios",
    },
    "packages": {
        "collection": "packages",
        "table": "packages",
        "related_tables": ["package_items", "package_activation_bonus_packages"],
        "depends_on": ["services"],  # service.code → services.code
        "description": "Paquetes vendibles, sus ítems y paquetes bonus de activación",
    },
    "bought-packages": {
        "collection": "boughtPackages",
        "table": "bought_packages",
        "related_tables": ["bought_package_items"],
        "depends_on": ["organizations", "packages"],
        "description": "Paquetes comprados por organizaciones con sus ítems consumibles",
    },
    "charges": {
        "collection": "charges",
        "table": "charges",
        "related_tables": [],
        "depends_on": ["organizations", "bought-packages"],
        "description": "Cargos por documento (factura, contrato, acta, poder...)",
    },
    "payments": {
        "collection": "payments",
        "table": "payments",
        "related_tables": [],
        "depends_on": ["organizations"],
        "description": "Pagos registrados a organizaciones",
    },
    "payme-transactions": {
        "collection": "paymeTransactions",
        "table": "payme_transactions",
        "related_tables": [],
        "depends_on": ["organizations"],
        "description": "Transacciones de la pasarela Payme",
    },
    "organization-balance-bindings": {
        "collection": "organizationBalanceBindings",
        "table": "organization_balance_bindings",
        "related_tables": [],
        "depends_on": ["organizations"],
        "description": "Vínculos de saldo entre organización pagadora y destino",
    },
    "credit-updates": {
        "collection": "creditUpdates",
        "table": "credit_updates",
        "related_tables": [],
        "depends_on": ["organizations"],
        "description": "Actualizaciones del monto de crédito por organización",
    },
    "bank-payment-auto-apply-errors": {
        "collection": "bankPaymentsAutoApplyErrors",
        "table": "bank_payments_auto_apply_errors",
        "related_tables": [],
        "depends_on": [],
        "description": "Errores de aplicación automática de pagos bancarios",
    },
}

# --- Orden de Migración ---
# Fijo. Ejecutar los pasos en este orden garantiza que las FKs sean válidas.
MIGRATION_ORDER = [
    "services",  # Sin dependencias
    "organizations",  # Sin dependencias
    "packages",  # Depende de services
    "bought-packages",  # Depende de organizations, packages
    "charges",  # Depende de organizations, bought-packages
    "payments",
    "payme-transactions",
    "organization-balance-bindings",
    "credit-updates",
    "bank-payment-auto-apply-errors",
]


# --- Funciones Helper ---


def get_collection_config(step_name: str) -> dict:
    """
    Obtiene la configuración de un paso de migración por nombre.

    Args:
        step_name: Nombre del paso (ej: 'bought-packages')

    Returns:
        dict: Configuración con keys collection, table, related_tables,
              depends_on y description

    Raises:
        KeyError: Si el paso no está configurado

    Ejemplo:
        >>> get_collection_config('bought-packages')['collection']
        'boughtPackages'
    """
    if step_name not in COLLECTIONS:
        available = ", ".join(COLLECTIONS.keys())
        raise KeyError(
            f"Paso '{step_name}' no está configurado.\n"
            f"Pasos disponibles: {available}"
        )
    return COLLECTIONS[step_name]


def validate_migration_order(step_name: str) -> list:
    """
    Retorna los pasos que deben migrarse antes que `step_name`.

    Ejemplo:
        >>> validate_migration_order('packages')
        ['services']
        >>> validate_migration_order('services')
        []
    """
    config = get_collection_config(step_name)
    return config.get("depends_on", [])


def get_tables_for_step(step_name: str) -> list:
    """Tabla principal seguida de las tablas hijas del paso."""
    config = get_collection_config(step_name)
    return [config["table"]] + list(config.get("related_tables", []))


def get_settings() -> dict:
    """Snapshot de la configuración cargada desde el entorno (.env)."""
    return {
        "mongo_uri": MONGO_URI,
        "mongo_db": MONGO_DATABASE_NAME,
        "postgres": dict(POSTGRES_CONFIG),
        "schema": POSTGRES_SCHEMA,
        "timezone": POSTGRES_TIMEZONE,
    }


def validate_settings(settings: dict):
    """
    Valida los parámetros obligatorios antes de abrir conexiones.

    Sin URI de MongoDB o sin credenciales de PostgreSQL no tiene sentido
    arrancar: se lanza ConfigurationError y el proceso termina con código 1.
    """
    missing = []
    if not settings.get("mongo_uri"):
        missing.append("MONGO_URI")
    if not settings.get("mongo_db"):
        missing.append("MONGO_DB")

    postgres = settings.get("postgres") or {}
    for key, env_name in (
        ("user", "POSTGRES_USER"),
        ("password", "POSTGRES_PASSWORD"),
        ("host", "POSTGRES_HOST"),
        ("port", "POSTGRES_PORT"),
        ("dbname", "POSTGRES_DB"),
    ):
        if not postgres.get(key):
            missing.append(env_name)

    if not settings.get("timezone"):
        missing.append("TZ")

    if missing:
        raise ConfigurationError(
            f"Faltan parámetros obligatorios: {', '.join(missing)}"
        )
