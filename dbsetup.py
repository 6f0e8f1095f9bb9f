# dbsetup.py
"""
Script de configuración de base de datos PostgreSQL.
Crea el schema y todas las tablas destino de la migración billing.

ARQUITECTURA:
- Un único schema (config.POSTGRES_SCHEMA, por defecto 'billing')
- Tablas principales: PK id VARCHAR(24) = _id de Mongo en hex
- Tablas hijas desnormalizadas: UNIQUE sobre la tupla completa
  (NULLS NOT DISTINCT, requiere PostgreSQL 15+) para que
  INSERT ... ON CONFLICT DO NOTHING no duplique en re-corridas
- bought_package_items: PK propia (ObjectId acuñado en la migración)

Nunca borra datos: todo es CREATE ... IF NOT EXISTS, se puede correr
antes de cada migración. Para empezar de cero usar reset_database.py.

CONVENCIÓN DE NAMING:
Colección MongoDB                Tabla PostgreSQL
--------------------            -------------------
services                     →  services
organizations                →  organizations (+ organization_service_demo_uses)
packages                     →  packages (+ package_items, package_activation_bonus_packages)
boughtPackages               →  bought_packages (+ bought_package_items)
charges                      →  charges
payments                     →  payments
paymeTransactions            →  payme_transactions
organizationBalanceBindings  →  organization_balance_bindings
creditUpdates                →  credit_updates
bankPaymentsAutoApplyErrors  →  bank_payments_auto_apply_errors
"""

import sys

import psycopg2
from psycopg2 import sql

import config

# Orden crítico: tablas padre antes que sus hijas (FKs)
TABLE_DDL = {
    "services": """
        CREATE TABLE IF NOT EXISTS {schema}.services (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            name VARCHAR(255) NOT NULL,
            code VARCHAR(36) NOT NULL UNIQUE
        )
    """,
    "organizations": """
        CREATE TABLE IF NOT EXISTS {schema}.organizations (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            updated_at TIMESTAMP,
            deleted_at TIMESTAMP,
            is_deleted BOOLEAN DEFAULT FALSE,
            name TEXT NOT NULL,
            inn VARCHAR(14),
            pinfl VARCHAR(14),
            balance DOUBLE PRECISION,
            fiscalization_balance DOUBLE PRECISION,
            reserved_fiscalization_balance DOUBLE PRECISION,
            total_payments DOUBLE PRECISION,
            credit_amount DOUBLE PRECISION,
            organization_code VARCHAR(255),
            referral_agent_code VARCHAR(255),
            white_label VARCHAR(255),
            offer_number VARCHAR(255),
            offer_date TIMESTAMP
        )
    """,
    "organization_service_demo_uses": """
        CREATE TABLE IF NOT EXISTS {schema}.organization_service_demo_uses (
            organization_id VARCHAR(24) NOT NULL
                REFERENCES {schema}.organizations(id) ON DELETE CASCADE,
            service_code VARCHAR(36) NOT NULL,
            used_at TIMESTAMP,
            UNIQUE NULLS NOT DISTINCT (organization_id, service_code, used_at)
        )
    """,
    "packages": """
        CREATE TABLE IF NOT EXISTS {schema}.packages (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            is_deleted BOOLEAN DEFAULT FALSE,
            name TEXT NOT NULL,
            price DOUBLE PRECISION,
            brv_rate DOUBLE PRECISION,
            duration_days INTEGER,
            duration_months INTEGER,
            is_demo BOOLEAN,
            is_public BOOLEAN,
            service_code VARCHAR(36),
            default_set_on_new_organization BOOLEAN
        )
    """,
    "package_items": """
        CREATE TABLE IF NOT EXISTS {schema}.package_items (
            package_id VARCHAR(24) NOT NULL
                REFERENCES {schema}.packages(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            code INTEGER NOT NULL,
            is_over_limit_allowed BOOLEAN,
            over_limit_price DOUBLE PRECISION,
            brv_rate DOUBLE PRECISION,
            is_unlimited BOOLEAN,
            "limit" INTEGER,
            UNIQUE NULLS NOT DISTINCT (
                package_id, name, code, is_over_limit_allowed,
                over_limit_price, brv_rate, is_unlimited, "limit"
            )
        )
    """,
    "package_activation_bonus_packages": """
        CREATE TABLE IF NOT EXISTS {schema}.package_activation_bonus_packages (
            package_id VARCHAR(24) NOT NULL
                REFERENCES {schema}.packages(id) ON DELETE CASCADE,
            bonus_package_id VARCHAR(24) NOT NULL,
            UNIQUE (package_id, bonus_package_id)
        )
    """,
    "bought_packages": """
        CREATE TABLE IF NOT EXISTS {schema}.bought_packages (
            id VARCHAR(24) PRIMARY KEY,
            organization_id VARCHAR(24),
            package_id VARCHAR(24),
            bought_at TIMESTAMP,
            expires_at TIMESTAMP,
            is_auto_extend BOOLEAN,
            is_active BOOLEAN,
            price DOUBLE PRECISION NOT NULL
        )
    """,
    "bought_package_items": """
        CREATE TABLE IF NOT EXISTS {schema}.bought_package_items (
            id VARCHAR(24) PRIMARY KEY,
            bought_package_id VARCHAR(24)
                REFERENCES {schema}.bought_packages(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            code INTEGER NOT NULL,
            is_over_limit_allowed BOOLEAN,
            over_limit_price DOUBLE PRECISION,
            is_unlimited BOOLEAN,
            limit_value INTEGER,
            used_count INTEGER
        )
    """,
    "charges": """
        CREATE TABLE IF NOT EXISTS {schema}.charges (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            is_deleted BOOLEAN DEFAULT FALSE,
            organization_id VARCHAR(24),
            price DOUBLE PRECISION NOT NULL,
            type INTEGER NOT NULL DEFAULT 0,
            bought_package_id VARCHAR(24) NOT NULL,
            bought_package_item_code INTEGER NOT NULL,
            service_code VARCHAR(36),
            object_id VARCHAR(36),
            number VARCHAR(255),
            date1 TIMESTAMP,
            date2 TIMESTAMP
        )
    """,
    "payments": """
        CREATE TABLE IF NOT EXISTS {schema}.payments (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            amount DOUBLE PRECISION NOT NULL,
            organization_id VARCHAR(24) NOT NULL,
            account_id VARCHAR(24) NOT NULL,
            method INTEGER NOT NULL,
            bank_transaction_id VARCHAR(255)
        )
    """,
    "payme_transactions": """
        CREATE TABLE IF NOT EXISTS {schema}.payme_transactions (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            payme_transaction_id VARCHAR(255) NOT NULL,
            payme_created_at TIMESTAMP NOT NULL,
            system_completed_at TIMESTAMP,
            state INTEGER,
            amount DOUBLE PRECISION NOT NULL,
            payment_id VARCHAR(255),
            organization_id VARCHAR(24) NOT NULL,
            reason INTEGER,
            system_canceled_at TIMESTAMP
        )
    """,
    "organization_balance_bindings": """
        CREATE TABLE IF NOT EXISTS {schema}.organization_balance_bindings (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            deleted_at TIMESTAMP,
            is_deleted BOOLEAN DEFAULT FALSE,
            payer_organization_id VARCHAR(24),
            target_organization_id VARCHAR(24),
            payer_organization_name TEXT,
            target_organization_name TEXT
        )
    """,
    "credit_updates": """
        CREATE TABLE IF NOT EXISTS {schema}.credit_updates (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            organization_id VARCHAR(24) NOT NULL,
            amount DOUBLE PRECISION NOT NULL,
            account_id VARCHAR(24)
        )
    """,
    "bank_payments_auto_apply_errors": """
        CREATE TABLE IF NOT EXISTS {schema}.bank_payments_auto_apply_errors (
            id VARCHAR(24) PRIMARY KEY,
            created_at TIMESTAMP,
            error_message TEXT,
            amount DOUBLE PRECISION NOT NULL,
            transaction_id VARCHAR(255) NOT NULL,
            payer_inn VARCHAR(14) NOT NULL,
            payer_name VARCHAR(255) NOT NULL,
            description TEXT,
            resolved BOOLEAN DEFAULT FALSE
        )
    """,
}

# Índices para las consultas habituales del servicio de billing
INDEX_DDL = [
    "CREATE INDEX IF NOT EXISTS idx_charges_organization ON {schema}.charges(organization_id)",
    "CREATE INDEX IF NOT EXISTS idx_credit_updates_organization ON {schema}.credit_updates(organization_id)",
    "CREATE INDEX IF NOT EXISTS idx_bank_errors_transaction ON {schema}.bank_payments_auto_apply_errors(transaction_id)",
]


def create_connection():
    """Establece conexión con PostgreSQL."""
    try:
        return psycopg2.connect(**config.POSTGRES_CONFIG)
    except psycopg2.OperationalError as e:
        print(f"❌ Error conectando a PostgreSQL: {e}", file=sys.stderr)
        return None


def create_schema(cursor, schema):
    """
    Crea schema, tablas e índices (idempotente).

    Args:
        cursor: Cursor de psycopg2
        schema: Nombre del schema destino
    """
    print(f"\n   🔧 Creando schema '{schema}'...")
    schema_id = sql.Identifier(schema)

    cursor.execute(sql.SQL("CREATE SCHEMA IF NOT EXISTS {}").format(schema_id))

    for ddl in TABLE_DDL.values():
        cursor.execute(sql.SQL(ddl).format(schema=schema_id))

    for ddl in INDEX_DDL:
        cursor.execute(sql.SQL(ddl).format(schema=schema_id))

    print(
        f"   ✅ Schema '{schema}' listo "
        f"({len(TABLE_DDL)} tablas + {len(INDEX_DDL)} índices)"
    )


def main():
    """Punto de entrada standalone: crea la estructura y termina."""
    print("=" * 80)
    print("🚀 CONFIGURACIÓN DE BASE DE DATOS PostgreSQL")
    print("=" * 80)

    conn = create_connection()
    if not conn:
        print("\n❌ No se pudo conectar a la base de datos")
        sys.exit(1)

    cursor = conn.cursor()

    try:
        print("\n🔨 Creando estructura de base de datos...")
        create_schema(cursor, config.POSTGRES_SCHEMA)
        conn.commit()

        print("\n" + "=" * 80)
        print("✅ Base de datos configurada correctamente")
        print("=" * 80)

    except psycopg2.Error as e:
        conn.rollback()
        print(f"\n❌ Error durante la configuración: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        cursor.close()
        conn.close()


if __name__ == "__main__":
    main()
