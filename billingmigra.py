r"""
Script principal de migración billing: MongoDB → PostgreSQL.

Arquitectura:
- billingmigra.py: Infraestructura (argumentos, conexiones, exit codes)
- orchestrator.py: Ejecuta los 10 pasos en orden fijo (fail-fast)
- migrators/*.py: Lógica específica por colección (implementan BaseMigrator)
- config.py: Configuración centralizada (.env) y registro de pasos

Flujo de ejecución:
1. Validar parámetros obligatorios (URI Mongo, credenciales PostgreSQL)
2. Conectar a MongoDB (ping) y a PostgreSQL (autocommit)
3. Preparar schema destino (dbsetup.create_schema, idempotente)
4. Ejecutar todos los pasos de config.MIGRATION_ORDER
5. Cerrar conexiones

Re-ejecutable: cada documento ya migrado se omite por PK, y las tablas
hijas usan ON CONFLICT DO NOTHING.

Uso:
    python billingmigra.py
    python billingmigra.py --mongo-uri mongodb://host:27017 --pg-password secreto

Exit Codes:
    0: Los 10 pasos completados
    1: Error de configuración, conexión, schema o migración
"""

import argparse
import sys

import psycopg2
from psycopg2 import OperationalError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

import config
import dbsetup
from errors import ConfigurationError, MigrationStepError
from orchestrator import run_migrations
from stores import MongoSource, PostgresDestination


def parse_args(argv=None):
    """Flags de línea de comandos; los defaults vienen del entorno (.env)."""
    settings = config.get_settings()
    postgres = settings["postgres"]

    parser = argparse.ArgumentParser(
        description="Migración única del dataset billing de MongoDB a PostgreSQL"
    )
    parser.add_argument("--mongo-uri", default=settings["mongo_uri"], help="MongoDB connection string")
    parser.add_argument("--mongo-db", default=settings["mongo_db"], help="MongoDB database name")
    parser.add_argument("--pg-user", default=postgres["user"], help="PostgreSQL username")
    parser.add_argument("--pg-password", default=postgres["password"], help="PostgreSQL password")
    parser.add_argument("--pg-host", default=postgres["host"], help="PostgreSQL host")
    parser.add_argument("--pg-port", default=postgres["port"], help="PostgreSQL port")
    parser.add_argument("--pg-db", default=postgres["dbname"], help="PostgreSQL database name")
    parser.add_argument("--pg-schema", default=settings["schema"], help="Schema destino")
    parser.add_argument(
        "--tz", default=settings["timezone"], help="IANA timezone, e.g. UTC or Asia/Tashkent"
    )
    parser.add_argument(
        "--skip-setup",
        action="store_true",
        help="No ejecutar CREATE SCHEMA/TABLE antes de migrar",
    )
    return parser.parse_args(argv)


def settings_from_args(args):
    return {
        "mongo_uri": args.mongo_uri,
        "mongo_db": args.mongo_db,
        "postgres": {
            "dbname": args.pg_db,
            "user": args.pg_user,
            "password": args.pg_password,
            "host": args.pg_host,
            "port": args.pg_port,
        },
        "schema": args.pg_schema,
        "timezone": args.tz,
    }


def connect_to_mongo(settings):
    """
    Establece conexión a MongoDB.

    Returns:
        tuple: (client, database) de pymongo

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a MongoDB...")
        client = MongoClient(settings["mongo_uri"], serverSelectionTimeoutMS=5000)
        client.admin.command("ping")
        db = client[settings["mongo_db"]]
        print("✅ Conexión a MongoDB exitosa")
        return client, db
    except PyMongoError as e:
        print("❌ Error de conexión a MongoDB", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_postgres(settings):
    """
    Establece conexión a PostgreSQL en modo autocommit.

    Cada INSERT es su propia unidad atómica: una corrida cortada deja lo ya
    escrito, y la siguiente corrida continúa por idempotencia.

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a PostgreSQL...")
        conn = psycopg2.connect(
            **settings["postgres"], options=f"-c timezone={settings['timezone']}"
        )
        conn.autocommit = True
        print("✅ Conexión a PostgreSQL exitosa")
        return conn
    except OperationalError as e:
        print("❌ Error de conexión a PostgreSQL", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def prepare_schema(pg_conn, schema):
    try:
        with pg_conn.cursor() as cursor:
            dbsetup.create_schema(cursor, schema)
    except psycopg2.Error as e:
        print(f"❌ Error preparando el schema '{schema}': {e}", file=sys.stderr)
        sys.exit(1)


def main(argv=None):
    """
    Función principal que coordina el flujo completo de migración.

    Exit Codes:
        0: Éxito
        1: Error de configuración, conexión o migración
    """
    args = parse_args(argv)
    settings = settings_from_args(args)

    print("=" * 70)
    print("🚀 MIGRACIÓN BILLING MONGODB → POSTGRESQL")
    print("=" * 70)

    try:
        config.validate_settings(settings)
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    print(f"📍 MongoDB: {settings['mongo_db']}")
    print(
        f"📍 PostgreSQL: {settings['postgres']['user']}@{settings['postgres']['host']}:"
        f"{settings['postgres']['port']}/{settings['postgres']['dbname']} "
        f"(schema {settings['schema']}, tz {settings['timezone']})"
    )

    mongo_client, mongo_db = connect_to_mongo(settings)
    pg_conn = None

    try:
        pg_conn = connect_to_postgres(settings)

        if not args.skip_setup:
            prepare_schema(pg_conn, settings["schema"])

        source = MongoSource(mongo_db)
        destination = PostgresDestination(pg_conn, settings["schema"])
        run_migrations(source, destination)

        print("\n" + "=" * 70)
        print("✅ Migration completed successfully!")
        print("=" * 70)

    except MigrationStepError as e:
        print(f"\n❌ Migration failed: {e}", file=sys.stderr)
        sys.exit(1)

    finally:
        print("\n🔒 Cerrando conexiones...")
        if pg_conn is not None:
            pg_conn.close()
        mongo_client.close()
        print("✅ Conexiones cerradas correctamente")


if __name__ == "__main__":
    main()
