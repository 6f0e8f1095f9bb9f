# reset_database.py
"""
Script para limpiar completamente el schema de migración en PostgreSQL.

ADVERTENCIA: Esto destruye TODOS los datos migrados. La migración es
re-ejecutable sin esto; usarlo solo para repetir una carga desde cero.
"""

import sys

import psycopg2
from psycopg2 import sql

import config


def reset_database(schema=None):
    """Elimina el schema de migración (CASCADE) con todas sus tablas."""
    schema = schema or config.POSTGRES_SCHEMA

    conn = psycopg2.connect(**config.POSTGRES_CONFIG)
    cursor = conn.cursor()

    print("=" * 70)
    print("🗑️  LIMPIEZA COMPLETA DE BASE DE DATOS")
    print("=" * 70)

    try:
        print(f"\n🗑️  Eliminando schema '{schema}'...")
        cursor.execute(
            sql.SQL("DROP SCHEMA IF EXISTS {} CASCADE").format(sql.Identifier(schema))
        )
        conn.commit()
        print(f"   ✅ Schema '{schema}' eliminado")
    except psycopg2.Error as e:
        conn.rollback()
        print(f"   ❌ Error eliminando '{schema}': {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        cursor.close()
        conn.close()

    print("\n" + "=" * 70)
    print("✅ LIMPIEZA COMPLETA FINALIZADA")
    print("=" * 70)
    print("\nAhora ejecutar:")
    print("  1. python dbsetup.py      (recrear estructura)")
    print("  2. python billingmigra.py (migrar datos)")


if __name__ == "__main__":
    # Seguridad: pedir confirmación
    print("\n⚠️  ADVERTENCIA: Esto eliminará TODOS los datos migrados.")
    response = input("¿Continuar? (escribir 'SI' en mayúsculas): ")

    if response == "SI":
        reset_database()
    else:
        print("\n❌ Operación cancelada")
        sys.exit(0)
