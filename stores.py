"""
Adaptadores de los dos almacenes de la migración.

MongoSource:
    stream(collection)  → cursor sobre todos los documentos (sin filtro)
    count(collection)   → total de documentos (0 + warning si falla)

PostgresDestination:
    insert(table, row)            → INSERT; falla en PK/UNIQUE
    insert_or_ignore(table, row)  → INSERT ... ON CONFLICT DO NOTHING
    exists(table, row_id)         → ¿existe fila con esa PK?
    count(table)                  → total de filas (0 + warning si falla)

Las filas son dicts {columna: valor}. Los migradores solo conocen esta
interfaz, por eso los tests la reemplazan por almacenes en memoria.
"""

import sys

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2 import sql
from pymongo.errors import PyMongoError

from errors import DestinationReadError, DestinationWriteError, DuplicateRowError


def warn(message):
    print(f"   ⚠️  WARNING: {message}", file=sys.stderr)


class MongoSource:
    """Lectura de colecciones completas de la base billing en MongoDB."""

    def __init__(self, database):
        self.database = database

    def stream(self, collection_name):
        # Sin timeout de cursor: hay colecciones de millones de documentos
        cursor = self.database[collection_name].find({}, no_cursor_timeout=True)
        try:
            for doc in cursor:
                yield doc
        finally:
            cursor.close()

    def count(self, collection_name):
        try:
            return self.database[collection_name].count_documents({})
        except PyMongoError as e:
            warn(f"Could not count {collection_name}: {e}")
            return 0


class PostgresDestination:
    """
    Escritura fila a fila en el schema de PostgreSQL.

    La conexión debe estar en autocommit: cada INSERT es su propia unidad
    atómica y un fallo de lectura no deja la transacción abortada.
    """

    def __init__(self, connection, schema):
        self.connection = connection
        self.schema = schema

    def _table(self, table):
        return sql.Identifier(self.schema, table)

    def _insert_query(self, table, row, ignore_conflicts):
        columns = list(row.keys())
        query = sql.SQL("INSERT INTO {table} ({columns}) VALUES ({values})").format(
            table=self._table(table),
            columns=sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            values=sql.SQL(", ").join(sql.Placeholder() * len(columns)),
        )
        if ignore_conflicts:
            query = query + sql.SQL(" ON CONFLICT DO NOTHING")
        return query, [row[c] for c in columns]

    def insert(self, table, row):
        query, values = self._insert_query(table, row, ignore_conflicts=False)
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query, values)
        except pg_errors.UniqueViolation as e:
            raise DuplicateRowError(table, row.get("id"), e) from e
        except psycopg2.Error as e:
            raise DestinationWriteError(table, row.get("id"), e) from e

    def insert_or_ignore(self, table, row):
        """Retorna True si la fila se escribió, False si ya existía."""
        query, values = self._insert_query(table, row, ignore_conflicts=True)
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query, values)
                return cursor.rowcount > 0
        except psycopg2.Error as e:
            raise DestinationWriteError(table, row.get("id"), e) from e

    def exists(self, table, row_id):
        query = sql.SQL("SELECT 1 FROM {table} WHERE id = %s LIMIT 1").format(
            table=self._table(table)
        )
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query, (row_id,))
                return cursor.fetchone() is not None
        except psycopg2.Error as e:
            raise DestinationReadError(
                f"Could not check existence of {table} with id {row_id}: {e}"
            ) from e

    def count(self, table):
        query = sql.SQL("SELECT COUNT(*) FROM {table}").format(table=self._table(table))
        try:
            with self.connection.cursor() as cursor:
                cursor.execute(query)
                return cursor.fetchone()[0]
        except psycopg2.Error as e:
            warn(f"Could not count {table}: {e}")
            return 0
