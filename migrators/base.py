"""
Módulo base para migradores de colecciones billing MongoDB → PostgreSQL.

Define la interfaz común (contrato) que todos los migradores específicos
deben implementar, y el ciclo de migración compartido. Así el orquestador
funciona con cualquier migrador sin conocer sus detalles internos.

Patrón de diseño: Template Method + Strategy
- orchestrator.py = Contexto (ejecuta pasos en orden fijo)
- BaseMigrator.migrate() = Ciclo común (stream → decode → check → insert)
- ServicesMigrator, ChargesMigrator... = Estrategias concretas

Ciclo por documento:
1. decode(doc): documento Mongo → registro tipado (falla = fatal)
2. get_primary_key(record): PK destino (= _id en hex)
3. Chequeo de idempotencia: si la PK ya existe → skipped
   (y, si el migrador lo pide, re-escribe hijas con ON CONFLICT DO NOTHING)
4. extract_data(record): {'main': fila, 'related': {tabla: [filas]}}
5. INSERT de la fila principal (falla = fatal), luego las hijas

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        def __init__(self, step_name='mi-paso'):
            super().__init__(step_name)

        def decode(self, doc):
            return MiDocumento.from_document(doc)

        # ... implementar resto de métodos abstractos
"""

from abc import ABC, abstractmethod
from contextlib import closing

import config
from errors import DestinationReadError, DuplicateRowError
from progress import StepReport
from stores import warn

PROGRESS_EVERY = 1000


class BaseMigrator(ABC):
    """
    Clase abstracta para migradores de un paso (una colección origen).

    Attributes:
        step_name (str): Nombre del paso en config.MIGRATION_ORDER
        collection (str): Colección MongoDB de origen
        table (str): Tabla principal destino
        related_tables (list): Tablas hijas desnormalizadas
    """

    # Re-escribir hijas aunque el padre ya exista (relleno tras corrida cortada)
    rewrite_children_on_skip = False

    # Tablas hijas con INSERT simple (IDs acuñados, no pueden colisionar)
    plain_insert_tables = ()

    def __init__(self, step_name: str):
        """
        Args:
            step_name: Nombre del paso (ej: 'bought-packages')
        """
        step_config = config.get_collection_config(step_name)
        self.step_name = step_name
        self.collection = step_config["collection"]
        self.table = step_config["table"]
        self.related_tables = list(step_config.get("related_tables", []))

    @property
    def tables(self):
        return [self.table] + self.related_tables

    # =========================================================================
    # INTERFAZ REQUERIDA
    # =========================================================================

    @abstractmethod
    def decode(self, doc: dict):
        """
        Convierte un documento Mongo en el registro tipado del migrador.

        Debe tolerar campos y subdocumentos ausentes (valores cero) y lanzar
        DocumentDecodeError ante tipos incorrectos.
        """

    @abstractmethod
    def get_primary_key(self, record) -> str:
        """PK de la tabla principal: el _id del documento en hex (24 chars)."""

    @abstractmethod
    def extract_data(self, record) -> dict:
        """
        Filas destino para un registro.

        Returns:
            dict: {
                'main': {columna: valor, ...},
                'related': {
                    'tabla_hija': [{columna: valor}, ...],
                    ...
                }
            }
        """

    # =========================================================================
    # CICLO DE MIGRACIÓN
    # =========================================================================

    def migrate(self, source, destination) -> StepReport:
        """
        Migra la colección completa documento por documento.

        Cualquier fallo de decode o de INSERT se propaga (fail-fast): es
        preferible una migración parcial a datos omitidos en silencio.
        """
        report = StepReport(self.step_name, self.collection)
        report.source_count = source.count(self.collection)
        report.snapshot_before(destination, self.tables)
        report.print_start()

        processed = 0
        with closing(source.stream(self.collection)) as documents:
            for doc in documents:
                self.migrate_document(doc, destination, report)
                processed += 1
                if processed % PROGRESS_EVERY == 0:
                    print(
                        f"\r\033[K   ⏳ Procesados: {processed:,}/{report.source_count:,}",
                        end="",
                        flush=True,
                    )
        if processed >= PROGRESS_EVERY:
            print()

        report.snapshot_after(destination)
        report.print_summary()
        return report

    def migrate_document(self, doc, destination, report):
        record = self.decode(doc)
        row_id = self.get_primary_key(record)

        exists, verified = self._check_exists(destination, row_id)
        if exists:
            self._skip(record, destination, report)
            return

        data = self.extract_data(record)
        try:
            destination.insert(self.table, data["main"])
        except DuplicateRowError:
            # Solo absorbemos el duplicado si el chequeo previo no pudo leer
            if verified:
                raise
            warn(
                f"{self.table} {row_id} ya existía (chequeo de existencia fallido), "
                "se cuenta como omitido"
            )
            self._skip(record, destination, report)
            return

        report.counter(self.table).moved += 1
        self._insert_related(data["related"], destination, report)

    def _check_exists(self, destination, row_id):
        """
        Returns:
            tuple: (existe, verificado). Si la lectura falla se asume que
                   no existe y se avisa; la migración sigue.
        """
        try:
            return destination.exists(self.table, row_id), True
        except DestinationReadError as e:
            warn(str(e))
            return False, False

    def _skip(self, record, destination, report):
        report.counter(self.table).skipped += 1
        if self.rewrite_children_on_skip:
            related = self.extract_data(record)["related"]
            self._insert_related(related, destination, report)

    def _insert_related(self, related, destination, report):
        for table_name, rows in related.items():
            counter = report.counter(table_name)
            for row in rows:
                if table_name in self.plain_insert_tables:
                    destination.insert(table_name, row)
                    counter.moved += 1
                elif destination.insert_or_ignore(table_name, row):
                    counter.moved += 1

