"""
Jerarquía de excepciones de la migración.

Fatales (abortan toda la corrida):
- DocumentDecodeError: documento MongoDB malformado
- DestinationWriteError / DuplicateRowError: fallo de INSERT
- MigrationStepError: envoltorio con el nombre del paso que falló

Recuperables (el migrador las convierte en warning):
- DestinationReadError: fallo del chequeo de existencia
"""


class MigrationError(Exception):
    """Base de todos los errores de la migración."""


class ConfigurationError(MigrationError):
    """Falta un parámetro obligatorio de conexión."""


class DocumentDecodeError(MigrationError):
    def __init__(self, collection, document_id, message):
        self.collection = collection
        self.document_id = document_id
        super().__init__(
            f"{collection} documento {document_id or '<sin _id>'}: {message}"
        )


class DestinationError(MigrationError):
    """Error reportado por el almacén destino."""


class DestinationReadError(DestinationError):
    pass


class DestinationWriteError(DestinationError):
    def __init__(self, table, row_id, message):
        self.table = table
        self.row_id = row_id
        super().__init__(f"{table} {row_id} insert failed: {message}")


class DuplicateRowError(DestinationWriteError):
    """INSERT rechazado por PK o constraint UNIQUE."""


class MigrationStepError(MigrationError):
    def __init__(self, step_name, cause):
        self.step_name = step_name
        self.cause = cause
        super().__init__(f"migration {step_name} failed: {cause}")
