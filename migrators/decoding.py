"""
Decodificación tipada de documentos MongoDB.

Reglas (las mismas para todas las colecciones):
- Campo ausente o null → valor cero ('' / 0 / 0.0 / False / None / [])
- Subdocumento ausente → subdocumento vacío (sus campos valen cero)
- Campo presente con tipo BSON incorrecto → DocumentDecodeError (fatal)

Uso:
    d = DocumentDecoder('charges', doc)
    d.object_id('_id')                     # '64b7f0c2e1a4b3c2d1e0f9a8'
    d.sub('organization').object_id('_id') # '000000000000000000000000' si falta
    d.number('price')                      # 0.0 si falta
"""

from datetime import datetime

from bson import ObjectId

from errors import DocumentDecodeError

ZERO_OBJECT_ID = "0" * 24

_MISSING = object()


def _is_hex_object_id(value):
    return isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24


class DocumentDecoder:
    """Envoltorio de lectura sobre un documento (o subdocumento) de Mongo."""

    def __init__(self, collection, doc, document_id=None, path=""):
        if not isinstance(doc, dict):
            raise DocumentDecodeError(
                collection, document_id, f"'{path or '<root>'}' no es un documento"
            )
        self.collection = collection
        self.doc = doc
        self.path = path
        if document_id is None and not path:
            document_id = self._root_id()
        self.document_id = document_id

    def _root_id(self):
        _id = self.doc.get("_id")
        if isinstance(_id, ObjectId):
            return str(_id)
        if _is_hex_object_id(_id):
            return _id.lower()
        return None

    def _field_path(self, field):
        return f"{self.path}.{field}" if self.path else field

    def _fail(self, field, expected, value):
        raise DocumentDecodeError(
            self.collection,
            self.document_id,
            f"campo '{self._field_path(field)}': se esperaba {expected}, "
            f"llegó {type(value).__name__}",
        )

    def _get(self, field):
        value = self.doc.get(field, _MISSING)
        if value is None:
            return _MISSING
        return value

    # =========================================================================
    # ESCALARES
    # =========================================================================

    def object_id(self, field, required=False):
        value = self._get(field)
        if value is _MISSING:
            if required:
                raise DocumentDecodeError(
                    self.collection,
                    self.document_id,
                    f"falta el identificador '{self._field_path(field)}'",
                )
            return ZERO_OBJECT_ID
        if isinstance(value, ObjectId):
            return str(value)
        if _is_hex_object_id(value):
            return value.lower()
        self._fail(field, "ObjectId", value)

    def string(self, field):
        value = self._get(field)
        if value is _MISSING:
            return ""
        if not isinstance(value, str):
            self._fail(field, "string", value)
        return value

    def optional_string(self, field):
        if self._get(field) is _MISSING:
            return None
        return self.string(field)

    def number(self, field):
        value = self._get(field)
        if value is _MISSING:
            return 0.0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self._fail(field, "número", value)
        return float(value)

    def integer(self, field):
        value = self._get(field)
        if value is _MISSING:
            return 0
        if isinstance(value, bool):
            self._fail(field, "entero", value)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        self._fail(field, "entero", value)

    def boolean(self, field):
        value = self._get(field)
        if value is _MISSING:
            return False
        if not isinstance(value, bool):
            self._fail(field, "booleano", value)
        return value

    def datetime(self, field):
        value = self._get(field)
        if value is _MISSING:
            return None
        if not isinstance(value, datetime):
            self._fail(field, "fecha", value)
        return value

    # =========================================================================
    # SUBDOCUMENTOS
    # =========================================================================

    def sub(self, field):
        """Subdocumento; si falta se decodifica como documento vacío."""
        value = self._get(field)
        if value is _MISSING:
            value = {}
        return DocumentDecoder(
            self.collection, value, self.document_id, self._field_path(field)
        )

    def optional_document(self, field):
        """Subdocumento crudo (dict) o None si no está presente."""
        value = self._get(field)
        if value is _MISSING:
            return None
        if not isinstance(value, dict):
            self._fail(field, "documento", value)
        return value

    def sub_list(self, field):
        value = self._get(field)
        if value is _MISSING:
            return []
        if not isinstance(value, list):
            self._fail(field, "array", value)
        return [
            DocumentDecoder(
                self.collection,
                item,
                self.document_id,
                f"{self._field_path(field)}[{i}]",
            )
            for i, item in enumerate(value)
        ]
