"""
Clasificación de cargos según el documento vinculado.

Un cargo de Mongo embebe como mucho UNO de ocho subdocumentos alternativos
(factura roaming, contrato, guía, acta, acta de conciliación, poder,
factura de devolución EDI, poder EDI). El destino no tiene esas columnas:
guarda un código de tipo y una tupla uniforme

    (type, object_id, number, date1, date2)

Reglas:
- Se prueban los subdocumentos en el orden fijo de LINKED_DOCUMENTS; el
  primero presente gana.
- Los códigos de ChargeDocumentType son contrato con los consumidores del
  destino: NO renumerar.
- object_id / number solo si el campo es string.
- date1 = 'date', salvo poder/poder EDI (intervalo): start_date / end_date.
  Las fechas pueden venir como datetime o como string RFC 3339.
- Sin subdocumento: tipo 0 y date1 = created_at del cargo.
- date1/date2 salen saneadas (sanitize_datetime).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional

from datetimes import coerce_datetime, sanitize_datetime


class ChargeDocumentType(IntEnum):
    UNCATEGORIZED = 0
    EDI_RETURN_INVOICE = 2
    ROAMING_INVOICE = 3
    EDI_ATTORNEY = 4
    ROAMING_CONTRACT = 7
    ROAMING_VERIFICATION_ACT = 8
    ROAMING_ACT = 9
    ROAMING_WAYBILL = 10
    ROAMING_EMPOWERMENT = 11


@dataclass(frozen=True)
class LinkedDocumentKind:
    field: str
    type: ChargeDocumentType
    date1_field: str
    date2_field: Optional[str] = None


# Orden de prioridad: el primer subdocumento presente decide el tipo
LINKED_DOCUMENTS = (
    LinkedDocumentKind("roaming_invoice", ChargeDocumentType.ROAMING_INVOICE, "date"),
    LinkedDocumentKind("roaming_contract", ChargeDocumentType.ROAMING_CONTRACT, "date"),
    LinkedDocumentKind("roaming_waybill", ChargeDocumentType.ROAMING_WAYBILL, "date"),
    LinkedDocumentKind("roaming_act", ChargeDocumentType.ROAMING_ACT, "date"),
    LinkedDocumentKind(
        "roaming_verification_act", ChargeDocumentType.ROAMING_VERIFICATION_ACT, "date"
    ),
    LinkedDocumentKind(
        "roaming_empowerment",
        ChargeDocumentType.ROAMING_EMPOWERMENT,
        "start_date",
        "end_date",
    ),
    LinkedDocumentKind(
        "edi_return_invoice", ChargeDocumentType.EDI_RETURN_INVOICE, "date"
    ),
    LinkedDocumentKind(
        "edi_attorney", ChargeDocumentType.EDI_ATTORNEY, "start_date", "end_date"
    ),
)

LINKED_DOCUMENT_FIELDS = tuple(kind.field for kind in LINKED_DOCUMENTS)


@dataclass(frozen=True)
class ChargeReference:
    type: ChargeDocumentType
    object_id: Optional[str] = None
    number: Optional[str] = None
    date1: Optional[datetime] = None
    date2: Optional[datetime] = None


def _string_field(document, field):
    value = document.get(field)
    return value if isinstance(value, str) else None


def _date_field(document, field):
    if field is None:
        return None
    return coerce_datetime(document.get(field))


def resolve_charge_reference(linked_documents, created_at):
    """
    Clasifica un cargo y extrae su referencia normalizada.

    Args:
        linked_documents: dict {campo: subdocumento|None} con los campos de
                          LINKED_DOCUMENT_FIELDS (los ausentes pueden faltar)
        created_at: Fecha de creación del cargo (fallback de date1)

    Returns:
        ChargeReference

    Ejemplo:
        >>> ref = resolve_charge_reference(
        ...     {'roaming_invoice': {'_id': 'abc', 'number': 'F-1'}}, None)
        >>> int(ref.type), ref.number
        (3, 'F-1')
    """
    for kind in LINKED_DOCUMENTS:
        document = linked_documents.get(kind.field)
        if document is None:
            continue

        date1 = _date_field(document, kind.date1_field)
        if date1 is None:
            date1 = created_at
        return ChargeReference(
            type=kind.type,
            object_id=_string_field(document, "_id"),
            number=_string_field(document, "number"),
            date1=sanitize_datetime(date1),
            date2=sanitize_datetime(_date_field(document, kind.date2_field)),
        )

    return ChargeReference(
        type=ChargeDocumentType.UNCATEGORIZED,
        date1=sanitize_datetime(created_at),
    )
