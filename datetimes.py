"""
Saneamiento de timestamps antes de escribir en PostgreSQL.

Toda columna timestamp del destino debe contener NULL o una fecha con año
dentro de [1970, 2100]. MongoDB trae fechas "cero" (0001-01-01), años
absurdos por errores de carga y strings RFC 3339 en subdocumentos sin
esquema; todo pasa por aquí.
"""

import re
from datetime import datetime, timezone

MIN_YEAR = 1970
MAX_YEAR = 2100

# Fracción de segundos antes del offset final ('.242' en '...:18.242+00:00')
_FRACTION = re.compile(r"\.(\d+)(?=[+-]\d{2}:\d{2}$)")


def _to_naive_utc(value):
    # pymongo entrega datetimes naive en UTC; normalizamos los aware igual.
    # Cerca de los años 1 y 9999 la conversión se sale de rango → None
    if value.tzinfo is not None:
        try:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        except OverflowError:
            return None
    return value


def _normalize_fraction(match):
    # fromisoformat (< 3.11) solo acepta 3 o 6 dígitos; Go emite hasta 9
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_rfc3339(value):
    """
    Parsea un string RFC 3339 a datetime naive UTC.

    Formatos soportados:
    - '2023-03-22T07:49:18Z'
    - '2023-03-22T07:49:18.242Z'
    - '2023-03-22T07:49:18.123456789Z' (se trunca a microsegundos)
    - '2023-06-02T13:54:12+05:00'

    Returns:
        datetime|None: None si el string no es una fecha RFC 3339 válida
                       o no es representable en UTC
    """
    if not isinstance(value, str) or "T" not in value:
        return None

    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(_normalize_fraction, text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    # RFC 3339 exige offset explícito
    if parsed.tzinfo is None:
        return None
    return _to_naive_utc(parsed)


def sanitize_datetime(value):
    """
    Retorna el timestamp si es almacenable, o None.

    Se considera inválido (→ None):
    - ausencia de valor
    - fecha cero de Mongo/Go (año 1)
    - año fuera de [1970, 2100]
    """
    if value is None or not isinstance(value, datetime):
        return None

    value = _to_naive_utc(value)
    if value is None or value.year < MIN_YEAR or value.year > MAX_YEAR:
        return None
    return value


def coerce_datetime(value):
    """Acepta datetime nativo o string RFC 3339; cualquier otra cosa → None."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_rfc3339(value)
    return None


def utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def required_datetime(*candidates):
    """
    Para columnas NOT NULL: primer candidato válido o, si ninguno lo es,
    la hora actual. Una columna obligatoria nunca recibe NULL ni fecha cero.
    """
    for candidate in candidates:
        valid = sanitize_datetime(candidate)
        if valid is not None:
            return valid
    return utcnow()
