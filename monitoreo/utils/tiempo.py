from datetime import datetime, timezone


def ahora():
    return datetime.now(timezone.utc)


def parsear_iso(texto):
    """Parsea un instante ISO-8601 estricto y lo devuelve en UTC.

    Lanza ValueError si no lo es o si el instante cae fuera del rango de
    datetime al pasarlo a UTC (p. ej. 0001-01-01T00:00:00+05:00).
    """
    if not isinstance(texto, str):
        raise ValueError(f"no es una cadena: {texto!r}")
    texto = texto.strip()
    if texto.endswith(("Z", "z")):
        texto = texto[:-1] + "+00:00"
    instante = datetime.fromisoformat(texto)
    if instante.tzinfo is None:
        instante = instante.replace(tzinfo=timezone.utc)
    try:
        return instante.astimezone(timezone.utc)
    except OverflowError:
        raise ValueError(f"fuera de rango en UTC: {texto!r}")


def a_iso(valor):
    """Normaliza una fecha del almacén a cadena ISO-8601 en UTC.

    Firestore devuelve DatetimeWithNanoseconds (subclase de datetime). Los
    documentos antiguos guardaban la fecha como texto: si es ISO válido se
    normaliza, si no se devuelve tal cual.
    """
    if valor is None:
        return None
    if isinstance(valor, datetime):
        if valor.tzinfo is None:
            valor = valor.replace(tzinfo=timezone.utc)
        return valor.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
    if isinstance(valor, str):
        try:
            return a_iso(parsear_iso(valor))
        except ValueError:
            return valor
    return str(valor)
