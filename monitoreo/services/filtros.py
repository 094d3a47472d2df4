import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from monitoreo.config import DISTANCIA_TODOS, LIMITE_DEFECTO, LIMITE_MAXIMO
from monitoreo.core.errors import ValidationError
from monitoreo.utils.tiempo import parsear_iso

# Entero al inicio de la cadena, como parseInt: "12abc" -> 12, "1.5" -> 1
_ENTERO_INICIAL = re.compile(r"\s*([+-]?[0-9]+)")


@dataclass(frozen=True)
class FilterDescriptor:
    distancia: Optional[str] = None
    desde: Optional[datetime] = None
    limit: int = LIMITE_DEFECTO


def normalizar_limite(raw: Optional[str], defecto: int = LIMITE_DEFECTO) -> int:
    """Devuelve siempre un entero en [1, LIMITE_MAXIMO]."""
    if raw is None:
        return defecto
    match = _ENTERO_INICIAL.match(str(raw))
    if not match:
        return defecto
    valor = int(match.group(1))
    if valor <= 0:
        return defecto
    return min(valor, LIMITE_MAXIMO)


def normalizar_distancia(raw: Optional[str]) -> Optional[str]:
    if raw is None or raw == "" or raw == DISTANCIA_TODOS:
        return None
    return raw


def normalizar_desde(raw: Optional[str]) -> Optional[datetime]:
    if raw is None or raw.strip() == "":
        return None
    try:
        return parsear_iso(raw)
    except ValueError:
        raise ValidationError(
            f"El parámetro 'desde' debe ser una fecha ISO-8601 válida (recibido: '{raw}')"
        )


def normalizar_filtros(
    distancia: Optional[str] = None,
    desde: Optional[str] = None,
    limit: Optional[str] = None,
    limite_defecto: int = LIMITE_DEFECTO,
) -> FilterDescriptor:
    """Convierte los parámetros crudos de /ver en un FilterDescriptor validado."""
    return FilterDescriptor(
        distancia=normalizar_distancia(distancia),
        desde=normalizar_desde(desde),
        limit=normalizar_limite(limit, limite_defecto),
    )
