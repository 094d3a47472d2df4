"""Construcción de consultas sobre las colecciones de Firestore.

Las restricciones se devuelven como una lista ordenada de objetos simples que
el adaptador del almacén traduce a la API del cliente. Combinar un filtro de
igualdad sobre `distancia` con el orden por `fecha` exige un índice compuesto
(distancia ASC, fecha DESC) creado de antemano en el proyecto de Firebase.
"""
from dataclasses import dataclass
from typing import Any, List, Union
from monitoreo.config import DESEMPATE_POR_ID
from monitoreo.services.filtros import FilterDescriptor

ASC = "ASCENDING"
DESC = "DESCENDING"

CAMPO_FECHA = "fecha"
CAMPO_DISTANCIA = "distancia"
CAMPO_ID = "__name__" # id del documento en Firestore


@dataclass(frozen=True)
class OrdenarPor:
    campo: str
    direccion: str = DESC


@dataclass(frozen=True)
class Donde:
    campo: str
    operador: str
    valor: Any


@dataclass(frozen=True)
class Limite:
    n: int


Restriccion = Union[OrdenarPor, Donde, Limite]


def construir_consulta_reciente(limit: int, desempate_por_id: bool = DESEMPATE_POR_ID) -> List[Restriccion]:
    """Los `limit` documentos más recientes primero."""
    restricciones: List[Restriccion] = [OrdenarPor(CAMPO_FECHA, DESC)]
    if desempate_por_id:
        restricciones.append(OrdenarPor(CAMPO_ID, DESC))
    restricciones.append(Limite(limit))
    return restricciones


def construir_consulta_valores(filtros: FilterDescriptor, desempate_por_id: bool = DESEMPATE_POR_ID) -> List[Restriccion]:
    restricciones = construir_consulta_reciente(filtros.limit, desempate_por_id)
    if filtros.distancia is not None:
        restricciones.append(Donde(CAMPO_DISTANCIA, "==", filtros.distancia))
    if filtros.desde is not None:
        restricciones.append(Donde(CAMPO_FECHA, ">=", filtros.desde))
    return restricciones
