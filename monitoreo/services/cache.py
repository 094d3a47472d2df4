import time
import urllib.parse
from typing import Any, Callable, Dict, Optional
from monitoreo.config import CACHE_TTL
from monitoreo.core.logging import get_logger
from monitoreo.services.filtros import FilterDescriptor
from monitoreo.utils.tiempo import a_iso

logger = get_logger("monitoreo.cache")

SIN_DISTANCIA = "all"
SIN_DESDE = "none"


class ResultCache:
    """Caché de respuestas en memoria con expiración desde la inserción.

    Una instancia por aplicación. No hay bloqueo por clave: dos peticiones
    que fallan a la vez consultan ambas al almacén y gana la última escritura.
    Cada invalidación abre una nueva generación; una lectura iniciada en una
    generación anterior no se guarda.
    """

    def __init__(self, ttl: float = CACHE_TTL, reloj: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._reloj = reloj
        self.generacion = 0
        # { "clave": {"timestamp": 12345.6, "results": [...]} }
        self._entradas: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Recupera una respuesta si no ha expirado. Un acierto no renueva el TTL."""
        entry = self._entradas.get(key)
        if entry is None:
            return None
        if self._reloj() - entry["timestamp"] < self.ttl:
            return entry["results"]
        self._entradas.pop(key, None)
        return None

    def set(self, key: str, results: Any, generacion: Optional[int] = None) -> bool:
        """Guarda una respuesta. Si se pasa `generacion` y ya hubo una invalidación
        posterior, los resultados son anteriores a una escritura y se descartan."""
        if generacion is not None and generacion != self.generacion:
            logger.debug(f"Resultado obsoleto descartado: {key}")
            return False
        self._entradas[key] = {
            "timestamp": self._reloj(),
            "results": results
        }
        return True

    def invalidar_todo(self):
        """Vacía la caché. Se llama tras cualquier escritura en Valores o Estado."""
        self.generacion += 1
        total = len(self._entradas)
        self._entradas.clear()
        if total:
            logger.info(f"Caché invalidada ({total} entradas)")

    def limpiar_expirados(self):
        now = self._reloj()
        to_delete = [k for k, v in self._entradas.items() if now - v["timestamp"] >= self.ttl]
        for k in to_delete:
            del self._entradas[k]
        return len(to_delete)

    def __len__(self):
        return len(self._entradas)


def clave_listado(filtros: FilterDescriptor, prefijo: str = "ver") -> str:
    """Clave estable para una combinación de filtros.

    Los valores reales de distancia van como "eq:<valor codificado>" para que
    ninguno coincida con el marcador "all". La fecha se escribe en UTC.
    """
    if filtros.distancia is None:
        distancia = SIN_DISTANCIA
    else:
        distancia = "eq:" + urllib.parse.quote(filtros.distancia, safe="")
    desde = SIN_DESDE if filtros.desde is None else a_iso(filtros.desde)
    return f"{prefijo}_{distancia}_{desde}_{filtros.limit}"


def clave_reciente(prefijo: str, limit: int) -> str:
    return f"{prefijo}_{limit}"
