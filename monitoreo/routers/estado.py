from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Optional
from monitoreo.config import COLECCION_ESTADO, LIMITE_DEFECTO
from monitoreo.core.dependencies import get_cache, get_store
from monitoreo.core.errors import UpstreamError, error_upstream, faltan_parametros
from monitoreo.core.logging import get_logger
from monitoreo.routers.valores import formatear_registros
from monitoreo.services.cache import ResultCache, clave_reciente
from monitoreo.services.consultas import construir_consulta_reciente
from monitoreo.services.filtros import normalizar_limite
from monitoreo.utils.cuerpo import leer_cuerpo, vacio
from monitoreo.utils.tiempo import a_iso, ahora

logger = get_logger("monitoreo.routers.estado")
router = APIRouter()


def parsear_conectado(valor) -> bool:
    # El ESP32 manda "true"/"false" como texto en formularios
    return valor is True or (isinstance(valor, str) and valor.strip().lower() == "true")


@router.get("/estado")
async def listar_estado(limit: Optional[str] = None, store=Depends(get_store), cache: ResultCache = Depends(get_cache)):
    lim = normalizar_limite(limit, LIMITE_DEFECTO)
    cache_key = clave_reciente("estado", lim)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache hit: {cache_key}")
        return cached

    generacion = cache.generacion
    try:
        filas = await store.consultar(COLECCION_ESTADO, construir_consulta_reciente(lim))
    except UpstreamError as e:
        return error_upstream("Error en /estado", e)

    data = formatear_registros(filas)
    cache.set(cache_key, data, generacion)
    return data


@router.post("/estado", status_code=201)
async def actualizar_estado(request: Request, store=Depends(get_store), cache: ResultCache = Depends(get_cache)):
    body = await leer_cuerpo(request)
    conectado = body.get("conectado")
    nombre = body.get("nombre")
    if conectado is None or vacio(nombre):
        raise faltan_parametros("conectado y nombre son requeridos")

    fecha = ahora()
    doc_data = {
        "conectado": parsear_conectado(conectado),
        "nombre": str(nombre),
        "fecha": fecha
    }

    try:
        doc_id = await store.insertar(COLECCION_ESTADO, doc_data)
    except UpstreamError as e:
        return error_upstream("Error en /estado", e)

    cache.invalidar_todo()
    logger.info(f"Estado de {doc_data['nombre']}: {'conectado' if doc_data['conectado'] else 'desconectado'}")
    return JSONResponse(status_code=201, content={
        "id": doc_id,
        **doc_data,
        "fecha": a_iso(fecha),
        "status": "Estado actualizado"
    })
