from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from typing import Optional
from monitoreo.config import COLECCION_VALORES, LIMITE_DEFECTO, LIMITE_MIN_DEFECTO
from monitoreo.core.dependencies import get_cache, get_store
from monitoreo.core.errors import UpstreamError, ValidationError, error_upstream, faltan_parametros
from monitoreo.core.logging import get_logger
from monitoreo.services.cache import ResultCache, clave_listado, clave_reciente
from monitoreo.services.consultas import construir_consulta_reciente, construir_consulta_valores
from monitoreo.services.filtros import normalizar_filtros, normalizar_limite
from monitoreo.utils.cuerpo import leer_cuerpo, vacio
from monitoreo.utils.tiempo import a_iso, ahora, parsear_iso

logger = get_logger("monitoreo.routers.valores")
router = APIRouter()


def formatear_registros(filas):
    """Deja cada documento tal cual salvo `fecha`, que pasa a ISO-8601."""
    return [{**fila, "fecha": a_iso(fila.get("fecha"))} for fila in filas]


@router.get("/ver")
async def ver(
    distancia: Optional[str] = None,
    desde: Optional[str] = None,
    limit: Optional[str] = None,
    store=Depends(get_store),
    cache: ResultCache = Depends(get_cache),
):
    # 1. Validar filtros (un error aquí nunca se cachea)
    filtros = normalizar_filtros(distancia, desde, limit)

    # 2. Respuesta instantánea desde caché
    cache_key = clave_listado(filtros)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache hit: {cache_key}")
        return cached

    # 3. Consultar Firestore
    logger.debug(f"Cache miss: {cache_key}")
    generacion = cache.generacion
    try:
        filas = await store.consultar(COLECCION_VALORES, construir_consulta_valores(filtros))
    except UpstreamError as e:
        return error_upstream("Error en /ver", e)

    data = formatear_registros(filas)
    cache.set(cache_key, data, generacion)
    return data


@router.get("/valor")
async def valor(limit: Optional[str] = None, store=Depends(get_store), cache: ResultCache = Depends(get_cache)):
    lim = normalizar_limite(limit, LIMITE_DEFECTO)
    cache_key = clave_reciente("valor", lim)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug(f"Cache hit: {cache_key}")
        return cached

    generacion = cache.generacion
    try:
        filas = await store.consultar(COLECCION_VALORES, construir_consulta_reciente(lim))
    except UpstreamError as e:
        return error_upstream("Error en /valor", e)

    data = formatear_registros(filas)
    cache.set(cache_key, data, generacion)
    return data


@router.get("/valor/min")
async def valor_min(limit: Optional[str] = None, store=Depends(get_store)):
    # Respuesta mínima para el dispositivo: sin caché
    lim = normalizar_limite(limit, LIMITE_MIN_DEFECTO)
    try:
        filas = await store.consultar(COLECCION_VALORES, construir_consulta_reciente(lim))
    except UpstreamError as e:
        return error_upstream("Error en /valor/min", e)
    return [{"d": fila.get("distancia"), "f": a_iso(fila.get("fecha"))} for fila in filas]


@router.post("/insertar", status_code=201)
async def insertar(request: Request, store=Depends(get_store), cache: ResultCache = Depends(get_cache)):
    body = await leer_cuerpo(request)
    distancia = body.get("distancia")
    nombre = body.get("nombre")
    if vacio(distancia) or vacio(nombre):
        raise faltan_parametros("distancia y nombre son requeridos")

    fecha = body.get("fecha")
    if vacio(fecha):
        fecha = ahora()
    else:
        try:
            fecha = parsear_iso(fecha)
        except ValueError:
            raise ValidationError(f"El campo 'fecha' debe ser una fecha ISO-8601 válida (recibido: '{fecha}')")

    doc_data = {
        "distancia": str(distancia),
        "nombre": str(nombre),
        "fecha": fecha
    }

    try:
        doc_id = await store.insertar(COLECCION_VALORES, doc_data)
    except UpstreamError as e:
        return error_upstream("Error en /insertar", e)

    cache.invalidar_todo()
    logger.info(f"Valor insertado {doc_id}: distancia={doc_data['distancia']} nombre={doc_data['nombre']}")
    return JSONResponse(status_code=201, content={
        "id": doc_id,
        **doc_data,
        "fecha": a_iso(fecha),
        "status": "Valores insertados"
    })
