from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse
from monitoreo.core.dependencies import get_cache
from monitoreo.core.errors import faltan_parametros
from monitoreo.core.logging import get_logger
from monitoreo.services.cache import ResultCache
from monitoreo.utils.cuerpo import leer_cuerpo, vacio

logger = get_logger("monitoreo.routers.general")

router = APIRouter()

INDEX_HTML = """<h1>API FastAPI & Firebase Monitoreo ESP32</h1><ul>
  <li><b>GET /ver</b> - Ver todos los valores (filtros: distancia, desde, limit)</li>
  <li><b>GET /valor</b> - Todos los valores (limitados)</li>
  <li><b>GET /valor/min</b> - Valores con respuesta mínima</li>
  <li><b>GET /estado</b> - Estados de conexión (limit)</li>
  <li><b>POST /insertar</b> - {distancia, nombre, fecha}</li>
  <li><b>POST /estado</b> - {conectado, nombre}</li>
  <li><b>POST /notificar</b> - {titulo, mensaje, token}</li>
</ul>"""

@router.get("/", response_class=HTMLResponse)
async def index():
    return INDEX_HTML

@router.get("/health")
async def health(cache: ResultCache = Depends(get_cache)):
    cache.limpiar_expirados()
    return {"status": "ok", "cache": len(cache)}

@router.post("/notificar", status_code=201)
async def notificar(request: Request):
    body = await leer_cuerpo(request)
    titulo = body.get("titulo")
    mensaje = body.get("mensaje")
    token = body.get("token")
    if vacio(titulo) or vacio(mensaje) or vacio(token):
        raise faltan_parametros("titulo, mensaje y token son requeridos")

    # Sin envío real: Firebase Cloud Messaging queda fuera de este servicio
    logger.info(f"Notificación simulada '{titulo}' para token {str(token)[:8]}...")
    return JSONResponse(status_code=201, content={
        "titulo": titulo,
        "mensaje": mensaje,
        "token": token,
        "status": "Notificación enviada (simulada)"
    })
