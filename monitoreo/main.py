from monitoreo.core.logging import setup_logging, get_logger

# Inicializar logging lo antes posible
setup_logging()
logger = get_logger("monitoreo.main")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import time
from monitoreo.config import (
    CACHE_CONTROL, CACHE_TTL, COMPRESION_MINIMA, DESEMPATE_POR_ID, HOST,
    NIVEL_COMPRESION, PORT
)
from monitoreo.core.errors import (
    UpstreamError, ValidationError, upstream_error_handler, validation_error_handler
)
from monitoreo.routers import estado, general, valores
from monitoreo.services.cache import ResultCache


def crear_app(store=None, cache=None) -> FastAPI:
    """Construye la aplicación.

    `store` es el adaptador del almacén (por defecto Firestore, creado al
    arrancar) y `cache` la caché de respuestas; los tests pasan los suyos.
    """
    app = FastAPI(title="API Monitoreo ESP32")
    app.state.store = store
    app.state.cache = cache if cache is not None else ResultCache(ttl=CACHE_TTL)

    app.add_middleware(GZipMiddleware, minimum_size=COMPRESION_MINIMA, compresslevel=NIVEL_COMPRESION)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.middleware("http")
    async def session_middleware(request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        if request.method == "GET" and response.status_code == 200:
            response.headers["Cache-Control"] = CACHE_CONTROL

        log_msg = f"RES: {request.method} {request.url.path} - Status: {response.status_code} - Tiempo: {duration:.2f}s"

        # 1. Errores siempre a INFO
        if response.status_code >= 400:
            logger.info(log_msg)
        # 2. Lecturas muy rápidas (caché) a DEBUG
        elif request.method == "GET" and duration < 0.05:
            logger.debug(log_msg)
        # 3. Todo lo demás (escrituras, consultas reales) a INFO
        else:
            logger.info(log_msg)

        return response

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UpstreamError, upstream_error_handler)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.error(f"Error en {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": f"Error en {request.url.path}", "message": str(exc)})

    @app.on_event("startup")
    def startup_event():
        logger.info("--- Iniciando API Monitoreo ESP32 ---")
        if app.state.store is None:
            from monitoreo.services.firestore import FirestoreStore
            app.state.store = FirestoreStore()
            logger.info("Cliente de Firestore listo.")
        logger.info(f"Caché de respuestas: TTL {app.state.cache.ttl}s")
        if DESEMPATE_POR_ID:
            logger.info("Desempate por id de documento activado (requiere índice compuesto con __name__)")

    @app.on_event("shutdown")
    def shutdown_event():
        app.state.cache.invalidar_todo()
        close = getattr(app.state.store, "close", None)
        if close:
            close()

    app.include_router(general.router)
    app.include_router(valores.router)
    app.include_router(estado.router)
    return app


app = crear_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=HOST, port=PORT)
