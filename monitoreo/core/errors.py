from typing import Optional
from fastapi import Request
from fastapi.responses import JSONResponse
from monitoreo.core.logging import get_logger

logger = get_logger("monitoreo.errors")

FALTAN_PARAMETROS = "Faltan parámetros"
PARAMETRO_INVALIDO = "Parámetro inválido"


class ValidationError(Exception):
    """Entrada ausente o mal formada. Se responde con 400."""

    def __init__(self, message: str, error: str = PARAMETRO_INVALIDO):
        super().__init__(message)
        self.error = error
        self.message = message

    def to_dict(self):
        return {"error": self.error, "message": self.message}


class UpstreamError(Exception):
    """Fallo del almacén de documentos. Se responde con 500."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


def faltan_parametros(message: str) -> ValidationError:
    return ValidationError(message, error=FALTAN_PARAMETROS)


def error_upstream(resumen: str, exc: UpstreamError) -> JSONResponse:
    """Sobre de error uniforme {error, message, code?} para fallos del almacén."""
    body = {"error": resumen, "message": exc.message}
    if exc.code is not None:
        body["code"] = exc.code
    return JSONResponse(status_code=500, content=body)


async def validation_error_handler(request: Request, exc: ValidationError):
    logger.info(f"Petición rechazada {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content=exc.to_dict())


async def upstream_error_handler(request: Request, exc: UpstreamError):
    return error_upstream(f"Error en {request.url.path}", exc)
