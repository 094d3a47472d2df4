import json
from fastapi import Request
from monitoreo.core.errors import ValidationError

async def leer_cuerpo(request: Request) -> dict:
    """Lee el cuerpo como JSON o como formulario urlencoded."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/x-www-form-urlencoded") or content_type.startswith("multipart/form-data"):
        form = await request.form()
        return dict(form)

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("El cuerpo de la petición no es JSON válido")
    if not isinstance(data, dict):
        raise ValidationError("El cuerpo de la petición debe ser un objeto JSON")
    return data

def vacio(valor) -> bool:
    """Ausente, nulo o cadena vacía. False y 0 no cuentan como vacíos."""
    return valor is None or (isinstance(valor, str) and valor.strip() == "")
