import os

def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "si", "on")

# Servidor
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Firebase / Firestore
FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH", "")
FIREBASE_PROJECT_ID = os.getenv("FIREBASE_PROJECT_ID", "")
COLECCION_VALORES = os.getenv("COLECCION_VALORES", "Valores")
COLECCION_ESTADO = os.getenv("COLECCION_ESTADO", "Estado")

# Caché de respuestas
CACHE_TTL = int(os.getenv("CACHE_TTL", "300")) # 5 minutos de validez
CACHE_CONTROL = os.getenv("CACHE_CONTROL", "public, max-age=300")

# Paginación
LIMITE_DEFECTO = 100
LIMITE_MIN_DEFECTO = 50 # /valor/min
LIMITE_MAXIMO = 1000

# Orden secundario por id de documento cuando varias lecturas comparten fecha.
# Desactivado: el orden entre fechas iguales lo decide Firestore.
DESEMPATE_POR_ID = _env_bool("DESEMPATE_POR_ID", False)

# Compresión gzip (1-9)
NIVEL_COMPRESION = int(os.getenv("NIVEL_COMPRESION", "6"))
COMPRESION_MINIMA = 500 # bytes

# Valor de "distancia" que significa "sin filtro"
DISTANCIA_TODOS = "Todos"
