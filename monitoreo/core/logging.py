import logging
import sys

from monitoreo.config import LOG_LEVEL

def setup_logging(level=None):
    # Formato: [2026-01-04 21:15:00] [INFO] [monitoreo.routers.valores] Mensaje
    log_format = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level or LOG_LEVEL,
        format=log_format,
        datefmt=date_format,
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )

    # Silenciar logs ruidosos de librerías externas
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)
    logging.getLogger("grpc").setLevel(logging.WARNING)

def get_logger(name):
    return logging.getLogger(name)
