import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore_v1.base_query import FieldFilter
from typing import Any, Dict, List
from monitoreo.config import FIREBASE_CREDENTIALS_PATH, FIREBASE_PROJECT_ID
from monitoreo.core.errors import UpstreamError
from monitoreo.core.logging import get_logger
from monitoreo.services.consultas import Donde, Limite, OrdenarPor, Restriccion

logger = get_logger("monitoreo.firestore")


def init_firebase():
    """Inicializa la app de Firebase una sola vez por proceso."""
    if firebase_admin._apps:
        return firebase_admin.get_app()

    options = {"projectId": FIREBASE_PROJECT_ID} if FIREBASE_PROJECT_ID else None
    if FIREBASE_CREDENTIALS_PATH:
        cred = credentials.Certificate(FIREBASE_CREDENTIALS_PATH)
        logger.info(f"Usando credenciales de {FIREBASE_CREDENTIALS_PATH}")
    else:
        cred = credentials.ApplicationDefault()
        logger.info("Usando credenciales por defecto de Google (ADC)")
    return firebase_admin.initialize_app(cred, options)


def codigo_error(exc: Exception):
    """Código legible del error del cliente, si lo trae (p. ej. FAILED_PRECONDITION)."""
    grpc_code = getattr(exc, "grpc_status_code", None)
    if grpc_code is not None:
        return getattr(grpc_code, "name", str(grpc_code))
    code = getattr(exc, "code", None)
    if code is None or callable(code):
        return None
    return str(code)


class FirestoreStore:
    """Adaptador asíncrono sobre el cliente de Firestore.

    Expone solo lo que usan las rutas: `consultar` e `insertar`. Cualquier
    excepción del cliente se convierte en UpstreamError.
    """

    def __init__(self, client=None):
        if client is None:
            client = firestore_async.client(init_firebase())
        self.client = client

    def _aplicar(self, coleccion: str, restricciones: List[Restriccion]):
        query = self.client.collection(coleccion)
        for r in restricciones:
            if isinstance(r, OrdenarPor):
                query = query.order_by(r.campo, direction=r.direccion)
            elif isinstance(r, Donde):
                query = query.where(filter=FieldFilter(r.campo, r.operador, r.valor))
            elif isinstance(r, Limite):
                query = query.limit(r.n)
            else:
                raise TypeError(f"Restricción desconocida: {r!r}")
        return query

    async def consultar(self, coleccion: str, restricciones: List[Restriccion]) -> List[Dict[str, Any]]:
        query = self._aplicar(coleccion, restricciones)
        try:
            docs = await query.get()
        except Exception as e:
            logger.error(f"Fallo consultando {coleccion}: {e}")
            raise UpstreamError(str(e), codigo_error(e)) from e
        return [{"id": doc.id, **(doc.to_dict() or {})} for doc in docs]

    async def insertar(self, coleccion: str, datos: Dict[str, Any]) -> str:
        try:
            _, doc_ref = await self.client.collection(coleccion).add(datos)
        except Exception as e:
            logger.error(f"Fallo insertando en {coleccion}: {e}")
            raise UpstreamError(str(e), codigo_error(e)) from e
        return doc_ref.id

    def close(self):
        close = getattr(self.client, "close", None)
        if close:
            close()
