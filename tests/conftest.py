"""Pytest configuration and fixtures."""

import itertools
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from monitoreo.core.errors import UpstreamError
from monitoreo.main import crear_app
from monitoreo.services.cache import ResultCache
from monitoreo.services.consultas import Donde, Limite, OrdenarPor, DESC

_OPERADORES = {
    "==": lambda a, b: a == b,
    ">=": lambda a, b: a is not None and a >= b,
}


class FakeStore:
    """Almacén en memoria con la misma interfaz que FirestoreStore."""

    def __init__(self):
        self.colecciones = {}
        self.consultas = []
        self.inserciones = []
        self.error = None
        self._ids = itertools.count(1)

    def agregar(self, coleccion, datos, doc_id=None):
        doc_id = doc_id or f"doc{next(self._ids):04d}"
        self.colecciones.setdefault(coleccion, {})[doc_id] = dict(datos)
        return doc_id

    async def consultar(self, coleccion, restricciones):
        self.consultas.append((coleccion, list(restricciones)))
        if self.error:
            raise self.error
        filas = [{"id": k, **v} for k, v in self.colecciones.get(coleccion, {}).items()]
        for r in restricciones:
            if isinstance(r, Donde):
                filas = [f for f in filas if _OPERADORES[r.operador](f.get(r.campo), r.valor)]
        ordenes = [r for r in restricciones if isinstance(r, OrdenarPor)]
        for r in reversed(ordenes):
            campo = "id" if r.campo == "__name__" else r.campo
            filas.sort(key=lambda f: f[campo], reverse=(r.direccion == DESC))
        for r in restricciones:
            if isinstance(r, Limite):
                filas = filas[:r.n]
        return filas

    async def insertar(self, coleccion, datos):
        if self.error:
            raise self.error
        self.inserciones.append((coleccion, dict(datos)))
        return self.agregar(coleccion, datos)


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def fecha(dia, hora=12, minuto=0):
    return datetime(2026, 10, dia, hora, minuto, tzinfo=timezone.utc)


@pytest.fixture
def store():
    s = FakeStore()
    s.agregar("Valores", {"distancia": "12", "nombre": "esp32-a", "fecha": fecha(1)})
    s.agregar("Valores", {"distancia": "30", "nombre": "esp32-a", "fecha": fecha(2)})
    s.agregar("Valores", {"distancia": "12", "nombre": "esp32-b", "fecha": fecha(3)})
    s.agregar("Estado", {"conectado": True, "nombre": "esp32-a", "fecha": fecha(1)})
    return s


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl=300, reloj=clock)


@pytest.fixture
def client(store, cache):
    app = crear_app(store=store, cache=cache)
    return TestClient(app)


@pytest.fixture
def upstream_error():
    return UpstreamError("The query requires an index.", code="FAILED_PRECONDITION")
