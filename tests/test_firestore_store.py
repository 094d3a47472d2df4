"""Tests for the Firestore adapter against a mocked async client."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.api_core import exceptions as gexc

from monitoreo.core.errors import UpstreamError
from monitoreo.services.consultas import DESC, Donde, Limite, OrdenarPor
from monitoreo.services.firestore import FirestoreStore, codigo_error


def _snapshot(doc_id, data):
    doc = MagicMock()
    doc.id = doc_id
    doc.to_dict.return_value = data
    return doc


@pytest.fixture
def firestore_client():
    client = MagicMock()
    query = MagicMock()
    client.collection.return_value = query
    # Cada método encadenable devuelve la misma consulta
    query.order_by.return_value = query
    query.where.return_value = query
    query.limit.return_value = query
    query.get = AsyncMock(return_value=[])
    return client


def test_constraints_translated_to_client_calls(firestore_client):
    store = FirestoreStore(client=firestore_client)
    desde = datetime(2026, 10, 1, tzinfo=timezone.utc)
    asyncio.run(store.consultar("Valores", [
        OrdenarPor("fecha", DESC),
        Limite(10),
        Donde("distancia", "==", "12"),
        Donde("fecha", ">=", desde),
    ]))

    query = firestore_client.collection.return_value
    firestore_client.collection.assert_called_once_with("Valores")
    query.order_by.assert_called_once_with("fecha", direction="DESCENDING")
    query.limit.assert_called_once_with(10)
    filtros = [c.kwargs["filter"] for c in query.where.call_args_list]
    assert [(f.field_path, f.op_string, f.value) for f in filtros] == [
        ("distancia", "==", "12"),
        ("fecha", ">=", desde),
    ]


def test_documents_mapped_with_id(firestore_client):
    query = firestore_client.collection.return_value
    query.get.return_value = [_snapshot("abc", {"distancia": "12", "nombre": "esp32-a"})]
    filas = asyncio.run(FirestoreStore(client=firestore_client).consultar("Valores", [Limite(1)]))
    assert filas == [{"id": "abc", "distancia": "12", "nombre": "esp32-a"}]


def test_client_error_becomes_upstream_error(firestore_client):
    query = firestore_client.collection.return_value
    query.get.side_effect = gexc.FailedPrecondition("The query requires an index.")
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(FirestoreStore(client=firestore_client).consultar("Valores", [Limite(1)]))
    assert exc_info.value.code == "FAILED_PRECONDITION"
    assert "requires an index" in exc_info.value.message


def test_insert_returns_document_id(firestore_client):
    doc_ref = MagicMock()
    doc_ref.id = "nuevo123"
    coleccion = firestore_client.collection.return_value
    coleccion.add = AsyncMock(return_value=(None, doc_ref))
    doc_id = asyncio.run(FirestoreStore(client=firestore_client).insertar("Valores", {"distancia": "12"}))
    assert doc_id == "nuevo123"
    coleccion.add.assert_awaited_once_with({"distancia": "12"})


def test_insert_failure_becomes_upstream_error(firestore_client):
    coleccion = firestore_client.collection.return_value
    coleccion.add = AsyncMock(side_effect=RuntimeError("sin conexión"))
    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(FirestoreStore(client=firestore_client).insertar("Estado", {}))
    assert exc_info.value.code is None


def test_codigo_error_without_code():
    assert codigo_error(ValueError("x")) is None
