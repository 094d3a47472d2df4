"""Tests for the response cache and cache key derivation."""

import itertools
from datetime import datetime, timezone

from monitoreo.services.cache import ResultCache, clave_listado, clave_reciente
from monitoreo.services.filtros import FilterDescriptor, normalizar_filtros


def test_get_missing_returns_none(cache):
    assert cache.get("nada") is None


def test_entry_expires_after_ttl(cache, clock):
    cache.set("k", [1])
    clock.advance(299)
    assert cache.get("k") == [1]
    clock.advance(1)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_hit_does_not_refresh_ttl(cache, clock):
    cache.set("k", [1])
    clock.advance(200)
    assert cache.get("k") == [1]
    clock.advance(150)
    assert cache.get("k") is None


def test_invalidar_todo_removes_everything(cache):
    cache.set("a", [1])
    cache.set("b", [2])
    cache.invalidar_todo()
    assert cache.get("a") is None
    assert cache.get("b") is None
    assert len(cache) == 0


def test_limpiar_expirados(cache, clock):
    cache.set("viejo", [1])
    clock.advance(250)
    cache.set("nuevo", [2])
    clock.advance(100)
    assert cache.limpiar_expirados() == 1
    assert cache.get("nuevo") == [2]


def test_default_ttl_is_five_minutes():
    assert ResultCache().ttl == 300


def test_no_filter_key_is_stable():
    assert clave_listado(normalizar_filtros()) == "ver_all_none_100"
    assert clave_listado(normalizar_filtros(distancia="Todos")) == "ver_all_none_100"


def test_real_all_value_does_not_collide_with_placeholder():
    assert clave_listado(FilterDescriptor(distancia="all")) != clave_listado(FilterDescriptor())


def test_equal_instants_share_key():
    a = normalizar_filtros(desde="2026-10-01T12:00:00+02:00")
    b = normalizar_filtros(desde="2026-10-01T10:00:00Z")
    assert clave_listado(a) == clave_listado(b)


def test_keys_are_distinct_for_distinct_descriptors():
    distancias = [None, "12", "30", "all", "none", "a_b", "a", "b_none"]
    desdes = [None, datetime(2026, 10, 1, tzinfo=timezone.utc), datetime(2026, 10, 2, tzinfo=timezone.utc)]
    limites = [1, 100, 1000]
    descriptores = [
        FilterDescriptor(distancia=d, desde=s, limit=l)
        for d, s, l in itertools.product(distancias, desdes, limites)
    ]
    claves = {clave_listado(f) for f in descriptores}
    assert len(claves) == len(descriptores)
    assert [clave_listado(f) for f in descriptores] == [clave_listado(f) for f in descriptores]


def test_recent_listing_key():
    assert clave_reciente("valor", 100) == "valor_100"
    assert clave_reciente("estado", 5) == "estado_5"


def test_set_from_older_generation_is_discarded(cache):
    generacion = cache.generacion
    cache.invalidar_todo()
    assert cache.set("k", [1], generacion) is False
    assert cache.get("k") is None
    assert cache.set("k", [2], cache.generacion) is True
    assert cache.get("k") == [2]
