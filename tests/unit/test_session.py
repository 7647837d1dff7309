import asyncio

import httpx

from mopetoo_admin.app.admin_store import ResourceStore
from mopetoo_admin.app.session import AdminSession
from mopetoo_admin.clients.auth_store import AuthStore
from mopetoo_admin.clients.config import ClientConfig
from mopetoo_admin.clients.http_client import HttpClient


def _session(handler) -> AdminSession:
    config = ClientConfig(api_base_url="https://api.example.test", retries=0, retry_backoff_ms=0)
    auth_store = AuthStore()
    client = httpx.AsyncClient(base_url=config.api_base_url, transport=httpx.MockTransport(handler))
    http = HttpClient(config, auth_store=auth_store, client=client)
    session = AdminSession(config=config, http=http, store=ResourceStore(), auth_store=auth_store)
    session.login("tok-1")
    return session


def test_expired_token_clears_session_and_surfaces_message() -> None:
    session = _session(lambda request: httpx.Response(401, json={"error": "Sesión expirada"}))

    ok = asyncio.run(session.facade.fetch_users())

    assert ok is False
    assert session.is_authenticated() is False
    assert session.store.error == "Sesión expirada"


def test_forbidden_keeps_token() -> None:
    session = _session(lambda request: httpx.Response(403, json={"error": "Acceso denegado"}))

    asyncio.run(session.facade.fetch_stats())

    assert session.is_authenticated() is True
    assert session.store.error == "Acceso denegado"


def test_logout_clears_store_and_token() -> None:
    session = _session(lambda request: httpx.Response(200, json={"shelters": [{"id": "s1"}], "total": 1}))
    listing = session.listing("shelters")
    asyncio.run(listing.fetch())
    assert listing.count_label == "1 refugio"

    session.logout()

    assert session.is_authenticated() is False
    assert session.store.items("shelters") == []
    assert session.store.total("shelters") == 0
    assert session.store.error is None


def test_listing_uses_configured_page_size() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["per_page"] = request.url.params.get("per_page")
        return httpx.Response(200, json=[])

    session = _session(handler)
    session.config = ClientConfig(api_base_url="https://api.example.test", page_size=50)

    asyncio.run(session.listing("donations").fetch())

    assert seen["per_page"] == "50"


def test_aclose_logs_out() -> None:
    session = _session(lambda request: httpx.Response(204))

    asyncio.run(session.aclose())

    assert session.is_authenticated() is False
