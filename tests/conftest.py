import asyncio
import sqlite3
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from boycott_api.app.core.config import settings
from boycott_api.app.core.errors import CatalogError
from boycott_api.app.main import app


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client backed by a fresh database file.

    Entering the client runs the startup hook, which applies the
    migrations to the new file.
    """
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "catalog.db"))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db(client):
    """Raw connection to the test database for setting up edge cases."""
    conn = sqlite3.connect(settings.database_url)
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()


@pytest.fixture
def make_product(client):
    def _make(**fields):
        body = {"userEmail": "a@x.com", "productName": "Widget"}
        body.update(fields)
        resp = client.post("/products", json=body)
        assert resp.status_code == 200, resp.text
        return resp.json()["insertedId"]

    return _make


@pytest.fixture
def make_recommendation(client):
    def _make(query_id, **fields):
        body = {"queryId": query_id, "recommenderEmail": "b@x.com", "recommendationText": "avoid"}
        body.update(fields)
        resp = client.post("/recommendations", json=body)
        assert resp.status_code == 200, resp.text
        return resp.json()["insertedId"]

    return _make


@pytest.fixture
def concurrently(client):
    """Run the same service coroutine from several threads at once.

    Each thread waits on a barrier and then drives ``make_call()`` in
    its own event loop.  Returns the results in thread order, with any
    ``CatalogError`` returned in place of a result.
    """
    def _run(make_call, threads=2):
        barrier = threading.Barrier(threads)

        def worker():
            barrier.wait()
            try:
                return asyncio.run(make_call())
            except CatalogError as exc:
                return exc

        with ThreadPoolExecutor(max_workers=threads) as pool:
            futures = [pool.submit(worker) for _ in range(threads)]
            return [future.result() for future in futures]

    return _run
