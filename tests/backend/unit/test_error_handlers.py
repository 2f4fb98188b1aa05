import logging

import pytest
from fastapi import FastAPI, HTTPException
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel

from forum.core.errors import register_exception_handlers


pytestmark = pytest.mark.asyncio


class _Body(BaseModel):
    title: str


def _app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/boom")
    async def boom():
        raise RuntimeError("kaput")

    @app.get("/gone")
    async def gone():
        raise HTTPException(status_code=404, detail="Thing not found")

    @app.post("/echo")
    async def echo(body: _Body):
        return {"title": body.title}

    return app


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


async def test_unexpected_error_becomes_json_500_logged_once(caplog):
    caplog.set_level(logging.ERROR, logger="uvicorn.error")
    async with _client(_app()) as client:
        resp = await client.get("/boom")

    assert resp.status_code == 500
    assert resp.json() == {"error": "Server error"}
    records = [r for r in caplog.records if r.exc_info and "kaput" in str(r.exc_info[1])]
    assert len(records) == 1
    assert records[0].getMessage() == "[error] GET /boom failed"


async def test_http_and_validation_errors_use_error_body():
    async with _client(_app()) as client:
        gone = await client.get("/gone")
        invalid = await client.post("/echo", json={})

    assert gone.status_code == 404
    assert gone.json() == {"error": "Thing not found"}
    assert invalid.status_code == 400
    assert invalid.json()["error"].startswith("title:")
