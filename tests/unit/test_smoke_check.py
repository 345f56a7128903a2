"""
smoke_check against an unreachable server: report and stop, no traceback.
"""

import asyncio

import httpx

import smoke_check


def _unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _run(coro_factory):
    async def _inner():
        async with httpx.AsyncClient(transport=httpx.MockTransport(_unreachable)) as client:
            return await coro_factory(client)

    return asyncio.run(_inner())


def test_user_lifecycle_stops_on_connection_error(capsys):
    ok = _run(lambda client: smoke_check._user_lifecycle(client, "http://127.0.0.1:1"))
    assert ok is False
    out = capsys.readouterr().out
    assert "ERR(ConnectError)" in out
    assert out.count("->") == 1


def test_matrix_reports_connection_errors(capsys):
    _run(lambda client: smoke_check._matrix(client, "http://127.0.0.1:1"))
    assert "ERR(ConnectError)" in capsys.readouterr().out


def test_user_lifecycle_against_app():
    from main import create_app

    transport = httpx.ASGITransport(app=create_app())

    async def _inner():
        async with httpx.AsyncClient(transport=transport) as client:
            return await smoke_check._user_lifecycle(client, "http://testserver")

    assert asyncio.run(_inner()) is True
