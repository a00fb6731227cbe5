import asyncio
import json
from unittest.mock import patch

import pytest
from fastapi import status
from httpx import ASGITransport, AsyncClient

from lobby_client.adapter import LobbyClientAdapter
from lobby_client.api import build_app

CREATE_BODY = {
    "username": "alice",
    "start_section": "1",
    "end_section": "5",
    "game_kind": "timeline",
}


@pytest.fixture
def async_client(adapter):
    return AsyncClient(transport=ASGITransport(app=build_app(adapter)), base_url="http://test")


@pytest.mark.asyncio
async def test_create_page(async_client):
    async with async_client as ac:
        response = await ac.get("/")
    assert response.status_code == status.HTTP_200_OK
    assert '<div id="createMenu">' in response.content.decode()


@pytest.mark.asyncio
async def test_state_follows_messages(async_client, adapter):
    adapter.on_message('{"kind": "createSuccess", "gameId": "DUCK", "hostName": "al"}')
    async with async_client as ac:
        response = await ac.get("/state/")
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["game_id_text"] == "Game ID: DUCK"
    assert data["lobby_visible"] is True
    assert data["create_menu_visible"] is False


@pytest.mark.asyncio
async def test_create_game(async_client, adapter, session):
    async with async_client as ac:
        response = await ac.post("/create/", json=CREATE_BODY)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"sent": "create"}
    assert json.loads(session.sent_texts[0]) == {
        "kind": "create",
        "username": "alice",
        "settings": {"startSection": "1", "endSection": "5", "gameKind": "timeline"},
    }
    # the form keeps what was submitted
    assert adapter.document["username"].value == "alice"
    assert adapter.document["gameKindSelect"].selected_value == "timeline"


@pytest.mark.asyncio
async def test_create_game_unknown_kind(async_client, session):
    async with async_client as ac:
        response = await ac.post(
            "/create/", json={**CREATE_BODY, "game_kind": "duke_nukem_forever"}
        )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json().get("detail") == "Unknown game kind"
    assert not session.sent_texts


@pytest.mark.parametrize(
    "path,want",
    [
        ("/start/", {"kind": "start"}),
        ("/next-question/", {"kind": "nextQuestion"}),
    ],
)
@pytest.mark.asyncio
async def test_buttons(async_client, session, path, want):
    async with async_client as ac:
        response = await ac.post(path)
    assert response.status_code == status.HTTP_200_OK
    assert [json.loads(t) for t in session.sent_texts] == [want]


@pytest.mark.parametrize("path", ["/create/", "/start/", "/next-question/"])
@pytest.mark.asyncio
async def test_not_connected(config, path):
    app = build_app(LobbyClientAdapter(config))
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post(path, json=CREATE_BODY)
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.json().get("detail") == "Not connected"


CREATE_SUCCESS = '{"kind": "createSuccess", "gameId": "DUCK", "hostName": "al"}'


async def test_lifespan__receives_then_disconnects(adapter, session):
    session.hold_open = True
    session.stage_incoming(CREATE_SUCCESS, '{"kind": []}')
    app = build_app(adapter)
    async with app.router.lifespan_context(app):
        assert adapter.connected
        for _ in range(5):
            await asyncio.sleep(0)
        assert adapter.document["lobby"].visible
        assert adapter.connected
    assert not adapter.connected


async def test_lifespan__failed_receive_loop_still_disconnects(adapter, caplog):
    app = build_app(adapter)
    with patch.object(adapter, "run", side_effect=RuntimeError("boom")):
        async with app.router.lifespan_context(app):
            await asyncio.sleep(0)
    assert "Receive loop failed: RuntimeError('boom')" in caplog.text
    assert not adapter.connected
