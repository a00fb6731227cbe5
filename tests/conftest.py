import asyncio
from typing import List, Union

import pytest
from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from httpx_ws import WebSocketDisconnect as ClientDisconnect

from lobby_client.adapter import LobbyClientAdapter
from lobby_client.config import ClientConfig
from lobby_client.ui.document import create_lobby_document

GAME_KINDS = ["trivia", "timeline"]


class FakeSession:
    def __init__(self):
        self.sent_texts: List[str] = []
        self.incoming: List[Union[str, Exception]] = []
        self.closed = False
        self.hold_open = False

    def stage_incoming(self, *raw: Union[str, Exception]):
        self.incoming.extend(raw)

    async def send_text(self, data: str):
        self.sent_texts.append(data)

    async def receive_text(self) -> str:
        if not self.incoming:
            if self.hold_open:
                await asyncio.Event().wait()
            raise ClientDisconnect(1000, "no more messages")
        if isinstance(item := self.incoming.pop(0), Exception):
            raise item
        return item

    async def close(self):
        self.closed = True


@pytest.fixture
def config():
    return ClientConfig(endpoint_url="ws://test/history", game_kinds=GAME_KINDS)


@pytest.fixture
def document():
    return create_lobby_document(GAME_KINDS)


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def adapter(config, document, session):
    return LobbyClientAdapter(config, document=document, session=session)


history_server = FastAPI()


@pytest.fixture
def fake_server():
    return history_server


@history_server.websocket("/history")
async def history_ws(websocket: WebSocket):
    await websocket.accept()
    try:
        while True:
            data = await websocket.receive_json()
            kind = data.get("kind")
            if kind == "create":
                if not (username := data["username"]):
                    await websocket.send_json(
                        {"kind": "createFailed", "message": "Username required"}
                    )
                    continue
                await websocket.send_json(
                    {"kind": "createSuccess", "gameId": "DUCK", "hostName": username}
                )
                await websocket.send_json({"kind": "refreshLobby", "users": [username]})
            elif kind == "start":
                await websocket.send_json({"kind": "initialStuff"})
            elif kind == "nextQuestion":
                await websocket.close()
                return
    except WebSocketDisconnect:
        pass
