import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import asdict
from typing import Awaitable

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from lobby_client.adapter import ConnectionNotOpenError, LobbyClientAdapter
from lobby_client.ui.document import (
    END_SECTION,
    GAME_KIND_SELECT,
    START_SECTION,
    USERNAME,
)
from lobby_client.ui.page import render_page

router = APIRouter()

logger = logging.getLogger()


class CreateGameRequest(BaseModel):
    username: str
    start_section: str
    end_section: str
    game_kind: str


def get_adapter(request: Request) -> LobbyClientAdapter:
    return request.app.state.adapter


@router.get("/", response_class=HTMLResponse)
async def create_page(request: Request):
    return HTMLResponse(render_page(get_adapter(request).document))


@router.get("/state/")
async def view_state(request: Request) -> dict:
    return asdict(get_adapter(request).state)


@router.post("/create/")
async def create_game(request: Request, body: CreateGameRequest) -> dict:
    adapter = get_adapter(request)
    document = adapter.document
    select = document.get_element_by_id(GAME_KIND_SELECT)
    if body.game_kind not in select.options:
        raise HTTPException(status_code=400, detail="Unknown game kind")

    document.get_element_by_id(USERNAME).value = body.username
    document.get_element_by_id(START_SECTION).value = body.start_section
    document.get_element_by_id(END_SECTION).value = body.end_section
    select.selected_index = select.options.index(body.game_kind)

    await _send(adapter.create_game_button_handler())
    return {"sent": "create"}


@router.post("/start/")
async def start_game(request: Request) -> dict:
    await _send(get_adapter(request).start_game_button_handler())
    return {"sent": "start"}


@router.post("/next-question/")
async def next_question(request: Request) -> dict:
    await _send(get_adapter(request).next_question_handler())
    return {"sent": "nextQuestion"}


async def _send(handler_call: Awaitable[None]) -> None:
    try:
        await handler_call
    except ConnectionNotOpenError as exc:
        logger.warning("Dropping user action: %s", exc)
        raise HTTPException(status_code=503, detail="Not connected")


def build_app(adapter: LobbyClientAdapter) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await adapter.connect()
        receiver = asyncio.create_task(adapter.run())
        try:
            yield
        finally:
            receiver.cancel()
            try:
                await receiver
            except asyncio.CancelledError:
                pass
            except Exception as exc:
                logger.exception("Receive loop failed: %r", exc)
            finally:
                await adapter.disconnect()

    app = FastAPI(lifespan=lifespan)
    app.state.adapter = adapter
    app.include_router(router)
    return app
