import logging
from contextlib import AsyncExitStack
from typing import Optional

import httpx
from httpx_ws import (
    AsyncWebSocketSession,
    WebSocketDisconnect,
    WebSocketInvalidTypeReceived,
    WebSocketNetworkError,
    aconnect_ws,
)

from lobby_client.config import ClientConfig
from lobby_client.engine.messages import (
    CreateMessage,
    GameSettings,
    NextQuestionMessage,
    OutboundMessage,
    StartMessage,
    decode_message,
    encode_message,
)
from lobby_client.engine.view_state import ViewState, reduce_view
from lobby_client.ui.document import (
    Document,
    create_lobby_document,
    read_create_form,
    render,
)

logger = logging.getLogger()


class ConnectionNotOpenError(RuntimeError):
    pass


class LobbyClientAdapter:
    """
    Owns the single socket to the lobby server.
    Inbound messages become view state, which is rendered onto the document;
    user actions become outbound messages. Nothing is retried or acknowledged.
    """

    def __init__(
        self,
        config: ClientConfig,
        document: Optional[Document] = None,
        session: Optional[AsyncWebSocketSession] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.config: ClientConfig = config
        self.document: Document = (
            document
            if document is not None
            else create_lobby_document(config.game_kinds)
        )
        self.state: ViewState = ViewState()
        self._session: Optional[AsyncWebSocketSession] = session
        self._client: Optional[httpx.AsyncClient] = client
        self._stack: Optional[AsyncExitStack] = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    async def connect(self) -> None:
        if self.connected:
            return
        # the server may have closed an earlier session
        await self.disconnect()
        stack = AsyncExitStack()
        try:
            client = self._client
            if client is None:
                client = await stack.enter_async_context(httpx.AsyncClient())
            self._session = await stack.enter_async_context(
                aconnect_ws(self.config.http_url, client)
            )
        except BaseException:
            await stack.aclose()
            raise
        self._stack = stack
        logger.info("Connected to %s", self.config.endpoint_url)

    async def disconnect(self) -> None:
        self._session = None
        if (stack := self._stack) is not None:
            self._stack = None
            await stack.aclose()
            logger.info("Disconnected from %s", self.config.endpoint_url)

    async def __aenter__(self) -> "LobbyClientAdapter":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.disconnect()

    def on_close(self) -> None:
        logger.info("socket closed")
        self._session = None

    def on_message(self, raw: str) -> None:
        try:
            message = decode_message(raw)
            logger.info("received %s", message.kind)
            if (state := reduce_view(self.state, message)) == self.state:
                return
            render(state, self.document)
            self.state = state
        except Exception as exc:
            logger.exception("Error handling lobby message: %r", exc)

    async def receive_one(self) -> bool:
        if (session := self._session) is None:
            return False
        try:
            raw = await session.receive_text()
        except WebSocketInvalidTypeReceived:
            logger.warning("Skipping non-text frame")
            return True
        except WebSocketDisconnect as exc:
            logger.info("Server closed the connection: code=%s", exc.code)
            self.on_close()
            return False
        except WebSocketNetworkError as exc:
            logger.warning("Connection lost: %r", exc)
            self.on_close()
            return False
        self.on_message(raw)
        return True

    async def run(self) -> None:
        while await self.receive_one():
            pass

    async def send(self, message: OutboundMessage) -> None:
        if (session := self._session) is None:
            raise ConnectionNotOpenError(f"Cannot send {message.kind}: not connected")
        logger.info("sending %s", message.kind)
        await session.send_text(encode_message(message))

    async def send_create(
        self, username: str, start_section: str, end_section: str, game_kind: str
    ) -> None:
        await self.send(
            CreateMessage(
                username=username,
                settings=GameSettings(
                    start_section=start_section,
                    end_section=end_section,
                    game_kind=game_kind,
                ),
            )
        )

    async def send_start(self) -> None:
        await self.send(StartMessage())

    async def send_next_question(self) -> None:
        await self.send(NextQuestionMessage())

    async def create_game_button_handler(self) -> None:
        await self.send_create(**read_create_form(self.document))

    async def start_game_button_handler(self) -> None:
        await self.send_start()

    async def next_question_handler(self) -> None:
        await self.send_next_question()
