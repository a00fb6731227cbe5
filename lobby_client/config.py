import logging
import os
from typing import List

from pydantic import BaseModel, Field

URL_ENV = "LOBBY_CLIENT_URL"
GAME_KINDS_ENV = "LOBBY_CLIENT_GAME_KINDS"

DEFAULT_ENDPOINT_URL = "ws://ethan.ws/history"

logger = logging.getLogger()


class ClientConfig(BaseModel):
    endpoint_url: str = DEFAULT_ENDPOINT_URL
    game_kinds: List[str] = Field(default_factory=lambda: ["trivia"])

    @property
    def http_url(self) -> str:
        # httpx only speaks http(s); the upgrade happens on top of it
        if self.endpoint_url.startswith("wss://"):
            return "https://" + self.endpoint_url[len("wss://") :]
        if self.endpoint_url.startswith("ws://"):
            return "http://" + self.endpoint_url[len("ws://") :]
        return self.endpoint_url


def load_config() -> ClientConfig:
    overrides = dict()
    if url := (os.environ.get(URL_ENV) or "").strip():
        overrides["endpoint_url"] = url
    if kinds := (os.environ.get(GAME_KINDS_ENV) or "").strip():
        if game_kinds := [k.strip() for k in kinds.split(",") if k.strip()]:
            overrides["game_kinds"] = game_kinds
        else:
            logger.warning("%s has no game kinds, using the defaults", GAME_KINDS_ENV)
    return ClientConfig(**overrides)
