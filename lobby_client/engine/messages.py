import json
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

# Inbound kinds (server -> client)
CREATE_SUCCESS = "createSuccess"
CREATE_FAILED = "createFailed"
REFRESH_LOBBY = "refreshLobby"
INITIAL_STUFF = "initialStuff"

# Outbound kinds (client -> server)
CREATE = "create"
START = "start"
NEXT_QUESTION = "nextQuestion"


class MessageDecodeError(ValueError):
    pass


class CreateSuccessMessage(BaseModel):
    kind: Literal["createSuccess"]
    game_id: str = Field(alias="gameId")
    host_name: str = Field(alias="hostName")


class CreateFailedMessage(BaseModel):
    kind: Literal["createFailed"]
    message: str


class RefreshLobbyMessage(BaseModel):
    kind: Literal["refreshLobby"]
    users: List[str]


class InitialStuffMessage(BaseModel):
    kind: Literal["initialStuff"]


class UnknownMessage(BaseModel):
    kind: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)


KnownInboundMessage = Annotated[
    Union[
        CreateSuccessMessage,
        CreateFailedMessage,
        RefreshLobbyMessage,
        InitialStuffMessage,
    ],
    Field(discriminator="kind"),
]
InboundMessage = Union[
    CreateSuccessMessage,
    CreateFailedMessage,
    RefreshLobbyMessage,
    InitialStuffMessage,
    UnknownMessage,
]

inbound_message_adapter = TypeAdapter(KnownInboundMessage)

INBOUND_KINDS = frozenset({CREATE_SUCCESS, CREATE_FAILED, REFRESH_LOBBY, INITIAL_STUFF})


class GameSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    start_section: str = Field(alias="startSection")
    end_section: str = Field(alias="endSection")
    game_kind: str = Field(alias="gameKind")


class CreateMessage(BaseModel):
    kind: Literal["create"] = CREATE
    username: str
    settings: GameSettings


class StartMessage(BaseModel):
    kind: Literal["start"] = START


class NextQuestionMessage(BaseModel):
    kind: Literal["nextQuestion"] = NEXT_QUESTION


OutboundMessage = Union[CreateMessage, StartMessage, NextQuestionMessage]


def decode_message(raw: str) -> InboundMessage:
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MessageDecodeError(f"Malformed message: {exc}") from exc

    if not isinstance(data, dict):
        raise MessageDecodeError(f"Expected a JSON object, got {type(data).__name__}")

    kind = data.get("kind")
    if not isinstance(kind, str) or kind not in INBOUND_KINDS:
        return UnknownMessage(kind=None if kind is None else str(kind), payload=data)

    try:
        return inbound_message_adapter.validate_python(data)
    except ValidationError as exc:
        raise MessageDecodeError(f"Invalid {kind} message: {exc}") from exc


def encode_message(message: OutboundMessage) -> str:
    return message.model_dump_json(by_alias=True)
