import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict

from lobby_client.engine.messages import (
    CREATE_FAILED,
    CREATE_SUCCESS,
    INITIAL_STUFF,
    REFRESH_LOBBY,
    CreateFailedMessage,
    CreateSuccessMessage,
    InboundMessage,
    InitialStuffMessage,
    RefreshLobbyMessage,
    UnknownMessage,
)

logger = logging.getLogger()


@dataclass(frozen=True)
class ViewState:
    """
    What the create-lobby screen shows.
    Nothing keeps the three screens mutually exclusive: each reducer only
    touches the visibility its message names.
    """

    create_menu_visible: bool = True
    lobby_visible: bool = False
    game_visible: bool = False
    game_id_text: str = ""
    host_name_text: str = ""
    error_text: str = ""
    members_text: str = ""


def create_success(state: ViewState, message: CreateSuccessMessage) -> ViewState:
    return replace(
        state,
        game_id_text=f"Game ID: {message.game_id}",
        host_name_text=f"{message.host_name}'s Lobby",
        create_menu_visible=False,
        lobby_visible=True,
    )


def create_failed(state: ViewState, message: CreateFailedMessage) -> ViewState:
    return replace(state, error_text=message.message)


def refresh_lobby(state: ViewState, message: RefreshLobbyMessage) -> ViewState:
    return replace(state, members_text="\n".join(message.users))


def initial_stuff(state: ViewState, message: InitialStuffMessage) -> ViewState:
    return replace(state, lobby_visible=False, game_visible=True)


VIEW_REDUCERS: Dict[str, Callable[..., ViewState]] = {
    CREATE_SUCCESS: create_success,
    CREATE_FAILED: create_failed,
    REFRESH_LOBBY: refresh_lobby,
    INITIAL_STUFF: initial_stuff,
}


def reduce_view(state: ViewState, message: InboundMessage) -> ViewState:
    if isinstance(message, UnknownMessage) or (
        (reducer := VIEW_REDUCERS.get(message.kind)) is None
    ):
        logger.warning("Ignoring message of unknown kind %s", message.kind)
        return state
    return reducer(state, message)
