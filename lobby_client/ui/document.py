from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from lobby_client.engine.view_state import ViewState

# Regions
CREATE_MENU = "createMenu"
LOBBY = "lobby"
GAME = "game"

# Labels and fields
GAME_ID = "gameId"
HOST_NAME = "hostName"
ERROR_LABEL = "errorLabel"
MEMBERS = "members"
USERNAME = "username"
START_SECTION = "startSection"
END_SECTION = "endSection"
GAME_KIND_SELECT = "gameKindSelect"

ELEMENT_IDS = (
    CREATE_MENU,
    LOBBY,
    GAME,
    GAME_ID,
    HOST_NAME,
    ERROR_LABEL,
    MEMBERS,
    USERNAME,
    START_SECTION,
    END_SECTION,
    GAME_KIND_SELECT,
)


class ElementNotFound(LookupError):
    pass


@dataclass
class Element:
    element_id: str
    text: str = ""
    value: str = ""
    display: str = "block"
    options: List[str] = field(default_factory=list)
    selected_index: int = 0

    @property
    def visible(self) -> bool:
        return self.display != "none"

    def show(self) -> None:
        self.display = "block"

    def hide(self) -> None:
        self.display = "none"

    @property
    def selected_value(self) -> str:
        if not 0 <= self.selected_index < len(self.options):
            return ""
        return self.options[self.selected_index]


class Document(dict):
    def get_element_by_id(self, element_id: str) -> Element:
        if (element := self.get(element_id)) is None:
            raise ElementNotFound(f"No element with id {element_id!r}")
        return element

    def add(self, element: Element) -> Element:
        self[element.element_id] = element
        return element


def create_lobby_document(game_kinds: Iterable[str]) -> Document:
    document = Document()
    for element_id in ELEMENT_IDS:
        document.add(Element(element_id))
    document[LOBBY].hide()
    document[GAME].hide()
    document[GAME_KIND_SELECT].options = list(game_kinds)
    return document


def render(state: ViewState, document: Document) -> None:
    # Resolve everything first so a missing element leaves the document as it was
    create_menu, lobby, game, game_id, host_name, error_label, members = (
        document.get_element_by_id(element_id)
        for element_id in (
            CREATE_MENU,
            LOBBY,
            GAME,
            GAME_ID,
            HOST_NAME,
            ERROR_LABEL,
            MEMBERS,
        )
    )

    for region, visible in (
        (create_menu, state.create_menu_visible),
        (lobby, state.lobby_visible),
        (game, state.game_visible),
    ):
        if visible:
            region.show()
        else:
            region.hide()

    game_id.text = state.game_id_text
    host_name.text = state.host_name_text
    error_label.text = state.error_text
    members.value = state.members_text


def read_create_form(document: Document) -> Dict[str, str]:
    return {
        "username": document.get_element_by_id(USERNAME).value,
        "start_section": document.get_element_by_id(START_SECTION).value,
        "end_section": document.get_element_by_id(END_SECTION).value,
        "game_kind": document.get_element_by_id(GAME_KIND_SELECT).selected_value,
    }
