from html import escape

from lobby_client.ui.document import (
    CREATE_MENU,
    END_SECTION,
    ERROR_LABEL,
    GAME,
    GAME_ID,
    GAME_KIND_SELECT,
    HOST_NAME,
    LOBBY,
    MEMBERS,
    START_SECTION,
    USERNAME,
    Document,
    Element,
)

page_script = """
    <script>
      async function post(path, body) {
        const res = await fetch(path, {
          method: "POST",
          headers: { "Content-Type": "application/json" },
          body: JSON.stringify(body || {})
        });
        if (!res.ok) {
          const data = await res.json();
          alert(data.detail);
        }
        location.reload();
      }

      function createGameButtonHandler() {
        post("/create/", {
          username: document.getElementById("username").value,
          start_section: document.getElementById("startSection").value,
          end_section: document.getElementById("endSection").value,
          game_kind: document.getElementById("gameKindSelect").value
        });
      }

      function startGameButtonHandler() {
        post("/start/");
      }

      function nextQuestionHandler() {
        post("/next-question/");
      }

      // the create form keeps whatever the user is typing
      if (document.getElementById("createMenu").style.display === "none") {
        setTimeout(() => location.reload(), 2000);
      }
    </script>
"""


def _style(element: Element) -> str:
    return "" if element.visible else ' style="display: none;"'


def _input(element: Element, label: str) -> str:
    return (
        f'<label>{label}: <input type="text" id="{element.element_id}" '
        f'value="{escape(element.value)}"></label>'
    )


def _select(element: Element) -> str:
    options = "".join(
        f'<option value="{escape(option)}"'
        f'{" selected" if i == element.selected_index else ""}>'
        f"{escape(option)}</option>"
        for i, option in enumerate(element.options)
    )
    return f'<select id="{element.element_id}">{options}</select>'


def render_page(document: Document) -> str:
    element = document.get_element_by_id
    create_menu = element(CREATE_MENU)
    lobby = element(LOBBY)
    game = element(GAME)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <title>Create Game</title>
  <style>
    #members {{ width: 20em; height: 10em; }}
  </style>
</head>
<body>
  <div id="{CREATE_MENU}"{_style(create_menu)}>
    <h1>Create Game</h1>
    <div>{_input(element(USERNAME), "Name")}</div>
    <div>{_input(element(START_SECTION), "Start section")}</div>
    <div>{_input(element(END_SECTION), "End section")}</div>
    <div>{_select(element(GAME_KIND_SELECT))}</div>
    <button onclick="createGameButtonHandler()">Create Game</button>
    <p id="{ERROR_LABEL}">{escape(element(ERROR_LABEL).text)}</p>
  </div>

  <div id="{LOBBY}"{_style(lobby)}>
    <h1 id="{HOST_NAME}">{escape(element(HOST_NAME).text)}</h1>
    <h2 id="{GAME_ID}">{escape(element(GAME_ID).text)}</h2>
    <textarea id="{MEMBERS}" readonly>{escape(element(MEMBERS).value)}</textarea>
    <button onclick="startGameButtonHandler()">Start Game</button>
  </div>

  <div id="{GAME}"{_style(game)}>
    <button onclick="nextQuestionHandler()">Next Question</button>
  </div>
{page_script}
</body>
</html>
"""
