import logging
import time

from lobby_client.adapter import LobbyClientAdapter
from lobby_client.api import build_app
from lobby_client.config import load_config

logging.basicConfig(
    level=logging.INFO,
    format=(
        "%(asctime)s.%(msecs)03dZ [%(filename)s:%(lineno)d] "
        "%(levelname)s - %(message)s"
    ),
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logging.Formatter.converter = time.gmtime
logger = logging.getLogger()
logger.info("Starting up")
config = load_config()
adapter = LobbyClientAdapter(config)
fastapi_app = build_app(adapter)
