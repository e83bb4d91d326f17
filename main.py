# ------------------------------------------------------------------------------
# Main Script for the VisionBox Detection Web Interface
# main.py
# ------------------------------------------------------------------------------
import json
from config import get_config
config = get_config()
from logging_config import get_logger
logger = get_logger(__name__)

from core.session_core import VisionSession
from utils.inference_client import InferenceClient
from utils.preview_store import PreviewStore

# --------------------------------------------------------------------------
# Configuration Parameters
# --------------------------------------------------------------------------
_debug = config["DEBUG_MODE"]

logger.info(f"Debug mode is {'enabled' if _debug else 'disabled'}.")
logger.info(f"Configuration: {json.dumps(config, indent=2)}")

# -----------------------------
# Build the Session
# -----------------------------
client = InferenceClient(config["INFERENCE_BASE_URL"], timeout=config["INFERENCE_TIMEOUT"])
session = VisionSession(
    client,
    PreviewStore(size=config["PREVIEW_SIZE"]),
    timestamp_format=config["TIMESTAMP_FORMAT"],
)

# Fetch the model list once; failures are only logged.
session.load_models()

# -----------------------------
# Import and Run the Web Interface
# -----------------------------
from web.web_interface import create_web_interface

# Expose the Flask server as the WSGI app.
interface = create_web_interface(session)
app = interface["server"]

if __name__ == '__main__':
    try:
        interface["run"](debug=_debug, host=config["WEB_HOST"], port=config["WEB_PORT"])
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received. Shutting down.")
