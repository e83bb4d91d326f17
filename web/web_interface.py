# ------------------------------------------------------------------------------
# web_interface.py
# ------------------------------------------------------------------------------

import logging

from flask import Flask, jsonify

from config import get_config
from web.blueprints.vision import init_vision

config = get_config()


def create_web_interface(session):
    """
    Creates and returns the web interface for the project.

    Returns a dict with:
      - server: the Flask app (WSGI entry point)
      - run: callable starting the development server
    """
    logger = logging.getLogger(__name__)

    server = Flask(__name__)
    server.config["MAX_CONTENT_LENGTH"] = config["MAX_UPLOAD_MB"] * 1024 * 1024

    @server.errorhandler(413)
    def too_large(_error):
        return jsonify({"error": f"Upload exceeds {config['MAX_UPLOAD_MB']} MB"}), 413

    init_vision(server, session)

    def run(debug=False, host="0.0.0.0", port=8050):
        logger.info(f"Starting web interface on {host}:{port}")
        server.run(debug=debug, host=host, port=port, threaded=True, use_reloader=False)

    return {"server": server, "run": run}
