"""
Vision Blueprint.

Page and JSON routes for selecting images, running upload batches, switching
the inference model and exporting detection reports.
"""

import io

from flask import Blueprint, Response, jsonify, render_template, request, send_file, url_for

from core.model_core import UnknownModelError
from core.report_core import NoResultsError
from logging_config import get_logger
from web.services import model_service, report_service, upload_service

logger = get_logger(__name__)

vision_bp = Blueprint("vision", __name__, template_folder="../templates")

# Note: session is injected via init_vision()
vision_bp.session = None


def _reply(payload: dict, status: int = 200):
    """JSON response carrying any notices queued by the session."""
    payload["notices"] = vision_bp.session.drain_notices()
    return jsonify(payload), status


@vision_bp.route("/", methods=["GET"])
def index():
    session = vision_bp.session
    return render_template(
        "index.html",
        models=session.models,
        preview_urls=[
            url_for("vision.preview", token=t) for t in session.preview_tokens
        ],
        summary=report_service.get_summary(session),
        busy=session.busy,
    )


@vision_bp.route("/api/models", methods=["GET"])
def get_models():
    return _reply(model_service.get_models(vision_bp.session))


@vision_bp.route("/api/models/select", methods=["POST"])
def select_model():
    data = request.get_json(silent=True) or {}
    model_id = str(data.get("model_id") or request.form.get("model_id") or "").strip()
    if not model_id:
        return _reply({"error": "model_id is required"}, 400)

    session = vision_bp.session
    try:
        switched = model_service.set_model(session, model_id)
    except UnknownModelError as e:
        return _reply({"error": str(e)}, 400)

    payload = {"switched": switched, **model_service.get_models(session)}
    return _reply(payload, 200 if switched else 502)


@vision_bp.route("/api/images", methods=["POST"])
def select_images():
    session = vision_bp.session
    tokens = upload_service.select_images(session, request.files.getlist("files"))
    return _reply(
        {
            "count": len(tokens),
            "previews": [url_for("vision.preview", token=t) for t in tokens],
        }
    )


@vision_bp.route("/api/previews/<token>", methods=["GET"])
def preview(token):
    found = upload_service.get_preview(vision_bp.session, token)
    if found is None:
        return jsonify({"error": "Preview not found"}), 404
    return Response(found.content, mimetype=found.mimetype)


@vision_bp.route("/api/upload", methods=["POST"])
def upload():
    session = vision_bp.session
    result = upload_service.run_batch(session)

    if result["status"] == "empty":
        return _reply({"error": "No images selected", **result}, 400)
    if result["status"] == "busy":
        return _reply({"error": "An upload batch is already running", **result}, 409)

    return _reply({**result, **report_service.get_summary(session)})


@vision_bp.route("/api/results", methods=["GET"])
def results():
    return _reply(report_service.get_summary(vision_bp.session))


@vision_bp.route("/api/results/json", methods=["GET"])
def results_json():
    return _reply({"view": report_service.get_structured_view(vision_bp.session)})


@vision_bp.route("/api/report.pdf", methods=["GET"])
def report_pdf():
    session = vision_bp.session
    try:
        pdf_bytes, filename = report_service.build_pdf(session)
    except NoResultsError as e:
        return _reply({"error": str(e)}, 400)
    except Exception as e:
        logger.error(f"Report rendering failed: {e}", exc_info=True)
        return _reply({"error": "Report rendering failed"}, 500)

    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=filename,
    )


# =============================================================================
# Blueprint Initialization
# =============================================================================


def init_vision(app, session):
    """
    Initialize the vision blueprint and register it with the app.

    Args:
        app: Flask application instance
        session: VisionSession shared by all routes
    """
    vision_bp.session = session
    app.register_blueprint(vision_bp)
    logger.info("Vision blueprint registered")
