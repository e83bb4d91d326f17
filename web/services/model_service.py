"""
Model Service - Web Layer Service for Inference Model Selection.

Thin wrapper over core.session_core.
"""

from typing import Any

from core.session_core import VisionSession


def get_models(session: VisionSession) -> dict[str, Any]:
    """Get the available models and the current choice."""
    return session.models.to_dict()


def set_model(session: VisionSession, model_id: str) -> bool:
    """
    Switch the inference service to ``model_id``.

    Delegates to core.session_core.
    """
    return session.set_model(model_id)
