"""
Model Core - Inference Model Selection.

Keeps the list of models offered by the inference service and the model the
user has chosen. A failed switch request is reported but the local choice is
kept, so the selected value may differ from the model the service runs.
"""

from collections.abc import Callable
from typing import Any

from core.entities import Model, ModelSelectionState
from logging_config import get_logger

logger = get_logger(__name__)

# Labels for the ids the stock inference service ships with.
KNOWN_MODEL_LABELS = {
    "model1": "model1- For boxes and cartons",
    "model2": "model2- For bottle stacks",
}

SWITCH_FAILED_NOTICE = "Failed to switch the model."


class UnknownModelError(ValueError):
    """Raised when selecting an id that is not among the available models."""


def _parse_model_entry(entry: Any) -> Model | None:
    if isinstance(entry, str):
        return Model(id=entry, label=KNOWN_MODEL_LABELS.get(entry, entry))
    if isinstance(entry, dict):
        model_id = entry.get("id") or entry.get("name")
        if not model_id:
            return None
        model_id = str(model_id)
        label = entry.get("label") or entry.get("description")
        return Model(id=model_id, label=str(label or KNOWN_MODEL_LABELS.get(model_id, model_id)))
    return None


def parse_models_payload(payload: dict[str, Any]) -> ModelSelectionState:
    """
    Converts a /models response into a ModelSelectionState.

    Entries may be bare ids or descriptors with id/name and label/description.
    Without ``current_model`` the first listed model is taken as current.
    """
    available = []
    for entry in payload.get("models") or []:
        model = _parse_model_entry(entry)
        if model is None:
            logger.warning(f"Ignoring unrecognised model entry: {entry!r}")
            continue
        available.append(model)

    current = payload.get("current_model")
    if isinstance(current, dict):
        current = current.get("id") or current.get("name")
    if not current and available:
        current = available[0].id
    return ModelSelectionState(available=available, current=str(current or ""))


def default_state() -> ModelSelectionState:
    """Selection state used before (or instead of) a successful model fetch."""
    return ModelSelectionState(
        available=[Model(id=k, label=v) for k, v in KNOWN_MODEL_LABELS.items()],
        current="",
    )


class ModelRegistry:
    """
    Holds the available models and the current choice.

    Args:
        fetch_models: Returns the raw /models payload
        send_selection: Asks the service to switch to the given model id
        notify: Receives user-visible notices
    """

    def __init__(
        self,
        fetch_models: Callable[[], dict[str, Any]],
        send_selection: Callable[[str], None],
        notify: Callable[[str], None] | None = None,
    ):
        self._fetch_models = fetch_models
        self._send_selection = send_selection
        self._notify = notify or (lambda message: None)
        self.state = default_state()

    def load_available(self) -> ModelSelectionState:
        """
        Fetches the model list once at startup.

        Failures are logged only; the state stays at its default.
        """
        try:
            self.state = parse_models_payload(self._fetch_models())
            logger.info(
                f"Loaded {len(self.state.available)} model(s), current: {self.state.current or '<none>'}"
            )
        except Exception as e:
            logger.error(f"Error fetching models: {e}", exc_info=True)
        return self.state

    def choose(self, model_id: str) -> None:
        """Changes the local choice without contacting the service."""
        known_ids = {m.id for m in self.state.available}
        if known_ids and model_id not in known_ids:
            raise UnknownModelError(f"Unknown model: {model_id}")
        self.state.current = model_id

    def select(self, model_id: str) -> bool:
        """
        Chooses ``model_id`` locally, then asks the service to switch.

        Returns:
            True if the service acknowledged the switch. On failure the local
            choice is left as is.
        """
        self.choose(model_id)
        try:
            self._send_selection(model_id)
        except Exception as e:
            logger.error(f"Error setting model {model_id}: {e}", exc_info=True)
            self._notify(SWITCH_FAILED_NOTICE)
            return False

        logger.info(f"Model switched to {model_id}")
        self._notify(f"Model switched to {model_id}")
        return True
