"""Events and observer protocol for managed models."""

from enum import Enum
from typing import Protocol, runtime_checkable


class ModelEvent(Enum):
    """Model lifecycle events."""

    MODEL_LOADED = "model_loaded"
    MODEL_SAVED = "model_saved"
    MODEL_UPDATED = "model_updated"
    MODEL_RESET = "model_reset"


@runtime_checkable
class ModelObserver(Protocol):
    """Observer that receives model change events."""

    def on_model_event(self, event: ModelEvent, **kwargs) -> None:
        """
        Handle a model change event.

        Args:
            event: The type of model event
            **kwargs: Event-specific data:
                - MODEL_UPDATED: 'keys' (changed field names), 'values' (new values)
                - MODEL_LOADED / MODEL_SAVED: 'path'
                - MODEL_RESET: 'model' (the new default model)

        Threading:
            Called from the thread that changed the model (the input loop
            thread when bindings or the panel are persisted).
        """
        ...
