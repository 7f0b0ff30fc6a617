"""Generic management of pydantic models: state, persistence and change events."""

from superhat.model_manager.observer import ObserverManager
from superhat.model_manager.persistence import PydanticPersistence
from superhat.model_manager.protocols import ModelEvent, ModelObserver
from superhat.model_manager.service import ModelManagerService

__all__ = [
    "ModelEvent",
    "ModelManagerService",
    "ModelObserver",
    "ObserverManager",
    "PydanticPersistence",
]
