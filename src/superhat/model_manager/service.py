"""Stateful manager for a pydantic model (the app config)."""

import logging
from pathlib import Path
from threading import Lock
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from superhat.model_manager.observer import ObserverManager
from superhat.model_manager.persistence import PydanticPersistence
from superhat.model_manager.protocols import ModelEvent, ModelObserver

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class ModelManagerService(Generic[ModelType]):
    """
    Holds one model instance and mediates every read, write and save.

    Writes go through full pydantic validation (the model is rebuilt from a
    dump, since pydantic does not validate on attribute assignment), so the
    held model is always valid. Each change is announced to ModelObservers.

    Threading:
        All public methods are thread-safe. The lock protects the model and
        is released before observers are notified.

    Usage Example:
        ```python
        service = ModelManagerService[AppConfig](AppConfig, config, default_path=path)
        service.set("sound_enabled", False)
        service.save()
        ```
    """

    def __init__(
        self,
        model_type: type[ModelType],
        initial_model: ModelType,
        default_path: Path | None = None,
    ):
        """
        Args:
            model_type: The pydantic model class
            initial_model: The initial model instance
            default_path: Default path for load() and save()
        """
        self._model_type = model_type
        self._model = initial_model
        self._default_path = default_path
        self._lock = Lock()
        self._observers = ObserverManager[ModelObserver](observer_type_name="model")

        logger.info(f"ModelManagerService initialized with {model_type.__name__}")

    @property
    def default_path(self) -> Path | None:
        return self._default_path

    # =================================================================
    # Event System
    # =================================================================

    def register_observer(self, observer: ModelObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: ModelObserver) -> None:
        self._observers.unregister(observer)

    def _notify_observers(self, event: ModelEvent, **kwargs: Any) -> None:
        self._observers.notify("on_model_event", event, **kwargs)

    # =================================================================
    # Model Access
    # =================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Get a field value, or ``default`` if the model has no such field."""
        with self._lock:
            return getattr(self._model, key, default)

    def get_all(self) -> dict[str, Any]:
        """Get all field values as a dictionary snapshot."""
        with self._lock:
            return self._model.model_dump()

    def get_model(self) -> ModelType:
        """Get a deep copy of the model. Mutating it does not affect the service."""
        with self._lock:
            return self._model.model_copy(deep=True)

    # =================================================================
    # Model Mutation
    # =================================================================

    def set(self, key: str, value: Any) -> None:
        """
        Set one field value.

        Raises:
            AttributeError: If the model has no such field
            ValidationError: If the new model fails validation (nothing changes)
        """
        self.update({key: value})

    def update(self, values: dict[str, Any]) -> None:
        """
        Set several field values atomically (all or nothing).

        Raises:
            AttributeError: If any key is not a model field
            ValidationError: If the new model fails validation (nothing changes)

        Events:
            Emits a single MODEL_UPDATED with all changed keys and values
        """
        with self._lock:
            for key in values:
                if key not in self._model_type.model_fields:
                    raise AttributeError(f"'{self._model_type.__name__}' has no field '{key}'")

            current = self._model.model_dump()
            current.update(values)
            try:
                self._model = self._model_type.model_validate(current)
            except ValidationError as e:
                logger.error(f"Validation error updating {list(values)}: {e}")
                raise

        self._notify_observers(ModelEvent.MODEL_UPDATED, keys=list(values), values=values)
        logger.debug(f"Model updated: {list(values)}")

    def reset(self, keys: list[str] | None = None) -> None:
        """
        Reset the model, or only the given fields, to their defaults.

        Raises:
            AttributeError: If any key is not a model field

        Events:
            MODEL_RESET for a full reset, MODEL_UPDATED for a partial one
        """
        if keys is None:
            with self._lock:
                self._model = self._model_type()
                model_copy = self._model.model_copy(deep=True)
            self._notify_observers(ModelEvent.MODEL_RESET, model=model_copy)
            logger.info(f"Model reset to defaults: {self._model_type.__name__}")
            return

        defaults = self._model_type()
        self.update({key: getattr(defaults, key, None) for key in keys})

    # =================================================================
    # Persistence
    # =================================================================

    def _resolve_path(self, path: Path | None) -> Path:
        file_path = path or self._default_path
        if file_path is None:
            raise ValueError("No path specified and no default_path set")
        return Path(file_path)

    def load(self, path: Path | None = None) -> None:
        """
        Replace the model with the contents of a file.

        Raises:
            ValueError: If no path is given and there is no default path
            FileNotFoundError: If the file doesn't exist
            ConfigurationError: If the file is invalid
        """
        file_path = self._resolve_path(path)
        new_model = PydanticPersistence.load_json(file_path, self._model_type)

        with self._lock:
            self._model = new_model

        self._notify_observers(ModelEvent.MODEL_LOADED, path=file_path)
        logger.info(f"Model loaded from {file_path}")

    def save(self, path: Path | None = None) -> None:
        """
        Write the model to a file.

        Raises:
            ValueError: If no path is given and there is no default path
            OSError: If the file cannot be written
        """
        file_path = self._resolve_path(path)

        with self._lock:
            model_copy = self._model.model_copy(deep=True)

        # I/O happens outside the lock
        PydanticPersistence.save_json(model_copy, file_path)

        self._notify_observers(ModelEvent.MODEL_SAVED, path=file_path)
        logger.info(f"Model saved to {file_path}")
