"""Persistence of bindings and session state through the config service."""

import logging

from superhat.exceptions import ErrorContext
from superhat.model_manager import ModelManagerService
from superhat.models import AppConfig, BindingTable
from superhat.protocols import Action, PanelSelected

logger = logging.getLogger(__name__)


class ConfigBindingStore:
    """
    BindingStore backed by the app config.

    save() updates the config's ``bindings`` field and writes the whole
    config file (atomically, keeping a .bak of the previous version).
    """

    def __init__(self, config_service: ModelManagerService[AppConfig]):
        self._config_service = config_service

    def load(self) -> BindingTable:
        return self._config_service.get_model().bindings

    def save(self, bindings: BindingTable) -> None:
        """
        Raises:
            OSError: If the config file cannot be written
        """
        self._config_service.set("bindings", bindings.model_copy(deep=True))
        if self._config_service.default_path is not None:
            self._config_service.save()


class PanelPersistence:
    """Action observer that remembers the selected panel across restarts."""

    def __init__(self, config_service: ModelManagerService[AppConfig]):
        self._config_service = config_service

    def on_action(self, action: Action) -> None:
        if not isinstance(action, PanelSelected):
            return
        if self._config_service.get("selected_panel") == action.panel:
            return

        with ErrorContext("persist selected panel", logger, re_raise=False):
            self._config_service.set("selected_panel", action.panel)
            if self._config_service.default_path is not None:
                self._config_service.save()
