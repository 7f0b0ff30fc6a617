"""Helpers shared by the utility commands."""

from pathlib import Path

import click

from superhat.exceptions import SuperhatError
from superhat.model_manager import ModelManagerService
from superhat.models import DEFAULT_CONFIG_PATH, AppConfig


def config_path_from(ctx: click.Context) -> Path:
    """The --config path given to the top-level group, or the default."""
    obj = ctx.find_root().obj or {}
    return obj.get("config_path") or DEFAULT_CONFIG_PATH


def load_config_service(ctx: click.Context) -> ModelManagerService[AppConfig]:
    """
    Load the config file into a service bound to that file.

    Raises:
        click.ClickException: If the file exists but cannot be loaded
    """
    path = config_path_from(ctx)
    try:
        config = AppConfig.load_or_default(path)
    except SuperhatError as e:
        message = e.user_message
        if e.recovery_hint:
            message += f"\n\n{e.recovery_hint}"
        raise click.ClickException(message) from e
    return ModelManagerService[AppConfig](AppConfig, config, default_path=path)
