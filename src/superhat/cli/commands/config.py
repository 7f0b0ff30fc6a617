"""Configuration commands."""

import json
from typing import Any, get_args

import click
from pydantic import ValidationError

from superhat.models import AppConfig

from ._common import config_path_from, load_config_service

# Edited through `superhat bindings` and the TUI instead
_HIDDEN_FIELDS = {"bindings", "key_combos"}


def _is_text_field(field: str) -> bool:
    annotation = AppConfig.model_fields[field].annotation
    return annotation is str or str in get_args(annotation)


def _parse_value(field: str, raw: str) -> Any:
    """
    Interpret a command-line value for a field.

    Text fields take the value verbatim (`null` clears an optional one).
    Everything else is read as JSON, falling back to a plain string.
    """
    if _is_text_field(field):
        return None if raw == "null" else raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _format_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


@click.group(name="config")
def config_group():
    """Show and change settings."""
    pass


@config_group.command(name="show")
@click.option("--field", "-f", "fields", multiple=True, help="Only show these fields")
@click.option("--all", "show_all", is_flag=True, help="Include bindings and key combinations")
@click.pass_context
def show_config(ctx: click.Context, fields: tuple[str, ...], show_all: bool):
    """Display the current configuration."""
    service = load_config_service(ctx)
    values = service.get_model().model_dump(mode="json")

    names = list(fields) or [
        name for name in AppConfig.model_fields if show_all or name not in _HIDDEN_FIELDS
    ]
    unknown = [name for name in names if name not in values]
    if unknown:
        raise click.BadParameter(f"Unknown field(s): {', '.join(unknown)}", param_hint="--field")

    click.echo(f"Configuration ({config_path_from(ctx)}):\n")
    for name in names:
        click.echo(f"  {name}: {_format_value(values[name])}")


@config_group.command(name="set")
@click.argument("field")
@click.argument("value")
@click.pass_context
def set_config(ctx: click.Context, field: str, value: str):
    """
    Set FIELD to VALUE and save.

    VALUE is read as JSON when possible, so numbers, true/false, null and
    lists work as expected. Text fields keep VALUE as typed.

    \b
    Examples:
      superhat config set long_press_ms 600
      superhat config set sound_enabled false
      superhat config set midi_port_filter "Launchpad"
    """
    if field not in AppConfig.model_fields:
        raise click.BadParameter(f"Unknown field: {field}", param_hint="FIELD")

    service = load_config_service(ctx)
    try:
        service.set(field, _parse_value(field, value))
    except ValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise click.ClickException(f"Invalid value for {field}: {errors}") from e

    service.save()
    click.echo(f"{field} = {_format_value(service.get_model().model_dump(mode='json')[field])}")


@config_group.command(name="reset")
@click.argument("fields", nargs=-1)
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def reset_config(ctx: click.Context, fields: tuple[str, ...], yes: bool):
    """Reset FIELDS (or everything) to their defaults."""
    unknown = [name for name in fields if name not in AppConfig.model_fields]
    if unknown:
        raise click.BadParameter(f"Unknown field(s): {', '.join(unknown)}", param_hint="FIELDS")

    what = ", ".join(fields) if fields else "the whole configuration (including bindings)"
    if not yes:
        click.confirm(f"Reset {what} to defaults?", abort=True)

    path = config_path_from(ctx)
    if not fields:
        AppConfig().save(path)
        click.echo(f"Reset {what}.")
        return

    # Works on the raw file so that an invalid value in FIELDS can be repaired
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raw = {}
    except json.JSONDecodeError as e:
        raise click.ClickException(
            f"{path} is not valid JSON ({e}). Run 'superhat config reset' to replace it."
        ) from e

    for name in fields:
        raw.pop(name, None)
    try:
        config = AppConfig.model_validate(raw)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise click.ClickException(f"Config is still invalid after the reset: {errors}") from e

    config.save(path)
    click.echo(f"Reset {what}.")
