"""Raw input monitor."""

import threading
from datetime import datetime

import click

from superhat.protocols import DeviceEvent, RawInputEvent

from ._common import load_config_service


@click.command(name="monitor")
@click.option(
    "--backend",
    "-b",
    type=click.Choice(["gamepad", "midi"], case_sensitive=False),
    default=None,
    help="Input backend (default: from config)",
)
@click.pass_context
def monitor(ctx: click.Context, backend: str | None):
    """
    Print raw button events as they arrive.

    Shows the (device, button) pair of every press and release, and which
    hat direction it is bound to. Useful to check bindings or find out what
    a controller sends.

    Press Ctrl+C to stop monitoring.
    """
    from superhat.core import DirectionMapper
    from superhat.exceptions import InputBackendUnavailableError
    from superhat.input import create_input_source
    from superhat.models import InputBackend

    config = load_config_service(ctx).get_model()
    selected = InputBackend(backend.lower()) if backend else config.input_backend
    mapper = DirectionMapper(config.bindings)

    def show_event(event: RawInputEvent) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
        direction = mapper.classify(event.device_id, event.button_id)
        bound = f" -> {direction.symbol} {direction.name}" if direction else ""
        click.echo(
            f"[{timestamp}] device {event.device_id} / button {event.button_id} "
            f"{event.kind.value.upper()}{bound}"
        )

    class _DevicePrinter:
        def on_device_event(self, event: DeviceEvent, device_name: str) -> None:
            click.echo(f"{device_name} {event.value}")

    source = create_input_source(selected, config.midi_port_filter)
    source.on_event(show_event)
    source.register_device_observer(_DevicePrinter())

    try:
        source.start()
    except InputBackendUnavailableError as e:
        raise click.ClickException(f"{e.user_message}\n\n{e.recovery_hint}") from e

    click.echo(f"Monitoring {selected.value} input. Press Ctrl+C to stop\n")
    try:
        threading.Event().wait()
    except KeyboardInterrupt:
        click.echo("\n\nStopping monitor...")
    finally:
        source.stop()
