"""Device listing command."""

import logging

import click

logger = logging.getLogger(__name__)


@click.command(name="devices")
def devices():
    """List game controllers and MIDI input ports."""
    # Imported here: pygame prints nothing, but still takes a moment to load
    from superhat.input.gamepad import GamepadInput
    from superhat.input.midi import MidiInput

    click.echo("Game controllers (--backend gamepad):\n")
    try:
        gamepads = GamepadInput.list_devices()
    except Exception as e:
        logger.error(f"Failed to list game controllers: {e}")
        click.echo(f"  Unavailable: {e}")
    else:
        if not gamepads:
            click.echo("  No game controllers found.")
        for info in gamepads:
            click.echo(f"  {info}")

    click.echo("\nMIDI input ports (--backend midi):\n")
    try:
        ports = MidiInput.list_devices()
    except (OSError, ImportError) as e:
        logger.error(f"Failed to list MIDI ports: {e}")
        click.echo(f"  Unavailable: {e}")
    else:
        if not ports:
            click.echo("  No MIDI input ports found.")
        for i, port in enumerate(ports):
            click.echo(f"  [{i}] {port}")
