"""Switch number lookup."""

import click

from superhat.core import decode_switch_number, gesture_for
from superhat.models import SWITCH_COUNT, AppConfig

from ._common import load_config_service


def _describe(number: int, config: AppConfig) -> str:
    panel, side, position = decode_switch_number(number)
    taps = " ".join(d.symbol for d in (side, *gesture_for(side, position)))
    keys = "+".join(config.key_combos[number - 1])
    return (
        f"{number:>2}  {panel.display_name:<9}  side {side.symbol} {side.name:<5}  "
        f"position {position + 1}  taps {taps:<7}  keys {keys}"
    )


@click.command(name="decode")
@click.argument("number", type=click.IntRange(1, SWITCH_COUNT), required=False)
@click.pass_context
def decode(ctx: click.Context, number: int | None):
    """
    Show where switch NUMBER is and the taps that reach it.

    Without NUMBER, lists all 40 switches. The first tap picks the side; a
    long press Left or Right first picks the panel.
    """
    config = load_config_service(ctx).get_model()
    numbers = [number] if number is not None else range(1, SWITCH_COUNT + 1)
    for n in numbers:
        click.echo(_describe(n, config))
