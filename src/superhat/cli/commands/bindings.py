"""Hat binding commands."""

import click

from superhat.models import BindingTable

from ._common import config_path_from, load_config_service


@click.group(name="bindings")
def bindings_group():
    """Show or clear the raw buttons bound to the hat directions."""
    pass


@bindings_group.command(name="show")
@click.pass_context
def show_bindings(ctx: click.Context):
    """Show the binding for each direction."""
    service = load_config_service(ctx)
    table = service.get_model().bindings

    click.echo(f"Bindings in {config_path_from(ctx)}:\n")
    duplicates = set(table.duplicates())
    for direction, binding in table.items():
        line = f"  {direction.symbol} {direction.name:<5}  {binding}"
        if direction in duplicates:
            line += click.style("  (shared)", fg="yellow")
        click.echo(line)

    click.echo()
    if table.is_complete:
        click.secho("Complete.", fg="green")
    else:
        click.secho("Incomplete: superhat will ask for bindings on start.", fg="yellow")


@bindings_group.command(name="reset")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
@click.pass_context
def reset_bindings(ctx: click.Context, yes: bool):
    """Unbind every direction. The next start captures new bindings."""
    if not yes:
        click.confirm("Clear all hat bindings?", abort=True)

    service = load_config_service(ctx)
    service.set("bindings", BindingTable.unbound())
    service.save()
    click.echo("Bindings cleared.")
