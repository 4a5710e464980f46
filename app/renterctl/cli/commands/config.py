"""Config commands.

Show and edit the client configuration, and list the session backends
that are installed.
"""

import json
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.table import Table

from renterctl.cli.types import get_config, get_config_path
from renterctl.core.config import ConfigError, RenterConfig, config_to_dict, save_config
from renterctl.core.paths import get_config_path as default_config_path
from renterctl.host.backends import ENTRY_POINT_GROUP, available_backends
from renterctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and edit renterctl settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the effective configuration.

    Settings missing from the config file are shown with their defaults.
    """
    config = get_config(ctx)

    if json_output:
        typer.echo(json.dumps(config.model_dump(), indent=2))
        return

    table = Table(title="Configuration", header_style="bold_header", border_style="border")
    table.add_column("Setting", style="text")
    table.add_column("Value")
    for name, value in config.model_dump().items():
        shown = "[muted](unset)[/muted]" if value is None else str(value)
        table.add_row(name, shown)
    console.print(table)


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the path of the config file in use."""
    typer.echo(str(get_config_path(ctx) or default_config_path()))


@app.command(name="set")
def set_value(
    ctx: typer.Context,
    key: Annotated[str, typer.Argument(help="Setting name, e.g. muse_addr.")],
    value: Annotated[str, typer.Argument(help="New value.")],
) -> None:
    """Change one setting and save the config file.

    Examples:
        renterctl config set muse_addr localhost:9580
        renterctl config set http_timeout_seconds 60
    """
    if key not in RenterConfig.model_fields:
        known = ", ".join(RenterConfig.model_fields)
        print_error(f"Unknown setting '{key}'. Known settings: {known}")
        raise typer.Exit(code=1)

    current = config_to_dict(get_config(ctx))
    current[key] = value

    try:
        updated = RenterConfig.model_validate(current)
    except ValidationError as e:
        print_error(f"Invalid value for {key}: {e.errors()[0]['msg']}")
        raise typer.Exit(code=1) from e

    try:
        saved = save_config(updated, get_config_path(ctx))
    except (ConfigError, RuntimeError, OSError) as e:
        print_error(f"Could not save config: {e}")
        raise typer.Exit(code=1) from e

    print_success(f"Set {key} = {getattr(updated, key)} in {saved}")


@app.command()
def backends() -> None:
    """List installed session backends."""
    names = available_backends()
    if not names:
        print_info(f"No session backends installed (entry-point group '{ENTRY_POINT_GROUP}').")
        return

    for name in names:
        console.print(f"  {name}")
