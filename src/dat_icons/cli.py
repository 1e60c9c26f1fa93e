"""CLI entry point for the icon service."""

from __future__ import annotations

import click

from .core.enums import LayerRole
from .core.errors import IconServiceError


@click.group()
def main() -> None:
    """DAT Icon Service."""


@main.command()
@click.option("--config", default=None, help="Config file path")
@click.option("--host", default=None, help="Bind address override")
@click.option("--port", default=None, type=int, help="Port override")
def serve(config: str | None, host: str | None, port: int | None) -> None:
    """Run the HTTP server."""
    import asyncio

    from .main import serve as run_server

    overrides: dict = {}
    if host is not None:
        overrides.setdefault("server", {})["host"] = host
    if port is not None:
        overrides.setdefault("server", {})["port"] = port

    asyncio.run(run_server(config_path=config, overrides=overrides))


@main.command("init-db")
@click.option("--config", default=None, help="Config file path")
def init_db(config: str | None) -> None:
    """Create the catalog tables."""
    import asyncio

    from .main import init_db as run_init_db

    asyncio.run(run_init_db(config_path=config))
    click.echo("Catalog tables created.")


@main.command("import-index")
@click.argument("index_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", default=None, help="Config file path")
def import_index(index_path: str, config: str | None) -> None:
    """Load JSON-lines record descriptors into the catalog."""
    import asyncio

    from .main import import_index as run_import

    try:
        count = asyncio.run(run_import(index_path, config_path=config))
    except IconServiceError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Imported {count} records.")


@main.command()
@click.argument("icon_id")
@click.option("--config", default=None, help="Config file path")
@click.option("--scale", default=1, type=int, help="Scale factor (1-8)")
@click.option("--background", default=None, help="Background ID, item type or 'random'")
@click.option("--underlay", default=None, help="Underlay texture ID")
@click.option("--overlay", default=None, help="Overlay texture ID")
@click.option("--overlay2", default=None, help="Secondary overlay texture ID")
@click.option("--ui-effect", default=None, help="UI effect ID, name or 'random'")
@click.option("-o", "--output", default=None, help="Output PNG path (default: <icon_id>.png)")
def render(
    icon_id: str,
    config: str | None,
    scale: int,
    background: str | None,
    underlay: str | None,
    overlay: str | None,
    overlay2: str | None,
    ui_effect: str | None,
    output: str | None,
) -> None:
    """Render one icon to a PNG file."""
    import asyncio

    from .main import render as run_render

    layers = {
        role: value
        for role, value in (
            (LayerRole.BACKGROUND, background),
            (LayerRole.UNDERLAY, underlay),
            (LayerRole.OVERLAY, overlay),
            (LayerRole.OVERLAY2, overlay2),
            (LayerRole.EFFECT, ui_effect),
        )
        if value is not None
    }

    try:
        png = asyncio.run(run_render(icon_id, scale=scale, layers=layers, config_path=config))
    except IconServiceError as exc:
        raise click.ClickException(str(exc)) from exc

    path = output or f"{icon_id}.png"
    with open(path, "wb") as f:
        f.write(png)
    click.echo(f"Wrote {len(png)} bytes to {path}")


if __name__ == "__main__":
    main()
