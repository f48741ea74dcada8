"""catbreeds command-line interface.

Drives the catalog state container against The Cat API and prints the result
as a JSON envelope (see ``catbreeds.cli.output``).

Examples:
    catbreeds list --pages 3
    catbreeds search beng
    catbreeds --config ./catbreeds.toml list
"""

import asyncio
from typing import Any, NoReturn, Optional

import click

from catbreeds import __version__
from catbreeds.cli.output import emit_error, emit_success
from catbreeds.config import CatalogConfig
from catbreeds.core.errors import ConfigurationError
from catbreeds.core.state import CatalogState, CatalogStore
from catbreeds.session import CatalogSession


def _load_session(config: CatalogConfig) -> CatalogSession:
    try:
        return CatalogSession(config)
    except ConfigurationError as e:
        emit_error(
            str(e),
            code="CONFIGURATION_ERROR",
            error_type="configuration",
            remediation="Check CAT_API_KEY and the CATBREEDS_* variables or catbreeds.toml",
        )


def _emit_store_error(state: CatalogState, **details: Any) -> NoReturn:
    emit_error(
        state.error_message,
        code="REQUEST_FAILED",
        error_type="catalog",
        details=details,
    )


async def _collect_pages(store: CatalogStore, pages: int) -> None:
    await store.fetch_breeds()
    for _ in range(pages - 1):
        if store.has_error or store.has_reached_max:
            break
        await store.load_more_breeds()


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a catbreeds TOML config file.",
)
@click.version_option(__version__, prog_name="catbreeds")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str]) -> None:
    """Browse and search The Cat API breed catalog."""
    config = CatalogConfig.from_env(config_file)
    config.setup_logging()
    ctx.obj = config


@cli.command("list")
@click.option(
    "--pages",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of pages to load (stops early when the catalog is exhausted).",
)
@click.pass_obj
def list_cmd(config: CatalogConfig, pages: int) -> None:
    """List breeds page by page."""
    session = _load_session(config)

    async def _run() -> CatalogState:
        async with session:
            await _collect_pages(session.store, pages)
            return session.store.state

    state = asyncio.run(_run())
    if state.has_error:
        _emit_store_error(state, page=state.page)

    emit_success({
        "items": [item.to_api() for item in state.items],
        "count": len(state.items),
        "page": state.page,
        "has_reached_max": state.has_reached_max,
    })


@cli.command("search")
@click.argument("term")
@click.pass_obj
def search_cmd(config: CatalogConfig, term: str) -> None:
    """Search breeds whose name matches TERM."""
    session = _load_session(config)

    async def _run() -> CatalogState:
        async with session:
            await session.store.search_breeds(term)
            return session.store.state

    state = asyncio.run(_run())
    if state.has_error:
        _emit_store_error(state, query=term)

    emit_success({
        "query": term,
        "items": [item.to_api() for item in state.search_results],
        "count": len(state.search_results),
    })


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
