"""Cache inspection and maintenance commands."""

from concurrent.futures import ThreadPoolExecutor
from typing import Annotated

import typer

from appdeck.cli.types import (
    build_icon_cache,
    build_manager,
    build_wallpaper_cache,
    load_cli_config,
)
from appdeck.core.store import KeyValueStore
from appdeck.inventory.cache import InventoryCache
from appdeck.models.inventory import iter_apps
from appdeck.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Inspect and maintain the inventory and image caches.",
    invoke_without_command=True,
    no_args_is_help=True,
)


def _format_age(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


@app.command()
def status() -> None:
    """Show the age and freshness of the cached inventory."""
    store = KeyValueStore()
    cache = InventoryCache(store)
    age = cache.record_age()

    console.print(f"[muted]Store:[/] {store.path}")
    if age is None:
        print_info("No cached inventory.")
        return

    if age < cache.expiration_interval:
        remaining = cache.expiration_interval - age
        print_success(
            f"Cached inventory is fresh ({_format_age(age)} old, "
            f"expires in {_format_age(remaining)})."
        )
    else:
        print_warning(f"Cached inventory is stale ({_format_age(age)} old).")


@app.command()
def clear() -> None:
    """Discard the cached inventory, icons and wallpaper."""
    config = load_cli_config()
    store = KeyValueStore()
    InventoryCache(store).invalidate()
    build_icon_cache(config).clear()
    build_wallpaper_cache(config, store).clear()
    print_success("Caches cleared.")


@app.command()
def warm(
    wallpaper: Annotated[
        bool,
        typer.Option(
            "--wallpaper/--no-wallpaper",
            help="Also load the configured wallpaper.",
        ),
    ] = True,
) -> None:
    """Load every application icon (and the wallpaper) into the caches."""
    config = load_cli_config()
    with build_manager(config) as manager:
        manager.start()
        entries = manager.wait()

    paths = [app.path for app in iter_apps(entries) if app.path is not None]
    icons = build_icon_cache(config)
    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="appdeck-icon") as pool:
        loaded = icons.warm(paths, pool)

    stats = icons.stats()
    print_success(f"Loaded {loaded} of {len(paths)} icons.")
    console.print(
        f"[muted]Icon cache: {stats.hits} hits, {stats.misses} misses "
        f"({stats.hit_rate:.0%} hit rate)[/]"
    )

    if wallpaper and config.wallpaper is not None:
        wallpaper_cache = build_wallpaper_cache(config, KeyValueStore())
        image = wallpaper_cache.load(config.wallpaper.expanduser())
        if image is None:
            print_warning(f"Could not load wallpaper {config.wallpaper}.")
        else:
            width, height = image.size
            print_info(f"Wallpaper cached ({width}x{height}).")
