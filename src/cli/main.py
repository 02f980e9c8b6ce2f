# Copyright (c) 2025 Trae AI. All rights reserved.

import os
import sys
import signal
import logging
import typer
from pathlib import Path
from typing import List
from rich.console import Console
from ..core.channel import CancelToken
from ..core.config import Config
from ..core.errors import CancelledError, ConfigError, ScanError
from ..infrastructure.db.cache import CacheStores, cache_root, clean_cache, open_cache
from ..infrastructure.http.fetcher import DocumentFetcher
from ..infrastructure.providers.imdb import ImdbLookup
from ..infrastructure.providers.metacritic import MetacriticClient
from ..infrastructure.providers.omdb import OmdbClient
from ..infrastructure.providers.rottentomatoes import RottenTomatoesClient
from ..services.rating_service import RatingService
from ..services.score_service import ScoreService
from .render import TableRenderer

app = typer.Typer(help="MediaScore - IMDB, Rotten Tomatoes and Metacritic ratings for your media files.")
console = Console()
logger = logging.getLogger(__name__)

STOP_SIGNALS = ("SIGINT", "SIGTERM", "SIGUSR1", "SIGUSR2")


def setup_logging(debug: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)


def load_config(config_path: str) -> Config:
    try:
        config = Config.load(config_path)
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        raise typer.Exit(1)
    return config.apply_env(os.environ)


def register_signals(token: CancelToken):
    """
    Cancels the run on termination signals. Only callable from the main thread.
    """

    def _stop(signum, frame):
        if not token.cancelled:
            console.print()
            logger.warning("Exiting program as requested.")
            token.cancel()

    for name in STOP_SIGNALS:
        sig = getattr(signal, name, None)
        if sig is not None:
            signal.signal(sig, _stop)


def build_score_service(config: Config, stores: CacheStores, renderer: TableRenderer) -> ScoreService:
    fetcher = DocumentFetcher(timeout=config.http_timeout)
    omdb = OmdbClient(config.omdb_api_key, fetcher, ImdbLookup(fetcher))
    rating_service = RatingService(
        stores,
        omdb,
        RottenTomatoesClient(fetcher),
        MetacriticClient(fetcher),
    )
    return ScoreService(config, stores, rating_service, renderer=renderer, fetcher=fetcher)


@app.command("score")
def score(
    paths: List[Path] = typer.Argument(..., help="Media directories to score."),
    clean: bool = typer.Option(False, "--clean", "-c", help="Clean cache before scoring media."),
    config_path: str = typer.Option("config.yaml", "--config", help="Optional YAML config file."),
):
    """
    Score every video file under the given directories.
    """
    config = load_config(config_path)
    setup_logging(config.debug)

    # Free OMDb keys are limited to 1k queries per day: https://www.omdbapi.com/
    try:
        config.require_api_key()
    except ConfigError as e:
        logger.error(str(e))
        raise typer.Exit(1)

    root = cache_root(config.cache_dir)
    if clean:
        clean_cache(root)
        logger.info("Cleaned cache folder, continuing.")

    stores = open_cache(root)
    token = CancelToken()
    register_signals(token)
    service = build_score_service(config, stores, TableRenderer(console))

    try:
        if config.debug:
            service.score(paths, token)
        else:
            with console.status("Checking media..."):
                service.score(paths, token)
            console.print("Done!")
    except CancelledError:
        raise typer.Exit(1)
    except ScanError as e:
        logger.error(f"Fatal directory walking error: {e}")
        raise typer.Exit(1)
    finally:
        stores.close()


@app.command("clean")
def clean_command(
    config_path: str = typer.Option("config.yaml", "--config", help="Optional YAML config file."),
):
    """
    Delete the ratings cache.
    """
    config = load_config(config_path)
    setup_logging(config.debug)

    root = cache_root(config.cache_dir)
    if clean_cache(root):
        console.print(f"[green]Removed cache folder[/green] {root}")
    else:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
