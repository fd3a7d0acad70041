"""CLI entry point for md2hatena."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.syntax import Syntax

from md2hatena.config import Md2HatenaConfig, load_config
from md2hatena.config.loader import DEFAULT_CONFIG_TEMPLATE
from md2hatena.converter import Converter, ImageResolutionCache, ResolvedImage
from md2hatena.errors import ConfigParseError, Md2HatenaError
from md2hatena.hackmd import create_hackmd
from md2hatena.hatena import create_uploader
from md2hatena.output import write_result_html
from md2hatena.resolver import ResolutionCoordinator

app = typer.Typer(
    name="md2hatena",
    help="Convert HackMD notes into Hatena Blog HTML.",
)

config_app = typer.Typer(help="Manage md2hatena configuration.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)

# Status output goes to stderr so HTML on stdout can be piped
console = Console(stderr=True)

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class LogLevel(str, Enum):
    debug = "debug"
    info = "info"
    warn = "warn"
    error = "error"


# Global state
_config: Md2HatenaConfig | None = None


def _get_config() -> Md2HatenaConfig:
    if _config is None:
        return load_config()
    return _config


def _fail(message: object) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(str(message))}")
    return typer.Exit(1)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS[level],
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,
    log_level: Annotated[
        LogLevel | None, typer.Option("--log-level", help="Override log level")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ConfigParseError as e:
        raise _fail(e)
    if log_level is not None:
        _config = _config.model_copy(update={"log_level": log_level.value})
    _configure_logging(_config.log_level)


def _with_overrides(cfg: Md2HatenaConfig, **overrides: object) -> Md2HatenaConfig:
    """Apply command-line values on top of the file config, re-validating."""
    changed = {k: v for k, v in overrides.items() if v is not None}
    if not changed:
        return cfg
    return Md2HatenaConfig.model_validate({**cfg.model_dump(), **changed})


def _prompt_cookie() -> str:
    return typer.prompt(
        "Input 'connect.sid' cookie found in the browser's devtools",
        hide_input=True,
        err=True,
    )


def _resolve_images(pending: list[str], cfg: Md2HatenaConfig) -> list[ResolvedImage]:
    """Download and upload every pending image, showing a progress bar.

    Credentials are only needed when some image is not in the cache yet.
    """
    cache = ImageResolutionCache(cfg.image_cache or None)
    if cache.enabled:
        hits = [cache.lookup(url) for url in pending]
        if all(hit is not None for hit in hits):
            logger.info("all %d image(s) found in %s", len(hits), cache.path)
            return [hit for hit in hits if hit is not None]

    fetcher = create_hackmd(cfg.hackmd, prompt=_prompt_cookie)
    # Fail on a bad token before anything is downloaded
    user = fetcher.me()
    logger.info("HackMD user: %s", user.name)
    uploader = create_uploader(cfg.hatena, timeout=cfg.timeout)

    console.print("[green][+][/green] Resolving images (HackMD -> Hatena Fotolife)")
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("images", total=len(pending))
        coordinator = ResolutionCoordinator(
            fetcher,
            uploader,
            cache,
            cfg.download_dir,
            on_progress=lambda url: progress.update(task, advance=1, description=url),
        )
        return coordinator.resolve(pending)


@app.command()
def convert(
    markdown_path: Path = typer.Argument(..., help="Path to Markdown file to convert"),
    download_dir: str | None = typer.Option(
        None, "--download-dir", "-d", help="Directory to save downloaded images"
    ),
    timeout: int | None = typer.Option(
        None, "--timeout", "-t", help="Timeout in seconds for uploading images"
    ),
    no_resolve: bool = typer.Option(
        False, "--no-resolve", "-n", help="Keep original image URLs; no download or upload"
    ),
    image_cache: str | None = typer.Option(
        None, "--image-cache", "-i", help="File mapping image URLs to Fotolife URLs"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write HTML here instead of stdout"
    ),
    codeblock: str | None = typer.Option(
        None, "--codeblock", help="Code block renderer: pure or highlightjs"
    ),
    heading_min: int | None = typer.Option(
        None, "--heading-min", help="Heading level that `#` maps to (1-6)"
    ),
) -> None:
    """Convert a HackMD note to Hatena Blog HTML."""
    try:
        cfg = _with_overrides(
            _get_config(),
            download_dir=download_dir,
            timeout=timeout,
            image_cache=image_cache,
            codeblock=codeblock,
            heading_min=heading_min,
            resolve=False if no_resolve else None,
        )
    except ValidationError as e:
        raise _fail(e)

    try:
        markdown = markdown_path.read_text(encoding="utf-8")
    except OSError as e:
        raise _fail(f"Failed to read markdown file {markdown_path}: {e}")

    try:
        converter = Converter.from_config(cfg)
        converter.parse(markdown)
        if cfg.resolve and converter.unresolved_images:
            converter.resolve_images(_resolve_images(converter.unresolved_images, cfg))
        html = converter.convert()
        if output is not None:
            dest = write_result_html(html, output)
            console.print(f"[green][+][/green] Output HTML: {dest}")
        else:
            typer.echo(html)
    except Md2HatenaError as e:
        raise _fail(e)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    console.print(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default md2hatena.yaml in current directory."""
    target = Path("md2hatena.yaml")
    if target.exists() and not force:
        console.print("[yellow]md2hatena.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE, encoding="utf-8")
    console.print(f"[green]Created[/green] {target}")
