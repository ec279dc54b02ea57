"""CLI entrypoints for rendering and previewing the blog."""

import webbrowser
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from .config import SiteConfig, load_config
from .content import FrontMatterError, load_post
from .document import DocumentError, load_stylesheet
from .pages import write_post_pages
from .post import Post
from .preview_server import make_request_handler, serve
from .templates import TemplateError
from .typography import Typography, TypographyError, get_typography

console = Console()
app = typer.Typer(help="Badness 10k blog theme tooling.")


class BuildEnvironment(str, Enum):
    """Build flavours; production inlines the compiled stylesheet."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


ConfigPathOption = Annotated[
    str,
    typer.Option("--config", "-c", help="Path to badness.yml or the directory holding it."),
]
EnvironmentOption = Annotated[
    BuildEnvironment | None,
    typer.Option("--env", "-e", help="Override the configured build environment."),
]


@app.command()
def render(
    posts: Annotated[
        list[Path],
        typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Markdown posts to render."),
    ],
    config_path: ConfigPathOption = ".",
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", "-o", help="Directory to write rendered pages into."),
    ] = None,
    env: EnvironmentOption = None,
) -> None:
    """Render Markdown posts to complete HTML documents."""
    site = _load(config_path, env)
    if output_dir is not None:
        site.output_dir = output_dir.resolve()

    typography = _typography(site)
    try:
        stylesheet = load_stylesheet(site)
    except DocumentError as exc:
        console.print(f"[bold red]Cannot render[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    loaded: list[Post] = []
    for path in posts:
        try:
            loaded.append(load_post(path))
        except FrontMatterError as exc:
            console.print(f"[bold red]Invalid post[/]: {escape(str(exc))}")
            raise typer.Exit(code=1) from exc

    try:
        written = write_post_pages(loaded, site, typography, stylesheet=stylesheet)
    except (TemplateError, ValueError) as exc:
        console.print(f"[bold red]Cannot render[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    mode = BuildEnvironment.PRODUCTION if site.production else BuildEnvironment.DEVELOPMENT
    console.print(
        "[bold green]Rendered[/]: "
        f"{len(written)} page(s) into {_display_path(site.output_dir)} ({mode.value} build)"
    )
    for path in written:
        console.print(f"- {_display_path(path)}")


@app.command()
def styles(config_path: ConfigPathOption = ".") -> None:
    """Print the typography stylesheet."""
    site = _load(config_path, None)
    typer.echo(_typography(site).create_styles())


@app.command()
def preview(
    config_path: ConfigPathOption = ".",
    directory: Annotated[
        Path | None,
        typer.Option("--directory", "-d", help="Directory to serve (defaults to the output directory)."),
    ] = None,
    host: Annotated[
        str,
        typer.Option("--host", help="Host interface to bind the preview server."),
    ] = "127.0.0.1",
    port: Annotated[
        int,
        typer.Option("--port", "-p", help="Port for the preview server."),
    ] = 8000,
    open_browser: Annotated[
        bool,
        typer.Option(
            "--open-browser/--no-open-browser",
            help="Automatically open the site in a browser after starting.",
        ),
    ] = False,
    env: EnvironmentOption = None,
) -> None:
    """Serve rendered pages; development mode hot-reloads typography."""
    site = _load(config_path, env)
    if port < 0 or port > 65535:
        raise typer.BadParameter("Port must be between 0 and 65535.")

    root = (directory or site.output_dir).resolve()
    if not root.exists():
        console.print(f"[bold red]Site output not found[/]: {root}")
        console.print("Run 'badness render' to generate pages before previewing.")
        raise typer.Exit(code=1)

    def fresh_typography() -> Typography:
        # Re-read the options on every page so edits apply on reload.
        return Typography(load_config(config_path).typography)

    factory = None if site.production else fresh_typography
    handler = make_request_handler(root, typography_factory=factory)

    try:
        with serve(host, port, handler) as server:
            bound_port = int(server.server_address[1])
            url_host = "127.0.0.1" if host in {"0.0.0.0", ""} else host
            site_url = f"http://{url_host}:{bound_port}/"
            console.print(
                f"[bold green]Preview server[/]: serving {root} at {site_url} "
                "(press Ctrl+C to stop)"
            )
            if factory is not None:
                console.print("[bold blue]Typography[/]: hot reload enabled (development build)")
            if open_browser:
                webbrowser.open(site_url)
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                console.print("\n[bold yellow]Stopping preview server...[/]")
    except OSError as exc:
        console.print(f"[bold red]Failed to start preview server[/]: {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def _load(path: str, env: BuildEnvironment | None) -> SiteConfig:
    try:
        site = load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    if env is not None:
        site.production = env is BuildEnvironment.PRODUCTION
    return site


def _typography(site: SiteConfig) -> Typography:
    try:
        return get_typography(site.typography, production=site.production)
    except TypographyError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()
