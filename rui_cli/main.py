import importlib
import sys
from pathlib import Path
from typing import Callable, Optional

import typer
import yaml

from rui import Application, Theme
from rui.config import get_config, setup_logging

# Create the main Typer application object
app = typer.Typer(
    name="rui",
    help="Runs rui applications in a browser or a desktop window.",
    add_completion=False,
)


def load_factory(target: str) -> Callable:
    """
    Import ``MODULE:FACTORY`` (e.g. ``myapp.main:create_root``).
    The current directory is searched first so local modules are found.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        print(f"❌ Error: expected MODULE:FACTORY, got '{target}'")
        raise typer.Exit(code=2)

    if str(Path.cwd()) not in sys.path:
        sys.path.insert(0, str(Path.cwd()))
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        print(f"❌ Error: unable to import '{module_name}': {e}")
        raise typer.Exit(code=1)

    factory = getattr(module, attr, None)
    if not callable(factory):
        print(f"❌ Error: '{attr}' in '{module_name}' is not callable")
        raise typer.Exit(code=1)
    return factory


def _application(target: str, theme_file: Optional[Path]) -> Application:
    theme = None
    if theme_file is not None:
        try:
            theme = Theme.load(theme_file)
        except (OSError, ValueError) as e:
            print(f"❌ Error: unable to load the theme '{theme_file}': {e}")
            raise typer.Exit(code=1)
    return Application(load_factory(target), config=get_config(), theme=theme)


# --- CLI Commands ---

@app.command()
def serve(
    target: str = typer.Argument(..., help="The root view factory, MODULE:FACTORY."),
    host: Optional[str] = typer.Option(None, help="Interface to listen on."),
    port: Optional[int] = typer.Option(None, help="WebSocket port of the runtime."),
    http_port: Optional[int] = typer.Option(None, help="HTTP port of the page."),
    theme: Optional[Path] = typer.Option(None, help="A YAML theme file."),
    debug: bool = typer.Option(False, help="Log every script and message."),
):
    """
    Serves the application to browsers: every connection gets its own session.
    """
    config = get_config()
    if debug:
        config.set("debug", True)
    setup_logging("DEBUG" if debug else None)

    application = _application(target, theme)
    raise typer.Exit(code=application.serve(host, http_port, port))


@app.command()
def window(
    target: str = typer.Argument(..., help="The root view factory, MODULE:FACTORY."),
    theme: Optional[Path] = typer.Option(None, help="A YAML theme file."),
    debug: bool = typer.Option(False, help="Open the developer tools and log every script."),
):
    """
    Runs the application in a desktop window.
    """
    config = get_config()
    if debug:
        config.set("debug", True)
    setup_logging("DEBUG" if debug else None)

    application = _application(target, theme)
    raise typer.Exit(code=application.run_window(debug))


@app.command(name="config")
def show_config():
    """
    Prints the effective configuration and where it was loaded from.
    """
    config = get_config()
    source = config.source or "defaults"
    if config.resolved_config_path is not None and config.source == "file":
        source = str(config.resolved_config_path)
    print(f"# source: {source}")
    print(yaml.safe_dump(config.as_dict(), sort_keys=True, default_flow_style=False), end="")


if __name__ == "__main__":
    app()
