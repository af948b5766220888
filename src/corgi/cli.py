from __future__ import annotations

from typing import NoReturn, Optional

import typer
from dotenv import find_dotenv, load_dotenv
from loguru import logger

from .config import Config, ConfigManager
from .env import Environment
from .errors import ConfigError
from .jsonio import JSON_MARSHAL_INDENT, JSON_MARSHAL_PREFIX, dumps_indented

app = typer.Typer(add_completion=False, help="Manage the corgi snippet manager configuration.")


# starts as loguru's default stderr handler, replaced by ours on first use
_log_handler_id: Optional[int] = 0


def _configure_logging(verbose: bool) -> None:
    global _log_handler_id
    if _log_handler_id is not None:
        try:
            logger.remove(_log_handler_id)
        except ValueError:
            # already removed by the host application
            pass
    _log_handler_id = logger.add(
        lambda message: typer.echo(message, err=True, nl=False),
        level="DEBUG" if verbose else "WARNING",
        format="{level}: {message}",
    )


def _fail(exc: Exception) -> NoReturn:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


def _echo_config(config: Config) -> None:
    typer.echo(dumps_indented(config.as_dict(), JSON_MARSHAL_PREFIX, JSON_MARSHAL_INDENT))


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log config bootstrap steps")) -> None:
    load_dotenv(find_dotenv(usecwd=True))
    _configure_logging(verbose)


@app.command()
def show() -> None:
    """Print the current configuration, creating the defaults on first run."""
    try:
        config = ConfigManager().load()
    except (ConfigError, ValueError, OSError) as exc:
        _fail(exc)
    _echo_config(config)


@app.command()
def path() -> None:
    """Print the location of the config file."""
    try:
        config_file = ConfigManager().config_file
    except OSError as exc:
        _fail(exc)
    typer.echo(config_file)


@app.command()
def configure(
    editor: Optional[str] = typer.Option(None, help="Editor used to write snippets"),
    filter_cmd: Optional[str] = typer.Option(None, "--filter-cmd", help="Fuzzy finder used to pick snippets, e.g. fzf or peco"),
    snippets_file: Optional[str] = typer.Option(None, "--snippets-file", help="File the snippets are stored in"),
    snippets_dir: Optional[str] = typer.Option(None, "--snippets-dir", help="Directory for exported snippets"),
) -> None:
    """Update one or more configuration values."""
    env = Environment.from_process()
    if editor is not None:
        # seeds the first-run default so a missing vim does not block the update
        env = env.with_variables(EDITOR=editor)
    manager = ConfigManager(env=env)
    try:
        config = manager.load()
        config = manager.apply_updates(
            config,
            snippets_file=snippets_file,
            snippets_dir=snippets_dir,
            editor=editor,
            filter_cmd=filter_cmd,
        )
    except (ConfigError, ValueError, OSError) as exc:
        _fail(exc)
    _echo_config(config)


if __name__ == "__main__":
    app()
