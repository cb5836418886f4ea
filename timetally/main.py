from __future__ import annotations

import logging

import click
from dotenv import load_dotenv

from .commands import AppState, register_commands
from .config import load_config
from .errors import TimeTallyError
from .storage import SaveFile

logger = logging.getLogger("timetally")


class TallyGroup(click.Group):
    """Click group that turns domain errors into exit statuses."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except TimeTallyError as exc:
            logger.debug("Command failed: %s", exc)
            error = click.ClickException(str(exc))
            error.exit_code = exc.exit_code
            raise error from exc


@click.group(cls=TallyGroup)
@click.version_option(package_name="timetally")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Track time spent on categories from the command line."""
    try:
        config = load_config()
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    configure_logging(config.log_level)

    save_file = SaveFile(config.save_file)
    # Loading happens before any command runs, so corrupt data aborts early.
    ctx.obj = AppState(save_file=save_file, store=save_file.load())


@cli.result_callback()
@click.pass_obj
def save_changes(state: AppState, result: object) -> None:
    # Only reached when the command succeeded.
    if not state.dirty:
        return
    state.save_file.save(state.store)
    logger.debug("Changes saved to %s", state.save_file.path)


register_commands(cli)


def configure_logging(level: int = logging.WARNING) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    load_dotenv()
    cli(prog_name="timetally")


if __name__ == "__main__":
    main()
