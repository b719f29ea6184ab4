"""bakebot command line."""

import click

from cli.commands import (
    clarifications,
    message,
    order_id,
    predict,
    preorder,
    reminders,
    status,
    wholesale,
)
from cli.config import load_config
from cli.logging_config import setup_logging


@click.group()
@click.version_option(version="0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
def cli(verbose: bool, json_logs: bool):
    """Bakery supply assistant - inventory updates from chat messages."""
    try:
        config = load_config()
        level = config.logging.level
        json_mode = config.logging.json_mode
        log_file = config.paths.log_file
    except ValueError:
        # get_components reports config problems with context
        level, json_mode, log_file = "INFO", False, None
    setup_logging(
        json_mode=json_logs or json_mode,
        level="DEBUG" if verbose else level,
        log_file=log_file,
    )


cli.add_command(message)
cli.add_command(status)
cli.add_command(predict)
cli.add_command(clarifications)
cli.add_command(reminders)
cli.add_command(order_id)
cli.add_command(preorder)
cli.add_command(wholesale)


if __name__ == "__main__":
    cli()
