from pathlib import Path

import click
import toml

from dexranger.config import (
    ALLOWED_LOG_LEVELS,
    ALLOWED_THEMES,
    CONFIG_FILE_PATH,
    DexConfig,
    load_config,
    merge_config_with_cli_args,
)
from dexranger.logging_config import configure_logging


@click.group(invoke_without_command=True)
@click.pass_context
@click.option(
    "--base-url",
    type=str,
    help="Base URL of the creature API (default: https://pokeapi.co/api/v2)",
    default=None,
)
@click.option(
    "--page-size",
    type=click.IntRange(min=1),
    help="Number of creatures loaded per page",
    default=None,
)
@click.option(
    "--theme",
    type=click.Choice(ALLOWED_THEMES, case_sensitive=False),
    help="Theme to use for the UI",
    default=None,
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=str),
    help="Write logs to this file (logging is off by default while the UI runs)",
    default=None,
    envvar="DEXRANGER_LOG_FILE",
)
@click.option(
    "--log-level",
    type=click.Choice(ALLOWED_LOG_LEVELS, case_sensitive=False),
    help="Minimum level of logged records",
    default=None,
)
@click.option(
    "--config",
    type=click.Path(exists=True, readable=True, path_type=str),
    help="Path to configuration file (default: ~/.dexranger.config)",
    default=None,
)
def cli(
    ctx,
    base_url: str | None = None,
    page_size: int | None = None,
    theme: str | None = None,
    log_file: str | None = None,
    log_level: str | None = None,
    config: str | None = None,
):
    """Creature Dex - Browse creatures from the PokeAPI in your terminal."""
    if ctx.invoked_subcommand is None:
        main(base_url, page_size, theme, log_file, log_level, config)


@cli.command()
@click.option(
    "--config",
    type=click.Path(path_type=str),
    help="Path to configuration file (default: ~/.dexranger.config)",
    default=None,
)
def configure(config: str | None = None):
    """Interactive configuration setup for DexRanger"""
    config_path = CONFIG_FILE_PATH
    if config:
        config_path = Path(config)

    click.echo("DexRanger Configuration Setup")
    click.echo("=" * 29)
    click.echo("Press Enter to keep the value shown in brackets.")
    click.echo()

    existing_config = {}
    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                existing_config = toml.load(f)
            click.echo(f"Found existing configuration at {config_path}")
            click.echo()
        except (OSError, toml.TomlDecodeError) as e:
            click.echo(f"Ignoring unreadable configuration at {config_path}: {e}")
            click.echo()

    defaults = DexConfig()
    config = {}

    # API Configuration
    click.echo("API Configuration:")
    click.echo("-" * 18)

    config["base_url"] = click.prompt(
        "API Base URL", default=existing_config.get("base_url", defaults.base_url), type=str
    ).strip()
    config["page_size"] = click.prompt(
        "Page size", default=existing_config.get("page_size", defaults.page_size), type=click.IntRange(min=1)
    )
    config["request_timeout"] = click.prompt(
        "Request timeout (seconds)",
        default=existing_config.get("request_timeout", defaults.request_timeout),
        type=float,
    )
    config["max_retries"] = click.prompt(
        "Retries for failed requests",
        default=existing_config.get("max_retries", defaults.max_retries),
        type=click.IntRange(min=0),
    )
    config["retry_backoff"] = click.prompt(
        "Initial retry delay (seconds, doubled on every retry)",
        default=existing_config.get("retry_backoff", defaults.retry_backoff),
        type=click.FloatRange(min=0),
    )

    # Logging Configuration
    click.echo()
    click.echo("Logging Configuration:")
    click.echo("-" * 22)

    current = existing_config.get("log_file", "")
    log_file = click.prompt(
        "Log file (leave empty to disable logging)", default=current, show_default=bool(current), type=str
    ).strip()
    if log_file:
        config["log_file"] = log_file
    config["log_level"] = click.prompt(
        "Log level",
        default=str(existing_config.get("log_level", defaults.log_level)).upper(),
        type=click.Choice(ALLOWED_LOG_LEVELS, case_sensitive=False),
    ).upper()

    # Theme Configuration
    click.echo()
    click.echo("Theme Configuration:")
    click.echo("-" * 20)

    current_theme = existing_config.get("theme", defaults.theme)

    click.echo("Available themes:")
    for i, theme in enumerate(ALLOWED_THEMES, 1):
        marker = " (current)" if theme == current_theme else ""
        click.echo(f"  {i}. {theme}{marker}")

    theme_choice = click.prompt(
        f"Select theme (1-{len(ALLOWED_THEMES)})",
        default=ALLOWED_THEMES.index(current_theme) + 1 if current_theme in ALLOWED_THEMES else 1,
        type=click.IntRange(1, len(ALLOWED_THEMES)),
    )
    config["theme"] = ALLOWED_THEMES[theme_choice - 1]

    # Validate configuration
    click.echo()
    try:
        DexConfig(**config)
        click.echo("✓ Configuration validated successfully!")
    except ValueError as e:
        click.echo(f"✗ Configuration validation failed: {e}")
        if not click.confirm("Save configuration anyway?"):
            click.echo("Configuration cancelled.")
            return

    # Save configuration
    click.echo()
    try:
        with open(config_path, "w") as f:
            toml.dump(config, f)
        click.echo(f"✓ Configuration saved to {config_path}")
    except OSError as e:
        click.echo(f"✗ Failed to save configuration: {e}")


def main(
    base_url: str | None = None,
    page_size: int | None = None,
    theme: str | None = None,
    log_file: str | None = None,
    log_level: str | None = None,
    config: str | None = None,
):
    """Creature Dex - Browse creatures from the PokeAPI in your terminal."""
    try:
        config_obj = load_config(config)

        # Merge with CLI arguments (CLI takes priority)
        config_obj = merge_config_with_cli_args(
            config_obj,
            base_url=base_url,
            page_size=page_size,
            theme=theme,
            log_file=log_file,
            log_level=log_level,
        )
    except ValueError as e:
        raise click.ClickException(str(e))

    configure_logging(config_obj.log_file, config_obj.log_level)

    # Import here so `configure` runs without loading Textual
    from dexranger.ui.app import DexRanger

    app = DexRanger(
        base_url=config_obj.base_url,
        page_size=config_obj.page_size,
        request_timeout=config_obj.request_timeout,
        max_retries=config_obj.max_retries,
        retry_backoff=config_obj.retry_backoff,
        theme=config_obj.theme,
    )
    app.run()


if __name__ == "__main__":
    cli()
