"""Entry point: python -m sdrgen

Crawls a Spring Data REST API and writes typed models and services.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from .config import AUTH_METHODS, DEFAULT_TIMEOUT, OAUTH_FLOWS, GeneratorOptions
from .errors import GeneratorError
from .pipeline import run

ENV_PREFIX = "SDRGEN"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--base-url", "-b", required=True, help="Base URL of the Spring Data REST API.")
@click.option(
    "--output-dir",
    "-o",
    default="src/app",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory to write the generated packages to.",
)
@click.option("--model-dir", default="model", show_default=True, help="Package name for models.")
@click.option(
    "--service-dir", default="service", show_default=True, help="Package name for services."
)
@click.option(
    "--auth-method",
    "-a",
    default="NONE",
    show_default=True,
    type=click.Choice(AUTH_METHODS, case_sensitive=False),
    help="How to authenticate against the API.",
)
@click.option("--auth-endpoint", help="Fully qualified authentication endpoint URL.")
@click.option("--username", "-u", help="Username for COOKIE and OAUTH2 authentication.")
@click.option("--password", "-p", help="Password for COOKIE and OAUTH2 authentication.")
@click.option(
    "--oauth-flow",
    default="PASSWORD",
    show_default=True,
    type=click.Choice(OAUTH_FLOWS, case_sensitive=False),
    help="OAuth2 grant to use.",
)
@click.option("--client-id", help="OAuth2 client id.")
@click.option("--client-password", help="OAuth2 client secret.")
@click.option(
    "--no-additional-properties",
    is_flag=True,
    default=False,
    help="Force additionalProperties to false on every schema.",
)
@click.option(
    "--no-trivial-types",
    is_flag=True,
    default=False,
    help="Do not name scalar types; only referenced types keep their title.",
)
@click.option(
    "--timeout",
    default=DEFAULT_TIMEOUT,
    show_default=True,
    type=float,
    help="Per-request timeout in seconds.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every request.")
def cli(verbose: bool, **kwargs) -> None:
    """Generate typed models and services from a Spring Data REST API."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = GeneratorOptions(**kwargs)
    asyncio.run(run(options))


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False, auto_envvar_prefix=ENV_PREFIX)
    except GeneratorError as exc:
        click.echo(f"Error: {exc}", err=True)
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
