import logging
import os
import sys
import traceback
from collections.abc import Callable
from typing import Any

import click
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from chart_owners.exceptions import ChartOwnersError
from chart_owners.status import ExitCodes
from chart_owners.utils import config
from chart_owners.utils.credentials import init_credential_provider
from chart_owners.utils.environment import init_env

CHART_OWNERS_CONFIG = "CHART_OWNERS_CONFIG"


def init_sentry() -> None:
    if not os.getenv("SENTRY_DSN"):
        return

    match os.environ.get("SENTRY_EVENT_LEVEL", "CRITICAL").upper():
        case "CRITICAL":
            sentry_event_level = logging.CRITICAL
        case "ERROR":
            sentry_event_level = logging.ERROR
        case _:
            raise ValueError(
                "Invalid value for SENTRY_EVENT_LEVEL. Must be CRITICAL or ERROR."
            )

    sentry_sdk.init(
        os.environ["SENTRY_DSN"],
        integrations=[
            LoggingIntegration(event_level=sentry_event_level),
        ],
    )


def config_file(function: Callable) -> Callable:
    help_msg = "Path to an optional configuration file in toml format."
    function = click.option(
        "--config",
        "configfile",
        default=lambda: os.environ.get(CHART_OWNERS_CONFIG),
        help=help_msg,
    )(function)
    return function


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to INFO.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def dry_run(function: Callable) -> Callable:
    help_msg = (
        "If `true`, it will only print the planned actions "
        "that would be performed, without executing them."
    )

    function = click.option("--dry-run/--no-dry-run", default=False, help=help_msg)(
        function
    )
    return function


def run_command(func: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    """
    Single exit point of both commands: known failures print their message,
    anything else prints a traceback.
    """
    try:
        func(*args, **kwargs)
    except (ChartOwnersError, config.ConfigNotFound) as e:
        sys.stderr.write(f"Error: {e!s}\n")
        sys.exit(ExitCodes.ERROR)
    except Exception:
        traceback.print_exc(file=sys.stderr)
        sys.exit(ExitCodes.ERROR)
    sys.exit(ExitCodes.SUCCESS)


def _load_settings(configfile: str | None) -> dict[str, Any] | None:
    if not configfile:
        return None
    return config.load(configfile)


@click.command()
@config_file
@log_level
@dry_run
@click.option(
    "-r",
    "--repo-root",
    default=".",
    show_default=True,
    help="The location of the repo to start inspecting.",
)
@click.option(
    "-b",
    "--bullet-list",
    is_flag=True,
    default=False,
    help="Create a bulleted list of GitHub names found for easy copy/paste.",
)
@click.option(
    "-a",
    "--add-collaborators",
    is_flag=True,
    default=False,
    help="Add missing collaborators to the repo with pull only access. "
    "Requires admin access for the token being used.",
)
@click.option("--org", help="GitHub organization owning the repository.")
@click.option("--repo", help="GitHub repository name.")
def audit_owners(
    configfile: str | None,
    log_level: str | None,
    dry_run: bool,
    repo_root: str,
    bullet_list: bool,
    add_collaborators: bool,
    org: str | None,
    repo: str | None,
) -> None:
    """Find GitHub logins used in OWNERS files that are not collaborators."""
    init_sentry()
    init_env(log_level=log_level, dry_run=dry_run)

    import chart_owners.audit_owners

    def _run() -> None:
        settings = _load_settings(configfile)
        params = chart_owners.audit_owners.AuditOwnersParams(
            repo_root=repo_root,
            org=org
            or config.read_optional(
                settings,
                {"path": "github", "field": "org"},
                chart_owners.audit_owners.DEFAULT_ORG,
            ),
            repo=repo
            or config.read_optional(
                settings,
                {"path": "github", "field": "repo"},
                chart_owners.audit_owners.DEFAULT_REPO,
            ),
            bullet_list=bullet_list,
            add_collaborators=add_collaborators,
            dry_run=dry_run,
        )
        chart_owners.audit_owners.run(params, init_credential_provider(settings))

    run_command(_run)


@click.command()
@config_file
@log_level
@click.option(
    "-c",
    "--chart",
    "chart_file",
    default="Chart.yaml",
    show_default=True,
    help="Location of the Chart.yaml file.",
)
@click.option(
    "-o",
    "--write-owners",
    is_flag=True,
    default=False,
    help="Write the OWNERS file next to the Chart.yaml file.",
)
@click.option(
    "-i",
    "--update-helmignore",
    is_flag=True,
    default=False,
    help="Append the OWNERS file to .helmignore.",
)
@click.option(
    "-b",
    "--expand-bot-aliases",
    is_flag=True,
    default=False,
    help="Add the people behind bitnami-bot when it is a maintainer.",
)
def gen_owners(
    configfile: str | None,
    log_level: str | None,
    chart_file: str,
    write_owners: bool,
    update_helmignore: bool,
    expand_bot_aliases: bool,
) -> None:
    """Generate an OWNERS file from the maintainers of a Chart.yaml file."""
    init_sentry()
    init_env(log_level=log_level)

    import chart_owners.gen_owners

    def _run() -> None:
        settings = _load_settings(configfile)
        params = chart_owners.gen_owners.GenOwnersParams(
            chart_file=chart_file,
            write_owners=write_owners,
            update_helmignore=update_helmignore,
            expand_bot_aliases=expand_bot_aliases,
        )
        chart_owners.gen_owners.run(params, init_credential_provider(settings))

    run_command(_run)
