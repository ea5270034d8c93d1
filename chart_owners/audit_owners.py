"""
Reports GitHub logins used in OWNERS files that are not collaborators of
the repository, and optionally adds them as pull-only collaborators.

Prow only needs an OWNERS entry to have read access to a repository for
merges to work.
"""

import logging
from collections.abc import Iterable

import click
from pydantic import BaseModel

from chart_owners.exceptions import RemoteError
from chart_owners.owners import collect_handles
from chart_owners.utils.credentials import CredentialProvider
from chart_owners.utils.github_api import (
    PULL_PERMISSION,
    Collaborator,
    GithubApi,
)

DEFAULT_ORG = "kubernetes"
DEFAULT_REPO = "charts"

REPORT_HEADER = "GitHub Logins as a list:"
REPORT_FOOTER = (
    "For more details on having folks become part of the k8s GitHub org see:\n"
    "https://github.com/kubernetes/community/blob/master/"
    "community-membership.md#requirements-for-outside-collaborators"
)


class AuditOwnersParams(BaseModel, frozen=True):
    repo_root: str = "."
    org: str = DEFAULT_ORG
    repo: str = DEFAULT_REPO
    bullet_list: bool = False
    add_collaborators: bool = False
    dry_run: bool = False


def find_missing(
    handles: Iterable[str], collaborators: Iterable[Collaborator]
) -> list[str]:
    # logins are compared as-is, GitHub casing differences are reported
    logins = {c.login for c in collaborators}
    missing = sorted(h for h in handles if h not in logins)
    for handle in missing:
        logging.info(f"GitHub Login {handle!r} found in OWNERS but not a collaborator")
    return missing


def render_report(missing: Iterable[str]) -> str:
    lines = ["", REPORT_HEADER]
    lines.extend(f"* {handle}" for handle in missing)
    lines.extend(["", REPORT_FOOTER])
    return "\n".join(lines)


def add_missing_collaborators(
    github: GithubApi,
    org: str,
    repo: str,
    missing: Iterable[str],
    dry_run: bool = False,
) -> list[str]:
    """
    Adds each handle as a pull-only collaborator of org/repo.

    A failure is logged and the next handle is processed anyway.

    :return: the handles that could not be added
    """
    failed = []
    for handle in missing:
        logging.info(["add_collaborator", f"{org}/{repo}", handle, PULL_PERMISSION])
        if dry_run:
            continue
        try:
            github.add_collaborator(org, repo, handle, permission=PULL_PERMISSION)
        except RemoteError as e:
            logging.error(str(e))
            failed.append(handle)
    return failed


def run(
    params: AuditOwnersParams,
    credentials: CredentialProvider,
    github: GithubApi | None = None,
) -> list[str]:
    # the token is required up front, the API is rate limited without one
    token = credentials.read_token()

    handles = collect_handles(params.repo_root)
    logging.debug(f"found {len(handles)} handles in OWNERS files")

    github = github or GithubApi(token)
    collaborators = github.get_collaborators(params.org, params.repo)

    missing = find_missing(handles, collaborators)

    if params.bullet_list:
        click.echo(render_report(missing))

    if params.add_collaborators:
        failed = add_missing_collaborators(
            github, params.org, params.repo, missing, dry_run=params.dry_run
        )
        if failed:
            logging.warning(
                f"{len(failed)} of {len(missing)} collaborators could not be added"
            )

    return missing
