"""
Generates an OWNERS file out of the maintainers listed in a chart's
Chart.yaml.
"""

import logging
import os
from collections.abc import (
    Iterable,
    Mapping,
    Sequence,
)

import click
from pydantic import BaseModel

from chart_owners.chart import (
    Maintainer,
    read_maintainers,
)
from chart_owners.exceptions import (
    RemoteError,
    WriteError,
)
from chart_owners.owners import (
    OWNERS_FILE,
    OwnersRecord,
    dump_owners,
)
from chart_owners.utils.credentials import CredentialProvider
from chart_owners.utils.github_api import GithubApi
from chart_owners.utils.raw_github_api import RawGithubApi

HELMIGNORE_FILE = ".helmignore"
HELMIGNORE_ANNOTATION = "# OWNERS file for Kubernetes\nOWNERS\n"

# bots listed as maintainers and the people standing behind them
BOT_ALIASES: Mapping[str, Sequence[str]] = {
    "bitnami-bot": ["prydonius", "tompizmor", "sameersbn"],
}


class GenOwnersParams(BaseModel, frozen=True):
    chart_file: str = "Chart.yaml"
    write_owners: bool = False
    update_helmignore: bool = False
    expand_bot_aliases: bool = False


class HandleResolver:
    """
    Maps chart maintainers to GitHub logins.

    A name without whitespace is probably already a login, which is
    confirmed by fetching the profile page. Anything else is looked up
    with a user search on name and email, and only a unique match is
    accepted.
    """

    def __init__(self, github: GithubApi, raw_github: RawGithubApi) -> None:
        self._github = github
        self._raw_github = raw_github

    def resolve(self, maintainer: Maintainer) -> str | None:
        if not maintainer.has_whitespace:
            try:
                if self._raw_github.profile_exists(maintainer.name):
                    return maintainer.name
                logging.warning(
                    f"No GitHub profile for {maintainer.name!r}, trying a search"
                )
            except RemoteError as e:
                logging.warning(f"{e!s}, trying a search")
        return self.lookup(maintainer)

    def lookup(self, maintainer: Maintainer) -> str | None:
        name = maintainer.name
        query = f"{name} {maintainer.email or ''}"
        try:
            logins = self._github.search_users(query)
        except RemoteError as e:
            logging.error(f"Unable to search for name {name!r}: {e!s}")
            return None

        if len(logins) == 1:
            logging.info(f"Found github id {logins[0]!r} for name {name!r}")
            return logins[0]

        if len(logins) > 1:
            logging.warning(
                f"Found multiple names for {name!r}, "
                "please try to manually find the names"
            )
        else:
            logging.warning(f"Unable to find a username for {name!r}")
        return None

    def resolve_all(self, maintainers: Iterable[Maintainer]) -> OwnersRecord:
        owners = OwnersRecord()
        for maintainer in maintainers:
            login = self.resolve(maintainer)
            if login:
                owners.approvers.append(login)
                owners.reviewers.append(login)
        return owners


def _expand(handles: list[str], aliases: Mapping[str, Sequence[str]]) -> None:
    # once per alias found, no matter how often it is listed
    for alias in [a for a in aliases if a in handles]:
        for handle in aliases[alias]:
            if handle not in handles:
                handles.append(handle)


def expand_aliases(
    owners: OwnersRecord,
    aliases: Mapping[str, Sequence[str]] = BOT_ALIASES,
) -> OwnersRecord:
    """
    Appends the people behind a bot to the list where the bot shows up.
    The bot itself stays in the list.
    """
    _expand(owners.approvers, aliases)
    _expand(owners.reviewers, aliases)
    return owners


def write_owners(chart_dir: str, content: str) -> str:
    path = os.path.join(chart_dir, OWNERS_FILE)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise WriteError(path, e) from e
    return path


def update_helmignore(chart_dir: str) -> str:
    path = os.path.join(chart_dir, HELMIGNORE_FILE)
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(HELMIGNORE_ANNOTATION)
    except OSError as e:
        raise WriteError(path, e) from e
    return path


def run(
    params: GenOwnersParams,
    credentials: CredentialProvider,
    github: GithubApi | None = None,
    raw_github: RawGithubApi | None = None,
) -> OwnersRecord:
    token = credentials.read_token()

    maintainers = read_maintainers(params.chart_file)

    resolver = HandleResolver(
        github=github or GithubApi(token),
        raw_github=raw_github or RawGithubApi(),
    )
    owners = resolver.resolve_all(maintainers)

    if params.expand_bot_aliases:
        expand_aliases(owners)

    content = dump_owners(owners)
    click.echo("OWNERS file content:")
    click.echo(content)

    chart_dir = os.path.dirname(params.chart_file)

    if params.write_owners:
        logging.info("Writing owners file")
        write_owners(chart_dir, content)

    if params.update_helmignore:
        logging.info(f"Appending {OWNERS_FILE} to {HELMIGNORE_FILE}")
        update_helmignore(chart_dir)

    return owners
