from collections.abc import (
    Callable,
    Generator,
)
from pathlib import Path
from unittest.mock import create_autospec

import httpretty as httpretty_module
import pytest

from chart_owners.test.fixtures import Fixtures
from chart_owners.utils.credentials import StaticCredentialProvider
from chart_owners.utils.github_api import (
    Collaborator,
    GithubApi,
)
from chart_owners.utils.raw_github_api import RawGithubApi


@pytest.fixture
def httpretty() -> Generator[httpretty_module, None, None]:
    with httpretty_module.enabled(allow_net_connect=False):
        httpretty_module.reset()
        yield httpretty_module


@pytest.fixture
def fx() -> Fixtures:
    return Fixtures("owners")


@pytest.fixture
def credentials() -> StaticCredentialProvider:
    return StaticCredentialProvider("token")


@pytest.fixture
def github() -> GithubApi:
    return create_autospec(GithubApi, instance=True)


@pytest.fixture
def raw_github() -> RawGithubApi:
    return create_autospec(RawGithubApi, instance=True)


@pytest.fixture
def collaborators() -> Callable[..., list[Collaborator]]:
    def builder(*logins: str) -> list[Collaborator]:
        return [Collaborator(login=login) for login in logins]

    return builder


@pytest.fixture
def owners_tree(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """
    Builds a directory tree out of a {relative path: content} mapping.
    """

    def builder(files: dict[str, str]) -> Path:
        for name, content in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        return tmp_path

    return builder
