import shutil
from pathlib import Path

import pytest

from chart_owners import gen_owners
from chart_owners.chart import Maintainer
from chart_owners.exceptions import (
    LoadError,
    RemoteError,
    WriteError,
)
from chart_owners.owners import (
    OwnersRecord,
    read_owners,
)
from chart_owners.test.fixtures import Fixtures
from chart_owners.utils.credentials import StaticCredentialProvider


@pytest.fixture
def resolver(github, raw_github) -> gen_owners.HandleResolver:
    return gen_owners.HandleResolver(github=github, raw_github=raw_github)


@pytest.fixture
def chart_dir(tmp_path: Path) -> Path:
    shutil.copy(Fixtures("chart").path("Chart.yaml"), tmp_path / "Chart.yaml")
    return tmp_path


def test_resolve_existing_login(resolver, github, raw_github) -> None:
    raw_github.profile_exists.return_value = True

    owners = resolver.resolve_all([Maintainer(name="alice", email="a@x.com")])

    assert owners == OwnersRecord(approvers=["alice"], reviewers=["alice"])
    raw_github.profile_exists.assert_called_once_with("alice")
    github.search_users.assert_not_called()


def test_resolve_full_name_single_match(resolver, github, raw_github) -> None:
    github.search_users.return_value = ["alice123"]

    owners = resolver.resolve_all([Maintainer(name="Alice Smith", email="a@x.com")])

    assert owners == OwnersRecord(approvers=["alice123"], reviewers=["alice123"])
    github.search_users.assert_called_once_with("Alice Smith a@x.com")
    raw_github.profile_exists.assert_not_called()


def test_resolve_full_name_multiple_matches(
    resolver, github, caplog: pytest.LogCaptureFixture
) -> None:
    github.search_users.return_value = ["alice1", "alice2"]

    owners = resolver.resolve_all([Maintainer(name="Alice Smith", email="a@x.com")])

    assert owners == OwnersRecord()
    assert "Found multiple names for 'Alice Smith'" in caplog.text


def test_resolve_full_name_no_match(
    resolver, github, caplog: pytest.LogCaptureFixture
) -> None:
    github.search_users.return_value = []

    assert resolver.resolve(Maintainer(name="Alice Smith", email="a@x.com")) is None
    assert "Unable to find a username for 'Alice Smith'" in caplog.text


def test_resolve_search_error(resolver, github) -> None:
    github.search_users.side_effect = RemoteError("rate limited")

    assert resolver.resolve(Maintainer(name="Alice Smith", email="a@x.com")) is None


def test_resolve_unknown_login_falls_back_to_search(
    resolver, github, raw_github
) -> None:
    raw_github.profile_exists.return_value = False
    github.search_users.return_value = ["alice-real"]

    assert resolver.resolve(Maintainer(name="alice", email="a@x.com")) == "alice-real"
    github.search_users.assert_called_once_with("alice a@x.com")


def test_resolve_profile_error_falls_back_to_search(
    resolver, github, raw_github
) -> None:
    raw_github.profile_exists.side_effect = RemoteError("connection refused")
    github.search_users.return_value = ["alice-real"]

    assert resolver.resolve(Maintainer(name="alice")) == "alice-real"
    github.search_users.assert_called_once_with("alice ")


def test_resolve_all_keeps_order(resolver, github, raw_github) -> None:
    raw_github.profile_exists.return_value = True
    github.search_users.side_effect = [["jane"], []]

    owners = resolver.resolve_all(
        [
            Maintainer(name="bob"),
            Maintainer(name="Jane Doe", email="jane@example.com"),
            Maintainer(name="Nobody Known", email="n@example.com"),
            Maintainer(name="alice"),
        ]
    )

    assert owners.approvers == ["bob", "jane", "alice"]
    assert owners.reviewers == ["bob", "jane", "alice"]


def test_expand_aliases() -> None:
    owners = OwnersRecord(approvers=["bitnami-bot"], reviewers=["someone"])

    gen_owners.expand_aliases(owners)

    assert sorted(owners.approvers) == sorted(
        ["bitnami-bot", "prydonius", "tompizmor", "sameersbn"]
    )
    assert owners.reviewers == ["someone"]


def test_expand_aliases_once_per_list() -> None:
    owners = OwnersRecord(
        approvers=["bitnami-bot", "prydonius", "bitnami-bot"],
        reviewers=["bitnami-bot"],
    )

    gen_owners.expand_aliases(owners)
    gen_owners.expand_aliases(owners)

    assert owners.approvers == [
        "bitnami-bot",
        "prydonius",
        "bitnami-bot",
        "tompizmor",
        "sameersbn",
    ]
    assert owners.reviewers == ["bitnami-bot", "prydonius", "tompizmor", "sameersbn"]


def test_expand_aliases_custom_table() -> None:
    owners = OwnersRecord(approvers=["robot"])
    gen_owners.expand_aliases(owners, aliases={"robot": ["human"]})
    assert owners.approvers == ["robot", "human"]


def test_update_helmignore_appends(tmp_path: Path) -> None:
    helmignore = tmp_path / ".helmignore"
    helmignore.write_text(".git/\n", encoding="utf-8")

    gen_owners.update_helmignore(str(tmp_path))

    assert helmignore.read_text(encoding="utf-8") == (
        ".git/\n# OWNERS file for Kubernetes\nOWNERS\n"
    )


def test_write_owners_error(tmp_path: Path) -> None:
    with pytest.raises(WriteError):
        gen_owners.write_owners(str(tmp_path / "missing-dir"), "approvers: []\n")


def test_run(
    chart_dir: Path,
    credentials: StaticCredentialProvider,
    github,
    raw_github,
    capsys: pytest.CaptureFixture,
) -> None:
    raw_github.profile_exists.return_value = True
    github.search_users.return_value = ["janedoe"]
    params = gen_owners.GenOwnersParams(
        chart_file=str(chart_dir / "Chart.yaml"),
        write_owners=True,
        update_helmignore=True,
        expand_bot_aliases=True,
    )

    owners = gen_owners.run(params, credentials, github=github, raw_github=raw_github)

    expected = [
        "bitnami-bot",
        "janedoe",
        "prydonius",
        "tompizmor",
        "sameersbn",
    ]
    assert owners == OwnersRecord(approvers=expected, reviewers=expected)
    assert read_owners(str(chart_dir / "OWNERS")) == owners
    assert (chart_dir / ".helmignore").read_text(encoding="utf-8") == (
        "# OWNERS file for Kubernetes\nOWNERS\n"
    )
    out = capsys.readouterr().out
    assert out.startswith("OWNERS file content:\napprovers:\n- bitnami-bot\n")


def test_run_print_only(
    chart_dir: Path,
    credentials: StaticCredentialProvider,
    github,
    raw_github,
) -> None:
    raw_github.profile_exists.return_value = True
    github.search_users.return_value = []
    params = gen_owners.GenOwnersParams(chart_file=str(chart_dir / "Chart.yaml"))

    owners = gen_owners.run(params, credentials, github=github, raw_github=raw_github)

    assert owners == OwnersRecord(
        approvers=["bitnami-bot"], reviewers=["bitnami-bot"]
    )
    assert not (chart_dir / "OWNERS").exists()
    assert not (chart_dir / ".helmignore").exists()


def test_run_missing_chart(
    tmp_path: Path, credentials: StaticCredentialProvider, github, raw_github
) -> None:
    params = gen_owners.GenOwnersParams(chart_file=str(tmp_path / "Chart.yaml"))

    with pytest.raises(LoadError):
        gen_owners.run(params, credentials, github=github, raw_github=raw_github)
