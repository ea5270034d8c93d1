import os
from itertools import islice

from github import Auth, Github, GithubException
from github.Repository import Repository
from pydantic import BaseModel
from requests.exceptions import RequestException

from chart_owners.exceptions import RemoteError

GH_BASE_URL = os.environ.get("GITHUB_API", "https://api.github.com")

# read-only access, enough for prow to merge on behalf of an OWNERS entry
PULL_PERMISSION = "pull"


class Collaborator(BaseModel, frozen=True):
    login: str


class GithubApi:
    """
    Github client covering the few calls needed to audit and generate
    OWNERS files.

    :param token: auth token for Github
    :param github: prebuilt Github client, mostly useful for testing
    """

    def __init__(
        self,
        token: str,
        base_url: str = GH_BASE_URL,
        timeout: int = 30,
        github: Github | None = None,
    ) -> None:
        # every call is attempted once, PyGithub retries by default
        self._github = github or Github(
            auth=Auth.Token(token), base_url=base_url, timeout=timeout, retry=None
        )
        self._repos: dict[str, Repository] = {}

    def _get_repo(self, org: str, repo: str) -> Repository:
        full_name = f"{org}/{repo}"
        if full_name not in self._repos:
            self._repos[full_name] = self._github.get_repo(full_name)
        return self._repos[full_name]

    def get_collaborators(self, org: str, repo: str) -> list[Collaborator]:
        """
        Lists every collaborator of a repository. PyGithub follows the
        pagination links for us while iterating.
        """
        try:
            return [
                Collaborator(login=c.login)
                for c in self._get_repo(org, repo).get_collaborators()
            ]
        except (GithubException, RequestException) as e:
            raise RemoteError(
                f"Error getting collaborators for {org}/{repo}: {e!s}"
            ) from e

    def add_collaborator(
        self, org: str, repo: str, login: str, permission: str = PULL_PERMISSION
    ) -> None:
        # PyGithub raises for any status outside of [200, 300)
        try:
            self._get_repo(org, repo).add_to_collaborators(login, permission=permission)
        except (GithubException, RequestException) as e:
            raise RemoteError(f"Unable to add {login!r} as collaborator: {e!s}") from e

    def search_users(self, query: str, limit: int = 2) -> list[str]:
        """
        Searches users and returns at most `limit` logins, oldest accounts
        first. Callers only need to tell zero, one and many apart.
        """
        try:
            users = self._github.search_users(query, sort="joined", order="asc")
            return [u.login for u in islice(users, limit)]
        except (GithubException, RequestException) as e:
            raise RemoteError(f"Unable to search users for {query!r}: {e!s}") from e
