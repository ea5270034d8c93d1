import os

import requests

from chart_owners.exceptions import RemoteError


class RawGithubApi:
    """
    Plain HTTP interface to github.com

    The profile page is not part of the REST API, so checking whether a
    login exists is done with a direct page fetch.
    """

    BASE_URL = os.environ.get("GITHUB_URL", "https://github.com")

    def __init__(self, base_url: str | None = None, timeout: int = 60) -> None:
        self.base_url = (base_url or self.BASE_URL).rstrip("/")
        self.timeout = timeout

    def profile_url(self, login: str) -> str:
        return f"{self.base_url}/{login}"

    def profile_exists(self, login: str) -> bool:
        try:
            res = requests.get(self.profile_url(login), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteError(f"Problem fetching {login}: {e!s}") from e
        # only the status matters
        res.close()
        return res.status_code == 200
