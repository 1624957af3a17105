import logging
import re
from urllib.parse import urljoin

import requests

from image_freshness.errors import RegistryConnectionError, TagListingError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0
CHALLENGE_PARAM_PATTERN = re.compile(r'(\w+)="([^"]*)"')


class RegistryClient:
    """
    Docker Registry HTTP API v2 client.

    Creating the client pings the registry, so an unreachable registry fails
    here rather than on the first tag listing. Without credentials the client
    negotiates anonymous pull tokens when the registry asks for them.
    """

    def __init__(self, base_url: str, username: str = "", password: str = "",
                 timeout: float = REQUEST_TIMEOUT):
        self.base_url: str = base_url.rstrip("/")
        self.username: str = username
        self.password: str = password
        self.timeout: float = timeout
        self.session: requests.Session = requests.Session()
        self._tokens: dict[str, str] = {}
        self.ping()

    def __repr__(self) -> str:
        return f"RegistryClient({self.base_url!r})"

    def ping(self) -> None:
        url = f"{self.base_url}/v2/"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise RegistryConnectionError(self.base_url, str(e)) from e

        if response.status_code == 200:
            return
        # an auth challenge still means the registry is there
        if response.status_code == 401 and response.headers.get("WWW-Authenticate"):
            return
        raise RegistryConnectionError(self.base_url, f"unexpected status code {response.status_code}")

    def list_tags(self, repository_path: str) -> list[str]:
        url: str | None = f"{self.base_url}/v2/{repository_path}/tags/list"
        tags: list[str] = []
        try:
            while url:
                response = self._get(url, repository_path)
                response.raise_for_status()
                tags.extend(response.json().get("tags") or [])
                url = self._next_page(response)
        except (requests.RequestException, ValueError) as e:
            raise TagListingError(repository_path, str(e)) from e
        logger.debug(f"Found {len(tags)} tags for {repository_path} on {self.base_url}")
        return tags

    def _get(self, url: str, repository_path: str) -> requests.Response:
        scope = f"repository:{repository_path}:pull"
        response = self.session.get(url, headers=self._auth_headers(self._tokens.get(scope)), timeout=self.timeout)
        if response.status_code != 401:
            return response

        challenge = response.headers.get("WWW-Authenticate", "")
        if not challenge.lower().startswith("bearer"):
            return response

        # a challenge means any cached token is stale
        self._tokens.pop(scope, None)
        token = self._fetch_token(challenge, repository_path, scope)
        self._tokens[scope] = token
        return self.session.get(url, headers=self._auth_headers(token), timeout=self.timeout)

    def _fetch_token(self, challenge: str, repository_path: str, scope: str) -> str:
        params = dict(CHALLENGE_PARAM_PATTERN.findall(challenge))
        realm = params.pop("realm", None)
        if not realm:
            raise TagListingError(repository_path, f"no realm in auth challenge {challenge!r}")
        params.setdefault("scope", scope)

        auth = (self.username, self.password) if self.username else None
        response = self.session.get(realm, params=params, auth=auth, timeout=self.timeout)
        response.raise_for_status()
        body = response.json()
        token = body.get("token") or body.get("access_token")
        if not token:
            raise TagListingError(repository_path, f"no token returned by {realm}")
        return token

    def _next_page(self, response: requests.Response) -> str | None:
        next_url = response.links.get("next", {}).get("url")
        if not next_url:
            return None
        return urljoin(self.base_url + "/", next_url)

    @staticmethod
    def _auth_headers(token: str | None) -> dict[str, str]:
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}
