"""
Jenkins HTTP Client Adapter - Talks to the Jenkins REST/form API.

Implements the four credential capabilities plus the connectivity probe
over httpx. Building a client performs no network I/O; the first request
does.
"""

import logging
import threading
from typing import Dict, Any, Optional
from urllib.parse import quote

import httpx

from jenkins_broker.domain.config import JenkinsConfig
from jenkins_broker.ports.jenkins_port import (
    JenkinsPort,
    JenkinsAPIError,
    JenkinsNotFoundError,
    JenkinsUserRecord,
    JenkinsAPIToken,
)

logger = logging.getLogger(__name__)

API_TOKEN_DESCRIPTOR = "/me/descriptorByName/jenkins.security.ApiTokenProperty"


class JenkinsClient(JenkinsPort):
    """
    Jenkins API client.

    Authenticates every call with the configured admin user's basic auth.
    CSRF crumbs are fetched once and reused until Jenkins rejects one; the
    httpx cookie jar keeps the session the crumb is bound to.
    """

    def __init__(
        self,
        url: str,
        username: str,
        password: str,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Jenkins client.

        Args:
            url: Jenkins base URL
            username: Admin username
            password: Admin password or API token
            timeout: Per-request timeout in seconds (None = no timeout)
            transport: httpx transport override (tests)
        """
        self._url = url.rstrip("/")
        self._username = username
        self._client = httpx.Client(
            base_url=self._url,
            auth=(username, password),
            timeout=timeout,
            transport=transport,
        )
        # None = not fetched yet, {} = crumbs disabled on this Jenkins
        self._crumb_headers: Optional[Dict[str, str]] = None
        self._crumb_lock = threading.Lock()

    @classmethod
    def from_config(
        cls,
        config: JenkinsConfig,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "JenkinsClient":
        """
        Build a client from stored configuration.

        Raises:
            ConfigurationMissingError: username, password or url not set
        """
        config.require_complete()
        return cls(
            url=config.url,
            username=config.username,
            password=config.password,
            timeout=timeout,
            transport=transport,
        )

    @property
    def url(self) -> str:
        return self._url

    def close(self):
        """Release pooled connections."""
        self._client.close()

    def init(self) -> None:
        """Probe Jenkins with an authenticated GET /api/json."""
        self._request("GET", "/api/json", "connecting to")

    def create_user(
        self,
        username: str,
        password: str,
        fullname: str,
        email: str,
    ) -> JenkinsUserRecord:
        """
        Create a user through the security realm's admin signup form.

        Jenkins redirects only when the account was created. A taken name
        or a rejected field re-renders the form with 200, so anything other
        than a redirect is a failed creation.
        """
        response = self._request(
            "POST",
            "/securityRealm/createAccountByAdmin",
            f"creating user {username}",
            data={
                "username": username,
                "password1": password,
                "password2": password,
                "fullname": fullname,
                "email": email,
            },
        )

        if not 300 <= response.status_code < 400:
            raise JenkinsAPIError(
                f"creating user {username} Jenkins failed: signup form rejected (HTTP {response.status_code})",
                response.status_code,
            )

        try:
            response = self._request(
                "GET",
                f"/user/{quote(username, safe='')}/api/json",
                f"reading user {username}",
            )
        except JenkinsNotFoundError as e:
            raise JenkinsAPIError(f"Jenkins did not create user {username}") from e

        return self._parse_user(response.json(), username, fullname, email)

    def delete_user(self, username: str) -> None:
        """Delete a user account."""
        self._request(
            "POST",
            f"/user/{quote(username, safe='')}/doDelete",
            f"deleting user {username}",
        )

    def generate_api_token(self, name: str) -> JenkinsAPIToken:
        """Generate a named API token for the authenticated user."""
        response = self._request(
            "POST",
            f"{API_TOKEN_DESCRIPTOR}/generateNewToken",
            f"generating token {name}",
            data={"newTokenName": name},
        )

        body = response.json()
        if body.get("status") != "ok":
            raise JenkinsAPIError(f"generating token {name} failed: {body.get('message', body.get('status'))}")

        data = body.get("data") or {}
        if not data.get("tokenValue") or not data.get("tokenUuid"):
            raise JenkinsAPIError(f"generating token {name} failed: incomplete response")

        return JenkinsAPIToken(
            value=data["tokenValue"],
            uuid=data["tokenUuid"],
            name=data.get("tokenName", name),
        )

    def revoke_api_token(self, token_id: str) -> None:
        """Revoke an API token of the authenticated user."""
        self._request(
            "POST",
            f"{API_TOKEN_DESCRIPTOR}/revoke",
            f"revoking token {token_id}",
            data={"tokenUuid": token_id},
        )

    def _request(self, method: str, path: str, action: str, **kwargs) -> httpx.Response:
        """
        Send a request and map failures onto JenkinsAPIError.

        Crumbs are bound to a web session that can expire. A POST rejected
        with 403 while carrying a crumb is retried once with a fresh crumb.
        """
        headers = self._get_crumb_headers() if method == "POST" else {}
        response = self._send(method, path, action, headers, **kwargs)

        if method == "POST" and response.status_code == 403 and headers:
            logger.info("Jenkins rejected the CSRF crumb while %s; fetching a new one", action)
            self._discard_crumb(headers)
            headers = self._get_crumb_headers()
            response = self._send(method, path, action, headers, **kwargs)

        if response.status_code == 404:
            raise JenkinsNotFoundError(f"{action} Jenkins failed: not found", 404)
        if response.status_code >= 400:
            raise JenkinsAPIError(
                f"{action} Jenkins failed: HTTP {response.status_code}",
                response.status_code,
            )

        return response

    def _send(self, method: str, path: str, action: str, headers: Dict[str, str], **kwargs) -> httpx.Response:
        try:
            return self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise JenkinsAPIError(f"{action} Jenkins failed: {e}") from e

    def _discard_crumb(self, stale: Dict[str, str]):
        """Forget the crumb unless another request already replaced it."""
        with self._crumb_lock:
            if self._crumb_headers == stale:
                self._crumb_headers = None

    def _get_crumb_headers(self) -> Dict[str, str]:
        """Fetch the CSRF crumb once; an absent crumb issuer means CSRF is off."""
        with self._crumb_lock:
            if self._crumb_headers is not None:
                return self._crumb_headers

            try:
                response = self._client.get("/crumbIssuer/api/json")
            except httpx.HTTPError as e:
                raise JenkinsAPIError(f"fetching crumb from Jenkins failed: {e}") from e

            if response.status_code == 404:
                self._crumb_headers = {}
            elif response.status_code >= 400:
                raise JenkinsAPIError(
                    f"fetching crumb from Jenkins failed: HTTP {response.status_code}",
                    response.status_code,
                )
            else:
                body = response.json()
                self._crumb_headers = {body["crumbRequestField"]: body["crumb"]}

            return self._crumb_headers

    @staticmethod
    def _parse_user(body: Dict[str, Any], username: str, fullname: str, email: str) -> JenkinsUserRecord:
        """Map /user/<name>/api/json onto a JenkinsUserRecord."""
        address = email
        for prop in body.get("property") or []:
            if isinstance(prop, dict) and prop.get("address"):
                address = prop["address"]
                break

        return JenkinsUserRecord(
            username=body.get("id") or username,
            fullname=body.get("fullName") or fullname,
            email=address,
        )
