"""Authenticated HTTP access to the upstream API's metadata endpoints.

One MetadataClient is created per run and handed to every stage. It owns
the session state (cookie jar or bearer token) for the run's duration.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

import httpx

from .config import DEFAULT_TIMEOUT, GeneratorOptions
from .errors import AuthenticationError

logger = logging.getLogger(__name__)

SCHEMA_MEDIA_TYPE = "application/schema+json"
ALPS_MEDIA_TYPE = "application/alps+json"
PROFILE_PATH = "profile"


class MetadataClient:
    """Fetches profile, schema and ALPS documents from a Spring Data REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        headers: dict[str, str] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=headers or {},
            transport=transport,
        )

    async def __aenter__(self) -> MetadataClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def resolve(self, href: str) -> str:
        """Resolve an href against the base URL the way links are read."""
        return urljoin(self.base_url + "/", href)

    async def _get_json(self, href: str, accept: str | None = None) -> Any:
        url = self.resolve(href)
        headers = {"Accept": accept} if accept else None
        logger.debug("GET %s (Accept: %s)", url, accept or "*/*")
        response = await self._client.get(url, headers=headers)
        response.raise_for_status()
        return response.json()

    async def get_profile(self) -> Any:
        """Fetch the profile document listing every repository."""
        return await self._get_json(PROFILE_PATH)

    async def get_schema(self, href: str) -> Any:
        """Fetch the JSON schema of the repository at ``href``."""
        return await self._get_json(href, SCHEMA_MEDIA_TYPE)

    async def get_alps(self, href: str) -> Any:
        """Fetch the ALPS description of the repository at ``href``."""
        return await self._get_json(href, ALPS_MEDIA_TYPE)

    async def authenticate(self, options: GeneratorOptions) -> None:
        """Run the configured credential exchange.

        COOKIE posts the username and password as a form and relies on the
        cookie jar to keep the session. OAUTH2 runs the password grant and
        installs the returned access token as a default header.
        """
        if options.auth_method == "NONE":
            return

        try:
            if options.auth_method == "COOKIE":
                response = await self._client.post(
                    self.resolve(options.auth_endpoint),
                    data={"username": options.username, "password": options.password},
                )
                response.raise_for_status()
            elif options.auth_method == "OAUTH2":
                token = await self._oauth2_password_grant(options)
                self._client.headers["Authorization"] = f"Bearer {token}"
            else:
                raise AuthenticationError(
                    f"Unknown authentication method {options.auth_method!r}."
                )
        except (httpx.HTTPError, ValueError) as exc:
            raise AuthenticationError("Authentication failed.") from exc

        logger.info("Authenticated as user %s.", options.username)

    async def _oauth2_password_grant(self, options: GeneratorOptions) -> str:
        response = await self._client.post(
            self.resolve(options.auth_endpoint),
            data={
                "grant_type": "password",
                "username": options.username,
                "password": options.password,
                "client_id": options.client_id,
                "client_secret": options.client_password,
            },
            auth=(options.client_id, options.client_password),
        )
        response.raise_for_status()
        token = response.json().get("access_token")
        if not token:
            raise AuthenticationError("Authentication failed: no access token returned.")
        return token
