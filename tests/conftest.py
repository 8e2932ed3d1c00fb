"""Shared fixtures for sdrgen tests.

The upstream Spring Data REST API is simulated with pytest-httpx. FakeApi
registers exactly the responses a test expects to be requested, so any
extra or missing request fails the test.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
import pytest

from sdrgen.client import ALPS_MEDIA_TYPE, SCHEMA_MEDIA_TYPE, MetadataClient

if TYPE_CHECKING:
    from pytest_httpx import HTTPXMock


BASE_URL = "http://localhost:8080/api"
PROFILE_URL = f"{BASE_URL}/profile"


def profile_href(name: str) -> str:
    return f"{PROFILE_URL}/{name}"


def rt(name: str, representation: str) -> str:
    """An ALPS ``rt`` value pointing at the representation of repository ``name``."""
    return f"{profile_href(name)}#{representation}-representation"


# ---------------------------------------------------------------------------
# Upstream API double
# ---------------------------------------------------------------------------

class FakeApi:
    """Registers profile, schema and ALPS responses on the httpx mock."""

    def __init__(self, httpx_mock: HTTPXMock) -> None:
        self.mock = httpx_mock

    def profile(self, *names: str, document: Any = None, status_code: int = 200) -> None:
        if document is None:
            links = {"self": {"href": PROFILE_URL}}
            links.update({name: {"href": profile_href(name)} for name in names})
            document = {"_links": links}
        self.mock.add_response(
            method="GET", url=PROFILE_URL, json=document, status_code=status_code
        )

    def schema(self, name: str, schema: Any = None, status_code: int = 200) -> None:
        self.mock.add_response(
            method="GET",
            url=profile_href(name),
            match_headers={"Accept": SCHEMA_MEDIA_TYPE},
            json=schema,
            status_code=status_code,
        )

    def alps(
        self,
        name: str,
        fields: list[dict[str, Any]] | None = None,
        document: Any = None,
        status_code: int = 200,
    ) -> None:
        if document is None:
            document = alps_document(name, fields or [])
        self.mock.add_response(
            method="GET",
            url=profile_href(name),
            match_headers={"Accept": ALPS_MEDIA_TYPE},
            json=document,
            status_code=status_code,
        )

    def timeout(self, url: str, accept: str | None = None) -> None:
        """Make the next GET of ``url`` time out."""
        matchers = {"match_headers": {"Accept": accept}} if accept else {}
        self.mock.add_exception(
            httpx.ReadTimeout("Read timed out"), method="GET", url=url, **matchers
        )


def alps_document(name: str, fields: list[dict[str, Any]]) -> dict[str, Any]:
    """ALPS document as Spring Data REST serves it for repository ``name``."""
    return {
        "alps": {
            "version": "1.0",
            "descriptor": [
                {
                    "id": f"{name}-representation",
                    "href": profile_href(name),
                    "descriptor": fields,
                },
                {"id": f"get-{name}", "name": name, "type": "SAFE", "rt": f"#{name}-representation"},
            ],
        }
    }


@pytest.fixture
def fake_api(httpx_mock: HTTPXMock) -> FakeApi:
    return FakeApi(httpx_mock)


@pytest.fixture
async def client():
    async with MetadataClient(BASE_URL) as metadata_client:
        yield metadata_client


# ---------------------------------------------------------------------------
# Sample documents — fresh copies per test since stages mutate them
# ---------------------------------------------------------------------------

@pytest.fixture
def book_schema() -> dict[str, Any]:
    return {
        "title": "Book",
        "type": "object",
        "$schema": "http://json-schema.org/draft-04/schema#",
        "properties": {
            "title": {"title": "Title", "type": "string", "readOnly": False},
            "pages": {"title": "Pages", "type": "integer", "readOnly": False},
            "author": {"title": "Author", "type": "string", "format": "uri", "readOnly": False},
            "sequel": {"title": "Sequel", "type": "string", "format": "uri", "readOnly": False},
            "website": {"title": "Website", "type": "string", "format": "uri-reference"},
        },
        "definitions": {},
    }


@pytest.fixture
def book_alps_fields() -> list[dict[str, Any]]:
    return [
        {"name": "title", "type": "SEMANTIC"},
        {"name": "pages", "type": "SEMANTIC"},
        {"name": "author", "type": "SAFE", "rt": rt("authors", "author")},
        {"name": "sequel", "type": "SAFE", "rt": rt("books", "book")},
        {"name": "website", "type": "SEMANTIC"},
    ]


@pytest.fixture
def author_schema() -> dict[str, Any]:
    return {
        "title": "Author",
        "type": "object",
        "properties": {
            "name": {"title": "Name", "type": "string", "readOnly": False},
            "address": {"title": "Address", "$ref": "#/definitions/address"},
            "genres": {
                "title": "Genres",
                "type": "array",
                "items": {"type": "string", "enum": ["FICTION", "POETRY"]},
            },
        },
        "definitions": {
            "address": {
                "title": "Address",
                "type": "object",
                "properties": {
                    "street": {"title": "Street", "type": "string"},
                    "zipCode": {"title": "Zip code", "type": "string"},
                },
            },
        },
    }
