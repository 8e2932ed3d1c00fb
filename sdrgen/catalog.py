"""Entity descriptors and the href-keyed catalog pairing them with schemas."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator
from urllib.parse import urljoin, urlsplit, urlunsplit

_DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_href(href: str, base_url: str | None = None) -> str:
    """Normalize an href for equality comparison.

    Relative hrefs are joined to ``base_url``. Scheme and host are
    lower-cased, default ports dropped, query and fragment removed and a
    trailing slash stripped from the path. Path case is kept.
    """
    url = urljoin(base_url.rstrip("/") + "/", href) if base_url else href
    parts = urlsplit(url)
    scheme = parts.scheme.lower()

    netloc = parts.netloc
    if parts.hostname:
        host = parts.hostname.lower()
        if ":" in host:
            host = f"[{host}]"
        port = parts.port
        if port is not None and _DEFAULT_PORTS.get(scheme) != port:
            host = f"{host}:{port}"
        userinfo = parts.netloc.rpartition("@")[0]
        netloc = f"{userinfo}@{host}" if userinfo else host

    return urlunsplit((scheme, netloc, parts.path.rstrip("/"), "", ""))


@dataclass(frozen=True)
class EntityDescriptor:
    """A repository exposed by the API, as listed in the profile document."""

    name: str
    href: str


@dataclass
class CatalogEntry:
    entity: EntityDescriptor
    schema: dict[str, Any]


class SchemaCatalog:
    """Schemas keyed by normalized entity href, in discovery order.

    Replaces two index-aligned lists: an entity can only ever be paired with
    the schema fetched for it.
    """

    def __init__(self, base_url: str | None = None) -> None:
        self.base_url = base_url
        self._entries: dict[str, CatalogEntry] = {}

    def key(self, href: str) -> str:
        return normalize_href(href, self.base_url)

    def add(self, entity: EntityDescriptor, schema: dict[str, Any]) -> CatalogEntry:
        key = self.key(entity.href)
        if key in self._entries:
            raise KeyError(key)
        entry = CatalogEntry(entity=entity, schema=schema)
        self._entries[key] = entry
        return entry

    def find(self, href: str) -> CatalogEntry | None:
        """Return the entry whose entity href matches ``href``, or None."""
        return self._entries.get(self.key(href))

    def entities(self) -> list[EntityDescriptor]:
        return [entry.entity for entry in self._entries.values()]

    def schemas(self) -> list[dict[str, Any]]:
        return [entry.schema for entry in self._entries.values()]

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, href: object) -> bool:
        return isinstance(href, str) and self.key(href) in self._entries
