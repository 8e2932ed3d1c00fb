"""Discover the API's repositories and collect their JSON schemas.

Reads the profile document, turns its links into entity descriptors and
fetches one schema per entity, strictly one request at a time.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .catalog import EntityDescriptor, SchemaCatalog
from .client import MetadataClient
from .errors import CollectionError, DiscoveryError, EmissionError

logger = logging.getLogger(__name__)

SELF_RELATION = "self"


def parse_entities(profile: Any) -> list[EntityDescriptor]:
    """Extract every non-self link of a profile document, in document order."""
    links = profile.get("_links") if isinstance(profile, Mapping) else None
    if not isinstance(links, Mapping):
        raise DiscoveryError(
            "Response does not contain _links element. Could not collect entities."
        )

    entities = []
    for name, link in links.items():
        if name == SELF_RELATION:
            continue
        if not isinstance(link, Mapping) or "href" not in link:
            raise DiscoveryError(f"Link {name!r} of the profile document has no href.")
        entities.append(EntityDescriptor(name=name, href=link["href"]))
    return entities


async def collect_entities(client: MetadataClient) -> list[EntityDescriptor]:
    """Fetch the profile document and return the repositories it lists."""
    try:
        profile = await client.get_profile()
    except (httpx.HTTPError, ValueError) as exc:
        raise DiscoveryError("Collecting entities failed.") from exc

    entities = parse_entities(profile)
    logger.info("Collected list of entities.")
    return entities


async def collect_schemas(
    client: MetadataClient,
    entities: list[EntityDescriptor],
) -> SchemaCatalog:
    """Fetch the schema of every entity, in order.

    The first failure aborts collection; there is no partial result.
    """
    logger.info("Collecting schemas.")
    catalog = SchemaCatalog(client.base_url)

    for entity in entities:
        if entity.href in catalog:
            raise CollectionError(
                entity.name,
                f"Entity '{entity.name}' shares its href {entity.href} with another entity.",
            )
        try:
            schema = await client.get_schema(entity.href)
        except (httpx.HTTPError, ValueError) as exc:
            raise CollectionError(entity.name) from exc
        if not isinstance(schema, dict):
            raise CollectionError(
                entity.name, f"Schema for '{entity.name}' is not a JSON object."
            )
        catalog.add(entity, schema)
        logger.debug("Collected schema %r for %s", schema.get("title"), entity.name)

    return catalog


def resolve_ref(schema: dict[str, Any], ref: str) -> dict[str, Any]:
    """Resolve a local $ref pointer such as ``#/definitions/Address``.

    Raises EmissionError naming the schema when the pointer is not local or
    leads nowhere.
    """
    node: Any = schema
    if ref.startswith("#/"):
        for part in ref[2:].split("/"):
            node = node.get(part) if isinstance(node, Mapping) else None
    else:
        node = None
    if not isinstance(node, dict):
        raise EmissionError(
            f"Schema '{schema.get('title')}' has unresolvable $ref '{ref}'."
        )
    return node
