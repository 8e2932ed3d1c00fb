"""Resolve URI-typed schema properties to the entities they reference.

A Spring Data REST JSON schema describes an association as a plain
``{"type": "string", "format": "uri"}`` property. Only the ALPS document
of the same repository says which resource such a property points to,
through the ``rt`` attribute of the matching descriptor::

    {"name": "author", "type": "SAFE",
     "rt": "http://localhost/api/profile/authors#author-representation"}

The resolver rewrites each such property to ``{"type": "object", "title":
<referenced schema title>}`` so the emitter can type it as the referenced
model class.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from .catalog import CatalogEntry, EntityDescriptor, SchemaCatalog
from .client import MetadataClient
from .errors import ResolutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AffordanceDescriptor:
    """One ALPS descriptor; ``rt`` names the resource type it returns."""

    name: str | None
    href: str | None = None
    rt: str | None = None

    @classmethod
    def from_node(cls, node: Mapping[str, Any]) -> AffordanceDescriptor:
        return cls(name=node.get("name"), href=node.get("href"), rt=node.get("rt"))


def _descriptor_nodes(node: Any) -> list[Mapping[str, Any]]:
    """Return the child descriptors of an ALPS node.

    Spring Data REST serializes them under ``descriptor``; ``descriptors``
    is accepted as well.
    """
    if not isinstance(node, Mapping):
        return []
    children = node.get("descriptor", node.get("descriptors"))
    if not isinstance(children, list):
        return []
    return [child for child in children if isinstance(child, Mapping)]


def find_entity_descriptors(
    alps: Any,
    entity: EntityDescriptor,
    catalog: SchemaCatalog,
) -> list[AffordanceDescriptor]:
    """Return the field descriptors the ALPS document declares for ``entity``."""
    root = alps.get("alps") if isinstance(alps, Mapping) else None
    if root is None:
        raise ResolutionError(
            entity.name, f"ALPS document for '{entity.name}' has no alps element."
        )

    entity_key = catalog.key(entity.href)
    for node in _descriptor_nodes(root):
        href = node.get("href")
        if isinstance(href, str) and catalog.key(href) == entity_key:
            return [AffordanceDescriptor.from_node(child) for child in _descriptor_nodes(node)]

    raise ResolutionError(
        entity.name,
        f"ALPS document for '{entity.name}' has no descriptor for {entity.href}.",
    )


def referenced_href(rt: str) -> str:
    """Strip the fragment naming the representation from an ``rt`` value."""
    base, sep, _ = rt.rpartition("#")
    return base if sep else rt


def is_uri_property(prop: Any) -> bool:
    return (
        isinstance(prop, Mapping)
        and prop.get("type") == "string"
        and prop.get("format") == "uri"
    )


def _lookup_reference(
    entity: EntityDescriptor,
    field_name: str,
    descriptors: dict[str, AffordanceDescriptor],
    catalog: SchemaCatalog,
) -> CatalogEntry:
    descriptor = descriptors.get(field_name)
    if descriptor is None or not descriptor.rt:
        raise ResolutionError(
            entity.name,
            f"No ALPS descriptor with a resource type for '{entity.name}.{field_name}'.",
        )

    target = catalog.find(referenced_href(descriptor.rt))
    if target is None:
        raise ResolutionError(
            entity.name,
            f"'{entity.name}.{field_name}' references unknown resource {descriptor.rt}.",
        )
    return target


async def resolve_references(
    client: MetadataClient,
    entity: EntityDescriptor,
    schema: dict[str, Any],
    catalog: SchemaCatalog,
) -> list[dict[str, Any]]:
    """Rewrite the URI properties of ``schema`` in place.

    Returns the other schemas ``schema`` refers to, each once, in the order
    they are first referenced. Self references are left out.
    """
    logger.info("Collecting schema references for '%s'.", entity.name)
    try:
        alps = await client.get_alps(entity.href)
    except (httpx.HTTPError, ValueError) as exc:
        raise ResolutionError(entity.name) from exc

    descriptors = {
        d.name: d
        for d in find_entity_descriptors(alps, entity, catalog)
        if d.name is not None
    }
    properties = schema.get("properties") or {}
    referenced: list[dict[str, Any]] = []

    for name, prop in properties.items():
        if not is_uri_property(prop):
            continue

        target = _lookup_reference(entity, name, descriptors, catalog)
        prop["type"] = "object"
        prop.pop("format", None)
        prop["title"] = target.schema.get("title")
        logger.debug("%s.%s -> %s", entity.name, name, target.entity.name)

        if target.schema is not schema and not any(s is target.schema for s in referenced):
            referenced.append(target.schema)

    return referenced


@dataclass
class ResolvedEntity:
    """An entity ready for emission.

    ``dto_schema`` is the schema as sent over the wire, captured before
    reference resolution; ``schema`` is the resolved one.
    """

    entity: EntityDescriptor
    dto_schema: dict[str, Any]
    schema: dict[str, Any]
    referenced: list[dict[str, Any]]
