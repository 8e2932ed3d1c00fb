"""Run a full generation: authenticate, discover, collect, normalize,
resolve and emit.

Each stage completes for every entity before the next one starts, and
requests are awaited one at a time. Nothing is written unless every
stage succeeds.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any

import httpx

from .catalog import SchemaCatalog
from .client import MetadataClient
from .codegen import generate
from .config import GeneratorOptions
from .context_builder import build_context
from .loader import collect_entities, collect_schemas
from .naming import entity_class_name
from .normalizer import preprocess_schemas
from .references import ResolvedEntity, resolve_references

logger = logging.getLogger(__name__)


def _default_titles(catalog: SchemaCatalog) -> None:
    """Give untitled schemas the singular repository name as title."""
    for entry in catalog:
        if not entry.schema.get("title"):
            entry.schema["title"] = entity_class_name(None, entry.entity.name)


async def resolve_catalog(
    client: MetadataClient,
    catalog: SchemaCatalog,
) -> list[ResolvedEntity]:
    """Resolve the references of every entity, in discovery order."""
    resolved = []
    for entry in catalog:
        dto_schema = copy.deepcopy(entry.schema)
        referenced = await resolve_references(client, entry.entity, entry.schema, catalog)
        resolved.append(
            ResolvedEntity(
                entity=entry.entity,
                dto_schema=dto_schema,
                schema=entry.schema,
                referenced=referenced,
            )
        )
    return resolved


async def collect(
    client: MetadataClient,
    options: GeneratorOptions,
) -> list[ResolvedEntity]:
    """Run every network-bound stage and return the resolved entities."""
    await client.authenticate(options)

    entities = await collect_entities(client)
    catalog = await collect_schemas(client, entities)

    preprocess_schemas(
        catalog.schemas(),
        suppress_additional_properties=options.no_additional_properties,
        strip_trivial_titles=options.no_trivial_types,
    )
    _default_titles(catalog)

    return await resolve_catalog(client, catalog)


async def run(
    options: GeneratorOptions,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Generate models and services for the API at ``options.base_url``."""
    options.validate()

    async with MetadataClient(options.base_url, options.timeout, transport=transport) as client:
        resolved = await collect(client, options)

    logger.info("Generating files.")
    context = build_context(resolved, options.model_dir, options.service_dir)
    generate(context, Path(options.output_dir))
    return context
