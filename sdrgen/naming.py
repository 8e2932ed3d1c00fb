"""Derive Python identifiers for generated code from schema titles and names.

Pattern:
  - model class     -> PascalCase schema title        ("Book author" -> BookAuthor)
  - DTO class       -> model class + "Dto"            (BookAuthorDto)
  - service class   -> model class + "Service"        (BookAuthorService)
  - module name     -> snake_case of the model class  (book_author)
  - attribute name  -> snake_case of the field name   (publishedAt -> published_at)

Schemas without a title fall back to the singular repository name:
  books -> Book, categories -> Category
"""

from __future__ import annotations

import keyword
import re

# Irregular plural/singular forms seen in repository names
_PLURALS: dict[str, str] = {
    "person": "people",
    "child": "children",
    "address": "addresses",
    "status": "statuses",
}

_SINGULARS: dict[str, str] = {v: k for k, v in _PLURALS.items()}

# Names the generated model modules use inside class bodies
_RESERVED_ATTRIBUTES = {"field", "dataclass"}


def _singularize(word: str) -> str:
    """Return the singular form of a repository name."""
    if word in _SINGULARS:
        return _SINGULARS[word]
    if word in _PLURALS:
        return word
    if word.endswith("ies"):
        return word[:-3] + "y"
    if word.endswith(("sses", "xes", "ches", "shes")):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def _camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def _sanitize_segment(segment: str) -> str:
    """Sanitize a name for use in a snake_case Python identifier."""
    name = _camel_to_snake(segment)
    name = re.sub(r"[\s.\-]", "_", name)
    name = re.sub(r"[^a-z0-9_]", "", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_")


def _ensure_identifier(name: str, fallback: str) -> str:
    if not name:
        return fallback
    if name[0].isdigit():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def class_name(title: str) -> str:
    """Build a PascalCase class name from a schema title."""
    words = [w for w in re.split(r"[^A-Za-z0-9]+", title) if w]
    name = "".join(w[0].upper() + w[1:] for w in words)
    return _ensure_identifier(name, "Model")


def entity_class_name(title: str | None, repository: str) -> str:
    """Class name of an entity, from its schema title or its repository name."""
    if title:
        return class_name(title)
    return class_name(_singularize(_sanitize_segment(repository)))


def module_name(name: str) -> str:
    """Build a snake_case module name from a class name or title."""
    return _ensure_identifier(_sanitize_segment(name), "model")


def attribute_name(field: str) -> str:
    """Build a snake_case attribute name from a JSON field name."""
    name = _ensure_identifier(_sanitize_segment(field), "value")
    if name in _RESERVED_ATTRIBUTES:
        name = f"{name}_"
    return name


def dto_class_name(model: str) -> str:
    return f"{model}Dto"


def service_class_name(model: str) -> str:
    return f"{model}Service"
