"""
Schema indexing for form components.

Walks a form schema once, at every nesting depth, and builds the key-based
lookup tables used by the data transformer, the file checker and the error
reconciler.

Components are visited in pre-order (a parent before its children), so when a
key occurs more than once the outer occurrence is recorded first and nested
occurrences overwrite it. The component type index is the exception: it is
resolved level by level and the outermost occurrence of a key wins.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Set

from ..schemas.form_schemas import Component, FormSchema

logger = logging.getLogger(__name__)


@dataclass
class SchemaIndex:
    """Key-based lookup tables derived from a form schema."""

    day_components: Dict[str, bool] = field(default_factory=dict)
    file_messages: Dict[str, Optional[str]] = field(default_factory=dict)
    required_file_keys: Dict[str, Optional[str]] = field(default_factory=dict)
    component_types: Dict[str, Optional[str]] = field(default_factory=dict)
    root_keys: Set[str] = field(default_factory=set)


def index_schema(schema: Optional[FormSchema]) -> SchemaIndex:
    """
    Build lookup tables for a form schema.

    Args:
        schema: Form schema fetched from the provider

    Returns:
        SchemaIndex with day components, file messages, required file keys,
        component types and root-level keys
    """
    index = SchemaIndex()
    if schema is None:
        return index

    for component in schema.components:
        if component.key is not None:
            index.root_keys.add(component.key)
    _visit(schema.components, index)
    _index_types(schema.components, index)

    logger.debug(
        f"Indexed schema: {len(index.component_types)} keyed components, "
        f"{len(index.day_components)} day, {len(index.file_messages)} file, "
        f"{len(index.required_file_keys)} required file"
    )
    return index


def _visit(components: Iterable[Component], index: SchemaIndex) -> None:
    for component in components:
        _record(component, index)
        if component.children:
            _visit(component.children, index)


def _record(component: Component, index: SchemaIndex) -> None:
    key = component.key
    if key is None:
        return

    if component.is_day:
        index.day_components[key] = bool(component.day_first)

    rule = component.validate_rule
    if component.is_file and rule is not None:
        index.file_messages[key] = rule.custom_message
        if rule.required:
            index.required_file_keys[key] = rule.custom_message


def _index_types(components: Iterable[Component], index: SchemaIndex) -> None:
    level = list(components)
    while level:
        next_level = []
        for component in level:
            if component.key is not None:
                index.component_types.setdefault(component.key, component.type)
            next_level.extend(component.children)
        level = next_level
