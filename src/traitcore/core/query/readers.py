"""Default property reader for plain Python entities."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from traitcore.core.query.models import MISSING


class AttributeReader:
    """Reads mapping keys from mappings and attributes from everything else.

    Example:
        >>> reader = AttributeReader()
        >>> reader.try_get({"color": "red"}, "color")
        'red'
        >>> reader.try_get(object(), "color")
        MISSING
    """

    def try_get(self, entity: Any, name: str) -> Any:
        if isinstance(entity, Mapping):
            return entity.get(name, MISSING)
        return getattr(entity, name, MISSING)
