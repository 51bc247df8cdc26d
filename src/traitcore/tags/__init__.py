"""Tag propagation backends."""

from traitcore.tags.local import LocalTagService
from traitcore.tags.protocol import TagService

__all__ = [
    "TagService",
    "LocalTagService",
]
