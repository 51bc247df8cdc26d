"""Configuration module using Pydantic Settings.

Usage:
    from traitcore.config import TraitSettings

    settings = TraitSettings(wait_timeout=2.0)
"""

from traitcore.config.settings import TraitSettings

__all__ = [
    "TraitSettings",
]
