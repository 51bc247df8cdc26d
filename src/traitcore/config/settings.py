"""Configuration settings using Pydantic Settings.

Provides typed configuration with environment variable support for the
trait registry.

Usage:
    from traitcore.config import TraitSettings

    # Load from environment variables (TRAITCORE_*)
    settings = TraitSettings()

    # Or override with explicit values
    settings = TraitSettings(wait_timeout=5.0)
    registry = TraitRegistry(settings=settings)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TraitSettings(BaseSettings):  # type: ignore[misc]
    """Configuration for a TraitRegistry and the traits it defines.

    Attributes:
        wait_timeout: Default deadline in seconds for Trait.wait_for() when the
            caller passes none. None waits indefinitely.
        reconcile_on_define: Associate entities that already carry the tag
            when a trait is defined.
        tag_on_associate: Also add the external tag when associate() is called
            directly. Off by default, so a redefined trait only reconciles
            entities the host tagged itself.

    Environment Variables:
        TRAITCORE_WAIT_TIMEOUT
        TRAITCORE_RECONCILE_ON_DEFINE
        TRAITCORE_TAG_ON_ASSOCIATE
    """

    model_config = SettingsConfigDict(
        env_prefix="TRAITCORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    wait_timeout: float | None = Field(default=None, gt=0)
    reconcile_on_define: bool = True
    tag_on_associate: bool = False
