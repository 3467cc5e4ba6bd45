"""Inbox curation configuration.

Controls the working-set capacity, sync pagination, CustomState retention,
and detail request caching. All settings can be overridden via ``INBOX_*``
environment variables.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InboxConfig(BaseSettings):
    """Configuration for the notification inbox."""

    model_config = SettingsConfigDict(
        env_prefix="INBOX_",
        case_sensitive=False,
        extra="ignore",
    )

    default_max_active: int = Field(
        default=10,
        ge=1,
        description="Working-set capacity for a fresh snapshot",
    )
    expand_step: int = Field(
        default=10,
        ge=1,
        description="Capacity added by each explicit inbox expansion",
    )

    # Sync pagination
    sync_per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Notifications requested per page during sync",
    )
    sync_max_pages: int = Field(
        default=1,
        ge=1,
        description="Maximum pages fetched per sync (stops early on a short page)",
    )

    custom_state_retention_syncs: int = Field(
        default=0,
        ge=0,
        description=(
            "Prune a CustomState after its id is absent for this many "
            "consecutive syncs (0 = retain forever)"
        ),
    )

    cache_detail_requests: bool = Field(
        default=True,
        description="Serve issue/PR/comment lookups from the response cache when fresh",
    )
