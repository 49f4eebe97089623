"""
Pydantic data models for assembled show feeds.

A ShowFeed is the final artifact of one refresh cycle for one show. It
is immutable once constructed and is shared, unlocked, between the
refresh thread and any number of HTTP readers.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ShowFeed(BaseModel):
    """
    Complete feed document for one show.

    Holds the edited channel header, the show's episode blocks in source
    order and the shared trailer as one byte string.
    """
    slug: str = Field(min_length=1)
    name: str = Field(min_length=1)
    pub_date: datetime
    data: bytes
    episode_count: int = Field(ge=0, default=0)

    model_config = ConfigDict(frozen=True)

    @field_validator("pub_date")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        """Treat naive publish dates as UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def file_name(self) -> str:
        """Published file name, ``<slug>.xml``."""
        return f"{self.slug}.xml"

    def summary(self) -> "ShowSummary":
        """Describe this feed without its document bytes."""
        return ShowSummary(
            slug=self.slug,
            name=self.name,
            pub_date=self.pub_date,
            episode_count=self.episode_count,
            size_bytes=len(self.data),
        )


class ShowSummary(BaseModel):
    """
    Metadata about one show feed, for listings and JSON output.
    """
    slug: str
    name: str
    pub_date: datetime
    episode_count: int
    size_bytes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return self.model_dump(mode="json")
