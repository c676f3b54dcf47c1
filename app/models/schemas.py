"""
Pydantic models for fwatch.

Shape of the routing configuration file.
"""

from pathlib import Path
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =====================================================
# Routing Configuration Models
# =====================================================

class Rule(BaseModel):
    """Extensions routed to a single destination directory."""
    model_config = ConfigDict(frozen=True)

    extensions: List[str] = Field(default_factory=list)
    destination: Path

    @field_validator("destination")
    @classmethod
    def expand_destination(cls, value: Path) -> Path:
        return value.expanduser()


class RoutingConfig(BaseModel):
    """Top-level routing configuration."""
    model_config = ConfigDict(extra="ignore")

    watch_dir: Path
    create_dirs: bool = False
    rules: List[Rule] = Field(default_factory=list)

    @field_validator("watch_dir")
    @classmethod
    def expand_watch_dir(cls, value: Path) -> Path:
        return value.expanduser()
