"""
backend/models/usage.py

Feature tags and usage records.
"""

from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class FeatureTag(str, Enum):
    """Capabilities that usage and access checks are counted against."""

    TEXT = "text"
    IMAGE = "image"
    IMAGE_EDIT = "image-edit"
    VIDEO = "video"
    REMIX = "remix"
    ANALYSIS = "analysis"


class UsageRecord(BaseModel):
    """feature tag -> count, as stored in the local usage document."""

    counts: Dict[str, int] = {}

    def count(self, feature: str) -> int:
        return self.counts.get(feature, 0)


class UsageReceipt(BaseModel):
    """Outcome of the two-step usage write (local first, then remote)."""

    model_config = ConfigDict(frozen=True)

    feature: str
    local_count: int
    remote_attempted: bool = False
    remote_synced: bool = False
    remote_error: Optional[str] = None
