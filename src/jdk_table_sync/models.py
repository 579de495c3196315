"""
Data models for the JDK table sync loop

Pydantic models for JDK entries and poll cycle reports.
"""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional, Dict, Any
from datetime import datetime
from enum import Enum


# ============================================================================
# Enums
# ============================================================================

class ChangeStatus(str, Enum):
    """Outcome of one change-detector check"""
    ABSENT = "absent"                          # No file (or unreadable): no signal
    FIRST_OBSERVATION = "first_observation"    # First digest of this run
    CHANGED = "changed"                        # Digest differs from the stored one
    UNCHANGED = "unchanged"                    # Digest equals the stored one

    @property
    def is_change(self) -> bool:
        return self in (ChangeStatus.FIRST_OBSERVATION, ChangeStatus.CHANGED)


class SchedulerState(str, Enum):
    """Lifecycle state of a poll scheduler"""
    IDLE = "idle"
    RUNNING = "running"
    CANCELLED = "cancelled"


# ============================================================================
# Core Data Models
# ============================================================================

class JdkEntry(BaseModel):
    """A named JDK installation: the shape of table-file and registry entries"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    home_path: str = ""
    type_tag: str = "JavaSDK"
    version: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "JdkEntry":
        return cls.model_validate(data)


# ============================================================================
# Output Models
# ============================================================================

class CycleReport(BaseModel):
    """What one poll cycle did"""
    cycle: int = 0
    heartbeat_fired: bool = False
    change_status: ChangeStatus = ChangeStatus.ABSENT
    retried: bool = False
    diverged: bool = False
    reconciled: bool = False
    applied: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        return not self.errors
