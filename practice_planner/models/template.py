"""Dataclasses for the period and practice template library."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .practice import Activity, generate_id


@dataclass
class PeriodTemplate:
    """A reusable drill from the period library."""

    name: str
    duration: int
    id: str = field(default_factory=generate_id)
    notes: str = ""
    tags: List[str] = field(default_factory=list)

    def instantiate(self) -> Activity:
        """Create a new activity from this period with its own id."""
        return Activity(
            id=generate_id(),
            name=self.name,
            duration=self.duration,
            notes=self.notes,
            tags=list(self.tags),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PeriodTemplate":
        return cls(
            id=data.get("id") or generate_id(),
            name=data["name"],
            duration=int(data["duration"]),
            notes=data.get("notes") or "",
            tags=list(data.get("tags") or []),
        )


@dataclass
class PracticeTemplate:
    """A saved sequence of periods that can seed a practice."""

    name: str
    periods: List[PeriodTemplate] = field(default_factory=list)
    id: str = field(default_factory=generate_id)

    @property
    def duration(self) -> int:
        return sum(p.duration for p in self.periods)

    def instantiate(self) -> List[Activity]:
        """Create fresh activities for every period, in template order."""
        return [p.instantiate() for p in self.periods]
