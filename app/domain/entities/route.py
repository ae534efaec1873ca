"""Route entity: a named bus path with an ordered list of stops."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass
class Route:
    id: UUID | None
    route_name: str
    start_point: str
    end_point: str
    route_code: str | None = None
    distance: float | None = None
    estimated_duration: int | None = None
    is_active: bool = True
    created_at: datetime | None = None
    # Filled by list queries only
    counts: dict[str, int] = field(default_factory=dict)

    def deactivate(self) -> None:
        self.is_active = False
