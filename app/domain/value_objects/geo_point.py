"""GeoPoint value object: immutable (lat, lon) pair."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")

    @classmethod
    def from_optional(cls, latitude: float | None, longitude: float | None) -> "GeoPoint | None":
        """Build a point only when both coordinates are known."""
        if latitude is None or longitude is None:
            return None
        return cls(latitude=latitude, longitude=longitude)
