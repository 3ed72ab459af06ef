from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """A (latitude, longitude) pair in degrees.

    No range validation is applied; values outside |lat| <= 90 / |lng| <= 180
    are carried through unchanged.
    """

    latitude: float
    longitude: float

    def rounded_label(self, places: int = 4) -> str:
        return f"{self.latitude:.{places}f}, {self.longitude:.{places}f}"

    def as_lon_lat(self) -> list[float]:
        return [float(self.longitude), float(self.latitude)]


def squared_planar_distance(a: Coordinate, b: Coordinate) -> float:
    # Degrees, not metres; good enough to snap to the nearest terminal in a district.
    dlat = a.latitude - b.latitude
    dlng = a.longitude - b.longitude
    return dlat * dlat + dlng * dlng
