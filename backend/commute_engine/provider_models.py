from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from .geo import Coordinate

UNKNOWN_LOCATION = "Unknown Location"
UNKNOWN_AREA = "Unknown Area"


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class PointGeometry(_ProviderModel):
    coordinates: list[float] = Field(..., min_length=2)


class LineGeometry(_ProviderModel):
    coordinates: list[list[float]] = Field(default_factory=list)


class SearchFeatureProperties(_ProviderModel):
    name: str | None = None
    label: str | None = None


class SearchFeature(_ProviderModel):
    geometry: PointGeometry
    properties: SearchFeatureProperties = Field(default_factory=SearchFeatureProperties)


class SearchResponse(_ProviderModel):
    features: list[SearchFeature] = Field(default_factory=list)


class ReverseFeatureProperties(_ProviderModel):
    neighbourhood: str | None = None
    locality: str | None = None
    borough: str | None = None
    county: str | None = None
    region: str | None = None
    name: str | None = None
    street: str | None = None
    label: str | None = None


class ReverseFeature(_ProviderModel):
    properties: ReverseFeatureProperties = Field(default_factory=ReverseFeatureProperties)


class ReverseResponse(_ProviderModel):
    features: list[ReverseFeature] = Field(default_factory=list)


class DirectionsStep(_ProviderModel):
    instruction: str = ""
    distance: float = Field(default=0.0, ge=0.0)
    duration: float = Field(default=0.0, ge=0.0)
    way_points: list[int] = Field(default_factory=lambda: [0, 0])


class DirectionsSegment(_ProviderModel):
    steps: list[DirectionsStep] = Field(default_factory=list)


class DirectionsSummary(_ProviderModel):
    # ORS omits both fields for zero-length routes.
    distance: float = 0.0
    duration: float = 0.0


class DirectionsProperties(_ProviderModel):
    segments: list[DirectionsSegment] = Field(default_factory=list)
    summary: DirectionsSummary = Field(default_factory=DirectionsSummary)


class DirectionsFeature(_ProviderModel):
    geometry: LineGeometry
    properties: DirectionsProperties = Field(default_factory=DirectionsProperties)


class DirectionsResponse(_ProviderModel):
    features: list[DirectionsFeature] = Field(default_factory=list)


@dataclass(frozen=True)
class PlaceResult:
    name: str
    address: str
    position: Coordinate


@dataclass(frozen=True)
class AreaLabel:
    """Reverse-geocode result: a short place name plus a finer-grained area line."""

    short_name: str
    area_label: str


def _first_non_empty(*values: str | None) -> str | None:
    for value in values:
        if value:
            return value
    return None


def pick_area_label(props: ReverseFeatureProperties) -> AreaLabel:
    # Neighbourhood first: it carries the barangay name in Quezon City.
    short_name = _first_non_empty(
        props.neighbourhood,
        props.locality,
        props.borough,
        props.county,
        props.region,
    )
    area = _first_non_empty(props.name, props.street, props.label)
    return AreaLabel(
        short_name=short_name or UNKNOWN_LOCATION,
        area_label=area or UNKNOWN_AREA,
    )


def place_from_feature(feature: SearchFeature) -> PlaceResult:
    lng, lat = feature.geometry.coordinates[0], feature.geometry.coordinates[1]
    return PlaceResult(
        name=feature.properties.name or "",
        address=feature.properties.label or "",
        position=Coordinate(float(lat), float(lng)),
    )
