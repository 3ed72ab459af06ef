from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .engine import TerminalInfo
from .fallback_places import LocationMatch
from .geo import Coordinate
from .itinerary import Itinerary, Metric
from .provider_models import AreaLabel, PlaceResult
from .variants import RouteVariants


class LatLng(BaseModel):
    """Map position. Ranges are not enforced; only non-finite values are rejected."""

    lat: float
    lng: float

    @field_validator("lat", "lng")
    @classmethod
    def finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("coordinate must be finite")
        return v

    def to_coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)

    @classmethod
    def from_coordinate(cls, c: Coordinate) -> LatLng:
        return cls(lat=c.latitude, lng=c.longitude)


class GraphRouteRequest(BaseModel):
    origin: LatLng
    destination: LatLng
    metric: Metric = Metric.TIME


class LiveRouteRequest(BaseModel):
    origin: LatLng
    destination: LatLng


class RouteStep(BaseModel):
    instruction: str
    type: str
    distance: float = Field(..., ge=0.0, description="metres")
    duration: float = Field(..., ge=0.0, description="seconds")
    way_points: tuple[int, int]


class CalculatedRoute(BaseModel):
    id: str
    total_time_min: float
    total_distance_km: float
    total_cost: float
    path: list[LatLng]
    steps: list[RouteStep]
    type: Literal["FASTEST", "CHEAPEST", "SHORTEST"]
    tags: list[str]

    @classmethod
    def from_itinerary(cls, it: Itinerary) -> CalculatedRoute:
        return cls(
            id=it.id,
            total_time_min=it.total_time_minutes,
            total_distance_km=it.total_distance_km,
            total_cost=it.total_cost,
            path=[LatLng.from_coordinate(c) for c in it.path],
            steps=[
                RouteStep(
                    instruction=leg.instruction_text,
                    type=leg.mode.value,
                    distance=leg.distance_meters,
                    duration=leg.duration_seconds,
                    way_points=leg.waypoint_indices,
                )
                for leg in it.legs
            ],
            type=it.category.value,
            tags=list(it.labels),
        )


class RouteVariantsResponse(BaseModel):
    routes: list[CalculatedRoute]

    @classmethod
    def from_variants(cls, variants: RouteVariants) -> RouteVariantsResponse:
        return cls(routes=[CalculatedRoute.from_itinerary(it) for it in variants])


class Place(BaseModel):
    name: str
    address: str
    lat: float
    lng: float

    @classmethod
    def from_result(cls, p: PlaceResult) -> Place:
        return cls(name=p.name, address=p.address, lat=p.position.latitude, lng=p.position.longitude)


class PlaceSearchResponse(BaseModel):
    results: list[Place]


class ReverseGeocodeResponse(BaseModel):
    name: str
    area: str

    @classmethod
    def from_label(cls, label: AreaLabel) -> ReverseGeocodeResponse:
        return cls(name=label.short_name, area=label.area_label)


class Terminal(BaseModel):
    id: str
    name: str
    address: str
    type: str
    location: LatLng
    rating: float
    route_count: int

    @classmethod
    def from_info(cls, t: TerminalInfo) -> Terminal:
        return cls(
            id=t.id,
            name=t.name,
            address=t.address,
            type=t.type,
            location=LatLng.from_coordinate(t.location),
            rating=t.rating,
            route_count=t.route_count,
        )


class TerminalListResponse(BaseModel):
    terminals: list[Terminal]


class LocationSuggestion(BaseModel):
    name: str
    address: str
    type: Literal["TERMINAL", "LOCATION"]

    @classmethod
    def from_match(cls, m: LocationMatch) -> LocationSuggestion:
        return cls(name=m.name, address=m.address, type=m.kind)


class LocationSearchResponse(BaseModel):
    results: list[LocationSuggestion]
