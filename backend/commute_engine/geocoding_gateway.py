from __future__ import annotations

import itertools
import logging
import math
from typing import Any, Final, Literal

import httpx
from pydantic import ValidationError

from .errors import GatewayError, GatewayRetryableError, normalize_reason_code
from .fallback_places import match_fallback_places
from .fares import driving_fare
from .geo import Coordinate
from .itinerary import Itinerary, RouteCategory, RouteLeg, TransportMode, new_itinerary_id
from .logging_utils import log_event
from .provider_models import (
    AreaLabel,
    DirectionsResponse,
    PlaceResult,
    ReverseResponse,
    SearchResponse,
    pick_area_label,
    place_from_feature,
)
from .rate_limiter import RateLimiter
from .settings import settings

CallKind = Literal["search", "reverse", "directions"]

SEARCH_MIN_QUERY_CHARS: Final[int] = 3
_RETRYABLE_STATUS: Final[set[int]] = {408, 425, 429, 500, 502, 503, 504}


def _format_provider_error(resp: httpx.Response) -> str:
    """Best-effort decode of ORS JSON error payloads."""
    try:
        data = resp.json()
        if isinstance(data, dict):
            err = data.get("error")
            if isinstance(err, dict):
                code = err.get("code")
                message = err.get("message")
                if code and message:
                    return f"ORS {resp.status_code} {code}: {message}"
                if message:
                    return f"ORS {resp.status_code}: {message}"
            elif isinstance(err, str) and err:
                return f"ORS {resp.status_code}: {err}"
    except ValueError:
        # fall through to text
        pass

    body = (resp.text or "").strip().replace("\n", " ")
    if len(body) > 240:
        body = body[:240] + "..."
    if body:
        return f"ORS {resp.status_code}: {body}"
    return f"ORS HTTP {resp.status_code}"


def unavailable_label(position: Coordinate) -> AreaLabel:
    return AreaLabel(short_name="Location Coordinates", area_label=position.rounded_label(4))


class GeocodingGateway:
    """Throttled OpenRouteService client for place search, reverse lookup and directions.

    Provider failures never escape: search falls back to a fixed place list,
    reverse lookup to a coordinate label, directions to None.
    """

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str = "",
        country: str = "PH",
        search_size: int = 5,
        directions_profile: str = "driving-car",
        limiter: RateLimiter | None = None,
        min_interval_s: float = 1.0,
        reverse_min_interval_s: float = 0.5,
        max_attempts: int = 1,
        timeout_s: float = 10.0,
        connect_timeout_s: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.country = country
        self.search_size = int(search_size)
        self.directions_profile = directions_profile
        self.limiter = limiter or RateLimiter()
        self.min_interval_s = float(min_interval_s)
        self.reverse_min_interval_s = float(reverse_min_interval_s)
        self.max_attempts = max(1, int(max_attempts))
        self._seq = itertools.count(1)
        self._last_request_seq = 0

        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s, connect=connect_timeout_s),
            headers={"accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        *,
        limiter: RateLimiter | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GeocodingGateway:
        return cls(
            base_url=settings.ors_base_url,
            api_key=settings.ors_api_key,
            country=settings.ors_country,
            search_size=settings.ors_search_size,
            directions_profile=settings.ors_directions_profile,
            limiter=limiter,
            min_interval_s=settings.gateway_min_interval_ms / 1000.0,
            reverse_min_interval_s=settings.gateway_reverse_min_interval_ms / 1000.0,
            max_attempts=settings.ors_max_attempts,
            timeout_s=settings.ors_request_timeout_s,
            connect_timeout_s=settings.ors_connect_timeout_s,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def last_request_seq(self) -> int:
        return self._last_request_seq

    def _interval_for(self, kind: CallKind) -> float:
        return self.reverse_min_interval_s if kind == "reverse" else self.min_interval_s

    async def _request_json(
        self,
        kind: CallKind,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        last_err: Exception | None = None

        for attempt in range(self.max_attempts):
            slept_s = await self.limiter.wait(self._interval_for(kind))
            seq = next(self._seq)
            self._last_request_seq = seq
            log_event("gateway_call", kind=kind, request_seq=seq, attempt=attempt + 1, slept_s=slept_s)
            try:
                resp = await self._client.request(method, url, params=params, json=json_body, headers=headers)

                if resp.status_code in _RETRYABLE_STATUS:
                    raise GatewayRetryableError(_format_provider_error(resp))
                if resp.status_code >= 400:
                    raise GatewayError(_format_provider_error(resp))

                data = resp.json()
                if not isinstance(data, dict):
                    raise GatewayError("ORS returned a non-object payload")
                return data

            except GatewayRetryableError as e:
                last_err = e
            except (httpx.TimeoutException, httpx.NetworkError, httpx.TransportError) as e:
                last_err = e
            except ValueError as e:
                raise GatewayError(f"ORS returned invalid JSON: {e}") from e

        # httpx exceptions can stringify to "" (e.g. some timeouts), so include the type.
        if last_err is None:
            detail = "unknown error"
        else:
            msg = str(last_err).strip()
            detail = f"{type(last_err).__name__}: {msg}" if msg else f"{type(last_err).__name__}: {last_err!r}"
        raise GatewayRetryableError(
            f"ORS {kind} request failed after {self.max_attempts} attempt(s) (base={self.base_url}): {detail}"
        )

    def _log_fallback(self, kind: CallKind, reason_code: str, exc: Exception | None = None) -> None:
        log_event(
            "gateway_fallback",
            level=logging.WARNING,
            kind=kind,
            request_seq=self._last_request_seq,
            reason_code=normalize_reason_code(reason_code),
            detail=str(exc) if exc is not None else None,
        )

    async def search_places(self, query: str) -> list[PlaceResult]:
        if not query or len(query) < SEARCH_MIN_QUERY_CHARS:
            log_event("gateway_skipped", level=logging.DEBUG, kind="search", reason_code="query_too_short")
            return []

        try:
            data = await self._request_json(
                "search",
                "GET",
                "/geocode/search",
                params={
                    "api_key": self.api_key,
                    "text": query,
                    "boundary.country": self.country,
                    "size": self.search_size,
                },
            )
            parsed = SearchResponse.model_validate(data)
        except (GatewayError, httpx.HTTPError, ValidationError) as exc:
            self._log_fallback("search", "upstream_unavailable", exc)
            return match_fallback_places(query)

        return [place_from_feature(feature) for feature in parsed.features]

    async def reverse_geocode(self, position: Coordinate) -> AreaLabel:
        try:
            data = await self._request_json(
                "reverse",
                "GET",
                "/geocode/reverse",
                params={
                    "api_key": self.api_key,
                    "point.lat": position.latitude,
                    "point.lon": position.longitude,
                    "size": 1,
                    "boundary.country": self.country,
                },
            )
            parsed = ReverseResponse.model_validate(data)
        except (GatewayError, httpx.HTTPError, ValidationError) as exc:
            self._log_fallback("reverse", "upstream_unavailable", exc)
            return unavailable_label(position)

        if not parsed.features:
            return AreaLabel(short_name="Unknown Location", area_label="Address not found")
        return pick_area_label(parsed.features[0].properties)

    async def fetch_directions(self, start: Coordinate, end: Coordinate) -> Itinerary | None:
        try:
            data = await self._request_json(
                "directions",
                "POST",
                f"/v2/directions/{self.directions_profile}/geojson",
                json_body={
                    "coordinates": [start.as_lon_lat(), end.as_lon_lat()],
                    "instructions": True,
                    "language": "en",
                    "units": "km",
                },
                headers={"Authorization": self.api_key},
            )
            parsed = DirectionsResponse.model_validate(data)
        except (GatewayError, httpx.HTTPError, ValidationError) as exc:
            self._log_fallback("directions", "upstream_unavailable", exc)
            return None

        if not parsed.features:
            self._log_fallback("directions", "upstream_empty")
            return None

        itinerary = directions_to_itinerary(parsed)
        if itinerary is None:
            self._log_fallback("directions", "upstream_invalid_payload")
            return None

        log_event(
            "route_computed",
            mode="live",
            route_id=itinerary.id,
            request_seq=self._last_request_seq,
            distance_km=itinerary.total_distance_km,
            duration_min=itinerary.total_time_minutes,
        )
        return itinerary


def directions_to_itinerary(parsed: DirectionsResponse) -> Itinerary | None:
    """Normalize the first directions feature; None if its line has fewer than two points."""
    feature = parsed.features[0]

    path = tuple(
        Coordinate(float(pt[1]), float(pt[0]))
        for pt in feature.geometry.coordinates
        if len(pt) >= 2
    )
    if len(path) < 2:
        return None

    legs: list[RouteLeg] = []
    for segment in feature.properties.segments:
        for step in segment.steps:
            wp = (list(step.way_points) + [0, 0])[:2]
            legs.append(
                RouteLeg(
                    instruction_text=step.instruction,
                    mode=TransportMode.CAR,
                    # Requested with units=km; step distances come back in km too.
                    distance_meters=step.distance * 1000.0,
                    duration_seconds=step.duration,
                    waypoint_indices=(int(wp[0]), int(wp[1])),
                )
            )

    summary = feature.properties.summary
    dist_km = float(summary.distance)
    return Itinerary(
        id=new_itinerary_id(),
        total_time_minutes=math.ceil(float(summary.duration) / 60.0),
        total_distance_km=round(dist_km, 2),
        total_cost=driving_fare(dist_km),
        path=path,
        legs=tuple(legs),
        category=RouteCategory.FASTEST,
        labels=("Fare", "Distance", "Time"),
    )
