from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware

from .engine import CommuteEngine
from .geocoding_gateway import GeocodingGateway
from .geo import Coordinate
from .logging_utils import log_event
from .models import (
    CalculatedRoute,
    GraphRouteRequest,
    LiveRouteRequest,
    LocationSearchResponse,
    LocationSuggestion,
    Place,
    PlaceSearchResponse,
    ReverseGeocodeResponse,
    RouteVariantsResponse,
    Terminal,
    TerminalListResponse,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.engine = CommuteEngine(GeocodingGateway.from_settings())
    yield
    await app.state.engine.gateway.aclose()


app = FastAPI(title="Commute Routing & Geocoding Engine", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


def commute_engine(request: Request) -> CommuteEngine:
    engine: CommuteEngine | None = getattr(request.app.state, "engine", None)  # type: ignore[attr-defined]
    if engine is None:
        raise HTTPException(status_code=503, detail="Routing engine not initialised")
    return engine


EngineDep = Annotated[CommuteEngine, Depends(commute_engine)]


@app.get("/")
async def root() -> dict[str, str]:
    return {"message": "Backend is running. Visit /docs for the API UI.", "docs": "/docs"}


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/terminals", response_model=TerminalListResponse)
async def list_terminals(engine: EngineDep) -> TerminalListResponse:
    return TerminalListResponse(terminals=[Terminal.from_info(t) for t in engine.terminals()])


@app.get("/locations/search", response_model=LocationSearchResponse)
async def search_local_locations(engine: EngineDep, q: str = Query("", max_length=200)) -> LocationSearchResponse:
    return LocationSearchResponse(
        results=[LocationSuggestion.from_match(m) for m in engine.search_locations(q)]
    )


@app.post("/route/graph", response_model=CalculatedRoute)
async def route_graph(req: GraphRouteRequest, engine: EngineDep) -> CalculatedRoute:
    itinerary = engine.compute_graph_route(
        req.origin.to_coordinate(),
        req.destination.to_coordinate(),
        req.metric,
    )
    if itinerary is None:
        raise HTTPException(status_code=404, detail="No route found between the selected points")
    return CalculatedRoute.from_itinerary(itinerary)


@app.post("/route/live", response_model=RouteVariantsResponse)
async def route_live(req: LiveRouteRequest, engine: EngineDep) -> RouteVariantsResponse:
    variants = await engine.compute_live_variants(
        req.origin.to_coordinate(),
        req.destination.to_coordinate(),
    )
    if variants is None:
        log_event("live_route_unavailable")
        raise HTTPException(status_code=502, detail="Unable to find route. Please try again.")
    return RouteVariantsResponse.from_variants(variants)


@app.get("/places/search", response_model=PlaceSearchResponse)
async def search_places(engine: EngineDep, q: str = Query("", max_length=200)) -> PlaceSearchResponse:
    places = await engine.search(q)
    return PlaceSearchResponse(results=[Place.from_result(p) for p in places])


@app.get("/places/reverse", response_model=ReverseGeocodeResponse)
async def reverse_place(engine: EngineDep, lat: float, lng: float) -> ReverseGeocodeResponse:
    label = await engine.reverse_geocode(Coordinate(lat, lng))
    return ReverseGeocodeResponse.from_label(label)
