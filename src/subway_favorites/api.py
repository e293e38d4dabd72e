"""FastAPI web interface for subway favorites."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import API_HOST, API_PORT, LOG_LEVEL
from .errors import (
    DuplicateFavoriteError,
    FavoriteNotFoundError,
    NoRouteError,
    SameStationError,
    StationNotFoundError,
)
from .favorites import FavoritePath
from .logging_config import setup_logging
from .routing import PathType, ResolvedPath
from .service import FavoriteResolutionService, create_service
from .stations import Station


class FavoritePathRequest(BaseModel):
    source: str
    target: str
    type: PathType = PathType.DISTANCE

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, value):
        return PathType.of(value)


class StationResponse(BaseModel):
    id: int
    name: str

    @classmethod
    def of(cls, station: Station) -> StationResponse:
        return cls(id=station.id, name=station.name)


class PathResponse(BaseModel):
    type: PathType
    stations: list[StationResponse]
    distance: float
    duration: float
    transfers: int


class StationPathResponse(BaseModel):
    id: int
    source: StationResponse
    target: StationResponse
    path: PathResponse


class FavoritePathResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    favorite_paths: list[StationPathResponse] = Field(alias="favoritePaths")


def get_service(request: Request) -> FavoriteResolutionService:
    return request.app.state.service


def current_member(x_member_id: Optional[str] = Header(default=None)) -> str:
    """Member id forwarded by the authentication gateway."""
    if not x_member_id or not x_member_id.strip():
        raise HTTPException(status_code=401, detail="Invalid token!")
    return x_member_id.strip()


def _path_response(service: FavoriteResolutionService, path: ResolvedPath) -> PathResponse:
    return PathResponse(
        type=path.path_type,
        stations=[StationResponse.of(s) for s in service.stations_on(path)],
        distance=path.distance,
        duration=path.duration,
        transfers=path.transfer_count,
    )


def _favorite_response(service: FavoriteResolutionService, favorite: FavoritePath) -> StationPathResponse:
    return StationPathResponse(
        id=favorite.id,
        source=StationResponse.of(favorite.source),
        target=StationResponse.of(favorite.target),
        path=_path_response(service, favorite.path),
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errorMessage": message})


def create_app(service: Optional[FavoriteResolutionService] = None) -> FastAPI:
    """Build the application around `service` (the configured one by default)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "service", None) is None:
            app.state.service = create_service()
        yield
        app.state.service.close()

    app = FastAPI(
        title="Subway Favorites",
        description="Favorite subway paths resolved against the network graph",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.service = service

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Starlette raises its own class for unknown routes and methods
    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError):
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"][1:])
        message = f"{field}: {error['msg']}" if field else error["msg"]
        return _error(400, message)

    @app.exception_handler(StationNotFoundError)
    async def station_not_found(request: Request, exc: StationNotFoundError):
        return _error(404, str(exc))

    @app.exception_handler(NoRouteError)
    async def no_route(request: Request, exc: NoRouteError):
        return _error(404, "No route found")

    @app.exception_handler(SameStationError)
    async def same_station(request: Request, exc: SameStationError):
        return _error(400, str(exc))

    @app.exception_handler(DuplicateFavoriteError)
    async def duplicate_favorite(request: Request, exc: DuplicateFavoriteError):
        return _error(409, str(exc))

    # Covers ForbiddenError too: another member's favorite looks missing
    @app.exception_handler(FavoriteNotFoundError)
    async def favorite_not_found(request: Request, exc: FavoriteNotFoundError):
        return _error(404, f"Favorite path not found: {exc.favorite_id}")

    @app.get("/")
    async def root():
        """Health check endpoint."""
        return {"status": "ok", "service": "Subway Favorites"}

    @app.get("/stations")
    def list_stations(service: FavoriteResolutionService = Depends(get_service)):
        stations = service.graph.stations
        return {
            "count": len(stations),
            "stations": [StationResponse.of(s) for s in stations],
        }

    @app.get("/paths", response_model=PathResponse)
    def find_path(
        source: str,
        target: str,
        type: str = PathType.DISTANCE.value,
        service: FavoriteResolutionService = Depends(get_service),
    ):
        try:
            path_type = PathType.of(type)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        path = service.find_path(source, target, path_type)
        return _path_response(service, path)

    @app.post("/favorite/me", status_code=status.HTTP_201_CREATED, response_model=StationPathResponse)
    def register_favorite(
        request: FavoritePathRequest,
        response: Response,
        member_id: str = Depends(current_member),
        service: FavoriteResolutionService = Depends(get_service),
    ):
        favorite = service.register_favorite(member_id, request.source, request.target, request.type)
        response.headers["Location"] = f"/favorite/me/{favorite.id}"
        return _favorite_response(service, favorite)

    @app.get("/favorite/me", response_model=FavoritePathResponse)
    def retrieve_favorites(
        member_id: str = Depends(current_member),
        service: FavoriteResolutionService = Depends(get_service),
    ):
        favorites = service.retrieve_favorites(member_id)
        return FavoritePathResponse(favorite_paths=[_favorite_response(service, f) for f in favorites])

    @app.delete("/favorite/me/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_favorite(
        favorite_id: int,
        member_id: str = Depends(current_member),
        service: FavoriteResolutionService = Depends(get_service),
    ):
        service.delete_favorite(member_id, favorite_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app


def run_server(host: str = API_HOST, port: int = API_PORT):
    """Run the FastAPI server."""
    import uvicorn
    setup_logging(LOG_LEVEL)
    uvicorn.run(create_app(), host=host, port=port)


if __name__ == "__main__":
    run_server()
