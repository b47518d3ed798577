"""FastAPI application entrypoint for typegen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..errors import ConfigurationError, DiscoveryError, ParseError, TypegenError
from ..generator import generate_types
from ..logging import get_logger
from ..mappers import load_type_name_mapper
from ..models import Options

GenerateFn = Callable[[Options], str]

_STATUS_BY_ERROR = (
    (ConfigurationError, 400),
    (DiscoveryError, 404),
    (ParseError, 422),
)


class GenerateRequest(BaseModel):
    pkg_dir: str
    pkg_path: str = ""
    include: str = ""
    include_type: str = ""
    strip_prefix: bool = False
    disable_rename: bool = False
    mapper: Optional[str] = None


class GenerateResponse(BaseModel):
    content: str


class HealthResponse(BaseModel):
    status: str


def _default_generate(options: Options) -> str:
    return generate_types(options)


def _status_for(exc: TypegenError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


def create_app(generate_fn: GenerateFn = _default_generate) -> FastAPI:
    """Create the FastAPI application exposing typegen generation."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install go-typegen[service]`."
        )

    app = FastAPI(title="Typegen Service", version="1.0.0")
    logger = get_logger("service")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(payload: GenerateRequest) -> GenerateResponse:
        def _run_generate() -> str:
            options = Options(
                pkg_dir=payload.pkg_dir,
                pkg_path=payload.pkg_path,
                include_pattern=payload.include,
                include_type=payload.include_type,
                strip_prefix=payload.strip_prefix,
                disable_rename=payload.disable_rename,
            )
            if payload.mapper and not payload.disable_rename:
                options.type_name_mapper = load_type_name_mapper(payload.mapper)
            return generate_fn(options)

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:  # pragma: no cover - fallback path when not in async context
            content = _run_generate()
        else:
            content = await loop.run_in_executor(None, _run_generate)
        return GenerateResponse(content=content)

    @app.exception_handler(TypegenError)
    async def typegen_error_handler(_: Any, exc: TypegenError) -> JSONResponse:
        status = _status_for(exc)
        logger.warning("Generation request failed (%s): %s", status, exc)
        return JSONResponse(status_code=status, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "0.0.0.0", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(
            "FastAPI is required for service mode. Install it with `pip install go-typegen[service]`."
        )

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    app = create_app()
    uvicorn.run(app, host=host, port=port)
