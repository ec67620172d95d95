import uuid

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator


def parse_cors_origins(raw: str) -> list[str]:
    if raw.strip() == "*":
        return ["*"]
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_service_app(
    *,
    title: str,
    version: str = "0.1.0",
    description: str | None = None,
    cors_origins: str = "*",
    metrics_endpoint: str = "/metrics",
    correlation_header_name: str = "X-Request-ID",
) -> FastAPI:
    app = FastAPI(title=title, version=version, description=description)

    Instrumentator().instrument(app).expose(app, endpoint=metrics_endpoint, include_in_schema=False)

    allow_origins = parse_cors_origins(cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        # Browsers refuse credentials with a wildcard origin
        allow_credentials=allow_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=correlation_header_name,
        generator=lambda: str(uuid.uuid4()),
        update_request_header=True,
    )
    return app
