"""REST API routers."""

from fastapi import FastAPI

from app.endpoints import (
    accounts,
    health,
    info,
    invoke,
    metrics,
    root,
)


def include_routers(app: FastAPI) -> None:
    """Include FastAPI routers for different endpoints.

    Args:
        app: The `FastAPI` app instance.
    """
    app.include_router(root.router)

    app.include_router(info.router, prefix="/v1")
    app.include_router(accounts.router, prefix="/v1")
    app.include_router(invoke.router, prefix="/v1")

    # probes and metrics are not versioned
    app.include_router(health.router)
    app.include_router(metrics.router)
