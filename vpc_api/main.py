"""FastAPI application for VPC network plans and deployments."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from vpc_api.routers import config, deployments, plans
from vpc_api.settings import settings
from vpc_infra.errors import NetworkConfigError
from vpc_infra.log_config import get_logger, set_global_log_level

set_global_log_level(getattr(logging, settings.log_level.upper(), logging.INFO))
logger = get_logger(__name__)

app = FastAPI(
    title="VPC Network API",
    description="Preview, store and deploy AWS VPC network plans",
    version="0.1.0",
)

app.include_router(plans.router)
app.include_router(config.router)
app.include_router(deployments.router)


@app.exception_handler(NetworkConfigError)
async def network_config_error_handler(request: Request, exc: NetworkConfigError) -> JSONResponse:
    """Report configuration errors with the offending value and rule."""
    logger.info(f"Rejected configuration on {request.url.path}: {exc.kind}: {exc.message}")
    return JSONResponse(status_code=422, content=exc.to_dict())


@app.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
