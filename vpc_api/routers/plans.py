"""Plan preview endpoints."""

import warnings

from fastapi import APIRouter

from vpc_api.models import PlanRequest, PlanResponse
from vpc_infra.plan import build_network_plan
from vpc_infra.zones import shuffle_zones

router = APIRouter(prefix="/api/v1/plans", tags=["Plans"])


@router.post("", response_model=PlanResponse)
async def preview_plan(request: PlanRequest) -> PlanResponse:
    """Build a network plan without provisioning anything.

    Configuration errors are answered with 422 by the application's
    NetworkConfigError handler.
    """
    config = request.config.to_network_config()
    zones = request.availability_zones
    if zones is None:
        zones = list(config.availability_zones)
    az_pool = shuffle_zones(zones, seed=request.shuffle_seed)

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        plan = build_network_plan(config, az_pool)

    return PlanResponse(
        plan=plan.to_dict(),
        warnings=[str(w.message) for w in caught],
    )
