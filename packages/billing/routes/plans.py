"""
Plans API routes.

Public endpoint for the plan catalogue.
"""

from fastapi import APIRouter

from packages.billing.services.plans_service import PlansService
from packages.billing.models.domain.plans import PlansResponse

router = APIRouter()


@router.get("", response_model=PlansResponse)
async def get_plans():
    """
    Get all subscription plans.

    Returns price, query limit, wallet allowance, and transaction volume
    limit for each plan.
    """
    return await PlansService().get_all_plans()
