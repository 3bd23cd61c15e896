"""Service for the static plan catalogue."""

from common.core.telemetry import trace_span, get_logger
from packages.billing.models.domain.enums import PlanName
from packages.billing.models.domain.plans import Plan, PlanInfo, PlansResponse, get_plan

logger = get_logger(__name__)

# Display metadata not carried by the enum
PLAN_METADATA = {
    PlanName.FREE: {
        "name": "Free",
        "description": "Free trial and a small monthly allowance",
    },
    PlanName.BASIC: {
        "name": "Basic",
        "description": "For individual wallets",
    },
    PlanName.PRO: {
        "name": "Pro",
        "description": "Multiple wallets and higher volume",
    },
    PlanName.PREMIUM: {
        "name": "Premium",
        "description": "Unlimited transaction volume",
    },
}


class PlansService:
    """Service for retrieving plan information."""

    @trace_span
    async def get_all_plans(self) -> PlansResponse:
        """Get all plans with pricing and limits."""
        return PlansResponse(
            plans=[self._build_plan_info(get_plan(name)) for name in PlanName]
        )

    def _build_plan_info(self, plan: Plan) -> PlanInfo:
        metadata = PLAN_METADATA[plan.name]

        price_dollars = plan.price_cents / 100
        if plan.price_cents == 0:
            price_formatted = "$0"
        elif price_dollars == int(price_dollars):
            price_formatted = f"${int(price_dollars):,}"
        else:
            price_formatted = f"${price_dollars:,.2f}"

        return PlanInfo(
            plan=plan.name.value,
            name=metadata["name"],
            description=metadata["description"],
            price_cents=plan.price_cents,
            price_formatted=price_formatted,
            billing_period="month",
            query_limit=plan.query_limit,
            max_wallets=plan.max_wallets,
            txn_limit=plan.txn_limit,
            features=self._build_features_list(plan),
        )

    def _build_features_list(self, plan: Plan) -> list[str]:
        """Human-readable features from limits."""
        wallets = plan.max_wallets
        volume = (
            "Unlimited transaction volume"
            if plan.txn_limit is None
            else f"${plan.txn_limit:,.0f} monthly transaction volume"
        )
        return [
            f"{plan.query_limit:,} queries per month",
            f"{wallets} wallet{'s' if wallets != 1 else ''}",
            volume,
        ]
