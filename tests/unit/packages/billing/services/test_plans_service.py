import pytest
from decimal import Decimal

from packages.billing.services.plans_service import PlansService


@pytest.mark.asyncio
class TestPlansService:
    async def test_all_plans_listed(self):
        response = await PlansService().get_all_plans()

        assert [p.plan for p in response.plans] == ["free", "basic", "pro", "premium"]

    async def test_plan_info(self):
        response = await PlansService().get_all_plans()
        plans = {p.plan: p for p in response.plans}

        assert plans["free"].price_formatted == "$0"
        assert plans["premium"].price_formatted == "$3,699"
        assert plans["pro"].txn_limit == Decimal("20000")
        assert plans["pro"].features == [
            "15,000 queries per month",
            "3 wallets",
            "$20,000 monthly transaction volume",
        ]
        assert plans["premium"].features[-1] == "Unlimited transaction volume"
        assert plans["basic"].features[1] == "1 wallet"
