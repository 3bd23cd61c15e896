from fastapi import APIRouter

from api.v1.routes import (
    health,
)
from packages.identities.routes import identities
from packages.wallets.routes import wallets
from packages.billing.routes import billing, webhooks, plans

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["health"])

# Webhooks (shared secret verified internally)
api_router.include_router(webhooks.router, tags=["webhooks"])

# Plans (public pricing info)
api_router.include_router(plans.router, prefix="/billing/plans", tags=["billing"])

# Identity registration and resolution
api_router.include_router(
    identities.router, prefix="/identities", tags=["identities"]
)

# Wallet portfolios
api_router.include_router(wallets.router, prefix="/wallets", tags=["wallets"])

# Entitlement, usage, quota, and transactions
api_router.include_router(billing.router, prefix="/billing", tags=["billing"])
