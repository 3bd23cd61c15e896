"""
Billing package - plans, subscriptions, entitlements, usage, and quota gates.

Subscriptions are written by payment collaborator notifications; everything
else is derived from identity and usage state at request time.
"""
