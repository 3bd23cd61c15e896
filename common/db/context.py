"""
Session context for operation-scoped database access.

A ContextVar holds the session of the enclosing ``transaction()`` block so
repository calls made inside it share one connection. Outside a transaction
each repository call acquires its own short-lived session.
"""

from contextvars import ContextVar
from functools import wraps
from typing import Optional, Callable, TypeVar, ParamSpec

from sqlalchemy.ext.asyncio import AsyncSession

from common.core.telemetry import get_logger

logger = get_logger(__name__)


# =============================================================================
# Context Variables
# =============================================================================

_write_session: ContextVar[Optional[AsyncSession]] = ContextVar(
    "db_write_session", default=None
)

_read_session: ContextVar[Optional[AsyncSession]] = ContextVar(
    "db_read_session", default=None
)

# Forces every operation in this call chain onto the read session
_force_readonly: ContextVar[bool] = ContextVar("db_force_readonly", default=False)


# =============================================================================
# Context Accessors
# =============================================================================


def is_readonly_forced() -> bool:
    return _force_readonly.get()


def get_current_session(readonly: bool = False) -> Optional[AsyncSession]:
    """Return the session of the enclosing transaction, if any."""
    if readonly or is_readonly_forced():
        return _read_session.get()
    return _write_session.get()


def set_current_session(session: AsyncSession, readonly: bool = False) -> object:
    if readonly:
        return _read_session.set(session)
    return _write_session.set(session)


def reset_current_session(token: object, readonly: bool = False) -> None:
    if readonly:
        _read_session.reset(token)
    else:
        _write_session.reset(token)


def in_transaction(readonly: bool = False) -> bool:
    return get_current_session(readonly=readonly) is not None


# =============================================================================
# Decorators
# =============================================================================

P = ParamSpec("P")
T = TypeVar("T")


def readonly(func: Callable[P, T]) -> Callable[P, T]:
    """
    Route every DB operation in the decorated call chain to the read session.

    Usage:
        @readonly
        async def get_usage_stats(resolved):
            ...  # lookups and aggregates only
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        token = _force_readonly.set(True)
        try:
            return await func(*args, **kwargs)
        finally:
            _force_readonly.reset(token)

    return wrapper
