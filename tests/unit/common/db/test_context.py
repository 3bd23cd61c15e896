import pytest
import asyncio

from common.db.context import (
    is_readonly_forced,
    get_current_session,
    set_current_session,
    reset_current_session,
    in_transaction,
    readonly,
)


class TestContextVariables:
    """Context variable defaults and task isolation."""

    def test_default_state(self):
        assert is_readonly_forced() is False
        assert get_current_session(readonly=False) is None
        assert get_current_session(readonly=True) is None
        assert in_transaction() is False

    async def test_write_and_read_slots_are_separate(self, test_db):
        token = set_current_session(test_db, readonly=True)
        try:
            assert get_current_session(readonly=True) is test_db
            assert get_current_session(readonly=False) is None
        finally:
            reset_current_session(token, readonly=True)

        assert in_transaction(readonly=True) is False

    async def test_concurrent_tasks_have_isolated_contexts(self, test_db):
        """A session set in one task is not visible to a sibling task."""
        seen = {}

        async def with_session():
            token = set_current_session(test_db)
            await asyncio.sleep(0.01)
            seen["with"] = get_current_session() is test_db
            reset_current_session(token)

        async def without_session():
            await asyncio.sleep(0.005)
            seen["without"] = get_current_session()

        await asyncio.gather(with_session(), without_session())

        assert seen["with"] is True
        assert seen["without"] is None


class TestDecorators:
    """@readonly."""

    async def test_readonly_sets_flag_only_during_call(self):
        captured = None

        @readonly
        async def lookup():
            nonlocal captured
            captured = is_readonly_forced()

        await lookup()

        assert captured is True
        assert is_readonly_forced() is False

    async def test_readonly_resets_on_exception(self):
        @readonly
        async def failing():
            raise ValueError("boom")

        with pytest.raises(ValueError):
            await failing()

        assert is_readonly_forced() is False
