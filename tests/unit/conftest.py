"""
Unit test fixtures. Pure snapshots and the in-memory gateway; no HTTP app.
"""
import pytest

from learning.entities import Completion


@pytest.fixture
def done():
    """Completion records for user u1 over the given module ids."""
    def _done(*module_ids: str) -> frozenset:
        return frozenset(Completion(user_id="u1", module_id=m) for m in module_ids)
    return _done
