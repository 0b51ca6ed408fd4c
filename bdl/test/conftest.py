"""
pytest configuration.
Sets up Python path so that 'from bdl...' imports resolve, and provides
a mocked store client.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add the repository root to Python path
repo_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(repo_root))

QUERY_METHODS = (
    "select", "eq", "ilike", "in_", "not_null", "order", "limit",
    "single", "maybe_single", "insert", "update", "delete",
)


def make_store(result=None):
    """
    Mocked StoreClient whose query builder chains and returns `result`.

    `result` may be a list of successive results (side_effect) when passed
    as a tuple.
    """
    query = MagicMock(name="query")
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    if isinstance(result, tuple):
        query.execute.side_effect = list(result)
    else:
        query.execute.return_value = [] if result is None else result

    store = MagicMock(name="store")
    store.table.return_value = query
    store.query = query
    return store


@pytest.fixture
def store_factory():
    return make_store
