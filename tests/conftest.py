# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading

import pytest

from tests.helpers import User, int_compare, str_compare


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "stress: mark test as a stress test")
    config.addinivalue_line("markers", "property: mark test as a property-based test")


@pytest.fixture
def key_compare():
    """Ascending string key comparator."""
    return str_compare


@pytest.fixture
def val_compare():
    """Ascending integer value comparator."""
    return int_compare


@pytest.fixture
def abc_map():
    """Unordered three-entry map used by most ordering tests."""
    return {"c": 3, "a": 1, "b": 2}


@pytest.fixture
def ordered_collection(abc_map, key_compare):
    """A MapCollection over abc_map with a key comparator, index not built yet."""
    from collectkit.core.map_collection import MapCollection
    from collectkit.core.options import with_key_compare

    return MapCollection(abc_map, with_key_compare(key_compare))


@pytest.fixture
def users():
    """A few User records in no particular order."""
    return [
        User("carol", 35, 7.5),
        User("alice", 30, 9.0),
        User("bob", 25, 6.0),
    ]


@pytest.fixture
def safe_collection(abc_map, key_compare):
    """A SafeMapCollection over abc_map with a key comparator."""
    from collectkit.core.options import with_key_compare
    from collectkit.runtime.safe_collection import SafeMapCollection

    return SafeMapCollection(dict(abc_map), with_key_compare(key_compare))


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive():
            thread.join(timeout=1.0)
