import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _reset_throttle_counters():
    # throttle history lives in the locmem cache and would leak across tests
    cache.clear()
    yield
