from datetime import datetime, timezone

import pytest


@pytest.fixture
def fixed_now():
    # Wednesday
    return datetime(2025, 1, 15, 9, 0, 0, tzinfo=timezone.utc)
