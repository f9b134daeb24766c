import pytest

import ddexport.internal.logger


@pytest.fixture(autouse=True)
def reset_log_rate_limit():
    """Every test starts with empty rate limiting buckets so log assertions are not order dependent."""
    ddexport.internal.logger._buckets.clear()
    try:
        yield
    finally:
        ddexport.internal.logger._buckets.clear()
