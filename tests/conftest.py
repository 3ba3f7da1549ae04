import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config environment before any domain is imported."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def _reset_settings():
    """Settings and gateway singletons are module-level; start each test from the environment."""
    from checkout.gateway import reset_gateway as reset_order_gateway
    from shared.settings import reset_settings
    from tracking.gateway import reset_gateway as reset_tracking_gateway

    reset_settings()
    reset_order_gateway()
    reset_tracking_gateway()
    yield
    reset_settings()
    reset_order_gateway()
    reset_tracking_gateway()
