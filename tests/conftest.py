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
    """Pytest hook to run before collecting tests.

    Selects the configuration environment before any domain is initialized.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def _test_logging(request):
    """Route structlog through stdlib at the level the selected environment calls for."""
    from commerce.config import CommerceSettings
    from commerce.utils.logging import configure_logging

    configure_logging(CommerceSettings(environment=request.config.option.env))


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep settings read from the developer's shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("KALAKART_") or name in ("PAYMENT_GATEWAY", "LOG_LEVEL"):
            monkeypatch.delenv(name)
