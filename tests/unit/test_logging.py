import logging

import pytest
import structlog

from filestore.platform.config import Settings
from filestore.platform.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    service_context,
)


@pytest.fixture
def settings():
    return Settings(APP_NAME="Filestore", APP_ENV="test", LOG_LEVEL="debug", _env_file=None)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    clear_request_context()
    structlog.reset_defaults()


def test_service_context_is_added(settings):
    add_service_context = service_context(settings)

    event = add_service_context(None, "info", {"event": "stored_content"})

    assert event == {"event": "stored_content", "service": "Filestore", "env": "test"}


def test_service_context_does_not_override_event_values(settings):
    event = service_context(settings)(None, "info", {"event": "x", "service": "ipfs"})
    assert event["service"] == "ipfs"


def test_request_context_replaces_previous_request():
    bind_request_context("req-1", method="GET", path="/filestore/fetch/Qm1", hash="Qm1")
    bind_request_context("req-2", method="POST", path="/filestore/store")

    assert structlog.contextvars.get_contextvars() == {
        "request_id": "req-2",
        "method": "POST",
        "path": "/filestore/store",
    }

    clear_request_context()
    assert structlog.contextvars.get_contextvars() == {}


def test_client_loggers_are_quieted(settings):
    configure_logging(settings)

    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("httpcore").level == logging.WARNING
