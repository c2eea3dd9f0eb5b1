"""
Shared test config
"""
# Third Party
import pytest

# Local
from arangodb_operator.test_helpers.helpers import (
    EventRecorder,
    configure_logging,
    make_api_object,
)

configure_logging()


@pytest.fixture
def api_object():
    """The deployment resource referenced by events"""
    return make_api_object()


@pytest.fixture
def event_recorder():
    """Event sink that keeps every event it receives"""
    return EventRecorder()
