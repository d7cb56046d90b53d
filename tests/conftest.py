import pytest

from corsgate.cors.policy import PolicyConfig, PolicyEngine
from corsgate.utils.logging import logger


@pytest.fixture
def policy_logs(caplog):
    # The package logger does not propagate to root, so attach caplog directly
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)


@pytest.fixture
def make_engine():
    def _make(origins, production: bool = False) -> PolicyEngine:
        return PolicyEngine(PolicyConfig.build(origins, production))

    return _make
