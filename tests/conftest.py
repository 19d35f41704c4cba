"""
Global test configuration and shared fixtures.
"""

import copy
import logging
import os

import pytest

from jsonsalvage.telemetry import StageCounter, TelemetryContext


# --- Environment Isolation (Autouse) ---
@pytest.fixture(autouse=True)
def isolate_jsonsalvage_env(request, monkeypatch):
    """Ensure a clean JSONSALVAGE_* environment for each test.

    Escape hatch: @pytest.mark.allow_env_pollution keeps the current env.
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return

    for key in list(os.environ.keys()):
        if key.startswith("JSONSALVAGE_"):
            monkeypatch.delenv(key, raising=False)
    # Avoid DEBUG toggles switching telemetry on
    monkeypatch.delenv("DEBUG", raising=False)


# --- Logging Fixtures ---
@pytest.fixture(scope="session", autouse=True)
def quiet_library_logging():
    """Keep pipeline warnings out of test output unless caplog asks for them."""
    logging.getLogger("jsonsalvage").setLevel(logging.ERROR)


# --- Test Environment Markers ---
def pytest_configure(config):
    """Configure custom markers for test organization."""
    markers = [
        "unit: Fast, isolated unit tests",
        "integration: Pipeline tests that exercise several modules together",
        "allow_env_pollution: Keep JSONSALVAGE_* variables from the real environment",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)


# --- Core Fixtures ---


@pytest.fixture
def stage_counter():
    """Reporter that counts which telemetry scopes ran."""
    return StageCounter()


@pytest.fixture
def counting_telemetry(stage_counter):
    """Telemetry context wired to stage_counter, regardless of environment."""
    return TelemetryContext(stage_counter, enabled=True)


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    return FakeClock()


_SAMPLE_ANALYSIS = {
    "contractType": "Record Label Agreement",
    "overallFairness": 0.42,
    "summary": "Standard 360 deal with aggressive recoupment terms.",
    "componentRatings": [
        {
            "name": "Royalty Rate",
            "rating": 0.3,
            "details": "16% of net receipts is below market.",
            "industryComparison": "Independent deals commonly start at 18-20%.",
        }
    ],
    "concernAreas": [
        {
            "title": "Cross-Collateralization",
            "description": "Album 2 earnings can be used to recoup Album 1 costs.",
            "suggestion": "Ask for separate royalty accounts per album.",
            "severityLevel": "High",
            "clauseText": "Section 7.2 Recoupment applies across all recordings.",
        }
    ],
    "keyTerms": [
        {"name": "Term", "value": "1 album plus 2 options"},
        {"name": "Territory", "value": "Worldwide"},
    ],
}


@pytest.fixture
def sample_analysis():
    """A well-formed contract analysis as the AI service returns it."""
    return copy.deepcopy(_SAMPLE_ANALYSIS)


@pytest.fixture
def sample_contract_text():
    return (
        "This Recording Agreement is entered into between the Label and the Artist. "
        "The Artist grants the Label exclusive rights to master recordings for the Term."
    )
