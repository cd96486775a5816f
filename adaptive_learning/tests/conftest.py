"""
This module provides test fixtures for the backend tests.
"""

import pytest

from adaptive_learning import llm_client


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch, tmp_path):
    """Pin configuration: fallback mode on, history written to a temp file"""
    # No usable key unless a test opts into AI mode
    monkeypatch.setattr(llm_client, "API_KEY", "")
    monkeypatch.setattr(llm_client, "MODEL", "gemini-1.5-flash")
    monkeypatch.setattr(llm_client, "BASE_URL", "https://generativelanguage.googleapis.com/v1beta")

    history_path = tmp_path / "session_history.json"
    monkeypatch.setenv("SESSION_HISTORY_PATH", str(history_path))

    yield history_path


@pytest.fixture
def ai_mode(monkeypatch):
    """Configure a real-looking API key so routes go upstream"""
    monkeypatch.setattr(llm_client, "API_KEY", "test-api-key")
    return "test-api-key"
