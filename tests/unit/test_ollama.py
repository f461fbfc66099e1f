"""Unit tests for Ollama helpers."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from qurse.core.ollama import get_available_models, get_ollama_url


@pytest.mark.unit
class TestGetOllamaUrl:
    """Tests for get_ollama_url()."""

    def test_configured_wins(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "http://env:11434")
        assert get_ollama_url("http://cfg:11434/") == "http://cfg:11434"

    def test_env_host_without_scheme(self, monkeypatch):
        monkeypatch.setenv("OLLAMA_HOST", "gpu-box:11434")
        assert get_ollama_url() == "http://gpu-box:11434"

    def test_default(self, monkeypatch):
        monkeypatch.delenv("OLLAMA_HOST", raising=False)
        assert get_ollama_url() == "http://localhost:11434"


@pytest.mark.unit
class TestGetAvailableModels:
    """Tests for get_available_models()."""

    @patch("qurse.core.ollama.requests.get")
    def test_sorted_names(self, mock_get):
        mock_get.return_value = MagicMock(
            status_code=200,
            json=MagicMock(return_value={"models": [{"name": "b"}, {"name": "a"}]}),
        )
        assert get_available_models("http://x:1") == ["a", "b"]
        mock_get.assert_called_once_with("http://x:1/api/tags", timeout=2)

    @patch("qurse.core.ollama.requests.get")
    def test_server_down(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")
        assert get_available_models("http://x:1") == []

    @patch("qurse.core.ollama.requests.get")
    def test_bad_status(self, mock_get):
        mock_get.return_value = MagicMock(status_code=500)
        assert get_available_models("http://x:1") == []

    @patch("qurse.core.ollama.requests.get")
    def test_malformed_payload(self, mock_get):
        mock_get.return_value = MagicMock(
            status_code=200, json=MagicMock(return_value={"models": [{}]})
        )
        assert get_available_models("http://x:1") == []
