# =============================================================================
# AIG DOCKER CLIENT TESTS
# =============================================================================
# Tests for the Docker connection provider.
# =============================================================================

from unittest.mock import patch

import pytest
from docker.errors import DockerException

from aig.infra.docker_client import DockerProvider, DockerProviderError


class TestDockerProvider:
    """Test DockerProvider."""

    @patch("aig.infra.docker_client.docker")
    def test_connects_from_env(self, mock_docker, monkeypatch):
        monkeypatch.delenv("DOCKER_HOST", raising=False)

        provider = DockerProvider()

        mock_docker.from_env.assert_called_once()
        assert provider.get_client() is mock_docker.from_env.return_value
        assert provider.is_connected()

    @patch("aig.infra.docker_client.docker")
    def test_uses_docker_host(self, mock_docker):
        provider = DockerProvider(docker_host="tcp://docker-proxy:2375")

        mock_docker.DockerClient.assert_called_once_with(base_url="tcp://docker-proxy:2375")
        assert provider.get_client() is mock_docker.DockerClient.return_value

    @patch("aig.infra.docker_client.docker")
    def test_unreachable_daemon(self, mock_docker, monkeypatch):
        monkeypatch.delenv("DOCKER_HOST", raising=False)
        mock_docker.from_env.return_value.ping.side_effect = DockerException("down")

        with pytest.raises(DockerProviderError) as exc_info:
            DockerProvider()
        assert "not available" in str(exc_info.value)

    @patch("aig.infra.docker_client.docker")
    def test_is_connected_false_after_ping_fails(self, mock_docker, monkeypatch):
        monkeypatch.delenv("DOCKER_HOST", raising=False)
        provider = DockerProvider()
        mock_docker.from_env.return_value.ping.side_effect = DockerException("gone")
        assert provider.is_connected() is False

    def test_error_message(self):
        error = DockerProviderError("Container failed")
        assert "Container failed" in str(error)
