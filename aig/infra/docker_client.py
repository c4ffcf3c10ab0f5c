# Copyright 2026 Pramod Kumar Voola
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

# -----------------------------------------------------------------------------
# DOCKER PROVIDER
# -----------------------------------------------------------------------------
# Responsibility: Open and verify the connection to the Docker daemon.
#
# DOCKER_HOST selects a remote or proxied engine; otherwise the local socket
# from the environment is used. Fails fast when nothing answers the ping.
# -----------------------------------------------------------------------------

import os

import docker
from docker import DockerClient
from docker.errors import DockerException
from requests.exceptions import RequestException
from rich.console import Console
from rich.panel import Panel

console = Console()


class DockerProviderError(Exception):
    """Raised when the Docker daemon cannot be reached."""

    pass


class DockerProvider:
    """Docker SDK connection with a liveness check."""

    def __init__(self, docker_host: str | None = None) -> None:
        """
        Connect to Docker.

        Args:
            docker_host: Daemon URL. Defaults to DOCKER_HOST, then the local socket.

        Raises:
            DockerProviderError: If the daemon does not answer.
        """
        self._docker_host = docker_host or os.getenv("DOCKER_HOST")
        self._client: DockerClient | None = None
        self._connect()

    def _connect(self) -> None:
        try:
            if self._docker_host:
                self._client = docker.DockerClient(base_url=self._docker_host)
            else:
                self._client = docker.from_env()
            self._client.ping()
            console.print(
                f"[green][DOCKER] Connected to Docker Engine"
                f"{f' via {self._docker_host}' if self._docker_host else ''}[/green]"
            )
        except (DockerException, RequestException) as e:
            self._client = None
            console.print(
                Panel(
                    "[bold red]CRITICAL: Docker Engine Unavailable[/bold red]\n\n"
                    "1. Start the Docker daemon (or Docker Desktop)\n"
                    "2. Check DOCKER_HOST if you use a remote engine\n"
                    "3. Run aig again",
                    title="SYSTEM HALT",
                    border_style="red",
                )
            )
            raise DockerProviderError(f"Docker Engine is not available: {e}") from e

    def get_client(self) -> DockerClient:
        """
        Get the Docker client.

        Raises:
            DockerProviderError: If the provider never connected.
        """
        if self._client is None:
            raise DockerProviderError("Docker client not initialized")
        return self._client

    def is_connected(self) -> bool:
        """True if Docker is currently reachable."""
        if self._client is None:
            return False
        try:
            self._client.ping()
            return True
        except (DockerException, RequestException):
            return False
