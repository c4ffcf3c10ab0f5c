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
# DOCKER ENGINE
# -----------------------------------------------------------------------------
# Responsibility: The ContainerEngine contract on top of the Docker SDK.
#
# The low-level API client is used for build (to stream a custom tar context)
# and for create (to expose ports without publishing them). SDK exceptions are
# translated here into the aig error taxonomy.
# -----------------------------------------------------------------------------

from typing import BinaryIO, Iterable, Iterator

from docker import DockerClient
from docker.errors import DockerException, ImageNotFound
from requests.exceptions import RequestException
from rich.console import Console

from aig.core.tagging import DIGEST_LABEL
from aig.domain.errors import BuildError, CacheQueryError, LifecycleError, LogsError

console = Console()

BIND_ADDRESS = "0.0.0.0"
ENGINE_ERRORS = (DockerException, RequestException)


def _exposed_port(spec: str) -> tuple[int, str]:
    """'80/tcp' -> (80, 'tcp'), the form create_container expects."""
    port, _, protocol = spec.partition("/")
    return int(port), protocol or "tcp"


class DockerEngine:
    """ContainerEngine backed by a DockerClient."""

    def __init__(self, client: DockerClient) -> None:
        self._client = client

    def image_exists(self, image_ref: str, digest: str) -> bool:
        try:
            image = self._client.images.get(image_ref)
        except ImageNotFound:
            return False
        except ENGINE_ERRORS as e:
            raise CacheQueryError(f"Image lookup failed for {image_ref}", details=str(e)) from e

        labels = image.labels or {}
        if labels.get(DIGEST_LABEL) != digest:
            console.print(
                f"[yellow][DOCKER] {image_ref} was built from another stack, rebuilding[/yellow]"
            )
            return False
        return True

    def build_image(
        self, context: BinaryIO, image_ref: str, labels: dict[str, str]
    ) -> Iterator[str]:
        try:
            for chunk in self._client.api.build(
                fileobj=context,
                custom_context=True,
                tag=image_ref,
                labels=labels,
                rm=True,
                decode=True,
            ):
                if chunk.get("error"):
                    raise BuildError(
                        f"Build failed for {image_ref}", details=str(chunk["error"]).strip()
                    )
                if chunk.get("stream"):
                    yield chunk["stream"]
                elif chunk.get("status"):
                    yield f"{chunk['status']}\n"
        except ENGINE_ERRORS as e:
            raise BuildError(f"Build failed for {image_ref}", details=str(e)) from e

    def create_container(
        self,
        image_ref: str,
        exposed_ports: list[str],
        port_bindings: dict[str, list[str]],
        binds: list[str],
    ) -> str:
        try:
            host_config = self._client.api.create_host_config(
                binds=binds or None,
                port_bindings={
                    port: [(BIND_ADDRESS, int(host_port)) for host_port in host_ports]
                    for port, host_ports in port_bindings.items()
                }
                or None,
            )
            container = self._client.api.create_container(
                image_ref,
                ports=[_exposed_port(port) for port in exposed_ports],
                host_config=host_config,
                tty=True,
            )
        except ENGINE_ERRORS as e:
            raise LifecycleError(
                f"Could not create container from {image_ref}", phase="create", details=str(e)
            ) from e
        return container["Id"]

    def start_container(self, container_id: str) -> None:
        try:
            self._client.api.start(container_id)
        except ENGINE_ERRORS as e:
            raise LifecycleError(
                f"Could not start container {container_id[:12]}", phase="start", details=str(e)
            ) from e

    def stream_logs(self, container_id: str) -> Iterable[bytes]:
        try:
            return self._client.api.logs(
                container_id, stdout=True, stderr=True, stream=True, follow=True
            )
        except ENGINE_ERRORS as e:
            raise LogsError(f"No logs for container {container_id[:12]}", details=str(e)) from e

    def wait_for_exit(self, container_id: str) -> int:
        try:
            result = self._client.api.wait(container_id, condition="not-running")
        except ENGINE_ERRORS as e:
            raise LifecycleError(
                f"Waiting for container {container_id[:12]} failed", phase="wait", details=str(e)
            ) from e

        error = result.get("Error") or {}
        if error.get("Message"):
            raise LifecycleError(
                f"Container {container_id[:12]} wait error", phase="wait", details=error["Message"]
            )
        return int(result.get("StatusCode", -1))
