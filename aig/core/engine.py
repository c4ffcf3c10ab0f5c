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
# ENGINE CONTRACT
# -----------------------------------------------------------------------------
# The narrow interface the Foundry drives. The Docker implementation lives
# in aig.infra.docker_engine; tests use a MagicMock with the same shape.
# -----------------------------------------------------------------------------

from typing import BinaryIO, Iterable, Iterator, Protocol


class ContainerEngine(Protocol):
    """Image and container operations of a container engine."""

    def image_exists(self, image_ref: str, digest: str) -> bool:
        """
        True when image_ref exists and was built from this exact digest.

        Raises:
            CacheQueryError: For any failure other than not-found.
        """
        ...

    def build_image(
        self, context: BinaryIO, image_ref: str, labels: dict[str, str]
    ) -> Iterator[str]:
        """
        Build from a tar context; yields build output as it arrives.

        Raises:
            BuildError: If the engine rejects or fails the build.
        """
        ...

    def create_container(
        self,
        image_ref: str,
        exposed_ports: list[str],
        port_bindings: dict[str, list[str]],
        binds: list[str],
    ) -> str:
        """Create a container and return its id. Raises LifecycleError."""
        ...

    def start_container(self, container_id: str) -> None:
        ...

    def stream_logs(self, container_id: str) -> Iterable[bytes]:
        """Follow combined stdout/stderr. Raises LogsError."""
        ...

    def wait_for_exit(self, container_id: str) -> int:
        """Block until the container is not running; return its exit code."""
        ...
