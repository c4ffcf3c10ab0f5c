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
# DOMAIN MODELS - STACKS, PLANS, RUNS
# -----------------------------------------------------------------------------
# Stack: the ordered layer sequence [base, middle..., top?].
# BuildPlan: everything derived from one stack that the Foundry needs.
# RunResult: what a finished run reports back.
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from enum import Enum

from aig.domain.errors import PortSpecError, StackError
from aig.domain.layers import BaseLayer, LayerModel

PROTOCOLS = ("tcp", "udp", "sctp")
DEFAULT_PROTOCOL = "tcp"


@dataclass(frozen=True)
class PortSpec:
    """
    A user-facing port publish spec.

    "8080:80"  -> expose 80/tcp, bind host 8080
    "80"       -> expose 80/tcp, no binding
    "53/udp"   -> expose 53/udp, no binding
    """

    container_port: str
    protocol: str = DEFAULT_PROTOCOL
    host_port: str | None = None

    @classmethod
    def parse(cls, spec: str) -> "PortSpec":
        parts = spec.strip().split(":")
        if len(parts) == 2:
            host_port, container = parts
        elif len(parts) == 1:
            host_port, container = None, parts[0]
        else:
            raise PortSpecError(
                f"Invalid port spec '{spec}'", details="Use HOST:CONTAINER or CONTAINER"
            )

        port, _, protocol = container.partition("/")
        protocol = protocol or DEFAULT_PROTOCOL

        if not port.isdigit():
            raise PortSpecError(f"Invalid container port in '{spec}'")
        if host_port is not None and not host_port.isdigit():
            raise PortSpecError(f"Invalid host port in '{spec}'")
        if protocol not in PROTOCOLS:
            raise PortSpecError(
                f"Unknown protocol '{protocol}' in '{spec}'", details=f"Allowed: {PROTOCOLS}"
            )

        return cls(container_port=port, protocol=protocol, host_port=host_port)

    @property
    def exposed(self) -> str:
        return f"{self.container_port}/{self.protocol}"


def port_mappings(specs: list[str]) -> tuple[list[str], dict[str, list[str]]]:
    """
    Split port specs into exposed ports and host bindings keyed by exposed port.

    One container port may be published on several host ports
    ("8080:80" and "9090:80" both bind); repeated host ports are kept once.
    """
    exposed: list[str] = []
    bindings: dict[str, list[str]] = {}
    for spec in specs:
        port = PortSpec.parse(spec)
        if port.exposed not in exposed:
            exposed.append(port.exposed)
        if port.host_port:
            hosts = bindings.setdefault(port.exposed, [])
            if port.host_port not in hosts:
                hosts.append(port.host_port)
    return exposed, bindings


@dataclass(frozen=True)
class Stack:
    """Ordered layers: exactly one BaseLayer first, then the rest in user order."""

    layers: tuple[LayerModel, ...]

    def __post_init__(self) -> None:
        if not self.layers or not isinstance(self.layers[0], BaseLayer):
            raise StackError("A stack must start with a base layer")
        if any(isinstance(layer, BaseLayer) for layer in self.layers[1:]):
            raise StackError(
                "A stack holds exactly one base layer",
                details="Base-kind layers cannot be used as middle or top layers",
            )

    @property
    def base(self) -> BaseLayer:
        return self.layers[0]

    @property
    def names(self) -> list[str]:
        return [layer.name for layer in self.layers]

    def volumes(self) -> list[str]:
        return [volume for layer in self.layers for volume in layer.volumes]

    def ports(self) -> list[str]:
        return [port for layer in self.layers for port in layer.ports]

    def context_sources(self) -> list[str]:
        return [source for layer in self.layers for source in layer.context_sources()]

    def __len__(self) -> int:
        return len(self.layers)


@dataclass(frozen=True)
class BuildPlan:
    """
    Everything one run needs, derived from a Stack.

    digest is the full SHA-256 and the real cache key; tag is its first
    twelve characters and only names the image.
    """

    dockerfile: str
    digest: str
    tag: str
    image_ref: str
    volumes: list[str] = field(default_factory=list)
    ports: list[str] = field(default_factory=list)
    context_sources: list[str] = field(default_factory=list)


class RunState(str, Enum):
    """States of one build-and-run invocation."""

    START = "start"
    CHECK_CACHE = "check_cache"
    CACHED = "cached"
    BUILDING = "building"
    STARTING = "starting"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """Result of a completed run."""

    image_ref: str
    digest: str
    cached: bool
    container_id: str
    exit_code: int
    states: list[RunState] = field(default_factory=list)
