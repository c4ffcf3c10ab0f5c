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
# DOMAIN MODELS - LAYERS
# -----------------------------------------------------------------------------
# A layer is one composable fragment of an image definition. Five kinds exist;
# each one renders its own build instructions and fingerprints its own content.
#
# Both operations are pure: no network or filesystem access at plan time.
# The Foundry is the only component that touches the outside world.
# -----------------------------------------------------------------------------

import hashlib
import json
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

APT_INSTALL = (
    "RUN apt-get update && apt-get install -y {packages} && rm -rf /var/lib/apt/lists/*"
)
REMOTE_SCHEMES = ("http://", "https://")


def content_digest(kind: str, **content: object) -> str:
    """
    SHA-256 over a canonical JSON encoding of a layer's content.

    JSON keeps list boundaries, so ["a", "b"] and ["ab"] never collide,
    and the kind is folded in so two variants with equal fields differ.
    """
    payload = json.dumps({"kind": kind, **content}, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def entrypoint_instruction(args: list[str]) -> str:
    """Exec-form ENTRYPOINT, e.g. ENTRYPOINT ["opencode", "--port", "80"]."""
    return f"ENTRYPOINT {json.dumps(args)}"


class LayerModel(BaseModel):
    """
    Capability set shared by every layer kind.

    Subclasses provide instructions() and fingerprint(); volumes and ports
    are plain fields on every kind except CustomTopLayer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Registry key, unique per registry")

    def instructions(self) -> list[str]:
        raise NotImplementedError

    def fingerprint(self) -> str:
        raise NotImplementedError

    def context_sources(self) -> list[str]:
        """Local files the build context has to carry for this layer."""
        return []


class BaseLayer(LayerModel):
    """The starting point of every stack (FROM ...)."""

    kind: Literal["base"] = "base"
    name: str = "base"
    image: str = Field(..., min_length=1, description="Source image reference, e.g. ubuntu:22.04")
    volumes: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)

    def instructions(self) -> list[str]:
        return [f"FROM {self.image}"]

    def fingerprint(self) -> str:
        return content_digest(self.kind, image=self.image, volumes=self.volumes, ports=self.ports)


class DependencyLayer(LayerModel):
    """Installs system packages with apt and clears the package lists afterwards."""

    kind: Literal["dependency"] = "dependency"
    packages: list[str] = Field(..., min_length=1)
    volumes: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)

    def instructions(self) -> list[str]:
        return [APT_INSTALL.format(packages=" ".join(self.packages))]

    def fingerprint(self) -> str:
        return content_digest(
            self.kind, packages=self.packages, volumes=self.volumes, ports=self.ports
        )


class CustomLayer(LayerModel):
    """Arbitrary instructions, emitted verbatim and in order."""

    kind: Literal["custom"] = "custom"
    commands: list[str] = Field(..., min_length=1)
    volumes: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)

    def instructions(self) -> list[str]:
        return list(self.commands)

    def fingerprint(self) -> str:
        return content_digest(
            self.kind,
            name=self.name,
            commands=self.commands,
            volumes=self.volumes,
            ports=self.ports,
        )


class TopLayer(LayerModel):
    """
    Puts a binary into the image and makes it the entrypoint.

    A URL source is fetched by the engine (ADD); anything else is copied
    from the build context (COPY) and must exist on the host at build time.
    """

    kind: Literal["top"] = "top"
    binary_source: str = Field(..., min_length=1, description="URL or local path of the binary")
    binary_path: str = Field(..., min_length=1, description="Destination inside the image")
    volumes: list[str] = Field(default_factory=list)
    ports: list[str] = Field(default_factory=list)

    @property
    def is_remote(self) -> bool:
        return self.binary_source.startswith(REMOTE_SCHEMES)

    def instructions(self) -> list[str]:
        fetch = "ADD" if self.is_remote else "COPY"
        return [
            f"{fetch} {self.binary_source} {self.binary_path}",
            f"RUN chmod +x {self.binary_path}",
            entrypoint_instruction([self.binary_path]),
        ]

    def fingerprint(self) -> str:
        return content_digest(
            self.kind,
            binary_source=self.binary_source,
            binary_path=self.binary_path,
            volumes=self.volumes,
            ports=self.ports,
        )

    def context_sources(self) -> list[str]:
        return [] if self.is_remote else [self.binary_source]


class CustomTopLayer(LayerModel):
    """
    Arbitrary setup commands plus an optional entrypoint.

    cache_key is folded into the fingerprint next to the name. Bumping it
    (usually to the version of the tool being installed) forces a rebuild
    even when the commands have not changed. No other kind has this hook.
    """

    kind: Literal["custom_top"] = "custom_top"
    commands: list[str] = Field(default_factory=list)
    entrypoint: list[str] = Field(default_factory=list)
    cache_key: str = ""

    @property
    def volumes(self) -> list[str]:
        return []

    @property
    def ports(self) -> list[str]:
        return []

    def instructions(self) -> list[str]:
        instructions = list(self.commands)
        if self.entrypoint:
            instructions.append(entrypoint_instruction(self.entrypoint))
        return instructions

    def fingerprint(self) -> str:
        return content_digest(
            self.kind,
            name=self.name,
            cache_key=self.cache_key,
            commands=self.commands,
            entrypoint=self.entrypoint,
        )


Layer = Annotated[
    Union[BaseLayer, DependencyLayer, CustomLayer, TopLayer, CustomTopLayer],
    Field(discriminator="kind"),
]

# Validates catalog entries like {"kind": "dependency", "name": "go", "packages": ["golang"]}
LAYER_ADAPTER = TypeAdapter(Layer)
