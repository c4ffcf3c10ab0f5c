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
# THE REGISTRY - LAYER LOOKUP
# -----------------------------------------------------------------------------
# Responsibility: name -> layer lookup. Built once at startup, then only read.
#
# The registry is an explicit value handed to the assembler; there is no
# module-level registry. Conflicts are last-write-wins.
# -----------------------------------------------------------------------------

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError
from rich.console import Console

from aig.domain.errors import CatalogError, ResolutionError
from aig.domain.layers import LAYER_ADAPTER, LayerModel

console = Console()


class LayerRegistry:
    """Name -> layer mapping."""

    def __init__(self, layers: list[LayerModel] | None = None) -> None:
        self._layers: dict[str, LayerModel] = {}
        for layer in layers or []:
            self.register(layer)

    def register(self, layer: LayerModel) -> None:
        """Insert a layer, replacing any earlier one with the same name."""
        if layer.name in self._layers:
            console.print(f"[yellow][REGISTRY] Overriding layer: {layer.name}[/yellow]")
        self._layers[layer.name] = layer

    def get(self, name: str) -> LayerModel:
        """
        Look up a layer by name.

        Raises:
            ResolutionError: If no layer is registered under that name.
        """
        try:
            return self._layers[name]
        except KeyError:
            raise ResolutionError(name) from None

    def list(self) -> list[str]:
        return list(self._layers)

    def __contains__(self, name: object) -> bool:
        return name in self._layers

    def __len__(self) -> int:
        return len(self._layers)


class CatalogFile(BaseModel):
    """
    Pydantic model for a YAML layer catalog.

    layers:
      - kind: dependency
        name: redis
        packages: [redis-server]
        ports: ["6379"]
    """

    layers: list[dict] = Field(default_factory=list)


def load_catalog(registry: LayerRegistry, path: Path) -> int:
    """
    Register every layer declared in a YAML catalog.

    Args:
        registry: Registry to populate. Entries override same-named layers.
        path: Catalog file.

    Returns:
        Number of layers registered.

    Raises:
        CatalogError: If the file is missing, is not YAML, or holds an invalid layer.
    """
    if not path.exists():
        raise CatalogError(f"Catalog not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        catalog = CatalogFile(**data)
        layers = [LAYER_ADAPTER.validate_python(entry) for entry in catalog.layers]
    except (yaml.YAMLError, ValidationError, TypeError) as e:
        console.print(f"[red][REGISTRY] Invalid catalog {path}[/red]")
        raise CatalogError(f"Invalid catalog {path}", details=str(e)) from e

    for layer in layers:
        registry.register(layer)

    console.print(f"[green][REGISTRY] Catalog loaded: {len(layers)} layers from {path}[/green]")
    return len(layers)
