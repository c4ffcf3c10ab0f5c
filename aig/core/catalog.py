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
# DEFAULT CATALOG
# -----------------------------------------------------------------------------
# The built-in layers. Extra layers come from a YAML catalog (AIG_CATALOG)
# and win over these on name conflicts.
# -----------------------------------------------------------------------------

import os
from pathlib import Path

from aig.core.registry import LayerRegistry, load_catalog
from aig.domain.layers import (
    APT_INSTALL,
    CustomLayer,
    CustomTopLayer,
    DependencyLayer,
    LayerModel,
    TopLayer,
)

NODE_APT = APT_INSTALL.format(packages="nodejs npm")

DEFAULT_LAYERS: list[LayerModel] = [
    DependencyLayer(name="python", packages=["python3", "python3-pip"]),
    DependencyLayer(name="node", packages=["nodejs", "npm"]),
    DependencyLayer(name="go", packages=["golang"]),
    DependencyLayer(name="nginx", packages=["nginx"], ports=["80"]),
    CustomLayer(
        name="node-pnpm",
        commands=[NODE_APT, "RUN npm install -g pnpm"],
    ),
    CustomTopLayer(
        name="opencode",
        commands=[NODE_APT, "RUN npm install -g pnpm", "RUN pnpm add -g opencode-ai"],
        entrypoint=["opencode"],
        cache_key="v1.1.59",  # opencode release
    ),
    TopLayer(
        name="hello-world",
        binary_source="https://github.com/docker-library/hello-world/raw/master/hello",
        binary_path="/hello",
    ),
]


def default_registry(catalog_path: Path | None = None) -> LayerRegistry:
    """
    Build the process registry: built-ins first, then the YAML catalog.

    Args:
        catalog_path: Optional catalog file. Falls back to AIG_CATALOG.
    """
    registry = LayerRegistry(DEFAULT_LAYERS)

    if catalog_path is None and os.getenv("AIG_CATALOG"):
        catalog_path = Path(os.environ["AIG_CATALOG"])
    if catalog_path is not None:
        load_catalog(registry, catalog_path)

    return registry
