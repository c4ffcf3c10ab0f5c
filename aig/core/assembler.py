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
# STACK ASSEMBLER
# -----------------------------------------------------------------------------
# [base, named layers in the caller's order..., top?]
# Stops at the first unknown name; a partial stack is never returned.
# -----------------------------------------------------------------------------

from aig.core.registry import LayerRegistry
from aig.domain.layers import BaseLayer, LayerModel
from aig.domain.models import Stack


def assemble_stack(
    registry: LayerRegistry,
    base: BaseLayer,
    layer_names: list[str],
    top_name: str | None = None,
) -> Stack:
    """
    Resolve layer names into an ordered Stack.

    Args:
        registry: Where names are looked up.
        base: The base layer; always first.
        layer_names: Middle layers, kept in the given order. Blank names are skipped.
        top_name: Optional layer appended last (normally a Top or CustomTop layer).

    Raises:
        ResolutionError: For the first name the registry does not know.
        StackError: If a resolved layer is itself a base layer.
    """
    layers: list[LayerModel] = [base]

    for name in layer_names:
        name = name.strip()
        if name:
            layers.append(registry.get(name))

    if top_name and top_name.strip():
        layers.append(registry.get(top_name.strip()))

    return Stack(layers=tuple(layers))
