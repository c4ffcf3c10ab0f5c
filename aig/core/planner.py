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
# BUILD PLANNER
# -----------------------------------------------------------------------------
# Stack -> BuildPlan. Pure; the Foundry does the I/O.
# -----------------------------------------------------------------------------

from aig.core.dockerfile import generate_dockerfile
from aig.core.tagging import image_reference, short_tag, stack_digest
from aig.domain.models import BuildPlan, Stack, port_mappings


def plan_build(stack: Stack) -> BuildPlan:
    """
    Derive the Dockerfile, digest, tag and merged run options of a stack.

    Raises:
        PortSpecError: If any layer carries a malformed port spec.
    """
    ports = stack.ports()
    port_mappings(ports)  # raises PortSpecError on a malformed spec

    digest = stack_digest(stack)
    tag = short_tag(digest)

    return BuildPlan(
        dockerfile=generate_dockerfile(stack),
        digest=digest,
        tag=tag,
        image_ref=image_reference(tag),
        volumes=stack.volumes(),
        ports=ports,
        context_sources=stack.context_sources(),
    )
