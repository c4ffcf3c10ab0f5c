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
# DOCKERFILE GENERATOR
# -----------------------------------------------------------------------------
# Renders a stack into Dockerfile text and packs it as a build context.
# No reordering, no dedup, no syntax checks: what the layers say is what
# the engine gets.
# -----------------------------------------------------------------------------

import io
import tarfile
from pathlib import Path

from aig.domain.models import Stack

DOCKERFILE_NAME = "Dockerfile"


def generate_dockerfile(stack: Stack) -> str:
    """Every instruction of every layer, in stack order, one per line."""
    return "".join(
        f"{instruction}\n" for layer in stack.layers for instruction in layer.instructions()
    )


def build_context(dockerfile: str, sources: list[str] | None = None) -> io.BytesIO:
    """
    Create an in-memory tar build context.

    Args:
        dockerfile: Dockerfile text, stored as ./Dockerfile.
        sources: Host files referenced by COPY. Each is stored at its own
            path relative to the context root, which is where COPY looks.

    Returns:
        Tar stream rewound to the start.

    Raises:
        FileNotFoundError: If a source file does not exist.
    """
    tar_buffer = io.BytesIO()

    with tarfile.open(fileobj=tar_buffer, mode="w") as tar:
        content = dockerfile.encode("utf-8")
        info = tarfile.TarInfo(name=DOCKERFILE_NAME)
        info.size = len(content)
        info.mode = 0o644
        tar.addfile(info, io.BytesIO(content))

        for source in sources or []:
            path = Path(source)
            if not path.is_file():
                raise FileNotFoundError(f"Build context file not found: {source}")
            arcname = source.lstrip("/").removeprefix("./")
            info = tar.gettarinfo(str(path), arcname=arcname)
            with open(path, "rb") as f:
                tar.addfile(info, f)

    tar_buffer.seek(0)
    return tar_buffer
