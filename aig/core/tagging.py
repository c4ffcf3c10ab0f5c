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
# TAG CALCULATOR
# -----------------------------------------------------------------------------
# One running SHA-256 over the layer fingerprints in stack order, so the
# result depends on both content and order.
#
# The full digest is the cache key. The 12-character tag only names the
# image; the full digest rides along as an image label and is compared on
# every cache hit, so a truncated-tag collision rebuilds instead of reusing.
# -----------------------------------------------------------------------------

import hashlib
import os

from aig.domain.models import Stack

TAG_LENGTH = 12
IMAGE_REPOSITORY = os.getenv("AIG_IMAGE_REPOSITORY", "aig-image")
DIGEST_LABEL = "aig.stack-digest"


def stack_digest(stack: Stack) -> str:
    """Full hex digest of the stack (64 characters)."""
    h = hashlib.sha256()
    for layer in stack.layers:
        h.update(layer.fingerprint().encode("utf-8"))
    return h.hexdigest()


def short_tag(digest: str) -> str:
    return digest[:TAG_LENGTH]


def image_reference(tag: str, repository: str = IMAGE_REPOSITORY) -> str:
    return f"{repository}:{tag}"
