# =============================================================================
# AIG TAG CALCULATOR TESTS
# =============================================================================
# Determinism, order and content sensitivity of the stack digest.
# =============================================================================

import hashlib
import re

from aig.core.planner import plan_build
from aig.core.tagging import TAG_LENGTH, image_reference, short_tag, stack_digest
from aig.domain.layers import BaseLayer, CustomLayer, DependencyLayer
from aig.domain.models import Stack


# Base(ubuntu:22.04) + Dependency(nginx, port 80)
NGINX_BASE_FINGERPRINT = "26a2904b4ad2e86b37ce92d99b6f4df483eab90e24fce86757726b8beec605d7"
NGINX_LAYER_FINGERPRINT = "b86236fb2ab55c1634e96d3da7dc0422e0618b912b5510788f53a16f102fe73c"
NGINX_STACK_DIGEST = "489caf3ad8439c14237ee1c5324f26695a5ad103a2bdf5895454d7ab77a49695"


def _stack(*layers):
    return Stack(layers=(BaseLayer(image="ubuntu:22.04"), *layers))


class TestStackDigest:
    """Tests for stack_digest."""

    def test_full_width(self, nginx_stack):
        assert re.fullmatch(r"[0-9a-f]{64}", stack_digest(nginx_stack))

    def test_deterministic(self):
        """Separately built but equal stacks hash the same."""
        a = _stack(DependencyLayer(name="nginx", packages=["nginx"], ports=["80"]))
        b = _stack(DependencyLayer(name="nginx", packages=["nginx"], ports=["80"]))
        assert stack_digest(a) == stack_digest(b)

    def test_pinned_nginx_digest(self, nginx_stack):
        """The encoding is part of the cache contract: this value must never drift."""
        assert nginx_stack.layers[0].fingerprint() == NGINX_BASE_FINGERPRINT
        assert nginx_stack.layers[1].fingerprint() == NGINX_LAYER_FINGERPRINT
        assert stack_digest(nginx_stack) == NGINX_STACK_DIGEST
        assert short_tag(NGINX_STACK_DIGEST) == "489caf3ad843"

    def test_running_hash_over_fingerprints(self, nginx_stack):
        """The digest is one SHA-256 fed each fingerprint in order."""
        expected = hashlib.sha256(
            "".join(layer.fingerprint() for layer in nginx_stack.layers).encode()
        ).hexdigest()
        assert stack_digest(nginx_stack) == expected

    def test_order_sensitive(self):
        a = DependencyLayer(name="python", packages=["python3"])
        b = DependencyLayer(name="go", packages=["golang"])
        assert stack_digest(_stack(a, b)) != stack_digest(_stack(b, a))

    def test_content_sensitive(self):
        one = CustomLayer(name="c", commands=["RUN echo 1"])
        two = CustomLayer(name="c", commands=["RUN echo 2"])
        assert stack_digest(_stack(one)) != stack_digest(_stack(two))

    def test_port_changes_digest(self):
        a = DependencyLayer(name="nginx", packages=["nginx"], ports=["80"])
        b = DependencyLayer(name="nginx", packages=["nginx"], ports=["8080:80"])
        assert stack_digest(_stack(a)) != stack_digest(_stack(b))

    def test_base_image_changes_digest(self):
        a = Stack(layers=(BaseLayer(image="ubuntu:22.04"),))
        b = Stack(layers=(BaseLayer(image="ubuntu:24.04"),))
        assert stack_digest(a) != stack_digest(b)


class TestShortTag:
    """Tests for the display tag."""

    def test_truncated_to_twelve(self, nginx_stack):
        digest = stack_digest(nginx_stack)
        tag = short_tag(digest)
        assert TAG_LENGTH == 12
        assert len(tag) == 12
        assert digest.startswith(tag)

    def test_image_reference(self):
        assert image_reference("0123456789ab", repository="aig-image") == "aig-image:0123456789ab"


class TestPlanBuild:
    """End-to-end: stack to build plan."""

    def test_ubuntu_nginx_scenario(self, nginx_stack):
        plan = plan_build(nginx_stack)

        lines = plan.dockerfile.splitlines()
        assert lines[0] == "FROM ubuntu:22.04"
        assert lines[1].startswith("RUN apt-get update && apt-get install -y nginx")
        assert len(lines) == 2

        assert re.fullmatch(r"[0-9a-f]{12}", plan.tag)
        assert plan.digest.startswith(plan.tag)
        assert plan.image_ref == f"aig-image:{plan.tag}"
        assert plan.ports == ["80"]
        assert plan.volumes == []

    def test_plan_is_repeatable(self, nginx_stack):
        assert plan_build(nginx_stack) == plan_build(nginx_stack)
