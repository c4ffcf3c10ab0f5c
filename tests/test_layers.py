# =============================================================================
# AIG LAYER TESTS
# =============================================================================
# Instructions and fingerprints of the five layer kinds.
# =============================================================================

import re

import pytest
from pydantic import ValidationError

from aig.domain.layers import (
    LAYER_ADAPTER,
    BaseLayer,
    CustomLayer,
    CustomTopLayer,
    DependencyLayer,
    TopLayer,
)

HEX64 = re.compile(r"^[0-9a-f]{64}$")


class TestBaseLayer:
    """Tests for BaseLayer."""

    def test_from_instruction(self):
        """Base layer renders a single FROM."""
        layer = BaseLayer(image="ubuntu:22.04")
        assert layer.instructions() == ["FROM ubuntu:22.04"]

    def test_name_is_base(self):
        """Base layer is always called 'base'."""
        assert BaseLayer(image="alpine").name == "base"

    def test_fingerprint_is_sha256_hex(self):
        assert HEX64.match(BaseLayer(image="ubuntu:22.04").fingerprint())

    def test_fingerprint_tracks_volumes_and_ports(self):
        """Changing a volume or a port changes the fingerprint."""
        plain = BaseLayer(image="ubuntu:22.04")
        with_volume = BaseLayer(image="ubuntu:22.04", volumes=["/data:/data"])
        with_port = BaseLayer(image="ubuntu:22.04", ports=["8080:80"])
        assert len({plain.fingerprint(), with_volume.fingerprint(), with_port.fingerprint()}) == 3


class TestDependencyLayer:
    """Tests for DependencyLayer."""

    def test_single_install_instruction(self):
        layer = DependencyLayer(name="python", packages=["python3", "python3-pip"])
        assert layer.instructions() == [
            "RUN apt-get update && apt-get install -y python3 python3-pip"
            " && rm -rf /var/lib/apt/lists/*"
        ]

    def test_fingerprint_ignores_name(self):
        """Two dependency layers with the same packages are the same content."""
        a = DependencyLayer(name="a", packages=["curl"])
        b = DependencyLayer(name="b", packages=["curl"])
        assert a.fingerprint() == b.fingerprint()

    def test_fingerprint_tracks_packages(self):
        a = DependencyLayer(name="x", packages=["curl"])
        b = DependencyLayer(name="x", packages=["wget"])
        assert a.fingerprint() != b.fingerprint()

    def test_packages_required(self):
        with pytest.raises(ValidationError):
            DependencyLayer(name="empty", packages=[])


class TestCustomLayer:
    """Tests for CustomLayer."""

    def test_commands_verbatim(self):
        commands = ["RUN echo one", "ENV A=1", "RUN echo one"]
        assert CustomLayer(name="c", commands=commands).instructions() == commands

    def test_fingerprint_includes_name(self):
        a = CustomLayer(name="a", commands=["RUN true"])
        b = CustomLayer(name="b", commands=["RUN true"])
        assert a.fingerprint() != b.fingerprint()

    def test_fingerprint_keeps_command_boundaries(self):
        """Joining commands must not make different lists collide."""
        split = CustomLayer(name="c", commands=["RUN a", "RUN b"])
        joined = CustomLayer(name="c", commands=["RUN aRUN b"])
        assert split.fingerprint() != joined.fingerprint()

    def test_frozen(self):
        layer = CustomLayer(name="c", commands=["RUN true"])
        with pytest.raises(ValidationError):
            layer.name = "other"


class TestTopLayer:
    """Tests for TopLayer."""

    def test_remote_binary_uses_add(self):
        layer = TopLayer(
            name="hello-world",
            binary_source="https://example.com/hello",
            binary_path="/hello",
        )
        assert layer.instructions() == [
            "ADD https://example.com/hello /hello",
            "RUN chmod +x /hello",
            'ENTRYPOINT ["/hello"]',
        ]
        assert layer.context_sources() == []

    def test_local_binary_uses_copy(self):
        layer = TopLayer(name="tool", binary_source="bin/tool", binary_path="/usr/local/bin/tool")
        assert layer.instructions()[0] == "COPY bin/tool /usr/local/bin/tool"
        assert layer.context_sources() == ["bin/tool"]

    def test_fingerprint_ignores_name(self):
        a = TopLayer(name="a", binary_source="bin/tool", binary_path="/tool")
        b = TopLayer(name="b", binary_source="bin/tool", binary_path="/tool")
        assert a.fingerprint() == b.fingerprint()

    def test_fingerprint_tracks_destination(self):
        a = TopLayer(name="t", binary_source="bin/tool", binary_path="/tool")
        b = TopLayer(name="t", binary_source="bin/tool", binary_path="/usr/bin/tool")
        assert a.fingerprint() != b.fingerprint()


class TestCustomTopLayer:
    """Tests for CustomTopLayer."""

    def test_entrypoint_appended(self):
        layer = CustomTopLayer(
            name="opencode", commands=["RUN pnpm add -g opencode-ai"], entrypoint=["opencode", "serve"]
        )
        assert layer.instructions() == [
            "RUN pnpm add -g opencode-ai",
            'ENTRYPOINT ["opencode", "serve"]',
        ]

    def test_no_entrypoint(self):
        layer = CustomTopLayer(name="setup", commands=["RUN true"])
        assert layer.instructions() == ["RUN true"]

    def test_never_exposes_volumes_or_ports(self):
        layer = CustomTopLayer(name="setup", commands=["RUN true"])
        assert layer.volumes == []
        assert layer.ports == []

    def test_cache_key_busts_fingerprint(self):
        """Bumping cache_key alone changes the fingerprint."""
        v1 = CustomTopLayer(name="tool", commands=["RUN install"], cache_key="v1")
        v2 = CustomTopLayer(name="tool", commands=["RUN install"], cache_key="v2")
        assert v1.fingerprint() != v2.fingerprint()

    def test_fingerprint_tracks_entrypoint(self):
        a = CustomTopLayer(name="tool", entrypoint=["tool"])
        b = CustomTopLayer(name="tool", entrypoint=["tool", "--verbose"])
        assert a.fingerprint() != b.fingerprint()

    def test_volumes_rejected(self):
        with pytest.raises(ValidationError):
            CustomTopLayer(name="tool", volumes=["/a:/b"])


class TestLayerAdapter:
    """Tests for validating layers from plain mappings."""

    def test_discriminates_on_kind(self):
        layer = LAYER_ADAPTER.validate_python(
            {"kind": "dependency", "name": "go", "packages": ["golang"]}
        )
        assert isinstance(layer, DependencyLayer)
        assert layer.packages == ["golang"]

    def test_custom_top_from_mapping(self):
        layer = LAYER_ADAPTER.validate_python(
            {"kind": "custom_top", "name": "t", "entrypoint": ["t"], "cache_key": "v2"}
        )
        assert isinstance(layer, CustomTopLayer)

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            LAYER_ADAPTER.validate_python({"kind": "mystery", "name": "x"})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            LAYER_ADAPTER.validate_python(
                {"kind": "custom", "name": "x", "commands": ["RUN true"], "pkgs": ["y"]}
            )
