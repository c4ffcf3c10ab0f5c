# =============================================================================
# AIG STACK ASSEMBLER TESTS
# =============================================================================

import pytest

from aig.core.assembler import assemble_stack
from aig.domain.errors import ResolutionError, StackError
from aig.domain.layers import BaseLayer


class TestAssembleStack:
    """Tests for assemble_stack."""

    def test_base_only(self, registry, base_layer):
        stack = assemble_stack(registry, base_layer, [])
        assert stack.layers == (base_layer,)

    def test_keeps_caller_order(self, registry, base_layer):
        stack = assemble_stack(registry, base_layer, ["nginx", "python", "go"])
        assert stack.names == ["base", "nginx", "python", "go"]

    def test_top_appended_last(self, registry, base_layer):
        stack = assemble_stack(registry, base_layer, ["python"], top_name="hello-world")
        assert stack.names == ["base", "python", "hello-world"]

    def test_names_are_trimmed_and_blanks_skipped(self, registry, base_layer):
        stack = assemble_stack(registry, base_layer, [" python ", "", "  "], top_name=" opencode ")
        assert stack.names == ["base", "python", "opencode"]

    def test_empty_top_ignored(self, registry, base_layer):
        stack = assemble_stack(registry, base_layer, ["go"], top_name="")
        assert stack.names == ["base", "go"]

    def test_unknown_layer_fails(self, registry, base_layer):
        with pytest.raises(ResolutionError) as exc_info:
            assemble_stack(registry, base_layer, ["python", "nope", "also-nope"])
        assert exc_info.value.name == "nope"

    def test_unknown_top_fails(self, registry, base_layer):
        with pytest.raises(ResolutionError) as exc_info:
            assemble_stack(registry, base_layer, ["python"], top_name="missing-top")
        assert exc_info.value.name == "missing-top"

    def test_base_volumes_and_ports_merge_first(self, registry):
        base = BaseLayer(image="ubuntu:22.04", volumes=["/src:/src"], ports=["8080:8080"])
        stack = assemble_stack(registry, base, ["nginx"])
        assert stack.volumes() == ["/src:/src"]
        assert stack.ports() == ["8080:8080", "80"]

    @pytest.mark.parametrize("slot", ["middle", "top"])
    def test_base_kind_layer_outside_base_slot_fails(self, registry, base_layer, slot):
        registry.register(BaseLayer(name="alpine", image="alpine:3"))

        with pytest.raises(StackError) as exc_info:
            if slot == "middle":
                assemble_stack(registry, base_layer, ["alpine"])
            else:
                assemble_stack(registry, base_layer, [], top_name="alpine")

        assert exc_info.value.phase == "plan"
