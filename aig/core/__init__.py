# -----------------------------------------------------------------------------
# CORE LAYER
# -----------------------------------------------------------------------------
# The business logic of aig:
# - LayerRegistry: name -> layer lookup, plus the YAML catalog loader
# - assemble_stack: base + named layers + top, in order
# - generate_dockerfile / plan_build: Dockerfile text, digest and tag
# - Foundry: cache check, build, and container run
# -----------------------------------------------------------------------------

from .assembler import assemble_stack
from .catalog import DEFAULT_LAYERS, default_registry
from .dockerfile import build_context, generate_dockerfile
from .foundry import FlightRecorder, Foundry
from .planner import plan_build
from .registry import LayerRegistry, load_catalog
from .tagging import image_reference, short_tag, stack_digest

__all__ = [
    "assemble_stack",
    "DEFAULT_LAYERS", "default_registry",
    "build_context", "generate_dockerfile",
    "FlightRecorder", "Foundry",
    "plan_build",
    "LayerRegistry", "load_catalog",
    "image_reference", "short_tag", "stack_digest",
]
