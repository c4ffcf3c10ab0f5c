# -----------------------------------------------------------------------------
# DOMAIN LAYER
# -----------------------------------------------------------------------------
# Pure building blocks shared by the core and the infrastructure:
# - Layers: the five composable fragment kinds
# - Models: ports, stacks, build plans, run results
# - Errors: the failure taxonomy, one class per phase
# -----------------------------------------------------------------------------

from .errors import (
    AigError,
    BuildError,
    CacheQueryError,
    CatalogError,
    LifecycleError,
    LogsError,
    PortSpecError,
    ResolutionError,
    RunCancelledError,
    StackError,
)
from .layers import (
    LAYER_ADAPTER,
    BaseLayer,
    CustomLayer,
    CustomTopLayer,
    DependencyLayer,
    Layer,
    LayerModel,
    TopLayer,
)
from .models import BuildPlan, PortSpec, RunResult, RunState, Stack

__all__ = [
    "AigError", "BuildError", "CacheQueryError", "CatalogError", "LifecycleError",
    "LogsError", "PortSpecError", "ResolutionError", "RunCancelledError",
    "StackError",
    "LAYER_ADAPTER", "BaseLayer", "CustomLayer", "CustomTopLayer", "DependencyLayer",
    "Layer", "LayerModel", "TopLayer",
    "BuildPlan", "PortSpec", "RunResult", "RunState", "Stack",
]
