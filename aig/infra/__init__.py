# -----------------------------------------------------------------------------
# INFRASTRUCTURE LAYER
# -----------------------------------------------------------------------------
# Contains low-level infrastructure wrappers:
# - DockerProvider: Docker SDK connection with a liveness check
# - DockerEngine: the ContainerEngine contract over the Docker SDK
# -----------------------------------------------------------------------------

from .docker_client import DockerProvider, DockerProviderError
from .docker_engine import DockerEngine

__all__ = ["DockerProvider", "DockerProviderError", "DockerEngine"]
