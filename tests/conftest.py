"""
Pytest configuration and fixtures for aig tests.
"""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Keep tests independent of the developer's environment
os.environ.pop("AIG_CATALOG", None)
os.environ.pop("AIG_IMAGE_REPOSITORY", None)

from aig.core.catalog import DEFAULT_LAYERS  # noqa: E402
from aig.core.registry import LayerRegistry  # noqa: E402
from aig.domain.layers import BaseLayer, DependencyLayer  # noqa: E402
from aig.domain.models import Stack  # noqa: E402


@pytest.fixture
def mock_engine():
    """Mock ContainerEngine: cache miss, clean build, container exits 0."""
    engine = MagicMock()
    engine.image_exists.return_value = False
    engine.build_image.return_value = iter(
        ["Step 1/2 : FROM ubuntu:22.04\n", "Successfully built 0123abcd\n"]
    )
    engine.create_container.return_value = "c0ffee1234567890abcdef"
    engine.start_container.return_value = None
    engine.stream_logs.return_value = [b"hello\n", b"world\n"]
    engine.wait_for_exit.return_value = 0
    return engine


@pytest.fixture
def base_layer():
    """The default base layer."""
    return BaseLayer(image="ubuntu:22.04")


@pytest.fixture
def nginx_stack(base_layer):
    """[Base(ubuntu:22.04), Dependency(nginx, port 80)]."""
    return Stack(
        layers=(base_layer, DependencyLayer(name="nginx", packages=["nginx"], ports=["80"]))
    )


@pytest.fixture
def registry():
    """Registry holding the built-in layers."""
    return LayerRegistry(DEFAULT_LAYERS)
