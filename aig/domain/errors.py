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
# ERROR TAXONOMY
# -----------------------------------------------------------------------------
# Every failure names the phase it came from. Nothing here is retried:
# a transient engine error fails the whole invocation.
# -----------------------------------------------------------------------------


class AigError(Exception):
    """Base class for all aig failures."""

    phase = "aig"

    def __init__(self, message: str, details: str = "") -> None:
        super().__init__(message)
        self.details = details


class ResolutionError(AigError):
    """Raised when a layer name is not in the registry."""

    phase = "resolve"

    def __init__(self, name: str) -> None:
        super().__init__(f"layer {name} not found")
        self.name = name


class CatalogError(AigError):
    """Raised when a layer catalog file cannot be loaded."""

    phase = "catalog"


class PortSpecError(AigError):
    """Raised for a port spec that is neither 'host:container' nor 'container'."""

    phase = "plan"


class StackError(AigError):
    """Raised for a stack without exactly one base layer in front, or an invalid base."""

    phase = "plan"


class CacheQueryError(AigError):
    """Raised when the image lookup fails for a reason other than not-found."""

    phase = "check-cache"


class BuildError(AigError):
    """Raised when the engine rejects or fails the image build."""

    phase = "build"


class LifecycleError(AigError):
    """
    Raised when container create, start or wait fails.

    The container may be left half-created; cleanup belongs to the engine.
    """

    def __init__(self, message: str, phase: str, details: str = "") -> None:
        super().__init__(message, details)
        self.phase = phase


class LogsError(AigError):
    """Log streaming failed. Never fatal to the run."""

    phase = "logs"


class RunCancelledError(AigError):
    """Raised when the cancel signal (or the run timeout) fires mid-run."""

    def __init__(self, phase: str) -> None:
        super().__init__(f"Run cancelled during {phase}")
        self.phase = phase
