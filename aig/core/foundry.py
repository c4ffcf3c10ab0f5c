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
# THE FOUNDRY - BUILD & RUN
# -----------------------------------------------------------------------------
# Responsibility: Turns a BuildPlan into a running container and reports
# its exit.
#
#   START -> CHECK_CACHE -> {CACHED, BUILDING} -> STARTING -> RUNNING -> DONE
#   FAILED is reachable from every state.
#
# Safety Features:
# - Cache guard: a cache hit needs the full stack digest, not just the tag
# - Joined log copy: output is drained for LOG_DRAIN_SECONDS after exit
# - Dead Man's Switch: optional run timeout that cancels the run
# - Flight Recorder: every transition is timestamped (in memory only)
#
# No retries. A half-created container is left to the engine.
# -----------------------------------------------------------------------------

import os
import queue
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import BinaryIO, Iterable

from rich.console import Console

from aig.core.dockerfile import build_context
from aig.core.engine import ContainerEngine
from aig.core.tagging import DIGEST_LABEL
from aig.domain.errors import AigError, BuildError, LifecycleError, LogsError, RunCancelledError
from aig.domain.models import BuildPlan, RunResult, RunState, port_mappings

console = Console()

# Configuration
LOG_DRAIN_SECONDS = float(os.getenv("AIG_LOG_DRAIN_SECONDS", "5"))
RUN_TIMEOUT_SECONDS = float(os.getenv("AIG_RUN_TIMEOUT_SECONDS", "0"))  # 0 = no timeout
POLL_INTERVAL_SECONDS = 0.1

# Build reader messages
BUILD_LINE = "line"
BUILD_END = "end"
BUILD_ERROR = "error"


@dataclass
class FlightLogEntry:
    """A single entry in the flight recorder."""

    timestamp: str
    event: str
    details: str | None = None


class FlightRecorder:
    """State history of one run."""

    def __init__(self) -> None:
        self.states: list[RunState] = []
        self.entries: list[FlightLogEntry] = []

    def log(self, event: str, details: str | None = None) -> None:
        self.entries.append(
            FlightLogEntry(
                timestamp=datetime.now(timezone.utc).isoformat(), event=event, details=details
            )
        )

    def transition(self, state: RunState, details: str | None = None) -> None:
        self.states.append(state)
        self.log(state.name, details)

    @property
    def state(self) -> RunState | None:
        return self.states[-1] if self.states else None


class Foundry:
    """
    Build-and-run orchestrator.

    Talks to the engine only through the ContainerEngine contract, so the
    whole state machine runs against a mock in tests.
    """

    def __init__(
        self,
        engine: ContainerEngine,
        sink: BinaryIO | None = None,
        run_timeout: float = RUN_TIMEOUT_SECONDS,
        log_drain: float = LOG_DRAIN_SECONDS,
    ) -> None:
        """
        Args:
            engine: Container engine to drive.
            sink: Where container output goes. Defaults to stdout.
            run_timeout: Seconds before the whole run is cancelled; 0 disables.
            log_drain: Seconds to wait for the log copy after the container exits.
        """
        self._engine = engine
        self._sink = sink
        self._run_timeout = run_timeout
        self._log_drain = log_drain
        self.recorder = FlightRecorder()

    @property
    def _output(self) -> BinaryIO:
        return self._sink if self._sink is not None else sys.stdout.buffer

    def build_and_run(self, plan: BuildPlan, cancel: threading.Event | None = None) -> RunResult:
        """
        Make sure the plan's image exists, then run it to completion.

        Args:
            plan: The BuildPlan of one stack.
            cancel: Set it to abort the run at the next checkpoint.

        Returns:
            RunResult with the container's exit code.

        Raises:
            CacheQueryError: Image lookup failed.
            BuildError: Build rejected or failed; no container was created.
            LifecycleError: Create, start or wait failed.
            RunCancelledError: cancel was set, or the run timeout fired.
        """
        cancel = cancel or threading.Event()
        self.recorder = FlightRecorder()
        self.recorder.transition(RunState.START, plan.image_ref)

        timer: threading.Timer | None = None
        if self._run_timeout > 0:
            timer = threading.Timer(self._run_timeout, self._dead_mans_switch, args=(cancel,))
            timer.daemon = True
            timer.start()

        try:
            cached = self._check_cache(plan, cancel)
            if not cached:
                self._build(plan, cancel)

            container_id = self._start(plan, cancel)
            exit_code = self._run(container_id, cancel)

            self.recorder.transition(RunState.DONE, f"exit code {exit_code}")
            console.print(f"[green][FOUNDRY] Container exited with code {exit_code}[/green]")

            return RunResult(
                image_ref=plan.image_ref,
                digest=plan.digest,
                cached=cached,
                container_id=container_id,
                exit_code=exit_code,
                states=list(self.recorder.states),
            )

        except AigError as e:
            self.recorder.transition(RunState.FAILED, f"{e.phase}: {e}")
            console.print(f"[red][FOUNDRY] Run failed during {e.phase}: {e}[/red]")
            raise

        except Exception as e:
            self.recorder.transition(RunState.FAILED, str(e))
            raise

        finally:
            if timer:
                timer.cancel()

    # =========================================================================
    # PHASES
    # =========================================================================

    def _check_cache(self, plan: BuildPlan, cancel: threading.Event) -> bool:
        self.recorder.transition(RunState.CHECK_CACHE, plan.digest)
        self._checkpoint(cancel, "check-cache")

        if self._engine.image_exists(plan.image_ref, plan.digest):
            self.recorder.transition(RunState.CACHED)
            console.print(f"[cyan][FOUNDRY] Using cached image {plan.image_ref}[/cyan]")
            return True
        return False

    def _build(self, plan: BuildPlan, cancel: threading.Event) -> None:
        """
        Build the image, echoing engine output as it arrives.

        The stream is read on a worker thread so cancellation is noticed
        within POLL_INTERVAL_SECONDS even while the engine is silent.
        """
        self.recorder.transition(RunState.BUILDING)
        console.print(f"[cyan][FOUNDRY] Building image {plan.image_ref}...[/cyan]")

        try:
            context = build_context(plan.dockerfile, plan.context_sources)
        except FileNotFoundError as e:
            raise BuildError(str(e)) from e

        self._checkpoint(cancel, "build")
        stream = self._engine.build_image(context, plan.image_ref, {DIGEST_LABEL: plan.digest})

        lines: queue.Queue = queue.Queue()
        stop = threading.Event()
        reader = threading.Thread(
            target=self._read_build,
            args=(stream, lines, stop),
            name=f"aig-build-{plan.tag}",
            daemon=True,
        )
        reader.start()

        try:
            while True:
                try:
                    kind, item = lines.get(timeout=POLL_INTERVAL_SECONDS)
                except queue.Empty:
                    self._checkpoint(cancel, "build")
                    continue

                if kind == BUILD_END:
                    break
                if kind == BUILD_ERROR:
                    raise item
                self._checkpoint(cancel, "build")
                console.print(item, end="", markup=False, highlight=False)
        finally:
            # An abandoned reader closes the stream after its next chunk
            stop.set()

        self.recorder.log("IMAGE_BUILT", plan.image_ref)
        console.print(f"[green][FOUNDRY] Built {plan.image_ref}[/green]")

    def _start(self, plan: BuildPlan, cancel: threading.Event) -> str:
        self.recorder.transition(RunState.STARTING)
        exposed, bindings = port_mappings(plan.ports)

        self._checkpoint(cancel, "create")
        container_id = self._engine.create_container(
            plan.image_ref, exposed, bindings, list(plan.volumes)
        )
        self.recorder.log("CONTAINER_CREATED", container_id)

        self._checkpoint(cancel, "start")
        self._engine.start_container(container_id)
        console.print(f"[green][FOUNDRY] Container started (ID: {container_id[:12]})[/green]")
        return container_id

    def _run(self, container_id: str, cancel: threading.Event) -> int:
        """
        Copy logs and wait for exit concurrently.

        The log copy starts first so early output is not lost. The wait alone
        decides the outcome; afterwards the log copy is joined for up to
        log_drain seconds so trailing output still reaches the sink.
        """
        self.recorder.transition(RunState.RUNNING, container_id)

        logs: Iterable[bytes] | None = None
        log_thread: threading.Thread | None = None
        closing = threading.Event()
        try:
            logs = self._engine.stream_logs(container_id)
        except LogsError as e:
            self.recorder.log("LOGS_UNAVAILABLE", str(e))
            console.print(f"[yellow][FOUNDRY] Running without logs: {e}[/yellow]")

        if logs is not None:
            log_thread = threading.Thread(
                target=self._copy_logs,
                args=(logs, closing),
                name=f"aig-logs-{container_id[:12]}",
                daemon=True,
            )
            log_thread.start()

        outcome: dict = {}
        exited = threading.Event()

        def _wait() -> None:
            try:
                outcome["exit_code"] = self._engine.wait_for_exit(container_id)
            except Exception as e:
                outcome["error"] = e
            finally:
                exited.set()

        waiter = threading.Thread(target=_wait, name=f"aig-wait-{container_id[:12]}", daemon=True)
        waiter.start()

        while not exited.wait(POLL_INTERVAL_SECONDS):
            if cancel.is_set():
                closing.set()
                self._close(logs)
                raise RunCancelledError("running")

        if "error" in outcome:
            closing.set()
            self._close(logs)
            error = outcome["error"]
            if isinstance(error, AigError):
                raise error
            raise LifecycleError(
                f"Waiting for container {container_id[:12]} failed",
                phase="wait",
                details=str(error),
            ) from error

        self._drain(log_thread, logs, closing)
        return outcome["exit_code"]

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _read_build(
        self, stream: Iterable[str], lines: queue.Queue, stop: threading.Event
    ) -> None:
        try:
            for line in stream:
                if stop.is_set():
                    break
                lines.put((BUILD_LINE, line))
            else:
                lines.put((BUILD_END, None))
        except Exception as e:
            lines.put((BUILD_ERROR, e))
        finally:
            self._close(stream)

    def _copy_logs(self, logs: Iterable[bytes], closing: threading.Event) -> None:
        output = self._output
        try:
            for chunk in logs:
                output.write(chunk)
                output.flush()
        except Exception as e:
            # Closing the stream on purpose also lands here
            if not closing.is_set():
                self.recorder.log("LOGS_INTERRUPTED", str(e))
                console.print(f"[yellow][FOUNDRY] Log stream interrupted: {e}[/yellow]")

    def _drain(
        self,
        log_thread: threading.Thread | None,
        logs: Iterable[bytes] | None,
        closing: threading.Event,
    ) -> None:
        if log_thread is None:
            return
        log_thread.join(self._log_drain)
        if log_thread.is_alive():
            closing.set()
            self._close(logs)
            self.recorder.log("LOGS_TRUNCATED", f"not drained after {self._log_drain}s")
            console.print("[yellow][FOUNDRY] Log stream did not drain, closing it[/yellow]")

    def _checkpoint(self, cancel: threading.Event, phase: str) -> None:
        if cancel.is_set():
            raise RunCancelledError(phase)

    def _close(self, stream: object) -> None:
        close = getattr(stream, "close", None)
        if callable(close):
            close()

    def _dead_mans_switch(self, cancel: threading.Event) -> None:
        console.print(f"[red][FOUNDRY] TIMEOUT after {self._run_timeout}s! Cancelling run...[/red]")
        self.recorder.log("TIMEOUT_TRIGGERED", f"Limit: {self._run_timeout}s")
        cancel.set()
