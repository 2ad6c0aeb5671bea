"""
TCP three-way handshake experiment.
"""

import time
from typing import Any, Callable, Dict, Optional

from algorithms import PROTOCOL
from algorithms.step import Step
from algorithms.tcp import PHASE_DESCRIPTIONS
from config import Settings
from visualizers.base import SteppableVisualizer


class TCPVisualizer(SteppableVisualizer):
    kind              = "tcp-handshake"
    family            = PROTOCOL
    default_algorithm = "tcp_handshake"

    def __init__(
        self,
        client_isn: int = 1000,
        server_isn: int = 2000,
        settings: Optional[Settings] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(None, settings, clock)
        self.client_isn = client_isn
        self.server_isn = server_isn
        self._phase: Dict[str, Any] = self._idle_phase()

    @staticmethod
    def _idle_phase() -> Dict[str, Any]:
        return {
            "phase":        0,
            "description":  PHASE_DESCRIPTIONS[0],
            "client_state": "CLOSED",
            "server_state": "LISTEN",
            "packets":      [],
        }

    def _make_generator(self):
        return self.info.fn(client_isn=self.client_isn, server_isn=self.server_isn)

    def _prepare_run(self) -> None:
        self.log.clear()
        self._phase = self._idle_phase()

    def _apply(self, step: Step) -> None:
        if step.state.get("explanation"):
            self.log.append(step.state["explanation"])
        self._phase = {k: step.state[k] for k in self._idle_phase()}
        self.highlight.show(step.highlighted)

    def reset(self) -> None:
        super().reset()
        self._phase = self._idle_phase()

    @property
    def phase(self) -> int:
        return self._phase["phase"]

    def get_snapshot(self) -> Dict[str, Any]:
        snap = self._base_snapshot()
        snap.update({
            "phase":        self._phase["phase"],
            "description":  self._phase["description"],
            "client_state": self._phase["client_state"],
            "server_state": self._phase["server_state"],
            "packets":      [dict(p) for p in self._phase["packets"]],
            "active":       self.highlight.items,
        })
        return snap
