"""
Generation Outcome

The single current result of the generation workflow. One tagged value
replaces separate loading/error/result flags, so combinations such as
"loading and failed" cannot be represented.

Legal moves:
    IDLE | SUCCEEDED | FAILED  ->  IN_FLIGHT   (a submission starts)
    IDLE | SUCCEEDED | FAILED  ->  FAILED      (submission rejected by validation)
    IN_FLIGHT                  ->  SUCCEEDED | FAILED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from teotlan.core.constants import DATA_URI_PREFIX
from teotlan.core.exceptions import GenerationStateError


class OutcomeState(Enum):
    """States of the submit-to-outcome state machine."""
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES = frozenset({OutcomeState.SUCCEEDED, OutcomeState.FAILED})

_ALLOWED = {
    OutcomeState.IDLE: {OutcomeState.IN_FLIGHT, OutcomeState.FAILED},
    OutcomeState.IN_FLIGHT: {OutcomeState.SUCCEEDED, OutcomeState.FAILED},
    OutcomeState.SUCCEEDED: {OutcomeState.IN_FLIGHT, OutcomeState.FAILED},
    OutcomeState.FAILED: {OutcomeState.IN_FLIGHT, OutcomeState.FAILED},
}


@dataclass(frozen=True)
class GenerationOutcome:
    """Tagged outcome. ``image_data`` is set only when SUCCEEDED, ``message`` only when FAILED."""
    state: OutcomeState
    image_data: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def idle(cls) -> 'GenerationOutcome':
        return cls(OutcomeState.IDLE)

    @classmethod
    def in_flight(cls) -> 'GenerationOutcome':
        return cls(OutcomeState.IN_FLIGHT)

    @classmethod
    def succeeded(cls, image_data: str) -> 'GenerationOutcome':
        return cls(OutcomeState.SUCCEEDED, image_data=image_data)

    @classmethod
    def failed(cls, message: str) -> 'GenerationOutcome':
        return cls(OutcomeState.FAILED, message=message)

    @property
    def is_idle(self) -> bool:
        return self.state == OutcomeState.IDLE

    @property
    def is_in_flight(self) -> bool:
        return self.state == OutcomeState.IN_FLIGHT

    @property
    def is_success(self) -> bool:
        return self.state == OutcomeState.SUCCEEDED

    @property
    def is_failure(self) -> bool:
        return self.state == OutcomeState.FAILED

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def data_uri(self) -> str:
        """The generated image as a displayable PNG data URI."""
        if not self.is_success:
            raise GenerationStateError(self.state.value, "data_uri")
        return f"{DATA_URI_PREFIX}{self.image_data}"

    def __str__(self) -> str:
        if self.is_success:
            return f"Succeeded ({len(self.image_data)} base64 chars)"
        if self.is_failure:
            return f"Failed: {self.message}"
        return self.state.value.replace("_", " ").title()


def transition(current: GenerationOutcome, target: GenerationOutcome) -> GenerationOutcome:
    """
    Move from ``current`` to ``target``.

    Returns:
        ``target`` when the move is legal

    Raises:
        GenerationStateError: If the move is not allowed
    """
    if target.state not in _ALLOWED[current.state]:
        raise GenerationStateError(current.state.value, target.state.value)
    return target
