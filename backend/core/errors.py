"""Errors raised by the signal engine.

All errors are local to a single ``generate_signal`` call; the engine
holds no shared state that a failure could corrupt.
"""


class SignalEngineError(Exception):
    """Base class for signal engine errors."""


class InsufficientDataError(SignalEngineError):
    """Candle window is too short for a required stage."""

    def __init__(self, stage: str, required: int, available: int):
        self.stage = stage
        self.required = required
        self.available = available
        super().__init__(
            f"{stage} needs at least {required} candles, got {available}"
        )


class InvariantViolation(SignalEngineError):
    """A zone or level invariant failed after construction."""


class DivisionByZeroError(SignalEngineError, ZeroDivisionError):
    """Risk/reward is undefined because entry equals stop loss."""
