"""Risk/reward ratio."""

from decimal import Decimal

from core.errors import DivisionByZeroError
from core.models.signal import Action, TradingSignal


def risk_reward_ratio(
    action: Action,
    entry: Decimal,
    stop_loss: Decimal,
    tp1: Decimal,
) -> Decimal:
    """Reward distance to tp1 divided by risk distance to the stop.

    Raises:
        DivisionByZeroError: entry equals stop_loss
    """
    if entry == stop_loss:
        raise DivisionByZeroError(
            f"risk/reward undefined: entry equals stop loss ({entry})"
        )
    if action is Action.BUY_ON_PULLBACK:
        return (tp1 - entry) / (entry - stop_loss)
    return (entry - tp1) / (stop_loss - entry)


def signal_risk_reward(signal: TradingSignal) -> Decimal:
    """Risk/reward ratio of an assembled signal."""
    return risk_reward_ratio(
        signal.action, signal.entry, signal.stop_loss, signal.take_profit.tp1
    )
