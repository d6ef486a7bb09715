"""Signal strategies.

Public API:
- SmartSignalEngine: market snapshot -> TradingSignal pipeline
- generate_signal: module-level shortcut using the default configuration
- risk_reward_ratio / signal_risk_reward: reward:risk of a trade
"""

from core.strategy.smart_signal import (
    SmartSignalEngine,
    generate_signal,
    risk_reward_ratio,
    signal_risk_reward,
)

__all__ = [
    "SmartSignalEngine",
    "generate_signal",
    "risk_reward_ratio",
    "signal_risk_reward",
]
