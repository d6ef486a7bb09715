"""Recent volume buy/sell split."""

from decimal import Decimal
from typing import Sequence

from core.models.config import DEFAULT_CONFIG, SignalEngineConfig
from core.models.signal import VolumeAnalysis

NET_BUYING = "Net Buying Pressure"
NET_SELLING = "Net Selling Pressure"


def analyze_volume(
    volumes: Sequence[Decimal],
    config: SignalEngineConfig = DEFAULT_CONFIG,
) -> VolumeAnalysis:
    """Split the last ``volume_window`` volumes with the fixed buy/sell shares.

    The split does not look at the order book. With zero total volume both
    sides are zero and the label falls through to net selling.
    """
    total = sum(volumes[-config.volume_window:], Decimal("0"))
    buy_volume = total * config.buy_volume_share
    sell_volume = total * config.sell_volume_share
    label = NET_BUYING if buy_volume > sell_volume else NET_SELLING
    return VolumeAnalysis(
        buy_volume=buy_volume,
        sell_volume=sell_volume,
        imbalance_label=label,
    )
