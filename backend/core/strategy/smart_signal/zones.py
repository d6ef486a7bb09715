"""Demand, supply, and fair-value-gap zones."""

from decimal import Decimal

from core.errors import InvariantViolation
from core.models.config import DEFAULT_CONFIG, SignalEngineConfig, ZoneMultipliers
from core.models.signal import SignalZones, Zone


def _zone(price: Decimal, multipliers: ZoneMultipliers) -> Zone:
    lo_mult, hi_mult = multipliers
    return Zone.from_bounds(price * lo_mult, price * hi_mult)


def validate_zone(name: str, zone: Zone) -> Zone:
    """Raise InvariantViolation unless ``zone.low < zone.high``."""
    if not zone.low < zone.high:
        raise InvariantViolation(
            f"{name} zone is empty or inverted: [{zone.low}, {zone.high})"
        )
    return zone


def calculate_zones(
    price: Decimal,
    is_bullish: bool,
    config: SignalEngineConfig = DEFAULT_CONFIG,
) -> SignalZones:
    """Price-relative zones keyed by trend direction.

    Bounds are sorted before validation, so only a collapsed band (equal
    multipliers) can fail.
    """
    if is_bullish:
        demand = _zone(price, config.demand_zone_bullish)
        supply = _zone(price, config.supply_zone_bullish)
        fvg = _zone(price, config.fvg_zone_bullish)
    else:
        demand = _zone(price, config.demand_zone_bearish)
        supply = _zone(price, config.supply_zone_bearish)
        fvg = _zone(price, config.fvg_zone_bearish)

    return SignalZones(
        demand_zone=validate_zone("demand", demand),
        supply_zone=validate_zone("supply", supply),
        fvg_zone=validate_zone("fvg", fvg),
    )
