"""Signal report formatting for console and JSON output."""

from __future__ import annotations

import orjson

from app.services.signal_service import SignalReport
from core.models.converters import signal_to_dict


class ReportFormatter:
    """Format signal reports for display and export."""

    @staticmethod
    def format_console(report: SignalReport) -> str:
        """Render a report as a text card."""
        s = report.signal
        lv = s.levels
        z = s.zones
        rr = f"{report.risk_reward:.2f}" if report.risk_reward is not None else "n/a"

        lines = [
            "=" * 70,
            f"  {s.symbol}  ${s.price:,.2f}  {s.action.label.upper()}",
            "=" * 70,
            f"  Entry:        {s.entry:,.2f}",
            f"  Stop loss:    {s.stop_loss:,.2f}",
            f"  TP1/TP2/TP3:  {s.take_profit.tp1:,.2f} / {s.take_profit.tp2:,.2f} / {s.take_profit.tp3:,.2f}",
            f"  Risk/reward:  {rr}",
            f"  Confidence:   {s.confidence_tier.label} ({s.confluence_count} factors)",
            "",
            "-" * 70,
            "  LEVELS",
            "-" * 70,
            f"  Swing high/low:  {lv.swing_high:,.2f} / {lv.swing_low:,.2f}",
            f"  Pivot:           {lv.pivot:,.2f}",
            f"  R1/R2:           {lv.r1:,.2f} / {lv.r2:,.2f}",
            f"  S1/S2:           {lv.s1:,.2f} / {lv.s2:,.2f}",
            f"  ATR:             {s.atr:,.2f}",
            "",
            "-" * 70,
            "  ZONES",
            "-" * 70,
            f"  Demand:  {z.demand_zone.low:,.2f} - {z.demand_zone.high:,.2f}",
            f"  Supply:  {z.supply_zone.low:,.2f} - {z.supply_zone.high:,.2f}",
            f"  FVG:     {z.fvg_zone.low:,.2f} - {z.fvg_zone.high:,.2f}",
            f"  Liquidity pool:  {s.liquidity_pool:,.2f}",
            f"  VAH/POC/VAL:     {s.volume_profile.vah:,.2f} / {s.volume_profile.poc:,.2f} / {s.volume_profile.val:,.2f}",
            "",
            "-" * 70,
            "  VOLUME & STRUCTURE",
            "-" * 70,
            f"  Buy/sell:   {s.volume.buy_volume:,} / {s.volume.sell_volume:,} ({s.volume.imbalance_label})",
            f"  Structure:  {s.market_structure}",
            "",
            "-" * 70,
            "  CONFLUENCE",
            "-" * 70,
        ]
        lines += [f"  - {factor}" for factor in s.confluence_factors]
        lines += ["", "-" * 70, "  MULTI-TIMEFRAME", "-" * 70]
        lines += [f"  {label}" for label in s.multi_timeframe_alignment]
        lines += ["", "-" * 70, "  INSIGHT", "-" * 70, f"  {report.insight.analysis}"]
        lines.append("=" * 70)
        return "\n".join(lines)

    @staticmethod
    def to_dict(report: SignalReport) -> dict:
        """Convert a report to a JSON-serializable dict."""
        data = signal_to_dict(report.signal)
        data["risk_reward"] = (
            float(report.risk_reward) if report.risk_reward is not None else None
        )
        data["insight"] = report.insight.model_dump()
        return data

    @staticmethod
    def to_json(reports: list[SignalReport]) -> str:
        return orjson.dumps(
            [ReportFormatter.to_dict(r) for r in reports],
            option=orjson.OPT_INDENT_2,
        ).decode("utf-8")
