# modules/presentation.py

import os

import matplotlib.pyplot as plt
import matplotlib.gridspec as gridspec

from config import (
    LOG_PREFIX, OUTPUT_DIR, WEEKDAY_LABELS, HOURS,
    PREDICTION_TEXT, VOLATILITY_TEXT
)
from modules.models import AnalyticsReport


# ─────────────────────────────────────────────
# SECTION 1: DICT EXPORT
# ─────────────────────────────────────────────

def report_to_dict(report: AnalyticsReport) -> dict:
    """
    Plain-dict view of a report, JSON-safe (string keys, no dataclasses).
    Absent values stay None.
    """
    zones = None
    if report.price_zones is not None:
        zones = {
            zone.label: {'count': zone.count, 'importance': round(zone.importance, 6)}
            for _, zone in sorted(report.price_zones.items())
        }

    return {
        'record_count':         report.record_count,
        'best_buy_price':       report.best_buy_price,
        'best_sell_price':      report.best_sell_price,
        'trending_days':        dict(report.trending_days),
        'trending_hours':       {str(h): v for h, v in report.trending_hours.items()},
        'highest_volume_hours': {str(h): v for h, v in report.highest_volume_hours.items()},
        'price_zones':          zones,
        'momentum':             report.momentum,
        'prediction':           report.prediction,
        'volatility':           report.volatility,
        'volatility_assessment': report.volatility_assessment,
        'intraday_patterns': {
            str(h): {'volatility': s.volatility, 'direction': s.direction, 'volume': s.volume}
            for h, s in sorted(report.intraday_patterns.items())
        },
        'patterns':                 [(p.value, c) for p, c in report.patterns],
        'recommendations':          list(report.recommendations),
        'enhanced_recommendations': list(report.enhanced_recommendations),
    }


# ─────────────────────────────────────────────
# SECTION 2: CONSOLE SUMMARY
# ─────────────────────────────────────────────

def print_report(report: AnalyticsReport, title: str = "TRADING DATA ANALYSIS") -> None:
    """Concise console summary of one report."""
    print("\n" + "=" * 55)
    print(f"  TDA — {title}")
    print("=" * 55)
    print(f"  Records            : {report.record_count}")
    print(f"  Best Buy (low)     : {report.best_buy_price:.2f}")
    print(f"  Best Sell (high)   : {report.best_sell_price:.2f}")

    if report.momentum is not None:
        print(f"  Momentum           : {report.momentum:.2f}  ({PREDICTION_TEXT[report.prediction]})")
    else:
        print("  Momentum           : insufficient data")

    if report.volatility is not None:
        print(f"  Volatility (range) : {report.volatility:.2f}  "
              f"({VOLATILITY_TEXT[report.volatility_assessment]})")

    active_days = {d: v for d, v in report.trending_days.items() if v != 0}
    print(f"  Trending Days      : {active_days}")

    if report.price_zones:
        print("\n  Price Zones        :")
        for _, zone in sorted(report.price_zones.items()):
            print(f"    {zone.label:<22} {zone.count:>5}  ({zone.importance * 100:.1f}%)")

    if report.intraday_patterns:
        print("\n  Intraday by Hour   :")
        for hour, stats in sorted(report.intraday_patterns.items()):
            print(f"    {hour:02d}h  vol={stats.volatility:>10.4f}  "
                  f"{stats.direction:<5} volume={stats.volume}")

    print("\n  Recommendations    :")
    for line in report.recommendations + report.enhanced_recommendations:
        print(f"    - {line}")
    print("=" * 55 + "\n")


# ─────────────────────────────────────────────
# SECTION 3: VISUALIZATION
# ─────────────────────────────────────────────

def plot_report(report: AnalyticsReport, name: str = "report",
                save: bool = True, show: bool = True, output_dir: str = OUTPUT_DIR):
    """
    4-panel dashboard:
    1. Strength by weekday
    2. Strength by hour
    3. Volume by hour
    4. Close-price zone histogram
    Returns the saved path, or None when save=False.
    """
    fig = plt.figure(figsize=(16, 12))
    fig.patch.set_facecolor('#0d1117')
    gs = gridspec.GridSpec(2, 2, figure=fig, hspace=0.4, wspace=0.25)

    text_color = '#c9d1d9'
    grid_color = '#21262d'

    def style_ax(ax, title):
        ax.set_facecolor('#0d1117')
        ax.tick_params(colors=text_color, labelsize=8)
        ax.spines[:].set_color('#30363d')
        ax.set_title(title, color='#e6edf3', fontsize=10, pad=6, loc='left')
        ax.grid(color=grid_color, linewidth=0.5, linestyle='--')

    ax1 = fig.add_subplot(gs[0, 0])
    style_ax(ax1, "Strength  |  By Weekday")
    ax1.bar(WEEKDAY_LABELS, [report.trending_days[d] for d in WEEKDAY_LABELS],
            color='#58a6ff', alpha=0.8)

    ax2 = fig.add_subplot(gs[0, 1])
    style_ax(ax2, "Strength  |  By Hour of Day")
    ax2.bar(HOURS, [report.trending_hours[h] for h in HOURS], color='#ffa657', alpha=0.8)

    ax3 = fig.add_subplot(gs[1, 0])
    style_ax(ax3, "Volume  |  By Hour of Day")
    ax3.bar(HOURS, [report.highest_volume_hours[h] for h in HOURS], color='#3fb950', alpha=0.8)

    ax4 = fig.add_subplot(gs[1, 1])
    style_ax(ax4, "Price Zones  |  Close Price Histogram")
    if report.price_zones:
        zones = [zone for _, zone in sorted(report.price_zones.items())]
        ax4.barh([z.label for z in zones], [z.count for z in zones],
                 color='#bc8cff', alpha=0.8)
    else:
        ax4.text(0.5, 0.5, "No price zones (degenerate range)", color=text_color,
                 ha='center', va='center', transform=ax4.transAxes)

    plt.suptitle(f"TDA — {name}", color='#e6edf3', fontsize=13, y=0.98)

    path = None
    if save:
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, f"{name}_dashboard.png")
        plt.savefig(path, dpi=150, bbox_inches='tight', facecolor=fig.get_facecolor())
        print(f"{LOG_PREFIX} Dashboard saved → {path}")

    if show:
        plt.show()
    plt.close(fig)
    return path
