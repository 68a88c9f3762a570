"""Plain-text report of per-device statistics."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from snrwatch.catalog.catalog import Catalog
from snrwatch.catalog.device import DeviceSummary
from snrwatch.stats.accumulator import StatSummary
from snrwatch.util.math import format_stat

# (attribute on DeviceSummary, column group title)
CATEGORY_TITLES: Tuple[Tuple[str, str], ...] = (
    ("snr", "SNR (dB)"),
    ("gap", "ITGT (s)"),
    ("freq", "Freq (MHz)"),
    ("ppt", "Pkts/Xmit"),
)

STAT_HEADERS = ("n", "mean", "stdev", "min", "max")
STAT_WIDTH = 9
KEY_MIN_WIDTH = 24


def _stat_cells(summary: Optional[StatSummary], precision: int) -> List[str]:
    if summary is None:
        return [""] * len(STAT_HEADERS)
    return [
        str(summary.n),
        format_stat(summary.mean, precision),
        format_stat(summary.stddev, precision),
        format_stat(summary.min, precision),
        format_stat(summary.max, precision),
    ]


def _precision(category: str) -> int:
    # Frequencies need sub-kHz resolution when reported in MHz.
    return 3 if category == "freq" else 2


def _categories(enabled: Sequence[str]) -> List[Tuple[str, str]]:
    return [(attr, title) for attr, title in CATEGORY_TITLES if attr in enabled]


def render_report(catalog: Catalog) -> str:
    """Render the catalog as a fixed-width table, devices in key order."""

    config = catalog.config
    categories = _categories(config.enabled_categories)
    items = catalog.reportable_items()
    key_width = max([KEY_MIN_WIDTH] + [len(str(key)) for key, _ in items])
    group_width = STAT_WIDTH * len(STAT_HEADERS)

    lines: List[str] = []
    if catalog.first_display is not None:
        lines.append(f"Packets from {catalog.first_display} to {catalog.last_display} ({catalog.duration:.1f} s)")
    else:
        lines.append("No packets ingested")
    lines.append(f"Transmission window {config.transmission_window:g} s, noise floor {config.noise_floor} packets")
    lines.append("")

    lead = " " * (key_width + 2 * STAT_WIDTH)
    lines.append(lead + "".join(f" {title:-^{group_width - 1}}" for _, title in categories))
    header = f"{'Device':<{key_width}}{'Pkts':>{STAT_WIDTH}}{'Xmits':>{STAT_WIDTH}}"
    header += "".join(f"{h:>{STAT_WIDTH}}" for _ in categories for h in STAT_HEADERS)
    lines.append(header.rstrip())

    for key, record in items:
        summary: DeviceSummary = record.get()
        row = f"{str(key):<{key_width}}{summary.packet_count:>{STAT_WIDTH}}{summary.transmission_count:>{STAT_WIDTH}}"
        for attr, _ in categories:
            cells = _stat_cells(getattr(summary, attr), _precision(attr))
            row += "".join(f"{cell:>{STAT_WIDTH}}" for cell in cells)
        lines.append(row.rstrip())

    hidden = len(catalog) - len(items)
    lines.append("")
    lines.append(
        f"{len(items)} devices reported, {hidden} below noise floor; "
        f"{catalog.total_packets} packets, {catalog.deduped_transmissions} transmissions after de-duplication"
    )
    return "\n".join(lines) + "\n"
