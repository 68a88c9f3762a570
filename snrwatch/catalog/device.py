"""Per-device statistics and transmission segmentation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple, Optional

from snrwatch.catalog.model import StatsConfig
from snrwatch.stats.accumulator import Accumulator, StatSummary, observe


class UpdateResult(NamedTuple):
    is_duplicate: bool
    battery_changed: bool
    status_changed: bool


@dataclass(frozen=True)
class DeviceSummary:
    packet_count: int
    transmission_count: int
    snr: Optional[StatSummary] = None
    gap: Optional[StatSummary] = None
    freq: Optional[StatSummary] = None
    ppt: Optional[StatSummary] = None


@dataclass
class DeviceRecord:
    """Running statistics for one device plus the state of its open transmission.

    A transmission starts with the first packet that arrives at least
    ``transmission_window`` seconds after the previous transmission start;
    every packet before that is a duplicate of the open transmission.
    """

    config: StatsConfig = field(repr=False)
    packet_count: int
    transmission_count: int
    pending_packets: int
    last_packet_time: float
    last_transmission_time: float
    battery_state: Any = None
    status_state: Any = None
    snr: Optional[Accumulator] = None
    gap: Optional[Accumulator] = None
    freq: Optional[Accumulator] = None
    ppt: Optional[Accumulator] = None

    @classmethod
    def create(
        cls,
        config: StatsConfig,
        snr: float,
        epoch: float,
        freq: float,
        battery: Any = None,
        status: Any = None,
    ) -> "DeviceRecord":
        return cls(
            config=config,
            packet_count=1,
            transmission_count=1,
            pending_packets=1,
            last_packet_time=epoch,
            last_transmission_time=epoch,
            battery_state=battery,
            status_state=status,
            snr=Accumulator.create(snr) if config.enable_snr else None,
            freq=Accumulator.create(freq) if config.enable_freq else None,
        )

    def update(
        self,
        snr: float,
        epoch: float,
        freq: float,
        battery: Any = None,
        status: Any = None,
    ) -> UpdateResult:
        config = self.config
        self.packet_count += 1
        self.last_packet_time = epoch

        is_duplicate = epoch < self.last_transmission_time + config.transmission_window

        # Duplicates are separate receptions, so they still count toward SNR and frequency.
        if config.enable_snr:
            self.snr = observe(self.snr, snr)

        if config.enable_gap and not is_duplicate:
            self.gap = observe(self.gap, epoch - self.last_transmission_time)
            self.last_transmission_time = epoch
            self.transmission_count += 1

        if config.enable_freq:
            self.freq = observe(self.freq, freq)

        if config.enable_ppt:
            if not is_duplicate:
                # The transmission that just closed; the new one starts at 1 below.
                self.ppt = observe(self.ppt, float(self.pending_packets))
                self.pending_packets = 0
            self.pending_packets += 1

        battery_changed = battery != self.battery_state
        if battery_changed:
            self.battery_state = battery
        status_changed = status != self.status_state
        if status_changed:
            self.status_state = status

        return UpdateResult(is_duplicate, battery_changed, status_changed)

    def get(self) -> DeviceSummary:
        return DeviceSummary(
            packet_count=self.packet_count,
            transmission_count=self.transmission_count,
            snr=self.snr.summary() if self.snr is not None else None,
            gap=self.gap.summary() if self.gap is not None else None,
            freq=self.freq.summary() if self.freq is not None else None,
            ppt=self.ppt.summary() if self.ppt is not None else None,
        )
