"""Device catalog and stream-wide counters."""

from __future__ import annotations

from typing import Dict, Iterator, List, NamedTuple, Optional, Tuple

from snrwatch.catalog.device import DeviceRecord
from snrwatch.catalog.model import DeviceKey, Packet, StatsConfig


class IngestResult(NamedTuple):
    is_duplicate: bool
    battery_changed: bool
    status_changed: bool
    is_new_device: bool


class Catalog:
    """Map device keys to their records and count what has been ingested."""

    def __init__(self, config: Optional[StatsConfig] = None) -> None:
        self.config = config or StatsConfig()
        self.entries: Dict[DeviceKey, DeviceRecord] = {}
        self.total_packets = 0
        self.deduped_transmissions = 0
        self.first_time: Optional[float] = None
        self.last_time: Optional[float] = None
        self.first_display: Optional[str] = None
        self.last_display: Optional[str] = None

    def ingest(self, key: DeviceKey, packet: Packet) -> IngestResult:
        record = self.entries.get(key)
        if record is None:
            self.entries[key] = DeviceRecord.create(
                self.config,
                packet.snr,
                packet.epoch,
                packet.freq,
                packet.battery,
                packet.status,
            )
            result = IngestResult(False, False, False, True)
        else:
            update = record.update(packet.snr, packet.epoch, packet.freq, packet.battery, packet.status)
            result = IngestResult(update.is_duplicate, update.battery_changed, update.status_changed, False)

        self.total_packets += 1
        if not result.is_duplicate:
            self.deduped_transmissions += 1
        if self.first_time is None or packet.epoch < self.first_time:
            self.first_time = packet.epoch
            self.first_display = packet.display_time
        if self.last_time is None or packet.epoch > self.last_time:
            self.last_time = packet.epoch
            self.last_display = packet.display_time
        return result

    def get(self, key: DeviceKey) -> Optional[DeviceRecord]:
        return self.entries.get(key)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[DeviceKey]:
        return iter(sorted(self.entries))

    def sorted_items(self) -> List[Tuple[DeviceKey, DeviceRecord]]:
        return [(key, self.entries[key]) for key in sorted(self.entries)]

    def reportable_items(self) -> List[Tuple[DeviceKey, DeviceRecord]]:
        """Devices at or above the configured noise floor, in key order."""
        floor = self.config.noise_floor
        return [(key, rec) for key, rec in self.sorted_items() if rec.packet_count >= floor]

    @property
    def duration(self) -> float:
        if self.first_time is None or self.last_time is None:
            return 0.0
        return self.last_time - self.first_time
