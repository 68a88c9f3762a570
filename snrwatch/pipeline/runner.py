"""High-level runner that streams records through the catalog and prints the report."""

from __future__ import annotations

import sys
from typing import IO, List, Optional, Sequence

from snrwatch.catalog.catalog import Catalog, IngestResult
from snrwatch.catalog.model import Packet, StatsConfig
from snrwatch.io.records import SkipCounts, iter_packets
from snrwatch.io.sources import iter_lines
from snrwatch.report.table import render_report
from snrwatch.util.errors import RecordError, SourceError
from snrwatch.util.event_logger import EventLogger
from snrwatch.util.exit_codes import ExitCode
from snrwatch.util.logging import get_logger, log_exception

logger = get_logger(__name__)


class StatsRunner:
    """Bind inputs, configuration and outputs for one pass over the stream."""

    def __init__(
        self,
        config: StatsConfig,
        inputs: Optional[Sequence[str]] = None,
        *,
        events: Optional[EventLogger] = None,
        out: Optional[IO[str]] = None,
        stdin: Optional[IO[str]] = None,
    ) -> None:
        self.config = config
        self.inputs: List[str] = list(inputs or [])
        self.events = events
        self.out = out if out is not None else sys.stdout
        self.stdin = stdin
        self.catalog = Catalog(config)
        self.skips = SkipCounts()

    def ingest_all(self) -> Catalog:
        """Consume every input; ``RecordError``/``SourceError`` propagate."""
        lines = iter_lines(self.inputs, stdin=self.stdin)
        for packet in iter_packets(lines, self.config, self.skips):
            result = self.catalog.ingest(packet.key, packet)
            self._report_events(packet, result)
        logger.info(
            "Ingested %d packets from %d devices (%d records skipped)",
            self.catalog.total_packets,
            len(self.catalog),
            self.skips.no_model + self.skips.tpms,
            extra={"packets": self.catalog.total_packets},
        )
        return self.catalog

    def run(self) -> int:
        try:
            self.ingest_all()
        except RecordError as exc:
            logger.error(
                "Aborting on bad record: %s",
                exc,
                extra={"error_type": "record", "source": exc.source, "line_no": exc.line_no},
            )
            return ExitCode.RECORD_ERROR
        except SourceError as exc:
            log_exception(logger, f"Aborting: {exc}", error_type="input")
            return ExitCode.INPUT_ERROR
        self.out.write(render_report(self.catalog))
        self.out.flush()
        return ExitCode.SUCCESS

    def _report_events(self, packet: Packet, result: IngestResult) -> None:
        device = str(packet.key)
        if result.is_new_device:
            logger.debug("%s new device %s", packet.display_time, device, extra={"device": device})
            self._emit("new_device", packet)
            return
        if result.is_duplicate:
            logger.debug("%s duplicate packet from %s", packet.display_time, device, extra={"device": device})
        if result.battery_changed:
            logger.info("%s battery_ok changed to %s for %s", packet.display_time, packet.battery, device, extra={"device": device})
            self._emit("battery_changed", packet, battery_ok=packet.battery)
        if result.status_changed:
            logger.info("%s status changed to %s for %s", packet.display_time, packet.status, device, extra={"device": device})
            self._emit("status_changed", packet, status=packet.status)

    def _emit(self, event: str, packet: Packet, **fields) -> None:
        if self.events is None:
            return
        self.events.log(
            event,
            device=str(packet.key),
            time=packet.display_time,
            epoch=packet.epoch,
            source=packet.source,
            line_no=packet.line_no,
            **fields,
        )
