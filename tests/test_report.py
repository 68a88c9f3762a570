from snrwatch.catalog.catalog import Catalog
from snrwatch.catalog.model import DeviceKey, Packet, StatsConfig
from snrwatch.report.table import render_report


def _fill(catalog: Catalog, key: DeviceKey, times, snr: float = 15.0, freq: float = 433.92) -> None:
    for t in times:
        catalog.ingest(key, Packet(key=key, epoch=t, display_time=f"T{t:g}", snr=snr, freq=freq))


def _row(report: str, device: str) -> str:
    for line in report.splitlines():
        if line.startswith(device + " "):
            return line
    raise AssertionError(f"no row for {device}")


def test_report_lists_devices_in_key_order() -> None:
    catalog = Catalog(StatsConfig())
    _fill(catalog, DeviceKey.from_fields("Nexus-TH", 2, 7), [0.0])
    _fill(catalog, DeviceKey.from_fields("Acurite-Tower", "A", 1), [1.0])
    report = render_report(catalog)
    assert report.index("Acurite-Tower/A/1") < report.index("Nexus-TH/2/7")
    assert report.startswith("Packets from T0 to T1 (1.0 s)")


def test_report_row_carries_statistics() -> None:
    catalog = Catalog(StatsConfig(transmission_window=2.0))
    key = DeviceKey.from_fields("LaCrosse-TX141", 0, 91)
    _fill(catalog, key, [0.0, 1.0, 5.0, 5.5])
    row = _row(render_report(catalog), "LaCrosse-TX141/0/91").split()
    # device, pkts, xmits, then snr, gap, freq and ppt groups of five
    assert row[:3] == ["LaCrosse-TX141/0/91", "4", "2"]
    assert row[3:8] == ["4", "15.00", "0.00", "15.00", "15.00"]
    assert row[8:13] == ["1", "5.00", "0.00", "5.00", "5.00"]
    assert row[13:18] == ["4", "433.920", "0.000", "433.920", "433.920"]
    assert row[18:23] == ["1", "2.00", "0.00", "2.00", "2.00"]


def test_absent_summaries_render_blank() -> None:
    catalog = Catalog(StatsConfig())
    _fill(catalog, DeviceKey.from_fields("Lonely"), [0.0])
    row = _row(render_report(catalog), "Lonely").split()
    # gap and ppt groups are empty and trailing blanks are stripped
    assert row[:3] == ["Lonely", "1", "1"]
    assert len(row) == 3 + 5 + 5


def test_only_enabled_categories_are_rendered() -> None:
    catalog = Catalog(StatsConfig(enable_gap=False, enable_freq=False, enable_ppt=False))
    _fill(catalog, DeviceKey.from_fields("Solo"), [0.0, 0.5])
    report = render_report(catalog)
    assert "SNR (dB)" in report
    assert "ITGT" not in report
    assert "Freq" not in report
    assert "Pkts/Xmit" not in report


def test_noise_floor_hides_quiet_devices_and_footer_counts_them() -> None:
    catalog = Catalog(StatsConfig(noise_floor=2))
    _fill(catalog, DeviceKey.from_fields("Busy"), [0.0, 10.0, 20.0])
    _fill(catalog, DeviceKey.from_fields("Quiet"), [5.0])
    report = render_report(catalog)
    assert "Busy" in report
    assert "Quiet" not in report
    footer = report.rstrip().splitlines()[-1]
    assert footer == "1 devices reported, 1 below noise floor; 4 packets, 4 transmissions after de-duplication"


def test_empty_catalog_report() -> None:
    report = render_report(Catalog())
    assert report.startswith("No packets ingested")
    assert report.rstrip().endswith("0 packets, 0 transmissions after de-duplication")
