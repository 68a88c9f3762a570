"""Device keys, normalized packets and statistics configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Optional, Tuple


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    try:
        return float(value)
    except Exception:
        return default


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    try:
        return max(0, int(float(value)))
    except Exception:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value in (None, ""):
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class DeviceKey:
    """Identity of one physical transmitter: model plus optional channel and id."""

    model: str
    channel: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_fields(cls, model: Any, channel: Any = None, id: Any = None) -> "DeviceKey":
        return cls(
            model=_key_part(model),
            channel=None if channel is None else _key_part(channel),
            id=None if id is None else _key_part(id),
        )

    def sort_key(self) -> Tuple[str, Tuple[int, str], Tuple[int, str]]:
        return (
            self.model,
            (0, "") if self.channel is None else (1, self.channel),
            (0, "") if self.id is None else (1, self.id),
        )

    def __lt__(self, other: "DeviceKey") -> bool:
        if not isinstance(other, DeviceKey):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        parts = [self.model]
        if self.channel is not None:
            parts.append(self.channel)
        if self.id is not None:
            parts.append(self.id)
        return "/".join(parts)


def _key_part(value: Any) -> str:
    # rtl_433 writes some models and most ids as JSON numbers; 1.0 and 1 name the same device.
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Packet:
    """One normalized receiver record, ready for the catalog."""

    key: DeviceKey
    epoch: float
    display_time: str
    snr: float = 0.0
    freq: float = 0.0
    battery: Any = None
    status: Any = None
    type: Optional[str] = None
    source: Optional[str] = None
    line_no: Optional[int] = None


@dataclass(frozen=True)
class StatsConfig:
    """Which statistics to keep and how packets are grouped into transmissions."""

    transmission_window: float = 2.0
    enable_snr: bool = True
    enable_gap: bool = True
    enable_freq: bool = True
    enable_ppt: bool = True
    noise_floor: int = 0
    include_tpms: bool = False

    @classmethod
    def from_env(cls) -> "StatsConfig":
        return cls(
            transmission_window=_float_env("SNRWATCH_TRANSMISSION_WINDOW", 2.0),
            enable_snr=_bool_env("SNRWATCH_ENABLE_SNR", True),
            enable_gap=_bool_env("SNRWATCH_ENABLE_GAP", True),
            enable_freq=_bool_env("SNRWATCH_ENABLE_FREQ", True),
            enable_ppt=_bool_env("SNRWATCH_ENABLE_PPT", True),
            noise_floor=_int_env("SNRWATCH_NOISE_FLOOR", 0),
            include_tpms=_bool_env("SNRWATCH_INCLUDE_TPMS", False),
        )

    @property
    def enabled_categories(self) -> Tuple[str, ...]:
        flags = (
            ("snr", self.enable_snr),
            ("gap", self.enable_gap),
            ("freq", self.enable_freq),
            ("ppt", self.enable_ppt),
        )
        return tuple(name for name, enabled in flags if enabled)
