"""Persistent device configuration with magic-byte validation."""

from __future__ import annotations

import logging
import struct
from dataclasses import dataclass, replace
from pathlib import Path

__all__ = ["ConfigError", "DeviceConfig", "version_compare", "ConfigStore"]

log = logging.getLogger(__name__)

MAGIC = bytes((0x21, 0x76, 0x87, 0x32, 0xF4))
VERSION_SIZE = 10

_LAYOUT = struct.Struct("<10s6BhBHBBH6B")
CONFIG_SIZE = _LAYOUT.size


class ConfigError(Exception):
    """Configuration data cannot be encoded, decoded or stored."""


@dataclass
class DeviceConfig:
    """Runtime settings of the device."""

    version: str = ""
    loradr: int = 5
    txpower: int = 14
    adrmode: int = 1
    screensaver: int = 0
    screenon: int = 1
    countermode: int = 0
    rssilimit: int = 0
    sendcycle: int = 30
    sleepcycle: int = 0
    wakesync: int = 0
    wifichancycle: int = 50
    wifichanmap: int = 0x1FFF
    blescantime: int = 1
    blescan: int = 1
    wifiscan: int = 1
    wifiant: int = 0
    rgblum: int = 30
    payloadmask: int = 0x7F

    def to_bytes(self) -> bytes:
        """Binary image; the version keeps at most 9 characters."""
        version = self.version.encode("ascii", errors="replace")[: VERSION_SIZE - 1]
        try:
            return _LAYOUT.pack(
                version,
                self.loradr,
                self.txpower,
                self.adrmode,
                self.screensaver,
                self.screenon,
                self.countermode,
                self.rssilimit,
                self.sendcycle,
                self.sleepcycle,
                self.wakesync,
                self.wifichancycle,
                self.wifichanmap,
                self.blescantime,
                self.blescan,
                self.wifiscan,
                self.wifiant,
                self.rgblum,
                self.payloadmask,
            )
        except struct.error as exc:
            raise ConfigError(f"configuration value out of range: {exc}") from exc

    @classmethod
    def from_bytes(cls, data: bytes) -> "DeviceConfig":
        """Decode a binary image made by to_bytes."""
        if len(data) != CONFIG_SIZE:
            raise ConfigError(
                f"configuration image has {len(data)} bytes, expected {CONFIG_SIZE}"
            )
        raw_version, *values = _LAYOUT.unpack(data)
        version = raw_version.split(b"\0", 1)[0].decode("ascii", errors="replace")
        return cls(version, *values)


def version_compare(v1: str, v2: str) -> int:
    """Case-insensitive lexicographic compare: -1 if v1 is smaller, 0 if equal, else 1."""
    if v1 == v2:
        return 0
    return -1 if v1.lower() < v2.lower() else 1


class ConfigStore:
    """Keeps a DeviceConfig in a file, followed by fixed magic bytes."""

    def __init__(self, path, defaults: DeviceConfig | None = None):
        self.path = Path(path)
        self.defaults = defaults if defaults is not None else DeviceConfig()

    def save(self, config: DeviceConfig, erase: bool = False) -> DeviceConfig:
        """Store ``config`` and return it as stored.

        With ``erase`` the store is cleared and factory settings carrying
        ``config.version`` are written instead.
        """
        if erase:
            log.info("Resetting device to factory settings")
            self.path.unlink(missing_ok=True)
            config = replace(self.defaults, version=config.version)
        image = config.to_bytes()
        try:
            self.path.write_bytes(image + MAGIC)
        except OSError as exc:
            raise ConfigError(f"device settings not saved: {exc}") from exc
        log.info("Device settings saved")
        return DeviceConfig.from_bytes(image)

    def _factory_reset(self, firmware_version: str) -> DeviceConfig:
        return self.save(DeviceConfig(version=firmware_version), erase=True)

    def load(self, firmware_version: str) -> DeviceConfig:
        """Load the stored config, falling back to factory settings.

        Missing, short, corrupt or version-mismatched data is replaced by
        factory settings for ``firmware_version``.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            log.info("No stored settings, starting with factory settings")
            return self._factory_reset(firmware_version)
        except OSError as exc:
            raise ConfigError(f"cannot read device settings: {exc}") from exc

        if len(data) != CONFIG_SIZE + len(MAGIC):
            log.error("No valid configuration found")
            return self._factory_reset(firmware_version)
        if data[CONFIG_SIZE:] != MAGIC:
            log.error("Configuration data corrupt")
            return self._factory_reset(firmware_version)

        config = DeviceConfig.from_bytes(data[:CONFIG_SIZE])
        order = version_compare(firmware_version, config.version)
        if order < 0:
            log.error("Incompatible device configuration")
            return self._factory_reset(firmware_version)
        if order > 0:
            # no migration rules exist, so an update resets to factory settings
            log.warning("Device was updated, resetting configuration")
            return self._factory_reset(firmware_version)
        return config