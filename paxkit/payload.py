"""Payload encoders for uplink messages: plain big-endian and packed formats."""

from __future__ import annotations

import abc
from dataclasses import dataclass

from paxkit.config import DeviceConfig
from paxkit.ubx import GpsStatus

__all__ = ["BmeStatus", "PayloadEncoder", "PlainEncoder", "PackedEncoder"]

PAYLOAD_BUFFER_SIZE = 51
VERSION_FIELD_SIZE = 10


@dataclass
class BmeStatus:
    """Environmental sensor readings: °C, %RH, hPa, IAQ index and raw values."""

    temperature: float = 0.0
    humidity: float = 0.0
    pressure: float = 0.0
    iaq: float = 0.0
    iaq_accuracy: int = 0
    gas: float = 0.0
    raw_temperature: float = 0.0
    raw_humidity: float = 0.0


def _version_field(version: str) -> bytes:
    raw = version.encode("ascii", errors="replace")[: VERSION_FIELD_SIZE - 1]
    return raw.ljust(VERSION_FIELD_SIZE, b"\0")


class PayloadEncoder(abc.ABC):
    """Fixed-size payload buffer with a write cursor."""

    def __init__(self, size: int = PAYLOAD_BUFFER_SIZE, opensensebox: bool = False):
        if size <= 0:
            raise ValueError("payload buffer size must be positive")
        self.size = size
        self.opensensebox = opensensebox
        self._buffer = bytearray(size)
        self._cursor = 0

    def __len__(self) -> int:
        return self._cursor

    def reset(self) -> None:
        """Discard everything written so far."""
        self._cursor = 0

    def getvalue(self) -> bytes:
        """The bytes written since the last reset."""
        return bytes(self._buffer[: self._cursor])

    def _put(self, data: bytes) -> None:
        end = self._cursor + len(data)
        if end > self.size:
            raise OverflowError(
                f"payload of {end} bytes exceeds buffer of {self.size} bytes"
            )
        self._buffer[self._cursor : end] = data
        self._cursor = end

    def _put_be(self, value: int, width: int) -> None:
        mask = (1 << (8 * width)) - 1
        self._put((int(value) & mask).to_bytes(width, "big"))

    def _put_le(self, value: int, width: int) -> None:
        mask = (1 << (8 * width)) - 1
        self._put((int(value) & mask).to_bytes(width, "little"))

    @abc.abstractmethod
    def add_byte(self, value: int) -> None:
        """Append a single byte."""

    def add_chars(self, text: str | bytes) -> None:
        """Append each character of ``text`` as one byte."""
        data = text.encode("latin-1") if isinstance(text, str) else bytes(text)
        for byte in data:
            self.add_byte(byte)

    def add_sensor(self, data: bytes) -> None:
        """Copy a length-prefixed sensor record into the buffer.

        The record lands at the start of the buffer, and the cursor
        advances by its length.
        """
        data = bytes(data)
        if not data:
            raise ValueError("sensor record lacks its length byte")
        length = data[0]
        if length > len(data) - 1:
            raise ValueError(
                f"sensor record announces {length} bytes but holds {len(data) - 1}"
            )
        end = self._cursor + length
        if end > self.size or length > self.size:
            raise OverflowError(
                f"payload of {end} bytes exceeds buffer of {self.size} bytes"
            )
        self._buffer[0:length] = data[1 : 1 + length]
        self._cursor = end


class PlainEncoder(PayloadEncoder):
    """Plain format: fixed-width big-endian fields without special encoding."""

    def add_byte(self, value: int) -> None:
        self._put_be(value, 1)

    def add_count(self, value: int) -> None:
        """Append a 16-bit device count."""
        self._put_be(value, 2)

    def add_voltage(self, value: int) -> None:
        """Append a 16-bit voltage in millivolts."""
        self._put_be(value, 2)

    def add_config(self, config: DeviceConfig) -> None:
        """Append the 27-byte configuration record."""
        for value in (
            config.loradr,
            config.txpower,
            config.adrmode,
            config.screensaver,
            config.screenon,
            config.countermode,
        ):
            self._put_be(value, 1)
        self._put_be(config.rssilimit, 2)
        self._put_be(config.sendcycle, 1)
        self._put_be(config.wifichancycle, 1)
        self._put_be(config.blescantime, 1)
        self._put_be(config.blescan, 1)
        self._put_be(config.wifiant, 1)
        self._put_be(config.sleepcycle, 2)
        self._put_be(config.payloadmask, 1)
        self._put_be(0, 1)  # reserved
        self._put(_version_field(config.version))

    def add_status(self, voltage, uptime, cputemp, mem, reset0, restarts) -> None:
        """Append the 20-byte device status record."""
        self._put_be(voltage, 2)
        self._put_be(uptime, 8)
        self._put_be(int(cputemp), 1)
        self._put_be(mem, 4)
        self._put_be(reset0, 1)
        self._put_be(restarts, 4)

    def add_gps(self, status: GpsStatus) -> None:
        """Append latitude and longitude, then satellites, hdop and altitude."""
        self._put_be(status.latitude, 4)
        self._put_be(status.longitude, 4)
        if not self.opensensebox:
            self._put_be(status.satellites, 1)
            self._put_be(status.hdop, 2)
            self._put_be(status.altitude, 2)

    def add_bme(self, status: BmeStatus) -> None:
        """Append temperature, pressure, humidity and IAQ as 16-bit integers."""
        for value in (status.temperature, status.pressure, status.humidity, status.iaq):
            self._put_be(int(value), 2)

    def add_sds(self, pm10: float, pm25: float) -> None:
        """Append fine dust values as text, each as ",%5.1f"."""
        self.add_chars(f",{pm10:5.1f}")
        self.add_chars(f",{pm25:5.1f}")

    def add_button(self, value: int) -> None:
        self._put_be(value, 1)

    def add_time(self, value: int) -> None:
        """Append epoch seconds as a 32-bit integer."""
        self._put_be(int(value), 4)


class PackedEncoder(PayloadEncoder):
    """Packed format: little-endian integers, scaled floats and bitmaps."""

    def add_byte(self, value: int) -> None:
        self._put_le(value, 1)

    def add_count(self, value: int) -> None:
        self._put_le(value, 2)

    def add_voltage(self, value: int) -> None:
        self._put_le(value, 2)

    def add_config(self, config: DeviceConfig) -> None:
        """Append settings, a flag bitmap, the payload mask and the version."""
        self._put_le(config.loradr, 1)
        self._put_le(config.txpower, 1)
        self._put_le(config.rssilimit, 2)
        self._put_le(config.sendcycle, 1)
        self._put_le(config.wifichancycle, 1)
        self._put_le(config.blescantime, 1)
        self._put_le(config.sleepcycle, 2)
        self.write_bitmap(
            bool(config.adrmode),
            bool(config.screensaver),
            bool(config.screenon),
            bool(config.countermode),
            bool(config.blescan),
            bool(config.wifiant),
            False,
            False,
        )
        self._put_le(config.payloadmask, 1)
        self._put(_version_field(config.version))

    def add_status(self, voltage, uptime, cputemp, mem, reset0, restarts) -> None:
        self._put_le(voltage, 2)
        self._put_le(uptime, 8)
        self._put_le(int(cputemp), 1)
        self._put_le(mem, 4)
        self._put_le(reset0, 1)
        self._put_le(restarts, 4)

    def add_gps(self, status: GpsStatus) -> None:
        self._put_le(status.latitude, 4)
        self._put_le(status.longitude, 4)
        if not self.opensensebox:
            self._put_le(status.satellites, 1)
            self._put_le(status.hdop, 2)
            self._put_le(status.altitude, 2)

    def add_bme(self, status: BmeStatus) -> None:
        """Temperature as signed hundredths, pressure in tenths, the rest in hundredths."""
        self.write_float(status.temperature)
        self._put_le(int(status.pressure * 10), 2)
        self._put_le(int(status.humidity * 100), 2)
        self._put_le(int(status.iaq * 100), 2)

    def add_sds(self, pm10: float, pm25: float) -> None:
        self._put_le(int(pm10 * 10), 2)
        self._put_le(int(pm25 * 10), 2)

    def add_button(self, value: int) -> None:
        self._put_le(value, 1)

    def add_time(self, value: int) -> None:
        self._put_le(int(value), 4)

    def write_float(self, value: float) -> None:
        """Write a 16-bit two's complement with two decimals, high byte first.

        The range is -327.68 to +327.67.
        """
        self._put_be(int(value * 100), 2)

    def write_bitmap(self, *args) -> None:
        """Write up to eight flags as one byte, the first flag in the top bit."""
        if len(args) > 8:
            raise ValueError(f"a bitmap holds 8 flags, got {len(args)}")
        bitmap = 0
        for position, flag in enumerate(args):
            if flag:
                bitmap |= 1 << (7 - position)
        self._put_le(bitmap, 1)