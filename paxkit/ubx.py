"""u-blox UBX configuration packets and evaluation of decoded GPS data."""

from __future__ import annotations

import calendar
from dataclasses import dataclass

__all__ = [
    "ubx_checksum",
    "ubx_packet",
    "cfg_prt",
    "cfg_cfg",
    "cfg_msg_disable_packets",
    "GpsStatus",
    "GpsReading",
]

SYNC = b"\xb5\x62"

# NMEA messages switched off, leaving GGA and RMC for the decoder
NMEA_DISABLE_IDS = (
    (0xF0, 0x01), (0xF0, 0x02), (0xF0, 0x03), (0xF0, 0x05),
    (0xF0, 0x06), (0xF0, 0x07), (0xF0, 0x08), (0xF0, 0x09),
    (0xF0, 0x0A), (0xF0, 0x0E), (0xF1, 0x00), (0xF1, 0x03),
    (0xF1, 0x04), (0xF1, 0x05), (0xF1, 0x06),
)


def ubx_checksum(packet: bytes) -> bytes:
    """Fletcher checksum over a packet, skipping its two sync characters."""
    ck_a = ck_b = 0
    for byte in packet[2:]:
        ck_a = (ck_a + byte) & 0xFF
        ck_b = (ck_b + ck_a) & 0xFF
    return bytes((ck_a, ck_b))


def ubx_packet(body: bytes) -> bytes:
    """Frame class, id, length and payload with sync chars and checksum."""
    packet = SYNC + bytes(body)
    return packet + ubx_checksum(packet)


def cfg_prt(baudrate: int) -> bytes:
    """CFG-PRT: UART1 at 8N1, NMEA+UBX in, NMEA out, at ``baudrate``."""
    body = (
        bytes((0x06, 0x00, 0x14, 0x00))
        + bytes((0x01, 0x00, 0x00, 0x00))
        + bytes((0b11010000, 0b00001000, 0x00, 0x00))
        + (baudrate & 0xFFFFFFFF).to_bytes(4, "little")
        + bytes((0b00000011, 0x00, 0b00000010, 0x00))
        + bytes(4)
    )
    return ubx_packet(body)


def cfg_cfg() -> bytes:
    """CFG-CFG: clear and reload the default configuration."""
    body = bytes(
        (
            0x06, 0x09, 0x0D, 0x00,
            0b00011111, 0b00000110, 0x00, 0x00,
            0x00, 0x00, 0x00, 0x00,
            0b00011111, 0b00000110, 0x00, 0x00,
            0b00010001,
        )
    )
    return ubx_packet(body)


def cfg_msg_disable_packets() -> list[bytes]:
    """CFG-MSG packets that switch off every unneeded NMEA sentence."""
    return [
        ubx_packet(bytes((0x06, 0x01, 0x03, 0x00, msg_class, msg_id, 0x00)))
        for msg_class, msg_id in NMEA_DISABLE_IDS
    ]


@dataclass
class GpsStatus:
    """Location as carried in payloads: degrees times 1e6, hdop, metres."""

    latitude: int = 0
    longitude: int = 0
    satellites: int = 0
    hdop: int = 0
    altitude: int = 0


def _to_int16(value: int) -> int:
    value &= 0xFFFF
    return value - 0x10000 if value & 0x8000 else value


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


@dataclass
class GpsReading:
    """Decoded NMEA state with validity flags and ages in milliseconds."""

    lat: float = 0.0
    lng: float = 0.0
    location_valid: bool = False
    location_updated: bool = False
    location_age: int = 0xFFFFFFFF
    satellites: int = 0
    hdop: int = 0
    hdop_valid: bool = False
    hdop_age: int = 0xFFFFFFFF
    altitude: float = 0.0
    altitude_valid: bool = False
    altitude_age: int = 0xFFFFFFFF
    year: int = 2000
    month: int = 1
    day: int = 1
    hour: int = 0
    minute: int = 0
    second: int = 0
    centisecond: int = 0
    time_age: int = 0xFFFFFFFF

    def has_fix(self) -> bool:
        """True if location, hdop and altitude are valid and recent."""
        return (
            self.location_valid
            and self.location_age < 4000
            and self.hdop_valid
            and self.hdop <= 600
            and self.hdop_age < 4000
            and self.altitude_valid
            and self.altitude_age < 4000
        )

    def location_status(self) -> GpsStatus | None:
        """Current location as a GpsStatus, or None if not freshly updated."""
        if not (
            self.location_updated
            and self.location_valid
            and self.location_age < 1500
        ):
            return None
        return GpsStatus(
            latitude=_to_int32(int(self.lat * 1e6)),
            longitude=_to_int32(int(self.lng * 1e6)),
            satellites=self.satellites & 0xFF,
            hdop=self.hdop & 0xFFFF,
            altitude=_to_int16(int(self.altitude)),
        )

    def utc_time(self, baudrate: int) -> tuple[int, int] | None:
        """UTC epoch seconds and millisecond offset, or None if stale.

        The offset adds the serial transfer time of about 70 NMEA
        characters at ``baudrate`` to the reported centiseconds.
        """
        if self.time_age >= 1000:
            return None
        tx_delay = 70 * 1000 // (baudrate // 9)
        epoch = calendar.timegm(
            (self.year, self.month, self.day, self.hour, self.minute, self.second, 0, 0, 0)
        )
        return epoch, self.centisecond * 10 + tx_delay