"""Uplink send queues, LoRaWAN identifiers and MQTT payload helpers."""

from __future__ import annotations

import base64
import binascii
from collections import deque
from dataclasses import dataclass

__all__ = [
    "Message",
    "QueueFull",
    "SendQueue",
    "generate_deveui",
    "resolve_deveui",
    "app_eui_lsb",
    "format_key",
    "sf_name",
    "bw_name",
    "cr_name",
    "mqtt_topic",
    "encode_mqtt_payload",
    "decode_mqtt_payload",
]

EUI_SIZE = 8
MAC_SIZE = 6
TOPIC_SIZE = 16  # including the terminating byte of the device buffer

_SF_NAMES = ("FSK", "SF7", "SF8", "SF9", "SF10", "SF11", "SF12", "SF?")
_BW_NAMES = ("BW125", "BW250", "BW500", "BW?")
_CR_NAMES = ("CR 4/5", "CR 4/6", "CR 4/7", "CR 4/8")


@dataclass(frozen=True)
class Message:
    """A payload to be sent on an application port."""

    port: int
    payload: bytes

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 0xFF:
            raise ValueError(f"port {self.port} out of range 0..255")
        object.__setattr__(self, "payload", bytes(self.payload))

    @property
    def size(self) -> int:
        return len(self.payload)


class QueueFull(Exception):
    """The send queue has no room for another message."""


class SendQueue:
    """Bounded FIFO of outgoing messages.

    A message stays at the head until it is popped, so a failed
    transmission can be retried with the same message.
    """

    def __init__(self, maxsize: int):
        if maxsize <= 0:
            raise ValueError("send queue size must be positive")
        self.maxsize = maxsize
        self._items: deque[Message] = deque()

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def enqueue(self, message: Message) -> int:
        """Append ``message`` and return the number of messages waiting."""
        if len(self._items) >= self.maxsize:
            raise QueueFull(f"send queue is full ({self.maxsize} messages)")
        self._items.append(message)
        return len(self._items)

    def peek(self) -> Message | None:
        """The next message to send, left in the queue; None if empty."""
        return self._items[0] if self._items else None

    def pop(self) -> Message:
        """Remove and return the next message."""
        if not self._items:
            raise IndexError("pop from an empty send queue")
        return self._items.popleft()

    def reset(self) -> None:
        """Drop every waiting message."""
        self._items.clear()


def _exact(data: bytes, size: int, what: str) -> bytes:
    data = bytes(data)
    if len(data) != size:
        raise ValueError(f"{what} must be {size} bytes, got {len(data)}")
    return data


def generate_deveui(mac: bytes) -> bytes:
    """DevEUI in LSB order from a 6-byte MAC: FF FE then the MAC reversed."""
    mac = _exact(mac, MAC_SIZE, "MAC address")
    return bytes((0xFF, 0xFE)) + mac[::-1]


def resolve_deveui(configured: bytes, mac: bytes) -> bytes:
    """DevEUI in LSB order.

    A configured DevEUI (MSB order) is used if any of its bytes is set,
    otherwise one is generated from ``mac``.
    """
    configured = _exact(configured, EUI_SIZE, "DevEUI")
    if any(configured):
        return configured[::-1]
    return generate_deveui(mac)


def app_eui_lsb(appeui: bytes) -> bytes:
    """AppEUI swapped from MSB to LSB order."""
    return _exact(appeui, EUI_SIZE, "AppEUI")[::-1]


def format_key(key: bytes, lsb: bool = False) -> str:
    """Upper-case hex of ``key``; with ``lsb`` the bytes are shown reversed."""
    data = bytes(key)
    if lsb:
        data = data[::-1]
    return data.hex().upper()


def _lookup(table: tuple[str, ...], index: int, what: str) -> str:
    if not 0 <= index < len(table):
        raise ValueError(f"{what} code {index} out of range 0..{len(table) - 1}")
    return table[index]


def sf_name(sf: int) -> str:
    """Display name of a spreading factor code."""
    return _lookup(_SF_NAMES, sf, "spreading factor")


def bw_name(bw: int) -> str:
    """Display name of a bandwidth code."""
    return _lookup(_BW_NAMES, bw, "bandwidth")


def cr_name(cr: int) -> str:
    """Display name of a coding rate code."""
    return _lookup(_CR_NAMES, cr, "coding rate")


def mqtt_topic(outtopic: str, port: int) -> str:
    """Publish topic for a port, cut to the 15 characters the device allows."""
    return f"{outtopic}/{port}"[: TOPIC_SIZE - 1]


def encode_mqtt_payload(message: Message) -> bytes:
    """Base64 encoding of the message payload, as published."""
    return base64.b64encode(message.payload)


def decode_mqtt_payload(payload: bytes | str) -> bytes:
    """Decode a base64 payload received from the broker."""
    if isinstance(payload, str):
        payload = payload.encode("ascii")
    try:
        return base64.b64decode(payload, validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc