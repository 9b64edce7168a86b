"""Time telegrams for external clocks: DCF77 pulse frames and IF482 strings."""

from __future__ import annotations

from datetime import datetime

__all__ = ["dec2bcd", "dcf77_frame", "dcf77_pulse_levels", "if482_frame"]


def _dcf_bit(pos: int) -> int:
    return 1 << pos


def dec2bcd(dec: int, startpos: int, endpos: int) -> tuple[int, int]:
    """Place ``dec`` as BCD into frame bits ``startpos..endpos``.

    Returns the bits as an integer and the even parity of the bits written.
    """
    dec &= 0xFF
    data = dec if dec < 10 else (((dec // 10) << 4) + dec % 10) & 0xFF
    bcd = 0
    parity = 0
    for pos in range(startpos, endpos + 1):
        if data & 1:
            bcd |= _dcf_bit(pos)
        parity ^= data & 1
        data >>= 1
    return bcd, parity


def dcf77_frame(when: datetime, dst: bool = False) -> int:
    """Build the 59-bit DCF77 frame for the minute given by ``when``."""
    frame = _dcf_bit(17) if dst else _dcf_bit(18)
    frame |= _dcf_bit(20)  # begin of time information

    bits, parity = dec2bcd(when.minute, 21, 27)
    frame |= bits
    if parity:
        frame |= _dcf_bit(28)

    bits, parity = dec2bcd(when.hour, 29, 34)
    frame |= bits
    if parity:
        frame |= _dcf_bit(35)

    parity_sum = 0
    for value, start, end in (
        (when.day, 36, 41),
        (when.isoweekday(), 42, 44),
        (when.month, 45, 49),
        (when.year - 2000, 50, 57),
    ):
        bits, parity = dec2bcd(value, start, end)
        frame |= bits
        parity_sum ^= parity
    if parity_sum:
        frame |= _dcf_bit(58)
    return frame


def dcf77_pulse_levels(bit: int) -> tuple[bool, bool, bool]:
    """Line levels for the three 100 ms slots of one second's pulse.

    The line goes low at the start; it returns high after 100 ms for a 0
    and after 200 ms for a 1.
    """
    return (False, bit == 0, True)


def if482_frame(when: datetime, synced: bool = True) -> str:
    """Return the 17 character IF482 telegram for local time ``when``."""
    monitor = "A" if synced else "M"
    return (
        f"O{monitor}L{when:%y%m%d}{when.isoweekday()}{when:%H%M%S}\r"
    )