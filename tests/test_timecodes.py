from datetime import datetime

import pytest

from paxkit.timecodes import dcf77_frame, dcf77_pulse_levels, dec2bcd, if482_frame


def _bits(frame, start, end):
    return (frame >> start) & ((1 << (end - start + 1)) - 1)


def _popcount(value):
    return bin(value).count("1")


def test_dec2bcd_two_digits():
    bcd, parity = dec2bcd(45, 21, 28)
    assert bcd == 0x45 << 21
    assert parity == 1


def test_dec2bcd_truncates_to_range():
    bcd, _ = dec2bcd(59, 0, 2)
    assert bcd == 0x59 & 0b111


def test_dec2bcd_parity_is_even_over_written_bits():
    for value in range(60):
        bcd, parity = dec2bcd(value, 0, 7)
        assert (_popcount(bcd) + parity) % 2 == 0


def test_dcf77_fields_are_bcd():
    frame = dcf77_frame(datetime(2016, 8, 7, 13, 34))
    assert _bits(frame, 21, 27) == 0x34
    assert _bits(frame, 29, 34) == 0x13
    assert _bits(frame, 36, 41) == 0x07
    assert _bits(frame, 42, 44) == 7  # Sunday
    assert _bits(frame, 45, 49) == 0x08
    assert _bits(frame, 50, 57) == 0x16


@pytest.mark.parametrize(
    "when",
    [
        datetime(2016, 8, 6, 17, 4),
        datetime(2023, 12, 31, 23, 59),
        datetime(2000, 1, 1, 0, 0),
        datetime(2021, 5, 19, 7, 47),
    ],
)
def test_dcf77_parities_even(when):
    frame = dcf77_frame(when)
    assert _popcount(_bits(frame, 21, 28)) % 2 == 0
    assert _popcount(_bits(frame, 29, 35)) % 2 == 0
    assert _popcount(_bits(frame, 36, 58)) % 2 == 0
    assert frame & (1 << 20)


def test_dcf77_dst_bits():
    when = datetime(2020, 6, 1, 12, 0)
    summer = dcf77_frame(when, dst=True)
    winter = dcf77_frame(when, dst=False)
    assert _bits(summer, 17, 18) == 0b01
    assert _bits(winter, 17, 18) == 0b10
    assert summer >> 19 == winter >> 19


def test_pulse_levels():
    assert dcf77_pulse_levels(0) == (False, True, True)
    assert dcf77_pulse_levels(1) == (False, False, True)


def test_if482_example():
    assert if482_frame(datetime(2016, 8, 6, 17, 4, 0)) == "OAL1608066170400\r"


def test_if482_monitoring_flag():
    when = datetime(2022, 3, 14, 9, 26, 53)
    synced = if482_frame(when, synced=True)
    unsynced = if482_frame(when, synced=False)
    assert len(synced) == 17
    assert synced[1] == "A"
    assert unsynced[1] == "M"
    assert synced[2:] == unsynced[2:]
    assert synced.endswith("\r")