# paxkit

Building blocks for a passenger-counting sensor node. paxkit holds the parts of
such a device that are plain data handling, so they run and can be tested on any
machine:

- **`paxkit.timecodes`**: DCF77 minute frames (`dcf77_frame`), the line levels
  of one second's pulse (`dcf77_pulse_levels`), BCD placement with parity
  (`dec2bcd`) and 17-character IF482 telegrams (`if482_frame`).
- **`paxkit.ubx`**: u-blox UBX configuration packets with Fletcher checksums:
  `cfg_prt`, `cfg_cfg`, `cfg_msg_disable_packets`, `ubx_packet` and
  `ubx_checksum`. `GpsReading` holds decoded NMEA state and offers
  `has_fix()`, `location_status()` (returning a `GpsStatus` or `None`) and
  `utc_time(baudrate)`.
- **`paxkit.config`**: `DeviceConfig` with `to_bytes()` / `from_bytes()`,
  `version_compare`, and `ConfigStore`, which keeps a configuration in a file
  followed by magic bytes. `ConfigStore.load(firmware_version)` falls back to
  factory settings when the file is missing, has the wrong length, is corrupt,
  or was written for a different version. Encoding, decoding and storage
  problems raise `ConfigError`.
- **`paxkit.payload`**: uplink payload encoders on a fixed-size buffer.
  `PlainEncoder` writes fixed-width big-endian fields; `PackedEncoder` writes
  little-endian integers, scaled floats (`write_float`) and flag bitmaps
  (`write_bitmap`). Both take counts, voltages, `DeviceConfig`, device status,
  `GpsStatus`, `BmeStatus`, fine dust values, button presses and times.
  Writing past the buffer raises `OverflowError`.
- **`paxkit.messaging`**: a bounded `SendQueue` of `Message` objects that raises
  `QueueFull` when full and keeps the head message until `pop()`; DevEUI helpers
  (`generate_deveui`, `resolve_deveui`, `app_eui_lsb`, `format_key`); radio
  parameter names (`sf_name`, `bw_name`, `cr_name`); and MQTT helpers
  (`mqtt_topic`, `encode_mqtt_payload`, `decode_mqtt_payload`).
- **`paxkit.framebuffer`**: `PageBuffer`, a monochrome buffer in pages of eight
  rows with pixel access and horizontal and vertical scrolling; `CurvePlotter`,
  which plots one dot per count cycle; and `next_page` for cycling display
  pages.
- **`paxkit.bintray`**: `BintrayClient`, which asks a package server for the
  latest firmware version (`latest_version()`) and the download path of a
  version (`binary_path(version)`) over HTTPS, using `requests`.

## Installation

```
pip install paxkit
```

To run the test suite:

```
pip install "paxkit[test]"
pytest
```

## Examples

Build the UBX packet that sets the GPS serial port to 115200 baud:

```python
from paxkit.ubx import cfg_prt

packet = cfg_prt(115200)
```

Build the DCF77 frame and the IF482 telegram for a given minute:

```python
from datetime import datetime
from paxkit.timecodes import dcf77_frame, if482_frame

when = datetime(2024, 3, 15, 12, 30, 0)
frame = dcf77_frame(when, dst=False)
telegram = if482_frame(when)  # "OAL2403155123000\r"
```

Encode a counter and a button press in the packed format:

```python
from paxkit.payload import PackedEncoder

encoder = PackedEncoder()
encoder.add_count(42)
encoder.add_button(1)
data = encoder.getvalue()
```

Keep outgoing messages in a bounded queue:

```python
from paxkit.messaging import Message, SendQueue, QueueFull

queue = SendQueue(maxsize=4)
queue.enqueue(Message(port=1, payload=data))
message = queue.peek()
queue.pop()
```

Store and reload the device configuration:

```python
from paxkit.config import ConfigStore, DeviceConfig, version_compare

store = ConfigStore("device.cfg")
store.save(DeviceConfig(version="1.0.0"))
config = store.load("1.0.0")

version_compare("3.4.0", "3.3.9")  # 1
```

## What paxkit does not do

paxkit builds frames, packets, payloads and buffers; it does not talk to
hardware or networks on its own apart from the HTTP requests of
`BintrayClient`. It does not send anything over a LoRaWAN radio or connect to
an MQTT broker: `SendQueue` and the MQTT helpers only prepare what would be
sent. It does not read a GPS receiver or sensors, drive a display or an LED
matrix, or flash firmware, and it has no command-line program.