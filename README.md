# m7support

Building blocks for a satellite-positioning engine and its NFC controller,
as a plain Python library with no third-party dependencies.

## Modules

| Module | Contents |
| --- | --- |
| `m7support.linked_list` | `LinkedList`: `add` at the head, `remove` from the tail (FIFO order), `search`, `flush` with per-item deallocation callbacks; `ListStatus`, `LinkedListError`. |
| `m7support.msg_q` | `MessageQueue`: thread-safe blocking FIFO on top of `LinkedList`, with `send`, `receive`, `flush` and `unblock`; `QueueStatus`, `MessageQueueError`, `status_from_list_status`. |
| `m7support.msg_ids` | `build_message_ids(ulp)`: engine message identifiers by name; `MESSAGE_IDS` and `ULP_MESSAGE_IDS` are the two prebuilt tables. |
| `m7support.loc_log` | `LocLogger`, a logger filtered by a numeric debug level, the shared `loc_logger` and `logger_init`; `name_from_val`, `name_from_mask`, `msg_q_status_name`, `succ_fail_string`, `get_time`, `get_timestamp`. |
| `m7support.loc_cfg` | `read_conf(path, table)` for `NAME = VALUE` files; `ConfigParam`, `ParamType`, `ConfigValue`, `parse_value`, `trim_space`. |
| `m7support.xtra` | `XtraModule`: registers the XTRA download-request callback and sends `InjectXtraData` messages. |
| `m7support.nmea` | `NmeaGenerator`: `$GPGSA`, `$GPVTG`, `$GPRMC`, `$GPGGA` and `$GPGSV` sentences from `Location`, `LocationExtended` and `SvStatus`; `put_checksum`. |
| `m7support.ni` | `NiHandler`: one network-initiated request at a time, with a user-response timeout; `NiNotification`, `NiResponse`, `InformNiResponse`. |
| `m7support.nfc` | `open_device(name)`: the PN544 controller profile (`Pn544Device`) with its EEPROM settings. |

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

A message queue shared between threads:

```python
from m7support.msg_q import MessageQueue

queue = MessageQueue()
queue.send("hello", None)
print(queue.receive())   # "hello"
queue.unblock()          # wakes every waiter; later send/receive raise MessageQueueError
```

`receive` blocks until a message arrives or the queue is unblocked.

Checksumming an NMEA sentence:

```python
from m7support.nmea import put_checksum

print(put_checksum("$GPGSV,1,1,0,"))   # the sentence with "*HH\r\n" appended
```

Producing sentences from reports:

```python
from m7support.nmea import NmeaGenerator, SvInfo, SvStatus

generator = NmeaGenerator(callback=lambda ms, sentence, length: print(sentence, end=""))
generator.generate_sv(SvStatus([SvInfo(prn=5, snr=30.0, elevation=45.0, azimuth=120.0)]))
```

The callback receives the time in milliseconds, the sentence and its length
less the leading `$`; each `generate_*` method also returns the sentences it
sent. A satellite report with no satellite used in the fix is followed by
blank GSA, VTG, RMC and GGA sentences; otherwise the used mask and DOP values
are kept for the next `generate_pos`.

Reading a configuration file:

```python
from m7support.loc_cfg import ConfigParam, ParamType, read_conf

table = [ConfigParam("SUPL_PORT", ParamType.NUMBER)]
found = read_conf("gps.conf", table)
print(found, table[0].value, table[0].is_set)
```

`read_conf` returns whether the file could be read. Values starting `0x` are
read as hexadecimal; the string `NULL` clears a string parameter; lines
without `=` or without a value are skipped. The file may also set
`DEBUG_LEVEL` and `TIMESTAMP`, which configure the shared `loc_logger`
(defaults 3 and 0).

Network-initiated requests:

```python
from m7support.ni import NiHandler, NiNotification, NiResponse

handler = NiHandler(sender=print)
handler.init(lambda notification: None)
handler.request(NiNotification(timeout=10), raw_request=b"request")
handler.respond(0, NiResponse.ACCEPT)   # an InformNiResponse is passed to sender
```

Without a response in time (timeout plus a five-second grace, 20 seconds when
the notification gives none) the request is answered with `NiResponse.NORESP`.

## Errors

Failures are raised: `LinkedListError` and `MessageQueueError` carry a
`ListStatus` or `QueueStatus`; missing callbacks and unknown NFC controller
names raise `ValueError`; using an `NiHandler` before `init`, or calling
`init` twice, raises `RuntimeError`.

## What this package does not do

It does not talk to positioning or NFC hardware. There is no engine that runs
position sessions: `XtraModule` and `NiHandler` only hand their messages to
the `sender` callable you give them, and `NmeaGenerator` is told through
`standalone` which position mode is in use. `open_device` returns a
description of the PN544 controller and its settings; it opens no device
node. There is no command-line program and no daemon.