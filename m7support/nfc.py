"""Hardware description of the PN544 NFC controller."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Tuple

NFC_HARDWARE_MODULE_ID = "nfc"
NFC_PN544_CONTROLLER = "pn544"
MODULE_NAME = "M7 NFC HW HAL"
MODULE_VERSION = (1, 0)
DEVICE_NODE = "/dev/pn544"


class LinkType(enum.Enum):
    """Bus the controller is attached by."""

    UART = "uart"
    I2C = "i2c"
    USB = "usb"


def _settings(*rows: Tuple[int, int, int, int]) -> Tuple[bytes, ...]:
    return tuple(bytes(row) for row in rows)


# Each setting is a 4-byte EEPROM write: 0x00, address high, address low, value.
EEPROM_SETTINGS: Tuple[bytes, ...] = _settings(
    # RF settings
    (0x00, 0x9B, 0xD1, 0x0D),  # Tx consumption higher than 0x0D (average 50mA)
    (0x00, 0x9B, 0xD2, 0x24),  # GSP setting for this threshold
    (0x00, 0x9B, 0xD3, 0x0A),  # Tx consumption higher than 0x0A (average 40mA)
    (0x00, 0x9B, 0xD4, 0x22),  # GSP setting for this threshold
    (0x00, 0x9B, 0xD5, 0x08),  # Tx consumption higher than 0x08 (average 30mA)
    (0x00, 0x9B, 0xD6, 0x1E),  # GSP setting for this threshold
    (0x00, 0x9B, 0xDD, 0x1C),  # GSP setting for this threshold
    (0x00, 0x9B, 0x84, 0x13),  # ANACM2 setting
    # Enable PBTF
    (0x00, 0x98, 0x00, 0x3F),  # secure element configuration: none
    (0x00, 0x9F, 0x09, 0x00),  # SWP_PBTF_RFU
    (0x00, 0x9F, 0x0A, 0x05),  # SWP_PBTF_RFLD: RF level detector for PBTF
    (0x00, 0x9E, 0xD1, 0xA1),
    # RF level detector ANARFLDWU
    (0x00, 0x99, 0x23, 0x00),
    # Low-power polling
    (0x00, 0x9E, 0x74, 0xB0),
    (0x00, 0x9E, 0x7D, 0xB0),
    (0x00, 0x9F, 0x28, 0x01),
    # Polling loop: card emulation timeout (0x1460 = 250 ms)
    (0x00, 0x9F, 0x35, 0x14),
    (0x00, 0x9F, 0x36, 0x60),
    # LLC timer
    (0x00, 0x9C, 0x31, 0x00),
    (0x00, 0x9C, 0x32, 0xC8),
    (0x00, 0x9C, 0x19, 0x40),
    (0x00, 0x9C, 0x1A, 0x40),
    (0x00, 0x9C, 0x0C, 0x00),
    (0x00, 0x9C, 0x0D, 0x00),
    (0x00, 0x9C, 0x12, 0x00),
    (0x00, 0x9C, 0x13, 0x00),
    # NFC-DEP target waiting time
    (0x00, 0x98, 0xA2, 0x08),
    # SE GPIO
    (0x00, 0x98, 0x93, 0x40),
    # NFCT ATQA
    (0x00, 0x98, 0x7D, 0x02),
    (0x00, 0x98, 0x7E, 0x00),
    # CEA detection mechanism
    (0x00, 0x9F, 0xC8, 0x01),
    # NFC-F poll RC=0x00
    (0x00, 0x9F, 0x9A, 0x00),
    # EMD support for ISO 14443-4 reader: disabled
    (0x00, 0x9F, 0x09, 0x00),
)


@dataclass
class Pn544Device:
    """An opened PN544 controller and the settings it is to be given."""

    eeprom_settings: Tuple[bytes, ...] = EEPROM_SETTINGS
    link_type: LinkType = LinkType.I2C
    device_node: str = DEVICE_NODE
    enable_i2c_workaround: bool = False
    version: int = 0
    module_id: str = NFC_HARDWARE_MODULE_ID
    module_name: str = MODULE_NAME
    closed: bool = field(default=False, init=False)

    @property
    def num_eeprom_settings(self) -> int:
        """Number of 4-byte EEPROM settings."""
        return len(self.eeprom_settings)

    @property
    def eeprom_data(self) -> bytes:
        """All EEPROM settings as one contiguous block."""
        return b"".join(self.eeprom_settings)

    def close(self) -> None:
        """Release the device."""
        self.closed = True


def open_device(name: str) -> Pn544Device:
    """Open the controller called ``name``; only the PN544 is known."""
    if name != NFC_PN544_CONTROLLER:
        raise ValueError(f"unknown NFC controller: {name!r}")
    return Pn544Device()