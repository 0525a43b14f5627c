"""Location-engine support: list and message queue, message ids, filtered logging, configuration files, XTRA injection, NMEA output, NI request handling and a PN544 NFC profile."""

__version__ = "0.1.0"