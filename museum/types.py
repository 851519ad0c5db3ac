"""
Shared enums for the museum backend.
"""

from enum import Enum


class ScanType(str, Enum):
    QR = "qr"
    IMAGE = "image"
    VISION = "vision"
