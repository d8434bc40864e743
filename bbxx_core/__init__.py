"""
BBXX Core Package.

Fuses noisy, partially-missing ship sensor samples into one observation and
encodes it as a BBXX marine weather report (and decodes/validates reports).

Package structure:
- proto: Data model (raw samples, averaged observations, decode results)
- fusion: Unit conversion, circular statistics, true wind, sample aggregation
- codec: BBXX group schema, encoder, decoder/validator, formatting
- metrics: Diagnostic counters

All components are pure and synchronous; nothing here performs I/O.
"""

__version__ = "1.0.0"
__author__ = "VOS Reporting Team"

from .errors import MissingDataError
from .fusion.aggregator import aggregate
from .codec.encoder import encode
from .codec.decoder import decode

__all__ = ['MissingDataError', 'aggregate', 'encode', 'decode']
