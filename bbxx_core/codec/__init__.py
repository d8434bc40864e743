"""
Codec Module: BBXX wire format.

Key pieces:
- schema: ordered group table shared by encoder and decoder
- BbxxEncoder: AveragedObservation -> report string
- BbxxDecoder: report string -> DecodeResult (never raises)
- formatting: degrees/minutes and plain-text summaries
- submission: NOAA form payload
"""

from .schema import (
    GroupSpec,
    MESSAGE_LAYOUT,
    QUADRANT_SIGNS,
    quadrant_for,
    half_up,
)
from .encoder import BbxxEncoder, encode
from .decoder import BbxxDecoder, DecodeContext, decode
from .formatting import (
    decimal_to_dm,
    decimal_to_dm_str,
    human_readable_report,
)
from .submission import build_submission_form, NOAA_FORM_URL

__all__ = [
    'GroupSpec',
    'MESSAGE_LAYOUT',
    'QUADRANT_SIGNS',
    'quadrant_for',
    'half_up',
    'BbxxEncoder',
    'encode',
    'BbxxDecoder',
    'DecodeContext',
    'decode',
    'decimal_to_dm',
    'decimal_to_dm_str',
    'human_readable_report',
    'build_submission_form',
    'NOAA_FORM_URL',
]
