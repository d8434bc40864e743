"""
Proto Module: Data model shared by the fusion and codec layers.

- RawSample: one instantaneous sensor read (every field optional)
- DerivedWind: per-sample true wind
- AveragedObservation: fused observation handed to the encoder
- DecodeResult / DecodeIssue / DecodedField: decoder output
"""

from .raw_sample import RawSample
from .observation import (
    DerivedWind,
    AveragedObservation,
    REQUIRED_FIELDS,
)
from .report import (
    Severity,
    FieldStatus,
    DecodeIssue,
    DecodedField,
    DecodeResult,
)

__all__ = [
    'RawSample',
    'DerivedWind',
    'AveragedObservation',
    'REQUIRED_FIELDS',
    'Severity',
    'FieldStatus',
    'DecodeIssue',
    'DecodedField',
    'DecodeResult',
]
