"""
Decode Result Schema.

The decoder never raises. It returns a DecodeResult holding a structured
record of every group plus an itemized list of issues, each either an
ERROR (message structurally invalid) or a WARNING (suspicious value).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Severity(Enum):
    """Issue severity."""

    ERROR = "error"        # Invalidates the message
    WARNING = "warning"    # Advisory only


class FieldStatus(Enum):
    """Outcome of decoding one field."""

    OK = "ok"              # Parsed and in range
    OMITTED = "omitted"    # Sentinel group (all '/'), value not reported
    INVALID = "invalid"    # Present but malformed or out of range
    MISSING = "missing"    # Group absent from the message


@dataclass
class DecodeIssue:
    """
    One problem found while decoding.

    Attributes:
        severity: ERROR or WARNING
        message: Human-readable description
        group: Name of the group concerned (None for message-level issues)
    """

    severity: Severity
    message: str
    group: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def to_dict(self) -> dict:
        return {
            'severity': self.severity.value,
            'message': self.message,
            'group': self.group,
        }


@dataclass
class DecodedField:
    """
    Decoded value of one report field.

    Attributes:
        name: Field name (e.g. 'latitude_deg', 'wind_speed_knots')
        raw: Raw group text the field came from
        status: OK, OMITTED, INVALID or MISSING
        value: Decoded value (None unless status is OK or, for
            out-of-range values, INVALID)
    """

    name: str
    raw: Optional[str]
    status: FieldStatus
    value: Any = None

    @property
    def is_ok(self) -> bool:
        return self.status == FieldStatus.OK

    @property
    def is_omitted(self) -> bool:
        return self.status == FieldStatus.OMITTED


@dataclass
class DecodeResult:
    """
    Verdict of decoding a BBXX message.

    Attributes:
        is_valid: False if any ERROR issue was raised
        fields: Decoded fields keyed by name
        issues: Ordered list of issues
        message: The input message
    """

    is_valid: bool
    fields: Dict[str, DecodedField] = field(default_factory=dict)
    issues: List[DecodeIssue] = field(default_factory=list)
    message: str = ""

    @property
    def errors(self) -> List[DecodeIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> List[DecodeIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    def status(self, name: str) -> FieldStatus:
        """Status of a field, MISSING if it was never decoded."""
        f = self.fields.get(name)
        return f.status if f is not None else FieldStatus.MISSING

    def value(self, name: str) -> Any:
        """Decoded value of a field, None unless its status is OK."""
        f = self.fields.get(name)
        if f is None or f.status != FieldStatus.OK:
            return None
        return f.value

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            'is_valid': self.is_valid,
            'message': self.message,
            'fields': {
                name: {'raw': f.raw, 'status': f.status.value, 'value': f.value}
                for name, f in self.fields.items()
            },
            'issues': [i.to_dict() for i in self.issues],
        }
