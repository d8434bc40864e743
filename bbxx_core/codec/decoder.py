"""
BBXX Decoder / Validator.

Parses a BBXX report back into structured fields and validates it group
by group. Decoding never raises: every problem is reported as an issue.

- ERROR issues make the message invalid (wrong tag, wrong group width,
  missing section 2 marker, bad quadrant, out-of-range position or wind
  direction, malformed water temperature)
- WARNING issues are advisory (day/hour range, wind speed, water
  temperature range, missing '=', non-standard precipitation or
  omitted groups)

Sentinel groups decode to FieldStatus.OMITTED, never to INVALID.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from bbxx_core.proto.report import (
    DecodedField,
    DecodeIssue,
    DecodeResult,
    FieldStatus,
    Severity,
)
from bbxx_core.codec.schema import (
    GroupSpec,
    GROUP_WIDTH,
    MIN_GROUPS,
    QUADRANT_SIGNS,
    SECTION_1_HEAD,
    SECTION_1_OMITTED,
    SECTION_2_MARKER,
    SECTION_2_OMITTED,
    SENTINEL,
    STATION,
    WATER_TEMP,
    ICE,
    TERMINATOR,
)
from bbxx_core.metrics import get_metrics

logger = logging.getLogger(__name__)


class DecodeContext:
    """Collects decoded fields and issues while walking the groups."""

    def __init__(self):
        self.fields: Dict[str, DecodedField] = {}
        self.issues: List[DecodeIssue] = []

    def error(self, group: Optional[str], message: str) -> None:
        self.issues.append(DecodeIssue(Severity.ERROR, message, group))

    def warning(self, group: Optional[str], message: str) -> None:
        self.issues.append(DecodeIssue(Severity.WARNING, message, group))

    def set(self, name: str, raw: Optional[str], status: FieldStatus, value: Any = None) -> None:
        self.fields[name] = DecodedField(name, raw, status, value)

    def value(self, name: str) -> Any:
        f = self.fields.get(name)
        return f.value if f is not None and f.status == FieldStatus.OK else None

    @property
    def has_errors(self) -> bool:
        return any(i.severity == Severity.ERROR for i in self.issues)


class BbxxDecoder:
    """
    Decode and validate BBXX reports.

    Usage:
        decoder = BbxxDecoder()
        result = decoder.decode(report)

        if result.is_valid:
            print(result.value('latitude_deg'), result.value('wind_speed_knots'))
        for issue in result.issues:
            print(issue.severity.value, issue.message)
    """

    def __init__(self):
        self.metrics = get_metrics()

    def decode(self, message: Any) -> DecodeResult:
        """
        Decode a BBXX message.

        Args:
            message: Report text

        Returns:
            DecodeResult with is_valid, decoded fields and issues
        """
        ctx = DecodeContext()

        if not isinstance(message, str):
            ctx.error(None, f"Message must be a string, got {type(message).__name__}")
            return self._finish(ctx, "")

        parts = message.split()
        if len(parts) < MIN_GROUPS:
            ctx.error(None, f"Invalid BBXX format - insufficient groups "
                            f"({len(parts)}, at least {MIN_GROUPS} expected)")

        self._decode_section_1(parts, ctx)
        marker_index = self._find_section_2(parts, ctx)
        if marker_index is not None:
            self._decode_section_2(parts, marker_index, ctx)

        if not message.rstrip().endswith('='):
            ctx.warning(TERMINATOR.name, "Message should end with =")

        self._apply_quadrant(ctx)
        return self._finish(ctx, message)

    def _decode_section_1(self, parts: List[str], ctx: DecodeContext) -> None:
        """Decode the positional head of section 1."""
        for index, spec in enumerate(SECTION_1_HEAD):
            raw = parts[index] if index < len(parts) else None
            if raw is None:
                self._mark_missing(spec, ctx)
            elif spec is STATION:
                ctx.set('station_id', raw, FieldStatus.OK, raw)
            else:
                self._decode_group(spec, raw, ctx)

    def _find_section_2(self, parts: List[str], ctx: DecodeContext) -> Optional[int]:
        """Locate the section 2 marker and check the omitted groups before it."""
        head = len(SECTION_1_HEAD)
        try:
            marker_index = parts.index(SECTION_2_MARKER.literal, head)
        except ValueError:
            ctx.error(SECTION_2_MARKER.name,
                      f"Missing section 2 identifier ({SECTION_2_MARKER.literal})")
            ctx.set('water_temp_c', None, FieldStatus.MISSING)
            return None

        self._decode_omitted(SECTION_1_OMITTED, parts[head:marker_index], ctx)
        return marker_index

    def _decode_section_2(self, parts: List[str], marker_index: int, ctx: DecodeContext) -> None:
        """Decode the water temperature and check the trailing groups."""
        rest = parts[marker_index + 1:]
        if not rest or rest[0] == ICE.literal or rest[0].endswith('='):
            ctx.error(WATER_TEMP.name, "Missing water temperature group")
            ctx.set('water_temp_c', None, FieldStatus.MISSING)
            trailing = rest
        else:
            self._decode_group(WATER_TEMP, rest[0], ctx)
            trailing = rest[1:]

        omitted = [raw for raw in trailing if raw != ICE.literal and not raw.endswith('=')]
        self._decode_omitted(SECTION_2_OMITTED, omitted, ctx)

    def _decode_omitted(self, specs: Tuple[GroupSpec, ...], raws: List[str], ctx: DecodeContext) -> None:
        """
        Check a run of omitted groups against their specs, in order.

        Groups beyond the specs (older reports carry an extra 8//// before
        ICE) are only width-checked.
        """
        for spec, raw in zip(specs, raws):
            self._decode_group(spec, raw, ctx)
        for spec in specs[len(raws):]:
            ctx.warning(spec.name, f"Missing group {spec.literal}")
            ctx.set(spec.name, None, FieldStatus.MISSING)
        for raw in raws[len(specs):]:
            self._check_width(GROUP_WIDTH, raw, specs[-1].name, ctx)

    def _decode_group(self, spec: GroupSpec, raw: str, ctx: DecodeContext) -> None:
        """Width-check a group, then compare its literal or run its decode rule."""
        if not self._check_width(spec.width, raw, spec.name, ctx):
            if spec.decode is not None:
                self._mark_invalid(spec, raw, ctx)
            else:
                ctx.set(spec.name, raw, FieldStatus.INVALID, raw)
            return

        if spec.is_literal:
            if raw == spec.literal:
                # Literals containing slashes stand for omitted values (43///)
                status = FieldStatus.OMITTED if SENTINEL in spec.literal else FieldStatus.OK
                ctx.set(spec.name, raw, status, raw)
                return
            message = f"{spec.name}: {raw} (expected {spec.literal})"
            if spec.severity == Severity.ERROR:
                ctx.error(spec.name, f"Invalid {message}")
                ctx.set(spec.name, raw, FieldStatus.INVALID, raw)
            else:
                ctx.warning(spec.name, f"Non-standard {message}")
                ctx.set(spec.name, raw, FieldStatus.OK, raw)
            return

        spec.decode(raw, ctx)

    def _check_width(self, width: Optional[int], raw: str, group: str, ctx: DecodeContext) -> bool:
        if width is None or len(raw) == width:
            return True
        ctx.error(group, f"Group {raw!r} has wrong length ({len(raw)}, expected {width})")
        return False

    def _mark_missing(self, spec: GroupSpec, ctx: DecodeContext) -> None:
        for name in _FIELDS_BY_GROUP.get(spec.name, (spec.name,)):
            ctx.set(name, None, FieldStatus.MISSING)

    def _mark_invalid(self, spec: GroupSpec, raw: str, ctx: DecodeContext) -> None:
        for name in _FIELDS_BY_GROUP.get(spec.name, (spec.name,)):
            ctx.set(name, raw, FieldStatus.INVALID)

    def _apply_quadrant(self, ctx: DecodeContext) -> None:
        """Sign latitude and longitude from the quadrant digit."""
        quadrant = ctx.value('quadrant')
        if quadrant not in QUADRANT_SIGNS:
            return
        lat_sign, lon_sign = QUADRANT_SIGNS[quadrant]
        for name, sign in (('latitude_deg', lat_sign), ('longitude_deg', lon_sign)):
            f = ctx.fields.get(name)
            if f is not None and f.status == FieldStatus.OK:
                f.value = sign * f.value

    def _finish(self, ctx: DecodeContext, message: str) -> DecodeResult:
        result = DecodeResult(
            is_valid=not ctx.has_errors,
            fields=ctx.fields,
            issues=ctx.issues,
            message=message,
        )

        self.metrics.increment('reports_decoded')
        self.metrics.increment('decode_errors', len(result.errors))
        self.metrics.increment('decode_warnings', len(result.warnings))
        if not result.is_valid:
            logger.debug(f"Invalid BBXX message: {[i.message for i in result.errors]}")

        return result


# Decoded field names produced by each value group
_FIELDS_BY_GROUP = {
    'day_hour': ('day', 'hour', 'wind_indicator'),
    'latitude': ('latitude_deg',),
    'longitude': ('quadrant', 'longitude_deg'),
    'wind': ('wind', 'wind_direction_deg', 'wind_speed_knots'),
    'water_temp': ('water_temp_c',),
}


def decode(message: Any) -> DecodeResult:
    """Decode with a default BbxxDecoder."""
    return BbxxDecoder().decode(message)
