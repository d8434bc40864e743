"""
BBXX message schema.

One ordered table of groups drives both directions: the encoder emits each
group from its literal or encode rule, the decoder checks each group against
its width, literal and decode rule. Literals live only here.

Message layout (single-space separated):

    BBXX <station> DDHHi 99LLL QLLLL 43/// /ddff 1//// 2//// 4//// 5//// 7//// 8////
    222// 0sTTT 0//// 2//// 3//// 4//// 5//// 6//// ICE /////=

Numeric groups are fixed-width digit strings, or '/' repeated to the group
width when the value is not reported.
"""

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from bbxx_core.proto.observation import AveragedObservation
from bbxx_core.proto.report import FieldStatus, Severity

logger = logging.getLogger(__name__)


GROUP_WIDTH = 5
SENTINEL = '/'

# Wind indicator 4: wind speed from anemometer, in knots
WIND_INDICATOR_KNOTS = 4

# Quadrant digit -> (latitude sign, longitude sign)
QUADRANT_SIGNS = {
    1: (1, 1),     # N/E
    3: (-1, 1),    # S/E
    5: (-1, -1),   # S/W
    7: (1, -1),    # N/W
}
QUADRANT_UNKNOWN = 9

# Plausibility limits (decode side)
MAX_LATITUDE_DEG = 90.0
MAX_LONGITUDE_DEG = 180.0
MAX_WIND_DIR_DEG = 360
MAX_WIND_SPEED_KNOTS = 100
WATER_TEMP_RANGE_C = (-5.0, 40.0)
MAX_WATER_TEMP_TENTHS = 999
DAY_RANGE = (1, 31)
HOUR_RANGE = (0, 23)


def half_up(x: float) -> int:
    """Round halves up (2.5 -> 3), unlike the built-in round()."""
    return int(math.floor(x + 0.5))


def sentinel(width: int = GROUP_WIDTH) -> str:
    """All-slash group meaning 'not reported'."""
    return SENTINEL * width


def is_sentinel(text: str) -> bool:
    return len(text) > 0 and set(text) == {SENTINEL}


def quadrant_for(lat: float, lon: float) -> int:
    """BBXX quadrant digit for a position."""
    if lat >= 0 and lon >= 0:
        return 1
    if lat < 0 and lon >= 0:
        return 3
    if lat < 0 and lon < 0:
        return 5
    if lat >= 0 and lon < 0:
        return 7
    # NaN coordinates
    return QUADRANT_UNKNOWN


def parse_int(text: str) -> Optional[int]:
    """Parse an optionally signed decimal integer, None if malformed."""
    body = text[1:] if text.startswith('-') else text
    if not body or not body.isdigit() or not body.isascii():
        return None
    return int(text)


# =============================================================================
# Encode rules: (observation, station_id) -> group text
# =============================================================================


def encode_day_hour(obs: AveragedObservation, station_id: str) -> str:
    return f"{obs.day:02d}{obs.hour:02d}{WIND_INDICATOR_KNOTS}"


def encode_latitude(obs: AveragedObservation, station_id: str) -> str:
    return f"99{half_up(abs(obs.latitude_deg) * 10):03d}"


def encode_longitude(obs: AveragedObservation, station_id: str) -> str:
    quadrant = quadrant_for(obs.latitude_deg, obs.longitude_deg)
    return f"{quadrant}{half_up(abs(obs.longitude_deg) * 10):04d}"


def encode_wind(obs: AveragedObservation, station_id: str) -> str:
    direction = f"{half_up(obs.true_wind_dir_deg / 10.0):02d}"
    speed = half_up(obs.true_wind_speed_knots)
    speed_code = f"{speed:02d}" if speed < MAX_WIND_SPEED_KNOTS else sentinel(2)
    return f"/{direction}{speed_code}"


def encode_water_temp(obs: AveragedObservation, station_id: str) -> str:
    if obs.water_temp_c is None:
        return "0" + sentinel(4)
    tenths = half_up(abs(obs.water_temp_c) * 10)
    if tenths > MAX_WATER_TEMP_TENTHS:
        # TTT has three digits; a reading this far out is reported as not measured
        logger.warning(f"Water temperature {obs.water_temp_c} C does not fit the report, omitting")
        return "0" + sentinel(4)
    sign = "4" if obs.water_temp_c >= 0 else "5"
    return f"0{sign}{tenths:03d}"


# =============================================================================
# Decode rules: (raw group, context) -> None, recording fields and issues
# =============================================================================


def decode_day_hour(raw: str, ctx: "DecodeContext") -> None:
    group = 'day_hour'
    day, hour, indicator = parse_int(raw[0:2]), parse_int(raw[2:4]), parse_int(raw[4:5])
    if None in (day, hour, indicator):
        ctx.error(group, f"Invalid day/hour/wind indicator group: {raw}")
        for name in ('day', 'hour', 'wind_indicator'):
            ctx.set(name, raw, FieldStatus.INVALID)
        return

    ctx.set('day', raw, FieldStatus.OK, day)
    ctx.set('hour', raw, FieldStatus.OK, hour)
    ctx.set('wind_indicator', raw, FieldStatus.OK, indicator)

    if not DAY_RANGE[0] <= day <= DAY_RANGE[1] or not HOUR_RANGE[0] <= hour <= HOUR_RANGE[1]:
        ctx.warning(group, f"Day or hour out of valid range: day={day}, hour={hour}")
    if indicator != WIND_INDICATOR_KNOTS:
        ctx.warning(group, f"Wind indicator {indicator} is not 4 (anemometer, knots)")


def decode_latitude(raw: str, ctx: "DecodeContext") -> None:
    group = 'latitude'
    tenths = parse_int(raw[2:])
    if not raw.startswith('99') or tenths is None or tenths < 0:
        ctx.error(group, f"Invalid latitude group: {raw}")
        ctx.set('latitude_deg', raw, FieldStatus.INVALID)
        return

    latitude = tenths / 10.0
    if latitude > MAX_LATITUDE_DEG:
        ctx.error(group, f"Latitude out of valid range (0-90): {latitude}")
        ctx.set('latitude_deg', raw, FieldStatus.INVALID, latitude)
        return
    ctx.set('latitude_deg', raw, FieldStatus.OK, latitude)


def decode_longitude(raw: str, ctx: "DecodeContext") -> None:
    group = 'longitude'
    quadrant = parse_int(raw[0:1])
    tenths = parse_int(raw[1:])

    if quadrant not in QUADRANT_SIGNS:
        ctx.error(group, f"Invalid quadrant: {raw[0:1]}")
        ctx.set('quadrant', raw, FieldStatus.INVALID, quadrant)
    else:
        ctx.set('quadrant', raw, FieldStatus.OK, quadrant)

    if tenths is None or tenths < 0:
        ctx.error(group, f"Invalid longitude group: {raw}")
        ctx.set('longitude_deg', raw, FieldStatus.INVALID)
        return

    longitude = tenths / 10.0
    if longitude > MAX_LONGITUDE_DEG:
        ctx.error(group, f"Longitude out of valid range (0-180): {longitude}")
        ctx.set('longitude_deg', raw, FieldStatus.INVALID, longitude)
        return
    ctx.set('longitude_deg', raw, FieldStatus.OK, longitude)


def decode_wind(raw: str, ctx: "DecodeContext") -> None:
    group = 'wind'
    if is_sentinel(raw):
        ctx.set('wind', raw, FieldStatus.OMITTED)
        ctx.set('wind_direction_deg', raw, FieldStatus.OMITTED)
        ctx.set('wind_speed_knots', raw, FieldStatus.OMITTED)
        return

    if not raw.startswith(SENTINEL):
        ctx.error(group, f"Invalid wind group format: {raw}")
        for name in ('wind', 'wind_direction_deg', 'wind_speed_knots'):
            ctx.set(name, raw, FieldStatus.INVALID)
        return

    dir_text, speed_text = raw[1:3], raw[3:5]
    statuses = []

    if is_sentinel(dir_text):
        ctx.set('wind_direction_deg', raw, FieldStatus.OMITTED)
        statuses.append(FieldStatus.OMITTED)
    else:
        tens = parse_int(dir_text)
        if tens is None or tens < 0:
            ctx.error(group, f"Invalid wind direction: {dir_text}")
            ctx.set('wind_direction_deg', raw, FieldStatus.INVALID)
            statuses.append(FieldStatus.INVALID)
        elif tens * 10 > MAX_WIND_DIR_DEG:
            ctx.error(group, f"Wind direction out of valid range (0-360): {tens * 10}")
            ctx.set('wind_direction_deg', raw, FieldStatus.INVALID, tens * 10)
            statuses.append(FieldStatus.INVALID)
        else:
            ctx.set('wind_direction_deg', raw, FieldStatus.OK, tens * 10)
            statuses.append(FieldStatus.OK)

    if is_sentinel(speed_text):
        ctx.set('wind_speed_knots', raw, FieldStatus.OMITTED)
        statuses.append(FieldStatus.OMITTED)
    else:
        speed = parse_int(speed_text)
        if speed is None:
            ctx.error(group, f"Invalid wind speed: {speed_text}")
            ctx.set('wind_speed_knots', raw, FieldStatus.INVALID)
            statuses.append(FieldStatus.INVALID)
        else:
            if speed < 0 or speed >= MAX_WIND_SPEED_KNOTS:
                ctx.warning(group, f"Wind speed unusual (0-99 knots expected): {speed}")
            ctx.set('wind_speed_knots', raw, FieldStatus.OK, speed)
            statuses.append(FieldStatus.OK)

    if FieldStatus.INVALID in statuses:
        ctx.set('wind', raw, FieldStatus.INVALID)
    elif FieldStatus.OK in statuses:
        ctx.set('wind', raw, FieldStatus.OK, {
            'direction_deg': ctx.value('wind_direction_deg'),
            'speed_knots': ctx.value('wind_speed_knots'),
        })
    else:
        ctx.set('wind', raw, FieldStatus.OMITTED)


def decode_water_temp(raw: str, ctx: "DecodeContext") -> None:
    group = 'water_temp'
    if raw == "0" + sentinel(4):
        ctx.set('water_temp_c', raw, FieldStatus.OMITTED)
        return

    if not raw.startswith('0'):
        ctx.error(group, f"Invalid water temperature format: {raw}")
        ctx.set('water_temp_c', raw, FieldStatus.INVALID)
        return

    sign_digit = raw[1:2]
    tenths = parse_int(raw[2:5])
    if sign_digit not in ('4', '5'):
        ctx.error(group, f"Invalid water temperature sign indicator: {sign_digit}")
        ctx.set('water_temp_c', raw, FieldStatus.INVALID)
        return
    if tenths is None or tenths < 0:
        ctx.error(group, f"Invalid water temperature value: {raw[2:5]}")
        ctx.set('water_temp_c', raw, FieldStatus.INVALID)
        return

    temperature = tenths / 10.0 if sign_digit == '4' else -tenths / 10.0
    low, high = WATER_TEMP_RANGE_C
    if not low <= temperature <= high:
        ctx.warning(group, f"Water temperature outside typical range (-5 to 40 C): {temperature}")
    ctx.set('water_temp_c', raw, FieldStatus.OK, temperature)


# =============================================================================
# Layout
# =============================================================================


@dataclass(frozen=True)
class GroupSpec:
    """
    One group of the BBXX message.

    Attributes:
        name: Group name
        width: Fixed width, None for free-width groups
        literal: Fixed content, None for value groups
        severity: Severity when a literal group has unexpected content
        encode: Encode rule for value groups
        decode: Decode rule for value groups
    """

    name: str
    width: Optional[int]
    literal: Optional[str] = None
    severity: Severity = Severity.ERROR
    encode: Optional[Callable[[AveragedObservation, str], str]] = None
    decode: Optional[Callable[[str, "DecodeContext"], None]] = None

    @property
    def is_literal(self) -> bool:
        return self.literal is not None


def _omitted(name: str, literal: str) -> GroupSpec:
    return GroupSpec(name, GROUP_WIDTH, literal, Severity.WARNING)


TYPE_TAG = GroupSpec('message_type', 4, 'BBXX', Severity.ERROR)
STATION = GroupSpec('station_id', None)
DAY_HOUR = GroupSpec('day_hour', GROUP_WIDTH, encode=encode_day_hour, decode=decode_day_hour)
LATITUDE = GroupSpec('latitude', GROUP_WIDTH, encode=encode_latitude, decode=decode_latitude)
LONGITUDE = GroupSpec('longitude', GROUP_WIDTH, encode=encode_longitude, decode=decode_longitude)
PRECIPITATION = GroupSpec('precipitation', GROUP_WIDTH, '43///', Severity.WARNING)
WIND = GroupSpec('wind', GROUP_WIDTH, encode=encode_wind, decode=decode_wind)
SECTION_2_MARKER = GroupSpec('section_2', GROUP_WIDTH, '222//', Severity.ERROR)
WATER_TEMP = GroupSpec('water_temp', GROUP_WIDTH, encode=encode_water_temp, decode=decode_water_temp)
ICE = GroupSpec('ice', None, 'ICE', Severity.WARNING)
TERMINATOR = GroupSpec('terminator', None, '/////=', Severity.WARNING)

# Groups decoded by position at the head of the message
SECTION_1_HEAD: Tuple[GroupSpec, ...] = (
    TYPE_TAG,
    STATION,
    DAY_HOUR,
    LATITUDE,
    LONGITUDE,
    PRECIPITATION,
    WIND,
)

SECTION_1_OMITTED: Tuple[GroupSpec, ...] = tuple(
    _omitted(f'section_1_group_{d}', f'{d}////') for d in '124578'
)

SECTION_2_OMITTED: Tuple[GroupSpec, ...] = tuple(
    _omitted(f'section_2_group_{d}', f'{d}////') for d in '023456'
)

MESSAGE_LAYOUT: Tuple[GroupSpec, ...] = (
    SECTION_1_HEAD
    + SECTION_1_OMITTED
    + (SECTION_2_MARKER, WATER_TEMP)
    + SECTION_2_OMITTED
    + (ICE, TERMINATOR)
)

MIN_GROUPS = 15
