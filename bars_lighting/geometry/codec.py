"""Legacy coordinate token codec.

A legacy token is a latitude field immediately followed by a longitude
field, each a sign and zero-padded degrees, minutes and seconds with
three decimals::

    +473112.360-1222002.400
    [+-]DDMMSS.sss[+-]DDDMMSS.sss   (11 + 12 = 23 characters)

Only the ``<Bars>`` dialect uses tokens; every other dialect carries plain
decimal degrees.  Encoding never clamps: an out-of-range coordinate
fails the call.
"""

from __future__ import annotations

import math
import re

from bars_lighting.core.constants import MAX_LATITUDE, MAX_LONGITUDE
from bars_lighting.core.exceptions import InvalidCoordinateError, MalformedTokenError
from bars_lighting.models.geo import GeoPoint

LAT_DEGREE_WIDTH = 2
LON_DEGREE_WIDTH = 3
MINUTE_WIDTH = 2
SECONDS_WIDTH = 6  # "SS.sss"

LAT_TOKEN_LENGTH = 1 + LAT_DEGREE_WIDTH + MINUTE_WIDTH + SECONDS_WIDTH
LON_TOKEN_LENGTH = 1 + LON_DEGREE_WIDTH + MINUTE_WIDTH + SECONDS_WIDTH
POINT_TOKEN_LENGTH = LAT_TOKEN_LENGTH + LON_TOKEN_LENGTH

TOKEN_PATTERN = re.compile(r"[+-]\d{6}\.\d{3}[+-]\d{7}\.\d{3}", re.ASCII)

_SIGNS = "+-"
_DIGITS_PATTERN = re.compile(r"\d+", re.ASCII)
_SECONDS_PATTERN = re.compile(r"\d+(\.\d+)?", re.ASCII)


# ---------------------------------------------------------------------------
# Encode
# ---------------------------------------------------------------------------


def encode_coordinate(coord: float, *, is_lat: bool) -> str:
    """Encode one decimal-degree value as a signed DMS field.

    Raises:
        InvalidCoordinateError: If the value is NaN or outside
            ±90 (latitude) / ±180 (longitude).
    """
    limit = MAX_LATITUDE if is_lat else MAX_LONGITUDE
    if math.isnan(coord) or abs(coord) > limit:
        axis = "latitude" if is_lat else "longitude"
        msg = f"Invalid {axis} value {coord}: must be within ±{limit:g} degrees"
        raise InvalidCoordinateError(msg)

    sign = "-" if coord < 0 else "+"
    value = abs(coord)
    degrees = math.floor(value)
    total_minutes = (value - degrees) * 60
    minutes = math.floor(total_minutes)
    seconds = (total_minutes - minutes) * 60

    width = LAT_DEGREE_WIDTH if is_lat else LON_DEGREE_WIDTH
    return f"{sign}{degrees:0{width}d}{minutes:0{MINUTE_WIDTH}d}{seconds:0{SECONDS_WIDTH}.3f}"


def encode_point(point: GeoPoint) -> str:
    """Encode a position as a 23-character legacy token."""
    return encode_coordinate(point.lat, is_lat=True) + encode_coordinate(point.lon, is_lat=False)


# ---------------------------------------------------------------------------
# Decode
# ---------------------------------------------------------------------------


def decode_point(token: str) -> GeoPoint:
    """Decode a legacy token into a position.

    The latitude sign is the first character; the longitude sign is the
    next sign character.  Each unsigned field is sliced at fixed offsets
    (2 or 3 degree digits, 2 minute digits, the rest seconds).

    Raises:
        MalformedTokenError: If the token does not split into exactly two
            signed fields or a field is not numeric.
        InvalidCoordinateError: If the decoded value is out of range.
    """
    token = token.strip()
    if not token or token[0] not in _SIGNS:
        msg = f"Invalid coordinate token {token!r}: must start with '+' or '-'"
        raise MalformedTokenError(msg)

    split = _next_sign(token, 1)
    if split is None:
        msg = f"Invalid coordinate token {token!r}: missing longitude sign"
        raise MalformedTokenError(msg)

    lat_body = token[1:split]
    lon_body = token[split + 1 :]
    if _next_sign(lon_body, 0) is not None:
        msg = f"Invalid coordinate token {token!r}: expected exactly two signed fields"
        raise MalformedTokenError(msg)

    lat = _compose(lat_body, LAT_DEGREE_WIDTH, token)
    lon = _compose(lon_body, LON_DEGREE_WIDTH, token)
    if token[0] == "-":
        lat = -lat
    if token[split] == "-":
        lon = -lon

    if abs(lat) > MAX_LATITUDE or abs(lon) > MAX_LONGITUDE:
        msg = f"Coordinate token {token!r} decodes out of range (lat={lat}, lon={lon})"
        raise InvalidCoordinateError(msg)
    return GeoPoint(lat=lat, lon=lon)


def is_valid_token(token: str) -> bool:
    """Whether ``token`` matches the exact 23-character layout."""
    return TOKEN_PATTERN.fullmatch(token) is not None


def _next_sign(text: str, start: int) -> int | None:
    for idx in range(start, len(text)):
        if text[idx] in _SIGNS:
            return idx
    return None


def _compose(body: str, degree_width: int, token: str) -> float:
    """Slice ``DD[D]MMSS.sss`` and recombine into decimal degrees."""
    minute_end = degree_width + MINUTE_WIDTH
    degrees = body[:degree_width]
    minutes = body[degree_width:minute_end]
    seconds = body[minute_end:]

    if len(degrees) != degree_width or len(minutes) != MINUTE_WIDTH or not seconds:
        msg = f"Invalid coordinate token {token!r}: field {body!r} is too short"
        raise MalformedTokenError(msg)
    numeric = (
        _DIGITS_PATTERN.fullmatch(degrees)
        and _DIGITS_PATTERN.fullmatch(minutes)
        and _SECONDS_PATTERN.fullmatch(seconds)
    )
    if not numeric:
        msg = f"Invalid coordinate token {token!r}: field {body!r} is not numeric"
        raise MalformedTokenError(msg)

    return int(degrees) + int(minutes) / 60 + float(seconds) / 3600
