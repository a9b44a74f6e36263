"""Element and attribute names of the four XML dialects."""

from __future__ import annotations

import re

# Native fixture dialect
NATIVE_OBJECT_TAGS = ("Object", "BarsObject")
NATIVE_LIGHT_TAG = "Light"
NATIVE_PROPERTIES_TAG = "Properties"

# Rectangle support dialect
SUPPORT_TAG = "LightSupport"
SUPPORT_ATTRIBUTES = ("latitude", "longitude", "width", "length", "heading")

# Generic polygon dialect
POLYGON_ROOT_TAG = "FSData"
POLYGON_TAG = "Polygon"
VERTEX_TAG = "Vertex"
ATTRIBUTE_TAG = "Attribute"
UNIQUE_GUID_NAME = "UniqueGUID"

# Minimum vertices per polygon element
MIN_POLYGON_VERTICES = 2
MIN_REMOVE_VERTICES = 3

# groupIndex → fixture kind (inclusive ranges)
GROUP_INDEX_KINDS = (
    (1, 2, "stopbar"),
    (3, 4, "lead_on"),
    (5, 8, "taxiway"),
)

# Legacy token dialect
LEGACY_ROOT_TAG = "Bars"
STOPBAR_TAG = "StopBar"
NAME_TAG = "Name"
RUNWAY_TAG = "Runway"
POINT_TAG = "Point"

RUNWAY_DESIGNATOR_PATTERN = re.compile(r"\d{2}[LCR]?", re.ASCII)
