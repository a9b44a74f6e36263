"""BARS Airport Lighting Geometry & XML Interchange.

Encodes and decodes legacy signed-DMS coordinate tokens, parses and writes
the BARS XML dialects describing light fixtures and remove areas, buffers
fixture centerlines into remove polygons, and reconciles resubmitted stopbar
sets against previously approved ones so identifiers stay stable.
"""

__version__ = "0.1.0"
