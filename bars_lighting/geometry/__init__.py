"""Coordinate codec and geometry kernel.

- codec: legacy fixed-width signed-DMS token encode/decode
- kernel: bearing, destination point, polyline buffering, rectangles
"""
