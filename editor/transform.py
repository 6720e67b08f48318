# editor/transform.py
import math
from typing import Tuple

Vec3i = Tuple[int, int, int]

AXES = ("x", "y", "z")

# ---- Rounding -------------------------------------------------------------

def round_half_up(v: float) -> int:
    """Nearest integer; exact halves round toward +inf."""
    return int(math.floor(v + 0.5))

# ---- Translation ----------------------------------------------------------

def translate(pos: Vec3i, offset: Vec3i) -> Vec3i:
    return (pos[0] + offset[0], pos[1] + offset[1], pos[2] + offset[2])

def is_zero(offset: Vec3i) -> bool:
    return offset[0] == 0 and offset[1] == 0 and offset[2] == 0

# ---- Rotation about a principal axis --------------------------------------
# Right-handed, counter-clockwise for positive degrees when looking down the
# axis toward the origin. Each result component is rounded independently, so
# non-multiples of 90 degrees accumulate error.

def rotate_offset(rel: Vec3i, axis: str, degrees: float) -> Vec3i:
    """
    Rotate a position relative to the pivot:
      x axis: y' = y*cos - z*sin,  z' = y*sin + z*cos
      y axis: x' = x*cos + z*sin,  z' = -x*sin + z*cos
      z axis: x' = x*cos - y*sin,  y' = x*sin + y*cos
    """
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    rx, ry, rz = rel
    if axis == "x":
        return (rx, round_half_up(ry * c - rz * s), round_half_up(ry * s + rz * c))
    if axis == "y":
        return (round_half_up(rx * c + rz * s), ry, round_half_up(-rx * s + rz * c))
    if axis == "z":
        return (round_half_up(rx * c - ry * s), round_half_up(rx * s + ry * c), rz)
    raise ValueError(f"axis must be one of {AXES}, got {axis!r}")

def rotate_about(pos: Vec3i, pivot: Vec3i, axis: str, degrees: float) -> Vec3i:
    rel = (pos[0] - pivot[0], pos[1] - pivot[1], pos[2] - pivot[2])
    return translate(pivot, rotate_offset(rel, axis, degrees))
