# geometry/mesh.py
import os
from typing import List, Optional, Sequence, Tuple
import numpy as np
from core.vector import Vector3
from core.uv import UV
from core.ray import Ray
from geometry.hittable import Hittable, HitRecord
from renderer.jit_geometry import ray_triangle_intersect, triangle_surface, compute_triangle_normal
from renderer.jit_kernels import SHAPE_TRIANGLE

class MeshLoadError(ValueError):
    """Raised when an OBJ file cannot be turned into triangles."""

class Vertex:
    """A triangle corner: position, texture coordinate and optional normal."""
    __slots__ = ("pos", "uv", "normal")

    def __init__(self, pos: Vector3, uv: Optional[UV] = None, normal: Optional[Vector3] = None):
        self.pos = pos
        self.uv = uv if uv is not None else UV(0.0, 0.0)
        self.normal = normal

    def __repr__(self) -> str:
        return f"Vertex({self.pos!r}, {self.uv!r}, {self.normal!r})"

class Triangle(Hittable):
    """
    A single triangle with per-corner texture coordinates. Normals are
    interpolated from the corners when any corner carries one; corners
    without a normal and triangles without any use the flat normal.
    """
    SHAPE_KIND = SHAPE_TRIANGLE

    def __init__(self, v0: Vertex, v1: Vertex, v2: Vertex):
        self.vertices = (v0, v1, v2)

        self.positions = np.array([tuple(v.pos) for v in self.vertices], dtype=np.float64)
        self.uvs = np.array([(v.uv.u, v.uv.v) for v in self.vertices], dtype=np.float64)

        flat = np.empty(3)
        compute_triangle_normal(self.positions[0], self.positions[1], self.positions[2], flat)
        self.flat_normal = flat
        # Corners without a normal fall back to the flat normal
        self.smooth = any(v.normal is not None for v in self.vertices)
        self.normals = np.array(
            [tuple(v.normal.normalize()) if v.normal is not None else tuple(flat)
             for v in self.vertices], dtype=np.float64)

    @property
    def normal(self) -> Vector3:
        """The flat (geometric) normal."""
        return Vector3.from_array(self.flat_normal)

    def centroid(self) -> Vector3:
        v0, v1, v2 = self.vertices
        return (v0.pos + v1.pos + v2.pos) / 3.0

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        origin = ray.origin.to_array()
        direction = ray.direction.to_array()
        bary = np.empty(2)
        hit, t = ray_triangle_intersect(origin, direction, self.positions[0], self.positions[1],
                                        self.positions[2], t_min, t_max, bary)
        if not hit:
            return None

        point = np.empty(3)
        normal = np.empty(3)
        uv = np.empty(2)
        front_face = triangle_surface(origin, direction, t, self.positions, self.normals,
                                      self.uvs, self.flat_normal, self.smooth,
                                      bary[0], bary[1], point, normal, uv)
        return HitRecord(Vector3.from_array(point), Vector3.from_array(normal),
                         UV(uv[0], uv[1]), t, front_face)

    def __repr__(self) -> str:
        return f"Triangle({self.vertices[0].pos!r}, {self.vertices[1].pos!r}, {self.vertices[2].pos!r})"

def _resolve_index(token: str, items: Sequence, kind: str, line_num: int):
    """
    OBJ indices are 1-based; negative indices count back from the end of
    the list read so far.
    """
    try:
        index = int(token)
    except ValueError:
        raise MeshLoadError(f"Line {line_num}: invalid {kind} index '{token}'")
    if index > 0 and index <= len(items):
        return items[index - 1]
    if index < 0 and -index <= len(items):
        return items[len(items) + index]
    raise MeshLoadError(f"Line {line_num}: {kind} index {index} out of range "
                        f"({len(items)} defined)")

def _parse_floats(values: Sequence[str], count: int) -> Optional[Tuple[float, ...]]:
    try:
        parsed = tuple(float(s) for s in values[:count])
    except ValueError:
        return None
    if len(parsed) < count:
        return None
    return parsed

def load_obj(filename: str, verbose: bool = False) -> List[Triangle]:
    """
    Load triangles from a Wavefront OBJ file.

    Supports v, vt, vn and f records; faces with more than three corners
    are fan-triangulated. Records with unparsable numbers are skipped.

    Raises:
        FileNotFoundError: If the file doesn't exist
        MeshLoadError: If a face lacks a position index or references an
            index that is out of range
    """
    if not os.path.exists(filename):
        raise FileNotFoundError(f"Mesh file not found: {filename}")

    vertices: List[Vector3] = []
    normals: List[Vector3] = []
    uvs: List[UV] = []
    triangles: List[Triangle] = []
    skipped = 0

    if verbose:
        print(f"Opening file: {filename}")
    with open(filename, 'r') as f:
        for line_num, line in enumerate(f, 1):
            if line.startswith('#'):
                continue

            values = line.split()
            if not values:
                continue

            if values[0] == 'v':
                xyz = _parse_floats(values[1:], 3)
                if xyz is None:
                    skipped += 1
                    continue
                vertices.append(Vector3(*xyz))
            elif values[0] == 'vn':
                xyz = _parse_floats(values[1:], 3)
                if xyz is None:
                    skipped += 1
                    continue
                normals.append(Vector3(*xyz))
            elif values[0] == 'vt':
                st = _parse_floats(values[1:], 2)
                if st is None:
                    skipped += 1
                    continue
                uvs.append(UV(*st))
            elif values[0] == 'f':
                corners = []
                for corner in values[1:]:
                    parts = corner.split('/')
                    if not parts[0]:
                        raise MeshLoadError(f"Line {line_num}: face corner '{corner}' has no position index")
                    pos = _resolve_index(parts[0], vertices, "position", line_num)
                    uv = None
                    if len(parts) > 1 and parts[1]:
                        uv = _resolve_index(parts[1], uvs, "texture coordinate", line_num)
                    normal = None
                    if len(parts) > 2 and parts[2]:
                        normal = _resolve_index(parts[2], normals, "normal", line_num)
                    corners.append(Vertex(pos, uv, normal))

                if len(corners) < 3:
                    skipped += 1
                    continue

                # Triangulate the face (assuming it's convex)
                for i in range(1, len(corners) - 1):
                    triangles.append(Triangle(corners[0], corners[i], corners[i + 1]))

    if verbose:
        if skipped:
            print(f"Skipped {skipped} malformed records")
        print(f"Loaded {len(vertices)} vertices, {len(normals)} normals, {len(uvs)} UVs, {len(triangles)} triangles")
    return triangles
