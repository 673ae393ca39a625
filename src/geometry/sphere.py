# geometry/sphere.py
from typing import Optional
import numpy as np
from core.vector import Vector3
from core.uv import UV
from core.ray import Ray
from geometry.hittable import Hittable, HitRecord
from renderer.jit_geometry import ray_sphere_intersect, sphere_surface
from renderer.jit_kernels import SHAPE_SPHERE

class Sphere(Hittable):
    """
    Represents a sphere defined by its center and radius.
    """
    SHAPE_KIND = SHAPE_SPHERE

    def __init__(self, center: Vector3, radius: float):
        if radius <= 0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        self.center = center
        self.radius = float(radius)
        self._center = center.to_array()

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        origin = ray.origin.to_array()
        direction = ray.direction.to_array()
        hit, t = ray_sphere_intersect(origin, direction, self._center, self.radius, t_min, t_max)
        if not hit:
            return None

        point = np.empty(3)
        normal = np.empty(3)
        uv = np.empty(2)
        front_face = sphere_surface(origin, direction, t, self._center, self.radius,
                                    point, normal, uv)
        return HitRecord(Vector3.from_array(point), Vector3.from_array(normal),
                         UV(uv[0], uv[1]), t, front_face)

    def __repr__(self) -> str:
        return f"Sphere({self.center!r}, {self.radius})"
