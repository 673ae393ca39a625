# geometry/hittable.py
from typing import Optional
from core.vector import Vector3
from core.uv import UV
from core.ray import Ray

class HitRecord:
    """
    Records details of a ray-shape intersection.
    """
    __slots__ = ("p", "normal", "uv", "t", "front_face")

    def __init__(self, p: Vector3, normal: Vector3, uv: UV, t: float, front_face: bool = True):
        self.p = p                    # Intersection point
        self.normal = normal          # Unit normal facing the ray origin
        self.uv = uv                  # Surface texture coordinate
        self.t = t                    # Ray parameter at intersection
        self.front_face = front_face  # Whether the outward side was hit

    @property
    def point(self) -> Vector3:
        return self.p

    @property
    def distance(self) -> float:
        return self.t

    def __repr__(self) -> str:
        return f"HitRecord(t={self.t}, p={self.p!r}, normal={self.normal!r}, uv={self.uv!r})"

class Hittable:
    """
    Abstract shape that can be intersected by a ray. Sphere and Triangle are
    the only implementations; the scene kernel dispatches on SHAPE_KIND.
    """
    SHAPE_KIND = -1

    def intersect(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitRecord]:
        raise NotImplementedError("intersect() must be implemented by subclasses.")
