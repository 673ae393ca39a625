# src/geometry/world.py
from typing import Iterable, Iterator, List, Optional
from core.ray import Ray
from geometry.hittable import Hittable, HitRecord

class SceneObject:
    """
    Pairs one shape with a shared, immutable material.
    """
    __slots__ = ("shape", "material")

    def __init__(self, shape: Hittable, material):
        self.shape = shape
        self.material = material

    def __repr__(self) -> str:
        return f"SceneObject({self.shape!r}, {self.material!r})"

class HitResult:
    """
    The nearest hit of a scene query together with the hit object's
    material. The material is referenced, never copied.
    """
    __slots__ = ("hit", "material")

    def __init__(self, hit: HitRecord, material):
        self.hit = hit
        self.material = material

class Scene:
    """
    An insertion-ordered list of scene objects. Nearest-hit queries scan
    every object; there is no acceleration structure.
    """
    def __init__(self):
        self.objects: List[SceneObject] = []

    def add(self, obj: SceneObject):
        self.objects.append(obj)

    def add_mesh(self, triangles: Iterable[Hittable], material):
        """Add every triangle of a loaded mesh with one shared material."""
        for triangle in triangles:
            self.add(SceneObject(triangle, material))

    def __len__(self) -> int:
        return len(self.objects)

    def materials(self) -> Iterator:
        """Distinct materials (by identity) in first-use order."""
        seen = set()
        for obj in self.objects:
            if id(obj.material) not in seen:
                seen.add(id(obj.material))
                yield obj.material

    def trace(self, ray: Ray, t_min: float, t_max: float) -> Optional[HitResult]:
        result = None
        closest_so_far = t_max
        for obj in self.objects:
            rec = obj.shape.intersect(ray, t_min, closest_so_far)
            if rec is not None:
                closest_so_far = rec.t
                result = HitResult(rec, obj.material)
        return result
