# materials/material.py
import math
import random
from typing import Tuple
import numpy as np
from core.ray import Ray
from core.vector import Vector3
from geometry.hittable import HitRecord
from renderer.jit_bsdf import sample_scatter, scatter_pdf, eval_brdf

class Material:
    """
    Surface description shared by every object that uses it.

    color is the base color (diffuse albedo for dielectrics, specular tint
    for metals); metalness and roughness are in [0, 1]; emission is the
    radiance the surface emits on its own. Materials are immutable.
    """
    __slots__ = ("color", "metalness", "roughness", "emission", "_color")

    def __init__(self, color: Vector3, metalness: float = 0.0, roughness: float = 1.0,
                 emission: Vector3 = None):
        if not 0.0 <= metalness <= 1.0:
            raise ValueError(f"metalness must be in [0, 1], got {metalness}")
        if not 0.0 <= roughness <= 1.0:
            raise ValueError(f"roughness must be in [0, 1], got {roughness}")
        object.__setattr__(self, "color", color)
        object.__setattr__(self, "metalness", float(metalness))
        object.__setattr__(self, "roughness", float(roughness))
        object.__setattr__(self, "emission", emission if emission is not None else Vector3.zero())
        object.__setattr__(self, "_color", color.to_array())

    def __setattr__(self, name, value):
        raise AttributeError("Material is immutable")

    @property
    def is_emissive(self) -> bool:
        e = self.emission
        return e.x > 0 or e.y > 0 or e.z > 0

    def bounce(self, ray_in: Ray, rec: HitRecord, rng=random) -> Tuple[Ray, float]:
        """
        Sample one scattered ray leaving the hit point and return it with
        the probability density of its direction.

        Roughness 1 samples a cosine-weighted hemisphere around the normal,
        roughness 0 a tight lobe around the mirror direction; values in
        between pick one of the two with probability roughness.
        """
        in_dir = ray_in.direction.normalize().to_array()
        normal = rec.normal.to_array()
        out_dir = np.empty(3)
        sample_scatter(in_dir, normal, self.roughness,
                       rng.random(), rng.random(), rng.random(), out_dir)
        pdf = scatter_pdf(in_dir, normal, self.roughness, out_dir)
        return Ray(rec.p, Vector3.from_array(out_dir)), pdf

    def pdf(self, ray_in: Ray, rec: HitRecord, direction: Vector3) -> float:
        """Density with which bounce() would produce direction."""
        return scatter_pdf(ray_in.direction.normalize().to_array(), rec.normal.to_array(),
                           self.roughness, direction.normalize().to_array())

    def brdf(self, view_dir: Vector3, scattered_dir: Vector3, normal: Vector3) -> Tuple[Vector3, Vector3]:
        """
        Returns (specular, ks): the microfacet specular reflectance for the
        pair of directions and the Fresnel weight used to scale down the
        diffuse term.
        """
        specular = np.empty(3)
        ks = np.empty(3)
        eval_brdf(view_dir.normalize().to_array(), scattered_dir.normalize().to_array(),
                  normal.to_array(), self._color, self.metalness, self.roughness,
                  specular, ks)
        return Vector3.from_array(specular), Vector3.from_array(ks)

    def diffuse_weight(self, ks: Vector3) -> Vector3:
        """kd = 1 - ks * (1 - metalness)"""
        return Vector3(1.0, 1.0, 1.0) - ks * (1.0 - self.metalness)

    def lambert(self) -> Vector3:
        return self.color / math.pi

    def __repr__(self) -> str:
        return (f"Material(color={self.color!r}, metalness={self.metalness}, "
                f"roughness={self.roughness}, emission={self.emission!r})")
