# renderer/integrator.py
import random
import numpy as np
from core.ray import Ray
from core.vector import Vector3
from renderer.jit_kernels import sky_color, T_MIN
from renderer.jit_utils import INFINITY

def background(direction: Vector3) -> Vector3:
    """
    Sky gradient: t = 0.5 * (dir.y + 1) blends white (t = 0) into
    azure (t = 1), using the normalized direction.
    """
    out = np.empty(3)
    sky_color(direction.to_array(), out)
    return Vector3.from_array(out)

def trace(ray: Ray, scene, depth: int, rng=random) -> Vector3:
    """
    One-sample Monte Carlo estimate of the radiance arriving along ray.

    Paths are cut off after depth surface hits, which biases indirect light
    low for paths that would have continued.
    """
    if depth <= 0:
        return Vector3.zero()

    result = scene.trace(ray, T_MIN, INFINITY)
    if result is None:
        return background(ray.direction)

    material = result.material
    rec = result.hit
    n = rec.normal

    bounce, pdf = material.bounce(ray, rec, rng)
    cos_theta = max(n.dot(bounce.direction), 0.0)
    incident = trace(bounce, scene, depth - 1, rng)
    specular, ks = material.brdf(-ray.direction, bounce.direction, n)
    kd = material.diffuse_weight(ks)

    reflectance = (kd * material.lambert() + specular) * incident * cos_theta / pdf
    return reflectance + material.emission
