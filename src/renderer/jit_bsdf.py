# renderer/jit_bsdf.py

from numba import njit
import numpy as np
import math
from .jit_utils import dot, normalize_inplace, reflect_inplace, to_world

MIN_PHONG_ROUGHNESS = 1e-4
MIN_GGX_ALPHA = 1e-3
DIELECTRIC_F0 = 0.04

@njit(cache=True)
def phong_exponent(roughness):
    """Lobe exponent of the glossy sampling lobe; roughness 0 is near-mirror."""
    r4 = roughness * roughness * roughness * roughness
    return 2.0 / max(r4, MIN_PHONG_ROUGHNESS) - 2.0

@njit(cache=True)
def sample_scatter(in_dir, normal, roughness, r0, r1, r2, out_dir):
    """
    Draw one scattered direction from the roughness-weighted mixture of a
    cosine-weighted hemisphere around the normal and a Phong lobe around
    the mirror direction.

    Parameters:
      in_dir:   unit direction of the incoming ray (pointing at the surface).
      normal:   unit surface normal facing the incoming ray.
      r0, r1, r2: independent uniform numbers in [0, 1).
      out_dir:  receives the unit scattered direction.
    """
    if r0 < roughness:
        # Cosine-weighted hemisphere around the normal
        r = math.sqrt(r1)
        phi = 2.0 * math.pi * r2
        z = math.sqrt(max(0.0, 1.0 - r1))
        to_world(r * math.cos(phi), r * math.sin(phi), z, normal, out_dir)
    else:
        mirror = np.empty(3)
        reflect_inplace(mirror, in_dir, normal)
        normalize_inplace(mirror)
        n = phong_exponent(roughness)
        cos_a = math.pow(1.0 - r1, 1.0 / (n + 1.0))
        sin_a = math.sqrt(max(0.0, 1.0 - cos_a * cos_a))
        phi = 2.0 * math.pi * r2
        to_world(sin_a * math.cos(phi), sin_a * math.sin(phi), cos_a, mirror, out_dir)

@njit(cache=True)
def scatter_pdf(in_dir, normal, roughness, out_dir):
    """
    Solid-angle density of sample_scatter producing out_dir.
    Strictly positive for every direction sample_scatter can return.
    """
    cos_theta = max(dot(normal, out_dir), 0.0)
    pdf = roughness * cos_theta / math.pi
    if roughness < 1.0:
        mirror = np.empty(3)
        reflect_inplace(mirror, in_dir, normal)
        normalize_inplace(mirror)
        n = phong_exponent(roughness)
        cos_a = max(dot(mirror, out_dir), 0.0)
        pdf += (1.0 - roughness) * (n + 1.0) / (2.0 * math.pi) * math.pow(cos_a, n)
    return pdf

@njit(cache=True)
def eval_brdf(view_dir, light_dir, normal, color, metalness, roughness, out_specular, out_ks):
    """
    Cook-Torrance specular term with GGX distribution, Smith-Schlick
    geometry and Schlick Fresnel.

    out_specular receives D*G*F / (4 (n.v)(n.l)); out_ks receives F.
    The specular term is zero when either direction is below the surface.
    """
    half = np.empty(3)
    for i in range(3):
        half[i] = view_dir[i] + light_dir[i]
    normalize_inplace(half)

    n_dot_v = dot(normal, view_dir)
    n_dot_l = dot(normal, light_dir)
    n_dot_h = max(dot(normal, half), 0.0)
    v_dot_h = max(dot(view_dir, half), 0.0)

    fresnel_weight = math.pow(1.0 - v_dot_h, 5.0)
    for i in range(3):
        f0 = DIELECTRIC_F0 * (1.0 - metalness) + color[i] * metalness
        out_ks[i] = f0 + (1.0 - f0) * fresnel_weight

    if n_dot_v <= 0.0 or n_dot_l <= 0.0:
        for i in range(3):
            out_specular[i] = 0.0
        return

    alpha = max(roughness * roughness, MIN_GGX_ALPHA)
    alpha2 = alpha * alpha
    denom = n_dot_h * n_dot_h * (alpha2 - 1.0) + 1.0
    distribution = alpha2 / (math.pi * denom * denom)

    k = (roughness + 1.0) * (roughness + 1.0) / 8.0
    geometry = (n_dot_v / (n_dot_v * (1.0 - k) + k)) * (n_dot_l / (n_dot_l * (1.0 - k) + k))

    scale = distribution * geometry / (4.0 * n_dot_v * n_dot_l)
    for i in range(3):
        out_specular[i] = scale * out_ks[i]
