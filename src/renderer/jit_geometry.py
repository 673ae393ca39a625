# renderer/jit_geometry.py

from numba import njit
import numpy as np
import math
from .jit_utils import dot, cross_inplace, normalize_inplace, EPSILON

@njit(cache=True)
def ray_sphere_intersect(ray_origin, ray_dir, sphere_center, sphere_radius, t_min, t_max):
    """
    Ray-sphere intersection. Returns (hit, t) with the nearest root
    inside [t_min, t_max]; the smaller root wins when both qualify.
    """
    oc = np.empty(3)
    for i in range(3):
        oc[i] = ray_origin[i] - sphere_center[i]

    a = dot(ray_dir, ray_dir)
    half_b = dot(oc, ray_dir)
    c = dot(oc, oc) - sphere_radius * sphere_radius
    discriminant = half_b * half_b - a * c

    if discriminant < 0 or a == 0.0:
        return False, 0.0

    sqrtd = math.sqrt(discriminant)
    root = (-half_b - sqrtd) / a

    if root < t_min or root > t_max:
        root = (-half_b + sqrtd) / a
        if root < t_min or root > t_max:
            return False, 0.0

    return True, root

@njit(cache=True)
def ray_triangle_intersect(ray_origin, ray_dir, v0, v1, v2, t_min, t_max, out_bary):
    """
    Ray-triangle intersection using the Möller–Trumbore algorithm.
    Triangles are two-sided. On a hit the barycentric weights of v1 and v2
    are stored in out_bary[0] and out_bary[1] and (True, t) is returned.
    """
    edge1 = np.empty(3)
    edge2 = np.empty(3)
    h = np.empty(3)
    s = np.empty(3)
    q = np.empty(3)

    for i in range(3):
        edge1[i] = v1[i] - v0[i]
        edge2[i] = v2[i] - v0[i]

    cross_inplace(h, ray_dir, edge2)
    a = dot(edge1, h)

    if abs(a) < EPSILON:  # Ray is parallel to triangle
        return False, 0.0

    f = 1.0 / a
    for i in range(3):
        s[i] = ray_origin[i] - v0[i]

    u = f * dot(s, h)
    if u < 0.0 or u > 1.0:
        return False, 0.0

    cross_inplace(q, s, edge1)
    v = f * dot(ray_dir, q)
    if v < 0.0 or (u + v) > 1.0:
        return False, 0.0

    t = f * dot(edge2, q)
    if t < t_min or t > t_max:
        return False, 0.0

    out_bary[0] = u
    out_bary[1] = v
    return True, t

@njit(cache=True)
def face_forward_inplace(normal, ray_dir):
    """
    Flip normal so that it points against ray_dir.
    Returns True when the ray hit the outward-facing side.
    """
    front_face = dot(ray_dir, normal) < 0.0
    if not front_face:
        for i in range(3):
            normal[i] = -normal[i]
    return front_face

@njit(cache=True)
def sphere_surface(ray_origin, ray_dir, t, sphere_center, sphere_radius,
                   out_point, out_normal, out_uv):
    """Fill point, facing normal and spherical UV for a sphere hit at t."""
    for i in range(3):
        out_point[i] = ray_origin[i] + t * ray_dir[i]
        out_normal[i] = (out_point[i] - sphere_center[i]) / sphere_radius
    # Guard against drift for very large radii
    normalize_inplace(out_normal)

    phi = math.atan2(out_normal[2], out_normal[0])
    theta = math.asin(min(1.0, max(-1.0, out_normal[1])))
    out_uv[0] = 1.0 - (phi + math.pi) / (2.0 * math.pi)
    out_uv[1] = (theta + math.pi / 2.0) / math.pi

    return face_forward_inplace(out_normal, ray_dir)

@njit(cache=True)
def triangle_surface(ray_origin, ray_dir, t, positions, normals, uvs, flat_normal,
                     smooth, u, v, out_point, out_normal, out_uv):
    """
    Fill point, facing normal and interpolated UV for a triangle hit.
    positions/normals are (3, 3) arrays, uvs is (3, 2); u and v are the
    barycentric weights of the second and third corner.
    """
    w = 1.0 - u - v
    for i in range(3):
        out_point[i] = ray_origin[i] + t * ray_dir[i]
        if smooth:
            out_normal[i] = w * normals[0, i] + u * normals[1, i] + v * normals[2, i]
        else:
            out_normal[i] = flat_normal[i]
    normalize_inplace(out_normal)

    out_uv[0] = w * uvs[0, 0] + u * uvs[1, 0] + v * uvs[2, 0]
    out_uv[1] = w * uvs[0, 1] + u * uvs[1, 1] + v * uvs[2, 1]

    return face_forward_inplace(out_normal, ray_dir)

@njit(cache=True)
def compute_triangle_normal(v0, v1, v2, out_normal):
    """Flat normal of the triangle (v1 - v0) x (v2 - v0), normalized."""
    edge1 = np.empty(3)
    edge2 = np.empty(3)
    for i in range(3):
        edge1[i] = v1[i] - v0[i]
        edge2[i] = v2[i] - v0[i]
    cross_inplace(out_normal, edge1, edge2)
    normalize_inplace(out_normal)
