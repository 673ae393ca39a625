# renderer/jit_kernels.py

from numba import njit, prange
import numpy as np
import math
from .jit_utils import dot, normalize_inplace, INFINITY
from .jit_geometry import (
    ray_sphere_intersect, ray_triangle_intersect,
    sphere_surface, triangle_surface
)
from .jit_bsdf import sample_scatter, scatter_pdf, eval_brdf

SHAPE_SPHERE = 0
SHAPE_TRIANGLE = 1

# Self-intersection offset for rays leaving a surface
T_MIN = 1e-3

SKY_ZENITH = (0.5, 0.7, 1.0)

@njit(cache=True)
def seed_random(seed):
    """Seed the calling thread's JIT random stream."""
    np.random.seed(seed)

@njit(cache=True)
def sky_color(ray_dir, out_color):
    """Vertical white-to-azure gradient used when a ray escapes the scene."""
    d = ray_dir.copy()
    normalize_inplace(d)
    t = 0.5 * (d[1] + 1.0)
    out_color[0] = (1.0 - t) + t * SKY_ZENITH[0]
    out_color[1] = (1.0 - t) + t * SKY_ZENITH[1]
    out_color[2] = (1.0 - t) + t * SKY_ZENITH[2]

@njit(cache=True)
def camera_ray_direction(forward, right, up, half_width, half_height, u, v, out_dir):
    """
    Pinhole camera: u runs left to right, v top to bottom, both in [0, 1].
    """
    sx = (2.0 * u - 1.0) * half_width
    sy = (1.0 - 2.0 * v) * half_height
    for i in range(3):
        out_dir[i] = forward[i] + sx * right[i] + sy * up[i]
    normalize_inplace(out_dir)

@njit(cache=True)
def scene_hit(ray_origin, ray_dir, t_min, t_max,
              object_kinds, object_shapes,
              sphere_centers, sphere_radii,
              triangle_positions, triangle_normals, triangle_uvs,
              triangle_flat_normals, triangle_smooth,
              out_point, out_normal, out_uv):
    """
    Linear scan over all objects in insertion order with a shrinking upper
    bound. Fills the surface data of the nearest hit and returns
    (object index, t, front_face); the index is -1 when nothing is hit.
    """
    bary = np.empty(2)
    closest = -1
    closest_t = t_max
    closest_u = 0.0
    closest_v = 0.0

    for obj in range(object_kinds.shape[0]):
        shape = object_shapes[obj]
        if object_kinds[obj] == SHAPE_SPHERE:
            hit, t = ray_sphere_intersect(ray_origin, ray_dir, sphere_centers[shape],
                                          sphere_radii[shape], t_min, closest_t)
            if hit:
                closest = obj
                closest_t = t
        else:
            hit, t = ray_triangle_intersect(ray_origin, ray_dir,
                                            triangle_positions[shape, 0],
                                            triangle_positions[shape, 1],
                                            triangle_positions[shape, 2],
                                            t_min, closest_t, bary)
            if hit:
                closest = obj
                closest_t = t
                closest_u = bary[0]
                closest_v = bary[1]

    if closest < 0:
        return -1, 0.0, False

    shape = object_shapes[closest]
    if object_kinds[closest] == SHAPE_SPHERE:
        front_face = sphere_surface(ray_origin, ray_dir, closest_t, sphere_centers[shape],
                                    sphere_radii[shape], out_point, out_normal, out_uv)
    else:
        front_face = triangle_surface(ray_origin, ray_dir, closest_t,
                                      triangle_positions[shape], triangle_normals[shape],
                                      triangle_uvs[shape], triangle_flat_normals[shape],
                                      triangle_smooth[shape], closest_u, closest_v,
                                      out_point, out_normal, out_uv)
    return closest, closest_t, front_face

@njit(cache=True)
def trace_path(ray_origin, ray_dir, max_depth,
               object_kinds, object_shapes, object_materials,
               sphere_centers, sphere_radii,
               triangle_positions, triangle_normals, triangle_uvs,
               triangle_flat_normals, triangle_smooth,
               material_colors, material_metalness, material_roughness, material_emission):
    """
    Estimate the radiance arriving along a ray with one path sample.

    Evaluates L = Le + (kd * color / pi + specular) * L_in * cos / pdf
    bounce by bounce, carrying the product of the bounce weights as a
    throughput. A path is cut off after max_depth surface hits and the
    remainder contributes nothing.
    """
    radiance = np.zeros(3)
    throughput = np.ones(3)
    origin = ray_origin.copy()
    direction = ray_dir.copy()
    normalize_inplace(direction)

    point = np.empty(3)
    normal = np.empty(3)
    uv = np.empty(2)
    scattered = np.empty(3)
    view = np.empty(3)
    specular = np.empty(3)
    ks = np.empty(3)
    sky = np.empty(3)

    for depth in range(max_depth, 0, -1):
        obj, t, front_face = scene_hit(origin, direction, T_MIN, INFINITY,
                                       object_kinds, object_shapes,
                                       sphere_centers, sphere_radii,
                                       triangle_positions, triangle_normals, triangle_uvs,
                                       triangle_flat_normals, triangle_smooth,
                                       point, normal, uv)
        if obj < 0:
            sky_color(direction, sky)
            for i in range(3):
                radiance[i] += throughput[i] * sky[i]
            break

        mat = object_materials[obj]
        for i in range(3):
            radiance[i] += throughput[i] * material_emission[mat, i]

        if depth == 1:
            break

        roughness = material_roughness[mat]
        metalness = material_metalness[mat]
        sample_scatter(direction, normal, roughness,
                       np.random.random(), np.random.random(), np.random.random(),
                       scattered)
        pdf = scatter_pdf(direction, normal, roughness, scattered)

        for i in range(3):
            view[i] = -direction[i]
        eval_brdf(view, scattered, normal, material_colors[mat], metalness, roughness,
                  specular, ks)
        cos_theta = max(dot(normal, scattered), 0.0)

        for i in range(3):
            kd = 1.0 - ks[i] * (1.0 - metalness)
            weight = kd * material_colors[mat, i] / math.pi + specular[i]
            throughput[i] *= weight * cos_theta / pdf

        for i in range(3):
            origin[i] = point[i]
            direction[i] = scattered[i]

    return radiance

@njit(parallel=True, cache=True)
def render_kernel(width, height, samples_per_pixel, max_depth, seed,
                  camera_origin, camera_forward, camera_right, camera_up,
                  camera_half_width, camera_half_height,
                  object_kinds, object_shapes, object_materials,
                  sphere_centers, sphere_radii,
                  triangle_positions, triangle_normals, triangle_uvs,
                  triangle_flat_normals, triangle_smooth,
                  material_colors, material_metalness, material_roughness, material_emission,
                  out_radiance):
    """
    Parallel per-pixel path tracing.

    Every pixel reseeds its thread's random stream from (seed, pixel index)
    before sampling, so the output is reproducible regardless of how pixels
    are distributed over threads. Each sample jitters the pixel position
    uniformly within its footprint. out_radiance is (height, width, 3) and
    receives the mean linear radiance per pixel.
    """
    n_pixels = width * height
    for p in prange(n_pixels):
        x = p % width
        y = p // width
        np.random.seed(seed * n_pixels + p)

        direction = np.empty(3)
        acc = np.zeros(3)
        for s in range(samples_per_pixel):
            u = (x + np.random.random()) / width
            v = (y + np.random.random()) / height
            camera_ray_direction(camera_forward, camera_right, camera_up,
                                 camera_half_width, camera_half_height, u, v, direction)
            color = trace_path(camera_origin, direction, max_depth,
                               object_kinds, object_shapes, object_materials,
                               sphere_centers, sphere_radii,
                               triangle_positions, triangle_normals, triangle_uvs,
                               triangle_flat_normals, triangle_smooth,
                               material_colors, material_metalness, material_roughness,
                               material_emission)
            for i in range(3):
                acc[i] += color[i]

        for i in range(3):
            out_radiance[y, x, i] = acc[i] / samples_per_pixel
