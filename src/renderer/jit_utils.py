# renderer/jit_utils.py

from numba import njit
import math
import numpy as np

INFINITY = math.inf
EPSILON = 1e-8

@njit(cache=True)
def dot(v1, v2):
    """Compute the dot product of two 3-element arrays."""
    return v1[0]*v2[0] + v1[1]*v2[1] + v1[2]*v2[2]

@njit(cache=True)
def cross_inplace(out, v1, v2):
    """Compute the cross product v1 x v2, storing the result in out."""
    temp0 = v1[1] * v2[2] - v1[2] * v2[1]
    temp1 = v1[2] * v2[0] - v1[0] * v2[2]
    temp2 = v1[0] * v2[1] - v1[1] * v2[0]
    out[0] = temp0
    out[1] = temp1
    out[2] = temp2

@njit(cache=True)
def normalize_inplace(v):
    """Normalize a vector in-place. Zero vectors are left untouched."""
    length_sq = v[0] * v[0] + v[1] * v[1] + v[2] * v[2]
    if length_sq > 0.0:
        length = math.sqrt(length_sq)
        v[0] /= length
        v[1] /= length
        v[2] /= length

@njit(cache=True)
def reflect_inplace(out, v, n):
    """Mirror v about the unit normal n."""
    d = 2.0 * dot(v, n)
    for i in range(3):
        out[i] = v[i] - d * n[i]

@njit(cache=True)
def build_onb(n, tangent, bitangent):
    """
    Fill tangent and bitangent so that (tangent, bitangent, n) is a
    right-handed orthonormal basis. n must be unit length.
    """
    if abs(n[0]) > 0.1:
        tangent[0] = n[1]
        tangent[1] = -n[0]
        tangent[2] = 0.0
    else:
        tangent[0] = 0.0
        tangent[1] = n[2]
        tangent[2] = -n[1]
    normalize_inplace(tangent)
    cross_inplace(bitangent, n, tangent)

@njit(cache=True)
def to_world(local_x, local_y, local_z, axis, out):
    """Express a local-frame vector in world space around the unit axis."""
    tangent = np.empty(3)
    bitangent = np.empty(3)
    build_onb(axis, tangent, bitangent)
    for i in range(3):
        out[i] = local_x * tangent[i] + local_y * bitangent[i] + local_z * axis[i]
    normalize_inplace(out)
