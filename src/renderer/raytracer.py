# renderer/raytracer.py
import time
import numpy as np
from .jit_kernels import render_kernel, SHAPE_SPHERE, SHAPE_TRIANGLE
from .tone_mapping import gamma_tone_mapping

DEFAULT_MAX_DEPTH = 3

class Renderer:
    """
    CPU path tracer. The scene is flattened into arrays once per render and
    handed to a parallel JIT kernel that computes one pixel per task.
    """
    def __init__(self, width: int, height: int, samples_per_pixel: int = 16,
                 max_depth: int = DEFAULT_MAX_DEPTH, gamma: float = 2.2, seed: int = 0,
                 verbose: bool = False):
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        if samples_per_pixel <= 0:
            raise ValueError(f"samples_per_pixel must be positive, got {samples_per_pixel}")
        if max_depth < 0:
            raise ValueError(f"max_depth must not be negative, got {max_depth}")
        if gamma <= 0:
            raise ValueError(f"gamma must be positive, got {gamma}")
        if seed < 0:
            raise ValueError(f"seed must not be negative, got {seed}")

        self.width = width
        self.height = height
        self.samples_per_pixel = samples_per_pixel
        self.max_depth = max_depth
        self.gamma = gamma
        self.seed = seed
        self.verbose = verbose

        self.scene_data = None

    def update_scene_data(self, scene) -> None:
        """
        Flatten the scene into kernel arrays. Materials are stored once each
        and referenced by index from every object using them.
        """
        if self.verbose:
            print("\n=== Updating Scene Data ===")
            print(f"Scene contains {len(scene.objects)} objects")

        material_index = {}
        materials = []
        for mat in scene.materials():
            material_index[id(mat)] = len(materials)
            materials.append(mat)

        spheres = []
        triangles = []
        n_objects = len(scene.objects)
        object_kinds = np.empty(n_objects, dtype=np.int64)
        object_shapes = np.empty(n_objects, dtype=np.int64)
        object_materials = np.empty(n_objects, dtype=np.int64)

        for i, obj in enumerate(scene.objects):
            kind = obj.shape.SHAPE_KIND
            if kind == SHAPE_SPHERE:
                object_shapes[i] = len(spheres)
                spheres.append(obj.shape)
            elif kind == SHAPE_TRIANGLE:
                object_shapes[i] = len(triangles)
                triangles.append(obj.shape)
            else:
                raise ValueError(f"Unsupported shape: {obj.shape!r}")
            object_kinds[i] = kind
            object_materials[i] = material_index[id(obj.material)]

        if self.verbose:
            print(f"Found {len(spheres)} spheres, {len(triangles)} triangles "
                  f"and {len(materials)} materials")

        sphere_centers = np.array([tuple(s.center) for s in spheres],
                                  dtype=np.float64).reshape(-1, 3)
        sphere_radii = np.array([s.radius for s in spheres], dtype=np.float64)

        if triangles:
            triangle_positions = np.stack([t.positions for t in triangles])
            triangle_normals = np.stack([t.normals for t in triangles])
            triangle_uvs = np.stack([t.uvs for t in triangles])
            triangle_flat_normals = np.stack([t.flat_normal for t in triangles])
        else:
            triangle_positions = np.zeros((0, 3, 3), dtype=np.float64)
            triangle_normals = np.zeros((0, 3, 3), dtype=np.float64)
            triangle_uvs = np.zeros((0, 3, 2), dtype=np.float64)
            triangle_flat_normals = np.zeros((0, 3), dtype=np.float64)
        triangle_smooth = np.array([t.smooth for t in triangles], dtype=np.bool_)

        material_colors = np.array([tuple(m.color) for m in materials],
                                   dtype=np.float64).reshape(-1, 3)
        material_metalness = np.array([m.metalness for m in materials], dtype=np.float64)
        material_roughness = np.array([m.roughness for m in materials], dtype=np.float64)
        material_emission = np.array([tuple(m.emission) for m in materials],
                                     dtype=np.float64).reshape(-1, 3)

        if self.verbose:
            for i, m in enumerate(materials):
                if m.is_emissive:
                    e = m.emission
                    print(f"    Material {i}: Emissive ({e.x}, {e.y}, {e.z})")

        self.scene_data = (
            object_kinds, object_shapes, object_materials,
            sphere_centers, sphere_radii,
            triangle_positions, triangle_normals, triangle_uvs,
            triangle_flat_normals, triangle_smooth,
            material_colors, material_metalness, material_roughness, material_emission,
        )

    def render_radiance(self, camera, scene) -> np.ndarray:
        """
        Mean linear radiance per pixel, shape (height, width, 3). Each call
        returns a freshly allocated array.
        """
        self.update_scene_data(scene)
        radiance = np.zeros((self.height, self.width, 3), dtype=np.float64)
        forward, right, up = camera.basis_arrays()

        if self.verbose:
            print("\n=== Rendering ===")
            print(f"Resolution: {self.width}x{self.height}")
            print(f"Samples per pixel: {self.samples_per_pixel}")
            print(f"Max depth: {self.max_depth}")
        start = time.perf_counter()

        render_kernel(self.width, self.height, self.samples_per_pixel, self.max_depth, self.seed,
                      camera.origin.to_array(), forward, right, up,
                      camera.half_width, camera.half_height,
                      *self.scene_data,
                      radiance)

        if self.verbose:
            print(f"Render finished in {time.perf_counter() - start:.2f}s")
        return radiance

    def render(self, camera, scene) -> np.ndarray:
        """Gamma-corrected 8-bit image, shape (height, width, 3), top row first."""
        return gamma_tone_mapping(self.render_radiance(camera, scene), self.gamma)

    def render_buffer(self, camera, scene) -> bytes:
        """Flat row-major RGB8 buffer of width * height * 3 bytes."""
        return self.render(camera, scene).tobytes()
