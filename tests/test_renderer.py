"""Tests for tone mapping and the parallel sampling driver."""

import random

import numpy as np
import pytest

from camera.camera import Camera
from core.ray import Ray
from core.vector import Vector3
from geometry.mesh import Triangle, Vertex
from geometry.sphere import Sphere
from geometry.world import Scene, SceneObject
from materials.material import Material
from renderer.integrator import trace
from renderer.jit_kernels import seed_random, trace_path
from renderer.raytracer import Renderer
from renderer.tone_mapping import encode_color, gamma_tone_mapping


def encode_channel(c, gamma):
    return int(min(max(c ** (1.0 / gamma), 0.0), 1.0) * 255.99)


class TestToneMapping:

    def test_matches_formula(self):
        radiance = np.array([[[0.0, 0.18, 0.5], [1.0, 4.0, 0.02]]])
        out = gamma_tone_mapping(radiance, 2.2)
        assert out.dtype == np.uint8
        assert out.shape == (1, 2, 3)
        expected = [[encode_channel(c, 2.2) for c in px] for px in radiance[0]]
        assert out[0].tolist() == expected

    def test_clamps(self):
        assert encode_color((10.0, -1.0, 1.0)) == (255, 0, 255)

    def test_invalid_gamma(self):
        with pytest.raises(ValueError):
            gamma_tone_mapping(np.zeros((1, 1, 3)), 0.0)


def camera_for(width, height):
    return Camera.looking_at(Vector3(0, 0, 0), Vector3(0, 0, -1), Vector3(0, 1, 0),
                             60.0, width / height)


class TestRenderer:

    @pytest.mark.parametrize("kwargs", [
        {"width": 0, "height": 4},
        {"width": 4, "height": 4, "samples_per_pixel": 0},
        {"width": 4, "height": 4, "max_depth": -1},
        {"width": 4, "height": 4, "gamma": 0.0},
        {"width": 4, "height": 4, "seed": -3},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            Renderer(**kwargs)

    def test_scene_flattening_shares_materials(self, matte_white, pure_emitter):
        scene = Scene()
        scene.add(SceneObject(Sphere(Vector3(0, 0, -5), 1.0), matte_white))
        scene.add(SceneObject(Triangle(Vertex(Vector3(0, 0, -3)), Vertex(Vector3(1, 0, -3)),
                                       Vertex(Vector3(0, 1, -3))), pure_emitter))
        scene.add(SceneObject(Sphere(Vector3(3, 0, -5), 1.0), matte_white))
        renderer = Renderer(2, 2)
        renderer.update_scene_data(scene)
        kinds, shapes, materials = renderer.scene_data[:3]
        assert kinds.tolist() == [0, 1, 0]
        assert shapes.tolist() == [0, 0, 1]
        assert materials.tolist() == [0, 1, 0]
        material_emission = renderer.scene_data[-1]
        assert material_emission.shape == (2, 3)
        assert material_emission[1].tolist() == [0.2, 0.5, 0.9]

    @pytest.mark.slow
    def test_enclosing_emitter_fills_every_pixel(self, pure_emitter):
        width, height = 6, 4
        scene = Scene()
        scene.add(SceneObject(Sphere(Vector3(0, 0, 0), 50.0), pure_emitter))
        renderer = Renderer(width, height, samples_per_pixel=1, max_depth=1, gamma=2.2)
        image = renderer.render(camera_for(width, height), scene)

        assert image.shape == (height, width, 3)
        expected = [encode_channel(c, 2.2) for c in (0.2, 0.5, 0.9)]
        assert (image.reshape(-1, 3) == np.array(expected, dtype=np.uint8)).all()

    @pytest.mark.slow
    def test_empty_scene_renders_sky(self):
        width, height = 4, 5
        renderer = Renderer(width, height, samples_per_pixel=4, max_depth=2)
        radiance = renderer.render_radiance(camera_for(width, height), Scene())
        # Blue channel of the gradient is 1 everywhere; red fades from top to bottom
        assert np.allclose(radiance[:, :, 2], 1.0)
        assert (radiance[0, :, 0] < radiance[-1, :, 0]).all()

    @pytest.mark.slow
    def test_buffer_layout_and_determinism(self, matte_white):
        width, height = 5, 3
        scene = Scene()
        scene.add(SceneObject(Sphere(Vector3(0, -101, -3), 100.0), matte_white))
        scene.add(SceneObject(Sphere(Vector3(0, 0, -3), 0.5),
                              Material(Vector3(0.8, 0.2, 0.2), metalness=1.0, roughness=0.2)))
        camera = camera_for(width, height)

        first = Renderer(width, height, samples_per_pixel=8, max_depth=3, seed=7).render_buffer(camera, scene)
        second = Renderer(width, height, samples_per_pixel=8, max_depth=3, seed=7).render_buffer(camera, scene)
        assert isinstance(first, bytes)
        assert len(first) == width * height * 3
        assert first == second

    @pytest.mark.slow
    def test_radiance_arrays_are_not_reused(self, matte_white):
        scene = Scene()
        scene.add(SceneObject(Sphere(Vector3(0, -101, -3), 100.0), matte_white))
        renderer = Renderer(4, 3, samples_per_pixel=2, seed=1)

        first = renderer.render_radiance(camera_for(4, 3), scene)
        kept = first.copy()
        renderer.seed = 2
        second = renderer.render_radiance(camera_for(4, 3), scene)
        assert second is not first
        assert (first == kept).all()

    @pytest.mark.slow
    def test_kernel_path_matches_emission_at_depth_one(self, pure_emitter):
        scene = Scene()
        scene.add(SceneObject(Sphere(Vector3(0, 0, -5), 1.0), pure_emitter))
        renderer = Renderer(1, 1)
        renderer.update_scene_data(scene)
        seed_random(3)
        color = trace_path(np.zeros(3), np.array([0.0, 0.0, -1.0]), 1, *renderer.scene_data)
        assert color.tolist() == [0.2, 0.5, 0.9]
        # A miss returns the sky gradient
        color = trace_path(np.zeros(3), np.array([0.0, 1.0, 0.0]), 1, *renderer.scene_data)
        assert color.tolist() == [0.5, 0.7, 1.0]


@pytest.mark.slow
@pytest.mark.parametrize("metalness,roughness", [
    (0.0, 1.0),
    (1.0, 0.3),
    (0.5, 0.6),
])
def test_kernel_path_agrees_with_recursive_trace(metalness, roughness):
    # A floor with a ball resting on it: paths bounce between the two
    # surfaces, so the depth cutoff and the per-bounce weights all matter.
    floor = Material(Vector3(0.9, 0.8, 0.6), metalness=metalness, roughness=roughness)
    ball = Material(Vector3(0.7, 0.3, 0.3), metalness=0.2, roughness=0.5)
    scene = Scene()
    scene.add(SceneObject(Sphere(Vector3(0, -1000, 0), 1000.0), floor))
    scene.add(SceneObject(Sphere(Vector3(0.8, 0.6, 0), 0.6), ball))

    renderer = Renderer(1, 1)
    renderer.update_scene_data(scene)

    origin = Vector3(-1.0, 1.5, 0.3)
    direction = Vector3(0.6, -1.0, -0.2).normalize()
    n = 20000
    depth = 3

    seed_random(11)
    kernel_total = np.zeros(3)
    for _ in range(n):
        kernel_total += trace_path(origin.to_array(), direction.to_array(), depth,
                                   *renderer.scene_data)

    rng = random.Random(11)
    object_total = Vector3(0, 0, 0)
    for _ in range(n):
        object_total = object_total + trace(Ray(origin, direction), scene, depth, rng)

    kernel_mean = kernel_total / n
    object_mean = object_total / n
    assert np.isfinite(kernel_mean).all()
    assert kernel_mean.max() > 0.05
    assert kernel_mean.tolist() == pytest.approx(list(object_mean), abs=0.02)
