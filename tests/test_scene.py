"""Tests for the scene's nearest-hit query."""

import math

import pytest

from core.ray import Ray
from core.vector import Vector3
from geometry.mesh import Triangle, Vertex
from geometry.sphere import Sphere
from geometry.world import Scene, SceneObject
from materials.material import Material


@pytest.fixture
def red():
    return Material(Vector3(1, 0, 0))


@pytest.fixture
def blue():
    return Material(Vector3(0, 0, 1))


def test_empty_scene_misses():
    assert Scene().trace(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), 0.001, math.inf) is None


def test_nearest_of_overlapping_objects(red, blue):
    scene = Scene()
    # Far sphere first so insertion order does not decide the result
    scene.add(SceneObject(Sphere(Vector3(0, 0, -10), 2.0), red))
    scene.add(SceneObject(Sphere(Vector3(0, 0, -8.5), 1.0), blue))
    result = scene.trace(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), 0.001, math.inf)
    assert result.material is blue
    assert result.hit.t == pytest.approx(7.5)


def test_nearest_across_shape_kinds(red, blue):
    scene = Scene()
    scene.add(SceneObject(Sphere(Vector3(0, 0, -10), 1.0), red))
    scene.add(SceneObject(Triangle(Vertex(Vector3(-1, -1, -5)),
                                   Vertex(Vector3(1, -1, -5)),
                                   Vertex(Vector3(0, 1, -5))), blue))
    result = scene.trace(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), 0.001, math.inf)
    assert result.material is blue
    assert result.hit.t == pytest.approx(5.0)


@pytest.mark.parametrize("t_min,t_max", [
    (0.001, 4.0),
    (0.001, 8.0),
    (7.0, 9.0),
    (8.0, 20.0),
    (12.5, 20.0),
])
def test_hits_stay_inside_interval(red, blue, t_min, t_max):
    scene = Scene()
    scene.add(SceneObject(Sphere(Vector3(0, 0, -10), 2.0), red))
    scene.add(SceneObject(Sphere(Vector3(0, 0, -8.5), 1.0), blue))
    result = scene.trace(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), t_min, t_max)
    if result is not None:
        assert t_min <= result.hit.t <= t_max


def test_material_is_shared_not_copied(red):
    scene = Scene()
    scene.add(SceneObject(Sphere(Vector3(0, 0, -5), 1.0), red))
    scene.add(SceneObject(Sphere(Vector3(0, 5, -5), 1.0), red))
    result = scene.trace(Ray(Vector3(0, 0, 0), Vector3(0, 0, -1)), 0.001, math.inf)
    assert result.material is red
    assert list(scene.materials()) == [red]


def test_materials_in_first_use_order(red, blue):
    scene = Scene()
    scene.add(SceneObject(Sphere(Vector3(0, 0, -5), 1.0), blue))
    scene.add(SceneObject(Sphere(Vector3(0, 5, -5), 1.0), red))
    scene.add(SceneObject(Sphere(Vector3(5, 0, -5), 1.0), blue))
    assert list(scene.materials()) == [blue, red]
    assert len(scene) == 3


def test_add_mesh(red):
    scene = Scene()
    triangles = [Triangle(Vertex(Vector3(0, 0, 0)), Vertex(Vector3(1, 0, 0)), Vertex(Vector3(0, 1, 0))),
                 Triangle(Vertex(Vector3(1, 0, 0)), Vertex(Vector3(1, 1, 0)), Vertex(Vector3(0, 1, 0)))]
    scene.add_mesh(triangles, red)
    assert len(scene) == 2
    assert all(obj.material is red for obj in scene.objects)
