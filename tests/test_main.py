"""Tests for the command-line entry point."""

import pytest
from PIL import Image

import main


def test_defaults_reproduce_reference_settings():
    args = main.parse_args([])
    app = main.Application(args)
    assert (app.width, app.height) == (800, 800)
    assert app.samples == 200
    assert app.depth == 3
    assert app.renderer.gamma == 2.2
    assert len(app.world) == 9
    assert app.camera.origin.z == 5.0


def test_flags_override_quality_preset():
    args = main.parse_args(["--quality", "preview", "--samples", "3", "--width", "40"])
    app = main.Application(args)
    assert app.width == 40
    assert app.height == 200
    assert app.samples == 3


def test_world_has_one_light():
    world = main.create_world()
    lights = [m for m in world.materials() if m.is_emissive]
    assert len(lights) == 1
    assert lights[0].emission.x == 10.0


def test_missing_mesh_reports_error(tmp_path, capsys):
    code = main.main(["--mesh", str(tmp_path / "nope.obj"), "--output", str(tmp_path / "x.png")])
    assert code == 1
    assert "not found" in capsys.readouterr().err


@pytest.mark.slow
def test_render_to_file(tmp_path, capsys):
    obj = tmp_path / "tri.obj"
    obj.write_text("v -1 -1 -1\nv 1 -1 -1\nv 0 1 -1\nf 1 2 3\n")
    output = tmp_path / "render.png"
    code = main.main(["--width", "8", "--height", "6", "--samples", "2", "--depth", "2",
                      "--mesh", str(obj), "--output", str(output), "--quiet"])
    assert code == 0
    with Image.open(output) as img:
        assert img.size == (8, 6)
    # --quiet silences the renderer, the mesh loader and the image writer
    assert capsys.readouterr().out == ""
