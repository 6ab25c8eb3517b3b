"""Tests for the final-scene render script in examples/."""

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "examples" / "render_final_scene.py"


@pytest.fixture
def render_script():
    spec = importlib.util.spec_from_file_location("render_final_scene", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestRenderFinalScene:
    """Tests for render_final_scene()."""

    def test_scene_file_skips_generation(self, render_script, tmp_path, monkeypatch):
        """Test that a JSON scene is rendered without building the random scene."""
        from glimmer.scene import final_scene
        from glimmer.scene.world import world_to_dict

        def fail(*args, **kwargs):
            raise AssertionError("random scene should not be generated")

        scene_path = tmp_path / "scene.json"
        scene_path.write_text(json.dumps(world_to_dict(final_scene.create_two_sphere_scene())))
        monkeypatch.setattr(final_scene, "create_final_scene", fail)

        output_path = tmp_path / "out.ppm"
        render_script.render_final_scene(
            width=8,
            num_samples=1,
            max_depth=2,
            output_path=str(output_path),
            scene_path=str(scene_path),
            quiet=True,
        )

        lines = output_path.read_text(encoding="ascii").splitlines()
        assert lines[:3] == ["P3", "8 4", "255"]
        assert len(lines) == 3 + 8 * 4

    def test_generated_scene_saved(self, render_script, tmp_path):
        """Test that --save-scene writes the generated world as JSON."""
        saved = tmp_path / "saved.json"
        render_script.render_final_scene(
            width=4,
            num_samples=1,
            max_depth=1,
            seed=5,
            output_path=str(tmp_path / "out.png"),
            save_scene_path=str(saved),
            quiet=True,
        )

        data = json.loads(saved.read_text(encoding="utf-8"))
        assert len(data["spheres"]) > 4
        assert (tmp_path / "out.png").exists()
