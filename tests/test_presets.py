import json

from gravsnap.presets_loader import list_presets, load_preset, resolve_preset_path


def test_bundled_presets_are_listed():
    keys = [key for key, _ in list_presets()]
    assert "square" in keys
    assert "pentagon" in keys


def test_load_bundled_preset():
    preset = load_preset("square")
    assert preset is not None
    assert len(preset.masses) == 4
    assert preset.gravity is None
    assert load_preset("square.json") == preset


def test_missing_preset_is_none():
    assert load_preset("does-not-exist") is None


def test_malformed_preset_is_none(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_preset(str(broken)) is None

    no_masses = tmp_path / "empty.json"
    no_masses.write_text(json.dumps({"name": "Empty", "masses": []}), encoding="utf-8")
    assert load_preset(str(no_masses)) is None

    bad_mass = tmp_path / "bad.json"
    bad_mass.write_text(json.dumps({"masses": [[0.5]]}), encoding="utf-8")
    assert load_preset(str(bad_mass)) is None


def test_preset_from_path(tmp_path):
    path = tmp_path / "pair.json"
    path.write_text(json.dumps({"masses": [[0.25, 0.5], [0.75, 0.5]], "gravity": 12}), encoding="utf-8")
    assert resolve_preset_path(str(path)) == str(path)
    preset = load_preset(str(path))
    assert preset.name == "pair"
    assert preset.masses == ((0.25, 0.5), (0.75, 0.5))
    assert preset.gravity == 12.0
