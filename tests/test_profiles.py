import json

from multiport.profiles import (
    default_ports,
    format_profile_list,
    get_profile,
    iter_profiles,
    load_port_config,
    profile_ports,
)

SAMPLE = {
    "defaultPorts": [7000, 7001],
    "development": {"description": "Local servers", "ports": [3000, 3001]},
    "testing": {"ports": [4000, "4001", "bad"]},
    "empty": {"description": "Nothing here"},
    "note": "not a profile",
}


def _write(tmp_path, data):
    path = tmp_path / "ports.config.json"
    path.write_text(data if isinstance(data, str) else json.dumps(data))
    return path


def test_missing_file_gives_empty_config(tmp_path):
    assert load_port_config(tmp_path / "absent.json") == {}


def test_invalid_json_warns_and_falls_back(tmp_path, caplog):
    path = _write(tmp_path, "{not json")
    assert load_port_config(path) == {}
    assert "Could not load ports.config.json, using defaults" in caplog.text


def test_top_level_must_be_object(tmp_path):
    assert load_port_config(_write(tmp_path, [1, 2])) == {}


def test_get_profile(tmp_path):
    config = load_port_config(_write(tmp_path, SAMPLE))
    dev = get_profile(config, "development")
    assert dev.ports == [3000, 3001]
    assert dev.description == "Local servers"
    assert get_profile(config, "testing").ports == [4000, 4001]
    assert get_profile(config, "empty") is None
    assert get_profile(config, "note") is None
    assert get_profile(config, "defaultPorts") is None
    assert get_profile(config, "missing") is None


def test_iter_profiles_skips_non_profiles():
    assert [name for name, _ in iter_profiles(SAMPLE)] == ["development", "testing", "empty"]


def test_default_and_fallback_ports():
    assert default_ports(SAMPLE) == [7000, 7001]
    assert default_ports({}) == []
    assert profile_ports(SAMPLE, "staging", [5000, 5001]) == [5000, 5001]


def test_format_profile_list():
    text = format_profile_list(SAMPLE)
    assert text.startswith("Available profiles:")
    assert "  development  - Local servers" in text
    assert "Ports: 3000, 3001" in text
    assert "  testing      - No description" in text
    assert "Ports: Not configured" in text
    assert "note" not in text
