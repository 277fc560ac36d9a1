import json

import pytest
from pydantic import ValidationError

from pdfscan.config import AnalyzerConfig, build_pattern, load_config
from pdfscan.exceptions import ConfigError


def test_defaults():
    config = AnalyzerConfig()
    assert config.file_size_threshold == 10_485_760
    assert config.suspicious_patterns == ["eval", "exec", "spawn", "shell"]
    assert config.suspicious_metadata_patterns == ["(adobe|microsoft|office)"]


def test_pattern_alternation_is_case_insensitive():
    pattern = build_pattern(["eval", "shell"])
    assert pattern.search("window.EVAL(x)")
    assert pattern.search("PowerShell")
    assert not pattern.search("benign")


def test_empty_pattern_list_never_matches():
    pattern = build_pattern([])
    assert not pattern.search("")
    assert not pattern.search("eval")


def test_invalid_pattern_is_a_config_error():
    config = AnalyzerConfig(suspicious_patterns=["(unclosed"])
    with pytest.raises(ConfigError):
        config.compile()


@pytest.mark.parametrize("overrides", [
    {"file_size_threshold": -1},
    {"file_size_threshold": "big"},
    {"file_size_threshold": True},
    {"max_decompressed_size": 0},
    {"suspicious_patterns": "eval"},
    {"suspicious_metadata_patterns": ["adobe", 3]},
])
def test_invalid_values_are_rejected(overrides):
    with pytest.raises(ConfigError):
        AnalyzerConfig.from_dict(overrides)
    with pytest.raises(ValidationError):
        AnalyzerConfig(**overrides)


def test_overrides_are_validated():
    config = AnalyzerConfig().with_overrides(file_size_threshold=1)
    assert config.file_size_threshold == 1
    assert config.suspicious_patterns == AnalyzerConfig().suspicious_patterns
    with pytest.raises(ConfigError, match="file_size_threshold"):
        config.with_overrides(file_size_threshold=-5)


def test_non_object_json_is_a_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(["eval"]))
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_load_config_from_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"file_size_threshold": 2048, "suspicious_patterns": ["launch"]}))

    config = load_config(str(path))

    assert config.file_size_threshold == 2048
    assert config.suspicious_patterns == ["launch"]
    assert config.suspicious_metadata_patterns == ["(adobe|microsoft|office)"]


def test_load_config_without_path_uses_defaults():
    assert load_config() == AnalyzerConfig()


def test_unknown_keys_are_rejected(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"threshold": 1}))
    with pytest.raises(ConfigError, match="threshold"):
        load_config(str(path))


def test_malformed_json_is_a_config_error(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError):
        load_config(str(path))


def test_missing_file_is_a_config_error(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "missing.json"))
