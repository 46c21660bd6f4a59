"""
Unit tests for core.yaml module.

Tests:
- load_yaml() with mappings, lists and JSON documents
- Empty files
- File not found
- Invalid YAML syntax
- No arbitrary object construction
"""

from pathlib import Path

import pytest
import yaml

from mockstr.core.yaml import load_yaml


class TestLoadYaml:
    """load_yaml() behavior."""

    def test_mapping(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("simulator:\n  debug: true\n")
        assert load_yaml(path) == {"simulator": {"debug": True}}

    def test_list(self, tmp_path: Path):
        path = tmp_path / "seed.yaml"
        path.write_text("- kind: 1\n- kind: 2\n")
        assert load_yaml(str(path)) == [{"kind": 1}, {"kind": 2}]

    def test_json_document(self, tmp_path: Path):
        path = tmp_path / "seed.json"
        path.write_text('[{"kind": 30617, "tags": [["d", "repo-x"]]}]')
        assert load_yaml(path) == [{"kind": 30617, "tags": [["d", "repo-x"]]}]

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_yaml(path) == {}

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            load_yaml(tmp_path / "missing.yaml")

    def test_invalid_syntax(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(path)

    def test_python_tags_rejected(self, tmp_path: Path):
        path = tmp_path / "unsafe.yaml"
        path.write_text("!!python/object/apply:os.system ['true']\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(path)
