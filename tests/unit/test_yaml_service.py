"""Tests for YAML result file validation."""

import pytest

from src.vitelis.core.exceptions import ValidationError
from src.vitelis.services.yaml_service import is_valid_yaml_file, parse_yaml, yaml_extension

pytestmark = pytest.mark.unit


class TestYamlFileType:
    @pytest.mark.parametrize(
        ("filename", "expected"),
        [
            ("result.yaml", ".yaml"),
            ("RESULT.YML", ".yml"),
            ("archive.yaml.zip", None),
            ("notes.txt", None),
            (None, None),
        ],
    )
    def test_yaml_extension(self, filename, expected):
        assert yaml_extension(filename) == expected

    def test_accepts_by_extension_regardless_of_content_type(self):
        assert is_valid_yaml_file("out.yml", "application/octet-stream")

    def test_accepts_by_content_type_with_parameters(self):
        assert is_valid_yaml_file("blob", "application/x-yaml; charset=utf-8")

    def test_rejects_other_files(self):
        assert not is_valid_yaml_file("report.pdf", "application/pdf")
        assert not is_valid_yaml_file(None, None)


class TestParseYaml:
    def test_parses_mapping(self):
        assert parse_yaml(b"company: Initech\nscore: 7\n") == {"company": "Initech", "score": 7}

    def test_malformed_yaml_raises(self):
        with pytest.raises(ValidationError, match="Invalid YAML content"):
            parse_yaml(b"key: [unclosed\n")

    def test_empty_file_raises(self):
        with pytest.raises(ValidationError, match="empty"):
            parse_yaml(b"   \n")

    def test_non_utf8_raises(self):
        with pytest.raises(ValidationError, match="UTF-8"):
            parse_yaml(b"\xff\xfe\x00")

    def test_unsafe_tags_are_rejected(self):
        with pytest.raises(ValidationError):
            parse_yaml(b"!!python/object/apply:os.system ['true']")
