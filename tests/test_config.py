import json

import pytest

from spec2llms.config import Config
from spec2llms.errors import ConfigError


class TestConfig:
    def test_defaults(self):
        cfg = Config()
        assert cfg.output == "./llms"
        assert cfg.language == "en"
        assert cfg.group_by == "tag"
        assert cfg.skip_validation is False

    def test_load_camel_case_keys(self, tmp_path):
        f = tmp_path / "spec2llms.json"
        f.write_text(json.dumps({
            "source": "api.yaml",
            "baseUrl": "https://api.test.com",
            "docsBaseUrl": "https://docs.test.com",
            "skipValidation": True,
            "title": "Test",
        }))
        cfg = Config.load_from_file(f)
        assert cfg.source == "api.yaml"
        assert cfg.base_url == "https://api.test.com"
        assert cfg.docs_base_url == "https://docs.test.com"
        assert cfg.skip_validation is True
        assert cfg.output == "./llms"

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "spec2llms.json"
        f.write_text("{not json")
        with pytest.raises(ConfigError, match="invalid JSON"):
            Config.load_from_file(f)

    def test_not_an_object(self, tmp_path):
        f = tmp_path / "spec2llms.json"
        f.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            Config.load_from_file(f)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            Config.load_from_file(tmp_path / "missing.json")

    def test_merged_ignores_none(self):
        cfg = Config(title="From file").merged(title=None, base_url="https://cli.io")
        assert cfg.title == "From file"
        assert cfg.base_url == "https://cli.io"

    def test_validate_source(self):
        with pytest.raises(ConfigError, match="source is required"):
            Config().validate_source()
        Config(source="api.yaml").validate_source()
