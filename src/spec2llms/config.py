"""Run configuration, optionally loaded from a ``spec2llms.json`` file."""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spec2llms.errors import ConfigError

DEFAULT_OUTPUT = "./llms"
LANGUAGES = ("en", "ru")


class Config(BaseModel):
    """Options recognised by the generator.

    Keys in the JSON file use camelCase (``baseUrl``, ``skipValidation``);
    the Python attributes are snake_case.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    source: str = ""
    output: str = DEFAULT_OUTPUT
    base_url: str = Field("", alias="baseUrl")
    docs_base_url: str = Field("", alias="docsBaseUrl")  # prefix for index links
    title: str = ""
    language: str = "en"  # labels are English-only for now
    group_by: str = Field("tag", alias="groupBy")
    skip_validation: bool = Field(False, alias="skipValidation")

    @classmethod
    def load_from_file(cls, path: Path) -> "Config":
        """Load a JSON config file over the defaults."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"failed to read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must contain a JSON object")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"invalid config {path}: {e}") from e

    def merged(self, **overrides) -> "Config":
        """Return a copy with every override that is not ``None`` applied."""
        return self.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    def validate_source(self) -> None:
        if not self.source:
            raise ConfigError("source is required: pass an OpenAPI file or URL, or set 'source' in the config file")
