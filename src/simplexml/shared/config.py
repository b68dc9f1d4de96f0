"""Configuration classes for simplexml.

The only option that changes the serialized output is the per-level
indentation string. The parser options bound resource use: how many bytes are
pulled from the input stream at a time and, optionally, how deeply elements
may nest.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import SimpleXMLError

DEFAULT_CHUNK_SIZE = 8192
PRETTY_INDENTATION = "  "

# XML whitespace only, so indentation never turns into element content.
_INDENTATION_CHARS = frozenset(" \t\r\n")


class ConfigError(SimpleXMLError):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class EncoderConfig:
    """Configuration for XML serialization."""

    indentation: str = ""

    def __post_init__(self) -> None:
        """Validate encoder configuration."""
        if not isinstance(self.indentation, str):
            raise ValueError("indentation must be a string")
        if not set(self.indentation) <= _INDENTATION_CHARS:
            raise ValueError("indentation may only contain XML whitespace (spaces, tabs, CR, LF)")

    @classmethod
    def compact(cls) -> "EncoderConfig":
        """One element per line, no indentation."""
        return cls(indentation="")

    @classmethod
    def pretty(cls) -> "EncoderConfig":
        """Two-space indentation, as used by ``str()`` on trees."""
        return cls(indentation=PRETTY_INDENTATION)


@dataclass(frozen=True)
class ParserConfig:
    """Configuration for tokenization and tree building."""

    chunk_size: int = DEFAULT_CHUNK_SIZE
    # None means no limit.
    max_depth: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")

    @classmethod
    def default(cls) -> "ParserConfig":
        """Create the default parser configuration."""
        return cls()

    @classmethod
    def streaming(cls) -> "ParserConfig":
        """Small read chunks, for slow or interactive input streams."""
        return cls(chunk_size=1024)


@dataclass(frozen=True)
class SimpleXMLConfig:
    """Combined configuration for parsing and encoding."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    encoder: EncoderConfig = field(default_factory=EncoderConfig)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the combined configuration."""
        if not isinstance(self.parser, ParserConfig):
            raise ConfigValidationError(
                "parser must be a ParserConfig instance", field_name="parser"
            )
        if not isinstance(self.encoder, EncoderConfig):
            raise ConfigValidationError(
                "encoder must be an EncoderConfig instance", field_name="encoder"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "parser": {
                "chunk_size": self.parser.chunk_size,
                "max_depth": self.parser.max_depth,
            },
            "encoder": {
                "indentation": self.encoder.indentation,
            },
            "correlation_id": self.correlation_id,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SimpleXMLConfig":
        """Create configuration from dictionary.

        Unknown keys are rejected so that typos in configuration files do not
        go unnoticed.

        Raises:
            ConfigValidationError: If a section or value is invalid
        """
        sections = {"parser": ParserConfig, "encoder": EncoderConfig}
        unknown = set(data) - set(sections) - {"correlation_id"}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration keys: {sorted(unknown)}",
                suggestions=[f"Valid keys are {sorted(sections)} and 'correlation_id'"],
            )

        values: Dict[str, Any] = {}
        for name, section_class in sections.items():
            section = data.get(name, {})
            if not isinstance(section, dict):
                raise ConfigValidationError(
                    f"Section '{name}' must be a mapping", field_name=name
                )
            try:
                values[name] = section_class(**section)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=name) from e

        return cls(correlation_id=data.get("correlation_id"), **values)

    @classmethod
    def from_json(cls, json_str: str) -> "SimpleXMLConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)
