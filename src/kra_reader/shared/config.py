"""Configuration classes for reading ``.kra`` archives.

Parsing itself has no tunables: the layer tree is either read completely or
the read fails. What can be configured is which archive payloads are pulled
into memory next to the metadata.
"""

import json
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from kra_reader.tree.nodes import Node


class ShouldLoadFiles(Enum):
    """Which node payloads are read from the archive."""

    NEVER = auto()      # Read metadata only
    ALWAYS = auto()     # Read the payload of every node
    CONDITION = auto()  # Read payloads of nodes accepted by load_condition


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParsingConfiguration:
    """Controls what ``read_kra()`` loads besides the metadata.

    Immutable, so a single configuration can be shared between reads.
    """

    should_load_files: ShouldLoadFiles = ShouldLoadFiles.NEVER
    load_condition: Optional[Callable[["Node"], bool]] = None
    should_load_composited_images: bool = False

    def __post_init__(self) -> None:
        """Validate parsing configuration."""
        if not isinstance(self.should_load_files, ShouldLoadFiles):
            raise ConfigValidationError(
                "should_load_files must be a ShouldLoadFiles member",
                field_name="should_load_files",
            )
        if self.should_load_files is ShouldLoadFiles.CONDITION:
            if self.load_condition is None or not callable(self.load_condition):
                raise ConfigValidationError(
                    "load_condition must be a callable when should_load_files "
                    "is CONDITION",
                    field_name="load_condition",
                    suggestions=[
                        "Pass load_condition=lambda node: ...",
                        "Use ShouldLoadFiles.ALWAYS or ShouldLoadFiles.NEVER",
                    ],
                )
        elif self.load_condition is not None:
            raise ConfigValidationError(
                "load_condition is only used when should_load_files is CONDITION",
                field_name="load_condition",
            )

    def should_load(self, node: "Node") -> bool:
        """Decide whether the payload of ``node`` should be read."""
        if self.should_load_files is ShouldLoadFiles.ALWAYS:
            return True
        if self.should_load_files is ShouldLoadFiles.CONDITION:
            return bool(self.load_condition(node))  # type: ignore[misc]
        return False

    @property
    def loads_any_files(self) -> bool:
        return self.should_load_files is not ShouldLoadFiles.NEVER

    def override(self, **kwargs: Any) -> "ParsingConfiguration":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParsingConfiguration.metadata_only()
            >>> config.override(should_load_composited_images=True)
        """
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format.

        The load condition is reported by name only, since callables do not
        serialize.
        """
        condition = self.load_condition
        return {
            "should_load_files": self.should_load_files.name,
            "load_condition": (
                getattr(condition, "__qualname__", repr(condition))
                if condition is not None else None
            ),
            "should_load_composited_images": self.should_load_composited_images,
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParsingConfiguration":
        """Create configuration from a dictionary produced by ``to_dict()``.

        Conditional loading cannot be restored from a dictionary because the
        callable is not part of it.
        """
        mode = data.get("should_load_files", ShouldLoadFiles.NEVER.name)
        try:
            should_load_files = ShouldLoadFiles[mode]
        except KeyError as e:
            raise ConfigValidationError(
                f"Unknown should_load_files value: {mode}",
                field_name="should_load_files",
            ) from e
        if should_load_files is ShouldLoadFiles.CONDITION:
            raise ConfigValidationError(
                "CONDITION cannot be restored without a load_condition callable",
                field_name="should_load_files",
            )
        return cls(
            should_load_files=should_load_files,
            should_load_composited_images=bool(
                data.get("should_load_composited_images", False)
            ),
        )

    # Preset factory methods
    @classmethod
    def metadata_only(cls) -> "ParsingConfiguration":
        """Read the layer tree and metadata, nothing else."""
        return cls()

    @classmethod
    def everything(cls) -> "ParsingConfiguration":
        """Read every node payload and both composited images."""
        return cls(
            should_load_files=ShouldLoadFiles.ALWAYS,
            should_load_composited_images=True,
        )

    @classmethod
    def conditional(
        cls, condition: Callable[["Node"], bool]
    ) -> "ParsingConfiguration":
        """Read payloads only for nodes accepted by ``condition``."""
        return cls(
            should_load_files=ShouldLoadFiles.CONDITION,
            load_condition=condition,
        )
