"""
Configuration data models for zipzap.

This module defines the data structures that hold the tunable parts of the
engine: where the database lives, the frecency curve constants, the aging
threshold and factor, and the legacy import settings.
"""

from typing import Dict, List, Any
from pathlib import Path
from enum import Enum
from pydantic import BaseModel, Field, field_validator, model_validator


class CaseNormalization(Enum):
    """Case policy applied to stored paths and query tokens alike."""
    LOWER = "lower"
    PRESERVE = "preserve"


class StorageConfig(BaseModel):
    """
    Configuration for the SQLite database.

    Attributes:
        path: Location of the database file
        timeout_seconds: How long to wait on a locked database
    """

    path: str = Field("~/.local/share/zipzap/db.sqlite", description="Location of the database file")
    timeout_seconds: float = Field(5.0, gt=0, description="How long to wait on a locked database")

    @field_validator('path')
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Reject empty database paths."""
        if not v or not v.strip():
            raise ValueError("Database path cannot be empty")
        return v.strip()

    def model_post_init(self, __context) -> None:
        """Expand user path after initialization."""
        self.path = str(Path(self.path).expanduser())

    def get_full_path(self) -> Path:
        """Get the absolute path of the database file."""
        return Path(self.path).absolute()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class RankingConfig(BaseModel):
    """
    Constants of the frecency curve.

    The score of an entry is ``rank * k1 / (k2 * age + 1 + k3)`` where age
    is measured in seconds.

    Attributes:
        increment: Rank added on every visit
        k1: Numerator of the recency weight
        k2: Per-second slope of the recency weight
        k3: Offset added to the denominator
        case_normalization: Case policy for paths and query tokens
    """

    increment: float = Field(1.0, gt=0, description="Rank added on every visit")
    k1: float = Field(3.75, gt=0, description="Numerator of the recency weight")
    k2: float = Field(0.0001, ge=0, description="Per-second slope of the recency weight")
    k3: float = Field(0.25, ge=0, description="Offset added to the denominator")
    case_normalization: CaseNormalization = Field(
        CaseNormalization.LOWER,
        description="Case policy for paths and query tokens"
    )

    @field_validator('case_normalization', mode='before')
    @classmethod
    def validate_case_normalization(cls, v) -> CaseNormalization:
        """Validate and convert case policy to enum."""
        if isinstance(v, str):
            try:
                return CaseNormalization(v.lower())
            except ValueError:
                raise ValueError(f"Invalid case normalization: {v}")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['case_normalization'] = self.case_normalization.value
        return data


class AgingConfig(BaseModel):
    """
    Configuration for the aging pass.

    Attributes:
        threshold: Total rank at which every rank is decayed
        factor: Multiplier applied to every rank during an aging pass
    """

    threshold: float = Field(9000.0, gt=0, description="Total rank at which every rank is decayed")
    factor: float = Field(0.99, gt=0, le=1, description="Multiplier applied during an aging pass")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class ImportConfig(BaseModel):
    """
    Configuration for importing legacy ``z`` data.

    Attributes:
        legacy_path: Default file read by an import
        separator: Field separator of the legacy format
    """

    legacy_path: str = Field("~/.z", description="Default file read by an import")
    separator: str = Field("|", min_length=1, max_length=1, description="Field separator")

    def model_post_init(self, __context) -> None:
        """Expand user path after initialization."""
        self.legacy_path = str(Path(self.legacy_path).expanduser())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class ZipzapConfig(BaseModel):
    """
    Main configuration class for zipzap.

    Attributes:
        storage: Database settings
        ranking: Frecency curve constants and case policy
        aging: Aging pass settings
        import_config: Legacy import settings (``import`` in YAML)
    """

    storage: StorageConfig = Field(default_factory=StorageConfig, description="Database settings")
    ranking: RankingConfig = Field(default_factory=RankingConfig, description="Frecency curve settings")
    aging: AgingConfig = Field(default_factory=AgingConfig, description="Aging pass settings")
    import_config: ImportConfig = Field(
        default_factory=ImportConfig,
        alias='import',
        description="Legacy import settings"
    )

    model_config = {'populate_by_name': True}

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any warnings."""
        warnings = []

        if self.aging.factor == 1.0:
            warnings.append("Aging factor of 1.0 disables rank decay")

        if self.aging.threshold < 100:
            warnings.append(
                f"Aging threshold {self.aging.threshold} is very low; ranks will decay on almost every visit"
            )

        if self.ranking.k2 == 0:
            warnings.append("ranking.k2 of 0 makes scores ignore recency")

        db_path = self.storage.get_full_path()
        if db_path.exists() and not db_path.is_file():
            warnings.append(f"Database path exists but is not a file: {db_path}")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {
            'storage': self.storage.to_dict(),
            'ranking': self.ranking.to_dict(),
            'aging': self.aging.to_dict(),
            'import': self.import_config.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ZipzapConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Database: {self.storage.path}"]
        parts.append(f"Case: {self.ranking.case_normalization.value}")
        parts.append(f"Aging: x{self.aging.factor} at {self.aging.threshold}")

        return " | ".join(parts)


KNOWN_SECTIONS = ('storage', 'ranking', 'aging', 'import')


class ConfigValidator(BaseModel):
    """
    Structural validation of raw configuration data before model creation.

    Catches unknown sections and sections that are not mappings, which
    pydantic would otherwise ignore or report less clearly.
    """

    sections: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode='after')
    def validate_sections(self):
        """Check every top-level key is a known mapping section."""
        for name, value in self.sections.items():
            if name not in KNOWN_SECTIONS:
                raise ValueError(f"Unknown configuration section '{name}'. Must be one of: {list(KNOWN_SECTIONS)}")
            if value is not None and not isinstance(value, dict):
                raise ValueError(f"Configuration section '{name}' must be a mapping, got {type(value).__name__}")
        return self


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated configuration dictionary with empty sections dropped

    Raises:
        ValueError: If configuration is invalid
    """
    try:
        ConfigValidator(sections=config_data)

        validated_config = {k: v for k, v in config_data.items() if v is not None}

        # Surface field-level errors here rather than at model creation
        ZipzapConfig.from_dict(validated_config)

        return validated_config

    except Exception as e:
        raise ValueError(f"Configuration validation failed: {e}") from e
