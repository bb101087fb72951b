"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import Dict, Optional

import pendulum
import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.business_hours import DEFAULT_BUSINESS_HOURS
from .domain.models import WEEKDAYS, BusinessHours, DayHours
from .domain.slot_generator import ALLOWED_SLOT_INTERVALS


class DefaultsConfig(BaseModel):
    """Default settings for slot searches."""
    duration_minutes: int = 60
    slot_interval_minutes: int = 30
    range_days: int = 7
    max_range_days: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure booking duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value

    @field_validator("slot_interval_minutes")
    @classmethod
    def validate_interval(cls, value: int) -> int:
        """Grid boundaries must stay aligned to the hour."""
        if value not in ALLOWED_SLOT_INTERVALS:
            raise ValueError(f"slot_interval_minutes must be 15, 30, or 60, got {value}")
        return value

    @field_validator("range_days", "max_range_days")
    @classmethod
    def validate_days(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Day counts must be positive, got {value}")
        return value

    @model_validator(mode="after")
    def validate_range_limit(self) -> "DefaultsConfig":
        """Ensure the default range fits the configured maximum."""
        if self.range_days > self.max_range_days:
            raise ValueError("range_days must not exceed max_range_days")
        return self


class DayHoursConfig(BaseModel):
    """Opening window of one weekday as "HH:MM" strings."""
    open: str
    close: str

    @model_validator(mode="after")
    def validate_window(self) -> "DayHoursConfig":
        DayHours.parse(self.open, self.close)
        return self


class AppConfig(BaseModel):
    """Application configuration."""
    timezone: str = "UTC"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    strict_facility_lookup: bool = False
    business_hours: Optional[Dict[str, Optional[DayHoursConfig]]] = None
    data_file: Optional[Path] = None

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        """Ensure the timezone is a known IANA name."""
        try:
            pendulum.timezone(value)
        except Exception as exc:
            raise ValueError(f"Unknown timezone: '{value}'") from exc
        return value

    @field_validator("business_hours")
    @classmethod
    def validate_weekdays(
        cls, value: Optional[Dict[str, Optional[DayHoursConfig]]]
    ) -> Optional[Dict[str, Optional[DayHoursConfig]]]:
        """Normalize weekday names and reject unknown ones."""
        if value is None:
            return None
        normalized = {day.lower(): hours for day, hours in value.items()}
        unknown = sorted(set(normalized) - set(WEEKDAYS))
        if unknown:
            raise ValueError(f"Unknown weekday name(s) in business_hours: {', '.join(unknown)}")
        return normalized

    def get_default_business_hours(self) -> BusinessHours:
        """
        Weekly hours used when no facility, location or organization defines any.

        Weekdays left out of a configured table are closed.
        """
        if self.business_hours is None:
            return DEFAULT_BUSINESS_HOURS
        return BusinessHours.from_mapping(
            {
                day: hours.model_dump() if hours else None
                for day, hours in self.business_hours.items()
            }
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if config.data_file is not None and not config.data_file.is_absolute():
            config = config.model_copy(
                update={"data_file": config_path.parent / config.data_file}
            )
        return config


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    config_path = Path.cwd() / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        config_path = Path(__file__).parent.parent / "config.yaml"

    return config_path
