from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_PROCESS_NAMES = ["BF2.exe", "bf2_w32ded.exe", "bf2hub.exe"]


class _BaseConfigModel(BaseModel):
    model_config = ConfigDict(extra="allow")


class QuiescenceSettings(_BaseConfigModel):
    process_names: List[str] = Field(default_factory=lambda: list(DEFAULT_PROCESS_NAMES))
    poll_interval_sec: float = Field(default=1.0, gt=0)
    max_attempts: int = Field(default=5, ge=1)


class OpenSpySettings(_BaseConfigModel):
    base_url: str = "http://account.openspy.net/api/"
    timeout_sec: float = Field(default=10.0, gt=0)
    namespace_id: int = 12
    partner_code: int = 0


class InstallSettings(_BaseConfigModel):
    install_dir: Optional[str] = None
    profiles_dir: Optional[str] = None
    use_patch_lock: bool = True


class LoggingSettings(_BaseConfigModel):
    level: str = "INFO"
    log_dir: Optional[str] = None
    file_logging: bool = True
    structured_json: bool = False

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {value}")
        return level


class MigratorConfig(_BaseConfigModel):
    quiescence: QuiescenceSettings = Field(default_factory=QuiescenceSettings)
    openspy: OpenSpySettings = Field(default_factory=OpenSpySettings)
    install: InstallSettings = Field(default_factory=InstallSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def validate_config(payload: Dict[str, Any]) -> MigratorConfig:
    return MigratorConfig.model_validate(payload)
