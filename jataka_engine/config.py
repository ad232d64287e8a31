"""
config.py
=========
Engine defaults, read from the environment (prefix JATAKA_) or a .env file.

    JATAKA_AYANAMSA=raman
    JATAKA_HOUSE_SYSTEM=whole_sign
    JATAKA_DIVISIONS=[1, 9, 10]
    JATAKA_EPHEMERIS_BACKEND=swisseph
    JATAKA_EPHE_PATH=/usr/share/ephe
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import DEFAULT_AYANAMSA, DEFAULT_HOUSE_SYSTEM, AyanamsaSystem, HouseSystem
from .core.divisional_charts import SUPPORTED_DIVISIONS, Division


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JATAKA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    ayanamsa: AyanamsaSystem = DEFAULT_AYANAMSA
    house_system: HouseSystem = DEFAULT_HOUSE_SYSTEM
    divisions: List[int] = Field(default_factory=lambda: [d.value for d in SUPPORTED_DIVISIONS])
    dasha_horizon_years: float = Field(default=120.0, gt=0, le=1200)

    ephemeris_backend: Literal["meeus", "swisseph"] = "meeus"
    ephe_path: Optional[str] = None

    log_level: str = "INFO"
    log_json: bool = False

    @field_validator("divisions", mode="before")
    @classmethod
    def _supported_divisions(cls, value) -> List[int]:
        # Division.parse raises UnsupportedDivision, a ValueError
        return [Division.parse(d).value for d in value]


@lru_cache
def get_settings() -> Settings:
    return Settings()
