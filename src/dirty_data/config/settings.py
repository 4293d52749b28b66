"""Pydantic settings models for the Dirty Data analyzer.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Environment variables (with prefix, e.g., ANALYSIS_MODEL)
    2. .env file (for secrets, e.g., ANALYSIS_API_KEY)
    3. YAML config file (e.g., config/analysis.yaml)
    4. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the application works
regardless of the current working directory.
"""

from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> dirty_data/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class AnalysisSettings(BaseSettings):
    """Model calls: which model, how many tokens, how much data per pass.

    The API key comes from .env or the environment only -- it must NEVER
    appear in YAML files or log output.
    """

    model: str = "claude-sonnet-4-20250514"
    api_key: SecretStr = SecretStr("")
    timeout_seconds: float = 120.0

    primary_max_tokens: int = 4000
    review_max_tokens: int = 3000

    # Rows of the table rendered into each prompt
    primary_row_cap: int = 100
    review_row_cap: int = 50

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "analysis.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="ANALYSIS_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class PipelineSettings(BaseSettings):
    """Application plumbing: paths, logging, upload limits, history size."""

    db_path: str = "data/analyses.db"
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    # Rows kept from an uploaded sheet before anything is sampled
    max_upload_rows: int = 500
    history_limit: int = 50

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "pipeline.yaml"),
        env_prefix="PIPELINE_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
