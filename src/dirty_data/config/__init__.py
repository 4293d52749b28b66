"""Configuration package -- typed, validated settings from YAML + .env."""

from .settings import PROJECT_ROOT, AnalysisSettings, PipelineSettings

__all__ = [
    "AnalysisSettings",
    "PROJECT_ROOT",
    "PipelineSettings",
    "load_all_settings",
]


def load_all_settings() -> tuple[AnalysisSettings, PipelineSettings]:
    """Load and return all configuration objects.

    Returns a tuple of (AnalysisSettings, PipelineSettings), each populated
    from its own YAML file with environment variable overrides.
    """
    return AnalysisSettings(), PipelineSettings()
