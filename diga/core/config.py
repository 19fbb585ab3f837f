"""Core configuration with Pydantic v2 Settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Writer settings with environment variable support (prefix ``DIGA_``)."""

    model_config = SettingsConfigDict(env_prefix="DIGA_")

    app_env: str = "development"
    log_level: str = "INFO"
    log_json: bool = True

    # XML output
    xml_pretty_print: bool = True

    # Optional XSD check inside the serializer. Both paths point to the
    # official schemas (GKV Pruefung_Freischaltcode, CII D16B / XRechnung).
    schema_validation: bool = False
    code_validation_xsd: Optional[Path] = None
    billing_xsd: Optional[Path] = None


# Global settings instance
settings = Settings()
