"""
Runtime configuration for setstr.

Values come from the environment (``SETSTR_`` prefix) or a local ``.env``
file. List values are given as JSON, e.g.
``SETSTR_TYPE_SUFFIXES='[".Base", ".Error"]'``.
"""

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SETSTR_",
        env_file=".env",
        extra="ignore",
    )

    SUFFIX: str = Field("_setters", description="Appended to the input file stem to name the output.")
    TYPE_SUFFIXES: List[str] = Field(
        default_factory=list,
        description="Only generate for fields whose type ends with one of these. Empty accepts all.",
    )
    LOG_LEVEL: str = "INFO"
    PARSE_DEBUG: bool = False


settings = Settings()
