from __future__ import annotations
from pathlib import Path
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class LexiSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LEXI_", env_file=".env", extra="ignore")

    docs_dir: Path = Field(default=Path("data/documents"))

    answer_backend: Literal["simulated", "openai"] = Field(default="simulated")
    simulated_delay_s: float = Field(default=1.5, ge=0.0, le=30.0)

    llm_model: str = Field(default="gpt-4o-mini")
    request_timeout_s: float = Field(default=45.0, ge=5.0, le=180.0)
    max_retries: int = Field(default=6, ge=0, le=10)
    max_rps: float = Field(default=3.0, ge=0.0, le=100.0)

    chunk_size: int = Field(default=1200, ge=200, le=6000)
    chunk_overlap: int = Field(default=200, ge=0, le=2000)
    max_context_chunks: int = Field(default=6, ge=1, le=50)

    service_name: str = Field(default="lexi-legal-assistant")

def get_settings() -> LexiSettings:
    return LexiSettings()
