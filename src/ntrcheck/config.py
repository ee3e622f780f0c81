"""Application configuration — built once from environment variables."""

import os
from pathlib import Path

from pydantic import BaseModel


class NCBIConfig(BaseModel):
    base_url: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"
    api_key: str = ""  # Set via env; gives 10 req/s instead of 3
    email: str = ""


class HGNCConfig(BaseModel):
    base_url: str = "https://rest.genenames.org"


class LLMConfig(BaseModel):
    base_url: str = "https://api.openai.com/v1"
    model: str = "gpt-4-turbo-preview"
    openai_api_key: str = ""  # only seeds the settings store for `serve`
    timeout_seconds: float = 120.0


class GitHubConfig(BaseModel):
    api_url: str = "https://api.github.com"
    token: str = ""
    repo: str = "monarch-initiative/mondo"
    trigger_label: str = "new term request"


class SettingsStoreConfig(BaseModel):
    path: str = str(Path.home() / ".config" / "ntrcheck" / "settings.json")
    api_key_name: str = "openai_api_key"


class AppConfig(BaseModel):
    ncbi: NCBIConfig = NCBIConfig()
    hgnc: HGNCConfig = HGNCConfig()
    llm: LLMConfig = LLMConfig()
    github: GitHubConfig = GitHubConfig()
    settings_store: SettingsStoreConfig = SettingsStoreConfig()
    http_timeout: float = 30.0
    debug: bool = False
    cors_origins: list[str] = [
        "https://github.com",
        "http://localhost:5173",
    ]


def _build_config() -> AppConfig:
    """Build config from environment variables."""
    return AppConfig(
        ncbi=NCBIConfig(
            api_key=os.environ.get("NCBI_API_KEY", ""),
            email=os.environ.get("NCBI_EMAIL", ""),
        ),
        hgnc=HGNCConfig(
            base_url=os.environ.get("HGNC_BASE_URL", "https://rest.genenames.org"),
        ),
        llm=LLMConfig(
            base_url=os.environ.get("OPENAI_BASE_URL", "https://api.openai.com/v1"),
            model=os.environ.get("NTRCHECK_LLM_MODEL", "gpt-4-turbo-preview"),
            openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
            timeout_seconds=float(os.environ.get("NTRCHECK_LLM_TIMEOUT", "120")),
        ),
        github=GitHubConfig(
            token=os.environ.get("GITHUB_TOKEN", ""),
        ),
        settings_store=SettingsStoreConfig(
            path=os.environ.get(
                "NTRCHECK_SETTINGS_PATH",
                str(Path.home() / ".config" / "ntrcheck" / "settings.json"),
            ),
        ),
        http_timeout=float(os.environ.get("NTRCHECK_HTTP_TIMEOUT", "30")),
        debug=os.environ.get("DEBUG", "").lower() in ("1", "true", "yes"),
    )


config = _build_config()
