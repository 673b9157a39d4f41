from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    APP_NAME: str = "LFJC Upload Portal"
    LOG_LEVEL: str = "INFO"

    # GitHub
    GITHUB_TOKEN: str = ""
    GITHUB_USER: str = "iitjeelf"
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_BRANCH: str = "main"
    USER_AGENT: str = "LFJC-Portal"

    # When set, a failed existence check on a file (other than 404) aborts the upload
    STRICT_FILE_PROBE: bool = False

    # Google Drive backup (Apps Script web app); disabled when unset
    GOOGLE_APPS_SCRIPT_URL: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    return Settings()
