"""Configuration for GitHub repository storage."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class GitHubStorageConfig(BaseModel):
    """Configuration for storing reports in a GitHub repository."""

    type: Literal["github"] = "github"
    token: SecretStr
    owner: str
    repo: str
    branch: str = "main"
    api_base_url: str = "https://api.github.com"
    web_base_url: str = "https://github.com"
    raw_base_url: str = "https://raw.githubusercontent.com"
    # Defaults to the repository's GitHub Pages site
    pages_url: str | None = None
    request_timeout: float = 30
