"""Configuration for SharePoint storage."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class SharePointConfig(BaseModel):
    """Configuration for a SharePoint document library."""

    type: Literal["sharepoint"] = "sharepoint"
    site_url: str
    tenant_id: str
    client_id: str
    client_secret: SecretStr
    library_name: str
    folder_path: str = "/PlaywrightReports"
