"""Pydantic models for GitHub contents API responses."""

import base64
from typing import Literal

from pydantic import BaseModel


class ContentEntry(BaseModel):
    """An item of a directory listing."""

    type: Literal["file", "dir", "symlink", "submodule"]
    name: str
    path: str
    sha: str


class FileContent(ContentEntry):
    """A single file with its content."""

    content: str = ""
    encoding: str = "base64"

    def decoded(self) -> bytes:
        return base64.b64decode(self.content)


class CommitResponse(BaseModel):
    """Response from creating or updating a file."""

    content: ContentEntry | None = None
