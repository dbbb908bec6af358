"""
Pydantic schemas for memorial endpoints.

Fields are all optional at the schema level: presence of required fields is
checked in the service so a missing field is a 400 with our error message,
not a framework 422.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class UpdateMemorialRequest(BaseModel):
    name: str | None = None
    bio: str | None = None
    passport_photo_url: str | None = None
    birth_date: str | None = None
    death_date: str | None = None
    # Older clients send camelCase.
    brief_info: str | None = Field(
        default=None,
        validation_alias=AliasChoices("brief_info", "briefInfo"),
    )


class CreateMemorialRequest(UpdateMemorialRequest):
    """
    Same fields as an update; `brief_info` is the only optional one in both.
    """
