"""
backend/models/lead.py

Identity and Lead records.

An Identity is what a visitor gives at registration; it never changes after
it is saved. A Lead is the remote mirror of an Identity plus the usage
counters the admin can see and adjust.
"""

import re
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Identity(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=200)
    whatsapp: str = Field(min_length=1, max_length=40, description="Contact handle; key of the remote lead")
    email: str = Field(min_length=3, max_length=320)

    @field_validator("name", "whatsapp", "email")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("email")
    @classmethod
    def looks_like_email(cls, value: str) -> str:
        if "@" not in value:
            raise ValueError("must be an email address")
        return value


class Lead(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    whatsapp: str
    email: str
    usage_count: int = 0
    usage_limit: int = 1
    created_at: Optional[datetime] = None
    last_usage_at: Optional[datetime] = None

    @property
    def limit_reached(self) -> bool:
        return self.usage_count >= self.usage_limit

    def contact_url(self) -> str:
        """WhatsApp deep link with a greeting for manual follow-up."""
        digits = re.sub(r"\D", "", self.whatsapp)
        message = quote(
            f"Olá {self.name}, vi que você está usando nosso Criador de Prompts IA! Como posso ajudar?"
        )
        return f"https://wa.me/{digits}?text={message}"
