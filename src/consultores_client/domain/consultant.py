"""Consultant records exchanged with the registry backend."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ConsultantInput(BaseModel):
    """Payload for creating a consultant."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(alias="nome")
    email: str
    phone: str | None = Field(default=None, alias="telefone")
    area: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ConsultantUpdate(BaseModel):
    """Partial update addressed by consultant id."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    id: str
    name: str | None = Field(default=None, alias="nome")
    email: str | None = None
    phone: str | None = Field(default=None, alias="telefone")
    area: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Consultant(BaseModel):
    """Consultant record as returned by the backend."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str = Field(alias="nome")
    email: str
    phone: str | None = Field(default=None, alias="telefone")
    area: str | None = None
    registered_at: str | None = Field(default=None, alias="dataCadastro")


class ConsultantMutation(BaseModel):
    """Acknowledgement returned by update and delete calls."""

    model_config = ConfigDict(extra="ignore")

    message: str
    id: str


__all__ = ["Consultant", "ConsultantInput", "ConsultantMutation", "ConsultantUpdate"]
