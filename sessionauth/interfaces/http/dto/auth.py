from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CredentialsDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    username: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("username")
    @classmethod
    def strip_username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username cannot be blank")
        return value


class RegisterRequestDTO(_CredentialsDTO):
    pass


class LoginRequestDTO(_CredentialsDTO):
    pass


class UserDTO(BaseModel):
    id: int
    username: str


class MessageDTO(BaseModel):
    message: str
