from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mockpay.domain.users.entities import TokenPair


class RegisterRequestDTO(BaseModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        # Emails are exact, case-sensitive keys; only reject obvious garbage.
        local, sep, domain = value.partition("@")
        if not sep or not local or not domain or any(ch.isspace() for ch in value):
            raise ValueError("email must look like local@domain")
        return value


class LoginRequestDTO(BaseModel):
    email: str = Field(min_length=1, max_length=320)
    password: str = Field(min_length=1, max_length=128)


class RefreshRequestDTO(BaseModel):
    refresh_token: str = Field(min_length=1, max_length=256, alias="refreshToken")

    model_config = ConfigDict(validate_by_name=True)


class MessageDTO(BaseModel):
    message: str


class TokenPairDTO(BaseModel):
    access_token: str = Field(serialization_alias="accessToken")
    refresh_token: str = Field(serialization_alias="refreshToken")

    @classmethod
    def from_domain(cls, pair: TokenPair) -> TokenPairDTO:
        return cls(access_token=pair.access_token, refresh_token=pair.refresh_token)
