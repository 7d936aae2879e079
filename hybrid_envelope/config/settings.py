"""Application settings using Pydantic settings management."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hybrid_envelope.schemas import KeyMaterial


class Settings(BaseSettings):
    """Environment configuration for an envelope service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", env_prefix="HYBRID_ENVELOPE_")

    public_key: Optional[str] = Field(
        default=None,
        description="Base64 encoded PEM of the recipient RSA public key.",
        repr=False,
    )
    private_key: Optional[str] = Field(
        default=None,
        description="Base64 encoded PEM of the RSA private key.",
        repr=False,
    )
    private_key_password: Optional[str] = Field(
        default=None,
        description="Passphrase when the private key PEM is encrypted.",
        repr=False,
    )
    allow_partial_keys: bool = Field(
        default=False,
        description="Allow a service holding only one key, usable in one direction.",
    )
    min_key_size: int = Field(default=2048, description="Smallest accepted RSA modulus in bits.")

    def key_material(self) -> KeyMaterial:
        return KeyMaterial(
            public_key=self.public_key,
            private_key=self.private_key,
            private_key_password=self.private_key_password,
        )

    @model_validator(mode="after")
    def validate_key_settings(self) -> "Settings":
        if not self.public_key and not self.private_key:
            raise ValueError("HYBRID_ENVELOPE_PUBLIC_KEY or HYBRID_ENVELOPE_PRIVATE_KEY must be set.")

        if self.min_key_size < 1024:
            raise ValueError("HYBRID_ENVELOPE_MIN_KEY_SIZE must be at least 1024 bits.")

        return self


@lru_cache
def get_settings() -> Settings:
    return Settings()
