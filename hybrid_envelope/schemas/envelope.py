"""Envelope and key material schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class KeyMaterial(BaseModel):
    """Base64-encoded PEM keys handed to :class:`EnvelopeService`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    public_key: str | None = Field(default=None, alias="publicKey", repr=False)
    private_key: str | None = Field(default=None, alias="privateKey", repr=False)
    private_key_password: str | None = Field(default=None, alias="privateKeyPassword", repr=False)


class ObjectEnvelope(BaseModel):
    """Raw-bytes envelope produced by the object path.

    JSON dumps of this model carry the bytes fields as base64.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    encrypted_key: bytes = Field(alias="encryptedKey")
    iv: bytes
    ciphertext: bytes


class MessageEnvelope(BaseModel):
    """Base64 text envelope; the cross-platform wire form."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    encrypted_key: str = Field(alias="encryptedKey")
    iv: str
    message: str

    def to_wire(self) -> dict[str, str]:
        return self.model_dump(by_alias=True)
