"""Participant key pairs."""

from __future__ import annotations

from dataclasses import dataclass, field

from pvss.crypto.group import GroupParameters


@dataclass(frozen=True)
class KeyPair:
    """``public_key = G^private_key mod q``.  The private key stays local."""

    private_key: int = field(repr=False)
    public_key: int

    @classmethod
    def generate(cls, params: GroupParameters) -> KeyPair:
        private_key = params.generate_private_key()
        return cls(private_key=private_key, public_key=params.generate_public_key(private_key))

    @classmethod
    def from_private_key(cls, params: GroupParameters, private_key: int) -> KeyPair:
        return cls(private_key=private_key, public_key=params.generate_public_key(private_key))
