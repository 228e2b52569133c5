"""
Data Models for Postal Code Gate Application

This module contains the value types that flow between the normalizer,
the credential checker and the session store. They use dataclasses for
clean, type-safe data representation.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional


POST_CODE_LENGTH = 7


@dataclass(frozen=True)
class NormalizedPostCode:
    """
    A postal code that has been through the normalizer

    Only PostCodeService.normalize builds these, so code that accepts a
    NormalizedPostCode can never be handed raw form input by mistake.
    """
    value: str

    def is_well_formed(self) -> bool:
        """True if the value is exactly seven ASCII digits"""
        return len(self.value) == POST_CODE_LENGTH and all(
            "0" <= ch <= "9" for ch in self.value
        )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a raw submission

    Either valid with a code, or invalid with a user-facing message.
    """
    valid: bool
    code: Optional[NormalizedPostCode] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, code: NormalizedPostCode) -> 'ValidationResult':
        return cls(valid=True, code=code)

    @classmethod
    def failure(cls, message: str) -> 'ValidationResult':
        return cls(valid=False, message=message)


@dataclass
class SessionData:
    """
    Payload carried inside the signed session cookie
    """
    verified: bool = False

    @classmethod
    def from_dict(cls, data: Dict) -> 'SessionData':
        """
        Create SessionData from a decoded cookie payload

        Args:
            data: Dictionary decoded from the session token

        Returns:
            SessionData instance; anything but a literal True is unverified
        """
        return cls(verified=data.get('verified') is True)

    def to_dict(self) -> Dict:
        """
        Convert session data to dictionary for serialization

        Returns:
            Dictionary representation of the session
        """
        return asdict(self)
