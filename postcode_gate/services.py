"""
Business Logic Services for Postal Code Gate Application

This module contains the service classes behind the gate: input
normalization and validation of submitted postal codes, and the
credential check against the configured secret.
"""

import re

from .models import NormalizedPostCode, ValidationResult, POST_CODE_LENGTH
from .exceptions import (
    InvalidPostCodeFormatException,
    PostCodeMismatchException,
    INVALID_FORMAT_MESSAGE,
)

FULL_WIDTH_DIGITS = str.maketrans("０１２３４５６７８９", "0123456789")
PLACEHOLDER_POST_CODE = "0" * POST_CODE_LENGTH

_NON_ASCII_DIGIT = re.compile(r"[^0-9]")


class PostCodeService:
    """
    Normalizes and validates postal codes typed by a visitor

    The same four steps run in the browser while the visitor types
    (static/postcode.js); this is the authoritative copy.
    """

    @staticmethod
    def normalize(raw: str) -> NormalizedPostCode:
        """
        Normalize raw input into a candidate postal code

        Full-width digits become ASCII, hyphens and every other
        non-digit character are removed, and the result is cut to
        seven characters.

        Args:
            raw: Text exactly as submitted

        Returns:
            NormalizedPostCode holding at most seven ASCII digits
        """
        code = raw.translate(FULL_WIDTH_DIGITS)
        code = code.replace("-", "")
        code = _NON_ASCII_DIGIT.sub("", code)
        return NormalizedPostCode(code[:POST_CODE_LENGTH])

    @staticmethod
    def coerce_submission(raw) -> str:
        """
        Replace a missing or empty form value with the placeholder code

        Args:
            raw: Form value, possibly None

        Returns:
            The submitted string, or "0000000" when nothing was sent
        """
        if not raw:
            return PLACEHOLDER_POST_CODE
        return str(raw)

    def validate(self, raw: str) -> ValidationResult:
        """
        Validate raw input without correcting it

        Input is valid only when normalizing it changes nothing and it
        is exactly seven characters long.

        Args:
            raw: Text exactly as submitted

        Returns:
            ValidationResult carrying the code or the format message
        """
        code = self.normalize(raw)
        if code.value == raw and len(raw) == POST_CODE_LENGTH:
            return ValidationResult.success(code)
        return ValidationResult.failure(INVALID_FORMAT_MESSAGE)

    def validate_or_raise(self, raw: str) -> NormalizedPostCode:
        """
        Validate raw input or raise if it is malformed

        Args:
            raw: Text exactly as submitted

        Returns:
            NormalizedPostCode of exactly seven digits

        Raises:
            InvalidPostCodeFormatException: If the input is not seven ASCII digits
        """
        result = self.validate(raw)
        if not result.valid:
            raise InvalidPostCodeFormatException()
        return result.code


class VerificationService:
    """
    Compares validated codes against the configured secret
    """

    def __init__(self, post_code: str):
        """
        Initialize verification service

        Args:
            post_code: The secret code, read once from configuration
        """
        self._post_code = post_code

    def matches(self, code: NormalizedPostCode) -> bool:
        """
        Check a normalized code against the secret

        Args:
            code: Code produced by PostCodeService

        Returns:
            True if the code equals the secret

        Raises:
            TypeError: If handed anything other than a NormalizedPostCode
        """
        if not isinstance(code, NormalizedPostCode):
            raise TypeError(
                f"expected NormalizedPostCode, got {type(code).__name__}"
            )
        return code.is_well_formed() and code.value == self._post_code

    def check(self, code: NormalizedPostCode) -> None:
        """
        Verify a normalized code or raise

        Args:
            code: Code produced by PostCodeService

        Raises:
            PostCodeMismatchException: If the code does not equal the secret
        """
        if not self.matches(code):
            raise PostCodeMismatchException()
