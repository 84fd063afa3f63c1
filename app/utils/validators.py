"""
Validation utilities for the Spot Booking API.
Field parsers raise PydanticCustomError so schema validators report
the exact per-field messages clients rely on.
"""

from typing import Any, Dict, Iterable, Optional
from decimal import Decimal, InvalidOperation
from email_validator import validate_email, EmailNotValidError
from pydantic_core import PydanticCustomError


TRUE_VALUES = {"true", "1", "yes"}
FALSE_VALUES = {"false", "0", "no"}


class ValidationUtils:
    """
    Utility class for common validation operations.
    Every parser takes the client-facing message to raise on failure.
    """

    @staticmethod
    def validate_string(
        value: Any,
        message: str,
        max_length: Optional[int] = None,
        max_length_message: Optional[str] = None
    ) -> str:
        """
        Validate a required, non-blank string.

        Args:
            value: Value to validate
            message: Error message for missing, blank or non-string input
            max_length: Maximum length after stripping
            max_length_message: Error message when the string is too long

        Returns:
            Stripped string
        """
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("required", message)

        cleaned = value.strip()
        if max_length is not None and len(cleaned) > max_length:
            raise PydanticCustomError("too_long", max_length_message or message)

        return cleaned

    @staticmethod
    def validate_email_address(value: Any, message: str) -> str:
        """
        Validate email address format.

        Returns:
            Normalized, lowercased email
        """
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("email_invalid", message)

        try:
            valid_email = validate_email(value.strip(), check_deliverability=False)
        except EmailNotValidError:
            raise PydanticCustomError("email_invalid", message)

        return valid_email.normalized.lower()

    @staticmethod
    def looks_like_email(value: str) -> bool:
        """Whether a string parses as an email address."""
        try:
            validate_email(value, check_deliverability=False)
            return True
        except EmailNotValidError:
            return False

    @staticmethod
    def validate_decimal(
        value: Any,
        message: str,
        min_value: Optional[Decimal] = None,
        max_value: Optional[Decimal] = None
    ) -> Decimal:
        """
        Validate a number (or numeric string) within an inclusive range.

        Booleans are rejected even though Python treats them as integers.
        """
        if value is None or isinstance(value, bool):
            raise PydanticCustomError("decimal_invalid", message)

        try:
            decimal_value = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError):
            raise PydanticCustomError("decimal_invalid", message)

        if not decimal_value.is_finite():
            raise PydanticCustomError("decimal_invalid", message)

        if min_value is not None and decimal_value < min_value:
            raise PydanticCustomError("decimal_range", message)

        if max_value is not None and decimal_value > max_value:
            raise PydanticCustomError("decimal_range", message)

        return decimal_value

    @staticmethod
    def validate_float(
        value: Any,
        message: str,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None
    ) -> float:
        """Validate a float within an inclusive range."""
        bounds = {
            "min_value": Decimal(str(min_value)) if min_value is not None else None,
            "max_value": Decimal(str(max_value)) if max_value is not None else None,
        }
        return float(ValidationUtils.validate_decimal(value, message, **bounds))

    @staticmethod
    def coerce_bool(value: Any, message: str, default: bool = False) -> bool:
        """
        Coerce a flag sent as a boolean, 0/1, or a string such as
        "true"/"false", "1"/"0", "yes"/"no".

        Missing values fall back to ``default``.
        """
        if value is None:
            return default

        if isinstance(value, bool):
            return value

        if isinstance(value, int) and value in (0, 1):
            return bool(value)

        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized in TRUE_VALUES:
                return True
            if normalized in FALSE_VALUES:
                return False

        raise PydanticCustomError("bool_invalid", message)

    @staticmethod
    def clamp_integer(value: Any, minimum: int, maximum: int, default: int) -> int:
        """
        Clamp a pagination value into [minimum, maximum].

        Missing or non-numeric input falls back to ``default``.
        """
        if value is None or isinstance(value, bool):
            return default

        try:
            int_value = int(str(value).strip())
        except (ValueError, TypeError):
            return default

        return max(minimum, min(maximum, int_value))


class RangeValidator:
    """Validator for paired min/max filter values."""

    @staticmethod
    def check_pairs(pairs: Iterable[tuple]) -> Dict[str, str]:
        """
        Check (min_field, min_value, max_field, max_value, message) tuples.

        Returns:
            Field-keyed error map; empty when every range is well formed
        """
        errors = {}
        for min_field, min_value, max_field, max_value, message in pairs:
            if min_value is not None and max_value is not None and min_value > max_value:
                errors[min_field] = message
        return errors


def field_errors_from(errors: Iterable[Dict[str, Any]]) -> Dict[str, str]:
    """
    Convert pydantic error dicts into a field-keyed message map.

    The field is the last element of each error location; the first
    message reported for a field wins.
    """
    field_errors: Dict[str, str] = {}

    for error in errors:
        location = error.get("loc") or ()
        field = str(location[-1]) if location else "body"
        field_errors.setdefault(field, error.get("msg", "Invalid value"))

    return field_errors
