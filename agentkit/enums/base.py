"""Base enum."""

from enum import StrEnum


class BaseEnum(StrEnum):
    """Base string enum.

    Members compare equal to their string values, which keeps them usable
    in pydantic models and JSON bodies without extra serializers.
    """
