"""Case-insensitive lookups for config-facing enums"""

from enum import Enum
from typing import List, Type, TypeVar

E = TypeVar("E", bound=Enum)


class EnumHelper:
    """Maps config strings such as "warn" onto enum members"""

    @staticmethod
    def from_string(enum_class: Type[E], name: str) -> E:
        """
        Raises:
            ValueError: no member with that name
        """
        member = enum_class.__members__.get(name.strip().upper())
        if member is None:
            raise ValueError(f"Invalid {enum_class.__name__} name: {name}")
        return member

    @staticmethod
    def names(enum_class: Type[E]) -> List[str]:
        return list(enum_class.__members__)
