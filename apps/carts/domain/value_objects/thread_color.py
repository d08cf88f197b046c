"""
Thread color value object.
"""
import re
from dataclasses import dataclass

from shared.domain import ValueObject
from ..exceptions import InvalidThreadColorError

HEX_COLOR_PATTERN = re.compile(r'^#[0-9A-Fa-f]{6}$')


@dataclass(frozen=True)
class ThreadColor(ValueObject):
    """Embroidery thread / accent color in #RRGGBB form."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not HEX_COLOR_PATTERN.match(self.value):
            raise InvalidThreadColorError(self.value)
        object.__setattr__(self, 'value', self.value.upper())

    @property
    def rgb(self) -> tuple:
        """Get the (red, green, blue) components."""
        return tuple(int(self.value[i:i + 2], 16) for i in (1, 3, 5))
