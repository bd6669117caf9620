"""Field values: tagged string / number / symbol."""

from enum import Enum
from types import MappingProxyType


class ValueType(Enum):
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"


# Symbols every BibTeX style defines. Resolution stops at these.
PREDEFINED_SYMBOLS = MappingProxyType({
    "jan": "January",
    "feb": "February",
    "mar": "March",
    "apr": "April",
    "may": "May",
    "jun": "June",
    "jul": "July",
    "aug": "August",
    "sep": "September",
    "oct": "October",
    "nov": "November",
    "dec": "December",
})


class Value:
    """
    The value of one field or symbol.

    Exactly one payload is meaningful: `text` for STRING and SYMBOL values,
    `number` for NUMBER values. Values are owned by a single fields mapping
    and are rewritten in place by the clean transforms.
    """

    __slots__ = ("type", "text", "number")

    def __init__(self, type: ValueType, text: str = "", number: int = 0):
        self.type = type
        self.text = text
        self.number = number

    @classmethod
    def string(cls, text: str) -> "Value":
        return cls(ValueType.STRING, text=text)

    @classmethod
    def integer(cls, number: int) -> "Value":
        return cls(ValueType.NUMBER, number=number)

    @classmethod
    def symbol(cls, name: str) -> "Value":
        return cls(ValueType.SYMBOL, text=name)

    @property
    def is_string(self) -> bool:
        return self.type is ValueType.STRING

    @property
    def is_number(self) -> bool:
        return self.type is ValueType.NUMBER

    @property
    def is_symbol(self) -> bool:
        return self.type is ValueType.SYMBOL

    def copy(self) -> "Value":
        return Value(self.type, self.text, self.number)

    def equals(self, other: "Value") -> bool:
        """
        Exact equality: same tag and same payload.

        Braces are not stripped and symbols are not resolved, so
        Number(2020) and Symbol("2020") are different values.
        """
        if self.type is not other.type:
            return False
        if self.is_number:
            return self.number == other.number
        return self.text == other.text

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.equals(other)

    __hash__ = None

    def sort_text(self) -> str:
        """Text used when comparing against a value of another type."""
        if self.is_number:
            return str(self.number)
        return self.text

    def to_bibtex(self) -> str:
        """Render the value the way it is written in a .bib file."""
        if self.is_string:
            return "{%s}" % self.text
        if self.is_number:
            return "%d" % self.number
        return self.text

    def __repr__(self):
        if self.is_number:
            return f"Value.integer({self.number})"
        return f"Value.{self.type.value}({self.text!r})"
