"""
Core Value Objects

Defines the scalar and range value types carried by a data criterion:
    - Quantity (a single bound: value, unit, inclusivity)
    - Interval (low / high / width bounds)
    - EffectiveTime (an Interval pinned to the time-interval tag)
    - CodedConcept (a code from a code system)
    - CriteriaReference (pointer to another data criterion by id)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about JSON or YAML (see serialization)
        - Perform no unit conversion or calendar arithmetic
        - Treat values as opaque (numbers or strings)
"""

from dataclasses import dataclass
from typing import Optional, Union


# Type tags
PHYSICAL_QUANTITY = "PQ"
TIMESTAMP = "TS"
PQ_INTERVAL = "IVL_PQ"
TIME_INTERVAL = "IVL_TS"
CODED = "CD"


class ModelError(Exception):
    """Base class for errors raised by the value model."""
    pass


class ConversionError(ModelError):
    """Raised when a value cannot be rendered in human-readable form."""
    pass


@dataclass
class Quantity:
    """
    A single bound: a value with optional unit and inclusivity.

    Examples:
        - 5 days           Quantity(type="PQ", value=5, unit="d")
        - >= 18 years      Quantity(type="PQ", value=18, unit="a", inclusive=True)
        - a timestamp      Quantity(type="TS", value="20100101")

    Properties:
        type:
            Type tag ("PQ", "TS", ...). May be left unset and filled in
            once by the owning TemporalRelationship / SubsetSelector.

        unit:
            Unit string, if any

        value:
            Numeric or string value

        inclusive:
            True when the bound includes its endpoint

        derived:
            True when the value is computed from other criteria

        expression:
            Symbolic expression the value was derived from

    IMPORTANT:
        Every field defaults to None ("unset"), never to a concrete default.
        Defaults are introduced only by normalization.

        unit, derived and expression are meant to be fixed after
        construction, but are plain fields; nothing stops assignment.
        Only type, value and inclusive are changed by this package.
    """

    type: Optional[str] = None
    unit: Optional[str] = None
    value: Optional[Union[int, float, str]] = None
    inclusive: Optional[bool] = None
    derived: Optional[bool] = None
    expression: Optional[str] = None

    @property
    def is_inclusive(self) -> bool:
        return bool(self.inclusive)

    @property
    def is_derived(self) -> bool:
        return bool(self.derived)

    def stringify(self) -> str:
        """Render as e.g. "=5 mg" (inclusive) or "5 mg"."""
        prefix = "=" if self.is_inclusive else ""
        value = "" if self.value is None else self.value
        unit = f" {self.unit}" if self.unit else ""
        return f"{prefix}{value}{unit}"


@dataclass
class Interval:
    """
    A range built from up to three Quantities.

    Properties:
        type: Type tag, usually "IVL_PQ" or "IVL_TS"
        low: Lower bound (optional)
        high: Upper bound (optional)
        width: Width of the range (optional, never rendered)

    The Interval owns its bounds; bounds are not shared between intervals.
    """

    type: Optional[str] = None
    low: Optional[Quantity] = None
    high: Optional[Quantity] = None
    width: Optional[Quantity] = None

    def stringify(self) -> str:
        """
        Render the range in human-readable form.

        Rules:
            low == high, both inclusive   ->  "=5"
            low and high                  ->  ">3 and <7"
            high only                     ->  "<7"
            low only                      ->  ">3"

        Raises:
            ConversionError: If neither low nor high is set
        """
        low, high = self.low, self.high
        if low is not None and high is not None:
            if low.value == high.value and low.is_inclusive and high.is_inclusive:
                return low.stringify()
            return f">{low.stringify()} and <{high.stringify()}"
        if high is not None:
            return f"<{high.stringify()}"
        if low is not None:
            return f">{low.stringify()}"
        raise ConversionError("cannot convert range to string")


class EffectiveTime(Interval):
    """
    Interval whose type is always the time-interval tag ("IVL_TS").

    Assigning to `type` has no effect: the tag is a constant of the class,
    not stored state.
    """

    def __init__(self, low: Optional[Quantity] = None, high: Optional[Quantity] = None,
                 width: Optional[Quantity] = None):
        super().__init__(TIME_INTERVAL, low, high, width)

    @property
    def type(self) -> str:
        return TIME_INTERVAL

    @type.setter
    def type(self, _value) -> None:
        # pinned
        pass


@dataclass(frozen=True)
class CodedConcept:
    """
    A coded value (code system + code).

    Exposes the read side of Quantity (value, unit, is_derived) so it can
    stand in for a Quantity as a criterion's value.

    Properties:
        type: Type tag, usually "CD"
        system: Code system identifier (e.g. an OID)
        code: The code itself
    """

    type: Optional[str] = None
    system: Optional[str] = None
    code: Optional[str] = None

    @property
    def value(self) -> Optional[str]:
        return self.code

    @property
    def unit(self) -> None:
        return None

    @property
    def is_derived(self) -> bool:
        return False


@dataclass
class CriteriaReference:
    """Points at another data criterion by its id."""

    id: str


# Polymorphic value of a data criterion
Value = Union[Quantity, Interval, CodedConcept]
