"""
Temporal Relationships and Subset Selectors

Operators attached to a data criterion:
    - TemporalRelationship: timing constraint against another criterion
      ("starts before start of X, 5 days")
    - SubsetSelector: narrows matched results to a count or position
      ("FIRST", "COUNT >= 2")

Both normalize their inputs once, at construction, so that downstream
code only ever sees one shape:
    - a temporal offset is always a single signed Quantity
    - a subset value is always an Interval
"""

import copy
import logging
from enum import Enum
from typing import Dict, Optional, Union

from dcvm.values import (
    ModelError,
    Quantity,
    Interval,
    CriteriaReference,
    PHYSICAL_QUANTITY,
    PQ_INTERVAL,
)

logger = logging.getLogger(__name__)


class OffsetRangeError(ModelError):
    """Raised when a temporal offset cannot be folded into a signed point.

    Either the range has both a low and a high bound, or its upper bound
    has a value that cannot be negated.
    """
    pass


class RelationshipType(Enum):
    """
    Timing relationships between two data criteria.

    Codes read as <subject point> <direction> <reference point>,
    e.g. SBS = "starts before start of".
    """

    DURING = "DURING"
    SBS = "SBS"  # starts before start
    SAS = "SAS"  # starts after start
    SBE = "SBE"  # starts before end
    SAE = "SAE"  # starts after end
    EBS = "EBS"  # ends before start
    EAS = "EAS"  # ends after start
    EBE = "EBE"  # ends before end
    EAE = "EAE"  # ends after end
    SDU = "SDU"  # starts during
    EDU = "EDU"  # ends during
    ECW = "ECW"  # ends concurrent with
    SCW = "SCW"  # starts concurrent with
    CONCURRENT = "CONCURRENT"


# Opposite relationship when subject and reference criteria are swapped
INVERSION: Dict[RelationshipType, RelationshipType] = {
    RelationshipType.SBS: RelationshipType.EAE,
    RelationshipType.EAE: RelationshipType.SBS,
    RelationshipType.SAS: RelationshipType.EBE,
    RelationshipType.EBE: RelationshipType.SAS,
    RelationshipType.SBE: RelationshipType.EAS,
    RelationshipType.EAS: RelationshipType.SBE,
    RelationshipType.SAE: RelationshipType.EBS,
    RelationshipType.EBS: RelationshipType.SAE,
}


def invert_relationship(code: Union[RelationshipType, str]) -> RelationshipType:
    """
    Look up the opposite of a directional relationship.

    Args:
        code: RelationshipType or its code string (e.g. "SBS")

    Returns:
        The inverted RelationshipType (e.g. EAE)

    Raises:
        ValueError: If the code is not a relationship code
        KeyError: If the relationship has no directional opposite
    """
    return INVERSION[RelationshipType(code)]


def _negate(value):
    """Flip the sign of a numeric or numeric-string value."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return -value
    try:
        return -float(value)
    except (TypeError, ValueError):
        raise OffsetRangeError(f"cannot negate non-numeric offset value {value!r}")


class TemporalRelationship:
    """
    A timing constraint between the owning criterion and a referenced one.

    Properties:
        type:
            RelationshipType (accepts the code string at construction)

        reference:
            CriteriaReference to the other criterion

        offset:
            Signed Quantity, or None.
            Negative offsets mean "before", positive ones "after".

    NORMALIZATION (applied once, in __init__):
        An offset given as an Interval is folded into a single Quantity:
            Interval(high=5 d)   ->  Quantity(-5 d)
            Interval(low=5 d)    ->  Quantity(5 d)
            Interval()           ->  None
            Interval(low, high)  ->  OffsetRangeError
        The resolved Quantity is a copy, and gets type "PQ" if it has none.
        The caller's offset is never modified.
    """

    def __init__(self, type: Union[RelationshipType, str],
                 reference: Optional[CriteriaReference] = None,
                 offset: Optional[Union[Quantity, Interval]] = None):
        self._type = RelationshipType(type)
        self._reference = reference
        self._offset = self._normalize_offset(offset)

    @staticmethod
    def _normalize_offset(offset):
        if isinstance(offset, Interval):
            if offset.high is not None:
                if offset.low is not None:
                    raise OffsetRangeError(
                        f"cannot represent combined bound offset "
                        f"({offset.low.stringify()} .. {offset.high.stringify()})"
                    )
                resolved = copy.copy(offset.high)
                resolved.value = _negate(resolved.value)
                logger.debug("Folded upper-bound offset into %s", resolved.value)
            elif offset.low is not None:
                resolved = copy.copy(offset.low)
            else:
                resolved = None
        else:
            resolved = copy.copy(offset)

        if resolved is not None and resolved.type is None:
            resolved.type = PHYSICAL_QUANTITY
        return resolved

    @property
    def type(self) -> RelationshipType:
        return self._type

    @property
    def reference(self) -> Optional[CriteriaReference]:
        return self._reference

    @property
    def offset(self) -> Optional[Quantity]:
        return self._offset

    def inverted(self, reference: CriteriaReference) -> "TemporalRelationship":
        """
        Build the same constraint as seen from the referenced criterion.

        Args:
            reference: The criterion that becomes the new reference

        Returns:
            A TemporalRelationship with the inverted type and a copy of
            this offset
        """
        return TemporalRelationship(invert_relationship(self._type), reference,
                                    copy.copy(self._offset))

    def __eq__(self, other):
        if not isinstance(other, TemporalRelationship):
            return NotImplemented
        return (self._type, self._reference, self._offset) == (other._type, other._reference, other._offset)

    def __repr__(self):
        return (f"TemporalRelationship(type={self._type.value!r}, "
                f"reference={self._reference!r}, offset={self._offset!r})")


class SubsetType(Enum):
    """Result-subsetting operators."""

    COUNT = "COUNT"
    FIRST = "FIRST"
    SECOND = "SECOND"
    THIRD = "THIRD"
    FOURTH = "FOURTH"
    FIFTH = "FIFTH"
    RECENT = "RECENT"
    LAST = "LAST"


class SubsetSelector:
    """
    Narrows the results matched by a criterion.

    Properties:
        type: SubsetType (accepts the code string at construction)
        value: Interval of type "IVL_PQ", or None

    CANONICALIZATION (applied once, in __init__):
        A single Quantity is marked inclusive and widened into a
        zero-width Interval whose low and high are equal copies.
        An Interval is kept as given, but stored as a deep copy.
        Missing tags default to "IVL_PQ" (interval) and "PQ" (bounds).
    """

    def __init__(self, type: Union[SubsetType, str],
                 value: Optional[Union[Quantity, Interval]] = None):
        self._type = SubsetType(type)
        self._value = self._canonicalize(value)

    @staticmethod
    def _canonicalize(value):
        if isinstance(value, Quantity):
            value = copy.copy(value)
            value.inclusive = True
            value = Interval(PQ_INTERVAL, value, copy.copy(value), None)
            logger.debug("Widened subset point %s into an interval", value.low.value)

        elif value is not None:
            value = copy.deepcopy(value)

        if value is not None:
            if value.type is None:
                value.type = PQ_INTERVAL
            if value.low is not None and value.low.type is None:
                value.low.type = PHYSICAL_QUANTITY
            if value.high is not None and value.high.type is None:
                value.high.type = PHYSICAL_QUANTITY
        return value

    @property
    def type(self) -> SubsetType:
        return self._type

    @property
    def value(self) -> Optional[Interval]:
        return self._value

    def __eq__(self, other):
        if not isinstance(other, SubsetSelector):
            return NotImplemented
        return (self._type, self._value) == (other._type, other._value)

    def __repr__(self):
        return f"SubsetSelector(type={self._type.value!r}, value={self._value!r})"
