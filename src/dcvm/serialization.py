"""
Serialization helpers for data criteria value objects.

Provides JSON/YAML conversion via an intermediate dict representation.
The dict shape is the wire contract: keys whose attribute is unset are
omitted, never written as null.

Parsing treats a key that is absent, null or false as unset; defaults are
only introduced by the normalization in TemporalRelationship and
SubsetSelector.

False flags are asymmetric: "inclusive?": false and "derived?": false are
written, but read back as unset (None). Both mean "not inclusive" and
"not derived", so is_inclusive / is_derived survive a round trip while the
raw field does not. "negation" is always written and read back as a bool.

Documents keep criteria in list order: the id-keyed wrapper is written in
insertion order, never sorted.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

import yaml

from dcvm.values import (
    ModelError,
    Quantity,
    Interval,
    EffectiveTime,
    CodedConcept,
    CriteriaReference,
    Value,
    TIMESTAMP,
    PQ_INTERVAL,
    TIME_INTERVAL,
    CODED,
)
from dcvm.operators import TemporalRelationship, SubsetSelector
from dcvm.criteria import DataCriteria

logger = logging.getLogger(__name__)


class UnknownValueTypeError(ModelError):
    """Raised when a criterion value carries an unsupported type tag."""
    pass


def _get(d: Dict[str, Any], key: str) -> Any:
    value = d.get(key)
    if value is None or value is False:
        return None
    return value


def _compact(d: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in d.items() if v is not None}


def _is_interval_tag(tag: Any) -> bool:
    return isinstance(tag, str) and tag.startswith("IVL_")


def quantity_to_dict(q: Quantity) -> Dict[str, Any]:
    return _compact({
        "type": q.type,
        "unit": q.unit,
        "value": q.value,
        "inclusive?": q.inclusive,
        "derived?": q.derived,
        "expression": q.expression,
    })


def quantity_from_dict(d: Dict[str, Any]) -> Quantity:
    return Quantity(
        type=_get(d, "type"),
        unit=_get(d, "unit"),
        value=_get(d, "value"),
        inclusive=_get(d, "inclusive?"),
        derived=_get(d, "derived?"),
        expression=_get(d, "expression"),
    )


def interval_to_dict(i: Interval) -> Dict[str, Any]:
    d = _compact({"type": i.type})
    if i.low is not None:
        d["low"] = quantity_to_dict(i.low)
    if i.high is not None:
        d["high"] = quantity_to_dict(i.high)
    if i.width is not None:
        d["width"] = quantity_to_dict(i.width)
    return d


def _bounds_from_dict(d: Dict[str, Any]):
    low = _get(d, "low")
    high = _get(d, "high")
    width = _get(d, "width")
    return (
        quantity_from_dict(low) if low is not None else None,
        quantity_from_dict(high) if high is not None else None,
        quantity_from_dict(width) if width is not None else None,
    )


def interval_from_dict(d: Dict[str, Any]) -> Interval:
    low, high, width = _bounds_from_dict(d)
    return Interval(type=_get(d, "type"), low=low, high=high, width=width)


def effective_time_from_dict(d: Dict[str, Any]) -> Interval:
    """
    Parse an effective time.

    Untagged or "IVL_TS" input yields an EffectiveTime; any other interval
    tag is kept as a plain Interval so the tag survives a round trip.
    """
    tag = _get(d, "type")
    if tag is not None and tag != TIME_INTERVAL:
        return interval_from_dict(d)
    low, high, width = _bounds_from_dict(d)
    return EffectiveTime(low, high, width)


def coded_to_dict(c: CodedConcept) -> Dict[str, Any]:
    return _compact({"type": c.type, "system": c.system, "code": c.code})


def coded_from_dict(d: Dict[str, Any]) -> CodedConcept:
    return CodedConcept(type=_get(d, "type"), system=_get(d, "system"), code=_get(d, "code"))


def reference_to_id(r: CriteriaReference) -> str:
    """A reference is written as the bare id, not as an object."""
    return r.id


def reference_from_id(ref_id: str) -> CriteriaReference:
    return CriteriaReference(ref_id)


def value_to_dict(v: Value) -> Dict[str, Any]:
    if isinstance(v, CodedConcept):
        return coded_to_dict(v)
    if isinstance(v, Interval):
        return interval_to_dict(v)
    if isinstance(v, Quantity):
        return quantity_to_dict(v)
    raise TypeError(f"Unsupported value type: {type(v)}")


def value_from_dict(d: Dict[str, Any]) -> Value:
    """
    Parse a criterion's polymorphic value by its type tag.

    Tags:
        "TS"      -> Quantity
        "IVL_PQ"  -> Interval
        "CD"      -> CodedConcept

    Raises:
        UnknownValueTypeError: For any other tag (including a missing one)
    """
    tag = d.get("type")
    if tag == TIMESTAMP:
        return quantity_from_dict(d)
    if tag == PQ_INTERVAL:
        return interval_from_dict(d)
    if tag == CODED:
        return coded_from_dict(d)
    raise UnknownValueTypeError(f"Unknown value type [{tag}]")


def temporal_relationship_to_dict(r: TemporalRelationship) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": r.type.value}
    if r.reference is not None:
        d["reference"] = reference_to_id(r.reference)
    if r.offset is not None:
        d["offset"] = quantity_to_dict(r.offset)
    return d


def temporal_relationship_from_dict(d: Dict[str, Any]) -> TemporalRelationship:
    ref_id = _get(d, "reference")
    offset = _get(d, "offset")
    if offset is not None:
        # An interval-tagged offset is folded into a point by the constructor
        offset = interval_from_dict(offset) if _is_interval_tag(offset.get("type")) else quantity_from_dict(offset)
    return TemporalRelationship(
        d["type"],
        reference_from_id(ref_id) if ref_id is not None else None,
        offset,
    )


def subset_selector_to_dict(s: SubsetSelector) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": s.type.value}
    if s.value is not None:
        d["value"] = interval_to_dict(s.value)
    return d


def subset_selector_from_dict(d: Dict[str, Any]) -> SubsetSelector:
    value = _get(d, "value")
    if value is not None:
        tag = value.get("type")
        if tag is not None and not _is_interval_tag(tag):
            value = quantity_from_dict(value)
        else:
            value = interval_from_dict(value)
    return SubsetSelector(d["type"], value)


def _criteria_body_to_dict(c: DataCriteria) -> Dict[str, Any]:
    d = _compact({
        "title": c.title,
        "description": c.description,
        "standard_category": c.standard_category,
        "qds_data_type": c.qds_data_type,
        "code_list_id": c.code_list_id,
        "derivation_operator": c.derivation_operator,
        "property": c.property,
        "type": c.type,
        "status": c.status,
        "negation": c.negation,
    })
    if c.children_criteria:
        d["children_criteria"] = list(c.children_criteria)
    if c.value is not None:
        d["value"] = value_to_dict(c.value)
    if c.effective_time is not None:
        d["effective_time"] = interval_to_dict(c.effective_time)
    if c.inline_code_list is not None:
        d["inline_code_list"] = c.inline_code_list
    if c.temporal_references:
        d["temporal_references"] = [temporal_relationship_to_dict(r) for r in c.temporal_references]
    if c.subset_operators:
        d["subset_operators"] = [subset_selector_to_dict(s) for s in c.subset_operators]
    return d


def criteria_to_dict(c: DataCriteria) -> Dict[str, Any]:
    """Wrap a criterion's fields under its id: {id: {...}}."""
    return {str(c.id): _criteria_body_to_dict(c)}


def criteria_from_dict(criteria_id: str, d: Dict[str, Any]) -> DataCriteria:
    value = _get(d, "value")
    effective_time = _get(d, "effective_time")
    inline_code_list = _get(d, "inline_code_list")
    return DataCriteria(
        id=criteria_id,
        title=_get(d, "title"),
        description=_get(d, "description"),
        standard_category=_get(d, "standard_category"),
        qds_data_type=_get(d, "qds_data_type"),
        code_list_id=_get(d, "code_list_id"),
        children_criteria=list(d.get("children_criteria") or []),
        derivation_operator=_get(d, "derivation_operator"),
        property=_get(d, "property"),
        type=_get(d, "type"),
        status=_get(d, "status"),
        value=value_from_dict(value) if value is not None else None,
        effective_time=effective_time_from_dict(effective_time) if effective_time is not None else None,
        inline_code_list={str(k): v for k, v in inline_code_list.items()} if inline_code_list is not None else None,
        negation=bool(d.get("negation")),
        temporal_references=[temporal_relationship_from_dict(r) for r in d.get("temporal_references") or []],
        subset_operators=[subset_selector_from_dict(s) for s in d.get("subset_operators") or []],
    )


def criteria_list_to_dict(criteria: List[DataCriteria]) -> Dict[str, Any]:
    d: Dict[str, Any] = {}
    for c in criteria:
        d.update(criteria_to_dict(c))
    return d


def criteria_list_from_dict(d: Dict[str, Any]) -> List[DataCriteria]:
    criteria = [criteria_from_dict(criteria_id, body) for criteria_id, body in d.items()]
    logger.debug("Parsed %d data criteria", len(criteria))
    return criteria


def criteria_list_to_json(criteria: List[DataCriteria]) -> str:
    return json.dumps(criteria_list_to_dict(criteria))


def criteria_list_from_json(s: str) -> List[DataCriteria]:
    d = json.loads(s)
    return criteria_list_from_dict(d)


def criteria_list_to_yaml(criteria: List[DataCriteria]) -> str:
    return yaml.safe_dump(criteria_list_to_dict(criteria), sort_keys=False)


def criteria_list_from_yaml(s: str) -> List[DataCriteria]:
    d = yaml.safe_load(s)
    return criteria_list_from_dict(d)
