"""
Data Criteria Record

The enclosing record that aggregates the value objects of one data
criterion: its identity, its category flags, its polymorphic value, its
effective time, and its temporal / subset operators.

This record holds no normalization of its own. Everything canonical about
its contents is established by the value objects it carries.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dcvm.values import Interval, Value
from dcvm.operators import TemporalRelationship, SubsetSelector


# Derivation operators for grouping criteria
XPRODUCT = "XPRODUCT"
UNION = "UNION"


@dataclass
class DataCriteria:
    """
    A structured description of one clinical fact referenced by a measure.

    Properties:
        id:
            Criterion identifier; the key of its JSON wrapper

        title, description:
            Human-readable labels

        standard_category, qds_data_type:
            Category flags (e.g. "diagnosis_condition_problem", "diagnosis_active")

        code_list_id:
            Value set the criterion matches against

        children_criteria:
            Ids of grouped criteria (for derived criteria)

        derivation_operator:
            XPRODUCT or UNION when this criterion groups its children

        property, type, status:
            Further classification strings

        value:
            Quantity | Interval | CodedConcept, or None

        effective_time:
            Interval (usually an EffectiveTime) bounding when the fact applies

        inline_code_list:
            Code system -> codes, when codes are given inline

        negation:
            True when the criterion asserts absence of the fact

        temporal_references:
            TemporalRelationships to other criteria

        subset_operators:
            SubsetSelectors applied to the matched results
    """

    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    standard_category: Optional[str] = None
    qds_data_type: Optional[str] = None
    code_list_id: Optional[str] = None
    children_criteria: List[str] = field(default_factory=list)
    derivation_operator: Optional[str] = None
    property: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    value: Optional[Value] = None
    effective_time: Optional[Interval] = None
    inline_code_list: Optional[Dict[str, List[str]]] = None
    negation: bool = False
    temporal_references: List[TemporalRelationship] = field(default_factory=list)
    subset_operators: List[SubsetSelector] = field(default_factory=list)

    def get_temporal_reference(self, reference_id: str) -> Optional[TemporalRelationship]:
        """
        Retrieve the first temporal relationship pointing at a criterion.

        Args:
            reference_id: Id of the referenced criterion

        Returns:
            TemporalRelationship or None if not found
        """
        for relationship in self.temporal_references:
            if relationship.reference is not None and relationship.reference.id == reference_id:
                return relationship
        return None

    def get_subset_operator(self, subset_type) -> Optional[SubsetSelector]:
        """Retrieve the first subset operator of the given type."""
        for operator in self.subset_operators:
            if operator.type == subset_type or operator.type.value == subset_type:
                return operator
        return None
