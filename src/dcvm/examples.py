"""
Example criteria builder for proof-of-concept documents.

Builds a small measure fragment: an encounter, a lab result taken within
a window before the encounter, and a diagnosis, with subset operators and
an inline code list.
"""
from typing import List

from dcvm.values import Quantity, Interval, EffectiveTime, CodedConcept, CriteriaReference
from dcvm.operators import TemporalRelationship, SubsetSelector
from dcvm.criteria import DataCriteria, UNION


def build_example_criteria(lookback_days: int = 30) -> List[DataCriteria]:
    encounter = DataCriteria(
        id="EncounterInpatient",
        title="Encounter, Performed: Inpatient",
        standard_category="encounter",
        qds_data_type="encounter",
        code_list_id="2.16.840.1.113883.3.666.5.307",
        type="encounters",
        status="performed",
        effective_time=EffectiveTime(
            low=Quantity(type="TS", value="20120101", inclusive=True),
            high=Quantity(type="TS", value="20121231", inclusive=True),
        ),
    )

    # Interval(high=...) is an "up to N days before" offset; it normalizes to -N
    hba1c = DataCriteria(
        id="LabResultHbA1c",
        title="Laboratory Test, Result: HbA1c",
        standard_category="laboratory_test",
        qds_data_type="laboratory_test",
        code_list_id="2.16.840.1.113883.3.464.1003.198.12.1013",
        type="laboratory_tests",
        status="result",
        value=Interval(
            type="IVL_PQ",
            low=Quantity(type="PQ", unit="%", value=9),
        ),
        temporal_references=[
            TemporalRelationship(
                "SBS",
                CriteriaReference("EncounterInpatient"),
                Interval(high=Quantity(unit="d", value=lookback_days, inclusive=True)),
            ),
        ],
        subset_operators=[
            SubsetSelector("RECENT"),
        ],
    )

    diagnosis = DataCriteria(
        id="DiagnosisDiabetes",
        title="Diagnosis, Active: Diabetes",
        standard_category="diagnosis_condition_problem",
        qds_data_type="diagnosis_active",
        code_list_id="2.16.840.1.113883.3.464.1003.103.12.1001",
        type="conditions",
        status="active",
        value=CodedConcept(type="CD", system="2.16.840.1.113883.6.96", code="55561003"),
        inline_code_list={"SNOMED-CT": ["44054006", "73211009"]},
        temporal_references=[
            TemporalRelationship("DURING", CriteriaReference("EncounterInpatient")),
        ],
        subset_operators=[
            SubsetSelector("COUNT", Quantity(value=2)),
        ],
    )

    grouping = DataCriteria(
        id="DiabetesEvidence",
        title="Diabetes evidence",
        children_criteria=["LabResultHbA1c", "DiagnosisDiabetes"],
        derivation_operator=UNION,
        type="derived",
    )

    return [encounter, hba1c, diagnosis, grouping]
