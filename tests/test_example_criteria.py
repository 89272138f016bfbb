"""
Test the proof-of-concept example criteria.

Validates that the example builder produces canonical operators and a
document that survives a JSON round-trip.
"""

from dcvm.examples import build_example_criteria
from dcvm.values import EffectiveTime, CodedConcept
from dcvm.operators import RelationshipType
from dcvm.serialization import criteria_list_to_json, criteria_list_from_json


def test_example_criteria_structure():
    criteria = build_example_criteria(lookback_days=30)
    by_id = {c.id: c for c in criteria}

    assert set(by_id) == {"EncounterInpatient", "LabResultHbA1c", "DiagnosisDiabetes", "DiabetesEvidence"}

    encounter = by_id["EncounterInpatient"]
    assert isinstance(encounter.effective_time, EffectiveTime)
    assert encounter.effective_time.stringify() == ">=20120101 and <=20121231"

    # Lookback window is folded into a negative offset
    lab = by_id["LabResultHbA1c"]
    before = lab.get_temporal_reference("EncounterInpatient")
    assert before.type == RelationshipType.SBS
    assert before.offset.value == -30
    assert before.offset.type == "PQ"
    assert lab.value.stringify() == ">9 %"

    diagnosis = by_id["DiagnosisDiabetes"]
    assert isinstance(diagnosis.value, CodedConcept)
    count = diagnosis.get_subset_operator("COUNT")
    assert count.value.stringify() == "=2"


def test_example_criteria_json_roundtrip():
    criteria = build_example_criteria()
    assert criteria_list_from_json(criteria_list_to_json(criteria)) == criteria
