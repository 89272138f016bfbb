"""
Tests for the round-trip demo's report printer.
"""

from dcvm.values import Quantity, CriteriaReference
from dcvm.operators import TemporalRelationship
from dcvm.criteria import DataCriteria
from dcvm.examples import build_example_criteria
from demo_roundtrip import print_criteria


def test_prints_example_criteria(capsys):
    print_criteria(build_example_criteria(lookback_days=30))
    out = capsys.readouterr().out
    assert "LabResultHbA1c" in out
    assert "SBS EncounterInpatient offset =-30 d" in out
    assert "COUNT =2" in out


def test_relationship_without_reference(capsys):
    """A relationship with no reference should print a placeholder."""
    c = DataCriteria(id="X", title="No reference", temporal_references=[
        TemporalRelationship("SBS", None, Quantity(value=-1, unit="d")),
        TemporalRelationship("DURING", CriteriaReference("Encounter")),
    ])
    print_criteria([c])
    out = capsys.readouterr().out
    assert "Temporal:     SBS - offset -1 d" in out
    assert "Temporal:     DURING Encounter offset -" in out
