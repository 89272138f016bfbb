"""
Tests for the DataCriteria record.

These tests verify:
    - Minimal and full construction
    - The polymorphic value slot
    - Retrieval helpers
"""

from dcvm.values import Quantity, Interval, EffectiveTime, CodedConcept, CriteriaReference
from dcvm.operators import TemporalRelationship, SubsetSelector, SubsetType
from dcvm.criteria import DataCriteria, XPRODUCT, UNION


class TestDataCriteria:
    """Test DataCriteria objects."""

    def test_minimal(self):
        """Should create a criterion with just an id."""
        c = DataCriteria(id="Encounter")
        assert c.id == "Encounter"
        assert c.value is None
        assert c.effective_time is None
        assert c.negation is False
        assert c.children_criteria == []
        assert c.temporal_references == []
        assert c.subset_operators == []

    def test_value_is_polymorphic(self):
        """Quantity, Interval and CodedConcept all fit the value slot."""
        values = [
            Quantity(type="TS", value="20120101"),
            Interval(type="IVL_PQ", low=Quantity(value=9, unit="%")),
            CodedConcept("CD", "2.16.840.1.113883.6.96", "55561003"),
        ]
        for value in values:
            c = DataCriteria(id="X", value=value)
            assert c.value is value

    def test_coded_value_reads_like_quantity(self):
        c = DataCriteria(id="X", value=CodedConcept("CD", "sys", "123"))
        assert (c.value.value, c.value.unit, c.value.is_derived) == ("123", None, False)

    def test_effective_time(self):
        c = DataCriteria(id="X", effective_time=EffectiveTime(low=Quantity(type="TS", value="20120101")))
        assert c.effective_time.type == "IVL_TS"

    def test_grouping(self):
        c = DataCriteria(id="G", children_criteria=["A", "B"], derivation_operator=UNION)
        assert c.children_criteria == ["A", "B"]
        assert c.derivation_operator == "UNION"
        assert XPRODUCT == "XPRODUCT"

    def test_get_temporal_reference(self):
        during = TemporalRelationship("DURING", CriteriaReference("Encounter"))
        before = TemporalRelationship("SBS", CriteriaReference("Lab"), Quantity(value=-1))
        c = DataCriteria(id="X", temporal_references=[during, before])
        assert c.get_temporal_reference("Lab") is before
        assert c.get_temporal_reference("Encounter") is during
        assert c.get_temporal_reference("Missing") is None

    def test_get_subset_operator(self):
        first = SubsetSelector("FIRST", Quantity(value=1))
        c = DataCriteria(id="X", subset_operators=[first])
        assert c.get_subset_operator(SubsetType.FIRST) is first
        assert c.get_subset_operator("FIRST") is first
        assert c.get_subset_operator("LAST") is None
