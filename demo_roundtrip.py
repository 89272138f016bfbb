"""
Demo: Build the example criteria, show their canonical forms and export them.
"""

from dcvm.examples import build_example_criteria
from dcvm.serialization import criteria_list_to_json, criteria_list_to_yaml, criteria_list_from_json
from dcvm.values import CodedConcept, ConversionError


def print_criteria(criteria):
    """Pretty-print the value objects of each criterion."""
    print()
    print("=" * 70)
    print("DATA CRITERIA")
    print("=" * 70)
    for c in criteria:
        print()
        print(f"{c.id}: {c.title}")
        if c.value is not None:
            if isinstance(c.value, CodedConcept):
                print(f"  Value:        {c.value.code} ({c.value.system})")
            else:
                print(f"  Value:        {c.value.stringify()}")
        if c.effective_time is not None:
            try:
                print(f"  Effective:    {c.effective_time.stringify()}")
            except ConversionError as e:
                print(f"  Effective:    <{e}>")
        for r in c.temporal_references:
            offset = r.offset.stringify() if r.offset is not None else "-"
            reference = r.reference.id if r.reference is not None else "-"
            print(f"  Temporal:     {r.type.value} {reference} offset {offset}")
        for s in c.subset_operators:
            value = s.value.stringify() if s.value is not None else "-"
            print(f"  Subset:       {s.type.value} {value}")
        if c.children_criteria:
            print(f"  Children:     {c.derivation_operator} {c.children_criteria}")
    print()


if __name__ == "__main__":
    criteria = build_example_criteria(lookback_days=90)

    print_criteria(criteria)

    json_str = criteria_list_to_json(criteria)
    restored = criteria_list_from_json(json_str)
    print(f"JSON round-trip lossless: {restored == criteria}")

    yaml_str = criteria_list_to_yaml(criteria)
    with open("example_criteria_output.yaml", "w") as f:
        f.write(yaml_str)
    print(f"✅ Criteria exported to example_criteria_output.yaml")
