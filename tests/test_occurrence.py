"""
test_occurrence.py - Unit tests for occurrence ranking.
"""
from analysis.occurrence import OccurrenceEntry, OccurrenceTable


def table_of(counts):
    table = OccurrenceTable()
    for label, count in counts.items():
        for _ in range(count):
            table.add(label)
    return table


def test_top_breaks_ties_by_label():
    table = table_of({"B": 5, "C": 3, "A": 5})
    assert [(e.label, e.count) for e in table.top(2)] == [("A", 5), ("B", 5)]


def test_top_pads_with_placeholders():
    top = table_of({"A": 5, "B": 5, "C": 3}).top(5)

    assert len(top) == 5
    assert [(e.label, e.count) for e in top[:3]] == [("A", 5), ("B", 5), ("C", 3)]
    assert top[3] == OccurrenceEntry()
    assert all(e.is_placeholder for e in top[3:])


def test_top_of_empty_table():
    top = OccurrenceTable().top(3)
    assert len(top) == 3
    assert all(e.is_placeholder for e in top)


def test_top_zero():
    assert table_of({"A": 1}).top(0) == []


def test_counts_and_totals():
    table = table_of({"x": 2, "y": 1})
    assert len(table) == 2
    assert "x" in table
    assert table.get("x").count == 2
    assert table.total == 3


def test_events_kept_only_when_requested(events):
    plain = OccurrenceTable()
    plain.add("a", events[0])
    assert plain.get("a").events == []

    tracked = OccurrenceTable(keep_events=True)
    tracked.add("a", events[0])
    tracked.add("a", events[1])
    assert tracked.get("a").events == [events[0], events[1]]
