import pytest

from annotator_core.history import History, Record


def rec(value, actor="test"):
    return Record(data={"value": value}, actor=actor)


def test_push_undo_redo():
    history = History()
    history.push(rec("A"))
    history.push(rec("B"))
    current = rec("B")
    current = history.undo(current)
    assert current.data == {"value": "A"}
    current = history.redo(current)
    assert current.data == {"value": "B"}
    current = history.undo(current)
    assert current.data == {"value": "A"}


def test_undo_at_bottom_is_noop():
    history = History()
    current = rec("A")
    assert history.undo(current) is current
    history.push(rec("A"))
    assert history.undo(current) is current
    assert history.redo(current) is current
    assert not history.can_undo()
    assert not history.can_redo()


def test_undo_keeps_live_state_for_redo():
    history = History()
    history.push(rec("A"))
    history.push(rec("B"))
    current = history.undo(rec("B edited"))
    assert current.data == {"value": "A"}
    assert history.redo(current).data == {"value": "B edited"}


def test_push_truncates_redo_tail():
    history = History()
    for value in "ABC":
        history.push(rec(value))
    current = history.undo(rec("C"))
    assert history.can_redo()
    history.push(rec("D"))
    assert not history.can_redo()
    assert len(history) == 3
    assert history.undo(rec("D")).data == {"value": "B"}


def test_capacity_evicts_oldest():
    history = History(capacity=2)
    for value in "ABC":
        history.push(rec(value))
    assert len(history) == 2
    current = history.undo(rec("C"))
    assert current.data == {"value": "B"}
    assert history.undo(current) is current


def test_returned_records_are_copies():
    history = History()
    record_a = rec("A")
    history.push(record_a)
    history.push(rec("B"))
    current = history.undo(rec("B"))
    assert current == record_a
    assert current is not record_a
    assert current.data is not record_a.data


def test_invalid_capacity():
    with pytest.raises(ValueError):
        History(capacity=0)
