from __future__ import annotations

import pytest

from trace_hintlets.core.errors import ContractViolation
from trace_hintlets.core.models import EventRecord, EventRecordType
from trace_hintlets.core.normalizer import TimeNormalizer


def _collecting() -> tuple[TimeNormalizer, list[EventRecord]]:
    out: list[EventRecord] = []
    return TimeNormalizer(out.append), out


def test_first_non_start_record_sets_base_time(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 1, 10.0))
    normalizer.feed(raw_record(EventRecordType.PAINT, 2, 10.5))

    assert normalizer.base_time == 10000.0
    assert [r.time for r in out] == [0.0, 500.0]
    assert all(r.normalized for r in out)


def test_resource_starts_are_buffered_until_base_time(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 1, 5.0, identifier=1))
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 2, 4.0, identifier=2))

    assert out == []
    assert normalizer.base_time is None
    assert normalizer.has_pending

    normalizer.feed(raw_record(EventRecordType.LAYOUT, 3, 6.0))

    # Earliest buffered start wins, not the first one seen.
    assert normalizer.base_time == 4000.0
    assert [r.sequence for r in out] == [1, 2, 3]
    assert [r.time for r in out] == [1000.0, 0.0, 2000.0]
    assert normalizer.pending is None


def test_trigger_earlier_than_buffer_sets_base_time(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 1, 5.0, identifier=1))
    normalizer.feed(raw_record(EventRecordType.DOM_EVENT, 2, 4.5))

    assert normalizer.base_time == 4500.0
    assert [r.time for r in out] == [500.0, 0.0]


@pytest.mark.parametrize("starts", [[3.0], [7.0, 2.5, 9.0], [1.0, 1.0, 0.5, 2.0]])
def test_base_time_is_minimum_of_buffered_and_trigger(raw_record, starts) -> None:
    normalizer, out = _collecting()
    for i, t in enumerate(starts, start=1):
        normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, i, t, identifier=i))
    normalizer.feed(raw_record(EventRecordType.LAYOUT, len(starts) + 1, 2.75))

    assert normalizer.base_time == min([*starts, 2.75]) * 1000
    assert [r.sequence for r in out] == list(range(1, len(starts) + 2))


def test_base_time_never_changes(raw_record) -> None:
    normalizer, _ = _collecting()
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 1, 10.0))
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 2, 3.0))

    assert normalizer.base_time == 10000.0
    with pytest.raises(ContractViolation):
        normalizer.establish_base_time()


def test_replay_runs_page_transition_detection(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(
        raw_record(
            EventRecordType.RESOURCE_SEND_REQUEST,
            1,
            1.0,
            identifier=3,
            url="http://example.org/",
            isMainResource=True,
        )
    )
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 2, 1.2))

    assert [r.type for r in out] == [
        EventRecordType.TAB_CHANGE,
        EventRecordType.RESOURCE_SEND_REQUEST,
        EventRecordType.LAYOUT,
    ]
    assert out[0].data == {"url": "http://example.org/"}
    assert out[0].time == 0.0
    assert out[0].synthetic


def test_forced_base_time_from_buffer_only(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 1, 2.0, identifier=1))
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 2, 3.0, identifier=2))

    assert normalizer.establish_base_time() == 2000.0
    assert [r.time for r in out] == [0.0, 1000.0]


def test_establish_without_any_record_is_a_violation() -> None:
    normalizer, _ = _collecting()
    with pytest.raises(ContractViolation):
        normalizer.establish_base_time()


def test_normalize_time_before_base_time_is_a_violation() -> None:
    normalizer, _ = _collecting()
    with pytest.raises(ContractViolation):
        normalizer.normalize_time(1.0)


def test_forwarding_absolute_record_is_a_violation(raw_record) -> None:
    normalizer, _ = _collecting()
    with pytest.raises(ContractViolation):
        normalizer.forward(raw_record(EventRecordType.LAYOUT, 1, 1.0))


def test_double_normalization_is_a_violation(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 1, 1.0))
    with pytest.raises(ContractViolation):
        normalizer.normalize_record(out[0])


def test_non_increasing_sequence_is_a_violation(raw_record) -> None:
    normalizer, _ = _collecting()
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 5, 1.0))
    with pytest.raises(ContractViolation):
        normalizer.feed(raw_record(EventRecordType.LAYOUT, 5, 1.1))


def test_children_are_normalized(raw_record) -> None:
    normalizer, out = _collecting()
    child = EventRecord(type=EventRecordType.LAYOUT, time=2.5, sequence=1)
    parent = EventRecord(
        type=EventRecordType.DOM_EVENT,
        time=2.0,
        sequence=1,
        children=(child,),
        duration=1.5,
    )
    normalizer.feed(parent)

    assert out[0].time == 0.0
    assert out[0].children[0].time == 500.0
    assert out[0].children[0].normalized
    assert out[0].duration == 1.5


def test_unknown_kinds_pass_through(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(9999, 1, 1.0, payload="x"))

    assert out[0].type == 9999
    assert out[0].data == {"payload": "x"}
    assert out[0].time == 0.0


def test_output_ordered_by_time_then_sequence(raw_record) -> None:
    normalizer, out = _collecting()
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 1, 1.0, identifier=1))
    normalizer.feed(raw_record(EventRecordType.RESOURCE_SEND_REQUEST, 2, 1.0, identifier=2))
    normalizer.feed(raw_record(EventRecordType.LAYOUT, 3, 1.0))
    normalizer.feed(raw_record(EventRecordType.PAINT, 4, 1.25))

    keys = [(r.time, r.sequence) for r in out]
    assert keys == sorted(keys)
