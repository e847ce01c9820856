"""Protocol-level tests run against every database implementation."""

from __future__ import annotations

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from interval_attestations.containers import AggregateIntervalAttestation
from interval_attestations.storage import AttestationDatabase
from interval_attestations.types import (
    DuplicateSignatureError,
    InvalidRangeError,
    RecordValidationError,
    StoreUnavailableError,
    ValidationErrorKind,
)
from interval_attestations.validation import INT64_MAX
from tests.interval_attestations.helpers import BACKENDS, make_attestation, open_backend


class TestInsertAndGet:
    """Tests for insert and point lookups."""

    def test_insert_then_get_returns_identical_record(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """A stored aggregate is returned field for field."""
        db.insert(attestation)

        assert db.get_by_signature("A") == attestation

    def test_get_missing_returns_none(self, db: AttestationDatabase) -> None:
        """A miss is None, not an error."""
        assert db.get_by_signature("missing") is None

    def test_has_signature(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """has_signature reflects stored state."""
        assert not db.has_signature("A")
        db.insert(attestation)
        assert db.has_signature("A")

    def test_degenerate_record_is_accepted(self, db: AttestationDatabase) -> None:
        """Zero validators is structurally valid and stored."""
        record = make_attestation("empty", num_validators=0)
        db.insert(record)

        stored = db.get_by_signature("empty")
        assert stored is not None
        assert stored.is_degenerate

    def test_whitespace_signature_is_stored(self, db: AttestationDatabase) -> None:
        """A whitespace-only signature is an ordinary opaque key."""
        db.insert(make_attestation(" ", slot=3))

        assert db.get_by_signature(" ") == make_attestation(" ", slot=3)
        assert db.get_by_signature("") is None

    def test_signatures_are_case_sensitive(self, db: AttestationDatabase) -> None:
        """Signatures are opaque strings compared exactly."""
        db.insert(make_attestation("abc"))
        db.insert(make_attestation("ABC"))

        assert db.count() == 2


class TestUniqueness:
    """Tests for primary key enforcement."""

    def test_duplicate_signature_is_rejected(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """Re-inserting a signature fails even when every other field differs."""
        db.insert(attestation)

        with pytest.raises(DuplicateSignatureError) as exc_info:
            db.insert(
                attestation.copy(slot_number=99, value=1, interval_size=1, num_validators=1)
            )

        assert exc_info.value.signature == "A"
        assert db.count() == 1
        assert db.get_by_signature("A") == attestation

    def test_identical_reinsert_is_also_rejected(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """There is no upsert, not even for identical content."""
        db.insert(attestation)

        with pytest.raises(DuplicateSignatureError):
            db.insert(attestation)

    def test_duplicate_does_not_touch_slot_index(self, db: AttestationDatabase) -> None:
        """A rejected insert leaves slot scans unchanged."""
        db.insert(make_attestation("A", slot=1))

        with pytest.raises(DuplicateSignatureError):
            db.insert(make_attestation("A", slot=2))

        assert db.list_by_slot(2) == []
        assert [r.aggregate_signature for r in db.list_by_slot(1)] == ["A"]


class TestValidationOnInsert:
    """Tests for validation before persistence."""

    @pytest.mark.parametrize(
        "record, kind",
        [
            (make_attestation(""), ValidationErrorKind.EMPTY_SIGNATURE),
            (make_attestation("A", interval_size=0), ValidationErrorKind.NON_POSITIVE_INTERVAL),
            (make_attestation("A", num_validators=-1), ValidationErrorKind.NEGATIVE_VALIDATOR_COUNT),
            (make_attestation("A", slot=-1), ValidationErrorKind.NEGATIVE_SLOT),
            (make_attestation("A", value=2**63), ValidationErrorKind.INTEGER_OVERFLOW),
        ],
    )
    def test_invalid_record_is_never_stored(
        self,
        db: AttestationDatabase,
        record: AggregateIntervalAttestation,
        kind: ValidationErrorKind,
    ) -> None:
        """Rejected records leave no trace in the store."""
        with pytest.raises(RecordValidationError) as exc_info:
            db.insert(record)

        assert exc_info.value.kind is kind
        assert db.count() == 0
        assert db.list_all() == []


class TestSlotScans:
    """Tests for slot and range scans."""

    def test_list_by_slot_returns_exact_matches(self, db: AttestationDatabase) -> None:
        """Only aggregates at the requested slot are returned."""
        for index, slot in enumerate([7, 3, 7, 8, 7]):
            db.insert(make_attestation(index, slot=slot))

        result = db.list_by_slot(7)

        assert {r.slot_number for r in result} == {7}
        assert len(result) == 3

    def test_list_by_slot_empty_when_no_match(self, db: AttestationDatabase) -> None:
        """A slot with no aggregates yields an empty list."""
        db.insert(make_attestation(0, slot=6))

        assert db.list_by_slot(7) == []

    def test_list_by_slot_keeps_insertion_order(self, db: AttestationDatabase) -> None:
        """Within a slot, aggregates come back in insertion order."""
        for name in ["z", "a", "m"]:
            db.insert(make_attestation(name, slot=4))

        assert [r.aggregate_signature for r in db.list_by_slot(4)] == ["z", "a", "m"]

    def test_list_by_slot_is_restartable(self, db: AttestationDatabase) -> None:
        """Results are materialized: later inserts do not leak into them."""
        db.insert(make_attestation("a", slot=4))
        first = db.list_by_slot(4)
        db.insert(make_attestation("b", slot=4))

        assert len(first) == 1
        assert len(db.list_by_slot(4)) == 2

    def test_range_is_inclusive(self, db: AttestationDatabase) -> None:
        """Both range bounds are included."""
        for slot in range(10):
            db.insert(make_attestation(slot, slot=slot))

        assert [r.slot_number for r in db.list_by_slot_range(3, 6)] == [3, 4, 5, 6]

    def test_single_slot_range(self, db: AttestationDatabase) -> None:
        """from_slot == to_slot behaves like list_by_slot."""
        db.insert(make_attestation("a", slot=5))
        db.insert(make_attestation("b", slot=6))

        assert db.list_by_slot_range(5, 5) == db.list_by_slot(5)

    def test_range_orders_by_slot_then_insertion(self, db: AttestationDatabase) -> None:
        """Range results are sorted by slot, ties in insertion order."""
        db.insert(make_attestation("late", slot=9))
        db.insert(make_attestation("x", slot=2))
        db.insert(make_attestation("y", slot=9))
        db.insert(make_attestation("w", slot=2))

        result = db.list_by_slot_range(0, 10)

        assert [r.aggregate_signature for r in result] == ["x", "w", "late", "y"]

    def test_inverted_range_is_rejected(self, db: AttestationDatabase) -> None:
        """from_slot > to_slot raises InvalidRangeError."""
        with pytest.raises(InvalidRangeError) as exc_info:
            db.list_by_slot_range(5, 3)

        assert (exc_info.value.from_slot, exc_info.value.to_slot) == (5, 3)

    def test_empty_range(self, db: AttestationDatabase) -> None:
        """A valid range with no aggregates is empty, not an error."""
        db.insert(make_attestation("a", slot=1))

        assert db.list_by_slot_range(2, 100) == []

    def test_list_all_and_count(self, db: AttestationDatabase) -> None:
        """list_all returns everything in slot order."""
        db.insert(make_attestation("b", slot=2))
        db.insert(make_attestation("a", slot=1))

        assert [r.aggregate_signature for r in db.list_all()] == ["a", "b"]
        assert db.count() == 2


class TestOutOfColumnSlots:
    """Tests for slot arguments beyond the signed 64-bit column domain."""

    def test_list_by_slot_past_domain_is_empty(self, db: AttestationDatabase) -> None:
        """No aggregate can sit at a slot the columns cannot hold."""
        db.insert(make_attestation("max", slot=INT64_MAX))

        assert db.list_by_slot(2**63) == []
        assert db.list_by_slot(-(2**64)) == []

    def test_range_past_domain_is_clamped(self, db: AttestationDatabase) -> None:
        """Oversized bounds still match every stored aggregate inside them."""
        db.insert(make_attestation("low", slot=0))
        db.insert(make_attestation("max", slot=INT64_MAX))

        result = db.list_by_slot_range(0, 2**64)

        assert [r.aggregate_signature for r in result] == ["low", "max"]
        assert db.list_by_slot_range(-(2**64), 0) == [make_attestation("low", slot=0)]
        assert db.list_by_slot_range(2**63, 2**64) == []

    def test_prune_past_domain_removes_everything(self, db: AttestationDatabase) -> None:
        """Pruning below an oversized slot removes every aggregate."""
        db.insert(make_attestation("low", slot=0))
        db.insert(make_attestation("max", slot=INT64_MAX))

        assert db.prune_before_slot(2**64) == 2
        assert db.count() == 0

    def test_closed_store_still_unavailable(self, db: AttestationDatabase) -> None:
        """Out-of-domain queries on a closed store report the closure."""
        db.close()

        with pytest.raises(StoreUnavailableError):
            db.list_by_slot(2**63)


class TestPruning:
    """Tests for the retention primitive."""

    def test_prune_removes_only_older_slots(self, db: AttestationDatabase) -> None:
        """Aggregates strictly below the cut are removed; the rest survive intact."""
        for index, slot in enumerate([1, 2, 2, 3, 5]):
            db.insert(make_attestation(index, slot=slot))

        removed = db.prune_before_slot(3)

        assert removed == 3
        assert [r.slot_number for r in db.list_all()] == [3, 5]
        assert db.list_by_slot(2) == []
        assert not db.has_signature(make_attestation(0).aggregate_signature)

    def test_prune_nothing(self, db: AttestationDatabase) -> None:
        """Pruning below every stored slot removes nothing."""
        db.insert(make_attestation("a", slot=4))

        assert db.prune_before_slot(4) == 0
        assert db.count() == 1

    def test_pruned_signature_can_be_recorded_again(self, db: AttestationDatabase) -> None:
        """After deletion the signature is free again."""
        db.insert(make_attestation("a", slot=1))
        db.prune_before_slot(2)

        db.insert(make_attestation("a", slot=1))
        assert db.count() == 1


class TestScenario:
    """End-to-end scenario on the reference aggregate."""

    def test_reference_scenario(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """Insert, look up, reject duplicate, scan a surrounding range."""
        db.insert(attestation)

        assert db.get_by_signature("A") == attestation

        with pytest.raises(DuplicateSignatureError):
            db.insert(make_attestation("A", slot=0, value=0, interval_size=1, num_validators=0))

        assert db.list_by_slot_range(8, 12) == [attestation]


class TestLifecycle:
    """Tests for closing the store."""

    def test_operations_after_close_are_unavailable(
        self, db: AttestationDatabase, attestation: AggregateIntervalAttestation
    ) -> None:
        """A closed store reports StoreUnavailableError instead of crashing."""
        db.close()

        with pytest.raises(StoreUnavailableError) as exc_info:
            db.insert(attestation)
        assert exc_info.value.operation == "insert"

        with pytest.raises(StoreUnavailableError):
            db.get_by_signature("A")
        with pytest.raises(StoreUnavailableError):
            db.list_by_slot(10)

    def test_close_is_idempotent(self, db: AttestationDatabase) -> None:
        """Closing twice is harmless."""
        db.close()
        db.close()


class TestProperties:
    """Property-based tests over arbitrary insertion orders."""

    @pytest.mark.parametrize("backend", BACKENDS)
    @settings(max_examples=50)
    @given(
        slots=st.lists(st.integers(min_value=0, max_value=20), max_size=30),
        data=st.data(),
    )
    def test_distinct_records_are_all_retrievable(
        self,
        backend: str,
        slots: list[int],
        data: st.DataObject,
    ) -> None:
        """Any insertion order leaves every record reachable by signature and slot."""
        records = [make_attestation(index, slot=slot) for index, slot in enumerate(slots)]
        order = data.draw(st.permutations(records))

        db = open_backend(backend)
        try:
            for record in order:
                db.insert(record)

            assert db.count() == len(records)
            for record in records:
                assert db.get_by_signature(record.aggregate_signature) == record
                assert record in db.list_by_slot(record.slot_number)

            for slot in set(slots):
                expected = {r.aggregate_signature for r in records if r.slot_number == slot}
                assert {r.aggregate_signature for r in db.list_by_slot(slot)} == expected
        finally:
            db.close()
