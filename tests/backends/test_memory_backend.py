from keypager import Orderings, PageNumber, PageOffset, PageToken, RangeBackend, SequenceBackend
from keypager.backends import required_count, start_offset
from tests.fakes.records import CASE_2, UUIDS, make_events


def _backend():
    backend = SequenceBackend(make_events(CASE_2))
    backend.apply_ordering(Orderings({"timestamp": "asc", "id": "asc"}))
    return backend


class TestSequenceBackend:
    def test_is_a_range_backend(self):
        assert isinstance(SequenceBackend([]), RangeBackend)

    def test_apply_ordering_sorts_stably(self):
        backend = SequenceBackend(make_events(CASE_2))
        backend.apply_ordering(Orderings({"timestamp": "desc"}))
        # Ties keep their input order.
        assert [e.id for e in backend.records] == [UUIDS[5], UUIDS[1], UUIDS[2], UUIDS[3], UUIDS[4], UUIDS[0]]

    def test_first_page(self):
        assert len(_backend().fetch_range(None, 2)) == 2

    def test_offset_and_page_number(self):
        backend = _backend()
        assert backend.fetch_range(PageOffset(4), 3) == backend.records[4:]
        assert backend.fetch_range(PageNumber(2), 2) == backend.records[2:4]

    def test_token_returns_the_eligible_tail(self):
        backend = _backend()
        token = PageToken(690944400, 2, 0)  # 01:00
        assert backend.fetch_range(token, 5) == backend.records[1:]


class TestFetchContract:
    def test_required_count(self):
        assert required_count(None, 10) == 10
        assert required_count(PageNumber(3), 10) == 10
        assert required_count(PageOffset(7), 10) == 10
        assert required_count(PageToken(1, 4, 0), 10) == 14

    def test_start_offset(self):
        assert start_offset(None, 10) == 0
        assert start_offset(PageNumber(3), 10) == 20
        assert start_offset(PageOffset(7), 10) == 7
        assert start_offset(PageToken(1, 4, 0), 10) == 0
