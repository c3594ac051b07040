"""
Reconciler component unit tests.

- Settled status mapping and row removal on delete
- Failures park the list and the run carries on
- Store write failure aborts the run
- Handler re-entrancy (create, enable, disable, delete)
- Actor requests: validation, transitions, retry, bulk
"""

from __future__ import annotations

import pytest

from listkeeper.components.reconciler import (
    CreateListInput,
    Reconciler,
    UpdateListInput,
    request_create,
    request_delete_all,
    request_disable_all,
    request_enable_all,
    request_resync_all,
    request_retry,
    request_status,
    request_update,
)
from listkeeper.domain.entities import Domain, ListStatus, MailingList
from listkeeper.domain.errors import CommandError, StoreError

# --- Mocks ---


class MockRepo:
    def __init__(self) -> None:
        self.lists: dict[int, MailingList] = {}
        self.next_id = 1
        self.fail_reads = False
        self.fail_writes_for: set[int] = set()

    def add(self, **kwargs) -> MailingList:
        data = {
            "admin_id": 7,
            "domain_id": 1,
            "domain_name": "example.com",
            "admin_email": "owner@example.com",
            "admin_password": "pw",
        }
        data.update(kwargs)
        return self.save(MailingList(**data))

    def list_pending(self) -> list[MailingList]:
        if self.fail_reads:
            raise StoreError("disk I/O error")
        return [m for m in self.lists.values() if m.is_pending]

    def list_all(self, status: ListStatus | None = None) -> list[MailingList]:
        return [m for m in self.lists.values() if status is None or m.status == status]

    def get_by_id(self, list_id: int) -> MailingList | None:
        return self.lists.get(list_id)

    def get_by_name(self, domain_id: int, list_name: str) -> MailingList | None:
        for m in self.lists.values():
            if m.domain_id == domain_id and m.list_name == list_name:
                return m
        return None

    def save(self, mlist: MailingList) -> MailingList:
        if mlist.id is None:
            mlist = mlist.model_copy(update={"id": self.next_id})
            self.next_id += 1
        elif mlist.id in self.fail_writes_for:
            raise StoreError("database is locked")
        self.lists[mlist.id] = mlist
        return mlist

    def delete(self, list_id: int) -> None:
        if list_id in self.fail_writes_for:
            raise StoreError("database is locked")
        del self.lists[list_id]

    def bulk_set_status(self, new: ListStatus, where: ListStatus | None = None) -> int:
        count = 0
        for list_id, m in list(self.lists.items()):
            if where is None or m.status == where:
                self.lists[list_id] = m.model_copy(
                    update={"status": new, "last_error": None, "failed_status": None}
                )
                count += 1
        return count


class MockDomains:
    def __init__(self) -> None:
        self.domains = {"example.com": Domain(id=1, name="example.com", admin_id=7)}

    def get_by_id(self, domain_id: int) -> Domain | None:
        return next((d for d in self.domains.values() if d.id == domain_id), None)

    def get_by_name(self, name: str) -> Domain | None:
        return self.domains.get(name)

    def list_all(self) -> list[Domain]:
        return list(self.domains.values())

    def save(self, domain: Domain) -> Domain:
        self.domains[domain.name] = domain
        return domain


class MockListManager:
    def __init__(self) -> None:
        self.existing: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.fail_for: set[str] = set()

    def _call(self, op: str, list_name: str) -> None:
        self.calls.append((op, list_name))
        if list_name in self.fail_for:
            raise CommandError(["/usr/lib/mailman/bin/" + op], 1, "mailman said no")

    def exists(self, list_name: str) -> bool:
        return list_name in self.existing

    def create(self, list_name, hostname, domain_name, admin_email, admin_password) -> None:
        self._call("newlist", list_name)
        self.existing.add(list_name)
        self.created_hostname = hostname

    def configure(self, list_name, owner_email, hostname) -> None:
        self._call("config_list", list_name)
        self.configured = (owner_email, hostname)

    def change_password(self, list_name, password) -> None:
        self._call("change_pw", list_name)

    def remove(self, list_name) -> None:
        self._call("rmlist", list_name)
        self.existing.discard(list_name)


class MockDirs:
    def __init__(self, manager: MockListManager) -> None:
        self.manager = manager
        self.disabled: set[str] = set()

    def is_enabled(self, list_name: str) -> bool:
        return list_name in self.manager.existing

    def is_disabled(self, list_name: str) -> bool:
        return list_name in self.disabled

    def move_to_disabled(self, list_name: str) -> None:
        self.manager.existing.discard(list_name)
        self.disabled.add(list_name)

    def move_to_enabled(self, list_name: str) -> None:
        self.disabled.discard(list_name)
        self.manager.existing.add(list_name)


class MockTransport:
    def __init__(self) -> None:
        self.routed: set[str] = set()

    def add_list(self, mlist: MailingList) -> None:
        self.routed.add(mlist.list_name)

    def remove_list(self, mlist: MailingList) -> None:
        self.routed.discard(mlist.list_name)


class MockPublisher:
    def __init__(self) -> None:
        self.published: list[str] = []
        self.revoked: list[str] = []

    def hostname(self, mlist: MailingList) -> str:
        return mlist.hostname()

    def publish(self, mlist: MailingList) -> None:
        self.published.append(mlist.list_name)

    def revoke(self, mlist: MailingList) -> None:
        self.revoked.append(mlist.list_name)


class Harness:
    def __init__(self) -> None:
        self.repo = MockRepo()
        self.lists = MockListManager()
        self.dirs = MockDirs(self.lists)
        self.transport = MockTransport()
        self.publisher = MockPublisher()
        self.reconciler = Reconciler(
            self.repo, self.lists, self.dirs, self.transport, self.publisher
        )


@pytest.fixture
def h() -> Harness:
    return Harness()


# --- Loop ---


class TestRun:
    def test_nothing_pending(self, h: Harness) -> None:
        h.repo.add(list_name="foo", status="ok")
        report = h.reconciler.run()
        assert report.success
        assert report.processed == 0
        assert h.lists.calls == []

    def test_create_settles_ok(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo")

        report = h.reconciler.run()

        assert report.success
        assert report.outcomes[0].outcome == "ok"
        assert h.repo.get_by_id(mlist.id).status == "ok"
        assert h.lists.created_hostname == "lists.example.com"
        assert "foo" in h.transport.routed
        assert h.publisher.published == ["foo"]

    def test_update_settles_ok(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="update-pending", admin_email="new@example.com")
        h.lists.existing.add("foo")

        h.reconciler.run()

        assert h.repo.get_by_id(mlist.id).status == "ok"
        assert h.lists.configured == ("new@example.com", "example.com")
        assert [op for op, _ in h.lists.calls] == ["config_list", "change_pw"]

    def test_disable_settles_disabled(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="disable-pending")
        h.lists.existing.add("foo")

        report = h.reconciler.run()

        assert report.outcomes[0].outcome == "disabled"
        assert h.repo.get_by_id(mlist.id).status == "disabled"
        assert h.dirs.is_disabled("foo")
        assert h.publisher.revoked == ["foo"]

    def test_delete_removes_row(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="delete-pending")
        h.lists.existing.add("foo")
        h.transport.routed.add("foo")

        report = h.reconciler.run()

        assert report.outcomes[0].outcome == "deleted"
        assert h.repo.get_by_id(mlist.id) is None
        assert "foo" not in h.lists.existing
        assert "foo" not in h.transport.routed
        assert h.publisher.revoked == ["foo"]

    def test_failure_parks_and_continues(self, h: Harness) -> None:
        bad = h.repo.add(list_name="bad")
        good = h.repo.add(list_name="good")
        h.lists.fail_for.add("bad")

        report = h.reconciler.run()

        assert report.success
        assert report.processed == 2
        assert report.parked == 1
        assert report.succeeded == 1
        parked = h.repo.get_by_id(bad.id)
        assert parked.status == "error"
        assert parked.failed_status == "create-pending"
        assert "mailman said no" in parked.last_error
        assert h.repo.get_by_id(good.id).status == "ok"

    def test_unexpected_exception_parks(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo")

        def explode(_: MailingList) -> None:
            raise RuntimeError("unexpected")

        h.transport.add_list = explode  # type: ignore[method-assign]
        report = h.reconciler.run()

        assert report.success
        assert h.repo.get_by_id(mlist.id).last_error == "unexpected"

    def test_parked_list_not_picked_up_again(self, h: Harness) -> None:
        h.repo.add(list_name="foo")
        h.lists.fail_for.add("foo")
        h.reconciler.run()
        h.lists.calls.clear()

        report = h.reconciler.run()

        assert report.processed == 0
        assert h.lists.calls == []

    def test_read_failure_aborts(self, h: Harness) -> None:
        h.repo.fail_reads = True
        report = h.reconciler.run()
        assert not report.success
        assert report.aborted
        assert "disk I/O error" in report.error

    def test_status_write_failure_aborts(self, h: Harness) -> None:
        first = h.repo.add(list_name="first")
        h.repo.add(list_name="second")
        h.repo.fail_writes_for.add(first.id)

        report = h.reconciler.run()

        assert not report.success
        assert report.aborted
        assert report.processed == 0
        # Second list is not attempted after the abort
        assert ("newlist", "second") not in h.lists.calls

    def test_apply_rejects_settled_list(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="ok")
        with pytest.raises(ValueError):
            h.reconciler.apply(mlist)


# --- Handlers ---


class TestHandlers:
    def test_create_skips_existing_list(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo")
        h.lists.existing.add("foo")

        h.reconciler.create_list(mlist)

        assert ("newlist", "foo") not in h.lists.calls
        assert "foo" in h.transport.routed
        assert h.publisher.published == ["foo"]

    def test_enable_noop_when_not_disabled(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="enable-pending")
        h.lists.existing.add("foo")

        h.reconciler.enable_list(mlist)

        assert h.publisher.published == []

    def test_enable_moves_back_and_publishes(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="enable-pending")
        h.dirs.disabled.add("foo")

        h.reconciler.enable_list(mlist)

        assert not h.dirs.is_disabled("foo")
        assert h.dirs.is_enabled("foo")
        assert h.publisher.published == ["foo"]

    def test_disable_always_revokes(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="disable-pending")
        h.dirs.disabled.add("foo")

        h.reconciler.disable_list(mlist)

        assert h.publisher.revoked == ["foo"]

    def test_delete_disabled_list(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="delete-pending")
        h.dirs.disabled.add("foo")

        h.reconciler.delete_list(mlist)

        assert ("rmlist", "foo") in h.lists.calls
        assert not h.dirs.is_disabled("foo")
        assert "foo" not in h.lists.existing

    def test_delete_is_reentrant(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="delete-pending")

        h.reconciler.delete_list(mlist)

        assert ("rmlist", "foo") not in h.lists.calls
        assert h.publisher.revoked == ["foo"]


# --- Requests ---


class TestRequestCreate:
    def test_queues_create(self, h: Harness) -> None:
        out = request_create(
            CreateListInput("example.com", "foo", "owner@example.com", "pw"),
            repo=h.repo,
            domains=MockDomains(),
        )
        assert out.success
        saved = h.repo.get_by_id(out.list_id)
        assert saved.status == "create-pending"
        assert saved.admin_id == 7

    @pytest.mark.parametrize(
        "inp, code",
        [
            (CreateListInput("example.com", "-bad", "owner@example.com", "pw"), "INVALID_LIST_NAME"),
            (CreateListInput("example.com", "foo", "not-an-email", "pw"), "INVALID_EMAIL"),
            (CreateListInput("example.com", "foo", "owner@example.com", ""), "EMPTY_PASSWORD"),
            (CreateListInput("example.net", "foo", "owner@example.com", "pw"), "UNKNOWN_DOMAIN"),
        ],
    )
    def test_rejects_invalid_input(self, h: Harness, inp: CreateListInput, code: str) -> None:
        out = request_create(inp, repo=h.repo, domains=MockDomains())
        assert not out.success
        assert out.errors[0].code == code
        assert h.repo.lists == {}

    def test_rejects_duplicate(self, h: Harness) -> None:
        h.repo.add(list_name="foo", status="ok")
        out = request_create(
            CreateListInput("example.com", "foo", "owner@example.com", "pw"),
            repo=h.repo,
            domains=MockDomains(),
        )
        assert out.errors[0].code == "LIST_EXISTS"


class TestRequestTransitions:
    def test_update_changes_fields(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="ok")
        out = request_update(
            UpdateListInput(mlist.id, admin_email="new@example.com", admin_password="pw2"),
            repo=h.repo,
        )
        assert out.success
        saved = h.repo.get_by_id(mlist.id)
        assert saved.status == "update-pending"
        assert saved.admin_email == "new@example.com"
        assert saved.admin_password == "pw2"

    def test_update_blank_password_keeps_old(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="ok")
        request_update(UpdateListInput(mlist.id, admin_password=""), repo=h.repo)
        assert h.repo.get_by_id(mlist.id).admin_password == "pw"

    def test_update_unknown_list(self, h: Harness) -> None:
        out = request_update(UpdateListInput(99), repo=h.repo)
        assert out.errors[0].code == "NOT_FOUND"

    def test_invalid_transition(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="disabled")
        out = request_status(mlist.id, "disable-pending", repo=h.repo)
        assert out.errors[0].code == "INVALID_TRANSITION"
        assert h.repo.get_by_id(mlist.id).status == "disabled"

    def test_delete_parked_list(self, h: Harness) -> None:
        mlist = h.repo.add(
            list_name="foo", status="error", last_error="x", failed_status="create-pending"
        )
        out = request_status(mlist.id, "delete-pending", repo=h.repo)
        assert out.success
        saved = h.repo.get_by_id(mlist.id)
        assert saved.status == "delete-pending"
        assert saved.last_error is None

    def test_retry(self, h: Harness) -> None:
        mlist = h.repo.add(
            list_name="foo", status="error", last_error="x", failed_status="disable-pending"
        )
        out = request_retry(mlist.id, repo=h.repo)
        assert out.success
        assert h.repo.get_by_id(mlist.id).status == "disable-pending"

    def test_retry_not_parked(self, h: Harness) -> None:
        mlist = h.repo.add(list_name="foo", status="ok")
        assert request_retry(mlist.id, repo=h.repo).errors[0].code == "NOT_PARKED"


class TestBulkRequests:
    @pytest.fixture
    def populated(self, h: Harness) -> Harness:
        h.repo.add(list_name="a", status="ok")
        h.repo.add(list_name="b", status="ok")
        h.repo.add(list_name="c", status="disabled")
        h.repo.add(list_name="d", status="error", last_error="x", failed_status="create-pending")
        return h

    def _statuses(self, h: Harness) -> list[str]:
        return [m.status for m in h.repo.list_all()]

    def test_resync_all(self, populated: Harness) -> None:
        assert request_resync_all(populated.repo) == 2
        assert self._statuses(populated) == [
            "create-pending",
            "create-pending",
            "disabled",
            "error",
        ]

    def test_enable_all(self, populated: Harness) -> None:
        assert request_enable_all(populated.repo) == 1
        assert self._statuses(populated)[2] == "enable-pending"

    def test_disable_all(self, populated: Harness) -> None:
        assert request_disable_all(populated.repo) == 2

    def test_delete_all(self, populated: Harness) -> None:
        assert request_delete_all(populated.repo) == 4
        assert set(self._statuses(populated)) == {"delete-pending"}
