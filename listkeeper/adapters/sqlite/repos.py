import sqlite3
from typing import Any

from listkeeper.domain.entities import (
    PENDING_STATUSES,
    DnsRecord,
    Domain,
    ListStatus,
    MailingList,
)
from listkeeper.domain.errors import StoreError


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _connect(self) -> sqlite3.Connection:
        try:
            return self._get_conn()
        except sqlite3.Error as e:
            raise StoreError(f"Unable to open {self.db_path}: {e}") from e

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> list[dict[str, Any]]:
        conn = self._connect()
        try:
            return conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def _write(self, sql: str, params: tuple[Any, ...] = ()) -> sqlite3.Cursor:
        conn = self._connect()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()


class SQLiteDomainRepo(_SQLiteRepo):
    def _row_to_domain(self, row: dict[str, Any]) -> Domain:
        return Domain(id=row["id"], name=row["name"], admin_id=row["admin_id"], status=row["status"])

    def get_by_id(self, domain_id: int) -> Domain | None:
        rows = self._query("SELECT * FROM domains WHERE id = ?", (domain_id,))
        return self._row_to_domain(rows[0]) if rows else None

    def get_by_name(self, name: str) -> Domain | None:
        rows = self._query("SELECT * FROM domains WHERE name = ?", (name,))
        return self._row_to_domain(rows[0]) if rows else None

    def list_all(self) -> list[Domain]:
        return [self._row_to_domain(r) for r in self._query("SELECT * FROM domains ORDER BY id")]

    def save(self, domain: Domain) -> Domain:
        if domain.id is None:
            cursor = self._write(
                "INSERT INTO domains (name, admin_id, status) VALUES (?, ?, ?)",
                (domain.name, domain.admin_id, domain.status),
            )
            return domain.model_copy(update={"id": cursor.lastrowid})
        self._write(
            "UPDATE domains SET name = ?, admin_id = ?, status = ? WHERE id = ?",
            (domain.name, domain.admin_id, domain.status, domain.id),
        )
        return domain


class SQLiteMailingListRepo(_SQLiteRepo):
    _SELECT = """
        SELECT ml.*, d.name AS domain_name
        FROM mailing_lists AS ml
        INNER JOIN domains AS d ON d.id = ml.domain_id
    """

    def _row_to_list(self, row: dict[str, Any]) -> MailingList:
        try:
            return MailingList(
                id=row["id"],
                admin_id=row["admin_id"],
                domain_id=row["domain_id"],
                domain_name=row["domain_name"],
                list_name=row["list_name"],
                admin_email=row["admin_email"],
                admin_password=row["admin_password"],
                status=row["status"],
                last_error=row["last_error"],
                failed_status=row["failed_status"],
            )
        except (KeyError, ValueError) as e:
            raise StoreError(f"Unexpected mailing list row shape: {e}") from e

    def list_pending(self) -> list[MailingList]:
        placeholders = ", ".join("?" for _ in PENDING_STATUSES)
        rows = self._query(
            f"{self._SELECT} WHERE ml.status IN ({placeholders}) ORDER BY ml.id",
            tuple(PENDING_STATUSES),
        )
        return [self._row_to_list(r) for r in rows]

    def list_all(self, status: ListStatus | None = None) -> list[MailingList]:
        if status is None:
            rows = self._query(f"{self._SELECT} ORDER BY ml.id")
        else:
            rows = self._query(f"{self._SELECT} WHERE ml.status = ? ORDER BY ml.id", (status,))
        return [self._row_to_list(r) for r in rows]

    def get_by_id(self, list_id: int) -> MailingList | None:
        rows = self._query(f"{self._SELECT} WHERE ml.id = ?", (list_id,))
        return self._row_to_list(rows[0]) if rows else None

    def get_by_name(self, domain_id: int, list_name: str) -> MailingList | None:
        rows = self._query(
            f"{self._SELECT} WHERE ml.domain_id = ? AND ml.list_name = ?", (domain_id, list_name)
        )
        return self._row_to_list(rows[0]) if rows else None

    def save(self, mlist: MailingList) -> MailingList:
        if mlist.id is None:
            cursor = self._write(
                """
                INSERT INTO mailing_lists (
                    admin_id, domain_id, list_name, admin_email, admin_password,
                    status, last_error, failed_status
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    mlist.admin_id,
                    mlist.domain_id,
                    mlist.list_name,
                    mlist.admin_email,
                    mlist.admin_password,
                    mlist.status,
                    mlist.last_error,
                    mlist.failed_status,
                ),
            )
            return mlist.model_copy(update={"id": cursor.lastrowid})

        cursor = self._write(
            """
            UPDATE mailing_lists SET
                admin_email = ?, admin_password = ?,
                status = ?, last_error = ?, failed_status = ?
            WHERE id = ?
        """,
            (
                mlist.admin_email,
                mlist.admin_password,
                mlist.status,
                mlist.last_error,
                mlist.failed_status,
                mlist.id,
            ),
        )
        if cursor.rowcount != 1:
            raise StoreError(f"Mailing list {mlist.id} not found")
        return mlist

    def delete(self, list_id: int) -> None:
        cursor = self._write("DELETE FROM mailing_lists WHERE id = ?", (list_id,))
        if cursor.rowcount != 1:
            raise StoreError(f"Mailing list {list_id} not found")

    def bulk_set_status(self, new: ListStatus, where: ListStatus | None = None) -> int:
        if where is None:
            cursor = self._write(
                "UPDATE mailing_lists SET status = ?, last_error = NULL, failed_status = NULL",
                (new,),
            )
        else:
            cursor = self._write(
                "UPDATE mailing_lists SET status = ?, last_error = NULL, failed_status = NULL "
                "WHERE status = ?",
                (new, where),
            )
        return cursor.rowcount


class SQLiteDnsRecordRepo(_SQLiteRepo):
    def _row_to_record(self, row: dict[str, Any]) -> DnsRecord:
        return DnsRecord(
            id=row["id"],
            domain_id=row["domain_id"],
            alias_id=row["alias_id"],
            name=row["name"],
            record_class=row["record_class"],
            record_type=row["record_type"],
            text=row["text"],
            owner=row["owner"],
        )

    def list_for_domain(self, domain_id: int, owner: str | None = None) -> list[DnsRecord]:
        if owner is None:
            rows = self._query("SELECT * FROM dns_records WHERE domain_id = ? ORDER BY id", (domain_id,))
        else:
            rows = self._query(
                "SELECT * FROM dns_records WHERE domain_id = ? AND owner = ? ORDER BY id",
                (domain_id, owner),
            )
        return [self._row_to_record(r) for r in rows]

    def add(self, record: DnsRecord) -> DnsRecord:
        conn = self._connect()
        try:
            if record.owner is not None:
                conn.execute("INSERT OR IGNORE INTO dns_owners (name) VALUES (?)", (record.owner,))
            cursor = conn.execute(
                """
                INSERT INTO dns_records (
                    domain_id, alias_id, name, record_class, record_type, text, owner
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    record.domain_id,
                    record.alias_id,
                    record.name,
                    record.record_class,
                    record.record_type,
                    record.text,
                    record.owner,
                ),
            )
            conn.commit()
            return record.model_copy(update={"id": cursor.lastrowid})
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def remove_owned(self, domain_id: int, owner: str) -> int:
        conn = self._connect()
        try:
            # Explicit unit of work: both statements commit together or not at all
            conn.execute("BEGIN")
            cursor = conn.execute(
                "DELETE FROM dns_records WHERE domain_id = ? AND owner = ?", (domain_id, owner)
            )
            removed = cursor.rowcount
            conn.execute(
                "UPDATE domains SET status = ? WHERE id = ? AND status = ?",
                ("change-pending", domain_id, "ok"),
            )
            conn.commit()
            return removed
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreError(str(e)) from e
        finally:
            conn.close()
