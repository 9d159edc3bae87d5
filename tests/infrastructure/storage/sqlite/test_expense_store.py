"""Tests for the SQLite expense, user and reference stores."""

from datetime import UTC, datetime, timedelta

import aiosqlite
import pytest

from src.core.entities import Expense, ExpenseStatus, ReviewDecision
from src.core.exceptions import DatabaseError
from src.core.services import expense_workflow as workflow

NOW = datetime(2024, 5, 1, 9, 30, tzinfo=UTC)


async def _add_submitted(expense_store, expense: Expense) -> Expense:
    saved = await expense_store.add(expense)
    submitted = workflow.submit_expense(saved, now=NOW)
    assert await expense_store.apply_transition(saved, submitted)
    return submitted


class TestAddAndGet:
    """Tests for SQLiteExpenseStore.add()/get()."""

    async def test_add_assigns_id(self, expense_store, sample_expense):
        saved = await expense_store.add(sample_expense)
        assert saved.id is not None
        assert saved.id > 0

    async def test_round_trip(self, expense_store, sample_expense):
        saved = await expense_store.add(sample_expense)
        loaded = await expense_store.get(saved.id)

        assert loaded == saved
        assert loaded.created_at == sample_expense.created_at

    async def test_get_missing(self, expense_store):
        assert await expense_store.get(999) is None
        assert await expense_store.get_view(999) is None

    async def test_view_joins_names(self, expense_store, sample_expense):
        saved = await expense_store.add(sample_expense)
        view = await expense_store.get_view(saved.id)

        assert view.user_name == "Alice Example"
        assert view.category_name == "Travel"
        assert view.reviewer_name is None

    async def test_unknown_user_rejected(self, expense_store, sample_expense):
        with pytest.raises(DatabaseError):
            await expense_store.add(sample_expense.model_copy(update={"user_id": 99}))

    async def test_schema_rejects_inconsistent_status(self, expense_store, sample_expense):
        broken = sample_expense.model_copy(update={"status": ExpenseStatus.APPROVED})
        with pytest.raises(DatabaseError):
            await expense_store.add(broken)

    async def test_schema_rejects_non_positive_amount(self, expense_store, sample_expense):
        with pytest.raises(DatabaseError):
            await expense_store.add(sample_expense.model_copy(update={"amount_minor": 0}))

    async def test_inconsistent_row_is_a_database_error(self, expense_store, pool, sample_expense):
        saved = await expense_store.add(sample_expense)
        async with pool.acquire() as conn:
            await conn.execute("PRAGMA ignore_check_constraints = ON")
            # Approved without reviewer fields
            await conn.execute("UPDATE expenses SET status_id = 3 WHERE id = ?", (saved.id,))
            await conn.commit()
            await conn.execute("PRAGMA ignore_check_constraints = OFF")

        with pytest.raises(DatabaseError, match="inconsistent") as exc_info:
            await expense_store.get(saved.id)
        assert exc_info.value.code == "DATABASE_ERROR"

        with pytest.raises(DatabaseError):
            await expense_store.list_views()


class TestListViews:
    async def test_newest_first_by_default(self, expense_store, sample_expense):
        older = await expense_store.add(sample_expense)
        newer = await expense_store.add(
            sample_expense.model_copy(update={"created_at": NOW + timedelta(minutes=5)})
        )

        views = await expense_store.list_views()
        assert [v.expense.id for v in views] == [newer.id, older.id]

        views = await expense_store.list_views(newest_first=False)
        assert [v.expense.id for v in views] == [older.id, newer.id]

    async def test_same_timestamp_ordered_by_id(self, expense_store, sample_expense):
        first = await expense_store.add(sample_expense)
        second = await expense_store.add(sample_expense)

        views = await expense_store.list_views()
        assert [v.expense.id for v in views] == [second.id, first.id]

    async def test_filters(self, expense_store, sample_expense):
        draft = await expense_store.add(sample_expense)
        submitted = await _add_submitted(expense_store, sample_expense)
        bobs = await expense_store.add(sample_expense.model_copy(update={"user_id": 2}))

        by_status = await expense_store.list_views(status=ExpenseStatus.SUBMITTED)
        assert [v.expense.id for v in by_status] == [submitted.id]

        by_user = await expense_store.list_views(user_id=2)
        assert [v.expense.id for v in by_user] == [bobs.id]

        both = await expense_store.list_views(status=ExpenseStatus.DRAFT, user_id=1)
        assert [v.expense.id for v in both] == [draft.id]


class TestApplyTransition:
    """Tests for the compare-and-set status update."""

    async def test_submit_then_approve(self, expense_store, user_store, sample_expense):
        submitted = await _add_submitted(expense_store, sample_expense)
        bob = await user_store.get(2)
        approved = workflow.review_expense(submitted, bob, ReviewDecision.APPROVE, now=NOW)

        assert await expense_store.apply_transition(submitted, approved)

        view = await expense_store.get_view(submitted.id)
        assert view.expense.status is ExpenseStatus.APPROVED
        assert view.expense.reviewed_by == 2
        assert view.expense.reviewed_at == NOW
        assert view.reviewer_name == "Bob Manager"

    async def test_stale_status_not_applied(self, expense_store, user_store, sample_expense):
        submitted = await _add_submitted(expense_store, sample_expense)
        bob = await user_store.get(2)
        approved = workflow.review_expense(submitted, bob, ReviewDecision.APPROVE, now=NOW)
        rejected = workflow.review_expense(submitted, bob, ReviewDecision.REJECT, now=NOW)

        assert await expense_store.apply_transition(submitted, rejected) is True
        assert await expense_store.apply_transition(submitted, approved) is False

        current = await expense_store.get(submitted.id)
        assert current.status is ExpenseStatus.REJECTED

    async def test_missing_row(self, expense_store, sample_expense):
        ghost = sample_expense.model_copy(update={"id": 999})
        assert await expense_store.apply_transition(ghost, workflow.submit_expense(ghost, now=NOW)) is False

    async def test_schema_refuses_self_review(self, expense_store, sample_expense):
        submitted = await _add_submitted(expense_store, sample_expense)
        self_reviewed = submitted.model_copy(
            update={"status": ExpenseStatus.APPROVED, "reviewed_by": 1, "reviewed_at": NOW}
        )
        with pytest.raises(DatabaseError):
            await expense_store.apply_transition(submitted, self_reviewed)


class TestDeleteDraft:
    async def test_deletes_draft(self, expense_store, sample_expense):
        saved = await expense_store.add(sample_expense)
        assert await expense_store.delete_draft(saved.id) is True
        assert await expense_store.get(saved.id) is None

    async def test_keeps_submitted(self, expense_store, sample_expense):
        submitted = await _add_submitted(expense_store, sample_expense)
        assert await expense_store.delete_draft(submitted.id) is False
        assert await expense_store.get(submitted.id) is not None


class TestSummarize:
    async def test_groups_by_status_and_currency(self, expense_store, sample_expense):
        await expense_store.add(sample_expense)
        await expense_store.add(sample_expense.model_copy(update={"amount_minor": 750}))
        await expense_store.add(sample_expense.model_copy(update={"currency": "EUR"}))
        await _add_submitted(expense_store, sample_expense)

        summary = await expense_store.summarize()

        assert [(s.status, s.currency, s.count, s.total_minor) for s in summary] == [
            (ExpenseStatus.DRAFT, "EUR", 1, 1250),
            (ExpenseStatus.DRAFT, "GBP", 2, 2000),
            (ExpenseStatus.SUBMITTED, "GBP", 1, 1250),
        ]

    async def test_empty(self, expense_store):
        assert await expense_store.summarize() == []


class TestUserStore:
    async def test_get_with_role_and_manager(self, user_store):
        alice = await user_store.get(1)
        assert alice.role_name == "Employee"
        assert alice.manager_id == 2
        assert alice.manager_name == "Bob Manager"

    async def test_get_missing(self, user_store):
        assert await user_store.get(99) is None

    async def test_list_active_excludes_inactive(self, user_store, pool):
        async with pool.transaction() as conn:
            await conn.execute(
                "INSERT INTO users (user_name, email, role_id, is_active) VALUES (?, ?, ?, 0)",
                ("Carol Former", "carol@example.co.uk", 2),
            )

        users = await user_store.list_active()
        assert [u.user_name for u in users] == ["Alice Example", "Bob Manager"]


class TestReferenceStore:
    async def test_categories_sorted_by_name(self, reference_store):
        names = [c.name for c in await reference_store.list_categories()]
        assert names == ["Accommodation", "Meals", "Other", "Supplies", "Travel"]

    async def test_inactive_category_hidden(self, reference_store, pool):
        async with pool.transaction() as conn:
            await conn.execute("UPDATE categories SET is_active = 0 WHERE id = 5")

        active = await reference_store.list_categories()
        everything = await reference_store.list_categories(active_only=False)
        assert "Other" not in [c.name for c in active]
        assert len(everything) == 5

        other = await reference_store.get_category(5)
        assert other.is_active is False

    async def test_statuses(self, reference_store):
        statuses = await reference_store.list_statuses()
        assert [(s.id, s.name) for s in statuses] == [
            (1, "Draft"),
            (2, "Submitted"),
            (3, "Approved"),
            (4, "Rejected"),
        ]

    async def test_status_ids_match_enum(self, reference_store):
        for status in await reference_store.list_statuses():
            assert ExpenseStatus(status.name).status_id == status.id


class TestConnectionPool:
    async def test_foreign_keys_enforced(self, pool):
        async with pool.acquire() as conn:
            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1

    async def test_ping(self, pool):
        assert await pool.ping() is True

    async def test_transaction_rolls_back(self, pool):
        with pytest.raises(aiosqlite.IntegrityError):
            async with pool.transaction() as conn:
                await conn.execute("UPDATE categories SET name = 'Changed' WHERE id = 1")
                await conn.execute("INSERT INTO categories (id, name) VALUES (2, 'Duplicate')")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT name FROM categories WHERE id = 1")
            assert (await cursor.fetchone())[0] == "Travel"

    async def test_close_resets(self, pool):
        await pool.close()
        assert pool.is_initialized is False
        # Lazily reopened on next use
        assert await pool.ping() is True
