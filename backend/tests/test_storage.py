"""
Barrel + Verse Backend — Storage Contract Tests
=================================================

What:  The behaviour every Storage implementation must share.
How:   The `storage` fixture is parametrized, so each test runs against
       MemoryStorage and against DatabaseStorage on in-memory SQLite.

What we test:
    ✅ Users: create, lookup by id/email, duplicate email, admin flag
    ✅ Courses/experiences: defaults, published filtering, price round-trip
    ✅ Partial updates: merge, unknown id, updated_at refresh
    ✅ Deletes report whether something was removed
    ✅ Purchases: forced status, per-user scoping
    ✅ Sessions: token-keyed records, delete, unknown tokens
    ✅ DatabaseStorage specifics: null coercion, error wrapping, health on OSError
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from barrelverse.exceptions import ConflictError, DatabaseError
from barrelverse.schemas.course import CourseCreate
from barrelverse.schemas.experience import ExperienceCreate
from barrelverse.schemas.purchase import PurchaseCreate
from barrelverse.schemas.user import NewUser
from barrelverse.storage.base import COURSE_NULLABLE_FIELDS
from barrelverse.storage.database import coerce_nullable, to_columns

LATER = datetime(2031, 1, 1, 12, 0, tzinfo=timezone.utc)


def new_user(email="taster@example.com"):
    return NewUser(email=email, password="argon2-hash-placeholder", name="Taster")


def new_course(**overrides):
    values = {
        "title": "Bordeaux Basics",
        "description": "Left bank, right bank.",
        "price": "19.99",
        "category": "video",
    }
    values.update(overrides)
    return CourseCreate(**values)


def new_experience(**overrides):
    values = {"title": "Cellar Tour", "description": "Underground.", "price": "45"}
    values.update(overrides)
    return ExperienceCreate(**values)


def freeze_clock(monkeypatch, moment):
    monkeypatch.setattr("barrelverse.storage.memory.utcnow", lambda: moment)
    monkeypatch.setattr("barrelverse.storage.database.utcnow", lambda: moment)


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════

class TestUsers:

    @pytest.mark.asyncio
    async def test_create_user_assigns_id_and_defaults(self, storage):
        """New users get a generated id, a timestamp and no admin rights."""
        user = await storage.create_user(new_user())

        assert user.id
        assert user.email == "taster@example.com"
        assert user.is_admin is False
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_ids_are_unique(self, storage):
        first = await storage.create_user(new_user("a@example.com"))
        second = await storage.create_user(new_user("b@example.com"))
        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_lookup_by_id_and_email(self, storage):
        user = await storage.create_user(new_user())

        by_id = await storage.get_user(user.id)
        by_email = await storage.get_user_by_email("taster@example.com")

        assert by_id.id == user.id
        assert by_email.id == user.id
        assert by_email.password == "argon2-hash-placeholder"

    @pytest.mark.asyncio
    async def test_lookup_missing_returns_none(self, storage):
        """A missing row is None, never an exception."""
        assert await storage.get_user("does-not-exist") is None
        assert await storage.get_user_by_email("nobody@example.com") is None

    @pytest.mark.asyncio
    async def test_duplicate_email_is_a_conflict(self, storage):
        await storage.create_user(new_user())
        with pytest.raises(ConflictError, match="Email already registered"):
            await storage.create_user(new_user())

    @pytest.mark.asyncio
    async def test_create_admin_user(self, storage):
        user = await storage.create_user(new_user(), is_admin=True)
        assert (await storage.get_user(user.id)).is_admin is True

    @pytest.mark.asyncio
    async def test_set_user_admin(self, storage):
        user = await storage.create_user(new_user())

        promoted = await storage.set_user_admin(user.id, True)

        assert promoted.is_admin is True
        assert (await storage.get_user(user.id)).is_admin is True
        assert await storage.set_user_admin("does-not-exist", True) is None


# ══════════════════════════════════════════════════════════════════════════
# Courses
# ══════════════════════════════════════════════════════════════════════════

class TestCourses:

    @pytest.mark.asyncio
    async def test_create_course_defaults(self, storage):
        """Unspecified isPublished defaults to True; omitted optionals are None."""
        course = await storage.create_course(new_course())

        assert course.is_published is True
        assert course.long_description is None
        assert course.image is None
        assert course.duration is None
        assert course.level is None
        assert course.created_at is not None
        assert course.updated_at is not None

    @pytest.mark.asyncio
    async def test_price_round_trips_as_text(self, storage):
        course = await storage.create_course(new_course(price="19.99"))
        stored = await storage.get_course(course.id)

        assert course.price == "19.99"
        assert stored.price == "19.99"

    @pytest.mark.asyncio
    async def test_whole_price_gets_two_decimals(self, storage):
        course = await storage.create_course(new_course(price="20"))
        assert (await storage.get_course(course.id)).price == "20.00"

    @pytest.mark.asyncio
    async def test_published_filter(self, storage):
        """list_published_courses hides unpublished rows; list_courses shows all."""
        visible = await storage.create_course(new_course(title="Visible"))
        hidden = await storage.create_course(new_course(title="Hidden", is_published=False))

        published_ids = {c.id for c in await storage.list_published_courses()}
        all_ids = {c.id for c in await storage.list_courses()}

        assert published_ids == {visible.id}
        assert all_ids == {visible.id, hidden.id}

    @pytest.mark.asyncio
    async def test_empty_lists(self, storage):
        assert await storage.list_courses() == []
        assert await storage.list_published_courses() == []

    @pytest.mark.asyncio
    async def test_update_merges_supplied_fields(self, storage):
        course = await storage.create_course(new_course(duration="2 hours"))

        updated = await storage.update_course(course.id, {"title": "Bordeaux Deep Dive"})

        assert updated.title == "Bordeaux Deep Dive"
        assert updated.duration == "2 hours"
        assert updated.price == "19.99"
        assert (await storage.get_course(course.id)).title == "Bordeaux Deep Dive"

    @pytest.mark.asyncio
    async def test_update_can_clear_nullable_field(self, storage):
        course = await storage.create_course(new_course(image="/img/bordeaux.jpg"))
        updated = await storage.update_course(course.id, {"image": None})
        assert updated.image is None

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_none_and_writes_nothing(self, storage):
        await storage.create_course(new_course())
        before = await storage.list_courses()

        assert await storage.update_course("does-not-exist", {"title": "Ghost"}) is None
        assert await storage.list_courses() == before

    @pytest.mark.asyncio
    async def test_empty_update_refreshes_updated_at(self, storage, monkeypatch):
        course = await storage.create_course(new_course())
        freeze_clock(monkeypatch, LATER)

        updated = await storage.update_course(course.id, {})

        assert updated.updated_at == LATER
        assert updated.title == course.title

    @pytest.mark.asyncio
    async def test_delete_reports_whether_removed(self, storage):
        course = await storage.create_course(new_course())

        assert await storage.delete_course(course.id) is True
        assert await storage.get_course(course.id) is None
        assert await storage.delete_course(course.id) is False


# ══════════════════════════════════════════════════════════════════════════
# Experiences
# ══════════════════════════════════════════════════════════════════════════

class TestExperiences:

    @pytest.mark.asyncio
    async def test_create_experience_defaults(self, storage):
        experience = await storage.create_experience(new_experience())

        assert experience.current_attendees == 0
        assert experience.is_published is True
        assert experience.price == "45.00"
        assert experience.max_attendees is None
        assert experience.location is None

    @pytest.mark.asyncio
    async def test_explicit_unpublished_is_kept(self, storage):
        experience = await storage.create_experience(new_experience(is_published=False))

        assert experience.is_published is False
        assert await storage.list_published_experiences() == []
        assert len(await storage.list_experiences()) == 1

    @pytest.mark.asyncio
    async def test_update_and_delete(self, storage):
        experience = await storage.create_experience(new_experience(max_attendees=12))

        updated = await storage.update_experience(experience.id, {"max_attendees": 20, "price": "50.50"})

        assert updated.max_attendees == 20
        assert updated.price == "50.50"
        assert updated.current_attendees == 0
        assert await storage.update_experience("does-not-exist", {}) is None
        assert await storage.delete_experience(experience.id) is True
        assert await storage.delete_experience(experience.id) is False


# ══════════════════════════════════════════════════════════════════════════
# Purchases
# ══════════════════════════════════════════════════════════════════════════

class TestPurchases:

    @pytest.mark.asyncio
    async def test_status_is_always_completed(self, storage):
        user = await storage.create_user(new_user())

        purchase = await storage.create_purchase(
            user.id, PurchaseCreate(item_type="course", item_id="c-1", amount="19.99")
        )

        assert purchase.status == "completed"
        assert purchase.user_id == user.id
        assert purchase.amount == "19.99"
        assert purchase.stripe_payment_id is None

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, storage):
        alice = await storage.create_user(new_user("alice@example.com"))
        bob = await storage.create_user(new_user("bob@example.com"))
        payload = PurchaseCreate(item_type="experience", item_id="e-1", amount="120")

        mine = await storage.create_purchase(alice.id, payload)
        await storage.create_purchase(bob.id, payload)

        assert [p.id for p in await storage.list_user_purchases(alice.id)] == [mine.id]
        assert await storage.list_user_purchases("nobody") == []

    @pytest.mark.asyncio
    async def test_get_purchase(self, storage):
        user = await storage.create_user(new_user())
        purchase = await storage.create_purchase(
            user.id,
            PurchaseCreate(item_type="course", item_id="c-1", amount="5", stripe_payment_id="pi_123"),
        )

        stored = await storage.get_purchase(purchase.id)

        assert stored.stripe_payment_id == "pi_123"
        assert stored.amount == "5.00"
        assert await storage.get_purchase("does-not-exist") is None


class TestSessions:

    @pytest.mark.asyncio
    async def test_create_and_resolve(self, storage):
        user = await storage.create_user(new_user())

        record = await storage.create_session(user.id, LATER)
        found = await storage.get_session_record(record.id)

        assert found.user_id == user.id
        assert found.expires_at == LATER
        assert found.expires_at.tzinfo is not None
        assert found.is_expired(LATER - timedelta(seconds=1)) is False
        assert found.is_expired(LATER) is True

    @pytest.mark.asyncio
    async def test_delete_reports_whether_removed(self, storage):
        user = await storage.create_user(new_user())
        record = await storage.create_session(user.id, LATER)

        assert await storage.delete_session(record.id) is True
        assert await storage.delete_session(record.id) is False
        assert await storage.get_session_record(record.id) is None

    @pytest.mark.asyncio
    async def test_unknown_token(self, storage):
        assert await storage.get_session_record("no-such-token") is None
        assert await storage.delete_session("no-such-token") is False

    @pytest.mark.asyncio
    async def test_tokens_are_long_and_unique(self, storage):
        user = await storage.create_user(new_user())

        tokens = {(await storage.create_session(user.id, LATER)).id for _ in range(5)}

        assert len(tokens) == 5
        assert all(len(token) >= 40 and token != user.id for token in tokens)


class TestHealth:

    @pytest.mark.asyncio
    async def test_health_check(self, storage):
        assert await storage.health_check() is True


# ══════════════════════════════════════════════════════════════════════════
# Memory and Database specifics
# ══════════════════════════════════════════════════════════════════════════

class TestMemoryStorage:

    @pytest.mark.asyncio
    async def test_returned_entities_are_copies(self, memory_storage):
        """Mutating a returned entity must not change what is stored."""
        course = await memory_storage.create_course(new_course())
        course.title = "Tampered"

        assert (await memory_storage.get_course(course.id)).title == "Bordeaux Basics"

    @pytest.mark.asyncio
    async def test_reset(self, memory_storage):
        await memory_storage.create_user(new_user())
        memory_storage.reset()
        assert await memory_storage.get_user_by_email("taster@example.com") is None


class TestDatabaseStorage:

    def test_coerce_nullable_fills_missing_fields(self):
        row = coerce_nullable({"title": "T", "image": "/a.jpg"}, COURSE_NULLABLE_FIELDS)

        assert row["title"] == "T"
        assert row["image"] == "/a.jpg"
        assert row["long_description"] is None
        assert row["duration"] is None
        assert row["level"] is None

    def test_to_columns_converts_money(self):
        row = to_columns({"price": "19.99", "title": "T"})
        assert str(row["price"]) == "19.99"
        assert row["title"] == "T"

    @pytest.mark.asyncio
    async def test_sql_failure_becomes_database_error(self, database_storage, monkeypatch):
        """Driver errors surface as DatabaseError, never as raw SQLAlchemy exceptions."""

        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection reset"))

        monkeypatch.setattr("sqlalchemy.ext.asyncio.AsyncSession.execute", broken_execute)

        with pytest.raises(DatabaseError) as exc_info:
            await database_storage.list_courses()
        assert exc_info.value.context["operation"] == "list_courses"

    @pytest.mark.asyncio
    async def test_health_check_reports_unreachable(self, database_storage, monkeypatch):
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr("sqlalchemy.ext.asyncio.AsyncSession.execute", broken_execute)

        assert await database_storage.health_check() is False

    @pytest.mark.asyncio
    async def test_health_check_survives_refused_connection(self, database_storage, monkeypatch):
        """A refused socket raises OSError from the driver, not a SQLAlchemy error."""

        async def refused_execute(*args, **kwargs):
            raise ConnectionRefusedError("connection refused")

        monkeypatch.setattr("sqlalchemy.ext.asyncio.AsyncSession.execute", refused_execute)

        assert await database_storage.health_check() is False
