"""
Tests for form creation, lookup, visibility and the publish toggle at the service layer.
"""
import pytest
from datetime import datetime, timedelta
from sqlalchemy.exc import SQLAlchemyError
from app.services.form_service import FormService
from app.core.exceptions import (
    FormNotFoundException,
    FormNotAvailableException,
    PermissionDeniedException,
    PersistenceException,
)


class TestSetPublishStatus:
    """Tests for FormService.set_publish_status."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [True, False])
    async def test_sets_flag_and_advances_timestamp(self, db_session, make_form, value):
        """Flag ends up equal to the requested value and updated_at moves forward."""
        form = await make_form(is_published=not value)
        before = form.updated_at

        updated = await FormService.set_publish_status(db_session, form.id, value)

        assert updated.is_published is value
        assert updated.updated_at > before

    @pytest.mark.asyncio
    async def test_repeat_is_idempotent_but_still_touches(self, db_session, make_form):
        """Publishing twice keeps the flag and advances the timestamp both times."""
        form = await make_form(is_published=False)
        t0 = form.updated_at

        first = await FormService.set_publish_status(db_session, form.id, True)
        t1 = first.updated_at
        second = await FormService.set_publish_status(db_session, form.id, True)
        t2 = second.updated_at

        assert second.is_published is True
        assert t0 < t1 < t2

    @pytest.mark.asyncio
    async def test_timestamp_strictly_increases_past_future_value(self, db_session, make_form):
        """A stored updated_at ahead of the clock is still exceeded."""
        form = await make_form()
        future = datetime.utcnow() + timedelta(hours=1)
        form.updated_at = future
        await db_session.commit()

        updated = await FormService.set_publish_status(db_session, form.id, True)

        assert updated.updated_at > future

    @pytest.mark.asyncio
    async def test_does_not_change_other_fields(self, db_session, make_form):
        """Only the flag and updated_at change."""
        form = await make_form(title="Survey")
        created_at = form.created_at

        updated = await FormService.set_publish_status(db_session, form.id, True)

        assert updated.title == "Survey"
        assert updated.created_at == created_at
        assert updated.schema[0]["label"] == "Name"

    @pytest.mark.asyncio
    async def test_unknown_form_raises_not_found(self, db_session):
        """Missing form raises FormNotFoundException (404)."""
        with pytest.raises(FormNotFoundException) as exc_info:
            await FormService.set_publish_status(db_session, "does-not-exist", True)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_owner_check(self, db_session, make_user, make_form):
        """With owner_id given, another user's form is refused."""
        owner = await make_user()
        other = await make_user(email="other@example.com")
        form = await make_form(user=owner)

        with pytest.raises(PermissionDeniedException):
            await FormService.set_publish_status(db_session, form.id, True, owner_id=other.id)

        await db_session.refresh(form)
        assert form.is_published is False

        updated = await FormService.set_publish_status(db_session, form.id, True, owner_id=owner.id)
        assert updated.is_published is True

    @pytest.mark.asyncio
    async def test_database_error_becomes_persistence_exception(self, db_session, make_form, monkeypatch):
        """SQLAlchemy errors surface as a generic 500."""
        form = await make_form()

        async def failing_lookup(db, form_id):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(FormService, "get_form_by_id", staticmethod(failing_lookup))

        with pytest.raises(PersistenceException) as exc_info:
            await FormService.set_publish_status(db_session, form.id, True)

        assert exc_info.value.status_code == 500
        assert exc_info.value.detail == "Internal server error"


class TestGetVisibleForm:
    """Tests for FormService.get_visible_form."""

    @pytest.mark.asyncio
    async def test_published_form_is_public(self, db_session, make_form):
        form = await make_form(is_published=True)

        found = await FormService.get_visible_form(db_session, form.id)

        assert found.id == form.id

    @pytest.mark.asyncio
    async def test_unpublished_form_hidden_from_anonymous(self, db_session, make_user, make_form):
        owner = await make_user()
        form = await make_form(user=owner)

        with pytest.raises(FormNotAvailableException):
            await FormService.get_visible_form(db_session, form.id)

    @pytest.mark.asyncio
    async def test_unpublished_form_visible_to_owner(self, db_session, make_user, make_form):
        owner = await make_user()
        form = await make_form(user=owner)

        found = await FormService.get_visible_form(db_session, form.id, viewer_id=owner.id)

        assert found.id == form.id

    @pytest.mark.asyncio
    async def test_unowned_unpublished_form_hidden(self, db_session, make_form):
        """A form without owner is only visible once published."""
        form = await make_form(user=None)

        with pytest.raises(FormNotAvailableException):
            await FormService.get_visible_form(db_session, form.id, viewer_id=None)

    @pytest.mark.asyncio
    async def test_missing_form(self, db_session):
        with pytest.raises(FormNotFoundException):
            await FormService.get_visible_form(db_session, "missing")


class TestCreateForm:
    """Tests for FormService.create_form."""

    @pytest.mark.asyncio
    async def test_creates_unpublished_form_for_owner(self, db_session, make_user):
        owner = await make_user()

        form = await FormService.create_form(
            db_session,
            owner_id=owner.id,
            title="Event Signup",
            description="Sign up for the meetup",
            schema=[{"id": "1", "type": "text", "label": "Name"}],
            form_settings={"submitButtonText": "Join"}
        )

        assert form.id
        assert form.user_id == owner.id
        assert form.is_published is False
        assert form.schema == [{"id": "1", "type": "text", "label": "Name"}]
        assert form.settings == {"submitButtonText": "Join"}
        assert form.created_at is not None

    @pytest.mark.asyncio
    async def test_defaults_to_empty_schema_and_settings(self, db_session, make_user):
        owner = await make_user()

        form = await FormService.create_form(db_session, owner_id=owner.id, title="Blank")

        assert form.schema == []
        assert form.settings == {}

    @pytest.mark.asyncio
    async def test_database_error_becomes_persistence_exception(self, db_session, make_user, monkeypatch):
        owner = await make_user()

        async def failing_commit():
            raise SQLAlchemyError("disk I/O error")

        monkeypatch.setattr(db_session, "commit", failing_commit)

        with pytest.raises(PersistenceException):
            await FormService.create_form(db_session, owner_id=owner.id, title="Broken")


class TestListFormsForUser:
    """Tests for FormService.list_forms_for_user."""

    @pytest.mark.asyncio
    async def test_only_own_forms_most_recent_first(self, db_session, make_user, make_form):
        owner = await make_user()
        other = await make_user(email="other@example.com")
        older = await make_form(user=owner, title="Older")
        newer = await make_form(user=owner, title="Newer")
        await make_form(user=other, title="Not mine")

        forms = await FormService.list_forms_for_user(db_session, owner.id)

        assert [f.id for f in forms] == [newer.id, older.id]

        # Publishing bumps updated_at, moving the form to the top
        await FormService.set_publish_status(db_session, older.id, True)
        forms = await FormService.list_forms_for_user(db_session, owner.id)

        assert [f.id for f in forms] == [older.id, newer.id]

    @pytest.mark.asyncio
    async def test_no_forms(self, db_session, make_user):
        owner = await make_user()

        assert await FormService.list_forms_for_user(db_session, owner.id) == []
