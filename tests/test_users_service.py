"""
Tests for token resolution and per-user preferences
"""

from datetime import timedelta

import pytest
from sqlmodel import select

from phrasedeck.errors import (
    InvalidCredentials,
    InvalidToken,
    LanguageNotFound,
    PreconditionFailed,
    SettingsNotFound,
    TokenExpired,
    Unauthenticated,
    UserAlreadyExists,
)
from phrasedeck.models import User, UserSettings
from phrasedeck.security import REFRESH_TOKEN, create_token, hash_password, verify_password
from phrasedeck.services.users import (
    authenticate,
    register_user,
    resolve_learn_days,
    resolve_review_days,
    resolve_settings,
    resolve_user,
    set_learn_days,
    set_review_days,
    update_settings,
)


class TestPasswords:
    def test_round_trip(self):
        stored = hash_password("secret123")
        assert verify_password("secret123", stored)
        assert not verify_password("wrong", stored)

    def test_malformed_hash(self):
        assert not verify_password("secret123", "not-a-hash")


class TestResolveUser:
    def test_valid_token(self, session, user):
        assert resolve_user(session, create_token(user.id)).id == user.id

    def test_expired_token(self, session, user):
        token = create_token(user.id, expires_in=timedelta(seconds=-5))
        with pytest.raises(TokenExpired):
            resolve_user(session, token)

    def test_garbage_token(self, session):
        with pytest.raises(InvalidToken):
            resolve_user(session, "not.a.jwt")

    def test_empty_token(self, session):
        with pytest.raises(Unauthenticated):
            resolve_user(session, "")

    def test_refresh_token_is_not_an_access_token(self, session, user):
        token = create_token(user.id, token_type=REFRESH_TOKEN)
        with pytest.raises(InvalidToken):
            resolve_user(session, token)

    def test_unknown_user(self, session):
        with pytest.raises(InvalidToken):
            resolve_user(session, create_token(424242))


class TestAccounts:
    def test_duplicate_email(self, session, user):
        with pytest.raises(UserAlreadyExists):
            register_user(session, " Learner@Example.com ", "another1")

    def test_created_at_is_timezone_aware(self):
        user = User(email="tz@example.com", password_hash="x")
        assert user.created_at.tzinfo is not None

    def test_authenticate(self, session, user):
        assert authenticate(session, "LEARNER@example.com", "secret123").id == user.id

    def test_authenticate_wrong_password(self, session, user):
        with pytest.raises(InvalidCredentials):
            authenticate(session, "learner@example.com", "nope")


class TestDays:
    def test_unconfigured_days_are_empty(self, session, user):
        assert resolve_learn_days(session, user.id) == set()
        assert resolve_review_days(session, user.id) == set()

    def test_replace_days(self, session, user):
        set_learn_days(session, user.id, [1, 2])
        set_learn_days(session, user.id, [2, 5])
        set_review_days(session, user.id, [3])

        assert resolve_learn_days(session, user.id) == {2, 5}
        assert resolve_review_days(session, user.id) == {3}

    def test_days_are_per_user(self, session, user, other_user):
        set_learn_days(session, other_user.id, [0])
        assert resolve_learn_days(session, user.id) == set()

    def test_rejects_unknown_weekday(self, session, user):
        with pytest.raises(PreconditionFailed):
            set_review_days(session, user.id, [7])


class TestSettings:
    def test_resolve_settings(self, session, user):
        preferences = resolve_settings(session, user.id)
        assert preferences.origin_language == "en"
        assert preferences.target_language == "de"
        assert preferences.daily_goal == 10

    def test_update_settings(self, session, user):
        preferences = update_settings(session, user.id, target_language="es", daily_goal=20)
        assert preferences.target_language == "es"
        assert preferences.daily_goal == 20

    def test_update_with_days(self, session, user):
        update_settings(session, user.id, daily_goal=5, learn_days=[1, 2], review_days=[4])
        assert resolve_learn_days(session, user.id) == {1, 2}
        assert resolve_review_days(session, user.id) == {4}
        assert resolve_settings(session, user.id).daily_goal == 5

    def test_invalid_days_leave_settings_unchanged(self, session, user):
        with pytest.raises(PreconditionFailed):
            update_settings(session, user.id, target_language="fr", review_days=[3, 8])
        assert resolve_settings(session, user.id).target_language == "de"
        assert resolve_review_days(session, user.id) == set()

    def test_unknown_language(self, session, user):
        with pytest.raises(LanguageNotFound):
            update_settings(session, user.id, target_language="xx")

    def test_missing_settings(self, session, user):
        for row in session.exec(select(UserSettings)).all():
            session.delete(row)
        session.commit()
        with pytest.raises(SettingsNotFound):
            resolve_settings(session, user.id)
