from __future__ import annotations

import logging

from sqlmodel import SQLModel, Session, create_engine, select

from .settings import DATABASE_URL, SEED_DEMO

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, echo=False)

LANGUAGES = [
    ("en", "English"),
    ("de", "German"),
    ("es", "Spanish"),
    ("fr", "French"),
]

DEMO_EMAIL = "demo@phrasedeck.local"
DEMO_PHRASES = [
    ("Guten Morgen", "Good morning", 1),
    ("Wie geht es dir?", "How are you?", 2),
    ("Ich habe Hunger", "I am hungry", 3),
]


def seed_reference_data(session: Session) -> None:
    """Stages and languages; idempotent."""
    from .models import Language, Stage
    from .services.review import DEFAULT_STAGE_DAYS

    existing_stages = {stage.id for stage in session.exec(select(Stage)).all()}
    for stage_id, days in DEFAULT_STAGE_DAYS.items():
        if stage_id not in existing_stages:
            session.add(Stage(id=stage_id, days=days))

    existing_codes = set(session.exec(select(Language.code)).all())
    for code, name in LANGUAGES:
        if code not in existing_codes:
            session.add(Language(code=code, name=name))
    session.commit()


def seed_demo_data(session: Session) -> None:
    """
    Demo account (once): learns on Monday/Tuesday, reviews on
    Wednesday/Thursday, with a few German phrases to start from.
    """
    from .models import User
    from .services.importer import ImportedPair, save_pair
    from .services.users import (
        get_language,
        register_user,
        set_learn_days,
        set_review_days,
        update_settings,
    )

    if session.exec(select(User).where(User.email == DEMO_EMAIL)).first():
        return

    user = register_user(session, DEMO_EMAIL, "test1234")
    update_settings(session, user.id, origin_language="en", target_language="de")
    set_learn_days(session, user.id, [1, 2])
    set_review_days(session, user.id, [3, 4])

    german = get_language(session, "de").id
    english = get_language(session, "en").id
    for original, translated, priority in DEMO_PHRASES:
        save_pair(
            session,
            user.id,
            ImportedPair(original=original, translated=translated, priority=priority),
            german,
            english,
        )
    logger.info("Seeded demo user %s", DEMO_EMAIL)


def init_db() -> None:
    from . import models  # noqa: F401  (register tables)

    SQLModel.metadata.create_all(engine)
    with Session(engine, expire_on_commit=False) as session:
        seed_reference_data(session)
        if SEED_DEMO:
            seed_demo_data(session)
