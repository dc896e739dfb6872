from datetime import datetime

from webgate.models.page_content import PageContent
from webgate.services.content_store import ContentStore

SAVED = datetime(2026, 5, 5, 10, 0, 0)


def test_empty_page(db_session):
    assert ContentStore(db_session).get("index", "en") == {}


def test_upsert_then_get(db_session):
    store = ContentStore(db_session)

    written = store.upsert("index", "en", "editor@example.com", {"hero": "Hi", "footer": "Bye"}, now=SAVED)

    assert written == 2
    assert store.get("index", "en") == {"hero": "Hi", "footer": "Bye"}


def test_overwrite_keeps_one_row_per_section(db_session):
    store = ContentStore(db_session)
    store.upsert("index", "en", "a@example.com", {"hero": "Hi"})
    store.upsert("index", "en", "b@example.com", {"hero": "Hello", "news": None}, now=SAVED)

    assert store.get("index", "en") == {"hero": "Hello", "news": None}
    assert db_session.query(PageContent).count() == 2

    db_session.expire_all()
    hero = db_session.query(PageContent).filter(PageContent.section_id == "hero").one()
    assert hero.modified_by == "b@example.com"
    assert hero.modified_at == SAVED


def test_languages_and_pages_are_independent(db_session):
    store = ContentStore(db_session)
    store.upsert("index", "en", None, {"hero": "Hi"})
    store.upsert("index", "de", None, {"hero": "Hallo"})
    store.upsert("rules", "en", None, {"hero": "Rules"})

    assert store.get("index", "en") == {"hero": "Hi"}
    assert store.get("index", "de") == {"hero": "Hallo"}
    assert store.get("rules", "en") == {"hero": "Rules"}
    assert store.get("index", "fr") == {}


def test_empty_update_writes_nothing(db_session):
    assert ContentStore(db_session).upsert("index", "en", None, {}) == 0
    assert db_session.query(PageContent).count() == 0
