import pytest

from scribe.database.drafts import DraftService
from scribe.database.manuscripts import ManuscriptService
from scribe.database.versions import ChapterVersionService
from scribe.utils.notifications import Notifier
from tests.fakes import FakeSupabase


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def manuscript_service(db):
    return ManuscriptService(client=db)


@pytest.fixture
def version_service(db):
    return ChapterVersionService(client=db)


@pytest.fixture
def draft_service(db):
    return DraftService(client=db)


@pytest.fixture
def notifier():
    return Notifier()
