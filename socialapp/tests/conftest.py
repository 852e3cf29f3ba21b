import os
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Configure test environment before the app builds its engine
TEST_DB = Path(tempfile.gettempdir()) / 'socialapp_test.db'
os.environ.setdefault('DATABASE_URL', f'sqlite+aiosqlite:///{TEST_DB}')

from socialapp import crud  # noqa: E402
from socialapp.auth import create_access_token  # noqa: E402
from socialapp.config import get_settings  # noqa: E402
from socialapp.main import app  # noqa: E402
from socialapp.models import AsyncSessionLocal, Base, engine  # noqa: E402
from socialapp.models.messages import Message, MessageType  # noqa: E402
from socialapp.storage import ImageStore, get_image_store  # noqa: E402


class FakeImageStore(ImageStore):
    """Records every call instead of talking to S3"""
    base_url = 'https://images.test/'

    def __init__(self):
        self.objects = {}
        self.uploads = []
        self.deletes = []
        self.url_calls = 0
        self.fail_uploads = False

    async def upload_image(self, key, data, content_type):
        if self.fail_uploads:
            raise RuntimeError('image host unavailable')
        self.uploads.append(key)
        self.objects[key] = data
        return f'{self.base_url}{key}'

    async def delete_image(self, key):
        self.deletes.append(key)
        self.objects.pop(key, None)

    def generate_url(self, key):
        self.url_calls += 1
        return f'{self.base_url}{key}'


@pytest.fixture
def default_picture_url():
    return f'{FakeImageStore.base_url}{get_settings().default_picture_key}'


@pytest_asyncio.fixture
async def db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
def store():
    return FakeImageStore()


@pytest_asyncio.fixture
async def client(db, store):
    app.dependency_overrides[get_image_store] = lambda: store
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make(username, display_name=None, password='secret1'):
        async with AsyncSessionLocal() as session:
            async with session.begin():
                user = await crud.create_user(session, username, password, display_name or username)
        return user
    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        token = create_access_token({'id': user.id, 'username': user.username})
        return {'Authorization': f'Bearer {token}'}
    return _headers


@pytest.fixture
def befriend(db):
    async def _befriend(user_a, user_b):
        async with AsyncSessionLocal() as session:
            async with session.begin():
                await crud.create_friendship(session, user_a.id, user_b.id)
    return _befriend


@pytest.fixture
def add_message(db):
    """Insert a message row directly, with an explicit send date"""
    async def _add(sender, receiver, content, date_sent, message_type=MessageType.TEXT, image_key=None):
        async with AsyncSessionLocal() as session:
            async with session.begin():
                m = Message(from_id=sender.id, to_id=receiver.id, content=content,
                            type=message_type, date_sent=date_sent, image_key=image_key)
                session.add(m)
        return m
    return _add


@pytest.fixture
def load_profile(db):
    async def _load(user):
        async with AsyncSessionLocal() as session:
            return await crud.get_profile(session, user.id)
    return _load


@pytest.fixture
def load_messages(db):
    async def _load(sender, receiver):
        async with AsyncSessionLocal() as session:
            return await crud.list_dialog(session, sender.id, receiver.id)
    return _load
