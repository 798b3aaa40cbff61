"""
Taskboard - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

# Set testing environment before the app reads its settings
os.environ['ENVIRONMENT'] = 'test'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['LOG_FILE'] = ''
os.environ['ENABLE_DEBUG_ROUTES'] = 'false'

from main import app
from app.services.database import MongoDB

fake = Faker()


@pytest.fixture
async def db() -> AsyncGenerator:
    """Point MongoDB at a fresh in-memory database for each test"""
    client = AsyncMongoMockClient()
    MongoDB.client = client
    MongoDB.db = client['taskboard_test']
    await MongoDB.create_indexes()

    yield MongoDB.db

    MongoDB.client = None
    MongoDB.db = None


@pytest.fixture
async def client(db) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac


def make_user_data() -> dict:
    return {
        'name': fake.first_name()[:12].ljust(2, 'x'),
        'email': f'{fake.unique.user_name()}@example.com',
        'password': 'secret123',
    }


@pytest.fixture
def test_user_data() -> dict:
    return make_user_data()


async def register(client: AsyncClient, user_data: dict) -> dict:
    response = await client.post('/auth/register', json=user_data)
    assert response.status_code == 201, response.text
    body = response.json()
    return {
        **user_data,
        'token': body['jwtToken'],
        'headers': {'Authorization': f"Bearer {body['jwtToken']}"},
    }


@pytest.fixture
async def test_user(client: AsyncClient, test_user_data: dict) -> dict:
    """A registered user with ready-made auth headers"""
    return await register(client, test_user_data)


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    return test_user['headers']


@pytest.fixture
async def other_user(client: AsyncClient) -> dict:
    """A second registered user, for ownership checks"""
    return await register(client, make_user_data())
