"""
Flood Alert API - Test Configuration and Fixtures
"""
import os
import tempfile
from pathlib import Path
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from faker import Faker

# Set testing environment
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['AI_PROVIDER'] = ''
os.environ['AI_API_KEY'] = ''
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='flood-alert-uploads-')

from main import app
from core.database import get_db
from core.security import hash_password, create_access_token
from models.base import Base
from models.user import User, UserRole
from models.flood_report import FloodReport, WaterLevel, ReportStatus
from models.sos_request import SOSRequest, SOSType, SOSStatus
from models.shelter import Shelter

fake = Faker()

TEST_PASSWORD = 'testpassword123'

REPORT_FORM = {
    'location[lat]': '6.9',
    'location[lng]': '79.8',
    'location[address]': 'X',
    'waterLevel': 'high',
    'description': 'Y',
}

PNG_UPLOAD = ('flood.png', b'\x89PNG\r\n\x1a\nfake-image-bytes', 'image/png')


def upload_path(url: str) -> Path:
    """Where a /uploads/... URL lives on disk"""
    return Path(os.environ['UPLOAD_DIR']) / url[len('/uploads/'):]


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database for each test"""
    engine = create_async_engine(
        'sqlite+aiosqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, 'connect')
    def _foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestSessionLocal = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    await engine.dispose()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------- users ----------

async def _create_user(db: AsyncSession, role: UserRole = UserRole.USER, **kwargs) -> User:
    user = User(
        name=kwargs.pop('name', fake.name()),
        email=kwargs.pop('email', fake.unique.email()).lower(),
        hashed_password=hash_password(kwargs.pop('password', TEST_PASSWORD)),
        role=role,
        **kwargs
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def _headers(user: User) -> dict:
    token = create_access_token(subject=user.id)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, phone_number='+94770000001')


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session)


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, role=UserRole.ADMIN)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return _headers(test_user)


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    return _headers(other_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest.fixture
def make_user(db_session: AsyncSession):
    async def _make(**kwargs) -> User:
        return await _create_user(db_session, **kwargs)
    return _make


# ---------- domain objects ----------

def location(address: str = 'Kelaniya, Sri Lanka') -> dict:
    return {'lat': 6.9553, 'lng': 79.9220, 'address': address}


@pytest.fixture
def make_report(db_session: AsyncSession):
    async def _make(user: User, **kwargs) -> FloodReport:
        report = FloodReport(
            user_id=user.id,
            location=kwargs.pop('location', location()),
            water_level=kwargs.pop('water_level', WaterLevel.HIGH),
            description=kwargs.pop('description', 'Water entering houses'),
            status=kwargs.pop('status', ReportStatus.PENDING),
            **kwargs
        )
        db_session.add(report)
        await db_session.commit()
        return report
    return _make


@pytest.fixture
def make_sos(db_session: AsyncSession):
    async def _make(user: User, **kwargs) -> SOSRequest:
        sos = SOSRequest(
            user_id=user.id,
            type=kwargs.pop('type', SOSType.RESCUE),
            location=kwargs.pop('location', location()),
            description=kwargs.pop('description', 'Family trapped on roof'),
            status=kwargs.pop('status', SOSStatus.PENDING),
            **kwargs
        )
        db_session.add(sos)
        await db_session.commit()
        return sos
    return _make


@pytest.fixture
def make_shelter(db_session: AsyncSession):
    async def _make(**kwargs) -> Shelter:
        shelter = Shelter(
            name=kwargs.pop('name', 'Gampaha Central College'),
            capacity=kwargs.pop('capacity', 100),
            current_occupancy=kwargs.pop('current_occupancy', 0),
            location=kwargs.pop('location', location('Gampaha, Sri Lanka')),
            phone=kwargs.pop('phone', '+94332222222'),
            facilities=kwargs.pop('facilities', ['water', 'medical']),
            is_active=kwargs.pop('is_active', True),
        )
        db_session.add(shelter)
        await db_session.commit()
        return shelter
    return _make
