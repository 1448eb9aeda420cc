"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from creatorlink.database import Base
from creatorlink.services.mailer import EmailSender, SendResult


JANE_BIO = "collab: jane@brandmail.com, insta: @janedoes"


def _import_models():
    import creatorlink.models.creator_profile
    import creatorlink.models.brand_profile
    import creatorlink.models.campaign
    import creatorlink.models.creator_identity
    import creatorlink.models.discovered_creator
    import creatorlink.models.platform_account
    import creatorlink.models.unlock
    import creatorlink.models.outreach_event


@pytest.fixture
def db_engine():
    """In-memory SQLite engine with schema created."""
    engine = create_engine('sqlite:///:memory:')
    _import_models()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_db_engine(tmp_path):
    """File-backed SQLite engine: separate sessions get separate connections."""
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    _import_models()
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    """SQLAlchemy session bound to in-memory SQLite. Rolls back after each test."""
    Session = sessionmaker(bind=db_engine)
    session = Session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(autouse=True)
def patch_get_session(db_session):
    """Route all get_session() calls to the test session.

    We disable close() so that route handlers calling session.close()
    in their finally blocks don't invalidate the shared test session.
    """
    _real_close = db_session.close
    db_session.close = lambda: None
    with patch('creatorlink.database.get_session', return_value=db_session):
        yield db_session
    db_session.close = _real_close


@pytest.fixture
def app():
    """Flask test app."""
    from creatorlink import create_app
    app = create_app()
    app.config['TESTING'] = True
    yield app


@pytest.fixture
def client(app):
    """Flask test client."""
    with app.test_client() as c:
        yield c


# ── Email sender doubles ─────────────────────────────────────────────────────

class RecordingSender(EmailSender):
    """EmailSender that records every send and returns a canned result."""

    def __init__(self, result=None):
        self.result = result or SendResult(success=True, provider_message_id='msg_123')
        self.sent = []

    def send(self, to, subject, html):
        self.sent.append({'to': to, 'subject': subject, 'html': html})
        return self.result


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def failing_sender():
    return RecordingSender(SendResult(success=False, error='HTTP 422: invalid from address'))


@pytest.fixture
def raising_sender():
    mock = MagicMock(spec=EmailSender)
    mock.send.side_effect = ConnectionError('resend unreachable')
    return mock


# ── Row factories ────────────────────────────────────────────────────────────

@pytest.fixture
def make_discovered_creator(db_session):
    """Factory fixture — inserts a DiscoveredCreator row."""
    from creatorlink.models.discovered_creator import DiscoveredCreator
    counter = {'n': 0}

    def _make(**overrides):
        counter['n'] += 1
        defaults = dict(
            platform='instagram',
            platform_id=f'ig_{counter["n"]:04d}',
            name='Jane Doe',
            channel_url='https://instagram.com/janedoes',
            thumbnail_url='https://cdn.test/jane.jpg',
            description=JANE_BIO,
            subscriber_count=25000,
            engagement_rate=4.0,
            niche=['beauty'],
            primary_niche='beauty',
        )
        defaults.update(overrides)
        dc = DiscoveredCreator(**defaults)
        db_session.add(dc)
        db_session.commit()
        return dc
    return _make


@pytest.fixture
def make_brand(db_session):
    """Factory fixture — inserts a BrandProfile row."""
    from creatorlink.models.brand_profile import BrandProfile

    def _make(**overrides):
        defaults = dict(
            company_name='Glow Labs',
            logo_url='https://cdn.test/glow.png',
            industry=['beauty'],
            target_niches=['beauty'],
            min_followers=10000,
            max_followers=50000,
            preferred_platforms=['instagram'],
        )
        defaults.update(overrides)
        brand = BrandProfile(**defaults)
        db_session.add(brand)
        db_session.commit()
        return brand
    return _make


@pytest.fixture
def make_campaign(db_session, make_brand):
    """Factory fixture — inserts a Campaign row (and a brand if none given)."""
    from creatorlink.models.campaign import Campaign

    def _make(**overrides):
        if 'brand_profile_id' not in overrides:
            overrides['brand_profile_id'] = make_brand().id
        defaults = dict(
            name='Summer Glow',
            status='active',
            target_niches=['beauty'],
            min_followers=10000,
            max_followers=50000,
            preferred_platforms=['instagram'],
            budget_per_creator=500.0,
        )
        defaults.update(overrides)
        campaign = Campaign(**defaults)
        db_session.add(campaign)
        db_session.commit()
        return campaign
    return _make
