from datetime import date, timedelta

import pytest

from eventplanner import create_app
from eventplanner.config import TestConfig
from eventplanner.database import db
from eventplanner.models import User
from eventplanner.store import EventStore


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def _add_user(username, email, password='password'):
    user = User(username=username, email=email)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def users(app):
    with app.app_context():
        _add_user('alice', 'alice@example.com')
        _add_user('bob', 'bob@example.com')


@pytest.fixture
def auth_client(client, users):
    resp = client.post('/login', data={'email': 'alice@example.com', 'password': 'password'})
    assert resp.status_code == 302
    return client


@pytest.fixture
def store():
    return EventStore()


@pytest.fixture
def future_day():
    return date.today() + timedelta(days=30)


def make_event(day, **overrides):
    """Wire-shaped event without id or owner."""
    event = {
        'name': 'Smith Wedding',
        'address': '12 Garden Road, Makati',
        'date': day,
        'eventType': 'Wedding',
        'material': [
            {'materialName': 'Chair', 'quantity': 2, 'cost': 5},
            {'materialName': 'Table', 'quantity': 1, 'cost': 3},
        ],
    }
    event.update(overrides)
    return event
