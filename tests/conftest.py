#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

import mongomock
import pytest

from agora.app import create_app
from agora.models import User


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'testing',
    'WTF_CSRF_ENABLED': False,
    'SESSION_TYPE': None,
    'MAIL_SUPPRESS_SEND': True,
    'MONGO_URI': 'mongodb://localhost/agora_test',
}

FORUMS = [
    {'name': 'General', 'description': 'Anything goes.'},
    {'name': 'Support', 'slug': 'help'},
]


@pytest.fixture
def mongo():
    client = mongomock.MongoClient('mongodb://localhost/agora_test')
    client.drop_database('agora_test')
    return client


@pytest.fixture
def make_app(mongo):
    """
    Factory creating applications with the given configuration overrides,
    all of them sharing the same in-memory database.
    """

    def factory(**overrides):
        return create_app(dict(TEST_CONFIG, **overrides), client=mongo)

    return factory


@pytest.fixture
def app(make_app):
    return make_app(API_ENABLED=True)


@pytest.fixture
def forum_app(make_app):
    return make_app(API_ENABLED=True, FORUMS=FORUMS)


@pytest.fixture
def client(app):
    return app.test_client()


def create_user(app, email='joe@example.com', password='secret', **fields):
    with app.app_context():
        return User.create(email, password, **fields)


def sign_in(client, email='joe@example.com', password='secret'):
    return client.post('/login', data={'email': email, 'password': password})


@pytest.fixture
def user(app):
    return create_user(app)


@pytest.fixture
def moderator(app):
    return create_user(app, 'mod@example.com', roles=['moderator'])


@pytest.fixture
def signed_in(client, user):
    sign_in(client)
    return client


@pytest.fixture
def api_key(app, user):
    with app.app_context():
        return User.find(user.id).generate_api_key()


# vim:set sw=4 ts=4 et:
