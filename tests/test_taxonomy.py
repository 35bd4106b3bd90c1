#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

import pytest

from conftest import create_user, sign_in

from agora.models import Configure, Taxonomy, load_taxonomy
from agora.models.common import slugify
from agora.models.taxonomy import normalize


def test_slugify():
    assert slugify('Bug Reports') == 'bug-reports'
    assert slugify('Žluťoučký kůň: úpěl ódy!') == 'zlutoucky-kun-upel-ody'
    assert slugify('  --Spaced__out--  ') == 'spaced-out'


def test_normalize():
    assert normalize('Bug Reports', 2) == {
        'name': 'Bug Reports',
        'slug': 'bug-reports',
        'description': '',
        'icon': '',
        'order': 2,
    }

    entry = normalize({'name': 'Help', 'slug': 'support', 'icon': 'q'}, 0)
    assert entry['slug'] == 'support'
    assert entry['icon'] == 'q'

    with pytest.raises(ValueError):
        normalize({'slug': 'nameless'}, 0)


def test_sync_is_idempotent(app):
    with app.app_context():
        Configure.topics(['Alpha', 'Beta'])
        Configure.topics(['Beta', 'Alpha'])

        stored = list(app.mongo.topics.find({'slug': {'$in': ['alpha',
                                                                 'beta']}}))
        assert len(stored) == 2

        result = Configure.topics(['Beta', 'Alpha'])
        assert [t['slug'] for t in result] == ['beta', 'alpha']
        assert [t['order'] for t in result] == [0, 1]


def test_load_taxonomy(make_app):
    app = make_app(TOPICS=['News', {'name': 'Q&A', 'slug': 'qa'}],
                   STATES=['New', 'Done'])

    taxonomy = app.taxonomy
    assert [t['slug'] for t in taxonomy.topics] == ['news', 'qa']
    assert [s['slug'] for s in taxonomy.states] == ['new', 'done']
    assert not taxonomy.has_forums()

    assert load_taxonomy(app) is app.taxonomy


def test_lookups():
    taxonomy = Taxonomy(
        topics=[normalize('Ideas', 0)],
        forums=[normalize('General', 0)],
    )

    assert taxonomy.topic('ideas')['name'] == 'Ideas'
    assert taxonomy.topic('general') is None
    assert taxonomy.forum('general')['name'] == 'General'
    assert taxonomy.has_forums()
    assert taxonomy.choices('topics') == [('ideas', 'Ideas')]
    assert taxonomy.to_json('forums') == [{
        'name': 'General', 'slug': 'general', 'description': '', 'icon': '',
    }]


def test_new_state_is_first_configured(make_app):
    app = make_app(STATES=['Triage', 'Open'])
    client = app.test_client()
    create_user(app)
    sign_in(client)

    client.post('/new', data={'title': 'Bug', 'topic': 'discussion'})

    with app.app_context():
        assert app.mongo.posts.find_one()['state'] == 'triage'


# vim:set sw=4 ts=4 et:
