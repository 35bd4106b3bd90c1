#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Taxonomy
========

Topics, priorities, states and forums are configured by the site operator
and copied into the database when the application starts. Posts refer to
them using their slugs.

Configured entries are either plain names or mappings:

.. code-block:: python

    TOPICS = [
        'Discussion',
        {'name': 'Bug Reports', 'slug': 'bugs', 'icon': 'bug'},
    ]

The loaded taxonomy is kept on the application as ``app.taxonomy``.
"""


from agora.log import make_logger
from agora.models.common import slugify
from agora.mongo import db


__all__ = ['Taxonomy', 'Configure', 'load_taxonomy']


log = make_logger(__name__)


def normalize(entry, order):
    if isinstance(entry, str):
        entry = {'name': entry}

    if not entry.get('name'):
        raise ValueError('taxonomy entry without a name: %r' % (entry,))

    return {
        'name': entry['name'],
        'slug': entry.get('slug') or slugify(entry['name']),
        'description': entry.get('description', ''),
        'icon': entry.get('icon', ''),
        'order': order,
    }


class Configure:
    """
    Store configured taxonomy entries, returning them in configured order.
    """

    @staticmethod
    def sync(kind, entries):
        collection = db[kind]
        result = []

        for order, entry in enumerate(entries or []):
            doc = normalize(entry, order)
            collection.update_one({'slug': doc['slug']},
                                  {'$set': doc},
                                  upsert=True)
            result.append(collection.find_one({'slug': doc['slug']}))

        log.debug('Configured %i %s', len(result), kind)
        return result

    @classmethod
    def topics(cls, entries):
        return cls.sync('topics', entries)

    @classmethod
    def priorities(cls, entries):
        return cls.sync('priorities', entries)

    @classmethod
    def states(cls, entries):
        return cls.sync('states', entries)

    @classmethod
    def forums(cls, entries):
        return cls.sync('forums', entries)


class Taxonomy:
    """
    Loaded taxonomy with lookups by slug.
    """

    def __init__(self, topics=(), priorities=(), states=(), forums=()):
        self.topics = list(topics)
        self.priorities = list(priorities)
        self.states = list(states)
        self.forums = list(forums)

    def find(self, kind, slug):
        for entry in getattr(self, kind):
            if entry['slug'] == slug:
                return entry

        return None

    def topic(self, slug):
        return self.find('topics', slug)

    def forum(self, slug):
        return self.find('forums', slug)

    def has_forums(self):
        return len(self.forums) > 0

    def choices(self, kind):
        return [(entry['slug'], entry['name']) for entry in getattr(self, kind)]

    def to_json(self, kind):
        return [{'name': e['name'], 'slug': e['slug'],
                 'description': e['description'], 'icon': e['icon']}
                for e in getattr(self, kind)]


def load_taxonomy(app):
    """
    Copy configured taxonomy into the database and remember it.
    Needs to run before the content routes can be registered.
    """

    with app.app_context():
        app.taxonomy = Taxonomy(
            topics=Configure.topics(app.config['TOPICS']),
            priorities=Configure.priorities(app.config['PRIORITIES']),
            states=Configure.states(app.config['STATES']),
            forums=Configure.forums(app.config['FORUMS']),
        )

    log.info('Loaded %i topics and %i forums',
             len(app.taxonomy.topics), len(app.taxonomy.forums))

    return app.taxonomy


# vim:set sw=4 ts=4 et:
