#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Database Migrations
===================

Indexes are (re)created on every start, which is a no-op when they exist.
Data migrations are numbered steps; the number of the last applied one is
kept in the ``meta`` collection so that every step runs just once.

To add a step, append a function taking no arguments to :data:`STEPS`.
Never reorder or remove existing steps.
"""


from pymongo import ASCENDING, DESCENDING

from agora.log import make_logger
from agora.mongo import db


__all__ = ['migrate', 'ensure_indexes', 'STEPS']


log = make_logger(__name__)


def ensure_indexes():
    db.users.create_index('email', unique=True, sparse=True)
    db.users.create_index('api_key', unique=True, sparse=True)
    db.users.create_index('reset_token', sparse=True)

    db.posts.create_index('postId', unique=True)
    db.posts.create_index([('forum', ASCENDING), ('topic', ASCENDING),
                           ('created', DESCENDING)])
    db.posts.create_index('favorites')

    for kind in ('topics', 'priorities', 'states', 'forums'):
        db[kind].create_index('slug', unique=True)


def backfill_post_scores():
    for post in db.posts.find({'score': {'$exists': False}},
                              {'upvotes': 1, 'downvotes': 1}):
        score = len(post.get('upvotes', [])) - len(post.get('downvotes', []))
        db.posts.update_one({'_id': post['_id']}, {'$set': {'score': score}})


def backfill_deleted_flag():
    db.posts.update_many({'deleted': {'$exists': False}},
                         {'$set': {'deleted': False}})


STEPS = [
    backfill_post_scores,
    backfill_deleted_flag,
]


def schema_version():
    doc = db.meta.find_one({'_id': 'schema'})
    return doc['version'] if doc else 0


def migrate(app):
    """
    Bring the database of the `app` up to date.
    """

    with app.app_context():
        ensure_indexes()

        version = schema_version()

        for number, step in enumerate(STEPS[version:], version + 1):
            log.info('Applying migration %i: %s', number, step.__name__)
            step()
            db.meta.update_one({'_id': 'schema'},
                               {'$set': {'version': number}},
                               upsert=True)

        return schema_version()


# vim:set sw=4 ts=4 et:
