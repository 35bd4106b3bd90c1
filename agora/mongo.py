#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
MongoDB Integration
===================

Models access the database through the :data:`db` proxy that points to the
database of the current application:

.. code-block:: python

    from agora.mongo import db

    post = db.posts.find_one({'postId': 42})
"""


from pymongo import MongoClient, ReturnDocument
from pymongo.errors import ConfigurationError, PyMongoError
from werkzeug.local import LocalProxy
from flask import current_app

from agora.log import make_logger


__all__ = ['setup_mongo', 'db', 'next_sequence', 'ping']


log = make_logger(__name__)

db = LocalProxy(lambda: current_app.mongo)


def setup_mongo(app, client=None):
    """
    Register MongoDB with a Flask application.

    Expects following Flask configuration options:

    ``MONGO_URI = 'mongodb://localhost:27017/agora'``
        Database URI to connect to. The path names the database.

    :param app: The Flask application to augment.
    :param client: Already constructed client to use instead of connecting
        to the ``MONGO_URI``. Tests use it to supply an in-memory database.
    """

    app.config.setdefault('MONGO_URI', 'mongodb://localhost:27017/agora')

    if client is None:
        client = MongoClient(app.config['MONGO_URI'], connect=False)

    try:
        app.mongo = client.get_default_database()
    except ConfigurationError:
        # The URI does not name any database.
        app.mongo = client['agora']

    app.mongo_client = client

    log.info('Using database %r', app.mongo.name)
    return app.mongo


def next_sequence(name):
    """
    Atomically allocate the next integer in the named sequence.
    """

    counter = db.counters.find_one_and_update(
        {'_id': name},
        {'$inc': {'seq': 1}},
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )

    return counter['seq']


def ping(app):
    """
    Check that the database is reachable, logging the failure if not.
    """

    try:
        app.mongo_client.admin.command('ping')
        return True
    except PyMongoError as exn:
        log.error('MongoDB connection error, make sure MongoDB is running: %s',
                  exn)
        return False


# vim:set sw=4 ts=4 et:
