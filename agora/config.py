#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Configuration
=============

Defaults for all options the application understands. They are overridden
by a Python file named by the ``AGORA_SETTINGS`` environment variable and
then by ``AGORA_*`` environment variables:

.. code-block:: shell

    export AGORA_SETTINGS=/etc/agora/settings.py
    export AGORA_API_ENABLED=true
    export AGORA_MONGO_URI=mongodb://db.example.com/agora

Values of the environment variables are parsed as JSON when possible, so
lists of topics can be specified there as well.
"""


import os

from datetime import timedelta

from agora.log import make_logger


__all__ = ['DEFAULTS', 'load_config', 'listen_port']


log = make_logger(__name__)


WEEK = timedelta(weeks=1)


DEFAULTS = {
    'SITE_NAME': 'Agora',
    'SITE_URL': None,
    'SITE_HOST': False,
    'FORCE_SSL': False,
    'CONTACT_EMAIL': 'contact@localhost',

    'API_ENABLED': False,
    'POST_SLUG': 'posts',
    'POST_VOTING_ENABLED': True,
    'POSTS_PER_PAGE': 20,

    'TOPICS': [
        {'name': 'Discussion', 'icon': 'comments'},
        {'name': 'Questions', 'icon': 'question'},
        {'name': 'Ideas', 'icon': 'lightbulb'},
    ],
    'PRIORITIES': ['Low', 'Normal', 'High'],
    'STATES': ['Open', 'Answered', 'Closed'],
    'FORUMS': [],

    'MONGO_URI': 'mongodb://localhost:27017/agora',

    'SECRET_KEY': None,
    'SESSION_TYPE': 'mongodb',
    'SESSION_MONGODB_DB': None,
    'SESSION_MONGODB_COLLECT': 'sessions',
    'PERMANENT_SESSION_LIFETIME': 4 * WEEK,
    'SEND_FILE_MAX_AGE_DEFAULT': 4 * WEEK,

    'FACEBOOK_CLIENT_ID': None,
    'FACEBOOK_CLIENT_SECRET': None,
    'GOOGLE_CLIENT_ID': None,
    'GOOGLE_CLIENT_SECRET': None,
    'TWITTER_CLIENT_ID': None,
    'TWITTER_CLIENT_SECRET': None,
    'GITHUB_CLIENT_ID': None,
    'GITHUB_CLIENT_SECRET': None,

    'BABEL_DEFAULT_LOCALE': 'en',
    'BABEL_SUPPORTED_LOCALES': ['en'],

    'MAIL_DEFAULT_SENDER': 'noreply@localhost',
    'COMPRESS_MIMETYPES': [
        'text/html', 'text/css', 'text/javascript',
        'application/javascript', 'application/json',
    ],
}


def load_config(app, overrides=None):
    """
    Populate `app` configuration from defaults, the settings file,
    the environment and finally the `overrides` mapping.

    A ``SECRET_KEY`` is mandatory, unless the application runs in debug
    or testing mode. Then a random one is generated for the process.
    """

    app.config.from_mapping(DEFAULTS)
    app.config.from_envvar('AGORA_SETTINGS', silent=True)
    app.config.from_prefixed_env('AGORA')

    if overrides:
        app.config.from_mapping(overrides)

    if not app.config['SECRET_KEY']:
        if not (app.config.get('DEBUG') or app.config.get('TESTING')):
            raise RuntimeError('SECRET_KEY must be configured, sessions '
                               'cannot be shared or kept otherwise')

        log.warning('No SECRET_KEY configured, sessions will not '
                    'survive a restart')
        app.config['SECRET_KEY'] = os.urandom(24).hex()

    return app.config


def listen_port(environ=None):
    """
    Port to listen on. 3000 during development, 80 in production
    and whatever ``PORT`` says if it is set.
    """

    environ = os.environ if environ is None else environ

    if environ.get('PORT'):
        return int(environ['PORT'])

    if environ.get('AGORA_ENV') == 'production':
        return 80

    return 3000


# vim:set sw=4 ts=4 et:
