#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Application
===========

Assembles the whole site. The order matters: middleware runs before any
of the routes, the API is registered before the OAuth routes and the
content routes come last, because their shape depends on the taxonomy
found in the database.

.. code-block:: python

    from agora.app import create_app

    app = create_app({'API_ENABLED': True})
"""


from flask import Flask
from flask_compress import Compress
from flask_login import LoginManager
from flask_session import Session
from flask_wtf.csrf import CSRFProtect

from agora.config import load_config
from agora.log import log_requests, make_logger
from agora.mail import setup_mail
from agora.migrations import migrate
from agora.models import Site, User, load_taxonomy
from agora.mongo import setup_mongo
from agora.oauth import setup_oauth
from agora.rbac import setup_access
from agora.routes import create_api_blueprint, register_content_routes, \
                         register_oauth_routes, register_routes
from agora.site.base import setup_base
from agora.site.middleware import setup_middleware
from agora.views.auth import load_api_user


__all__ = ['create_app']


log = make_logger(__name__)


def setup_login(app):
    login_manager = LoginManager(app)
    login_manager.login_view = 'login'
    login_manager.user_loader(User.load)
    login_manager.request_loader(load_api_user)
    return login_manager


def setup_session(app, client):
    """
    Keep sessions in the database, unless ``SESSION_TYPE`` is empty.
    Then the signed cookie sessions Flask has built in are used.
    """

    if not app.config.get('SESSION_TYPE'):
        log.debug('Using cookie sessions')
        return None

    if app.config['SESSION_TYPE'] == 'mongodb':
        app.config['SESSION_MONGODB'] = client
        app.config['SESSION_MONGODB_DB'] = \
            app.config.get('SESSION_MONGODB_DB') or app.mongo.name

    return Session(app)


def create_app(config=None, client=None):
    """
    Create the application.

    :param config: Mapping with options overriding the configuration.
    :param client: MongoDB client to use instead of connecting to
        the ``MONGO_URI``.
    """

    app = Flask(__name__)
    load_config(app, config)

    if app.debug:
        log_requests(app)

    Compress(app)
    setup_mongo(app, client)
    setup_session(app, app.mongo_client)

    csrf = CSRFProtect(app)
    setup_login(app)
    setup_mail(app)
    setup_access(app)
    migrate(app)

    setup_base(app)
    setup_middleware(app)

    register_routes(app)

    if Site.options(app.config)['api']:
        log.info('API enabled at /api')
        api = create_api_blueprint(app)
        csrf.exempt(api)
        app.register_blueprint(api)

    setup_oauth(app)
    register_oauth_routes(app)

    taxonomy = load_taxonomy(app)
    register_content_routes(app, taxonomy)

    return app


# vim:set sw=4 ts=4 et:
