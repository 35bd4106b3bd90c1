#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

import logging

import pytest

from flask import Flask, request

from agora.config import DEFAULTS, listen_port, load_config
from agora import log as agora_log
from agora.log import log_requests, log_to_console, make_logger
from agora.models.site import Site


def test_defaults():
    app = Flask(__name__)
    load_config(app, {'TESTING': True})

    assert app.config['POST_SLUG'] == 'posts'
    assert app.config['API_ENABLED'] is False
    assert app.config['SECRET_KEY']


def test_secret_key_required(monkeypatch):
    monkeypatch.delenv('AGORA_SECRET_KEY', raising=False)
    monkeypatch.delenv('AGORA_SETTINGS', raising=False)
    app = Flask(__name__)

    with pytest.raises(RuntimeError):
        load_config(app)


def test_secret_key_generated_for_debugging():
    first, second = Flask(__name__), Flask(__name__)
    load_config(first, {'DEBUG': True})
    load_config(second, {'DEBUG': True})

    assert first.config['SECRET_KEY']
    assert first.config['SECRET_KEY'] != second.config['SECRET_KEY']


def test_overrides_win():
    app = Flask(__name__)
    load_config(app, {'SITE_NAME': 'Forum', 'SECRET_KEY': 'fixed'})

    assert app.config['SITE_NAME'] == 'Forum'
    assert app.config['SECRET_KEY'] == 'fixed'


def test_prefixed_environment(monkeypatch):
    monkeypatch.setenv('AGORA_API_ENABLED', 'true')
    monkeypatch.setenv('AGORA_FORUMS', '["General", "Help"]')
    monkeypatch.setenv('AGORA_SECRET_KEY', 'from-env')

    app = Flask(__name__)
    load_config(app)

    assert app.config['API_ENABLED'] is True
    assert app.config['FORUMS'] == ['General', 'Help']
    assert app.config['SECRET_KEY'] == 'from-env'


def test_settings_file(monkeypatch, tmp_path):
    settings = tmp_path / 'settings.py'
    settings.write_text("SITE_NAME = 'From File'\nSECRET_KEY = 'x'\n")
    monkeypatch.setenv('AGORA_SETTINGS', str(settings))

    app = Flask(__name__)
    load_config(app)

    assert app.config['SITE_NAME'] == 'From File'


def test_listen_port():
    assert listen_port({}) == 3000
    assert listen_port({'AGORA_ENV': 'production'}) == 80
    assert listen_port({'AGORA_ENV': 'production', 'PORT': '8080'}) == 8080


def test_site_options():
    config = dict(DEFAULTS, SITE_HOST='example.com', API_ENABLED=True,
                  POST_SLUG='/topics/')

    assert Site.options(config) == {
        'host': 'example.com',
        'ssl': False,
        'api': True,
        'post': {'slug': 'topics', 'voting': {'enabled': True}},
    }


def test_login_options():
    config = dict(DEFAULTS, FACEBOOK_CLIENT_ID='id',
                  FACEBOOK_CLIENT_SECRET='secret', GOOGLE_CLIENT_ID='id')

    assert Site.login_options('facebook', config)
    assert not Site.login_options('google', config)
    assert Site.providers(config) == ['facebook']


def test_site_url(make_app):
    app = make_app(SITE_URL='https://forum.example.com/')

    with app.test_request_context('/'):
        assert Site.url(request) == 'https://forum.example.com'


def test_log_to_console(monkeypatch):
    monkeypatch.setenv('LOGLEVEL', 'warning')
    log_to_console()

    assert logging.root.level == logging.WARNING
    assert make_logger('agora.test').handlers

    log_to_console(logging.INFO)
    assert logging.root.level == logging.INFO

    logging.root.removeHandler(agora_log.handler)


def test_request_log(make_app, caplog):
    app = make_app()
    log_requests(app)

    with caplog.at_level(logging.DEBUG, logger='agora.requests'):
        app.test_client().get('/search?q=x')

    assert 'GET /search?q=x 200' in caplog.text


# vim:set sw=4 ts=4 et:
