#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Authentication Guards
=====================

Decorators placed in front of views by the route table:

``login_required``
    Requires a signed in user. Browsers are sent to the login page,
    clients asking for JSON get a 401 response instead.

``api_key_required``
    Requires a valid API key, supplied either in the ``Api-Key`` header
    or in the ``apikey`` parameter. The key identifies the user on whose
    behalf the request is performed. The user is loaded by
    :func:`load_api_user` for that single request and never stored in the
    session.
"""


import functools

from flask import flash, jsonify, redirect, request, url_for
from flask_babel import lazy_gettext as _
from flask_login import current_user

from agora.models import User
from agora.site.base import wants_json


__all__ = ['login_required', 'api_key_required', 'api_key_from_request',
           'load_api_user', 'unauthorized']


def unauthorized():
    """
    Response for API requests lacking a valid API key.
    """

    return jsonify(errors=[{
        'param': 'apikey',
        'msg': str(_('Valid API Key required')),
    }]), 401


def api_key_from_request():
    key = request.headers.get('Api-Key')
    if key:
        return key

    if request.is_json:
        data = request.get_json(silent=True)
        if isinstance(data, dict) and data.get('apikey'):
            return data['apikey']

    return request.values.get('apikey')


def login_required(view):
    """View decorator that redirects anonymous users to the login page."""

    @functools.wraps(view)
    def wrapped_view(**kwargs):
        if not current_user.is_authenticated:
            if wants_json():
                return jsonify(errors=[{
                    'param': None,
                    'msg': str(_('You must be signed in to do that.')),
                }]), 401

            flash(_('Please sign in to access this page.'), 'info')
            return redirect(url_for('login'))

        return view(**kwargs)

    return wrapped_view


def api_key_required(view):
    """View decorator that only lets in requests with a valid API key."""

    @functools.wraps(view)
    def wrapped_view(**kwargs):
        if not current_user.is_authenticated:
            return unauthorized()

        return view(**kwargs)

    return wrapped_view


def load_api_user(request):
    """
    Request loader for Flask-Login. Identifies API clients by their key,
    everyone else is left to the session.
    """

    if not request.path.startswith('/api/'):
        return None

    return User.by_api_key(api_key_from_request())


# vim:set sw=4 ts=4 et:
