#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
OAuth Sign In
=============

``/auth/<provider>`` sends the user to the provider, who sends them back to
``/auth/<provider>/callback``. What happens then depends on who is there:

* A signed in user gets the external account linked to their own.
* A user who linked the external account before gets signed in.
* Nobody can sign up with an e-mail address that is already taken.
* Anyone else gets a new account.

Failures end up on the profile page, success goes back to wherever the user
was before signing in.
"""


from flask import flash, redirect, request, session
from flask_babel import lazy_gettext as _
from flask_login import current_user, login_user

from agora.exceptions import InvalidUsage
from agora.models import Site, User
from agora.oauth import get_provider


def callback_url(provider):
    return Site.url(request) + '/auth/%s/callback' % provider.name


def authenticate(name):
    provider = get_provider(name)

    try:
        return provider.authorize_redirect(callback_url(provider))
    except InvalidUsage as exn:
        flash(str(exn), 'error')
        return redirect('/profile')


def sign_in(provider, profile, token):
    """
    Resolve the external `profile` to one of our users, creating or linking
    the account as needed.
    """

    fields = {k: v for k, v in profile.items() if k not in ('id', 'email')}
    access_token, secret = provider.credentials(token)

    if current_user.is_authenticated:
        current_user.link(provider.name, profile['id'], access_token, fields,
                          token_secret=secret)
        flash(_('%(provider)s account has been linked.',
                provider=provider.title), 'ok')
        return current_user

    user = User.by_provider(provider.name, profile['id'])
    if user is not None:
        return user

    if profile.get('email') and User.by_email(profile['email']) is not None:
        raise InvalidUsage(_('There is already an account using this e-mail '
                             'address. Sign in to that account and link it '
                             'with %(provider)s from the account settings.',
                             provider=provider.title))

    user = User.create(profile.get('email'))
    user.link(provider.name, profile['id'], access_token, fields,
              token_secret=secret)
    return user


def callback(name):
    provider = get_provider(name)

    # OAuth 2.0 providers report an error, Twitter says "denied".
    if request.args.get('error') or request.args.get('denied'):
        flash(_('Sign in with %(provider)s has been cancelled.',
                provider=provider.title), 'error')
        return redirect('/profile')

    try:
        token, profile = provider.authorize()
        user = sign_in(provider, profile, token)
    except InvalidUsage as exn:
        flash(str(exn), 'error')
        return redirect('/profile')

    if not current_user.is_authenticated:
        login_user(user, remember=True)

    return redirect(session.pop('return_to', None) or '/profile')


# vim:set sw=4 ts=4 et:
