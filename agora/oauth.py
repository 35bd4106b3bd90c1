#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
OAuth Providers
===============

Signing in with external accounts. The protocol itself is left to the
`Authlib`_ Flask client, which keeps the state (or the OAuth 1.0a request
token, for Twitter) in the session until the provider sends the user back.

.. _Authlib: https://docs.authlib.org/

Every provider is described by the settings of it's Authlib client, the
address of the user profile and a function that converts the provider's
idea of a user profile to ours:

.. code-block:: python

    {'id': '1234', 'email': 'joe@example.com', 'name': 'Joe',
     'location': 'Prague', 'website': '', 'picture': ''}

Providers are enabled by configuring both ``<PROVIDER>_CLIENT_ID`` and
``<PROVIDER>_CLIENT_SECRET``.
"""


import requests

from authlib.integrations.flask_client import OAuth, OAuthError
from flask import current_app
from flask_babel import gettext as _

from agora.exceptions import RemoteError
from agora.log import make_logger
from agora.models import Site


__all__ = ['Provider', 'PROVIDERS', 'get_provider', 'setup_oauth']


log = make_logger(__name__)

TIMEOUT = 10


def facebook_profile(data):
    return {
        'id': data['id'],
        'email': data.get('email'),
        'name': data.get('name', ''),
        'location': (data.get('location') or {}).get('name', ''),
        'website': data.get('link', ''),
        'picture': 'https://graph.facebook.com/%s/picture?type=large'
                   % data['id'],
    }


def google_profile(data):
    return {
        'id': data['sub'],
        'email': data.get('email'),
        'name': data.get('name', ''),
        'location': '',
        'website': '',
        'picture': data.get('picture', ''),
    }


def twitter_profile(data):
    return {
        'id': data['id_str'],
        'email': data.get('email'),
        'name': data.get('name', ''),
        'location': data.get('location') or '',
        'website': data.get('url') or '',
        'picture': data.get('profile_image_url_https', ''),
    }


def github_profile(data):
    return {
        'id': data['id'],
        'email': data.get('email'),
        'name': data.get('name') or data.get('login', ''),
        'location': data.get('location') or '',
        'website': data.get('blog') or '',
        'picture': data.get('avatar_url', ''),
    }


class Provider:
    """
    External account provider.

    :param name: Short name used in addresses and configuration.
    :param settings: Endpoints and options of the Authlib client.
        Those with ``request_token_url`` speak OAuth 1.0a.
    :param profile_url: Where to ask about the user.
    :param parse: Function converting the profile to our format.
    """

    def __init__(self, name, settings, profile_url, parse):
        self.name = name
        self.settings = settings
        self.profile_url = profile_url
        self.parse = parse

    @property
    def title(self):
        return self.name.title()

    @property
    def client(self):
        return current_app.oauth.create_client(self.name)

    def authorize_redirect(self, redirect_uri):
        """
        Send the user to the provider to grant us access.
        """

        try:
            return self.client.authorize_redirect(redirect_uri)
        except (OAuthError, requests.RequestException, ValueError) as exn:
            log.warning('%s authorization failed: %s', self.title, exn)
            raise RemoteError(_('Could not reach %(provider)s.',
                                provider=self.title))

    def authorize(self):
        """
        Finish the authorization the provider has sent the user back with.

        Returns the token along with the user profile in our format.
        """

        try:
            token = self.client.authorize_access_token()
        except OAuthError as exn:
            log.warning('%s refused to authorize: %s', self.title, exn)
            raise RemoteError(_('Sign in with %(provider)s has failed.',
                                provider=self.title))
        except (requests.RequestException, ValueError) as exn:
            log.warning('%s token request failed: %s', self.title, exn)
            raise RemoteError(_('Could not reach %(provider)s.',
                                provider=self.title))

        try:
            response = self.client.get(self.profile_url, token=token,
                                       timeout=TIMEOUT)
            response.raise_for_status()
            return token, self.parse(response.json())
        except (OAuthError, requests.RequestException,
                ValueError, KeyError) as exn:
            log.warning('%s profile request failed: %s', self.title, exn)
            raise RemoteError(_('Could not load your %(provider)s profile.',
                                provider=self.title))

    def credentials(self, token):
        """
        Access token and it's secret (for OAuth 1.0a) to keep with the user.
        """

        if 'request_token_url' in self.settings:
            return token.get('oauth_token'), token.get('oauth_token_secret')

        return token.get('access_token'), None


PROVIDERS = {
    'facebook': Provider(
        'facebook',
        settings={
            'authorize_url': 'https://www.facebook.com/v19.0/dialog/oauth',
            'access_token_url':
                'https://graph.facebook.com/v19.0/oauth/access_token',
            'client_kwargs': {
                'scope': 'email user_location',
                'token_endpoint_auth_method': 'client_secret_post',
            },
        },
        profile_url='https://graph.facebook.com/me'
                    '?fields=id,name,email,link,location',
        parse=facebook_profile,
    ),
    'google': Provider(
        'google',
        settings={
            'authorize_url': 'https://accounts.google.com/o/oauth2/v2/auth',
            'access_token_url': 'https://oauth2.googleapis.com/token',
            'client_kwargs': {
                'scope': 'profile email',
                'token_endpoint_auth_method': 'client_secret_post',
            },
        },
        profile_url='https://www.googleapis.com/oauth2/v3/userinfo',
        parse=google_profile,
    ),
    'twitter': Provider(
        'twitter',
        settings={
            'request_token_url': 'https://api.twitter.com/oauth/request_token',
            'access_token_url': 'https://api.twitter.com/oauth/access_token',
            'authorize_url': 'https://api.twitter.com/oauth/authenticate',
        },
        profile_url='https://api.twitter.com/1.1/account/'
                    'verify_credentials.json?include_email=true',
        parse=twitter_profile,
    ),
    'github': Provider(
        'github',
        settings={
            'authorize_url': 'https://github.com/login/oauth/authorize',
            'access_token_url': 'https://github.com/login/oauth/access_token',
            'client_kwargs': {
                'scope': 'user:email',
                'token_endpoint_auth_method': 'client_secret_post',
            },
        },
        profile_url='https://api.github.com/user',
        parse=github_profile,
    ),
}


def get_provider(name):
    return PROVIDERS[name]


def setup_oauth(app):
    """
    Register Authlib clients for the configured providers. Every
    application gets it's own registry, kept as ``app.oauth``.
    """

    app.oauth = OAuth(app)

    for name in Site.providers(app.config):
        prefix = name.upper()
        app.oauth.register(name,
                           client_id=app.config[prefix + '_CLIENT_ID'],
                           client_secret=app.config[prefix + '_CLIENT_SECRET'],
                           **PROVIDERS[name].settings)

    return app.oauth


# vim:set sw=4 ts=4 et:
