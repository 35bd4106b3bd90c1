#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Site
====

Read-only view of the site-wide configuration, exposed to all templates
as ``site``.
"""


from flask import current_app


__all__ = ['Site', 'PROVIDERS']


PROVIDERS = ('facebook', 'google', 'twitter', 'github')


class Site:
    @staticmethod
    def name():
        return current_app.config['SITE_NAME']

    @staticmethod
    def url(request):
        """
        Base URL of the site without the trailing slash.
        Derived from the request unless configured explicitly.
        """

        url = current_app.config.get('SITE_URL')
        if url:
            return url.rstrip('/')

        return request.host_url.rstrip('/')

    @staticmethod
    def options(config=None):
        config = config or current_app.config

        return {
            'host': config.get('SITE_HOST') or False,
            'ssl': bool(config.get('FORCE_SSL')),
            'api': bool(config.get('API_ENABLED')),
            'post': {
                'slug': config.get('POST_SLUG', 'posts').strip('/'),
                'voting': {
                    'enabled': bool(config.get('POST_VOTING_ENABLED')),
                },
            },
        }

    @staticmethod
    def login_options(provider, config=None):
        """
        Determine whether is signing in with the `provider` configured.
        """

        config = config or current_app.config
        prefix = provider.upper()

        return bool(config.get(prefix + '_CLIENT_ID') and
                    config.get(prefix + '_CLIENT_SECRET'))

    @classmethod
    def providers(cls, config=None):
        return [p for p in PROVIDERS if cls.login_options(p, config)]


# vim:set sw=4 ts=4 et:
