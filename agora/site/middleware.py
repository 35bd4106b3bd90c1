#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Request Middleware
==================

Hooks that run for every request, installed in this order:

1. Template locals (site, user, taxonomy and so on).
2. Remembering where to return the user after they sign in.
3. Answering ``OPTIONS`` requests right away.
4. Redirecting to the canonical host, if ``SITE_HOST`` is configured.
5. Redirecting to HTTPS, if ``FORCE_SSL`` is enabled.

With ``API_ENABLED``, the application is also wrapped in
:class:`CookielessPrefix`, so that API requests authenticate with their
key alone and never read or replace a browser session.
"""


import re

from flask import current_app, g, redirect, request, session
from flask_login import current_user

from agora.log import make_logger
from agora.models import Post, Site
from agora.site.base import render_linkify


__all__ = ['setup_middleware', 'remember_destination', 'CookielessPrefix']


log = make_logger(__name__)

# First path segments that never make a good destination after signing in.
IGNORED_DESTINATIONS = re.compile(
    r'auth|login|css|images|logout|signup|js|fonts|favicon|static', re.I)


def topic_url(topic, forum=None):
    return Post.listing_url(forum['slug'] if forum else None, topic['slug'])


def template_locals():
    taxonomy = current_app.taxonomy

    return {
        'title': Site.name(),
        'site': Site,
        'user': current_user,
        'path': request.path,
        'url': Site.url(request) + request.path,
        'linkify': render_linkify,
        'forums': taxonomy.forums,
        'topics': taxonomy.topics,
        'priorities': taxonomy.priorities,
        'states': taxonomy.states,
        'new_post_url': '/new',
        'post_url': Post.url,
        'post_action_url': Post.action_url,
        'topic_url': topic_url,
    }


class CookielessPrefix:
    """
    WSGI middleware that drops the cookies of requests under the `prefix`.
    Such requests start with an empty session and cannot see the remember
    cookie, so they are authenticated by other means only.
    """

    def __init__(self, app, prefix):
        self.app = app
        self.prefix = prefix

    def __call__(self, environ, start_response):
        if environ.get('PATH_INFO', '').startswith(self.prefix):
            environ = dict(environ)
            environ.pop('HTTP_COOKIE', None)

        return self.app(environ, start_response)


def mark_api_request():
    g.api = request.path.startswith('/api/')


def remember_destination():
    """
    Remember the page the user is on, so that we can get them back there
    once they sign in.
    """

    if request.method != 'GET' or g.api:
        return

    segment = request.path.split('/')[1]
    if IGNORED_DESTINATIONS.search(segment):
        return

    if request.path == '/account/password':
        return

    # Ignore AJAX requests (voting, favoriting, search type ahead).
    if request.headers.get('X-Requested-With') == 'XMLHttpRequest':
        return

    if 'json' in request.headers.get('Accept', ''):
        return

    session['return_to'] = request.path


def answer_options():
    if request.method == 'OPTIONS':
        return current_app.response_class(status=200)


def setup_host_redirect(app, host, ssl):
    scheme = 'https' if ssl else 'http'
    log.info('Requests to other hosts will be redirected to %s://%s',
             scheme, host)

    @app.before_request
    def redirect_to_host():
        if request.host == host:
            return None

        return redirect('%s://%s%s' % (scheme, host, request.full_path
                                       .rstrip('?')))


def setup_ssl_redirect(app):
    log.info('All requests will be redirected to HTTPS addresses')

    @app.before_request
    def redirect_to_https():
        if request.headers.get('X-Forwarded-Proto') == 'https':
            return None

        return redirect('https://%s%s' % (request.host, request.full_path
                                          .rstrip('?')))


def setup_middleware(app):
    app.context_processor(template_locals)
    app.before_request(mark_api_request)
    app.before_request(remember_destination)
    app.before_request(answer_options)

    options = Site.options(app.config)

    if options['api']:
        app.wsgi_app = CookielessPrefix(app.wsgi_app, '/api/')

    if options['host']:
        setup_host_redirect(app, options['host'], options['ssl'])

    if options['ssl']:
        setup_ssl_redirect(app)


# vim:set sw=4 ts=4 et:
