#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Base Site
=========

Integrates following third-party libraries:

* `Flask-Babel`_ as the localization system.
* `Markdown`_ and `bleach`_ to render user supplied content.
* `humanize`_ to present dates in a friendly way.

.. _Flask-Babel: https://python-babel.github.io/flask-babel/
.. _Markdown: https://python-markdown.github.io/
.. _bleach: https://bleach.readthedocs.io/
.. _humanize: https://python-humanize.readthedocs.io/

Usage:

.. code-block:: python

    from flask import Flask
    from agora.site.base import setup_base

    app = Flask(__name__)
    setup_base(app)
"""


import traceback

from datetime import datetime, timezone

from bson.errors import InvalidId
from flask import Blueprint, request, render_template, jsonify, current_app
from flask_babel import Babel, get_locale, lazy_gettext as _
from werkzeug.exceptions import HTTPException, NotFound

from bleach import clean, linkify
from markdown import markdown
from humanize import naturaltime
from markupsafe import Markup, escape

from agora.log import make_logger
from agora.exceptions import InvalidUsage, DocumentNotFound


__all__ = ['setup_base', 'wants_json', 'is_not_found']


log = make_logger(__name__)
base = Blueprint('base', __name__,
                 static_folder='static',
                 static_url_path='/static/base',
                 template_folder='templates')

MARKDOWN_TAGS = frozenset([
    'a', 'abbr', 'b', 'blockquote', 'br', 'code', 'em', 'h1', 'h2', 'h3',
    'h4', 'h5', 'h6', 'hr', 'i', 'li', 'ol', 'p', 'pre', 'strong', 'ul',
])

MARKDOWN_ATTRIBUTES = {
    'a': ['href', 'title'],
    'abbr': ['title'],
}

MARKDOWN_PROTOCOLS = frozenset(['http', 'https', 'mailto'])


def wants_json():
    """
    Determine whether should the response be a JSON document.

    API requests always get JSON. Other requests get it when they
    prefer it over HTML, such as the AJAX voting requests do.
    """

    if request.path.startswith('/api/'):
        return True

    best = request.accept_mimetypes.best_match([
        'text/html',
        'application/json',
    ])

    return best == 'application/json'


@base.app_template_filter('datetime')
def format_datetime(value):
    if value is not None:
        return value.strftime('%Y-%m-%d %H:%M:%S')


@base.app_template_filter('ago')
def format_ago(value):
    """
    Present a timestamp relative to now, i.e. ``3 hours ago``.
    """

    if value is None:
        return ''

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return naturaltime(datetime.now(timezone.utc) - value)


@base.app_template_filter('markdown')
def render_markdown(value):
    """
    Render user supplied Markdown. The resulting HTML is what gets
    sanitized, so that links Markdown produces are checked as well.
    """

    if value is not None:
        html = clean(markdown(value, output_format='html'),
                     tags=MARKDOWN_TAGS,
                     attributes=MARKDOWN_ATTRIBUTES,
                     protocols=MARKDOWN_PROTOCOLS)
        return Markup(linkify(html))


@base.app_template_filter('linkify')
def render_linkify(value):
    """
    Escape the content while making hyperlinks work.
    """

    if value is not None:
        return Markup(linkify(str(escape(value))))


@base.app_template_filter('to_alert')
def category_to_alert(category):
    return {
        'ok': 'alert-success',
        'info': 'alert-info',
        'message': 'alert-info',
        'warning': 'alert-warning',
        'error': 'alert-danger',
    }.get(category, 'alert-info')


def is_not_found(exn):
    """
    Errors that mean the client asked for a document we do not have.
    Malformed document identifiers fall into the same category.
    """

    if isinstance(exn, (DocumentNotFound, InvalidId, NotFound)):
        return True

    return 'not found' in str(exn).lower()


@base.app_errorhandler(InvalidUsage)
def usage_error(exn):
    """
    Treat usage errors differently.
    They are, after all, intended for the end users.
    """

    if is_not_found(exn):
        return not_found(exn)

    if wants_json():
        return jsonify(exn.to_dict()), exn.status

    return render_template('usage.html', error=exn), exn.status


@base.app_errorhandler(Exception)
def system_error(exn):
    """
    Log system errors and present a generic error page to the user.

    Missing documents and malformed identifiers are reported as 404 instead
    and other HTTP errors (such as failed CSRF checks) pass through.
    """

    if is_not_found(exn):
        return not_found(exn)

    if isinstance(exn, HTTPException):
        return exn

    log.exception(exn)

    if wants_json():
        return jsonify(error=str(_('Internal server error.')), status=500), 500

    details = None
    if current_app.debug:
        details = ''.join(traceback.format_exception(exn))

    return render_template('error.html', error=details), 500


@base.app_errorhandler(404)
def not_found(exn):
    """
    Return our customized page instead of the ugly default.
    """

    if wants_json():
        return jsonify(error=str(_('Not found.')), status=404,
                       url=request.path), 404

    return render_template('not-found.html', url=request.path), 404


def setup_babel(app):
    """
    Select the locale using the ``lang`` argument or cookie, then the
    ``Accept-Language`` header. Unsupported locales silently fall back to
    the default one.
    """

    def select_locale():
        default = app.config.get('BABEL_DEFAULT_LOCALE', 'en')
        supported = app.config.get('BABEL_SUPPORTED_LOCALES', [default])

        for lang in (request.args.get('lang'), request.cookies.get('lang')):
            if lang in supported:
                return lang

        return request.accept_languages.best_match(supported) or default

    babel = Babel(app, locale_selector=select_locale)
    app.add_template_global(get_locale, 'get_locale')

    @app.after_request
    def insert_lang_cookie(response):
        """
        Install current language cookie after every request.
        """

        lang = request.args.get('lang')
        if lang in app.config.get('BABEL_SUPPORTED_LOCALES', []):
            response.set_cookie('lang', lang)

        return response

    return babel


def setup_base(app):
    """
    Install some generally useful template filters, error handlers
    and a localization system.

    .. rubric:: Template Filters

    ``datetime``
        Format a datetime object with the time portion.

    ``ago``
        Format a datetime object relative to the current time.

    ``markdown``
        Render sanitized Markdown with clickable links.

    ``linkify``
        Escape plain text, but make the links in it clickable.

    ``to_alert``
        Convert flash message categories to alert classes.

    .. rubric:: Exception Handlers

    ``InvalidUsage``
        Handler that presents the error to the user.

    ``Exception``
        Default handler that hides the details from the user but logs the
        traceback instead. Treats missing documents as 404.

    ``404``
        Custom handler for HTTP 404 Not Found statuses that presents the
        situation to the user in a friendly way.
    """

    setup_babel(app)
    app.register_blueprint(base)


# vim:set sw=4 ts=4 et:
