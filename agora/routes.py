#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Route Table
===========

All addresses of the site are registered here, in four groups:

:func:`register_routes`
    Authentication, account management, content actions and static pages.
    Always present, apart from voting (``POST_VOTING_ENABLED``) and the API
    key generation (``API_ENABLED``).

:func:`create_api_blueprint`
    JSON API under ``/api``, registered only with ``API_ENABLED``. Every
    endpoint requires an API key and no CSRF token.

:func:`register_oauth_routes`
    Sign in with external accounts, for every provider with credentials.

:func:`register_content_routes`
    Post listings, editors and posts under ``POST_SLUG``. When there are no
    forums, posts live under their topics, i.e. ``/posts/<topic>/<id>``.
    With forums, topics live under forums, i.e.
    ``/posts/<forum>/<topic>/<id>``. Needs the taxonomy to be loaded.

Guards are applied per route, so the same view can be registered both for
signed in users and for API clients.
"""


from flask import Blueprint

from agora.log import make_logger
from agora.models import Site
from agora.views import contact, forums, home, oauth, posts, user
from agora.views.auth import api_key_required, login_required, unauthorized


__all__ = ['register_routes', 'create_api_blueprint',
           'register_oauth_routes', 'register_content_routes']


log = make_logger(__name__)


def guarded(view, *guards):
    for guard in reversed(guards):
        view = guard(view)

    return view


def add(target, rule, endpoint, view, *guards, methods=('GET',)):
    target.add_url_rule(rule, endpoint, guarded(view, *guards),
                        methods=list(methods))


def register_routes(app):
    options = Site.options(app.config)

    add(app, '/', 'index', home.index)
    add(app, '/login', 'login', user.get_login)
    add(app, '/login', 'post_login', user.post_login, methods=['POST'])
    add(app, '/logout', 'logout', user.logout)
    add(app, '/reset-password', 'reset_password', user.get_reset_password)
    add(app, '/reset-password', 'post_reset_password',
        user.post_reset_password, methods=['POST'])
    add(app, '/change-password/<token>', 'change_password',
        user.get_change_password)
    add(app, '/change-password/<token>', 'post_change_password',
        user.post_change_password, methods=['POST'])
    add(app, '/signup', 'signup', user.get_signup)
    add(app, '/signup', 'post_signup', user.post_signup, methods=['POST'])
    add(app, '/contact', 'contact', contact.get_contact)
    add(app, '/contact', 'post_contact', contact.post_contact,
        methods=['POST'])

    add(app, '/profile', 'profile', user.get_account, login_required)
    add(app, '/account', 'account', user.get_account, login_required)
    add(app, '/account/profile', 'account_profile', user.get_account,
        login_required)
    add(app, '/account/profile', 'post_account_profile',
        user.post_update_profile, login_required, methods=['POST'])
    add(app, '/account/verify', 'account_verify', user.get_account_verify,
        login_required)
    add(app, '/account/verify', 'post_account_verify',
        user.post_account_verify, login_required, methods=['POST'])
    add(app, '/account/verify/<token>', 'account_verify_token',
        user.get_account_verify_token, login_required)

    if options['api']:
        add(app, '/account/profile/apikey', 'account_apikey',
            user.post_api_key, login_required, methods=['POST'])

    add(app, '/account/password', 'account_password',
        user.post_update_password, login_required, methods=['POST'])
    add(app, '/account/delete', 'account_delete', user.post_delete_account,
        login_required, methods=['POST'])
    add(app, '/account/unlink/<provider>', 'account_unlink',
        user.get_oauth_unlink, login_required)

    add(app, '/new', 'new_post', posts.get_new_post, login_required)
    add(app, '/new', 'post_new_post', posts.post_new_post, login_required,
        methods=['POST'])
    add(app, '/view/<int:id>', 'view_post', posts.get_post_by_post_id)
    add(app, '/search', 'search', posts.get_search)

    if options['post']['voting']['enabled']:
        add(app, '/upvote/<int:id>', 'upvote', posts.post_upvote,
            login_required, methods=['POST'])
        add(app, '/downvote/<int:id>', 'downvote', posts.post_downvote,
            login_required, methods=['POST'])
        add(app, '/unvote/<int:id>', 'unvote', posts.post_unvote,
            login_required, methods=['POST'])

    add(app, '/favorite/<int:id>', 'favorite', posts.post_favorite,
        login_required, methods=['POST'])
    add(app, '/unfavorite/<int:id>', 'unfavorite', posts.post_unfavorite,
        login_required, methods=['POST'])
    add(app, '/comments/add/<int:id>', 'add_comment', posts.post_add_comment,
        login_required, methods=['POST'])


def create_api_blueprint(app):
    """
    Build the API blueprint. Content is the same as the web views serve,
    only represented as JSON.
    """

    options = Site.options(app.config)
    api = Blueprint('api', __name__, url_prefix='/api')

    add(api, '/new', 'new_post', posts.post_new_post, api_key_required,
        methods=['POST', 'PUT'])
    add(api, '/view/<int:id>', 'view_post', posts.get_post, api_key_required)
    add(api, '/topics', 'topics', posts.get_topics, api_key_required)
    add(api, '/forums', 'forums', forums.get_forums, api_key_required)
    add(api, '/states', 'states', posts.get_states, api_key_required)
    add(api, '/priorities', 'priorities', posts.get_priorities,
        api_key_required)
    add(api, '/edit/<int:id>', 'edit_post', posts.post_edit_post,
        api_key_required, methods=['POST', 'PUT'])
    add(api, '/delete/<int:id>', 'delete_post', posts.post_delete_post,
        api_key_required, methods=['POST', 'DELETE'])
    add(api, '/undelete/<int:id>', 'undelete_post', posts.post_undelete_post,
        api_key_required, methods=['POST'])

    if options['post']['voting']['enabled']:
        add(api, '/upvote/<int:id>', 'upvote', posts.post_upvote,
            api_key_required, methods=['POST'])
        add(api, '/downvote/<int:id>', 'downvote', posts.post_downvote,
            api_key_required, methods=['POST'])
        add(api, '/unvote/<int:id>', 'unvote', posts.post_unvote,
            api_key_required, methods=['POST'])

    add(api, '/favorite/<int:id>', 'favorite', posts.post_favorite,
        api_key_required, methods=['POST'])
    add(api, '/unfavorite/<int:id>', 'unfavorite', posts.post_unfavorite,
        api_key_required, methods=['POST'])
    add(api, '/comments/add/<int:id>', 'add_comment', posts.post_add_comment,
        api_key_required, methods=['POST'])
    add(api, '/search', 'search', posts.get_search, api_key_required)
    add(api, '/unauthorized', 'unauthorized', unauthorized)

    return api


def register_oauth_routes(app):
    for provider in Site.providers(app.config):
        log.info('Enabling sign in with %s', provider.title())

        app.add_url_rule('/auth/' + provider, 'auth_' + provider,
                         oauth.authenticate, defaults={'name': provider})
        app.add_url_rule('/auth/%s/callback' % provider,
                         'auth_%s_callback' % provider,
                         oauth.callback, defaults={'name': provider})


def register_content_routes(app, taxonomy):
    """
    Register post routes shaped according to the `taxonomy`.

    Literal segments such as ``new`` or ``edit`` always take precedence
    over the slug placeholders and post identifiers are numeric, so a topic
    called ``new`` would not be reachable. Avoid it.
    """

    base = '/' + Site.options(app.config)['post']['slug']

    if not taxonomy.has_forums():
        log.info('No forums configured, posts are listed by topic')

        add(app, base, 'posts', posts.get_posts)
        add(app, base + '/new', 'posts_new', posts.get_new_post,
            login_required)
        add(app, base + '/new', 'posts_post_new', posts.post_new_post,
            login_required, methods=['POST'])
        prefix = base + '/<topic>'

    else:
        log.info('Posts are listed by forum and topic')

        add(app, base, 'posts', forums.get_forums)
        add(app, base + '/<forum>', 'forum_posts', posts.get_posts)
        add(app, base + '/<forum>/new', 'forum_new', posts.get_new_post,
            login_required)
        add(app, base + '/<forum>/new', 'forum_post_new',
            posts.post_new_post, login_required, methods=['POST'])
        prefix = base + '/<forum>/<topic>'

    add(app, prefix, 'topic_posts', posts.get_posts)
    add(app, prefix + '/new', 'topic_new', posts.get_new_post,
        login_required)
    add(app, prefix + '/new', 'topic_post_new', posts.post_new_post,
        login_required, methods=['POST'])
    add(app, prefix + '/edit/<int:id>', 'edit_post', posts.get_edit_post,
        login_required)
    add(app, prefix + '/edit/<int:id>', 'post_edit_post',
        posts.post_edit_post, login_required, methods=['POST'])
    add(app, prefix + '/delete/<int:id>', 'delete_post',
        posts.post_delete_post, login_required, methods=['POST'])
    add(app, prefix + '/undelete/<int:id>', 'undelete_post',
        posts.post_undelete_post, login_required, methods=['POST'])
    add(app, prefix + '/<int:id>/<slug>', 'post', posts.get_post)
    add(app, prefix + '/<int:id>', 'post_short', posts.get_post)


# vim:set sw=4 ts=4 et:
