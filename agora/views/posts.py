#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Post Views
==========

The same views serve the web pages, the AJAX calls made by those pages
(voting, favoriting) and the API. They respond with JSON whenever
:func:`~agora.site.base.wants_json` says so.

Views that are reachable through the content routes receive the ``forum``
and ``topic`` slugs from the address. The slugs are checked against the
taxonomy and unknown ones result in 404.
"""


from flask import current_app, flash, jsonify, redirect, render_template, \
                  request
from flask_babel import lazy_gettext as _
from flask_login import current_user

from agora.exceptions import DocumentNotFound
from agora.forms import CommentForm, PostForm, SearchForm
from agora.log import make_logger
from agora.models import Post
from agora.models.post import SORTS
from agora.mongo import db
from agora.site.base import wants_json
from agora.site.pagination import Page


log = make_logger(__name__)


def resolve(forum=None, topic=None):
    """
    Look up taxonomy entries named in the address.
    """

    taxonomy = current_app.taxonomy
    found = {'forum': None, 'topic': None}

    if forum is not None:
        found['forum'] = taxonomy.forum(forum)
        if found['forum'] is None:
            raise DocumentNotFound(_('Forum not found.'), {'forum': forum})

    if topic is not None:
        found['topic'] = taxonomy.topic(topic)
        if found['topic'] is None:
            raise DocumentNotFound(_('Topic not found.'), {'topic': topic})

    return found


def new_post_url(forum=None, topic=None):
    if forum is None and topic is None:
        return '/new'

    return Post.listing_url(forum, topic) + '/new'


def form_errors(form):
    return jsonify(errors=form.all_errors()), 400


def get_posts(forum=None, topic=None):
    context = resolve(forum, topic)

    sort = request.args.get('sort', 'new')
    if sort not in SORTS:
        sort = 'new'

    query = Post.query(forum=forum, topic=topic,
                       state=request.args.get('state'),
                       priority=request.args.get('priority'))

    page = Page(db.posts, query, sort=SORTS[sort],
                size=current_app.config['POSTS_PER_PAGE'])

    if wants_json():
        return jsonify(posts=[Post.to_json(p, current_user)
                              for p in page.items],
                       **page.to_dict())

    return render_template('posts/list.html',
                           page=page,
                           posts=Post.with_authors(page.items),
                           sort=sort,
                           new_post_url=new_post_url(forum, topic),
                           **context)


def get_post(id, forum=None, topic=None, slug=None):
    post = Post.get(id, current_user)

    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    canonical = Post.url(post)
    if request.path != canonical and not canonical.startswith('/view/'):
        return redirect(canonical, 301)

    return render_post(post)


def render_post(post, comment_form=None):
    Post.with_authors([post])
    taxonomy = current_app.taxonomy

    return render_template('posts/view.html',
                           post=post,
                           forum=taxonomy.forum(post.get('forum')),
                           topic=taxonomy.topic(post.get('topic')),
                           can_edit=Post.can_edit(post, current_user),
                           comment_form=comment_form or CommentForm())


def get_post_by_post_id(id):
    post = Post.get(id, current_user)
    canonical = Post.url(post)

    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    if canonical.startswith('/view/'):
        return render_post(post)

    return redirect(canonical)


def make_form(forum=None, topic=None):
    form = PostForm()

    # Slugs in the address take precedence over the submitted ones.
    if forum is not None:
        form.forum.required = False
        form.forum.options['hidden'] = True

    if topic is not None:
        form.topic.required = False
        form.topic.options['hidden'] = True

    return form


def get_new_post(forum=None, topic=None):
    context = resolve(forum, topic)
    form = make_form(forum, topic)

    form.topic.value = topic or request.args.get('topic', '')
    form.forum.value = forum or request.args.get('forum', '')

    return render_template('posts/edit.html', form=form, post=None,
                           **context)


def post_new_post(forum=None, topic=None):
    context = resolve(forum, topic)
    form = make_form(forum, topic)

    if not form.validate_on_submit():
        if wants_json():
            return form_errors(form)

        return render_template('posts/edit.html', form=form, post=None,
                               **context)

    data = form.dump()
    data['forum'] = forum or data.get('forum')
    data['topic'] = topic or data.get('topic')

    post = Post.create(current_user, **data)

    if wants_json():
        return jsonify(Post.to_json(post, current_user)), 201

    flash(_('Your post has been published.'), 'ok')
    return redirect(Post.url(post))


def get_edit_post(id, forum=None, topic=None):
    post = Post.get(id, current_user)
    Post.check_edit(post, current_user)

    form = PostForm()
    for name, field in form.fields.items():
        field.value = post.get(name) or ''

    return render_template('posts/edit.html', form=form, post=post,
                           **resolve(forum, topic))


def post_edit_post(id, forum=None, topic=None):
    post = Post.get(id, current_user)
    Post.check_edit(post, current_user)

    form = PostForm()

    if request.is_json:
        # API clients may send just the fields they want to change.
        changes = request.get_json(silent=True) or {}
        merged = {name: post.get(name) or '' for name in form.fields}
        merged.update(changes)
        form.load(merged)
        valid = form.is_valid()
    else:
        valid = form.validate_on_submit()

    if not valid:
        if wants_json():
            return form_errors(form)

        return render_template('posts/edit.html', form=form, post=post,
                               **resolve(forum, topic))

    Post.edit(post, current_user, **form.dump())

    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    flash(_('Your changes have been saved.'), 'ok')
    return redirect(Post.url(post))


def post_delete_post(id, forum=None, topic=None):
    post = Post.get(id, current_user)
    Post.delete(post, current_user)

    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    flash(_('The post has been deleted.'), 'info')
    return redirect(Post.listing_url(post.get('forum'), post.get('topic')))


def post_undelete_post(id, forum=None, topic=None):
    post = Post.get(id, current_user)
    Post.undelete(post, current_user)

    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    flash(_('The post has been restored.'), 'ok')
    return redirect(Post.url(post))


def vote_response(post):
    if wants_json():
        return jsonify(Post.to_json(post, current_user))

    return redirect(Post.url(post))


def post_upvote(id):
    post = Post.get(id, current_user)
    return vote_response(Post.upvote(post, current_user))


def post_downvote(id):
    post = Post.get(id, current_user)
    return vote_response(Post.downvote(post, current_user))


def post_unvote(id):
    post = Post.get(id, current_user)
    return vote_response(Post.unvote(post, current_user))


def post_favorite(id):
    post = Post.get(id, current_user)
    return vote_response(Post.favorite(post, current_user))


def post_unfavorite(id):
    post = Post.get(id, current_user)
    return vote_response(Post.unfavorite(post, current_user))


def post_add_comment(id):
    post = Post.get(id, current_user)
    form = CommentForm()

    if not form.validate_on_submit():
        if wants_json():
            return form_errors(form)

        return render_post(post, comment_form=form), 400

    comment = Post.add_comment(post, current_user, form.comment.value)

    if wants_json():
        return jsonify(Post.to_json(post, current_user)), 201

    return redirect('%s#comment-%s' % (Post.url(post), comment['_id']))


def get_search():
    form = SearchForm()
    form.load(request.args)

    posts = []
    if form.is_valid():
        posts = Post.search(form.q.value, current_user)

    if wants_json():
        return jsonify(posts=[Post.to_json(p, current_user) for p in posts])

    return render_template('search.html', form=form,
                           posts=Post.with_authors(posts))


def get_topics():
    return jsonify(topics=current_app.taxonomy.to_json('topics'))


def get_states():
    return jsonify(states=current_app.taxonomy.to_json('states'))


def get_priorities():
    return jsonify(priorities=current_app.taxonomy.to_json('priorities'))


# vim:set sw=4 ts=4 et:
