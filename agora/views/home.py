#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from flask import current_app, render_template

from agora.models import Post
from agora.mongo import db
from agora.models.post import SORTS


def index():
    """Front page with the most recent posts."""

    limit = current_app.config['POSTS_PER_PAGE']
    posts = list(db.posts.find(Post.query()).sort(SORTS['new']).limit(limit))

    return render_template('home.html', posts=Post.with_authors(posts))


# vim:set sw=4 ts=4 et:
