#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from flask import current_app, jsonify, render_template

from agora.models import Post
from agora.mongo import db
from agora.site.base import wants_json


def get_forums():
    """
    List forums along with the number of posts in each of them.
    """

    forums = current_app.taxonomy.to_json('forums')

    for forum in forums:
        forum['posts'] = db.posts.count_documents(
            Post.query(forum=forum['slug']))

    if wants_json():
        return jsonify(forums=forums)

    return render_template('forums.html', forums=forums)


# vim:set sw=4 ts=4 et:
