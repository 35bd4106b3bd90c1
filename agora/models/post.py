#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

"""
Posts
=====

Posts are documents in the ``posts`` collection. Apart from the internal
``_id`` they carry a short, sequential ``postId`` used in addresses.
Comments are embedded in their post.

Posts are never removed, deleting them only hides them from everyone except
their author and moderators. Votes and favorites are lists of user
identifiers, so that every user can vote only once.
"""


import re

from bson import ObjectId
from flask import current_app
from flask_babel import lazy_gettext as _
from pymongo import ASCENDING, DESCENDING

from agora.exceptions import AccessDenied, DocumentNotFound
from agora.log import make_logger
from agora.models.common import slugify, utcnow
from agora.models.user import User
from agora.mongo import db, next_sequence
from agora.rbac import have_privilege


__all__ = ['Post', 'SORTS']


log = make_logger(__name__)

SORTS = {
    'new': [('created', DESCENDING), ('_id', DESCENDING)],
    'top': [('score', DESCENDING), ('created', DESCENDING),
            ('_id', DESCENDING)],
    'old': [('created', ASCENDING), ('_id', ASCENDING)],
}

EDITABLE = ('title', 'description', 'topic', 'forum', 'state', 'priority')


class Post:
    """
    Operations on post documents.
    """

    @staticmethod
    def create(creator, title, description='', **fields):
        taxonomy = current_app.taxonomy

        doc = {
            'postId': next_sequence('postId'),
            'title': title,
            'slug': slugify(title),
            'description': description,
            'creator': creator.id,
            'topic': None,
            'forum': None,
            'state': taxonomy.states[0]['slug'] if taxonomy.states else None,
            'priority': None,
            'upvotes': [],
            'downvotes': [],
            'score': 0,
            'favorites': [],
            'comments': [],
            'deleted': False,
            'created': utcnow(),
            'updated': utcnow(),
        }

        for key, value in fields.items():
            if key in EDITABLE and value:
                doc[key] = value

        doc['_id'] = db.posts.insert_one(doc).inserted_id
        log.info('User %s created post %i', creator.id, doc['postId'])
        return doc

    @staticmethod
    def get(post_id, user=None):
        """
        Load post by it's sequential identifier.

        Deleted posts are only returned to their authors and moderators,
        everyone else gets :class:`DocumentNotFound`.
        """

        try:
            post_id = int(post_id)
        except (TypeError, ValueError):
            raise DocumentNotFound(_('Post not found.'), {'id': post_id})

        post = db.posts.find_one({'postId': post_id})

        if post is None:
            raise DocumentNotFound(_('Post not found.'), {'id': post_id})

        if post.get('deleted') and not Post.can_edit(post, user):
            raise DocumentNotFound(_('Post not found.'), {'id': post_id})

        return post

    @staticmethod
    def can_edit(post, user):
        if user is None or not user.is_authenticated:
            return False

        if post.get('creator') == user.id:
            return True

        return have_privilege('moderate', user)

    @staticmethod
    def check_edit(post, user):
        if not Post.can_edit(post, user):
            raise AccessDenied(_('You can only change your own posts.'),
                               {'id': post['postId']})

    @staticmethod
    def query(forum=None, topic=None, state=None, priority=None, user=None):
        """
        Build a filter for listing posts. Moderators see the deleted ones.
        """

        query = {}

        for key, value in (('forum', forum), ('topic', topic),
                           ('state', state), ('priority', priority)):
            if value:
                query[key] = value

        if not have_privilege('moderate', user):
            query['deleted'] = {'$ne': True}

        return query

    @staticmethod
    def edit(post, user, **changes):
        Post.check_edit(post, user)

        update = {'updated': utcnow()}

        for key, value in changes.items():
            if key in ('title', 'description'):
                update[key] = value or ''
            elif key in EDITABLE:
                update[key] = value or None

        if update.get('title'):
            update['slug'] = slugify(update['title'])
        else:
            update.pop('title', None)

        db.posts.update_one({'_id': post['_id']}, {'$set': update})
        post.update(update)
        return post

    @staticmethod
    def delete(post, user):
        Post.check_edit(post, user)
        db.posts.update_one({'_id': post['_id']}, {'$set': {'deleted': True}})
        post['deleted'] = True
        log.info('User %s deleted post %i', user.id, post['postId'])
        return post

    @staticmethod
    def undelete(post, user):
        Post.check_edit(post, user)
        db.posts.update_one({'_id': post['_id']}, {'$set': {'deleted': False}})
        post['deleted'] = False
        log.info('User %s restored post %i', user.id, post['postId'])
        return post

    @staticmethod
    def _reload_votes(post):
        doc = db.posts.find_one({'_id': post['_id']},
                                {'upvotes': 1, 'downvotes': 1})

        score = len(doc.get('upvotes', [])) - len(doc.get('downvotes', []))
        db.posts.update_one({'_id': post['_id']}, {'$set': {'score': score}})

        post['upvotes'] = doc.get('upvotes', [])
        post['downvotes'] = doc.get('downvotes', [])
        post['score'] = score
        return post

    @staticmethod
    def upvote(post, user):
        db.posts.update_one({'_id': post['_id']}, {
            '$addToSet': {'upvotes': user.id},
            '$pull': {'downvotes': user.id},
        })
        return Post._reload_votes(post)

    @staticmethod
    def downvote(post, user):
        db.posts.update_one({'_id': post['_id']}, {
            '$addToSet': {'downvotes': user.id},
            '$pull': {'upvotes': user.id},
        })
        return Post._reload_votes(post)

    @staticmethod
    def unvote(post, user):
        db.posts.update_one({'_id': post['_id']}, {
            '$pull': {'upvotes': user.id, 'downvotes': user.id},
        })
        return Post._reload_votes(post)

    @staticmethod
    def favorite(post, user):
        db.posts.update_one({'_id': post['_id']},
                            {'$addToSet': {'favorites': user.id}})

        if user.id not in post.setdefault('favorites', []):
            post['favorites'].append(user.id)

        return post

    @staticmethod
    def unfavorite(post, user):
        db.posts.update_one({'_id': post['_id']},
                            {'$pull': {'favorites': user.id}})

        if user.id in post.setdefault('favorites', []):
            post['favorites'].remove(user.id)

        return post

    @staticmethod
    def favorites_of(user):
        return list(db.posts.find({'favorites': user.id,
                                   'deleted': {'$ne': True}})
                      .sort(SORTS['new']))

    @staticmethod
    def add_comment(post, user, text):
        comment = {
            '_id': ObjectId(),
            'creator': user.id,
            'comment': text,
            'created': utcnow(),
        }

        db.posts.update_one({'_id': post['_id']},
                            {'$push': {'comments': comment}})

        post.setdefault('comments', []).append(comment)
        return comment

    @staticmethod
    def search(text, user=None, limit=50):
        """
        Find posts with the `text` in their title or description.
        """

        text = (text or '').strip()
        if not text:
            return []

        pattern = {'$regex': re.escape(text), '$options': 'i'}
        query = Post.query(user=user)
        query['$or'] = [{'title': pattern}, {'description': pattern}]

        return list(db.posts.find(query).sort(SORTS['top']).limit(limit))

    @staticmethod
    def with_authors(posts):
        """
        Attach ``author`` (and authors of the comments) to the posts.
        """

        ids = set()
        for post in posts:
            ids.add(post.get('creator'))
            for comment in post.get('comments', []):
                ids.add(comment.get('creator'))

        ids.discard(None)
        users = {doc['_id']: User(doc)
                 for doc in db.users.find({'_id': {'$in': list(ids)}})}

        for post in posts:
            post['author'] = users.get(post.get('creator'))
            for comment in post.get('comments', []):
                comment['author'] = users.get(comment.get('creator'))

        return posts

    @staticmethod
    def listing_url(forum=None, topic=None):
        """
        Address of the post listing for the forum and topic slugs.
        With forums configured, a topic is only listed within a forum.
        """

        path = ['', current_app.config['POST_SLUG'].strip('/')]

        if current_app.taxonomy.has_forums():
            if not forum:
                return '/'.join(path)
            path.append(forum)

        if topic:
            path.append(topic)

        return '/'.join(path)

    @staticmethod
    def action_url(post, action):
        """
        Address of the `action` (``edit``, ``delete``, ``undelete``) for
        the post or ``None`` when the post is not placed where the content
        routes can reach it.
        """

        if not post.get('topic'):
            return None

        if current_app.taxonomy.has_forums() and not post.get('forum'):
            return None

        base = Post.listing_url(post.get('forum'), post['topic'])
        return '%s/%s/%i' % (base, action, post['postId'])

    @staticmethod
    def url(post):
        """
        Canonical address of the post. The shape follows the route table,
        which depends on whether are there any forums configured.
        """

        if not post.get('topic'):
            return '/view/%i' % post['postId']

        if current_app.taxonomy.has_forums() and not post.get('forum'):
            return '/view/%i' % post['postId']

        path = [Post.listing_url(post.get('forum'), post['topic']),
                str(post['postId'])]

        if post.get('slug'):
            path.append(post['slug'])

        return '/'.join(path)

    @staticmethod
    def to_json(post, user=None):
        """
        Representation of the post for the API clients.
        """

        user_id = getattr(user, 'id', None) if user is not None else None

        return {
            'id': str(post['_id']),
            'postId': post['postId'],
            'title': post['title'],
            'description': post.get('description', ''),
            'url': Post.url(post),
            'creator': str(post['creator']) if post.get('creator') else None,
            'topic': post.get('topic'),
            'forum': post.get('forum'),
            'state': post.get('state'),
            'priority': post.get('priority'),
            'score': post.get('score', 0),
            'upvotes': len(post.get('upvotes', [])),
            'downvotes': len(post.get('downvotes', [])),
            'upvoted': user_id in post.get('upvotes', []),
            'downvoted': user_id in post.get('downvotes', []),
            'favorites': len(post.get('favorites', [])),
            'favorited': user_id in post.get('favorites', []),
            'deleted': bool(post.get('deleted')),
            'comments': [
                {
                    'id': str(c['_id']),
                    'creator': str(c['creator']),
                    'comment': c['comment'],
                    'created': c['created'].isoformat(),
                }
                for c in post.get('comments', [])
            ],
            'created': post['created'].isoformat(),
            'updated': post['updated'].isoformat(),
        }


# vim:set sw=4 ts=4 et:
