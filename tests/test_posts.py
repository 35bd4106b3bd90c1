#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from conftest import create_user, sign_in

from agora.models import Post, User


def publish(client, title='Hello World', topic='discussion',
            description='First *post*.', **fields):
    data = dict(title=title, description=description, topic=topic,
                **fields)
    return client.post('/new', data=data)


def load(app, post_id):
    with app.app_context():
        return app.mongo.posts.find_one({'postId': post_id})


def test_new_post_requires_sign_in(client):
    response = client.get('/new')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/login')


def test_new_post_form(signed_in):
    response = signed_in.get('/new')
    assert response.status_code == 200
    assert b'name="title"' in response.data
    assert b'value="discussion"' in response.data


def test_publish_post(app, signed_in, user):
    response = publish(signed_in)

    assert response.status_code == 302
    assert response.headers['Location'].endswith(
        '/posts/discussion/1/hello-world')

    post = load(app, 1)
    assert post['title'] == 'Hello World'
    assert post['creator'] == user.id
    assert post['state'] == 'open'
    assert post['score'] == 0
    assert post['deleted'] is False


def test_post_ids_are_sequential(app, signed_in):
    publish(signed_in, 'One')
    publish(signed_in, 'Two')

    assert load(app, 2)['title'] == 'Two'


def test_publish_requires_title(signed_in):
    response = publish(signed_in, title='')
    assert response.status_code == 200
    assert b'This field must be filled in.' in response.data


def test_publish_rejects_unknown_topic(signed_in):
    response = publish(signed_in, topic='gossip')
    assert response.status_code == 200
    assert b'Value not among the valid choices.' in response.data


def test_publish_under_topic(app, signed_in):
    response = signed_in.post('/posts/ideas/new', data={'title': 'Idea'})

    assert response.status_code == 302
    assert load(app, 1)['topic'] == 'ideas'


def test_view_post(client, signed_in):
    publish(signed_in)

    response = client.get('/posts/discussion/1/hello-world')
    assert response.status_code == 200
    assert b'Hello World' in response.data
    assert b'<em>post</em>' in response.data


def test_view_redirects_to_canonical_url(signed_in):
    publish(signed_in)

    response = signed_in.get('/posts/discussion/1')
    assert response.status_code == 301
    assert response.headers['Location'].endswith(
        '/posts/discussion/1/hello-world')

    response = signed_in.get('/posts/ideas/1/whatever')
    assert response.status_code == 301

    response = signed_in.get('/view/1')
    assert response.status_code == 302
    assert response.headers['Location'].endswith(
        '/posts/discussion/1/hello-world')


def test_unknown_post_is_not_found(client):
    assert client.get('/posts/discussion/42').status_code == 404
    assert client.get('/view/42').status_code == 404


def test_unknown_topic_is_not_found(client):
    assert client.get('/posts/gossip').status_code == 404


def test_listing(client, signed_in):
    publish(signed_in, 'Talk')
    publish(signed_in, 'Ask', topic='questions')

    response = client.get('/posts')
    assert b'Talk' in response.data
    assert b'Ask' in response.data

    response = client.get('/posts/questions')
    assert b'Ask' in response.data
    assert b'Talk' not in response.data


def test_listing_json(client, signed_in):
    publish(signed_in, 'Talk')

    response = client.get('/posts', headers={'Accept': 'application/json'})
    assert response.status_code == 200
    assert response.json['total'] == 1
    assert response.json['posts'][0]['title'] == 'Talk'


def test_listing_sorts(app, signed_in):
    publish(signed_in, 'Older')
    publish(signed_in, 'Newer')
    signed_in.post('/upvote/1')

    headers = {'Accept': 'application/json'}

    posts = signed_in.get('/posts', headers=headers).json['posts']
    assert [p['title'] for p in posts] == ['Newer', 'Older']

    posts = signed_in.get('/posts?sort=top', headers=headers).json['posts']
    assert [p['title'] for p in posts] == ['Older', 'Newer']

    posts = signed_in.get('/posts?sort=old', headers=headers).json['posts']
    assert [p['title'] for p in posts] == ['Older', 'Newer']


def test_edit_post(app, signed_in):
    publish(signed_in)

    response = signed_in.get('/posts/discussion/edit/1')
    assert response.status_code == 200
    assert b'Hello World' in response.data

    response = signed_in.post('/posts/discussion/edit/1', data={
        'title': 'Goodbye World',
        'description': 'Changed.',
        'topic': 'ideas',
        'state': 'closed',
    })

    assert response.status_code == 302
    assert response.headers['Location'].endswith(
        '/posts/ideas/1/goodbye-world')

    post = load(app, 1)
    assert post['slug'] == 'goodbye-world'
    assert post['state'] == 'closed'


def test_others_cannot_edit(app, client, signed_in):
    publish(signed_in)
    signed_in.get('/logout')

    create_user(app, 'eve@example.com')
    sign_in(client, 'eve@example.com')

    response = client.post('/posts/discussion/edit/1', data={'title': 'X'})
    assert response.status_code == 403
    assert load(app, 1)['title'] == 'Hello World'

    response = client.post('/posts/discussion/delete/1')
    assert response.status_code == 403


def test_moderator_can_edit(app, client, signed_in, moderator):
    publish(signed_in)
    signed_in.get('/logout')
    sign_in(client, 'mod@example.com')

    response = client.post('/posts/discussion/edit/1', data={
        'title': 'Moderated',
        'topic': 'discussion',
    })

    assert response.status_code == 302
    assert load(app, 1)['title'] == 'Moderated'


def test_delete_hides_post(app, client, signed_in):
    publish(signed_in)

    response = signed_in.post('/posts/discussion/delete/1')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/posts/discussion')
    assert load(app, 1)['deleted'] is True

    # The author still sees it.
    assert signed_in.get('/posts/discussion/1/hello-world').status_code == 200

    signed_in.get('/logout')
    assert client.get('/posts/discussion/1/hello-world').status_code == 404
    assert b'Hello World' not in client.get('/posts').data


def test_undelete(app, signed_in):
    publish(signed_in)
    signed_in.post('/posts/discussion/delete/1')

    response = signed_in.post('/posts/discussion/undelete/1')
    assert response.status_code == 302
    assert load(app, 1)['deleted'] is False


def test_voting(app, signed_in, user):
    publish(signed_in)
    headers = {'Accept': 'application/json'}

    response = signed_in.post('/upvote/1', headers=headers)
    assert response.json['score'] == 1
    assert response.json['upvoted'] is True

    # Voting twice does not count twice.
    response = signed_in.post('/upvote/1', headers=headers)
    assert response.json['score'] == 1

    response = signed_in.post('/downvote/1', headers=headers)
    assert response.json['score'] == -1
    assert response.json['upvoted'] is False
    assert response.json['downvoted'] is True

    response = signed_in.post('/unvote/1', headers=headers)
    assert response.json['score'] == 0
    assert load(app, 1)['downvotes'] == []


def test_voting_requires_sign_in(client, signed_in):
    publish(signed_in)
    signed_in.get('/logout')

    response = client.post('/upvote/1',
                           headers={'Accept': 'application/json'})
    assert response.status_code == 401


def test_favorites(app, signed_in, user):
    publish(signed_in)

    response = signed_in.post('/favorite/1')
    assert response.status_code == 302
    assert load(app, 1)['favorites'] == [user.id]

    response = signed_in.get('/account')
    assert b'Hello World' in response.data

    signed_in.post('/unfavorite/1')
    assert load(app, 1)['favorites'] == []


def test_comments(app, signed_in):
    publish(signed_in)

    response = signed_in.post('/comments/add/1', data={'comment': 'Nice!'})
    assert response.status_code == 302

    comment = load(app, 1)['comments'][0]
    assert comment['comment'] == 'Nice!'
    assert response.headers['Location'].endswith('#comment-%s'
                                                 % comment['_id'])

    response = signed_in.get('/posts/discussion/1/hello-world')
    assert b'Nice!' in response.data


def test_script_links_are_not_rendered(signed_in):
    publish(signed_in, description='[click](javascript:alert(1))')
    signed_in.post('/comments/add/1',
                   data={'comment': '[me](javascript:alert(2))'})

    response = signed_in.get('/posts/discussion/1/hello-world')
    assert response.status_code == 200
    assert b'click' in response.data
    assert b'javascript:' not in response.data


def test_empty_comment(signed_in):
    publish(signed_in)

    response = signed_in.post('/comments/add/1', data={'comment': ''})
    assert response.status_code == 400


def test_search(client, signed_in):
    publish(signed_in, 'Python (the language)')
    publish(signed_in, 'Snakes')

    response = client.get('/search?q=python+(the')
    assert response.status_code == 200
    assert b'Python (the language)' in response.data
    assert b'Snakes' not in response.data

    response = client.get('/search?q=SNAKE',
                          headers={'Accept': 'application/json'})
    assert [p['title'] for p in response.json['posts']] == ['Snakes']


def test_home_page_lists_recent_posts(client, signed_in):
    publish(signed_in, 'Front Page Material')

    response = client.get('/')
    assert response.status_code == 200
    assert b'Front Page Material' in response.data


def test_post_url_shapes(app, forum_app):
    with app.app_context():
        assert Post.url({'postId': 1, 'topic': 'ideas', 'slug': 'x'}) == \
            '/posts/ideas/1/x'
        assert Post.url({'postId': 2}) == '/view/2'
        assert Post.action_url({'postId': 1, 'topic': 'ideas'}, 'edit') == \
            '/posts/ideas/edit/1'
        assert Post.action_url({'postId': 2}, 'edit') is None

    with forum_app.app_context():
        post = {'postId': 3, 'forum': 'general', 'topic': 'ideas',
                'slug': 'y'}
        assert Post.url(post) == '/posts/general/ideas/3/y'
        assert Post.url({'postId': 4, 'topic': 'ideas'}) == '/view/4'
        assert Post.listing_url() == '/posts'
        assert Post.listing_url(None, 'ideas') == '/posts'


def test_forum_index(forum_app):
    client = forum_app.test_client()

    response = client.get('/posts')
    assert response.status_code == 200
    assert b'General' in response.data
    assert b'/posts/help' in response.data

    response = client.get('/posts', headers={'Accept': 'application/json'})
    assert [f['slug'] for f in response.json['forums']] == \
        ['general', 'help']


def test_forum_posts(forum_app):
    client = forum_app.test_client()
    create_user(forum_app)
    sign_in(client)

    response = client.post('/posts/help/new', data={
        'title': 'Broken',
        'topic': 'questions',
    })

    assert response.status_code == 302
    assert response.headers['Location'].endswith(
        '/posts/help/questions/1/broken')

    assert b'Broken' in client.get('/posts/help').data
    assert b'Broken' in client.get('/posts/help/questions').data
    assert b'Broken' not in client.get('/posts/general').data
    assert client.get('/posts/nowhere').status_code == 404
    assert client.get('/posts/help/nothing').status_code == 404

    response = client.get('/posts', headers={'Accept': 'application/json'})
    counts = {f['slug']: f['posts'] for f in response.json['forums']}
    assert counts == {'general': 0, 'help': 1}


def test_forum_required_outside_forum_address(forum_app):
    client = forum_app.test_client()
    create_user(forum_app)
    sign_in(client)

    response = client.post('/new', data={'title': 'Where?',
                                         'topic': 'ideas'})
    assert response.status_code == 200
    assert b'This field must be filled in.' in response.data


def test_author_is_attached(app, signed_in, user):
    publish(signed_in)

    with app.app_context():
        post = Post.with_authors([app.mongo.posts.find_one()])[0]
        assert isinstance(post['author'], User)
        assert post['author'].id == user.id


# vim:set sw=4 ts=4 et:
