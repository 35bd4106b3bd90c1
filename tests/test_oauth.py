#!/usr/bin/python3 -tt
# -*- coding: utf-8 -*-

from urllib.parse import parse_qs, urlparse

import pytest
import requests

from conftest import create_user, sign_in

from agora.models import User
from agora.oauth import get_provider, github_profile, twitter_profile


PROVIDER_CONFIG = {
    'GITHUB_CLIENT_ID': 'client',
    'GITHUB_CLIENT_SECRET': 'secret',
    'TWITTER_CLIENT_ID': 'tw-client',
    'TWITTER_CLIENT_SECRET': 'tw-secret',
}

GITHUB_TOKEN_URL = 'https://github.com/login/oauth/access_token'
GITHUB_PROFILE_URL = 'https://api.github.com/user'

TWITTER_REQUEST_URL = 'https://api.twitter.com/oauth/request_token'
TWITTER_ACCESS_URL = 'https://api.twitter.com/oauth/access_token'
TWITTER_PROFILE_URL = 'https://api.twitter.com/1.1/account/' \
                      'verify_credentials.json?include_email=true'


class FakeResponse:
    def __init__(self, payload=None, status_code=200, text=''):
        self.payload = payload
        self.status_code = status_code
        self.text = text
        self.headers = {}

    def json(self):
        if self.payload is None:
            raise ValueError('not a JSON document')

        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))


@pytest.fixture
def oauth_app(make_app):
    return make_app(**PROVIDER_CONFIG)


@pytest.fixture
def remote(monkeypatch):
    """
    Stub the providers, recording the requests made to them.
    Tests may replace the prepared responses.
    """

    calls = []
    responses = {
        GITHUB_TOKEN_URL: FakeResponse({'access_token': 'gho_token',
                                        'token_type': 'bearer'}),
        GITHUB_PROFILE_URL: FakeResponse({
            'id': 4242,
            'login': 'octocat',
            'name': 'The Octocat',
            'email': 'octocat@example.com',
            'blog': 'https://github.blog',
            'location': 'San Francisco',
            'avatar_url': 'https://avatars.example.com/4242',
        }),
        TWITTER_REQUEST_URL: FakeResponse(
            text='oauth_token=req-token&oauth_token_secret=req-secret'
                 '&oauth_callback_confirmed=true'),
        TWITTER_ACCESS_URL: FakeResponse(
            text='oauth_token=tw-token&oauth_token_secret=tw-secret'
                 '&user_id=9&screen_name=tweety'),
        TWITTER_PROFILE_URL: FakeResponse({
            'id_str': '9',
            'name': 'Tweety',
            'location': 'Cage',
            'url': 'https://t.co/x',
            'profile_image_url_https': 'https://pbs.example.com/9.png',
        }),
    }

    def request(session, method, url, **kwargs):
        calls.append((method, url, kwargs))
        return responses[url]

    monkeypatch.setattr(requests.Session, 'request', request)

    return {'calls': calls, 'responses': responses}


def start(client, provider='github'):
    response = client.get('/auth/' + provider)
    assert response.status_code == 302

    location = urlparse(response.headers['Location'])
    return location, parse_qs(location.query)


def finish(client, state, code='code', provider='github'):
    return client.get('/auth/%s/callback?code=%s&state=%s'
                      % (provider, code, state))


def test_authorization_redirect(oauth_app, remote):
    client = oauth_app.test_client()
    location, query = start(client)

    assert location.netloc == 'github.com'
    assert query['client_id'] == ['client']
    assert query['redirect_uri'] == \
        ['http://localhost/auth/github/callback']
    assert query['scope'] == ['user:email']
    assert query['state']
    assert remote['calls'] == []


def test_sign_up_with_github(oauth_app, remote):
    client = oauth_app.test_client()
    _, query = start(client)

    response = finish(client, query['state'][0])
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/profile')

    method, url, kwargs = remote['calls'][0]
    assert (method, url) == ('POST', GITHUB_TOKEN_URL)
    assert kwargs['data']['code'] == 'code'
    assert kwargs['data']['grant_type'] == 'authorization_code'

    method, url, kwargs = remote['calls'][1]
    assert (method, url) == ('GET', GITHUB_PROFILE_URL)

    with oauth_app.app_context():
        user = User.by_provider('github', 4242)
        assert user['email'] == 'octocat@example.com'
        assert user.profile['name'] == 'The Octocat'
        assert user.profile['location'] == 'San Francisco'
        assert user['tokens'] == [{'kind': 'github',
                                   'access_token': 'gho_token'}]

    assert client.get('/account').status_code == 200


def test_sign_in_again(oauth_app, remote):
    client = oauth_app.test_client()
    _, query = start(client)
    finish(client, query['state'][0])
    client.get('/logout')

    _, query = start(client)
    finish(client, query['state'][0])

    with oauth_app.app_context():
        assert oauth_app.mongo.users.count_documents({}) == 1

    assert client.get('/account').status_code == 200


def test_link_to_signed_in_user(oauth_app, remote):
    user = create_user(oauth_app, 'joe@example.com')
    client = oauth_app.test_client()
    sign_in(client)

    _, query = start(client)
    response = finish(client, query['state'][0])
    assert response.status_code == 302

    with oauth_app.app_context():
        assert User.by_provider('github', 4242).id == user.id
        assert User.find(user.id)['email'] == 'joe@example.com'


def test_email_conflict(oauth_app, remote):
    create_user(oauth_app, 'octocat@example.com')
    client = oauth_app.test_client()

    _, query = start(client)
    response = finish(client, query['state'][0])
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/profile')

    with oauth_app.app_context():
        assert User.by_provider('github', 4242) is None

    # The anonymous user ends up on the login page with the explanation.
    response = client.get('/profile', follow_redirects=True)
    assert b'There is already an account using this e-mail' in \
        response.data


def test_state_mismatch(oauth_app, remote):
    client = oauth_app.test_client()
    start(client)

    response = finish(client, 'forged')
    assert response.headers['Location'].endswith('/profile')
    assert remote['calls'] == []

    with oauth_app.app_context():
        assert oauth_app.mongo.users.count_documents({}) == 0


def test_cancelled(oauth_app, remote):
    client = oauth_app.test_client()
    _, query = start(client)

    response = client.get('/auth/github/callback?error=access_denied&state='
                          + query['state'][0])
    assert response.headers['Location'].endswith('/profile')
    assert remote['calls'] == []


def test_provider_refuses_code(oauth_app, remote):
    remote['responses'][GITHUB_TOKEN_URL] = \
        FakeResponse({'error': 'bad_verification_code'})

    client = oauth_app.test_client()
    _, query = start(client)

    response = finish(client, query['state'][0])
    assert response.headers['Location'].endswith('/profile')

    with oauth_app.app_context():
        assert oauth_app.mongo.users.count_documents({}) == 0


def test_profile_unavailable(oauth_app, remote):
    remote['responses'][GITHUB_PROFILE_URL] = FakeResponse({}, 503)

    client = oauth_app.test_client()
    _, query = start(client)

    response = finish(client, query['state'][0])
    assert response.headers['Location'].endswith('/profile')

    with oauth_app.app_context():
        assert oauth_app.mongo.users.count_documents({}) == 0


def test_returns_to_remembered_page(oauth_app, remote):
    client = oauth_app.test_client()
    client.get('/search')

    _, query = start(client)
    response = finish(client, query['state'][0])
    assert response.headers['Location'].endswith('/search')


def test_twitter_request_token(oauth_app, remote):
    client = oauth_app.test_client()
    location, query = start(client, 'twitter')

    assert location.netloc == 'api.twitter.com'
    assert query['oauth_token'] == ['req-token']
    assert remote['calls'][0][:2] == ('POST', TWITTER_REQUEST_URL)


def test_sign_up_with_twitter(oauth_app, remote):
    client = oauth_app.test_client()
    start(client, 'twitter')

    response = client.get('/auth/twitter/callback'
                          '?oauth_token=req-token&oauth_verifier=verified')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/profile')

    urls = [url for method, url, kwargs in remote['calls']]
    assert urls == [TWITTER_REQUEST_URL, TWITTER_ACCESS_URL,
                    TWITTER_PROFILE_URL]

    with oauth_app.app_context():
        user = User.by_provider('twitter', '9')
        assert user.profile['name'] == 'Tweety'
        assert user.profile['website'] == 'https://t.co/x'
        assert user['tokens'] == [{'kind': 'twitter',
                                   'access_token': 'tw-token',
                                   'token_secret': 'tw-secret'}]


def test_twitter_denied(oauth_app, remote):
    client = oauth_app.test_client()
    start(client, 'twitter')

    response = client.get('/auth/twitter/callback?denied=req-token')
    assert response.headers['Location'].endswith('/profile')
    assert len(remote['calls']) == 1


def test_twitter_unreachable(oauth_app, remote):
    remote['responses'][TWITTER_REQUEST_URL] = \
        FakeResponse(status_code=401, text='Unauthorized')

    client = oauth_app.test_client()
    response = client.get('/auth/twitter')
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/profile')


def test_profile_parsers():
    assert github_profile({'id': 1, 'login': 'x'})['name'] == 'x'

    profile = twitter_profile({'id_str': '9', 'name': 'T',
                               'url': 'https://t.co/x'})
    assert profile['email'] is None
    assert profile['website'] == 'https://t.co/x'


def test_get_provider():
    assert get_provider('github').title == 'Github'

    with pytest.raises(KeyError):
        get_provider('myspace')


def test_only_configured_providers(oauth_app, make_app):
    assert '/auth/github' in [r.rule for r in oauth_app.url_map.iter_rules()]

    app = make_app()
    assert not [r for r in app.url_map.iter_rules()
                if r.rule.startswith('/auth/')]


# vim:set sw=4 ts=4 et:
