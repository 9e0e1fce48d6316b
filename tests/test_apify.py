import json
import logging

import httpx
import pytest

from randomness_wtf.errors import RateLimitError, UpstreamError, ValidationError
from randomness_wtf.services.apify import (
    ApifyClient,
    normalize_user,
    normalize_users,
    parse_tweet_url,
)

TWEET_URL = "https://x.com/flowblock/status/1790000000000000000"

TWEET_ITEM = {
    "id": "1790000000000000000",
    "text": "Retweet + like to win",
    "retweetCount": 12,
    "likeCount": 30,
    "author": {"id": "100", "userName": "flowblock", "name": "Flow"},
}


def _item(user_id, handle, name="User"):
    return {"id": f"tweet-{user_id}", "author": {"id": user_id, "userName": handle, "name": name}}


class ApifyStub:
    """Routes actor calls by payload shape and records them."""

    def __init__(self, responder):
        self.payloads = []
        self.auth = []
        self.query = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        self.auth.append(request.headers.get("authorization"))
        self.query.append(str(request.url.query))
        return self._responder(payload)

    def client(self):
        return ApifyClient(api_token="apify_test_token", transport=httpx.MockTransport(self))


def test_parse_tweet_url_variants():
    assert parse_tweet_url(TWEET_URL) == ("flowblock", "1790000000000000000")
    assert parse_tweet_url("https://twitter.com/someone/status/42?s=20") == ("someone", "42")
    with pytest.raises(ValidationError):
        parse_tweet_url("https://x.com/flowblock")


def test_normalize_user_accepts_both_field_styles():
    a = normalize_user({"author": {"id": "1", "userName": "alice", "name": "Alice"}})
    b = normalize_user({"id_str": "2", "screen_name": "@bob"})
    assert (a.id, a.username, a.name) == ("1", "@alice", "Alice")
    assert (b.id, b.username, b.name) == ("2", "@bob", "User")


@pytest.mark.parametrize("raw", [
    None,
    "alice",
    {"author": {"userName": "no_id"}},
    {"author": {"id": "3"}},
    {"id": "tweet-without-author"},
    {"author": {"id": "4", "userName": "@"}},
])
def test_normalize_user_rejects_malformed_entries(raw):
    assert normalize_user(raw) is None


def test_normalize_users_skips_malformed():
    users = normalize_users([_item("1", "alice"), {"author": {}}, _item("2", "bob")])
    assert [u.id for u in users] == ["1", "2"]


async def test_fetch_tweet_sends_token_and_normalizes():
    stub = ApifyStub(lambda payload: httpx.Response(200, json=[TWEET_ITEM]))
    tweet = await stub.client().fetch_tweet(TWEET_URL)

    assert stub.payloads == [{"tweetUrl": TWEET_URL, "includeUserInfo": True}]
    assert stub.auth[0] == "Bearer apify_test_token"
    assert "apify_test_token" not in stub.query[0]
    assert tweet.id == "1790000000000000000"
    assert tweet.author.id == "100"
    assert tweet.author.username == "@flowblock"
    assert (tweet.stats.retweets, tweet.stats.likes) == (12, 30)


async def test_fetch_tweet_falls_back_to_start_urls():
    def responder(payload):
        if "tweetUrl" in payload:
            return httpx.Response(200, json=[])
        return httpx.Response(200, json=[TWEET_ITEM])

    stub = ApifyStub(responder)
    tweet = await stub.client().fetch_tweet(TWEET_URL)
    assert stub.payloads[1] == {"maxItems": 1, "startUrls": [TWEET_URL]}
    assert tweet.author.id == "100"


async def test_fetch_tweet_without_data_fails():
    stub = ApifyStub(lambda payload: httpx.Response(200, json=[]))
    with pytest.raises(UpstreamError):
        await stub.client().fetch_tweet(TWEET_URL)


async def test_fetch_likers_targets_likes_page():
    stub = ApifyStub(lambda payload: httpx.Response(200, json=[_item("1", "alice"), _item("2", "bob")]))
    users = await stub.client().fetch_likers(TWEET_URL)
    assert stub.payloads[0]["startUrls"] == [f"{TWEET_URL}/likes"]
    assert [u.username for u in users] == ["@alice", "@bob"]


async def test_fetch_retweeters_targets_retweets_page():
    stub = ApifyStub(lambda payload: httpx.Response(200, json=[_item("1", "alice")]))
    await stub.client().fetch_retweeters("https://twitter.com/flowblock/status/1790000000000000000")
    assert stub.payloads[0]["startUrls"] == [f"{TWEET_URL}/retweets"]


async def test_fetch_followers_merges_recent_tweet_retweeters():
    recent = [
        {"id": "t1", "author": {"id": "100", "userName": "flowblock"}},
        {"id": "t2", "author": {"id": "100", "userName": "flowblock"}},
    ]

    def responder(payload):
        if "twitterHandles" in payload:
            return httpx.Response(200, json=recent)
        url = payload["startUrls"][0]
        if "/t1/" in url:
            return httpx.Response(200, json=[_item("1", "alice")])
        return httpx.Response(200, json=[_item("2", "bob"), _item("1", "alice")])

    stub = ApifyStub(responder)
    followers = await stub.client().fetch_followers("@flowblock")

    assert stub.payloads[0]["twitterHandles"] == ["flowblock"]
    assert {u.id for u in followers} == {"100", "1", "2"}


async def test_http_429_is_rate_limit():
    stub = ApifyStub(lambda payload: httpx.Response(429, text="Too many requests"))
    with pytest.raises(RateLimitError):
        await stub.client().fetch_likers(TWEET_URL)


async def test_rate_limit_message_in_error_body():
    stub = ApifyStub(lambda payload: httpx.Response(402, json={"error": {"message": "Monthly rate limit reached"}}))
    with pytest.raises(RateLimitError):
        await stub.client().fetch_likers(TWEET_URL)


async def test_server_error_is_upstream_error():
    stub = ApifyStub(lambda payload: httpx.Response(500, text="boom"))
    with pytest.raises(UpstreamError) as excinfo:
        await stub.client().fetch_retweeters(TWEET_URL)
    assert "500" in excinfo.value.message


async def test_non_list_payload_is_rejected():
    stub = ApifyStub(lambda payload: httpx.Response(200, json={"items": []}))
    with pytest.raises(UpstreamError):
        await stub.client().fetch_likers(TWEET_URL)


async def test_transport_error_is_upstream_error():
    def responder(payload):
        raise httpx.ConnectError("connection refused")

    stub = ApifyStub(responder)
    with pytest.raises(UpstreamError):
        await stub.client().fetch_likers(TWEET_URL)


def test_from_config_requires_token(monkeypatch):
    from randomness_wtf.config import Config
    from randomness_wtf.errors import ConfigurationError

    monkeypatch.setattr(Config, "APIFY_API_TOKEN", None)
    with pytest.raises(ConfigurationError):
        ApifyClient.from_config()


async def test_token_never_reaches_logs(caplog):
    caplog.set_level(logging.DEBUG)
    caplog.set_level(logging.DEBUG, logger="httpx")
    stub = ApifyStub(lambda payload: httpx.Response(200, json=[_item("1", "alice")]))

    await stub.client().fetch_likers(TWEET_URL)

    assert caplog.records
    assert not [r for r in caplog.records if "apify_test_token" in r.getMessage()]
