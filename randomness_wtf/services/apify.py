"""
Apify Twitter Scraper 客户端

调用 apidojo~twitter-scraper-lite 的 run-sync-get-dataset-items 接口，
获取推文信息、点赞者、转推者和关注者。

Apify 在不同调用方式下返回的用户字段不一致 (userName / screen_name,
id / id_str)，统一在 normalize_user 中转换为 Participant，缺少 id 或
handle 的条目直接丢弃。
"""
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from randomness_wtf.config import Config
from randomness_wtf.errors import (
    RateLimitError,
    UpstreamError,
    ValidationError,
    as_upstream_error,
    is_rate_limit_message,
)
from randomness_wtf.models.social import Participant, TweetInfo, TweetStats
from randomness_wtf.utils.aio import gather_or_cancel

logger = logging.getLogger(__name__)

TWEET_URL_PATTERN = re.compile(r"(?:twitter|x)\.com/([^/?#]+)/status/(\d+)")

# 关注者近似: 作者最近推文中取前 N 条，合并它们的转推者
FOLLOWER_SOURCE_TWEETS = 3


def parse_tweet_url(tweet_url: str) -> Tuple[str, str]:
    """
    从推文链接中解析 (用户名, 推文ID)

    Raises:
        ValidationError: 不是有效的推文链接
    """
    match = TWEET_URL_PATTERN.search(tweet_url or "")
    if not match:
        raise ValidationError("Invalid tweet URL")
    return match.group(1), match.group(2)


def normalize_user(raw: Any) -> Optional[Participant]:
    """把 Apify 返回的单个用户 (或带 author 的推文) 转换为 Participant"""
    if not isinstance(raw, dict):
        return None
    user = raw.get("author") if isinstance(raw.get("author"), dict) else raw

    user_id = user.get("id") or user.get("id_str") or user.get("userId")
    handle = user.get("userName") or user.get("screen_name") or user.get("username")
    if not user_id or not handle:
        return None

    handle = str(handle).strip().lstrip("@")
    if not handle:
        return None
    return Participant(id=str(user_id), username=f"@{handle}", name=user.get("name") or "User")


def normalize_users(items: List[Any]) -> List[Participant]:
    users: List[Participant] = []
    rejected = 0
    for item in items:
        participant = normalize_user(item)
        if participant is None:
            rejected += 1
            continue
        users.append(participant)
    if rejected:
        logger.warning(f"[Apify] 丢弃 {rejected} 条格式不正确的用户数据")
    return users


def normalize_tweet(raw: Dict[str, Any]) -> TweetInfo:
    author = normalize_user(raw.get("author"))
    if author is None or not raw.get("id"):
        raise UpstreamError("Failed to fetch tweet data")
    return TweetInfo(
        id=str(raw["id"]),
        text=raw.get("text") or raw.get("fullText") or "",
        author=author,
        stats=TweetStats(
            retweets=int(raw.get("retweetCount") or 0),
            likes=int(raw.get("likeCount") or 0),
        ),
    )


class ApifyClient:
    """Apify twitter-scraper-lite 客户端"""

    def __init__(
        self,
        api_token: str,
        actor: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_token = api_token
        self.actor = actor or Config.APIFY_ACTOR
        self.base_url = (base_url or Config.APIFY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else Config.APIFY_TIMEOUT
        self._transport = transport

    @classmethod
    def from_config(cls) -> "ApifyClient":
        return cls(api_token=Config.require_apify_token())

    @property
    def run_url(self) -> str:
        return f"{self.base_url}/acts/{self.actor}/run-sync-get-dataset-items"

    async def _run(self, payload: Dict[str, Any]) -> List[Any]:
        """同步运行 actor 并返回 dataset items"""
        logger.info(f"[Apify] POST {self.actor} {payload}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.run_url,
                    headers={"Authorization": f"Bearer {self.api_token}"},
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"[Apify] 请求异常: {e}")
            raise as_upstream_error(e, "Apify") from e

        if response.status_code == 429 or (
            response.status_code >= 400 and is_rate_limit_message(response.text)
        ):
            logger.warning("[Apify] 请求频率限制")
            raise RateLimitError("Rate limit exceeded for Apify. Please try again later.")

        if response.status_code >= 400:
            logger.error(f"[Apify] 请求失败 ({response.status_code}): {response.text[:200]}")
            raise UpstreamError(f"Apify request failed with status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError("Invalid response from Apify") from e
        if not isinstance(data, list):
            raise UpstreamError("Invalid response from Apify")
        return data

    async def fetch_tweet(self, tweet_url: str) -> TweetInfo:
        """获取推文及作者信息；tweetUrl 参数无结果时改用 startUrls 重试"""
        parse_tweet_url(tweet_url)

        items = await self._run({"tweetUrl": tweet_url, "includeUserInfo": True})
        raw = next((item for item in items if isinstance(item, dict) and item.get("author")), None)
        if raw is None:
            logger.info("[Apify] tweetUrl 参数未返回数据，改用 startUrls")
            items = await self._run({"maxItems": 1, "startUrls": [tweet_url]})
            raw = next((item for item in items if isinstance(item, dict) and item.get("author")), None)
        if raw is None:
            raise UpstreamError("Failed to fetch tweet data")
        return normalize_tweet(raw)

    async def _fetch_interaction(self, tweet_url: str, kind: str) -> List[Participant]:
        handle, tweet_id = parse_tweet_url(tweet_url)
        items = await self._run({
            "maxItems": Config.INTERACTIONS_MAX_ITEMS,
            "startUrls": [f"https://x.com/{handle}/status/{tweet_id}/{kind}"],
        })
        users = normalize_users(items)
        logger.info(f"[Apify] {kind}: {len(users)} 人")
        return users

    async def fetch_likers(self, tweet_url: str) -> List[Participant]:
        return await self._fetch_interaction(tweet_url, "likes")

    async def fetch_retweeters(self, tweet_url: str) -> List[Participant]:
        return await self._fetch_interaction(tweet_url, "retweets")

    async def fetch_followers(self, handle: str) -> List[Participant]:
        """
        获取作者的关注者

        scraper-lite 不直接提供关注者列表，这里用作者最近推文的转推者近似。
        """
        handle = handle.lstrip("@")
        tweets = await self._run({
            "maxItems": Config.FOLLOWERS_MAX_ITEMS,
            "twitterHandles": [handle],
        })
        followers = normalize_users(tweets)

        recent_ids = [
            str(tweet["id"]) for tweet in tweets
            if isinstance(tweet, dict) and tweet.get("id")
        ][:FOLLOWER_SOURCE_TWEETS]
        batches = await gather_or_cancel(*(
            self._fetch_interaction(f"https://x.com/{handle}/status/{tweet_id}", "retweets")
            for tweet_id in recent_ids
        ))
        for batch in batches:
            followers.extend(batch)

        logger.info(f"[Apify] followers of @{handle}: {len(followers)} 条")
        return followers
