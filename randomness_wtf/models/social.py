from pydantic import BaseModel, Field
from typing import Optional, List


class Participant(BaseModel):
    """
    推文互动参与者 (关注者 / 转推者 / 点赞者)
    """
    id: str = Field(..., min_length=1, description="用户唯一ID")
    username: str = Field(..., description="显示用的 @handle")
    name: str = Field("User", description="显示名称")
    demo: bool = Field(False, description="是否为演示模式生成的占位用户")

    class Config:
        extra = "ignore"


class InteractionCriteria(BaseModel):
    """
    筛选条件，多个条件同时选择时取交集 (AND)
    shares 表示点赞
    """
    follows: bool = False
    retweets: bool = False
    shares: bool = False

    def selected(self) -> List[str]:
        return [name for name in ("follows", "retweets", "shares") if getattr(self, name)]


class TweetStats(BaseModel):
    retweets: int = 0
    likes: int = 0


class TweetInfo(BaseModel):
    id: str
    text: str = ""
    author: Participant
    stats: TweetStats = Field(default_factory=TweetStats)


class InteractionCounts(BaseModel):
    follows: int = 0
    retweets: int = 0
    shares: int = 0
    total: int = 0


class AggregationResult(BaseModel):
    users: List[Participant]
    tweet_info: TweetInfo = Field(..., alias="tweetInfo")
    counts: InteractionCounts
    demo: bool = False

    class Config:
        populate_by_name = True


class SocialInteractionsRequest(BaseModel):
    """POST /api/social-interactions 请求体"""
    tweet_url: Optional[str] = Field(None, alias="tweetUrl")
    criteria: Optional[InteractionCriteria] = None
    demo_mode: Optional[bool] = Field(None, alias="demoMode")

    class Config:
        populate_by_name = True


class WinnersRequest(BaseModel):
    """POST /api/social-interactions/winners 请求体"""
    users: List[Participant] = Field(default_factory=list)
    count: int = 1
    provider: Optional[str] = None
