from pydantic import BaseModel, Field
from typing import Optional, List


class RandomNumberRequest(BaseModel):
    min: int = 1
    max: int = 100
    provider: Optional[str] = None


class RandomItemRequest(BaseModel):
    """
    items 与 text 二选一；text 为多行/逗号分隔的原始输入
    """
    items: Optional[List[str]] = None
    text: Optional[str] = None
    provider: Optional[str] = None


class DrawItemsRequest(BaseModel):
    items: List[str] = Field(default_factory=list)
    count: int = 1
    provider: Optional[str] = None


class StakingEstimateRequest(BaseModel):
    amount: float
    duration_days: int = Field(30, alias="durationDays")

    class Config:
        populate_by_name = True
