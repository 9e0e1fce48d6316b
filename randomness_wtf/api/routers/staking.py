from fastapi import APIRouter

from randomness_wtf.models.random import StakingEstimateRequest
from randomness_wtf.services.staking import estimate_rewards

staking_router = APIRouter(prefix="/api/staking", tags=["Staking"])


@staking_router.post("/estimate")
async def staking_estimate(req: StakingEstimateRequest):
    """质押收益估算 (模拟，不会真正质押)"""
    estimate = estimate_rewards(req.amount, req.duration_days)
    return {
        "success": True,
        "apy": estimate["apy"],
        "estimatedRewards": estimate["estimated_rewards"],
        "simulated": True,
    }
