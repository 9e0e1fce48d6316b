"""
质押收益估算 (模拟)

不会发生任何链上操作，只按固定公式估算: APY = 5% + 每天 0.5%
"""
from typing import Dict

from randomness_wtf.errors import ValidationError

BASE_APY = 5.0
APY_PER_DAY = 0.5
MAX_DURATION_DAYS = 365


def estimate_rewards(amount: float, duration_days: int) -> Dict[str, float]:
    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    if duration_days < 1 or duration_days > MAX_DURATION_DAYS:
        raise ValidationError(f"Duration must be between 1 and {MAX_DURATION_DAYS} days")

    apy = BASE_APY + duration_days * APY_PER_DAY
    reward = amount * (apy / 100) * (duration_days / 365)
    return {"apy": apy, "estimated_rewards": round(reward, 4)}
