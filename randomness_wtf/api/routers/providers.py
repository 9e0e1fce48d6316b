from fastapi import APIRouter

from randomness_wtf.config import Config
from randomness_wtf.services.providers import list_providers

providers_router = APIRouter(prefix="/api/providers", tags=["Providers"])


@providers_router.get("")
async def get_providers():
    """可选的 VRF provider 列表"""
    return {
        "success": True,
        "providers": [provider.public_dict() for provider in list_providers()],
        "default": Config.DEFAULT_VRF_PROVIDER,
    }
