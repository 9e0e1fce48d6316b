"""
VRF Provider 注册表

每个 provider 对应一条链上的随机数合约，通过 id 选择。
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from randomness_wtf.config import Config
from randomness_wtf.errors import ValidationError


class VRFProvider(BaseModel):
    id: str
    name: str
    description: str = ""
    chain_name: str
    chain_id: int
    contract_address: str
    rpc_url: str
    block_explorer_url: str = ""
    abi: List[Dict[str, Any]] = Field(default_factory=list, repr=False)

    def public_dict(self) -> Dict[str, Any]:
        """返回给前端的字段 (不含 ABI)"""
        return self.model_dump(exclude={"abi"})


def _oracle_abi(int_type: str) -> List[Dict[str, Any]]:
    # Flow 合约使用 uint64，Base 合约使用 uint256，其余一致
    return [
        {
            "inputs": [
                {"internalType": int_type, "name": "min", "type": int_type},
                {"internalType": int_type, "name": "max", "type": int_type},
            ],
            "name": "getRandomNumber",
            "outputs": [{"internalType": int_type, "name": "", "type": int_type}],
            "stateMutability": "view",
            "type": "function",
        },
        {
            "inputs": [
                {"internalType": "string[]", "name": "items", "type": "string[]"},
            ],
            "name": "selectRandomItem",
            "outputs": [{"internalType": "string", "name": "", "type": "string"}],
            "stateMutability": "view",
            "type": "function",
        },
    ]


FLOW_VRF_ABI = _oracle_abi("uint64")
BASE_VRF_ABI = _oracle_abi("uint256")

VRF_PROVIDERS: Dict[str, VRFProvider] = {
    "flow": VRFProvider(
        id="flow",
        name="Default Random",
        description="Flow's native Verifiable Random Function for true on-chain randomness",
        chain_name="Flow Testnet",
        chain_id=545,
        contract_address="0x91502a85Ad74ba94499145477dccA19b3E1D6124",
        rpc_url="https://testnet.evm.nodes.onflow.org",
        block_explorer_url="https://evm-testnet.flowscan.io",
        abi=FLOW_VRF_ABI,
    ),
    "base": VRFProvider(
        id="base",
        name="Base VRF",
        description="Base's Verifiable Random Function for secure and transparent randomness",
        chain_name="Base Goerli Testnet",
        chain_id=84531,
        contract_address="0x8778be7Dd87De3752D1C64F558691d8c8dc52aeA",
        rpc_url="https://goerli.base.org",
        block_explorer_url="https://goerli.basescan.org",
        abi=BASE_VRF_ABI,
    ),
}


def list_providers() -> List[VRFProvider]:
    return list(VRF_PROVIDERS.values())


def get_provider(provider_id: Optional[str] = None) -> VRFProvider:
    """
    按 id 查找 provider，未指定时使用 DEFAULT_VRF_PROVIDER

    Raises:
        ValidationError: 未知的 provider id
    """
    key = (provider_id or Config.DEFAULT_VRF_PROVIDER or "").strip().lower()
    provider = VRF_PROVIDERS.get(key)
    if provider is None:
        raise ValidationError(
            f"Unknown VRF provider '{key}'. Available: {', '.join(VRF_PROVIDERS)}"
        )
    return provider
