import pytest

from randomness_wtf.errors import (
    EmptyListError,
    InvalidRangeError,
    RateLimitError,
    UpstreamError,
    ValidationError,
)
from randomness_wtf.services.providers import VRF_PROVIDERS, get_provider, list_providers
from randomness_wtf.services.randomness import RandomnessClient
from tests.fakes import ContractFactoryRecorder, FakeOracleContract


@pytest.fixture
def factory():
    return ContractFactoryRecorder(FakeOracleContract(numbers=[42, 77]))


@pytest.fixture
def client(factory):
    return RandomnessClient(VRF_PROVIDERS["flow"], contract_factory=factory)


def test_random_in_range_calls_oracle(client, factory):
    assert client.random_in_range(1, 100) == 42
    assert factory.contract.calls == [("getRandomNumber", 1, 100)]


@pytest.mark.parametrize("lo,hi", [(5, 5), (10, 3)])
def test_random_in_range_requires_min_below_max(client, factory, lo, hi):
    with pytest.raises(InvalidRangeError):
        client.random_in_range(lo, hi)
    assert factory.connected == []


def test_negative_bounds_are_rejected(client):
    with pytest.raises(InvalidRangeError):
        client.random_in_range(-1, 10)


def test_random_pick_empty_list(client):
    with pytest.raises(EmptyListError):
        client.random_pick([])


def test_random_pick_single_item_does_not_connect(client, factory):
    assert client.random_pick(["only"]) == "only"
    assert factory.connected == []


def test_random_pick_uses_contract(client, factory):
    assert client.random_pick(["a", "b", "c"]) == "a"
    assert factory.contract.calls == [("selectRandomItem", ["a", "b", "c"])]


def test_connection_is_lazy_and_cached(client, factory):
    assert not client.is_connected
    client.random_in_range(1, 10)
    client.random_in_range(1, 10)
    assert factory.connected == ["flow"]
    assert client.is_connected


def test_switching_provider_drops_cached_connection(client, factory):
    client.random_in_range(1, 10)
    client.switch_provider(VRF_PROVIDERS["base"])
    assert not client.is_connected
    client.random_in_range(1, 10)
    assert factory.connected == ["flow", "base"]
    assert client.provider.id == "base"


def test_switching_to_same_provider_keeps_connection(client, factory):
    client.random_in_range(1, 10)
    client.switch_provider(VRF_PROVIDERS["flow"])
    assert client.is_connected
    assert factory.connected == ["flow"]


def test_contract_failure_becomes_upstream_error():
    contract = FakeOracleContract(error=ValueError("execution reverted"))
    client = RandomnessClient(VRF_PROVIDERS["flow"], contract_factory=ContractFactoryRecorder(contract))
    with pytest.raises(UpstreamError) as excinfo:
        client.random_in_range(1, 10)
    assert not isinstance(excinfo.value, RateLimitError)


def test_rate_limited_rpc_becomes_rate_limit_error():
    contract = FakeOracleContract(error=RuntimeError("429 Client Error: Too Many Requests"))
    client = RandomnessClient(VRF_PROVIDERS["flow"], contract_factory=ContractFactoryRecorder(contract))
    with pytest.raises(RateLimitError):
        client.random_pick(["a", "b"])


def test_connect_failure_is_upstream_error():
    def broken(provider):
        raise ConnectionError("rpc down")

    client = RandomnessClient(VRF_PROVIDERS["base"], contract_factory=broken)
    with pytest.raises(UpstreamError):
        client.random_in_range(1, 2)


def test_yolo_roll_threshold():
    contract = FakeOracleContract(numbers=[50, 51])
    client = RandomnessClient(VRF_PROVIDERS["flow"], contract_factory=ContractFactoryRecorder(contract))
    assert client.roll_yolo() == (50, "NO WAY!")
    assert client.roll_yolo() == (51, "YOLO!")
    assert contract.calls[0] == ("getRandomNumber", 1, 100)


def test_registry_lookup():
    assert {p.id for p in list_providers()} == {"flow", "base"}
    assert get_provider("BASE").chain_id == 84531
    with pytest.raises(ValidationError):
        get_provider("solana")


def test_public_dict_hides_abi():
    data = get_provider("flow").public_dict()
    assert "abi" not in data
    assert data["contract_address"].startswith("0x")


def test_for_provider_id_uses_default(monkeypatch):
    from randomness_wtf.config import Config

    monkeypatch.setattr(Config, "DEFAULT_VRF_PROVIDER", "base")
    client = RandomnessClient.for_provider_id(None, contract_factory=ContractFactoryRecorder())
    assert client.provider.id == "base"


def test_bare_429_in_revert_message_is_not_rate_limit():
    contract = FakeOracleContract(error=ValueError("execution reverted: 0x4291aa00 not allowed at block 1429"))
    client = RandomnessClient(VRF_PROVIDERS["flow"], contract_factory=ContractFactoryRecorder(contract))
    with pytest.raises(UpstreamError) as excinfo:
        client.random_in_range(1, 10)
    assert not isinstance(excinfo.value, RateLimitError)


@pytest.mark.parametrize("message", [
    "429 Client Error: Too Many Requests for url: https://rpc.example",
    "Too Many Requests",
    "rate limit exceeded",
])
def test_rate_limit_status_text_is_detected(message):
    from randomness_wtf.errors import is_rate_limit_message

    assert is_rate_limit_message(message)
