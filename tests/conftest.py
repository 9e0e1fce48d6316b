import pytest
from fastapi.testclient import TestClient

from main import app
from randomness_wtf.api.deps import get_games_client, get_interaction_source, get_oracle_factory
from randomness_wtf.services.games import GamesClient
from randomness_wtf.services.randomness import RandomnessClient
from tests.fakes import (
    ContractFactoryRecorder,
    FakeBattlesContract,
    FakeOracleContract,
    FakePackContract,
)


@pytest.fixture
def oracle_contract():
    return FakeOracleContract(numbers=[42, 7, 99])


@pytest.fixture
def contract_factory(oracle_contract):
    return ContractFactoryRecorder(oracle_contract)


@pytest.fixture
def battles_contract():
    return FakeBattlesContract({})


@pytest.fixture
def api(contract_factory, battles_contract):
    """TestClient with on-chain and Apify dependencies replaced by in-memory fakes"""
    app.dependency_overrides[get_oracle_factory] = lambda: (
        lambda provider_id=None: RandomnessClient.for_provider_id(
            provider_id, contract_factory=contract_factory
        )
    )
    app.dependency_overrides[get_games_client] = lambda: GamesClient(
        battles_factory=lambda: battles_contract,
        opening_factory=FakePackContract,
        chain_id=545,
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def use_source():
    """Installs an interaction source for /api/social-interactions"""

    def install(source):
        app.dependency_overrides[get_interaction_source] = lambda: source
        return source

    return install
