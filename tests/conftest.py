from types import SimpleNamespace

import pytest


@pytest.fixture
def cost_center_data():
    return {
        "id": "test-id-123",
        "name": "test-cost-center",
        "state": "active",
        "resources": [
            {"type": "Org", "name": "org1"},
            {"type": "Org", "name": "org2"},
            {"type": "User", "name": "direct-user1"},
            {"type": "User", "name": "direct-user2"},
            {"type": "Repo", "name": "some-repo"},
        ],
    }


@pytest.fixture
def sync_config():
    return SimpleNamespace(cost_center_name="test-cost-center", sources=[], team=None)
