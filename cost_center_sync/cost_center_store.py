"""
Enterprise billing API client for cost center membership.
"""

from typing import List

from cost_center_sync.config_models import CostCenterRecord
from cost_center_sync.errors import GroupNotFoundError
from cost_center_sync.github_api import GitHubAPIClient


class CostCenterStore(GitHubAPIClient):
    """Reads and mutates the cost centers of one GitHub Enterprise."""

    def __init__(self, token: str, enterprise: str, **kwargs):
        """
        Initialize the cost center store.

        Args:
            token: Token with the manage_billing:enterprise scope
            enterprise: Enterprise slug
            **kwargs: base_url, timeout and session, see GitHubAPIClient
        """
        super().__init__(token, **kwargs)
        if not enterprise:
            raise ValueError("Enterprise name is required")
        self.enterprise_name = enterprise

    @property
    def cost_centers_url(self) -> str:
        return f"{self.base_url}/enterprises/{self.enterprise_name}/settings/billing/cost-centers"

    def list_cost_centers(self) -> List[CostCenterRecord]:
        """Get every cost center visible to the token."""
        response_data = self._make_request(self.cost_centers_url) or {}
        cost_centers = [CostCenterRecord(cc) for cc in response_data.get("costCenters", [])]
        self.logger.debug(f"Found {len(cost_centers)} cost centers in enterprise {self.enterprise_name}")
        return cost_centers

    def find_cost_center(self, name: str) -> CostCenterRecord:
        """
        Find a cost center by exact name.

        Args:
            name: Cost center name, compared case-sensitively

        Returns:
            The matching CostCenterRecord

        Raises:
            GroupNotFoundError: If no cost center has that name
        """
        self.logger.debug(
            f"Getting cost center details for name: {name} in enterprise: {self.enterprise_name}"
        )
        cost_centers = self.list_cost_centers()

        for cost_center in cost_centers:
            if cost_center.name == name:
                if not cost_center.is_active:
                    self.logger.warning(
                        f"Cost center '{name}' ({cost_center.id}) has state '{cost_center.state}'; "
                        "GitHub may reject membership changes"
                    )
                self.logger.debug(
                    f"Found cost center ID: {cost_center.id} with {len(cost_center.organizations)} "
                    f"organizations and {len(cost_center.direct_members)} direct users"
                )
                return cost_center

        available = [cc.name for cc in cost_centers if cc.name]
        self.logger.error(f"Cost center not found. Available centers: {', '.join(available)}")
        raise GroupNotFoundError(name, available)

    def add_user(self, cost_center_id: str, username: str) -> None:
        """Add a single user to a cost center."""
        self.logger.debug(f"Adding user: {username} to cost center: {cost_center_id}")
        url = f"{self.cost_centers_url}/{cost_center_id}/resource"
        self._make_request(url, method='POST', json={"users": [username]})
        self.logger.info(f"✅ {username} → {cost_center_id}")

    def remove_user(self, cost_center_id: str, username: str) -> None:
        """Remove a single user from a cost center."""
        self.logger.debug(f"Removing user: {username} from cost center: {cost_center_id}")
        url = f"{self.cost_centers_url}/{cost_center_id}/resource"
        self._make_request(url, method='DELETE', json={"users": [username]})
        self.logger.info(f"✅ {username} removed from {cost_center_id}")
