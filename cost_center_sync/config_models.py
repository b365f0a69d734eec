"""
Model classes for cost center sync.

These classes provide structured access to configuration sections and to the
parsed responses of the GitHub APIs.
"""

from typing import Dict, List, Optional

from cost_center_sync.errors import ConfigurationError


class SourceSpecifier:
    """An organization, optionally narrowed to one team, whose members belong in the cost center."""

    def __init__(self, organization: str, team: Optional[str] = None):
        """
        Initialize a source specifier.

        Args:
            organization: GitHub organization login
            team: Team slug within the organization, or None for all org members

        Raises:
            ConfigurationError: If the organization is empty
        """
        # YAML reads all-digit names as numbers
        organization = "" if organization is None else str(organization).strip()
        team = "" if team is None else str(team).strip()
        if not organization:
            raise ConfigurationError("Source organization must not be empty")
        self.organization = organization
        self.team = team or None

    @classmethod
    def parse(cls, value) -> "SourceSpecifier":
        """
        Build a specifier from an "org" / "org/team" string or a mapping.

        Mappings accept the keys organization (or org) and team (or team_slug).
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, dict):
            organization = value.get("organization") or value.get("org")
            team = value.get("team") or value.get("team_slug")
            if not organization:
                raise ConfigurationError(f"Source specifier {value} missing 'organization' field")
            return cls(str(organization), str(team) if team else None)

        if isinstance(value, int) and not isinstance(value, bool):
            return cls(str(value))

        if isinstance(value, str):
            organization, _, team = value.strip().partition("/")
            if "/" in team:
                raise ConfigurationError(f"Invalid source specifier '{value}', expected 'org' or 'org/team'")
            return cls(organization, team or None)

        raise ConfigurationError(f"Unsupported source specifier: {value!r}")

    @property
    def label(self) -> str:
        """Human readable form used in logs and error messages."""
        if self.team:
            return f"{self.organization}/{self.team}"
        return self.organization

    def __eq__(self, other):
        if not isinstance(other, SourceSpecifier):
            return NotImplemented
        return (self.organization, self.team) == (other.organization, other.team)

    def __hash__(self):
        return hash((self.organization, self.team))

    def __repr__(self):
        return f"SourceSpecifier({self.label!r})"


class CostCenterRecord:
    """A cost center as returned by the enterprise billing API."""

    def __init__(self, data: Dict):
        """
        Initialize from a raw cost center entry.

        Resources are partitioned by type: "User" entries are the direct
        members, "Org" entries are the linked organizations. Any other
        resource type (e.g. "Repo") is ignored.

        Args:
            data: Dictionary from the costCenters array of the billing API
        """
        self.id = data.get("id")
        self.name = data.get("name")
        self.state = data.get("state")
        self.direct_members: List[str] = []
        self.organizations: List[str] = []

        for resource in data.get("resources") or []:
            resource_name = resource.get("name")
            if not resource_name:
                continue
            resource_type = resource.get("type")
            if resource_type == "User":
                if resource_name not in self.direct_members:
                    self.direct_members.append(resource_name)
            elif resource_type == "Org":
                if resource_name not in self.organizations:
                    self.organizations.append(resource_name)

    @property
    def is_active(self) -> bool:
        # Older responses omit state entirely
        return not self.state or self.state.lower() == "active"

    def __repr__(self):
        return (
            f"CostCenterRecord(id={self.id!r}, name={self.name!r}, "
            f"users={len(self.direct_members)}, orgs={len(self.organizations)})"
        )


class SyncPlan:
    """The members to add to and remove from a cost center."""

    def __init__(self, to_add: List[str], to_remove: List[str]):
        self.to_add = to_add
        self.to_remove = to_remove

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove

    def __eq__(self, other):
        if not isinstance(other, SyncPlan):
            return NotImplemented
        return self.to_add == other.to_add and self.to_remove == other.to_remove

    def __repr__(self):
        return f"SyncPlan(to_add={self.to_add!r}, to_remove={self.to_remove!r})"
