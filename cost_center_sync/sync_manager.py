"""
Cost center membership sync driven by organization and team rosters.
"""

import logging
import time
from typing import List, Optional, Tuple

import requests

from cost_center_sync.config_models import CostCenterRecord, SourceSpecifier, SyncPlan
from cost_center_sync.errors import (
    CostCenterSyncError,
    MutationFailedError,
    SourceFetchFailedError,
)
from cost_center_sync.reconciler import format_result, reconcile


class CostCenterSyncManager:
    """Makes the members of a cost center match the members of its sources."""

    def __init__(self, config, membership_source, cost_center_store):
        """
        Initialize the sync manager.

        Args:
            config: ConfigManager with the cost center name and source settings
            membership_source: GitHubMembershipSource (or compatible) for org/team rosters
            cost_center_store: CostCenterStore (or compatible) for the target cost center
        """
        self.config = config
        self.membership_source = membership_source
        self.cost_center_store = cost_center_store
        self.logger = logging.getLogger(__name__)

    def resolve_target_group(self, name: str) -> CostCenterRecord:
        """Look up the cost center to sync. Raises GroupNotFoundError if it does not exist."""
        start_time = time.monotonic()
        cost_center = self.cost_center_store.find_cost_center(name)
        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        self.logger.info(
            f"Resolved cost center '{name}' → {cost_center.id} "
            f"({len(cost_center.organizations)} orgs, {len(cost_center.direct_members)} users, took {elapsed_ms}ms)"
        )
        return cost_center

    def determine_sources(self, cost_center: CostCenterRecord) -> List[SourceSpecifier]:
        """
        Decide which organizations/teams supply the desired membership.

        Explicitly configured sources win. Otherwise every organization linked
        to the cost center is used, narrowed to the configured team if any.
        """
        if self.config.sources:
            return list(self.config.sources)

        return [SourceSpecifier(org, self.config.team) for org in cost_center.organizations]

    def collect_desired_members(self, sources: List[SourceSpecifier]) -> List[str]:
        """
        Merge the members of every source into one deduplicated list.

        With a single source any fetch error aborts the run. With several
        sources a failing source is logged and skipped, unless all of them
        fail.

        Returns:
            Member logins in first-seen order
        """
        all_users: List[str] = []
        seen = set()
        failures = []

        for source in sources:
            try:
                members = self.membership_source.get_members(source)
            except (requests.exceptions.RequestException, CostCenterSyncError, ValueError) as e:
                if len(sources) == 1:
                    raise SourceFetchFailedError(
                        f"Could not fetch members from {source.label}: {e}", source
                    ) from e
                self.logger.warning(f"Could not fetch members from {source.label}: {e}")
                failures.append((source, e))
                continue

            for member in members:
                if member and member not in seen:
                    seen.add(member)
                    all_users.append(member)

        if sources and len(failures) == len(sources):
            details = "; ".join(f"{source.label}: {error}" for source, error in failures)
            raise SourceFetchFailedError(f"Could not fetch members from any source: {details}") from failures[-1][1]

        self.logger.info(f"Retrieved {len(all_users)} unique users from {len(sources)} sources")
        return all_users

    def apply_changes(self, cost_center_id: str, to_add: List[str],
                      to_remove: List[str]) -> Tuple[List[str], List[str]]:
        """
        Add then remove members one request at a time.

        The first failing request stops the run; requests already made are
        not rolled back.

        Returns:
            Tuple of (added, removed) logins that were applied
        """
        added: List[str] = []
        removed: List[str] = []

        for username in to_add:
            try:
                self.cost_center_store.add_user(cost_center_id, username)
            except (requests.exceptions.RequestException, CostCenterSyncError) as e:
                self._log_partial_failure("add", username, added, removed)
                raise MutationFailedError(str(e), username=username, action="add") from e
            added.append(username)

        for username in to_remove:
            try:
                self.cost_center_store.remove_user(cost_center_id, username)
            except (requests.exceptions.RequestException, CostCenterSyncError) as e:
                self._log_partial_failure("remove", username, added, removed)
                raise MutationFailedError(str(e), username=username, action="remove") from e
            removed.append(username)

        return added, removed

    def _log_partial_failure(self, action: str, username: str, added: List[str], removed: List[str]):
        self.logger.error(f"❌ Failed to {action} {username}; stopping remaining changes")
        if added or removed:
            self.logger.error(
                f"   Already applied before the failure: {len(added)} added, {len(removed)} removed"
            )

    def build_plan(self, cost_center: Optional[CostCenterRecord] = None) -> Tuple[CostCenterRecord, SyncPlan]:
        """Resolve the cost center, gather its sources and reconcile the two member lists."""
        if cost_center is None:
            cost_center = self.resolve_target_group(self.config.cost_center_name)

        sources = self.determine_sources(cost_center)
        if not sources:
            self.logger.warning(
                f"Cost center '{cost_center.name}' has no linked organizations and no sources are configured"
            )

        desired = self.collect_desired_members(sources)
        plan = reconcile(desired, cost_center.direct_members)

        self.logger.debug(f"Users to add: {', '.join(plan.to_add)}")
        self.logger.debug(f"Users to remove: {', '.join(plan.to_remove)}")
        return cost_center, plan

    def run(self, mode: str = "apply") -> str:
        """
        Execute one sync.

        Args:
            mode: "plan" to only compute changes, "apply" to push them to GitHub

        Returns:
            The summary string "Added users: ..., Removed users: ..."
        """
        if mode not in ("plan", "apply"):
            raise ValueError(f"Invalid mode: {mode}. Must be 'plan' or 'apply'")

        cost_center, plan = self.build_plan()
        self.logger.info(
            f"Cost center '{cost_center.name}': {len(plan.to_add)} to add, {len(plan.to_remove)} to remove"
        )

        if mode == "plan":
            self.logger.info("MODE=plan (no changes will be made)")
        elif plan.is_empty:
            self.logger.info("Cost center already in sync, nothing to do")
        else:
            self.apply_changes(cost_center.id, plan.to_add, plan.to_remove)

        return format_result(plan)
