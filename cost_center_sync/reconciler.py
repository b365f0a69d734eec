"""
Membership reconciliation between a desired and a current member list.
"""

from typing import Iterable, List

from cost_center_sync.config_models import SyncPlan


def unique_members(members: Iterable[str]) -> List[str]:
    """Drop duplicate and empty logins, keeping the first occurrence order."""
    seen = set()
    result = []
    for member in members:
        if not member or member in seen:
            continue
        seen.add(member)
        result.append(member)
    return result


def reconcile(desired: Iterable[str], current: Iterable[str]) -> SyncPlan:
    """
    Compute the additions and removals that make current equal to desired.

    Logins are compared by exact string equality. Additions keep the order of
    desired, removals keep the order of current.

    Args:
        desired: Members that should be in the cost center
        current: Members that are in the cost center now

    Returns:
        SyncPlan with disjoint to_add and to_remove lists
    """
    desired_members = unique_members(desired)
    current_members = unique_members(current)
    desired_set = set(desired_members)
    current_set = set(current_members)

    to_add = [user for user in desired_members if user not in current_set]
    to_remove = [user for user in current_members if user not in desired_set]
    return SyncPlan(to_add, to_remove)


def format_result(plan: SyncPlan) -> str:
    """Render a plan as the one-line summary published as the run's result."""
    return f"Added users: {', '.join(plan.to_add)}, Removed users: {', '.join(plan.to_remove)}"
