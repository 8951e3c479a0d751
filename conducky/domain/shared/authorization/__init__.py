"""Event-level authorization vocabulary."""

from .action import EventAction
from .policy_set import POLICY_SET, EventPolicySet, PolicyRule, allow

__all__ = ["EventAction", "EventPolicySet", "POLICY_SET", "PolicyRule", "allow"]
