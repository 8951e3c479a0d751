"""Principal: an authenticated caller, resolved per-request from the bearer token."""

from dataclasses import dataclass

from conducky.domain.auth.model.identity import Identity
from conducky.domain.auth.model.value import UserId


@dataclass(frozen=True)
class Principal(Identity):
    """The authenticated identity of the current requester.

    Carries only the user id: roles are scope-dependent and are resolved
    on demand by RBACService rather than snapshotted here.
    """

    user_id: UserId
