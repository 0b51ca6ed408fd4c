"""
Roles and signed-in session.

Role strings stored in the `user_roles` table are parsed once, at the
boundary, into a tagged union:

    Role = StandardRole(RoleName) | CustomRole(label)

A stored value "custom:<label>" becomes CustomRole(label); every other
value must be a RoleName. Role predicates are computed once when the
session is loaded and then read as plain attributes by the pages.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from bdl.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

CUSTOM_PREFIX = "custom:"


class RoleName(str, Enum):
    STUDENT = "student"
    BDL_MEMBER = "bdl_member"
    COMMUNICATION_MANAGER = "communication_manager"
    SECRETARY_GENERAL = "secretary_general"
    VICE_PRESIDENT = "vice_president"
    PRESIDENT = "president"


@dataclass(frozen=True)
class StandardRole:
    name: RoleName

    def to_db(self) -> str:
        return self.name.value


@dataclass(frozen=True)
class CustomRole:
    label: str

    def to_db(self) -> str:
        return f"{CUSTOM_PREFIX}{self.label}"


Role = Union[StandardRole, CustomRole]

VOTING_ROLES = frozenset({
    RoleName.BDL_MEMBER,
    RoleName.COMMUNICATION_MANAGER,
    RoleName.SECRETARY_GENERAL,
    RoleName.VICE_PRESIDENT,
})

# Highest first
ROLE_PRIORITY = [
    RoleName.PRESIDENT,
    RoleName.VICE_PRESIDENT,
    RoleName.SECRETARY_GENERAL,
    RoleName.COMMUNICATION_MANAGER,
    RoleName.BDL_MEMBER,
]


def parse_role(value: str) -> Role:
    """
    Parse a stored role string.

    Raises:
        ValidationError: For an empty custom label or an unknown role
    """
    raw = (value or "").strip()
    if raw.startswith(CUSTOM_PREFIX):
        label = raw[len(CUSTOM_PREFIX):].strip()
        if not label:
            raise ValidationError("Custom role has no label", field_name="role", field_value=value)
        return CustomRole(label)
    try:
        return StandardRole(RoleName(raw))
    except ValueError:
        raise ValidationError("Unknown role", field_name="role", field_value=value) from None


def parse_roles(values: Iterable[str]) -> List[Role]:
    """Parse role strings, skipping (and logging) the ones that do not parse."""
    roles: List[Role] = []
    for value in values:
        try:
            roles.append(parse_role(value))
        except ValidationError as e:
            logger.warning(f"Ignoring role: {e}")
    return roles


def standard_names(roles: Iterable[Role]) -> set:
    return {r.name for r in roles if isinstance(r, StandardRole)}


def primary_role(roles: Iterable[Role]) -> Optional[RoleName]:
    """Most significant standard role, or None."""
    names = standard_names(roles)
    for name in ROLE_PRIORITY:
        if name in names:
            return name
    return None


@dataclass
class UserSession:
    """
    The signed-in user as seen by every page.

    Built once per sign-in; role predicates are fixed at construction.
    """
    user_id: str
    full_name: Optional[str] = None
    roles: Tuple[Role, ...] = ()
    can_vote: bool = field(init=False)
    is_president: bool = field(init=False)
    is_staff: bool = field(init=False)
    primary_role: Optional[RoleName] = field(init=False)

    def __post_init__(self):
        self.roles = tuple(self.roles)
        names = standard_names(self.roles)
        self.can_vote = bool(names & VOTING_ROLES)
        self.is_president = RoleName.PRESIDENT in names
        self.is_staff = bool(names - {RoleName.STUDENT})
        self.primary_role = primary_role(self.roles)

    @property
    def custom_labels(self) -> List[str]:
        return [r.label for r in self.roles if isinstance(r, CustomRole)]

    def has_role(self, name: RoleName) -> bool:
        return name in standard_names(self.roles)

    def role_for_publication(self) -> str:
        """Role string recorded as author_role on journal entries."""
        if self.roles:
            return self.roles[0].to_db()
        return RoleName.BDL_MEMBER.value

    @classmethod
    def load(cls, store, user_id: str) -> "UserSession":
        """
        Load a session from the `profiles` and `user_roles` tables.

        Raises:
            StoreError: If either read fails
        """
        profile = (
            store.table("profiles")
            .select("full_name")
            .eq("id", user_id)
            .maybe_single()
            .execute()
        )
        rows = (
            store.table("user_roles")
            .select("role")
            .eq("user_id", user_id)
            .execute()
        )
        roles = parse_roles(row.get("role", "") for row in rows)
        logger.debug(f"Loaded session for {user_id} with {len(roles)} role(s)")
        return cls(
            user_id=user_id,
            full_name=(profile or {}).get("full_name"),
            roles=tuple(roles),
        )
