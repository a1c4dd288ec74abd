from dataclasses import dataclass

from complaint_tracker.models.identity import UserRole


@dataclass(frozen=True)
class Identity:
    """Verified caller attached to a request by the access gateway."""

    id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
