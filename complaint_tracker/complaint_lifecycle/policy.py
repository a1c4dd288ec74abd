"""Status transition policy for complaints.

Statuses are a flat relabeling by default: an administrator may move a
complaint from any status to any other. Deployments can narrow this by
listing forbidden ``from:to`` pairs in settings.
"""

from itertools import product

from complaint_tracker.errors import ValidationError
from complaint_tracker.models.complaint import ComplaintStatus

Transition = tuple[ComplaintStatus, ComplaintStatus]


class TransitionPolicy:
    def __init__(self, permitted: set[Transition] | None = None):
        if permitted is None:
            permitted = set(product(ComplaintStatus, ComplaintStatus))
        self.permitted = permitted

    @classmethod
    def allow_all(cls) -> "TransitionPolicy":
        return cls()

    @classmethod
    def from_forbidden(cls, pairs: list[str]) -> "TransitionPolicy":
        """Build a policy from ``"resolved:pending"`` style entries."""
        permitted = set(product(ComplaintStatus, ComplaintStatus))
        for pair in pairs:
            try:
                old, new = (part.strip() for part in pair.split(":"))
                permitted.discard((ComplaintStatus(old), ComplaintStatus(new)))
            except ValueError as e:
                raise ValueError(f"Invalid transition '{pair}', expected 'from:to'") from e
        return cls(permitted)

    def allows(self, old: ComplaintStatus, new: ComplaintStatus) -> bool:
        return (old, new) in self.permitted

    def check(self, old: ComplaintStatus, new: ComplaintStatus) -> None:
        if not self.allows(old, new):
            raise ValidationError(f"Status transition {old.value} -> {new.value} is not permitted")
