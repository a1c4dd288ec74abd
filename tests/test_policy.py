import pytest

from complaint_tracker.complaint_lifecycle.policy import TransitionPolicy
from complaint_tracker.errors import ValidationError
from complaint_tracker.models.complaint import ComplaintStatus as S


def test_default_allows_every_transition():
    policy = TransitionPolicy.allow_all()
    for old in S:
        for new in S:
            assert policy.allows(old, new)


def test_forbidden_pairs():
    policy = TransitionPolicy.from_forbidden(["resolved:pending", " rejected : in_progress "])

    assert not policy.allows(S.RESOLVED, S.PENDING)
    assert not policy.allows(S.REJECTED, S.IN_PROGRESS)
    assert policy.allows(S.PENDING, S.RESOLVED)

    with pytest.raises(ValidationError, match="resolved -> pending"):
        policy.check(S.RESOLVED, S.PENDING)


@pytest.mark.parametrize("entry", ["resolved", "resolved:closed", "a:b:c"])
def test_bad_entries(entry):
    with pytest.raises(ValueError):
        TransitionPolicy.from_forbidden([entry])
