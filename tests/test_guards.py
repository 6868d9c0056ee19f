import pytest

from core.exceptions import BadRequestError, ForbiddenError, NotFoundError
from core.guards import (
    is_valid_id,
    require_member,
    require_non_empty,
    require_owner,
    require_valid_id,
)
from models.base import generate_id
from models.class_membership import ClassMembershipModel
from models.class_model import ClassModel


def _class_with(owners, members) -> ClassModel:
    model = ClassModel(class_id=generate_id(), title="t", access_token="tok")
    for user_id in owners:
        model.memberships.append(ClassMembershipModel(user_id=user_id, role_in_class="owner"))
    for user_id in members:
        model.memberships.append(ClassMembershipModel(user_id=user_id, role_in_class="member"))
    return model


def test_generated_ids_have_valid_shape():
    assert is_valid_id(generate_id())


@pytest.mark.parametrize("value", ["", "abc", "g" * 24, "A" * 24, "0" * 25, None])
def test_require_valid_id_rejects_malformed(value):
    with pytest.raises(BadRequestError) as exc:
        require_valid_id(value)
    assert exc.value.message == "Wrong path"


def test_require_non_empty():
    assert require_non_empty("x", "missing") == "x"
    with pytest.raises(NotFoundError, match="Class not found"):
        require_non_empty(None, "Class not found")


def test_require_member_accepts_owners_and_members():
    model = _class_with(owners=["o"], members=["m"])
    require_member(model, "o", "nope")
    require_member(model, "m", "nope")
    with pytest.raises(ForbiddenError, match="nope"):
        require_member(model, "stranger", "nope")


def test_require_owner_rejects_plain_members():
    model = _class_with(owners=["o"], members=["m"])
    require_owner(model, "o", "nope")
    with pytest.raises(ForbiddenError) as exc:
        require_owner(model, "m", "You can not remove class")
    assert exc.value.kind == "Forbidden"
    assert exc.value.status_code == 403
