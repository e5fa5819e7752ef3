"""Tests for HelixResponse decoding strategies."""

import pytest

from helixdb import (
    DecodeError,
    Dest,
    FieldDecodeError,
    FieldNotFound,
    HelixResponse,
    HTTPStatusError,
    InvalidArgumentType,
    NilDestination,
    NoDestination,
    NotAPointer,
    Ref,
)
from models import CreateUserResponse, User

USERS_BODY = b'{"users":[{"name":"A"}],"total_count":3}'


@pytest.fixture
def users_response() -> HelixResponse:
    return HelixResponse(content=USERS_BODY)


@pytest.fixture
def not_found() -> HelixResponse:
    return HelixResponse(error=HTTPStatusError(404, "not found"))


class TestRaw:
    def test_returns_stored_pair(self, users_response):
        assert users_response.raw() == (USERS_BODY, None)

    def test_is_idempotent(self, users_response):
        first, _ = users_response.raw()
        second, _ = users_response.raw()
        assert first == second == USERS_BODY

    def test_returns_error_instead_of_raising(self, not_found):
        content, error = not_found.raw()
        assert content is None
        assert str(error) == "404: not found"


class TestAsMap:
    def test_generic_values(self):
        result = HelixResponse(content=b'{"a":1,"b":[1,2]}').as_map()
        assert result == {"a": 1, "b": [1, 2]}

    def test_reraises_stored_error(self, not_found):
        with pytest.raises(HTTPStatusError) as exc_info:
            not_found.as_map()
        assert exc_info.value is not_found.error
        assert str(exc_info.value) == "404: not found"

    def test_invalid_json(self):
        with pytest.raises(DecodeError):
            HelixResponse(content=b"{oops").as_map()

    def test_non_object_body(self):
        with pytest.raises(DecodeError):
            HelixResponse(content=b"[1, 2]").as_map()


class TestScan:
    def test_no_destination(self, users_response):
        with pytest.raises(NoDestination):
            users_response.scan()

    def test_no_destination_on_errored_response(self, not_found):
        with pytest.raises(NoDestination):
            not_found.scan()

    def test_reraises_stored_error(self, not_found):
        with pytest.raises(HTTPStatusError) as exc_info:
            not_found.scan(Ref())
        assert exc_info.value is not_found.error

    def test_stored_error_wins_over_destination_checks(self, not_found):
        with pytest.raises(HTTPStatusError):
            not_found.scan(3, Dest("x", None))

    def test_whole_body_into_dataclass(self):
        response = HelixResponse(content=b'{"user":{"ID":"u1","name":"John Doe","age":25,"created_at":9}}')
        created = CreateUserResponse()
        response.scan(created)
        assert created.user == User(id="u1", name="John Doe", age=25, created_at=9)

    def test_whole_body_into_dict_and_ref(self, users_response):
        as_dict: dict = {}
        users_response.scan(as_dict)
        assert as_dict["total_count"] == 3

        ref = Ref()
        users_response.scan(ref)
        assert ref.value == {"users": [{"name": "A"}], "total_count": 3}

    def test_whole_body_shape_mismatch(self, users_response):
        with pytest.raises(DecodeError):
            users_response.scan([])

    def test_single_field(self, users_response):
        users = Ref(list[User])
        users_response.scan(Dest("users", users))
        assert users.value == [User(name="A")]

    def test_fields_on_same_response(self, users_response):
        users: list = []
        count = Ref(int)
        users_response.scan(Dest("users", users))
        users_response.scan(Dest("total_count", count))
        assert len(users) == 1
        assert count.value == 3

    def test_missing_field(self, users_response):
        with pytest.raises(FieldNotFound) as exc_info:
            users_response.scan(Dest("missing", Ref()))
        assert exc_info.value.name == "missing"

    def test_multiple_fields(self, users_response):
        users = Ref(list[User])
        count = Ref(int)
        users_response.scan(Dest("users", users), Dest("total_count", count))
        assert users.value[0].name == "A"
        assert count.value == 3

    def test_duplicate_names_write_independently(self, users_response):
        first, second = Ref(int), Ref(float)
        users_response.scan(Dest("total_count", first), Dest("total_count", second))
        assert first.value == 3
        assert second.value == 3.0

    def test_fails_fast_and_keeps_earlier_writes(self, users_response):
        count = Ref(int)
        after = Ref()
        with pytest.raises(FieldNotFound):
            users_response.scan(Dest("total_count", count), Dest("missing", Ref()), Dest("users", after))
        assert count.value == 3
        assert after.value is None

    def test_field_shape_mismatch(self, users_response):
        with pytest.raises(FieldDecodeError) as exc_info:
            users_response.scan(Dest("total_count", Ref(str)))
        assert exc_info.value.name == "total_count"
        assert isinstance(exc_info.value.cause, DecodeError)
        assert str(exc_info.value).startswith('failed to scan field "total_count": ')

    def test_not_a_pointer(self, users_response):
        with pytest.raises(NotAPointer):
            users_response.scan(3)

    def test_nil_destination(self, users_response):
        with pytest.raises(NilDestination):
            users_response.scan(None)

    def test_nil_destination_inside_descriptor(self, users_response):
        with pytest.raises(NilDestination):
            users_response.scan(Dest("users", None))

    def test_not_a_pointer_inside_descriptor(self, users_response):
        with pytest.raises(NotAPointer):
            users_response.scan(Dest("total_count", 0))

    def test_mixed_arguments(self, users_response):
        with pytest.raises(InvalidArgumentType):
            users_response.scan(Ref(), Dest("users", Ref()))

    def test_fields_need_an_object_body(self):
        with pytest.raises(DecodeError, match="invalid json response"):
            HelixResponse(content=b"[1]").scan(Dest("a", Ref()))

    def test_response_is_immutable(self, users_response):
        with pytest.raises(AttributeError):
            users_response.content = b"{}"
