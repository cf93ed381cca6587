"""
Tests for the user list controller.

Covers:
  - Response shape negotiation (usuarios / clientes / bare list)
  - Load failure leaves an empty list with loading cleared
  - Delete followed by exactly one full reload
  - Table projection
"""
from unittest.mock import MagicMock, call

import pytest

from api import ApiError
from users import UserListController, UserRecord, extract_user_rows, users_to_frame

ROWS = [
    {"id": 1, "nome": "Ana", "email": "ana@example.com", "telefone": "(11) 90000-0000", "ativo": "1"},
    {"id": 2, "nome": "Bruno", "email": "bruno@example.com", "telefone": None, "ativo": "0"},
]


@pytest.mark.parametrize("payload", [
    {"usuarios": ROWS},
    {"clientes": ROWS},
    ROWS,
    {"usuarios": ROWS, "clientes": []},
])
def test_extract_user_rows_shapes(payload):
    assert extract_user_rows(payload) == ROWS


@pytest.mark.parametrize("payload", [None, {}, {"total": 2}, "unexpected"])
def test_extract_user_rows_unknown_shape(payload):
    assert extract_user_rows(payload) == []


def test_load_builds_records(api):
    api.list_users.return_value = {"usuarios": ROWS}
    controller = UserListController(api)
    users = controller.load()
    assert [u.id for u in users] == [1, 2]
    assert users[0].is_active
    assert users[1].phone is None
    assert not controller.is_loading


def test_load_failure_leaves_empty_list(api):
    controller = UserListController(api)
    api.list_users.return_value = ROWS
    controller.load()
    api.list_users.side_effect = ApiError("GET /usuarios failed", status=500)
    assert controller.load() == []
    assert controller.users == []
    assert not controller.is_loading


def test_delete_removes_then_reloads_once():
    api = MagicMock()
    api.list_users.return_value = ROWS[1:]
    controller = UserListController(api)
    assert controller.delete(1) is True
    assert api.mock_calls == [call.delete_user(1), call.list_users()]
    assert [u.id for u in controller.users] == [2]


def test_delete_reloads_regardless_of_response():
    api = MagicMock()
    api.delete_user.return_value = None
    api.list_users.return_value = ROWS
    controller = UserListController(api)
    controller.delete(2)
    api.list_users.assert_called_once()


def test_failed_delete_keeps_list(api):
    api.list_users.return_value = ROWS
    controller = UserListController(api)
    controller.load()
    api.list_users.reset_mock()
    api.delete_user.side_effect = ApiError("POST /usuario/delete failed", status=500)
    assert controller.delete(1) is False
    api.list_users.assert_not_called()
    assert len(controller.users) == 2


def test_find(api):
    api.list_users.return_value = ROWS
    controller = UserListController(api)
    controller.load()
    assert controller.find(2).name == "Bruno"
    assert controller.find(99) is None


def test_users_to_frame():
    frame = users_to_frame([UserRecord.from_row(r) for r in ROWS])
    assert list(frame.columns) == ["Name", "E-mail", "Phone", "Active"]
    assert frame["Phone"].tolist() == ["(11) 90000-0000", "-"]
    assert frame["Active"].tolist() == ["Yes", "No"]


def test_users_to_frame_empty():
    frame = users_to_frame([])
    assert frame.empty
    assert list(frame.columns) == ["Name", "E-mail", "Phone", "Active"]


def test_malformed_rows_are_skipped(api):
    api.list_users.return_value = [{"nome": "no id"}, "garbage", None, ROWS[0]]
    controller = UserListController(api)
    users = controller.load()
    assert [u.id for u in users] == [1]
    assert not controller.is_loading


def test_is_loading_only_while_fetching():
    seen = []
    controller = None

    def list_users():
        seen.append(controller.is_loading)
        return ROWS

    api = MagicMock()
    api.list_users.side_effect = list_users
    controller = UserListController(api)
    assert not controller.is_loading
    controller.load()
    assert seen == [True]
    assert not controller.is_loading
