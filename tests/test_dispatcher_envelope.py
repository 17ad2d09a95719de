from __future__ import annotations

import json
import threading

import pytest

from tasklens.core.dispatch.actions import Action
from tasklens.core.dispatch.dispatcher import Dispatcher
from tasklens.core.dispatch.envelope import ClientRequest, parse_request
from tasklens.core.errors import InvalidEnvelopeError, UnknownActionError


def _send(dispatcher: Dispatcher, input, action: str):
    return dispatcher.handle(json.dumps({"input": input, "action": action}))


def test_create_task_round_trip_envelope() -> None:
    dispatcher = Dispatcher()

    message = _send(dispatcher, "Design and implement a REST API for the payment system using Python", "create_task")

    assert message.type == "response"
    assert message.data["action"] == "task_created"
    assert message.data["taskId"] == message.state["currentTask"]["id"]
    assert len(message.state["tasks"]) == 1
    assert message.state["confidence"] == 0.85
    assert message.view["response"]["char_label"] == f"{len(message.data['text'])}/120 chars"


def test_too_short_input_is_error_envelope() -> None:
    dispatcher = Dispatcher()

    message = _send(dispatcher, "hi", "create_task")

    assert message.type == "error"
    assert message.data["confidence"] == 0.2
    assert message.state["tasks"] == []
    assert message.view["response"]["buttons"] == [{"label": "Retry", "action": "retry", "target": "none"}]


def test_unparsable_message_returns_generic_error() -> None:
    dispatcher = Dispatcher()

    message = dispatcher.handle("{not json")

    assert message.type == "error"
    assert message.data["text"] == "Invalid input"
    assert message.data["confidence"] == 0.1


def test_unknown_action_returns_low_confidence_error() -> None:
    message = Dispatcher().handle({"input": "x", "action": "fly_away"})

    assert message.type == "error"
    assert message.data["text"] == "Unknown action"
    assert message.data["confidence"] == 0.3


def test_parse_request_distinguishes_failures() -> None:
    with pytest.raises(UnknownActionError):
        parse_request('{"action": "launch"}')
    with pytest.raises(InvalidEnvelopeError):
        parse_request('["create_task"]')
    with pytest.raises(InvalidEnvelopeError):
        parse_request({"input": "no action"})
    with pytest.raises(InvalidEnvelopeError):
        parse_request({"input": [1, 2], "action": "create_task"})

    request = parse_request({"input": 17, "action": "select_task"})
    assert request.action is Action.SELECT_TASK
    assert request.input == 17


def test_every_action_is_dispatched() -> None:
    dispatcher = Dispatcher()
    task_id = dispatcher.dispatch(ClientRequest(input="Write the release notes", action=Action.CREATE_TASK)).task_id

    inputs = {
        Action.CREATE_TASK: "Write the onboarding guide",
        Action.EDIT_TASK: json.dumps({"taskId": task_id, "newText": "Write the final notes"}),
        Action.GET_SUGGESTION: "",
        Action.CLEAR_ALL: "",
        Action.RETRY: "",
    }
    for action in Action:
        response = dispatcher.dispatch(ClientRequest(input=inputs.get(action, task_id), action=action))
        assert response.action != "error", action


def test_edit_task_over_the_wire_uses_serialized_payload() -> None:
    dispatcher = Dispatcher()
    task_id = _send(dispatcher, "Write the release notes", "create_task").data["taskId"]

    message = _send(dispatcher, json.dumps({"taskId": task_id, "newText": "Write better notes"}), "edit_task")

    assert message.data["action"] == "task_updated"
    assert message.state["tasks"][0]["text"] == "Write better notes"


def test_string_id_matches_numeric_task() -> None:
    dispatcher = Dispatcher()
    task_id = _send(dispatcher, "Write the release notes", "create_task").data["taskId"]

    message = _send(dispatcher, str(task_id), "mark_complete")

    assert message.data["action"] == "task_completed"
    assert message.state["tasks"][0]["completed"] is True


def test_last_action_is_tracked_in_state() -> None:
    dispatcher = Dispatcher()

    message = _send(dispatcher, "", "retry")

    assert message.state["lastAction"] == "retry (90%)"
    assert message.view["summary"]["Last Action"] == "retry (90%)"


def test_state_message_has_no_response_view() -> None:
    message = Dispatcher().state_message()

    assert message.type == "state"
    assert message.data == message.state
    assert "response" not in message.view or message.view["response"] is None


def test_concurrent_requests_are_serialized() -> None:
    dispatcher = Dispatcher()

    def worker(offset: int) -> None:
        for index in range(10):
            _send(dispatcher, f"Write chapter {offset}-{index}", "create_task")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [task.id for task in dispatcher.store.tasks]
    assert len(ids) == 50
    assert len(set(ids)) == 50
