"""HTTP tests for the /messaging routes."""
import pytest
from fastapi.testclient import TestClient

from chat_api.app.core.notifications import MESSAGE_UPDATE
from chat_api.app.core.store import Store
from chat_api.app.main import create_app

from fakes import BrokenCollection, FailingNotifier, InMemoryCollection, NullCreateCollection


HELLO = {"msg": "Hello", "msgFrom": "User1", "msgDateTime": "2024-06-04T00:00:00.000Z"}


def add_message(client, message):
    return client.post("/messaging/addMessage", json={"messageToAdd": message})


class TestAddMessage:
    def test_stores_and_returns_message(self, client):
        response = add_message(client, HELLO)

        assert response.status_code == 200
        body = response.json()
        assert body["id"]
        assert body == dict(HELLO, id=body["id"])

    def test_publishes_one_update(self, client, notifier):
        body = add_message(client, HELLO).json()

        assert notifier.events == [(MESSAGE_UPDATE, {"msg": body})]

    def test_missing_envelope(self, client, notifier):
        response = client.post("/messaging/addMessage", json={})

        assert response.status_code == 400
        assert response.text == "Invalid request"
        assert notifier.events == []

    def test_null_envelope(self, client):
        response = client.post("/messaging/addMessage", json={"messageToAdd": None})

        assert response.status_code == 400
        assert response.text == "Invalid request"

    @pytest.mark.parametrize(
        "message",
        [
            {"msg": "x", "msgFrom": "", "msgDateTime": None},
            {"msg": "CS4530", "msgDateTime": "2025-11-11T00:00:00.000Z"},
            {"msg": "", "msgFrom": "User1", "msgDateTime": "2025-11-11T00:00:00.000Z"},
            {"msg": "Hello", "msgFrom": "User1", "msgDateTime": "not a date at all"},
            "Hello",
        ],
    )
    def test_invalid_message_body(self, client, store, message):
        response = add_message(client, message)

        assert response.status_code == 400
        assert response.text == "Invalid message body"
        assert store.messages.documents == []

    def test_storage_failure_is_500_without_notification(self, client_for, notifier):
        client = client_for(Store(users=InMemoryCollection(), messages=BrokenCollection()))

        response = add_message(client, HELLO)

        assert response.status_code == 500
        assert response.text.startswith("Error occurred while adding a message: ")
        assert notifier.events == []

    def test_empty_create_result_is_500(self, client_for):
        client = client_for(Store(users=InMemoryCollection(), messages=NullCreateCollection()))

        response = add_message(client, HELLO)

        assert response.status_code == 500
        assert "Failed to create new message" in response.text

    def test_numeric_epoch_is_accepted(self, client):
        response = add_message(client, dict(HELLO, msgDateTime=1717459200000))

        assert response.status_code == 200
        assert response.json()["msgDateTime"] == "2024-06-04T00:00:00.000Z"

    def test_offset_timestamp_is_returned_in_utc(self, client):
        response = add_message(client, dict(HELLO, msgDateTime="2024-06-04T05:30:00+05:30"))

        assert response.status_code == 200
        assert response.json()["msgDateTime"] == "2024-06-04T00:00:00.000Z"

    def test_notification_failure_uses_add_message_error(self, store):
        client = TestClient(create_app(store=store, notifier=FailingNotifier()))

        response = add_message(client, HELLO)

        assert response.status_code == 500
        assert response.text == "Error occurred while adding a message: push channel down"


class TestGetMessages:
    def test_empty(self, client):
        response = client.get("/messaging/getMessages")

        assert response.status_code == 200
        assert response.json() == []

    def test_round_trip_in_date_order(self, client):
        later = {"msg": "Later", "msgFrom": "User2", "msgDateTime": "2024-06-05T00:00:00.000Z"}
        add_message(client, later)
        add_message(client, HELLO)

        response = client.get("/messaging/getMessages")

        assert response.status_code == 200
        messages = response.json()
        assert [{k: m[k] for k in HELLO} for m in messages] == [HELLO, later]

    def test_storage_failure_returns_empty_list(self, client_for):
        client = client_for(Store(users=InMemoryCollection(), messages=BrokenCollection()))

        response = client.get("/messaging/getMessages")

        assert response.status_code == 200
        assert response.json() == []

    def test_orders_by_instant_across_offsets(self, client):
        # 01:00+05:00 is 20:00Z the previous day, earlier than 21:00Z
        add_message(client, {"msg": "second", "msgFrom": "User1", "msgDateTime": "2024-06-03T21:00:00.000Z"})
        add_message(client, {"msg": "first", "msgFrom": "User2", "msgDateTime": "2024-06-04T01:00:00.000+05:00"})

        messages = client.get("/messaging/getMessages").json()

        assert [m["msg"] for m in messages] == ["first", "second"]
        assert messages[0]["msgDateTime"] == "2024-06-03T20:00:00.000Z"
