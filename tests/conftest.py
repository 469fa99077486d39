"""Shared fixtures: an in-memory stand-in for the router's goform endpoints."""

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from zte_sms_notice.router_client import RouterClient

BASE_URL = "http://192.168.0.1"


def make_response(body, status=200):
    """Build a mock requests.Response with the given body (dict -> JSON)."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.text = body if isinstance(body, str) else json.dumps(body)
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    else:
        response.raise_for_status.return_value = None
    return response


class FakeRouter:
    """
    Replaces requests.Session for RouterClient.

    GET replies are keyed by `cmd`, POST replies by `goformId`. A reply can
    be a dict/str body, a (body, status) tuple or an exception to raise.
    """

    def __init__(self):
        self.get_replies = {
            "LD": {"LD": "CHALLENGE"},
            "RD": {"RD": "RANDOM"},
            "Language,cr_version,wa_inner_version": {
                "Language": "en",
                "wa_inner_version": "WA_V1",
                "cr_version": "CR_V2",
            },
            "loginfo": {"loginfo": "ok"},
            "sms_data_total": {"messages": []},
        }
        self.post_replies = {
            "LOGIN": {"result": "0"},
            "LOGOUT": {"result": "success"},
            "SET_MSG_READ": {"result": "success"},
            "DELETE_SMS": {"result": "success"},
        }
        self.calls = []

    def request(self, method, url, timeout=None, data=None, **kwargs):
        parts = urlsplit(url)
        if method == "GET":
            query = parse_qs(parts.query)
            key = query["cmd"][0]
            reply = self.get_replies[key]
            self.calls.append(("GET", key, query, timeout))
        else:
            form = dict(data or [])
            key = form["goformId"]
            reply = self.post_replies[key]
            self.calls.append(("POST", key, form, timeout))

        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, tuple):
            return make_response(*reply)
        return make_response(reply)

    def calls_for(self, key):
        return [call for call in self.calls if call[1] == key]

    def set_messages(self, messages):
        self.get_replies["sms_data_total"] = {"messages": messages}


@pytest.fixture
def fake_router():
    return FakeRouter()


@pytest.fixture
def client(fake_router):
    return RouterClient(BASE_URL, timeout=30, session=fake_router)


@pytest.fixture
def logged_in_client(client):
    client.login("admin")
    return client
