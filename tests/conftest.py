"""Shared test doubles."""

import json

import pytest
import requests

from shortlist_bridge.models.candidate import CandidateRecord


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self._text = text

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Records posts and replays a canned response (or raises an exception)."""

    def __init__(self, response=None, exc=None):
        self.response = response or FakeResponse()
        self.exc = exc
        self.calls = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.exc is not None:
            raise self.exc
        return self.response

    def close(self):
        self.closed = True


def chat_completion(content) -> dict:
    """Wrap message content the way a chat completions endpoint does."""
    if not isinstance(content, str):
        content = json.dumps(content)
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def candidates():
    return [
        CandidateRecord(name="Todd Kurtz", job_title="Staff Engineer", location="Austin, TX"),
        CandidateRecord(name="Kyle Scharnhorst", job_title="Data Scientist"),
        CandidateRecord(name="Kenneth Chen"),
    ]
