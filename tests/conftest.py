import json
from collections import deque

import pytest

import atrium

BASE_URL = "https://app.test/api/1.0"


class MockSession(object):
    """replays queued responses in order, recording every request"""

    def __init__(self):
        self.responses = deque()
        self.requests = []

    def reply(self, data, next_page=None, status=200):
        """queue a successful JSON envelope"""
        payload = {"data": data}
        if next_page is not None:
            payload["next_page"] = {"offset": next_page}
        else:
            payload["next_page"] = None
        self.responses.append(
            atrium.Response(status, json.dumps(payload).encode())
        )
        return self

    def reply_error(self, status, *messages, headers=None):
        payload = {"errors": [{"message": m} for m in messages]}
        self.responses.append(
            atrium.Response(
                status, json.dumps(payload).encode(), headers=headers or {}
            )
        )
        return self

    def send(self, req):
        self.requests.append(req)
        assert self.responses, "unexpected request: {!r}".format(req)
        return self.responses.popleft()

    @property
    def last(self):
        return self.requests[-1]

    def body(self, index=-1):
        """the unwrapped JSON body of a recorded request"""
        return json.loads(self.requests[index].content)["data"]


atrium.send.register(MockSession, MockSession.send)


@pytest.fixture
def session():
    return MockSession()


@pytest.fixture
def client(session):
    return atrium.Client(session=session, base_url=BASE_URL)
