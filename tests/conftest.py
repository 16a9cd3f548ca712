import json
import threading

import pytest
import requests

from vision.client import VisionClient

ENDPOINT = "https://vision.example.test/"
API_KEY = "test-key"
MODEL_PATH = "computervision/retrieval:vectorizeImage?model-version=2023-04-15&api-version=2024-02-01"


def make_response(status_code=200, body=None):
    """Build a real requests.Response with the given status and body."""
    response = requests.Response()
    response.status_code = status_code
    if body is None:
        body = b""
    elif isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        body = body.encode("utf-8")
    response._content = body
    response.encoding = "utf-8"
    return response


class FakeSession:
    """
    Stand-in for requests.Session.

    ``routes`` maps the uploaded image bytes to either a requests.Response
    or an exception instance to raise.
    """

    def __init__(self, routes=None, default=None):
        self.routes = dict(routes or {})
        self.default = default
        self.headers = {}
        self.calls = []
        self.closed = False
        self._lock = threading.Lock()

    def post(self, url, data=None, headers=None, timeout=None):
        with self._lock:
            self.calls.append(
                {
                    "url": url,
                    "data": data,
                    "headers": {**self.headers, **(headers or {})},
                    "timeout": timeout,
                }
            )
        outcome = self.routes.get(data, self.default)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


@pytest.fixture
def image_files(tmp_path):
    """Two distinguishable fake image files: baseline and candidate."""
    baseline = tmp_path / "baseline.png"
    candidate = tmp_path / "candidate.png"
    baseline.write_bytes(b"baseline-bytes")
    candidate.write_bytes(b"candidate-bytes")
    return baseline, candidate


@pytest.fixture
def make_client():
    def _make(session, timeout=5.0):
        return VisionClient(
            endpoint=ENDPOINT,
            api_key=API_KEY,
            model_path=MODEL_PATH,
            timeout=timeout,
            session=session,
        )

    return _make


@pytest.fixture
def vision_for(make_client):
    """
    Build a client whose fake service answers per image with the given
    bodies (or exceptions).
    """

    def _vision(baseline_outcome, candidate_outcome, **kwargs):
        routes = {}
        for key, outcome in (
            (b"baseline-bytes", baseline_outcome),
            (b"candidate-bytes", candidate_outcome),
        ):
            if isinstance(outcome, (BaseException, requests.Response)):
                routes[key] = outcome
            else:
                routes[key] = make_response(200, outcome)
        session = FakeSession(routes)
        return make_client(session, **kwargs), session

    return _vision
