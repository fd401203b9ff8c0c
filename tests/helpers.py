"""Test helpers for settings files and mocked Moodle responses."""

import json
from unittest.mock import Mock

import httpx

from moodle_downloader.exceptions import AuthRejectedError
from moodle_downloader.models import Token

BASE_URL = "https://example.edu/"


def write_settings(path, **overrides):
    """Write a settings file in the on-disk shape and return its path"""
    data = {
        "baseURL": BASE_URL,
        "username": "u",
        "password": "p",
        "token": "",
    }
    data.update(overrides)
    path.write_text(json.dumps(data, indent=1), encoding="utf-8")
    return path


def read_settings(path):
    """Read a settings file back as a plain dict"""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def make_backend(valid_tokens=None, issued_token="abc123"):
    """Mock auth backend.

    Args:
        valid_tokens: Mapping of tokens the site accepts to their account id.
        issued_token: Token returned by request_token.
    """
    valid_tokens = valid_tokens if valid_tokens is not None else {"abc123": 42}

    def validate(base_url, token):
        if token not in valid_tokens:
            raise AuthRejectedError(f"Token rejected by {base_url}: Invalid token")
        return valid_tokens[token]

    backend = Mock()
    backend.request_token.return_value = Token(token=issued_token)
    backend.validate.side_effect = validate
    return backend


def make_response(payload=None, status_code=200, json_error=None):
    """Build a mock httpx response"""
    response = Mock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Error", request=Mock(), response=Mock(status_code=status_code)
        )
    else:
        response.raise_for_status.return_value = None
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response
