"""Pytest configuration and shared fixtures."""

import hashlib
import hmac
import json
import stat

import pytest
from fastapi.testclient import TestClient

from config import ConfigStore

SECRET = "s3cret"


def sign(body: bytes, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


@pytest.fixture
def make_script(tmp_path):
    """Write an executable /bin/sh script and return its path."""
    def _make(name: str, body: str) -> str:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body + "\n")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(path)
    return _make


@pytest.fixture
def write_config(tmp_path):
    """Write a JSON config file; returns its path."""
    def _write(repositories=(), secret: str = SECRET, name: str = "config.json", **extra) -> str:
        data = {
            "logfile": "-",
            "address": "127.0.0.1",
            "port": 8080,
            "secret": secret,
            "repositories": list(repositories),
        }
        data.update(extra)
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return _write


@pytest.fixture
def store() -> ConfigStore:
    return ConfigStore()


@pytest.fixture
def client(store: ConfigStore) -> TestClient:
    from main import create_app
    return TestClient(create_app(store))


@pytest.fixture
def push_payload() -> dict:
    """Trimmed-down Gitea push payload."""
    return {
        "ref": "refs/heads/main",
        "before": "0" * 40,
        "after": "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2",
        "repository": {
            "id": 7,
            "full_name": "org/repo",
            "html_url": "https://gitea.example.com/org/repo",
            "owner": {"id": 1, "login": "org", "email": "owner@example.com"},
        },
        "head_commit": {
            "id": "a1b2c3d4e5f6a1b2c3d4e5f6a1b2c3d4e5f6a1b2",
            "message": "Fix deploy script\n",
            "author": {"name": "Dev", "email": "dev@example.com", "username": "dev"},
        },
        "pusher": {"login": "dev", "email": "dev@example.com"},
    }


@pytest.fixture
def post_push(client):
    """POST a signed push event; extra keyword arguments override headers."""
    def _post(payload, path: str = "/", event: str = "push", secret: str = SECRET, headers=None):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        request_headers = {
            "Content-Type": "application/json",
            "X-Gitea-Event": event,
            "X-Gitea-Signature": sign(body, secret),
        }
        request_headers.update(headers or {})
        return client.post(path, content=body, headers=request_headers)
    return _post
