"""Tests for the development server entrypoint."""

from __future__ import annotations

import sys

import main


def _capture_run(monkeypatch, argv: list[str]) -> list[tuple[object, dict]]:
    calls: list[tuple[object, dict]] = []
    monkeypatch.setattr(main.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    monkeypatch.setattr(sys, "argv", ["main.py", *argv])
    main.main()
    return calls


def test_serves_the_app_object(monkeypatch):
    from appclash.api.app import app

    calls = _capture_run(monkeypatch, ["--port", "9001"])

    assert calls == [(app, {"host": "127.0.0.1", "port": 9001, "reload": False})]


def test_reload_uses_an_import_string(monkeypatch):
    calls = _capture_run(monkeypatch, ["--reload", "--host", "0.0.0.0"])

    assert calls == [("appclash.api.app:app", {"host": "0.0.0.0", "port": 8000, "reload": True})]
