"""Shared fixtures: a fake HTTP layer and a clean in-memory database."""
from __future__ import annotations

from typing import Callable, Dict, Union

import pytest
import requests

from page_analyzer import models  # noqa: F401
from page_analyzer.db import Base, engine


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        text: str = "",
        content: bytes | None = None,
        headers: Dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.content = text.encode("utf-8") if content is None else content
        self.headers = {"Content-Type": "text/html; charset=utf-8"} if headers is None else headers
        # What requests falls back to for text/html without a charset.
        self.text = text if content is None else content.decode("iso-8859-1")
        self.apparent_encoding = "utf-8"
        self.reason = "OK" if status_code < 400 else "Error"

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc_info) -> None:
        return None


Route = Union[FakeResponse, Exception]


class FakeWeb:
    """Stands in for ``requests.get`` and records every requested URL."""

    def __init__(self) -> None:
        self.routes: Dict[str, Route] = {}
        self.requested: list[str] = []
        self.default: Route = FakeResponse(200, "")

    def add(self, url: str, status_code: int = 200, text: str = "", **kwargs) -> None:
        self.routes[url] = FakeResponse(status_code, text, **kwargs)

    def fail(self, url: str, exc: Exception | None = None) -> None:
        self.routes[url] = exc or requests.ConnectionError(f"cannot reach {url}")

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.requested.append(url)
        route = self.routes.get(url, self.default)
        if isinstance(route, Exception):
            raise route
        return route


@pytest.fixture
def fake_web(monkeypatch) -> FakeWeb:
    web = FakeWeb()
    monkeypatch.setattr("requests.get", web.get)
    return web


@pytest.fixture(autouse=True)
def clean_database():
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


def page(title: str | None = "Example", body: str = "", doctype: str = "<!DOCTYPE html>") -> str:
    head = f"<title>{title}</title>" if title is not None else ""
    return f"{doctype}\n<html><head>{head}</head><body>{body}</body></html>"


@pytest.fixture
def make_page() -> Callable[..., str]:
    return page
