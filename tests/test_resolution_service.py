"""Tests for concurrent multi-module resolution."""

import threading
from unittest.mock import MagicMock, patch

import pytest

from common import http_client
from versioning.errors import InvalidTargetError, RegistryError
from versioning.resolver import ScriptModuleResolver
from versioning.service import VersionResolutionService


HISTORIES = {
    "@minecraft/server": {
        "1.6.0": "2023-09-01T00:00:00.000Z",
        "1.7.0-beta.1.20.50-preview.20": "2023-10-01T00:00:00.000Z",
    },
    "@minecraft/server-ui": {
        "1.1.0": "2023-09-01T00:00:00.000Z",
        "1.2.0-rc.1.20.50-preview.20": "2023-10-02T00:00:00.000Z",
    },
}


class FakeFetch:
    """Serves canned histories and records the calls it receives."""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, module, registry_url=None):
        with self._lock:
            self.calls.append((module, registry_url))
        if module not in HISTORIES:
            raise RegistryError(module, "package not found", 404)
        return dict(HISTORIES[module])


@pytest.fixture
def fetch():
    return FakeFetch()


@pytest.fixture
def service(fetch):
    return VersionResolutionService(resolver=ScriptModuleResolver(fetch_history=fetch))


class TestResolveModules:
    """Per-target resolution across modules."""

    def test_results_follow_module_order(self, service):
        results = service.resolve_modules(["@minecraft/server-ui", "@minecraft/server"], "1.20.50.20")

        assert [r.module for r in results] == ["@minecraft/server-ui", "@minecraft/server"]
        assert results[0].versions == [None, "1.2.0-rc.1.20.50-preview.20", "1.1.0"]
        assert results[1].versions == ["1.7.0-beta.1.20.50-preview.20", "1.6.0"]

    def test_failure_isolated_to_one_module(self, service):
        results = service.resolve_modules(["@minecraft/missing", "@minecraft/server"], "1.20.50.20")

        assert results[0].error is not None
        assert "package not found" in results[0].error
        assert results[0].versions == [None]
        assert results[1].error is None
        assert results[1].latest_beta == "1.7.0-beta.1.20.50-preview.20"

    def test_registry_url_forwarded(self, fetch):
        service = VersionResolutionService(
            resolver=ScriptModuleResolver("https://mirror.example/", fetch_history=fetch)
        )
        service.resolve_modules(["@minecraft/server"], "1.20.50")
        assert fetch.calls == [("@minecraft/server", "https://mirror.example/")]

    def test_default_resolver_uses_registry_url(self):
        service = VersionResolutionService(registry_url="https://mirror.example/")
        assert service.resolver.registry_url == "https://mirror.example/"

    def test_no_modules(self, service, fetch):
        assert service.resolve_modules([], "1.20.50") == []
        assert fetch.calls == []

    def test_concurrency_floor(self):
        assert VersionResolutionService(max_concurrency=0).max_concurrency == 1

    def test_many_modules_with_one_worker(self, fetch):
        service = VersionResolutionService(
            max_concurrency=1, resolver=ScriptModuleResolver(fetch_history=fetch)
        )
        modules = ["@minecraft/server", "@minecraft/server-ui"] * 3
        results = service.resolve_modules(modules, "1.20.50.20")
        assert [r.module for r in results] == modules
        assert len(fetch.calls) == 6


class TestUndecodableResponse:
    """A body that is not UTF-8 fails only the module it belongs to."""

    @pytest.fixture(autouse=True)
    def fresh_cache(self):
        http_client.clear_cache()
        yield
        http_client.clear_cache()

    @staticmethod
    def _response(content):
        response = MagicMock()
        response.status_code = 200
        response.headers = {}
        response.content = content
        response.encoding = "utf-8"
        return response

    def test_bad_module_reported_and_others_resolved(self):
        good = b'{"time": {"1.0.0": "2023-01-01T00:00:00.000Z"}}'
        bad = b'{"time": {"1.0.0": "\xff\xfe"}}'
        session = MagicMock()
        session.get.side_effect = lambda url, **kwargs: self._response(bad if url.endswith("/bad") else good)

        with patch("common.http_client._session", return_value=session):
            results = VersionResolutionService().resolve_modules(["good", "bad"], "1.20.0")

        assert results[0].error is None
        assert results[0].versions == [None, "1.0.0"]
        assert results[1].module == "bad"
        assert "undecodable response" in results[1].error


class TestResolveTargets:
    """Validation happens for every target before any request."""

    def test_invalid_target_rejected_before_fetch(self, service, fetch):
        with pytest.raises(InvalidTargetError):
            service.resolve_targets(["1.20.50.20", "1.20"], ["@minecraft/server"])
        assert fetch.calls == []

    def test_non_ascii_target_rejected_before_fetch(self, service, fetch):
        with pytest.raises(InvalidTargetError):
            service.resolve_targets(["١.٢٠.٥٠"], ["@minecraft/server"])
        assert fetch.calls == []

    def test_resolves_each_target(self, service):
        results = service.resolve_targets(["1.20.50.20", "1.20.50"], ["@minecraft/server"])
        assert [(r.target, r.latest_beta) for r in results] == [
            ("1.20.50.20", "1.7.0-beta.1.20.50-preview.20"),
            ("1.20.50", None),
        ]
