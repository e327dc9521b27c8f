import threading

import pytest
from pydantic import ValidationError

from api_docgen.registry import EndpointRecord, EndpointRegistry, ServiceInfo
from api_docgen.utils.rwlock import RWLock


def _record(method: str = "GET", path: str = "/items", **overrides) -> EndpointRecord:
    return EndpointRecord(method=method, path=path, **overrides)


class TestEndpointRecord:
    def test_defaults(self):
        rec = _record()
        assert rec.summary == ""
        assert rec.tags == ()
        assert rec.responses == {}
        assert rec.request_body is None
        assert rec.handler is None

    def test_lists_become_tuples(self):
        rec = _record(tags=["a", "b"], security=["mTLS"])
        assert rec.tags == ("a", "b")
        assert rec.security == ("mTLS",)

    def test_frozen(self):
        rec = _record()
        with pytest.raises(ValidationError):
            rec.path = "/other"


class TestServiceInfo:
    def test_last_caller_wins(self):
        registry = EndpointRegistry()
        registry.set_service_info("First", "1.0", "one", "http://a")
        registry.set_service_info("Second", "2.0")
        assert registry.service_info == ServiceInfo(title="Second", version="2.0")

    def test_unset_info_is_empty(self):
        assert EndpointRegistry().service_info.title == ""


class TestRegisterEndpoint:
    def test_append_keeps_order_and_duplicates(self):
        registry = EndpointRegistry()
        registry.register_endpoint(_record("GET", "/a"))
        registry.register_endpoint(_record("GET", "/a", summary="again"))
        registry.register_endpoint(_record("POST", "/b"))
        assert [(e.method, e.path) for e in registry.list_endpoints()] == [
            ("GET", "/a"),
            ("GET", "/a"),
            ("POST", "/b"),
        ]

    def test_list_is_a_snapshot(self):
        registry = EndpointRegistry()
        registry.register_endpoint(_record())
        listed = registry.list_endpoints()
        registry.register_endpoint(_record("POST"))
        assert len(listed) == 1
        assert len(registry) == 2
        assert isinstance(listed, tuple)

    def test_listed_responses_cannot_mutate_registry(self):
        registry = EndpointRegistry()
        registry.register_endpoint(_record(responses={200: "ok"}))
        (rec,) = registry.list_endpoints()
        with pytest.raises(TypeError):
            rec.responses[500] = "boom"
        assert dict(registry.list_endpoints()[0].responses) == {200: "ok"}

    def test_default_responses_are_read_only(self):
        rec = _record()
        with pytest.raises(TypeError):
            rec.responses[200] = "ok"

    def test_caller_dict_is_copied(self):
        responses = {200: "ok"}
        registry = EndpointRegistry()
        registry.register_endpoint(_record(responses=responses))
        responses[404] = "missing"
        assert dict(registry.list_endpoints()[0].responses) == {200: "ok"}

    def test_route_decorator_reused_for_two_handlers(self):
        registry = EndpointRegistry()
        route = registry.route("GET", "/a")

        def first():
            """First handler."""

        def second():
            """Second handler."""

        route(first)
        route(second)
        assert [e.summary for e in registry.list_endpoints()] == ["First handler.", "Second handler."]

    def test_snapshot_pairs_info_and_endpoints(self):
        registry = EndpointRegistry()
        registry.set_service_info("Svc", "1")
        registry.register_endpoint(_record())
        info, endpoints = registry.snapshot()
        assert info.title == "Svc"
        assert len(endpoints) == 1

    def test_route_decorator(self):
        registry = EndpointRegistry()

        @registry.route("GET", "/health", tags=("ops",))
        def health():
            """Liveness probe.

            Returns 200 while the process is up.
            """
            return "ok"

        (rec,) = registry.list_endpoints()
        assert rec.handler is health
        assert rec.summary == "Liveness probe."
        assert rec.tags == ("ops",)
        assert health() == "ok"

    def test_concurrent_writers(self):
        registry = EndpointRegistry()

        def worker(n: int) -> None:
            for i in range(50):
                registry.register_endpoint(_record(path=f"/w{n}/{i}"))
                registry.list_endpoints()

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(registry) == 400


class TestRWLock:
    def test_readers_share(self):
        lock = RWLock()
        with lock.shared():
            with lock.shared():
                assert lock._readers == 2
        assert lock._readers == 0

    def test_writer_waits_for_readers(self):
        lock = RWLock()
        acquired = threading.Event()

        def writer():
            with lock.exclusive():
                acquired.set()

        with lock.shared():
            t = threading.Thread(target=writer)
            t.start()
            assert not acquired.wait(0.05)
        t.join(1)
        assert acquired.is_set()
