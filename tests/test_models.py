"""
Tests for topology models — defaults, derived fields, the run-info union.
"""

from pathlib import Path

import pytest

from devtopo.core.models import (
    Application,
    Binding,
    DockerRunInfo,
    IngressRunInfo,
    ProjectRunInfo,
    Service,
    ServiceDescription,
    ServiceLogs,
    framework_version,
)


class TestFrameworkVersion:
    def test_netcoreapp(self):
        assert framework_version("netcoreapp3.1") == "3.1"

    def test_net5(self):
        assert framework_version("net5.0") == "5.0"

    def test_platform_suffix(self):
        assert framework_version("net6.0-windows") == "6.0"

    def test_unknown_passthrough(self):
        assert framework_version("custom") == "custom"


class TestProjectRunInfo:
    def test_derived_fields(self):
        p = ProjectRunInfo(project_file=Path("/src/api/api.csproj"), target_framework="netcoreapp3.1")
        assert p.kind == "project"
        assert p.target_framework_version == "3.1"
        assert p.assembly_name == "api"
        assert p.publish_output_path == str(Path("/src/api/bin/Debug/netcoreapp3.1/publish"))

    def test_explicit_fields_kept(self):
        p = ProjectRunInfo(
            project_file=Path("/src/api/api.csproj"),
            target_framework="net5.0",
            assembly_name="Shop.Api",
            publish_output_path="/out",
        )
        assert p.assembly_name == "Shop.Api"
        assert p.publish_output_path == "/out"


class TestRunInfoUnion:
    def test_discriminates_on_kind(self):
        d = ServiceDescription.model_validate(
            {"name": "gw", "run_info": {"kind": "ingress", "rules": [{"service": "web"}]}}
        )
        assert isinstance(d.run_info, IngressRunInfo)
        assert d.run_info.rules[0].service == "web"

        d = ServiceDescription.model_validate(
            {"name": "redis", "run_info": {"kind": "docker", "image": "redis"}}
        )
        assert isinstance(d.run_info, DockerRunInfo)

    def test_none_allowed(self):
        assert ServiceDescription(name="x").run_info is None


class TestBinding:
    def test_effective_port_prefers_container_port(self):
        assert Binding(port=5000, container_port=80).effective_port == 80
        assert Binding(port=5000).effective_port == 5000
        assert Binding().effective_port is None


class TestServiceDescription:
    def test_env_duplicates_last_read(self):
        d = ServiceDescription(name="x")
        d.add_env("A", "1")
        d.add_env("A", "2")
        assert len(d.configuration) == 2
        assert d.env("A") == "2"
        assert d.env("missing") is None


class TestApplication:
    def test_add_and_get(self):
        app = Application(name="a")
        svc = Service(description=ServiceDescription(name="web"))
        app.add_service(svc)
        assert app.get("web") is svc
        assert "web" in app
        assert app.get("nope") is None

    def test_duplicate_rejected(self):
        app = Application()
        app.add_service(Service(description=ServiceDescription(name="web")))
        with pytest.raises(ValueError, match="Duplicate"):
            app.add_service(Service(description=ServiceDescription(name="web")))

    def test_insertion_order_stable(self):
        app = Application()
        for name in ("c", "a", "b"):
            app.add_service(Service(description=ServiceDescription(name=name)))
        assert list(app.services) == ["c", "a", "b"]


class TestServiceLogs:
    def test_write_splits_lines(self):
        logs = ServiceLogs()
        logs.write("one\ntwo")
        assert logs.lines == ["one", "two"]
        assert len(logs) == 2

    def test_subscribe_and_unsubscribe(self):
        logs = ServiceLogs()
        seen: list[str] = []
        unsubscribe = logs.subscribe(seen.append)
        logs.write("hello")
        unsubscribe()
        logs.write("ignored")
        assert seen == ["hello"]

    def test_bounded_buffer(self):
        logs = ServiceLogs(buffer_size=2)
        for i in range(5):
            logs.write(str(i))
        assert logs.lines == ["3", "4"]

    def test_failing_subscriber_does_not_break_sink(self):
        logs = ServiceLogs()

        def boom(line: str) -> None:
            raise RuntimeError("boom")

        logs.subscribe(boom)
        logs.write("still written")
        assert logs.lines == ["still written"]

    def test_service_has_own_sink(self):
        a = Service(description=ServiceDescription(name="a"))
        b = Service(description=ServiceDescription(name="b"))
        a.logs.write("x")
        assert b.logs.lines == []
        assert a.run_kind is None


class TestPublicExports:
    def test_all_names_importable(self):
        import devtopo.core.models as models

        for name in models.__all__:
            assert getattr(models, name) is not None
        assert len(set(models.__all__)) == len(models.__all__)
