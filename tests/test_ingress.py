"""
Tests for the ingress synthesizer — rule resolution and proxy config.
"""

from devtopo.core.engine.ingress import (
    proxy_run_info,
    replica_urls,
    select_binding,
    transform_ingress_to_container,
)
from devtopo.core.models import Binding, DockerRunInfo, IngressRule


def _rule_vars(service) -> dict[str, str | None]:
    return {
        v.name: v.value
        for v in service.description.configuration
        if v.name.startswith("Rules__")
    }


# ── Binding selection ───────────────────────────────────────────────


class TestSelectBinding:
    def test_http_preferred_over_https(self):
        https = Binding(protocol="https", port=5001)
        http = Binding(protocol="http", port=5000)
        assert select_binding([https, http]) is http

    def test_https_fallback(self):
        https = Binding(protocol="https", port=5001)
        assert select_binding([Binding(protocol="grpc"), https]) is https

    def test_first_of_same_protocol(self):
        first = Binding(name="a", protocol="http", port=1)
        second = Binding(name="b", protocol="http", port=2)
        assert select_binding([first, second]) is first

    def test_none(self):
        assert select_binding([Binding(protocol="tcp")]) is None
        assert select_binding([]) is None


class TestReplicaUrls:
    def test_one_url_per_replica(self):
        b = Binding(protocol="http", replica_ports=[5000, 5001])
        assert replica_urls(b) == ["http://localhost:5000", "http://localhost:5001"]


class TestProxyRunInfo:
    def test_fixed_proxy_container(self, options):
        run_info = proxy_run_info(options)
        assert run_info.image == "mcr.microsoft.com/dotnet/core/sdk:3.1"
        assert run_info.args == "dotnet Microsoft.Tye.HttpProxy.dll"
        assert run_info.working_directory == "/app"
        [volume] = run_info.volume_mappings
        assert volume.source == options.proxy_location
        assert volume.target == "/app"
        assert volume.read_only is True

    def test_default_proxy_location_is_install_dir(self):
        from devtopo.core.config.options import TransformOptions

        location = TransformOptions().resolved_proxy_location()
        assert location.endswith("devtopo")


# ── Transform ───────────────────────────────────────────────────────


class TestTransformIngress:
    def test_rule_emits_five_variables(self, application, make_http_service, make_ingress, options):
        application.add_service(
            make_http_service("frontend", [Binding(protocol="http", port=10067)])
        )
        ingress = make_ingress([IngressRule(path="/app", service="frontend")])
        application.add_service(ingress)

        transform_ingress_to_container(application, ingress, ingress.description.run_info, options)

        assert _rule_vars(ingress) == {
            "Rules__0__Host": None,
            "Rules__0__Path": "/app",
            "Rules__0__Service": "frontend",
            "Rules__0__Port": "10067",
            "Rules__0__Protocol": "http",
        }
        assert isinstance(ingress.description.run_info, DockerRunInfo)

    def test_container_port_wins(self, application, make_http_service, make_ingress, options):
        application.add_service(
            make_http_service("api", [Binding(protocol="http", port=5000, container_port=80)])
        )
        ingress = make_ingress([IngressRule(host="api.local", service="api")])
        application.add_service(ingress)

        transform_ingress_to_container(application, ingress, ingress.description.run_info, options)
        assert _rule_vars(ingress)["Rules__0__Port"] == "80"
        assert _rule_vars(ingress)["Rules__0__Host"] == "api.local"

    def test_https_and_http_selects_http(self, application, make_http_service, make_ingress, options):
        application.add_service(
            make_http_service(
                "api",
                [Binding(protocol="https", port=5001), Binding(protocol="http", port=5000)],
            )
        )
        ingress = make_ingress([IngressRule(service="api")])
        application.add_service(ingress)

        transform_ingress_to_container(application, ingress, ingress.description.run_info, options)
        assert _rule_vars(ingress)["Rules__0__Protocol"] == "http"
        assert _rule_vars(ingress)["Rules__0__Port"] == "5000"

    def test_unknown_service_does_not_consume_index(
        self, application, make_http_service, make_ingress, options
    ):
        application.add_service(make_http_service("a", [Binding(protocol="http", port=1)]))
        application.add_service(make_http_service("b", [Binding(protocol="http", port=2)]))
        ingress = make_ingress([
            IngressRule(path="/a", service="a"),
            IngressRule(path="/ghost", service="ghost"),
            IngressRule(path="/b", service="b"),
        ])
        application.add_service(ingress)

        routes = transform_ingress_to_container(
            application, ingress, ingress.description.run_info, options
        )

        assert [r.index for r in routes] == [0, 1]
        vars_ = _rule_vars(ingress)
        assert len(vars_) == 10
        assert vars_["Rules__0__Service"] == "a"
        assert vars_["Rules__1__Service"] == "b"
        assert vars_["Rules__1__Path"] == "/b"
        assert "Rules__2__Service" not in vars_

    def test_target_without_http_binding_skipped(
        self, application, make_http_service, make_ingress, options, caplog
    ):
        application.add_service(make_http_service("db", [Binding(protocol="tcp", port=5432)]))
        application.add_service(make_http_service("web", [Binding(protocol="http", port=80)]))
        ingress = make_ingress([IngressRule(service="db"), IngressRule(service="web")])
        application.add_service(ingress)

        with caplog.at_level("INFO", logger="devtopo.core.engine.ingress"):
            routes = transform_ingress_to_container(
                application, ingress, ingress.description.run_info, options
            )

        assert [r.rule.service for r in routes] == ["web"]
        assert _rule_vars(ingress)["Rules__0__Service"] == "web"
        assert "db does not have any HTTP or HTTPS bindings" in caplog.text

    def test_no_resolvable_rules_still_yields_proxy(self, application, make_ingress, options):
        ingress = make_ingress([IngressRule(service="ghost")])
        application.add_service(ingress)

        routes = transform_ingress_to_container(
            application, ingress, ingress.description.run_info, options
        )

        assert routes == []
        assert _rule_vars(ingress) == {}
        assert ingress.description.run_info.image == "mcr.microsoft.com/dotnet/core/sdk:3.1"

    def test_existing_configuration_kept(self, application, make_http_service, make_ingress, options):
        application.add_service(make_http_service("web", [Binding(protocol="http", port=80)]))
        ingress = make_ingress([IngressRule(service="web")])
        ingress.description.add_env("ASPNETCORE_ENVIRONMENT", "Development")
        application.add_service(ingress)

        transform_ingress_to_container(application, ingress, ingress.description.run_info, options)

        names = [v.name for v in ingress.description.configuration]
        assert names[0] == "ASPNETCORE_ENVIRONMENT"
        assert len(names) == 6

    def test_replica_urls_kept_on_routes(self, application, make_http_service, make_ingress, options):
        application.add_service(
            make_http_service(
                "web",
                [Binding(protocol="http", port=80, container_port=8080, replica_ports=[6000, 6001])],
            )
        )
        ingress = make_ingress([IngressRule(service="web")])
        application.add_service(ingress)

        [route] = transform_ingress_to_container(
            application, ingress, ingress.description.run_info, options
        )

        assert route.replica_urls == ["http://localhost:6000", "http://localhost:6001"]
        assert not any("localhost:6000" in (v.value or "") for v in ingress.description.configuration)
