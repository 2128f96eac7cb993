"""
Tests for builder configuration.
"""
from unittest.mock import patch

import pytest

from querytrace.config import (
    DEFAULT_SERVICE,
    NAMESPACE,
    ConfigProvider,
    TraceConfig,
    configure_from_environment,
    get_config_provider,
    set_config_provider,
)
from querytrace.exceptions import ConfigurationError
from tests.mocks.mock_tracer import MockTracer


class TestTraceConfig:

    def test_from_mapping(self):
        tracer = MockTracer()
        config = TraceConfig.from_mapping({"owning_application": "shop", "tracer": tracer, "service": "pg"})
        assert config.owning_application == "shop"
        assert config.tracer is tracer
        assert config.service == "pg"

    def test_default_service(self):
        config = TraceConfig.from_mapping({"owning_application": "shop", "tracer": MockTracer()})
        assert config.service == DEFAULT_SERVICE

    def test_missing_owning_application(self):
        with pytest.raises(ConfigurationError) as excinfo:
            TraceConfig.from_mapping({"tracer": MockTracer()})
        assert str(excinfo.value) == "owning_application is a required option for SpanBuilder"

    def test_missing_tracer(self):
        with pytest.raises(ConfigurationError, match="tracer is a required option"):
            TraceConfig.from_mapping({"owning_application": "shop"})

    def test_tracer_of_wrong_type(self):
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            TraceConfig.from_mapping({"owning_application": "shop", "tracer": object()})


class TestConfigProvider:

    def test_get_returns_copy(self):
        provider = ConfigProvider({"querytrace": {"service": "pg"}})
        values = provider.get("querytrace")
        values["service"] = "mysql"
        assert provider.get("querytrace") == {"service": "pg"}

    def test_unknown_namespace(self):
        assert ConfigProvider().get("missing") == {}

    def test_put_and_delete(self):
        provider = ConfigProvider()
        provider.put("querytrace", "service", "pg")
        assert provider.get("querytrace") == {"service": "pg"}
        provider.delete("querytrace", "service")
        provider.delete("querytrace", "service")
        assert provider.get("querytrace") == {}

    def test_is_disabled(self):
        tracer = MockTracer()
        provider = ConfigProvider({"shop": {"mock": {"disabled": True}}})
        assert provider.is_disabled("shop", tracer) is True
        assert provider.is_disabled("other", tracer) is False

    def test_is_disabled_defaults_to_false(self):
        provider = ConfigProvider({"shop": {"mock": {}}})
        assert provider.is_disabled("shop", MockTracer()) is False

    @pytest.mark.parametrize("value", [True, "disabled", ["disabled"]])
    def test_is_disabled_rejects_non_mapping_settings(self, value):
        provider = ConfigProvider({"shop": {"mock": value}})
        with pytest.raises(ConfigurationError, match="shop.mock must be a mapping of tracer options"):
            provider.is_disabled("shop", MockTracer())

    def test_snapshot_is_deep_copy(self):
        provider = ConfigProvider({"shop": {"mock": {"disabled": False}}})
        snapshot = provider.snapshot()
        snapshot["shop"]["mock"]["disabled"] = True
        assert provider.is_disabled("shop", MockTracer()) is False


class TestGlobalProvider:

    def teardown_method(self):
        set_config_provider(None)

    def test_lazily_created(self):
        set_config_provider(None)
        provider = get_config_provider()
        assert isinstance(provider, ConfigProvider)
        assert get_config_provider() is provider

    def test_replace(self):
        provider = ConfigProvider()
        set_config_provider(provider)
        assert get_config_provider() is provider


class TestConfigureFromEnvironment:

    def test_reads_environment(self):
        tracer = MockTracer()
        provider = ConfigProvider()
        env = {
            "QUERYTRACE_OWNING_APPLICATION": "shop",
            "QUERYTRACE_SERVICE": "postgres",
            "QUERYTRACE_DISABLED": "true",
        }
        with patch.dict("os.environ", env, clear=True):
            configure_from_environment(tracer, provider)

        config = TraceConfig.from_mapping(provider.get(NAMESPACE))
        assert config.owning_application == "shop"
        assert config.service == "postgres"
        assert config.tracer is tracer
        assert provider.is_disabled("shop", tracer) is True

    def test_without_application(self):
        provider = ConfigProvider()
        with patch.dict("os.environ", {}, clear=True):
            configure_from_environment(MockTracer(), provider)

        with pytest.raises(ConfigurationError, match="owning_application"):
            TraceConfig.from_mapping(provider.get(NAMESPACE))
