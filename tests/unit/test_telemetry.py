import logging

import pytest

from jsonsalvage.telemetry import (
    StageCounter,
    TelemetryContext,
    TelemetryReporter,
    _NoOpTelemetryContext,
)


class ExplodingReporter:
    def record_timing(self, scope, duration, **metadata):
        raise RuntimeError("reporter down")

    def record_metric(self, scope, value, **metadata):
        raise RuntimeError("reporter down")


@pytest.mark.unit
class TestTelemetryContextFactory:
    """Enabled vs no-op context selection"""

    def test_disabled_by_default(self, stage_counter):
        assert isinstance(TelemetryContext(stage_counter), _NoOpTelemetryContext)

    def test_no_reporters_is_no_op(self):
        assert isinstance(TelemetryContext(enabled=True), _NoOpTelemetryContext)

    def test_environment_switch(self, monkeypatch, stage_counter):
        monkeypatch.setenv("JSONSALVAGE_TELEMETRY", "1")
        ctx = TelemetryContext(stage_counter)
        assert not isinstance(ctx, _NoOpTelemetryContext)

    def test_explicit_disable_overrides_environment(self, monkeypatch, stage_counter):
        monkeypatch.setenv("JSONSALVAGE_TELEMETRY", "1")
        ctx = TelemetryContext(stage_counter, enabled=False)
        assert isinstance(ctx, _NoOpTelemetryContext)

    def test_no_op_context_supports_full_interface(self):
        ctx = TelemetryContext()
        with ctx("scope", level=1) as scoped:
            scoped.count("x")
            scoped.gauge("y", 1.0)

    def test_stage_counter_is_a_reporter(self, stage_counter):
        assert isinstance(stage_counter, TelemetryReporter)


@pytest.mark.unit
class TestEnabledTelemetry:
    """Scopes and metrics reach reporters"""

    def test_nested_scopes(self, stage_counter, counting_telemetry):
        with counting_telemetry("outer"):
            with counting_telemetry("inner", level=2):
                pass

        assert stage_counter.count_for("outer") == 1
        assert stage_counter.count_for("outer.inner") == 1
        _, metadata = stage_counter.timings["outer.inner"][0]
        assert metadata["parent_scope"] == "outer"
        assert metadata["depth"] == 1
        assert metadata["level"] == 2

    def test_counter_and_gauge(self, stage_counter, counting_telemetry):
        with counting_telemetry("parse"):
            counting_telemetry.count("failures")
            counting_telemetry.gauge("attempt_level", 4)

        value, metadata = stage_counter.metrics["parse.failures"][0]
        assert value == 1
        assert metadata["metric_type"] == "counter"
        assert stage_counter.metrics["parse.attempt_level"][0][0] == 4

    def test_metric_carries_scope_metadata(self, stage_counter, counting_telemetry):
        with counting_telemetry("parse"):
            with counting_telemetry("reduced"):
                counting_telemetry.gauge("attempt_level", 5)

        value, metadata = stage_counter.metrics["parse.reduced.attempt_level"][0]
        assert value == 5
        assert metadata["parent_scope"] == "parse.reduced"
        assert metadata["depth"] == 2
        assert metadata["metric_type"] == "gauge"

    def test_both_contexts_share_interface(self, counting_telemetry):
        """Should expose exactly the scope, count and gauge operations"""
        for ctx in (counting_telemetry, TelemetryContext()):
            assert callable(ctx)
            assert hasattr(ctx, "count")
            assert hasattr(ctx, "gauge")
            assert not hasattr(ctx, "metric")

    def test_scope_recorded_when_body_raises(self, stage_counter, counting_telemetry):
        with pytest.raises(KeyError):
            with counting_telemetry("boom"):
                raise KeyError("x")
        assert stage_counter.count_for("boom") == 1

    def test_empty_scope_name_rejected(self, counting_telemetry):
        with pytest.raises(ValueError):
            with counting_telemetry(""):
                pass

    def test_reporter_failure_is_logged_not_raised(self, caplog):
        ctx = TelemetryContext(ExplodingReporter(), enabled=True)
        with caplog.at_level(logging.ERROR, logger="jsonsalvage.telemetry"):
            with ctx("scope"):
                pass
            ctx.count("metric")

        assert "ExplodingReporter" in caplog.text


@pytest.mark.unit
class TestStageCounter:
    def test_reset(self):
        counter = StageCounter()
        counter.record_timing("parse.direct", 0.001)
        counter.record_metric("parse.failures", 1)
        assert counter.count_for("parse.direct") == 1

        counter.reset()
        assert counter.count_for("parse.direct") == 0
        assert not counter.metrics

    def test_max_entries(self):
        counter = StageCounter(max_entries_per_scope=2)
        for _ in range(5):
            counter.record_timing("s", 0.1)
        assert counter.count_for("s") == 5
        assert len(counter.timings["s"]) == 2
