from mdchunk.observability import InMemoryMetricsHook, MetricsHook, NoOpMetricsHook


def test_noop_hook_accepts_all_calls() -> None:
    hook: MetricsHook = NoOpMetricsHook()

    hook.record_latency("latency", 12.5)
    hook.increment("counter", 3, labels={"kind": "list"})
    hook.record_gauge("gauge", 1.0)


class TestInMemoryMetricsHook:
    def test_collects_latencies_per_name(self) -> None:
        """Every latency sample is kept in order."""
        hook = InMemoryMetricsHook()

        hook.record_latency("split", 1.0)
        hook.record_latency("split", 2.5)

        assert hook.latencies["split"] == [1.0, 2.5]

    def test_counters_accumulate(self) -> None:
        """Increments add up, defaulting to one."""
        hook = InMemoryMetricsHook()

        hook.increment("chunks")
        hook.increment("chunks", 4)

        assert hook.counters["chunks"] == 5
        assert hook.counters["missing"] == 0

    def test_gauge_keeps_last_value(self) -> None:
        """A gauge reports the most recent value only."""
        hook = InMemoryMetricsHook()

        hook.record_gauge("input", 10)
        hook.record_gauge("input", 42)

        assert hook.gauges == {"input": 42}
