"""Prometheus metrics for advice verdicts, scenarios, guardian actions and alert delivery"""

from prometheus_client import Counter, Histogram

# Advisor metrics
advice_counter = Counter(
    "welth_advice_total",
    "Total purchase advice given",
    ["verdict"],  # APPROVE | WAIT | CONSIDER
)

scenario_counter = Counter(
    "welth_scenario_total",
    "Time machine scenarios simulated",
    ["kind"],
)

# Guardian metrics
guardian_action_counter = Counter(
    "welth_guardian_action_total",
    "Guardian runs by resulting action",
    ["action"],  # LOCKED_BUDGET | AUTO_SAVED | NONE
)

auto_save_histogram = Histogram(
    "welth_auto_save_amount",
    "Amounts swept into savings by the guardian",
    buckets=[10, 25, 50, 100, 250, 500],
)

# Alert sink metrics
alert_latency_histogram = Histogram(
    "alert_latency_seconds",
    "Alert webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

alert_failure_counter = Counter(
    "alert_failures_total",
    "Failed alert deliveries",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_advice(verdict: str) -> None:
    advice_counter.labels(verdict=verdict).inc()


def record_scenario(kind: str) -> None:
    """Unknown kinds are folded into one label to keep cardinality bounded"""
    known = {"SAVE_MONTHLY", "AVOID_CATEGORY", "REDUCE_SPENDING"}
    scenario_counter.labels(kind=kind if kind in known else "OTHER").inc()


def record_guardian_action(action: str, amount: int = 0) -> None:
    """Record guardian outcome; auto-save amounts feed the distribution histogram"""
    guardian_action_counter.labels(action=action).inc()
    if action == "AUTO_SAVED":
        auto_save_histogram.observe(amount)
