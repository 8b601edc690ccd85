"""Tests for check results and metric rendering."""

from fleetwatch.checks.results import CheckResult, MetricPoint, Verdict, count_points, shrink_name


def test_verdict_exit_codes():
    assert Verdict.OK.exit_code == 0
    assert Verdict.WARNING.exit_code == 1
    assert Verdict.ERROR.exit_code == 2
    assert Verdict.WARNING.label == "warning"


def test_shrink_name():
    assert shrink_name("units.web@1.running") == "units.web_1.running"


def test_metric_point_render():
    point = MetricPoint("units.web@1.total", 3.0, timestamp=1700000000)
    assert point.render() == "units.web_1.total 3 1700000000"


def test_metric_point_render_keeps_large_counters_exact():
    point = MetricPoint("units.global.total", 1234567.0, timestamp=1)
    assert point.render() == "units.global.total 1234567 1"


def test_metric_point_render_fractional():
    assert MetricPoint("load", 0.1, timestamp=1).render() == "load 0.1 1"
    assert MetricPoint("load", 1234567.25, timestamp=1).render() == "load 1234567.25 1"


def test_metric_result_output():
    points = [MetricPoint("a.b", 1.0, timestamp=1), MetricPoint("a.c", 2.5, timestamp=1)]
    result = CheckResult.metric("m", points)

    assert result.verdict == Verdict.OK
    assert result.output == "a.b 1 1\na.c 2.5 1"
    assert result.points == points


def test_empty_metric_result():
    result = CheckResult.metric("m", [])
    assert result.output == ""
    assert result.exit_code == 0


def test_result_constructors():
    assert CheckResult.ok("c", "fine").verdict == Verdict.OK
    assert CheckResult.warning("c", "hmm").exit_code == 1
    assert CheckResult.error("c", "bad").exit_code == 2


def test_count_points_sorted():
    points = count_points({"b.total": 2, "a.total": 1})
    assert [(p.name, p.value) for p in points] == [("a.total", 1.0), ("b.total", 2.0)]
