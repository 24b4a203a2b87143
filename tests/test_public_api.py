import apiPerfBudget


def test_top_level_exports():
    budgets = apiPerfBudget.define_budget({"/api/users": {"p95": 200, "p99": 500}})
    stats = apiPerfBudget.summarize([120.0, 180.0, 260.0, 90.0])
    result = apiPerfBudget.check_budget(stats, budgets["/api/users"])
    assert apiPerfBudget.percentile([1, 2, 3, 4, 5, 6, 7, 8, 9, 10], 50) == 5.5
    assert not result.passed
    assert result.violations[0].metric == "p95"
    report = apiPerfBudget.format_results(
        {"/api/users": apiPerfBudget.RouteResult(measurements=stats, budget=budgets["/api/users"], result=result)}
    )
    assert "[FAIL] /api/users" in report
