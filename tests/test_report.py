import json

from herunt.pipeline import run_pipeline
from herunt.report import DeployReport, write_report
from herunt.steps import default_steps


def test_report_for_failed_run(make_ctx, fake_runner, tmp_path):
    fake_runner.present.discard("heroku")
    ctx = make_ctx(exclude=("*.log",))
    outcome = run_pipeline(ctx, default_steps(), tools=fake_runner.tools())
    path = write_report(tmp_path / "out" / "report.json", ctx, outcome)

    data = json.loads(path.read_text(encoding="utf-8"))
    report = DeployReport(**data)
    assert report.status == "FAILURE"
    assert report.error_kind == "ToolMissing"
    assert report.failed_step == "cli-present"
    assert "*.log" in report.exclude_patterns
    assert [r.event for r in report.trace if r.step == "cli-present"] == ["start", "fail"]


def test_report_for_successful_run(make_ctx, fake_runner, tmp_path):
    ctx = make_ctx()
    outcome = run_pipeline(ctx, default_steps(), tools=fake_runner.tools())
    data = json.loads(write_report(tmp_path / "r.json", ctx, outcome).read_text(encoding="utf-8"))
    assert data["status"] == "SUCCESS"
    assert data["error_kind"] is None
    assert len(data["completed_steps"]) == 12
