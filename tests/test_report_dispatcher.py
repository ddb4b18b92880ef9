import pytest

from errors import ConfigurationError, DispatchFailedError, NoRecipientsError
from reports.builder import ReportBuilder
from reports.dispatcher import ReportDispatcher
from conftest import LESSON_DAY, FakeMailer


@pytest.fixture
def report(scenario_a_store):
    return ReportBuilder(scenario_a_store).build(LESSON_DAY)


def test_sends_one_message_per_admin(scenario_a_store, report, mailer):
    summary = ReportDispatcher(scenario_a_store, mailer).send(report)

    assert summary.ok
    assert (summary.success_count, summary.fail_count, summary.total) == (3, 0, 3)
    assert sorted(p["to_email"] for p in mailer.sent) == [
        "dre@school.test", "head@school.test", "office@school.test",
    ]
    names = {p["to_email"]: p["to_name"] for p in mailer.sent}
    assert names["office@school.test"] == "Admin"
    assert len({p["report_html"] for p in mailer.sent}) == 1


def test_scenario_d_one_failure_is_partial_success(scenario_a_store, report):
    mailer = FakeMailer(failing={"office@school.test"})

    summary = ReportDispatcher(scenario_a_store, mailer, max_workers=3).send(report)

    assert summary.ok
    assert summary.success_count == 2
    assert summary.fail_count == 1
    assert summary.success_count + summary.fail_count == summary.total
    failed = summary.failures[0]
    assert failed.email == "office@school.test"
    assert failed.error == "The Public Key is invalid"
    assert {"success": False, "email": "office@school.test",
            "error": "The Public Key is invalid"} in summary.to_dict()["results"]


def test_scenario_e_no_admins(scenario_a_store, report, mailer):
    scenario_a_store.admins = []

    with pytest.raises(NoRecipientsError) as exc:
        ReportDispatcher(scenario_a_store, mailer).send(report)

    assert exc.value.message == "No admin users found"
    assert mailer.sent == []


def test_all_failures_raise_with_detail(scenario_a_store, report, admins):
    mailer = FakeMailer(failing={a.email for a in admins})

    with pytest.raises(DispatchFailedError) as exc:
        ReportDispatcher(scenario_a_store, mailer).send(report)

    assert exc.value.summary.success_count == 0
    assert exc.value.summary.fail_count == 3
    assert len(exc.value.details) == 3
    assert all(r["error"] for r in exc.value.details)


def test_unconfigured_mailer_fails_before_any_query(scenario_a_store, report):
    scenario_a_store.calls.clear()

    with pytest.raises(ConfigurationError):
        ReportDispatcher(scenario_a_store, FakeMailer(configured=False)).send(report)

    assert scenario_a_store.calls == []
