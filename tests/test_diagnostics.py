from dataclasses import replace

from paga_payments import PagaClient, ProtocolError, run_diagnostics
from paga_payments.core.diagnostics import default_attempts

from .conftest import make_response


def test_default_attempts_against_live_include_sandbox(config, session):
    live = PagaClient(replace(config, base_url="https://www.mypaga.com"), session=session)
    names = [name for name, _ in default_attempts(live)]
    assert names[-1] == "Balance against sandbox"
    assert len(names) == 4


def test_default_attempts_skip_sandbox_when_already_there(client):
    names = [name for name, _ in default_attempts(client)]
    assert "Balance against sandbox" not in names
    assert len(names) == 3


def test_run_diagnostics_records_results_and_errors(client, session):
    session.post.side_effect = [
        make_response({"responseCode": 1, "message": "Account not linked"}),
        make_response(None, status_code=502, text="bad gateway"),
        make_response({"responseCode": 0, "message": "ok", "sources": []}),
    ]
    sleeps = []

    report = run_diagnostics(client, delay_seconds=2.0, sleep=sleeps.append)

    assert [outcome.name for outcome in report.outcomes] == [
        "Balance with empty account fields",
        "Balance with business principal as account",
        "Funding sources with empty account fields",
    ]
    assert report.outcomes[0].result.response_code == 1
    assert isinstance(report.outcomes[1].error, ProtocolError)
    assert report.successful == ["Funding sources with empty account fields"]
    assert report.any_succeeded
    assert sleeps == [2.0, 2.0]


def test_business_principal_attempt_sends_business_account(client, session, config):
    run_diagnostics(client, delay_seconds=0)
    bodies = [call.kwargs["json"] for call in session.post.call_args_list]
    second = bodies[1]
    assert second["accountPrincipal"] == config.principal
    assert second["accountCredentials"] == config.secret
    assert second["sourceOfFunds"] == "PAGA"
    refs = [body["referenceNumber"] for body in bodies]
    assert len(set(refs)) == len(refs)


def test_sandbox_attempt_targets_sandbox_url(config, session):
    live = PagaClient(replace(config, base_url="https://www.mypaga.com"), session=session)
    run_diagnostics(live, delay_seconds=0)
    urls = [call.args[0] for call in session.post.call_args_list]
    assert urls[-1].startswith("https://beta.mypaga.com/")
    assert all(url.startswith("https://www.mypaga.com/") for url in urls[:-1])
