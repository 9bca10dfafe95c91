"""
trust_graph/tests/test_cli.py: Tests for the command-line interface.

Each subcommand runs against a JSON credential export in tmp_path; stdout is
parsed back to check the payload. Exit codes: 0 ok, 1 store failure, 2 usage.
"""

import json

import pandas as pd
import pytest

from trust_graph.cli import ENV_CREDENTIALS, ENV_ROOT_AID, main

ORG = "EOrg123456789TestOrg"

EXPORT = [
    {"said": "E1", "issuer": ORG, "recipient": "EUSER_A", "schema": "EMatouMembershipSchemaV1",
     "data": {"displayName": "Alice", "dt": "2026-01-20T00:00:00Z"}},
    {"said": "E2", "issuer": ORG, "recipient": "EUSER_B", "schema": "EOperationsStewardSchemaV1",
     "data": {"displayName": "Bob", "role": "Steward", "dt": "2026-01-21T00:00:00Z"}},
    {"said": "E3", "issuer": "EUSER_A", "recipient": "EUSER_B", "schema": "EInvitationSchemaV1",
     "data": {"dt": "2026-01-22T00:00:00Z"}},
    {"said": "E4", "issuer": "EUSER_B", "recipient": "EUSER_A", "schema": "EInvitationSchemaV1",
     "data": {"dt": "2026-01-23T00:00:00Z"}},
]


@pytest.fixture
def creds(tmp_path):
    path = tmp_path / "creds.json"
    path.write_text(json.dumps(EXPORT), encoding="utf-8")
    return str(path)


def run(capsys, *argv):
    code = main(list(argv))
    return code, capsys.readouterr()


def test_graph_command(capsys, creds):
    code, out = run(capsys, "graph", "--credentials", creds, "--root", ORG)
    assert code == 0
    payload = json.loads(out.out)
    assert payload["node_count"] == 3
    assert payload["edge_count"] == 4
    assert "summary" not in payload


def test_graph_command_with_summary(capsys, creds):
    code, out = run(capsys, "graph", "--credentials", creds, "--root", ORG, "--summary")
    assert code == 0
    assert json.loads(out.out)["summary"]["bidirectional_count"] == 2


def test_graph_neighborhood(capsys, creds):
    code, out = run(capsys, "graph", "--credentials", creds, "--root", ORG,
                    "--aid", "EUSER_A", "--depth", "0")
    assert code == 0
    payload = json.loads(out.out)
    assert payload["node_count"] == 1
    assert payload["edge_count"] == 0


def test_graph_negative_depth_is_usage_error(capsys, creds):
    code, out = run(capsys, "graph", "--credentials", creds, "--root", ORG,
                    "--aid", "EUSER_A", "--depth", "-1")
    assert code == 2
    assert "--depth" in out.err


def test_score_command(capsys, creds):
    code, out = run(capsys, "score", "EUSER_A", "--credentials", creds, "--root", ORG)
    assert code == 0
    payload = json.loads(out.out)
    assert payload["aid"] == "EUSER_A"
    assert payload["score"] == pytest.approx(10.9)


def test_score_unknown_identity(capsys, creds):
    code, out = run(capsys, "score", "ENOBODY", "--credentials", creds, "--root", ORG)
    assert code == 0
    payload = json.loads(out.out)
    assert payload["score"] == 0.0
    assert payload["graph_depth"] == -1


def test_top_command_writes_csv(capsys, creds, tmp_path):
    csv_path = tmp_path / "top.csv"
    code, out = run(capsys, "top", "-n", "2", "--csv", str(csv_path),
                    "--credentials", creds, "--root", ORG)
    assert code == 0
    assert "EUSER_A" in out.out
    df = pd.read_csv(csv_path)
    assert list(df["aid"]) == ["EUSER_A", "EUSER_B"]


def test_summary_command(capsys, creds):
    code, out = run(capsys, "summary", "--credentials", creds, "--root", ORG)
    assert code == 0
    payload = json.loads(out.out)
    assert payload["total_nodes"] == 3
    assert payload["max_score"] == pytest.approx(10.9)


def test_inputs_from_environment(capsys, creds, monkeypatch):
    monkeypatch.setenv(ENV_CREDENTIALS, creds)
    monkeypatch.setenv(ENV_ROOT_AID, ORG)
    code, out = run(capsys, "summary")
    assert code == 0
    assert json.loads(out.out)["total_edges"] == 4


def test_missing_root_is_usage_error(capsys, creds, monkeypatch):
    monkeypatch.delenv(ENV_ROOT_AID, raising=False)
    code, out = run(capsys, "summary", "--credentials", creds)
    assert code == 2
    assert "--root" in out.err


def test_missing_credentials_is_usage_error(capsys, monkeypatch):
    monkeypatch.delenv(ENV_CREDENTIALS, raising=False)
    code, out = run(capsys, "summary", "--root", ORG)
    assert code == 2
    assert "--credentials" in out.err


def test_unreadable_store_exits_one(capsys, tmp_path):
    code, out = run(capsys, "summary", "--credentials", str(tmp_path / "absent.json"),
                    "--root", ORG)
    assert code == 1
    assert out.out == ""


def test_subcommand_required(capsys):
    with pytest.raises(SystemExit) as info:
        main([])
    assert info.value.code == 2


def test_depth_without_aid_is_usage_error(capsys, creds):
    code, out = run(capsys, "graph", "--credentials", creds, "--root", ORG, "--depth", "2")
    assert code == 2
    assert "--depth requires --aid" in out.err
    assert out.out == ""


def test_top_table_rounds_but_csv_keeps_precision(capsys, creds, tmp_path):
    csv_path = tmp_path / "top.csv"
    code, out = run(capsys, "top", "-n", "1", "--csv", str(csv_path),
                    "--credentials", creds, "--root", ORG)
    assert code == 0
    assert "10.9" in out.out
    assert pd.read_csv(csv_path)["score"].iloc[0] == pytest.approx(10.9)
