from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from unipath.cli.app import app

runner = CliRunner()


def test_profile_extract_prints_candidate_fields(tmp_path: Path, application_text: str) -> None:
    source = tmp_path / "application.txt"
    source.write_text(application_text, encoding="utf-8")

    result = runner.invoke(app, ["profile", "extract", "--file", str(source)])

    assert result.exit_code == 0, result.output
    candidate = json.loads(result.stdout)
    assert candidate["firstName"] == "Priya"
    assert candidate["address"]["postalCode"] == "560001"
    assert candidate["education"][0]["fromDate"] == "2017-07-01"
    assert candidate["testScores"] == {"gre": True, "gmat": False}


def test_profile_extract_reports_unreadable_pdf(tmp_path: Path) -> None:
    source = tmp_path / "broken.pdf"
    source.write_bytes(b"garbage")

    result = runner.invoke(app, ["profile", "extract", "--file", str(source)])

    assert result.exit_code == 1


def test_accounts_create_and_list(tmp_path: Path) -> None:
    created = runner.invoke(
        app,
        ["accounts", "create", "--name", "Ops", "--email", "Ops@Example.com", "--password", "pw", "--role", "admin"],
    )
    assert created.exit_code == 0, created.output
    assert json.loads(created.stdout)["email"] == "ops@example.com"

    duplicate = runner.invoke(
        app, ["accounts", "create", "--name", "Ops", "--email", "ops@example.com", "--password", "pw"]
    )
    assert duplicate.exit_code != 0

    listed = runner.invoke(app, ["accounts", "list"])
    assert listed.exit_code == 0, listed.output
    assert [row["role"] for row in json.loads(listed.stdout)] == ["admin"]
