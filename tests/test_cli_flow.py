import json
from pathlib import Path

from typer.testing import CliRunner

from loancalc_core.cli import app


runner = CliRunner()

DATA = Path(__file__).parent / "data"


def _ledger(tmp_path: Path) -> Path:
    ledger_path = tmp_path / "ledger.csv"
    ledger_path.write_text((DATA / "ledger.csv").read_text())
    return ledger_path


def test_cli_balance_writes_json(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    out_path = tmp_path / "balance.json"

    result = runner.invoke(
        app,
        [
            "balance",
            "--ledger",
            str(ledger_path),
            "--balance-date",
            "2024-01-01",
            "--rate",
            "10",
            "--frequency",
            "monthly",
            "--out",
            str(out_path),
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert out_path.exists()

    payload = json.loads(out_path.read_text())
    assert payload["config"]["annual_rate"] == 0.10
    entries = payload["entries"]
    assert len(entries) == 2
    for item in entries:
        assert item["future_value"] > item["amount"]
    borrowed = sum(e["future_value"] for e in entries if e["kind"] == "borrowed")
    paid = sum(e["future_value"] for e in entries if e["kind"] == "paid")
    assert abs(payload["balance"]["net_balance"] - (borrowed - paid)) < 1e-9
    assert payload["balance"]["status"] == "Owed"


def test_cli_balance_uses_config_file_and_prints_summary(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    result = runner.invoke(
        app,
        ["balance", "--ledger", str(ledger_path), "--config", str(DATA / "config.json"), "--details"],
    )
    assert result.exit_code == 0, result.stdout
    assert "Final Balance:" in result.stdout
    assert "(Owed)" in result.stdout


def test_cli_balance_json_to_stdout_with_rate_override(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    result = runner.invoke(
        app,
        [
            "balance",
            "--ledger",
            str(ledger_path),
            "--config",
            str(DATA / "config.json"),
            "--rate",
            "0",
            "--json",
        ],
    )
    assert result.exit_code == 0, result.stdout
    payload = json.loads(result.stdout)
    assert payload["config"]["balance_date"] == "2024-01-01"
    assert payload["balance"]["net_balance"] == 5000.0


def test_cli_balance_requires_a_balance_date(tmp_path: Path):
    result = runner.invoke(app, ["balance", "--ledger", str(_ledger(tmp_path))])
    assert result.exit_code != 0


def test_cli_explain(tmp_path: Path):
    result = runner.invoke(
        app,
        [
            "explain",
            "--ledger",
            str(_ledger(tmp_path)),
            "--entry-id",
            "1",
            "--balance-date",
            "2024-01-01",
            "--rate",
            "10",
        ],
    )
    assert result.exit_code == 0, result.stdout
    assert "Days Elapsed: 366" in result.stdout
    assert "Compound Factor:" in result.stdout


def test_cli_quick_dates(tmp_path: Path):
    result = runner.invoke(
        app,
        ["quick-dates", "--ledger", str(_ledger(tmp_path)), "--today", "2024-06-30"],
    )
    assert result.exit_code == 0, result.stdout
    assert "Today: 2024-06-30" in result.stdout
    assert "1 Month: 2023-02-01" in result.stdout
    assert "5 Years: 2028-01-01" in result.stdout


def test_cli_interactive_session():
    steps = [
        "add", "2023-01-01", "10000", "borrowed", "first loan",
        "add", "2023-06-01", "-5", "paid", "",
        "2023-06-01", "5000", "paid", "",
        "list",
        "delete", "99",
        "calc", "2024-01-01", "10", "monthly", "y",
        "quit",
    ]
    result = runner.invoke(app, ["interactive"], input="\n".join(steps) + "\n")
    assert result.exit_code == 0, result.stdout
    assert "Added entry 1." in result.stdout
    assert "amount: must not be negative" in result.stdout
    assert "Added entry 2." in result.stdout
    assert "No entry with id 99" in result.stdout
    assert "(Owed)" in result.stdout
    assert "Days Elapsed: 366" in result.stdout
    assert "Done." in result.stdout


def test_cli_rejects_future_dated_ledger_rows(tmp_path: Path):
    ledger_path = tmp_path / "future.csv"
    ledger_path.write_text("date,amount,kind\n2023-01-01,100,borrowed\n2999-01-01,10,paid\n")

    result = runner.invoke(
        app, ["balance", "--ledger", str(ledger_path), "--balance-date", "2024-01-01", "--json"]
    )
    assert result.exit_code == 2
    assert "must not be in the future" in result.output

    result = runner.invoke(app, ["interactive", "--ledger", str(ledger_path)], input="quit\n")
    assert result.exit_code == 2
    assert "must not be in the future" in result.output


def test_cli_rejects_malformed_config(tmp_path: Path):
    ledger_path = _ledger(tmp_path)
    for payload in ({"balance_date": "2024-01-01", "annual_rate": None}, ["2024-01-01"]):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps(payload))
        result = runner.invoke(app, ["balance", "--ledger", str(ledger_path), "--config", str(config_path)])
        assert result.exit_code == 2, result.output


def test_cli_interactive_reprompts_rejected_entry():
    steps = [
        "add", "2999-01-01", "100", "borrowed", "",
        "2023-01-01", "100", "borrowed", "",
        "edit", "1", "2999-01-01", "100", "borrowed", "",
        "2023-02-01", "250", "paid", "",
        "list",
        "quit",
    ]
    result = runner.invoke(app, ["interactive"], input="\n".join(steps) + "\n")
    assert result.exit_code == 0, result.output
    assert result.output.count("date: must not be in the future") == 2
    assert "Added entry 1." in result.output
    assert "Updated entry 1." in result.output
    assert "$250.00" in result.output
