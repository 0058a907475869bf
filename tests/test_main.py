"""Tests for the command line entry point."""

from __future__ import annotations

from decimal import Decimal

import pytest

from bankcore_app.core.config import build_config
from bankcore_app.core.container import build_container
from bankcore_app.main import main


@pytest.fixture
def container(tmp_path):
    config = build_config(
        {
            "store": {"directory": str(tmp_path / "data")},
            "audit": {"path": str(tmp_path / "data" / "audit.db")},
        }
    )
    return build_container(config)


def test_deposit_and_show(container, capsys) -> None:
    assert main(["account", "deposit", "A1", "100"], container=container) == 0
    assert main(["account", "show", "A1"], container=container) == 0

    out = capsys.readouterr().out
    assert "Current Balance: $100.00" in out
    assert "Transfer Limit: 1000.00" in out


def test_history_and_clear(container, capsys) -> None:
    main(["account", "deposit", "A1", "5"], container=container)
    main(["account", "history", "A1"], container=container)
    assert "A1 Transaction History:\nDeposited: $5.00\n" in capsys.readouterr().out

    assert main(["account", "clear-history", "A1"], container=container) == 0
    assert container.account_service.open_account("A1").get_history() == ()


def test_refused_savings_withdrawal_exits_with_error(container, capsys) -> None:
    main(["account", "deposit", "S1", "100"], container=container)

    code = main(
        ["account", "withdraw", "S1", "60", "--minimum-balance", "50"],
        container=container,
    )

    assert code == 1
    assert "[ERROR] Cannot withdraw." in capsys.readouterr().err


def test_set_limit(container, capsys) -> None:
    assert main(["account", "set-limit", "A1", "250"], container=container) == 0
    assert "Transfer Limit: 250.00" in capsys.readouterr().out


def test_policy_quote(container, capsys) -> None:
    code = main(
        [
            "policy",
            "quote",
            "--type",
            "life",
            "--start",
            "2024-01-01",
            "--coverage",
            "standard",
            "--age",
            "30",
            "--risk",
        ],
        container=container,
    )

    assert code == 0
    out = capsys.readouterr().out
    assert "LIFE Policy Details:" in out
    assert "Total Premium (With GST): $15260.00" in out


def test_policy_quote_bad_date(container, capsys) -> None:
    code = main(
        ["policy", "quote", "--type", "health", "--start", "2024-1-1x", "--age", "30"],
        container=container,
    )

    assert code == 1
    assert "Invalid date format" in capsys.readouterr().err


def test_import_and_audit(container, tmp_path, capsys) -> None:
    csv_path = tmp_path / "transactions.csv"
    csv_path.write_text("account_number,type,amount\nA1,deposit,10\nA1,bogus,1\n", encoding="utf-8")

    assert main(["import", "transactions", str(csv_path)], container=container) == 0
    out = capsys.readouterr().out
    assert "[INFO] applied: 1, failed: 1" in out
    assert "row 3: unknown transaction type 'bogus'" in out

    assert main(["audit", "--entity", "account"], container=container) == 0
    assert "DEPOSIT account A1" in capsys.readouterr().out


def test_import_missing_file(container, tmp_path, capsys) -> None:
    code = main(["import", "policies", str(tmp_path / "missing.csv")], container=container)

    assert code == 1
    assert "[ERROR]" in capsys.readouterr().err


def test_account_trail(container, capsys) -> None:
    main(["account", "deposit", "A1", "100"], container=container)
    main(["account", "withdraw", "A1", "25"], container=container)
    capsys.readouterr()

    assert main(["account", "trail", "A1"], container=container) == 0
    assert capsys.readouterr().out == "DEPOSIT balance=100.00\nWITHDRAW balance=75.00\n"


@pytest.mark.parametrize("amount", ["inf", "nan"])
def test_non_finite_deposit_is_reported(container, capsys, amount) -> None:
    assert main(["account", "deposit", "A1", amount], container=container) == 1
    assert "[ERROR] Not a valid amount" in capsys.readouterr().err

    assert main(["account", "withdraw", "A1", "5"], container=container) == 0
    assert container.account_service.open_account("A1").balance == Decimal("0.00")


def test_close_account(container, capsys) -> None:
    main(["account", "deposit", "A1", "10"], container=container)

    assert main(["account", "close", "A1"], container=container) == 0
    assert "[INFO] account closed: A1" in capsys.readouterr().out
    assert main(["account", "close", "A1"], container=container) == 1
    assert "[ERROR] Account A1 not found." in capsys.readouterr().err
