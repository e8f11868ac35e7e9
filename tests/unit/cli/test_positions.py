from __future__ import annotations

import json
from decimal import Decimal
from typing import TYPE_CHECKING

from typer.testing import CliRunner

from tests.builders import SOL, WALLET_A, WALLET_B, buy, sell
from trade_journal.cli import app

if TYPE_CHECKING:
    from pathlib import Path

    from trade_journal.positions import TradeRecord

runner = CliRunner()


def _write_trades(tmp_path: Path, trades: list[TradeRecord]) -> Path:
    path = tmp_path / "trades.json"
    path.write_text(
        json.dumps([trade.model_dump(mode="json") for trade in trades]),
        encoding="utf-8",
    )
    return path


def _round_trip(wallet: str = WALLET_A) -> list[TradeRecord]:
    return [
        buy("b1", 10, 20, fees=1, wallet=wallet),
        sell("s1", 4, 23, hours=1, fees=1, wallet=wallet),
    ]


def test_version() -> None:
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "trade-journal v" in result.stdout


def test_log_level_option_is_applied(capfd) -> None:
    result = runner.invoke(app, ["--log-level", "loud", "version"])

    assert result.exit_code == 0
    assert "Invalid TRADE_JOURNAL_LOG_LEVEL='loud'" in capfd.readouterr().err


def test_positions_calculate_json(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())

    result = runner.invoke(app, ["positions", "calculate", str(trades_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [p["status"] for p in payload["positions"]] == ["closed", "open"]
    # 4 * 23 - 4 * 20 - (0.4 + 1)
    assert Decimal(payload["positions"][0]["realized_pnl"]) == Decimal("10.6")
    assert len(payload["position_trades"]) == 3
    assert payload["errors"] == []
    assert payload["warnings"] == []


def test_positions_calculate_accepts_trades_object_and_camel_case(tmp_path: Path) -> None:
    trades_file = tmp_path / "trades.json"
    trades_file.write_text(
        json.dumps(
            {
                "trades": [
                    {
                        "id": "b1",
                        "walletAddress": WALLET_A,
                        "type": "buy",
                        "tokenIn": "USDC",
                        "tokenOut": SOL,
                        "amountIn": "20",
                        "amountOut": "2",
                        "priceOut": "10",
                        "blockTime": "2025-01-01T00:00:00Z",
                    }
                ]
            }
        ),
        encoding="utf-8",
    )

    result = runner.invoke(app, ["positions", "calculate", str(trades_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert Decimal(payload["positions"][0]["total_quantity"]) == Decimal("2")


def test_positions_calculate_status_filter(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())

    result = runner.invoke(
        app, ["positions", "calculate", str(trades_file), "--status", "open", "--json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [p["status"] for p in payload["positions"]] == ["open"]
    assert [pt["trade_id"] for pt in payload["position_trades"]] == ["b1"]


def test_positions_calculate_wallet_filter(tmp_path: Path) -> None:
    trades = [*_round_trip(WALLET_A), buy("b9", 1, 5, wallet=WALLET_B)]
    trades_file = _write_trades(tmp_path, trades)

    result = runner.invoke(
        app, ["positions", "calculate", str(trades_file), "--wallet", WALLET_B, "--json"]
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert [p["wallet_address"] for p in payload["positions"]] == [WALLET_B]


def test_positions_calculate_uses_symbols_file(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())
    symbols_file = tmp_path / "symbols.json"
    symbols_file.write_text(json.dumps({SOL: "SOL"}), encoding="utf-8")

    result = runner.invoke(
        app,
        ["positions", "calculate", str(trades_file), "--symbols", str(symbols_file), "--json"],
    )

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert {p["symbol"] for p in payload["positions"]} == {"SOL"}


def test_positions_calculate_table(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip() + [sell("s2", 1, 5, hours=2, token="XYZ")])

    result = runner.invoke(app, ["positions", "calculate", str(trades_file)])

    assert result.exit_code == 0
    assert "FIFO Positions" in result.stdout
    assert "Warning:" in result.stdout
    assert "no prior holdings" in result.stdout


def test_positions_calculate_no_positions(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, [])

    result = runner.invoke(app, ["positions", "calculate", str(trades_file)])

    assert result.exit_code == 0
    assert "No positions found." in result.stdout


def test_positions_calculate_invalid_status(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())

    result = runner.invoke(app, ["positions", "calculate", str(trades_file), "--status", "bogus"])

    assert result.exit_code == 1
    assert "Invalid status" in result.stdout


def test_positions_calculate_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["positions", "calculate", str(tmp_path / "nope.json")])

    assert result.exit_code == 1
    assert "not found" in result.stdout


def test_positions_calculate_invalid_json(tmp_path: Path) -> None:
    trades_file = tmp_path / "trades.json"
    trades_file.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["positions", "calculate", str(trades_file)])

    assert result.exit_code == 1
    assert "not valid JSON" in result.stdout


def test_positions_calculate_invalid_record(tmp_path: Path) -> None:
    trades_file = tmp_path / "trades.json"
    trades_file.write_text(json.dumps([{"id": "b1"}]), encoding="utf-8")

    result = runner.invoke(app, ["positions", "calculate", str(trades_file)])

    assert result.exit_code == 1
    assert "Invalid trade record" in result.stdout


def test_positions_calculate_invalid_config(tmp_path: Path, monkeypatch) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())
    monkeypatch.setenv("TRADE_JOURNAL_PARALLEL_WALLETS", "maybe")

    result = runner.invoke(app, ["positions", "calculate", str(trades_file)])

    assert result.exit_code == 1
    assert "TRADE_JOURNAL_PARALLEL_WALLETS" in result.stdout


def test_positions_summary_json(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())

    result = runner.invoke(app, ["positions", "summary", str(trades_file), "--json"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["metrics"]["total_positions"] == 2
    assert payload["metrics"]["closed_positions"] == 1
    assert payload["metrics"]["win_rate"] == 100.0
    assert len(payload["summaries"]) == 1


def test_positions_summary_table(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())

    result = runner.invoke(app, ["positions", "summary", str(trades_file)])

    assert result.exit_code == 0
    assert "Position Metrics" in result.stdout
    assert "By Symbol" in result.stdout


def test_positions_validate_grouping_valid(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())
    grouping_file = tmp_path / "grouping.json"
    grouping_file.write_text(json.dumps({"p1": ["b1", "s1"]}), encoding="utf-8")

    result = runner.invoke(
        app, ["positions", "validate-grouping", str(trades_file), str(grouping_file)]
    )

    assert result.exit_code == 0
    assert "Grouping is valid" in result.stdout


def test_positions_validate_grouping_invalid(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())
    grouping_file = tmp_path / "grouping.json"
    grouping_file.write_text(json.dumps({"p1": ["s1", "b1"]}), encoding="utf-8")

    result = runner.invoke(
        app, ["positions", "validate-grouping", str(trades_file), str(grouping_file)]
    )

    assert result.exit_code == 1
    assert "Grouping is invalid" in result.stdout
    assert "non-chronological" in result.stdout


def test_positions_validate_grouping_rejects_bad_shape(tmp_path: Path) -> None:
    trades_file = _write_trades(tmp_path, _round_trip())
    grouping_file = tmp_path / "grouping.json"
    grouping_file.write_text(json.dumps(["b1", "s1"]), encoding="utf-8")

    result = runner.invoke(
        app, ["positions", "validate-grouping", str(trades_file), str(grouping_file)]
    )

    assert result.exit_code == 1
    assert "Grouping file must map" in result.stdout
