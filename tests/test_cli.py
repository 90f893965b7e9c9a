"""Tests for the groww-ta command-line interface."""

import tempfile
import time
from pathlib import Path

import pytest
from click.testing import CliRunner

from growwta.cli.analyze import _parse_indicators
from growwta.cli.data import read_candles_csv
from growwta.cli.main import LAZY_SUBCOMMANDS, cli
from growwta.providers import CandleStore


def write_csv(path: Path, count: int = 60) -> None:
    """Daily candles ending yesterday, zig-zagging upward."""
    now = int(time.time())
    lines = ["timestamp,open,high,low,close,volume"]
    for i in range(count):
        ts = now - (count - i) * 86400
        price = 100.0 + i * 0.5 + (i % 4) * 1.5
        lines.append(f"{ts},{price},{price + 2.0},{price - 2.0},{price + 1.0},{10000 + i}")
    path.write_text("\n".join(lines) + "\n")


@pytest.fixture
def workspace():
    """Temp dir with a config pointing the candle store inside it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        db_path = root / "candles.db"
        config_path = root / "config.toml"
        config_path.write_text(f'[data]\ndb_path = "{db_path.as_posix()}"\n')
        yield root, config_path, db_path


class TestCommands:
    def test_all_commands_listed(self):
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        for name in LAZY_SUBCOMMANDS:
            assert name in result.output

    def test_load_then_analyze(self, workspace):
        root, config_path, db_path = workspace
        csv_path = root / "tcs.csv"
        write_csv(csv_path)
        runner = CliRunner()

        loaded = runner.invoke(cli, ["--config", str(config_path), "load", "tcs", str(csv_path)])
        assert loaded.exit_code == 0, loaded.output
        assert CandleStore(db_path).count_candles("TCS", 1440) == 60

        analyzed = runner.invoke(cli, ["--config", str(config_path), "analyze", "TCS", "-i", "rsi,adx"])
        assert analyzed.exit_code == 0, analyzed.output
        assert "RSI (14)" in analyzed.output
        assert "ADX" in analyzed.output

    def test_analyze_without_data_fails(self, workspace):
        _, config_path, _ = workspace

        result = CliRunner().invoke(cli, ["--config", str(config_path), "analyze", "NOPE"])

        assert result.exit_code == 1
        assert "No data found" in result.output

    def test_analyze_rejected_range(self, workspace):
        _, config_path, _ = workspace

        result = CliRunner().invoke(
            cli, ["--config", str(config_path), "analyze", "TCS", "-t", "1", "-d", "4"]
        )

        assert result.exit_code == 1
        assert "maximum is 3 days" in result.output

    def test_levels_and_patterns(self, workspace):
        root, config_path, _ = workspace
        csv_path = root / "tcs.csv"
        write_csv(csv_path)
        runner = CliRunner()
        runner.invoke(cli, ["--config", str(config_path), "load", "TCS", str(csv_path)])

        levels = runner.invoke(cli, ["--config", str(config_path), "levels", "TCS"])
        assert levels.exit_code == 0, levels.output
        assert "Fibonacci" in levels.output

        patterns = runner.invoke(cli, ["--config", str(config_path), "patterns", "TCS"])
        assert patterns.exit_code == 0, patterns.output

    def test_bad_parameters_exit_cleanly(self, workspace):
        root, config_path, _ = workspace
        csv_path = root / "tcs.csv"
        write_csv(csv_path)
        runner = CliRunner()
        runner.invoke(cli, ["--config", str(config_path), "load", "TCS", str(csv_path)])

        patterns = runner.invoke(cli, ["--config", str(config_path), "patterns", "TCS", "--lookback=0"])
        assert patterns.exit_code == 1
        assert "lookback must be >= 1" in patterns.output

        levels = runner.invoke(cli, ["--config", str(config_path), "levels", "TCS", "--tolerance=-1"])
        assert levels.exit_code == 1
        assert levels.exception is None or isinstance(levels.exception, SystemExit)

    def test_load_rejects_bad_csv(self, workspace):
        root, config_path, _ = workspace
        csv_path = root / "bad.csv"
        csv_path.write_text("timestamp,open,close\n1,2,3\n")

        result = CliRunner().invoke(cli, ["--config", str(config_path), "load", "TCS", str(csv_path)])

        assert result.exit_code == 1
        assert "Missing CSV columns" in result.output


class TestCheckRange:
    def test_rejected(self):
        result = CliRunner().invoke(cli, ["check-range", "-t", "1", "--days", "4"])

        assert result.exit_code == 1
        assert "Rejected" in result.output

    def test_accepted(self):
        result = CliRunner().invoke(cli, ["check-range", "-t", "1440", "--days", "730"])

        assert result.exit_code == 0
        assert "OK" in result.output

    def test_unsupported_interval(self):
        result = CliRunner().invoke(cli, ["check-range", "-t", "999", "--days", "1"])

        assert result.exit_code == 1
        assert "Unsupported interval" in result.output


class TestCsvReader:
    def test_iso_dates_and_sorting(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "c.csv"
            path.write_text(
                "Timestamp,Open,High,Low,Close,Volume\n"
                "2024-01-03,101,103,100,102,500\n"
                "2024-01-02,100,102,99,101,400\n"
            )

            series = read_candles_csv(path, 1440)

            assert series.closes == [101.0, 102.0]
            assert series.volumes == [400, 500]

    def test_invalid_candle_reports_line(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "c.csv"
            path.write_text("timestamp,open,high,low,close,volume\n1,100,99,98,100,1\n")

            with pytest.raises(ValueError, match="Line 2"):
                read_candles_csv(path, 1440)


class TestParseIndicators:
    def test_normalizes(self):
        assert _parse_indicators(" RSI, macd ,,bb") == ["rsi", "macd", "bb"]
