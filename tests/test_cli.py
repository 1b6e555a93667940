"""Tests for the dex-pool command-line interface."""

import pytest

from dex_pool.cli import main


class TestQuoteCommand:
    def test_reference_quote(self, capsys):
        assert main(["quote", "100", "1000", "1000"]) == 0
        assert capsys.readouterr().out.strip() == "90"

    def test_zero_input_reports_error(self, capsys):
        assert main(["quote", "0", "1000", "1000"]) == 1
        assert capsys.readouterr().out.startswith("Error:")


class TestPriceCommand:
    def test_fixed_point_price(self, capsys):
        assert main(["price", "1000", "500", "--human"]) == 0
        lines = capsys.readouterr().out.split()
        assert lines == ["2000000000000000000", "2.000000000000000000"]

    def test_empty_pool_reports_error(self, capsys):
        assert main(["price", "1", "0"]) == 1
        assert "Error:" in capsys.readouterr().out


class TestSimulateCommand:
    def test_short_run(self, capsys):
        assert main(["simulate", "--steps", "20", "--seed", "3"]) == 0
        out = capsys.readouterr().out
        assert "Running 20 steps (seed=3)" in out
        assert "Reserves:" in out
        assert "k growth:" in out

    def test_seed_from_environment(self, capsys, monkeypatch):
        monkeypatch.setenv("DEX_POOL_SEED", "5")
        assert main(["simulate", "--steps", "5"]) == 0
        assert "seed=5" in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out.lower()


def test_invalid_integer_exits():
    with pytest.raises(SystemExit):
        main(["quote", "abc", "1", "1"])
