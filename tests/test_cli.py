"""Tests for the command line entry point."""

import io
import json
import logging

import structlog

import main


def write_history(tmp_path):
    path = tmp_path / "draws.csv"
    rows = ["draw_id,draw_date,numbers,bonus"]
    for i in range(12):
        numbers = "-".join(str((i * 3 + k * 7) % 40 + 1) for k in range(5))
        rows.append(f"{i + 1},2024-{(i % 12) + 1:02d}-10,{numbers},{i % 5 + 1}")
    path.write_text("\n".join(rows) + "\n")
    return path


def test_list_outputs_every_key(capsys):
    assert main.main(["list"]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert len(listing) == 29
    assert listing["mixed"]
    assert all(listing.values())


def test_predict_outputs_json(tmp_path, capsys):
    path = write_history(tmp_path)
    code = main.main([
        "predict", str(path), "--strategy", "frequency-based",
        "--main-count", "5", "--main-range", "40",
        "--bonus-count", "1", "--bonus-range", "5",
        "--plays", "2", "--seed", "42", "--summary",
    ])
    assert code == 0

    output = json.loads(capsys.readouterr().out)
    assert output["strategy"] == "frequency-based"
    assert len(output["predictions"]) == 2
    for prediction in output["predictions"]:
        assert len(prediction["predicted_numbers"]) == 5
        assert len(prediction["bonus_numbers"]) == 1
    assert output["history"]["total_draws"] == 12


def test_predict_reports_invalid_configuration(tmp_path):
    path = write_history(tmp_path)
    assert main.main(["predict", str(path), "--main-count", "9", "--main-range", "5"]) == 1


def test_predict_reports_unknown_strategy(tmp_path):
    path = write_history(tmp_path)
    assert main.main([
        "predict", str(path), "--strategy", "crystal-ball", "--main-count", "5", "--main-range", "40",
    ]) == 1


def test_json_log_format_renders_stdlib_records(monkeypatch):
    handler = logging.StreamHandler(io.StringIO())
    monkeypatch.setattr(logging.getLogger(), "handlers", [handler])
    monkeypatch.setattr(main.settings, "log_format", "json")
    try:
        main.setup_logging("INFO")
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

        record = logging.LogRecord("predictions.registry", logging.INFO, __file__, 1,
                                   "[REGISTRY] Registered %s", ("random",), None)
        rendered = json.loads(handler.format(record))
        assert rendered["event"] == "[REGISTRY] Registered random"
        assert rendered["level"] == "info"
        assert rendered["logger"] == "predictions.registry"
        assert "timestamp" in rendered
    finally:
        structlog.reset_defaults()
