import os

import main


def test_cli_writes_map(tmp_path, data_path, capsys):
    out = tmp_path / "map.html"
    summary = main.main(["--data", data_path, "--out", str(out), "--log-level", "WARNING"])
    assert os.path.exists(out)
    assert summary["counties"] == 5
    assert summary["missing_risk"] == 1
    assert summary["tiers"]["#800026"] == 1
    assert summary["data_error"] is None
    assert "Interactive map" in capsys.readouterr().out


def test_cli_survives_missing_data(tmp_path):
    out = tmp_path / "map.html"
    summary = main.main(["--data", str(tmp_path / "none.json"), "--out", str(out), "--log-level", "ERROR"])
    assert os.path.exists(out)
    assert summary["counties"] == 0
    assert summary["data_error"]
