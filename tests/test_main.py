"""Tests for the entry point's startup failures."""
from main import main


class TestMain:
    def test_missing_config_is_fatal(self, tmp_path, capsys):
        assert main(str(tmp_path / "missing.json")) == 1
        assert "FATAL" in capsys.readouterr().out

    def test_malformed_config_is_fatal(self, tmp_path, capsys):
        path = tmp_path / "config.json"
        path.write_text("{")
        assert main(str(path)) == 1
        assert "FATAL" in capsys.readouterr().out
