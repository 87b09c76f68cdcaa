"""
Tests for the seed script
"""
import importlib.util
import json
from pathlib import Path
from unittest.mock import patch

import pytest

from saarthi.core.settings import settings
from saarthi.services.state_storage import REPORTS_KEY

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "scripts" / "seed_db.py"


def load_script():
    spec = importlib.util.spec_from_file_location("seed_db", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestSeedScript:
    """Test suite for dry-run and apply seeding."""

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch, tmp_path):
        self.db_path = tmp_path / "mock_db.json"
        monkeypatch.setattr(settings, "USE_MOCK_DB", False)
        monkeypatch.setattr(settings, "MOCK_DB_PATH", str(self.db_path))
        self.script = load_script()

    def test_dry_run_writes_nothing(self, capsys):
        self.script.main(["--force-mock"])

        out = capsys.readouterr().out
        assert "Dry run complete" in out
        assert not self.db_path.exists()

    def test_apply_to_mock_file(self, capsys):
        self.script.main(["--apply", "--force-mock"])

        out = capsys.readouterr().out
        assert "Storage backend: json-file" in out
        assert "Seeding completed." in out
        stored = json.loads(self.db_path.read_text(encoding="utf-8"))
        assert len(stored[REPORTS_KEY]) == 4

    @patch("saarthi.config.firebase.get_db", side_effect=RuntimeError("credentials file not found"))
    def test_apply_refuses_memory_fallback(self, mock_get_db, capsys):
        with pytest.raises(SystemExit) as exc:
            self.script.main(["--apply"])

        out = capsys.readouterr().out
        assert exc.value.code == 1
        assert "Storage backend: memory" in out
        assert "Seeding completed." not in out
        assert "Wrote:" not in out
        mock_get_db.assert_called_once()
