"""
Tests for scripts/currency/codegen.py
"""
import sys
from pathlib import Path

import pytest

# Add the scripts directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts" / "currency"))

from codegen import main

from conftest import SAMPLE_ENTRIES, registry_xml


def _exec(path):
    namespace: dict = {}
    exec(path.read_text(encoding="utf-8"), namespace)
    return namespace


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in [
        "CURRENCY_REGISTRY_URL",
        "CURRENCY_SNAPSHOT_PATH",
        "CURRENCY_TEMPLATE_PATH",
        "CURRENCY_OUTPUT_PATH",
        "CURRENCY_REQUEST_TIMEOUT",
    ]:
        monkeypatch.delenv(var, raising=False)
    (tmp_path / "t.tmpl").write_text("CODES = [{% for c in currencies %}'{{ c.code }}', {% endfor %}]\n", encoding="utf-8")
    return tmp_path


def test_main_success_is_silent(workdir, fake_registry, capsys):
    fake_registry(registry_xml(SAMPLE_ENTRIES))
    code = main(["--snapshot", "snap.csv", "--template", "t.tmpl", "--output", "out.py"])
    captured = capsys.readouterr()

    assert code == 0
    assert captured.out == ""
    assert (workdir / "snap.csv").exists()
    assert _exec(workdir / "out.py")["CODES"] == ["XTS", "XXX", "JPY", "USD", "XDR"]


def test_main_reports_failing_stage(workdir, offline_registry, caplog):
    code = main(["--snapshot", "snap.csv", "--template", "t.tmpl", "--output", "out.py"])
    assert code == 1
    assert "fetch failed" in caplog.text
    assert not (workdir / "out.py").exists()


def test_main_skip_fetch(workdir, offline_registry):
    (workdir / "snap.csv").write_text("Name,Code,Num,Scale\nEuro,EUR,978,2\n", encoding="utf-8")
    code = main(["--skip-fetch", "--snapshot", "snap.csv", "--template", "t.tmpl", "--output", "out.py"])
    assert code == 0
    assert _exec(workdir / "out.py")["CODES"] == ["EUR"]


def test_main_reports_invalid_timeout_without_traceback(workdir, monkeypatch, offline_registry, caplog):
    monkeypatch.setenv("CURRENCY_REQUEST_TIMEOUT", "soon")
    code = main(["--snapshot", "snap.csv", "--template", "t.tmpl", "--output", "out.py"])
    assert code == 1
    assert "config failed" in caplog.text
    assert "CURRENCY_REQUEST_TIMEOUT" in caplog.text
