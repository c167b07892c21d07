"""Tests for the kubelint command-line interface."""

import json
import os
import tempfile

from kubelint.cli.main import main

VALID = """apiVersion: v1
kind: ConfigMap
metadata:
  name: settings
data:
  mode: fast
"""

INVALID = """apiVersion: v1
kind: Pod
metadata:
  name: web
spec:
  restartPolicy: Always
"""


def _write(tmpdir, name, content):
    path = os.path.join(tmpdir, name)
    with open(path, "w") as f:
        f.write(content)
    return path


class TestValidateCommand:
    """Tests for 'kubelint validate'."""

    def test_valid_manifest_exits_zero(self, capsys):
        """Test a clean run."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "ok.yaml", VALID)
            assert main(["validate", path]) == 0

        out = capsys.readouterr().out
        assert "1 document(s): 0 error(s)" in out

    def test_errors_exit_one(self, capsys):
        """Test that error findings fail the run."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "bad.yaml", INVALID)
            assert main(["validate", path]) == 1

        out = capsys.readouterr().out
        assert f"{path}:6:3: error: [schema.requiredField] spec.containers" in out

    def test_json_format(self, capsys):
        """Test machine-readable output."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "bad.yaml", INVALID)
            main(["validate", path, "--format", "json"])

        data = json.loads(capsys.readouterr().out)
        assert data["summary"]["errors"] == 1
        assert data["findings"][0]["path"] == "spec.containers"

    def test_jsonl_format(self, capsys):
        """Test JSON lines output."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "bad.yaml", INVALID)
            main(["validate", path, "--format", "jsonl"])

        lines = capsys.readouterr().out.strip().splitlines()
        assert json.loads(lines[-1])["summary"]["documents"] == 1

    def test_strict_flag(self, capsys):
        """Test that --strict escalates unknown fields."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "cm.yaml", VALID + "extra: 1\n")
            assert main(["validate", path]) == 0
            assert main(["validate", path, "--strict"]) == 1

    def test_config_file(self, capsys):
        """Test that options are read from the config file."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = _write(tmpdir, "cm.yaml", VALID + "extra: 1\n")
            config = _write(tmpdir, "kubelint.json", json.dumps({"validation": {"strict": True}}))
            assert main(["validate", path, "--config", config]) == 1

    def test_directory_batch(self, capsys):
        """Test validating a directory as one batch."""
        with tempfile.TemporaryDirectory() as tmpdir:
            _write(tmpdir, "a.yaml", VALID)
            _write(tmpdir, "b.yml", INVALID)
            assert main(["validate", tmpdir, "--workers", "2"]) == 1

        assert "2 document(s)" in capsys.readouterr().out

    def test_missing_file_exits_two(self, capsys):
        """Test that unreadable input aborts with exit code 2."""
        assert main(["validate", "/nonexistent/app.yaml"]) == 2
        assert "Cannot read /nonexistent/app.yaml" in capsys.readouterr().err


class TestKindsCommand:
    """Tests for 'kubelint kinds'."""

    def test_lists_catalog(self, capsys):
        """Test that built-in kinds are listed with deprecations marked."""
        assert main(["kinds"]) == 0

        out = capsys.readouterr().out
        assert "apps/v1" in out
        assert "Deployment" in out
        psp = [line for line in out.splitlines() if "PodSecurityPolicy" in line]
        assert len(psp) == 1
        assert "(deprecated)" in psp[0]


class TestNoCommand:
    """Tests for running without a subcommand."""

    def test_prints_help(self, capsys):
        """Test that no command prints help and exits 1."""
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out
