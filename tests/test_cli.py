"""Tests for the docmigrate CLI."""

import json
from contextlib import asynccontextmanager

import pytest
from click.testing import CliRunner

from docmigrate import __version__
from docmigrate import cli as cli_module
from docmigrate.testing.mocks import InMemoryS3

STEP_FILES = {
    "0001_add_status.py": '''
from docmigrate.migrations import AddField, MigrationStep

step = MigrationStep.from_operations(1, [AddField("status", default="active")], "Add status")
''',
    "0002_stamp.py": '''
from docmigrate.migrations import MigrationStep

step = MigrationStep(id=2)
''',
}


@pytest.fixture
def migrations_dir(tmp_path):
    directory = tmp_path / "migrations"
    directory.mkdir()
    for name, content in STEP_FILES.items():
        (directory / name).write_text(content)
    return directory


@pytest.fixture
def fake_s3(monkeypatch):
    """Route the CLI's S3 client manager to an in-memory bucket."""
    s3 = InMemoryS3()
    s3.put_json("cli-bucket", "docs/a.json", {"id": "a"})
    s3.put_json("cli-bucket", "docs/b.json", {"id": "b", "migration_version": 2})

    class FakeManager:
        def __init__(self, settings):
            self.settings = settings

        @asynccontextmanager
        async def get_async_client(self):
            yield s3

        async def ensure_bucket_exists(self, client):
            await client.head_bucket(Bucket=self.settings.aws_bucket_name)

    monkeypatch.setattr(cli_module, "S3ClientManager", FakeManager)
    return s3


@pytest.fixture
def runner(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("AWS_BUCKET_NAME", "S3_BASE_PATH", "AWS_URL", "MIGRATIONS_DIR"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


class TestCli:
    """Tests for the click commands."""

    def test_version(self, runner):
        result = runner.invoke(cli_module.cli, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_steps(self, runner, migrations_dir):
        """Steps are listed in version order with their kind."""
        result = runner.invoke(cli_module.cli, ["steps", "--dir", str(migrations_dir)])

        assert result.exit_code == 0
        assert "Found 2 step(s)" in result.output
        assert "v1 (transform): Add status" in result.output
        assert "v2 (stamp only)" in result.output

    def test_steps_empty_directory(self, runner, tmp_path):
        result = runner.invoke(cli_module.cli, ["steps", "--dir", str(tmp_path)])

        assert result.exit_code == 0
        assert "No migration steps found" in result.output

    def test_run(self, runner, migrations_dir, fake_s3):
        """run migrates the bucket and prints the report."""
        result = runner.invoke(
            cli_module.cli,
            [
                "run",
                "--bucket", "cli-bucket",
                "--prefix", "docs/",
                "--dir", str(migrations_dir),
                "--json",
            ],
        )

        assert result.exit_code == 0, result.output
        report = json.loads(result.output.strip().splitlines()[-1])
        assert report == {"target": 2, "total": 1, "done": 1, "written": 1, "failed": 0}
        assert fake_s3.get_bucket_data("cli-bucket")["docs/a.json"] == {
            "id": "a",
            "status": "active",
            "migration_version": 2,
        }

    def test_status(self, runner, migrations_dir, fake_s3):
        """status reports the latest step and pending documents."""
        result = runner.invoke(
            cli_module.cli,
            ["status", "--bucket", "cli-bucket", "--prefix", "docs/", "--dir", str(migrations_dir)],
        )

        assert result.exit_code == 0, result.output
        assert "Latest step: v2" in result.output
        assert "Pending documents: 1" in result.output

    def test_run_without_bucket(self, runner, migrations_dir, fake_s3):
        """A missing bucket setting is reported as a configuration error."""
        result = runner.invoke(cli_module.cli, ["run", "--dir", str(migrations_dir)])

        assert result.exit_code == 1
        assert "AWS_BUCKET_NAME" in result.output

    def test_run_without_steps(self, runner, tmp_path, fake_s3):
        """No steps means no run."""
        result = runner.invoke(
            cli_module.cli,
            ["run", "--bucket", "cli-bucket", "--dir", str(tmp_path)],
        )

        assert result.exit_code == 1
        assert "No migrations found" in result.output
