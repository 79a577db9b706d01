# WORKFLOW: Tests for the stackdump-import command line.
# Test scenarios:
# 1. A good archive loads and exits 0
# 2. Broken input exits 1 without a traceback
# 3. Options override settings; bad option values are usage errors
# 4. Package metadata points the console script at main()

import tomllib
from pathlib import Path

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session

import scripts.import_dump
from db.models import Post, User
from dump_factory import post_row, user_row
from scripts.import_dump import main, parse_args


@pytest.fixture(autouse=True)
def logging_calls(monkeypatch):
    # Keep global logging untouched; configure_logging binds to the current stderr.
    calls = []
    monkeypatch.setattr(scripts.import_dump, "configure_logging", lambda *args: calls.append(args))
    return calls


def test_import_succeeds(tmp_path, make_archive, capsys, logging_calls):
    archive = make_archive({"Users.xml": [user_row(1)], "Posts.xml": [post_row(1, OwnerUserId=2)]})
    url = f"sqlite:///{tmp_path / 'cli.db'}"

    assert main([archive, "-d", url, "--replace", "--batch-size", "10"]) == 0
    assert "Finished after" in capsys.readouterr().out
    assert len(logging_calls) == 1

    engine = create_engine(url)
    with Session(engine) as session:
        assert session.scalar(select(func.count()).select_from(User)) == 2
        assert session.scalar(select(func.count()).select_from(Post)) == 1
    engine.dispose()


def test_malformed_table_fails(tmp_path, make_archive):
    archive = make_archive({"Users.xml": [user_row(1, Reputation="high")]})

    assert main([archive, "-d", f"sqlite:///{tmp_path / 'cli.db'}", "--replace"]) == 1


def test_missing_archive_fails(tmp_path):
    assert main([str(tmp_path / "absent.7z"), "-d", f"sqlite:///{tmp_path / 'cli.db'}"]) == 1


def test_parse_args():
    args = parse_args(["a.7z", "b.7z", "--batch-size", "5", "--no-replace", "--log-format", "json"])
    assert args.archives == ["a.7z", "b.7z"]
    assert args.batch_size == 5
    assert args.replace is False
    assert args.log_format == "json"


def test_log_level_is_case_insensitive():
    assert parse_args(["a.7z", "--log-level", "debug"]).log_level == "DEBUG"


def test_unknown_log_level_is_rejected(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["a.7z", "--log-level", "LOUD"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err


def test_project_metadata():
    with open(Path(__file__).parent.parent / "pyproject.toml", "rb") as f:
        project = tomllib.load(f)["project"]

    assert project["scripts"]["stackdump-import"] == "scripts.import_dump:main"
    assert "readme" not in project
