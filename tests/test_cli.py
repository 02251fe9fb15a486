"""Tests for the operator command line in main.py."""

from __future__ import annotations

import pytest

from auth.store import UserStore
from auth.tokens import authenticate_user
from core.database import Database
from main import build_parser, main


def test_create_user_then_duplicate(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    argv = ["create-user", "owner", "owner@example.com", "--password", "pw", "--database-url", url]

    assert main(argv) == 0
    assert "Created user owner" in capsys.readouterr().out

    assert main(argv) == 1
    assert "already exists" in capsys.readouterr().err

    db = Database(url)
    try:
        assert UserStore(db).get_by_username("owner").email == "owner@example.com"
    finally:
        db.close()


def test_serve_defaults():
    args = build_parser().parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 5000
    assert args.reload is False


def test_command_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_create_user_rejects_password_over_72_bytes(tmp_path, capsys):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    argv = ["create-user", "wide", "wide@example.com", "--password", "é" * 64, "--database-url", url]
    assert main(argv) == 1
    assert "72 bytes" in capsys.readouterr().err


def test_create_user_trims_identity_but_not_password(tmp_path):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    argv = ["create-user", " owner ", " owner@example.com ", "--password", " pw ", "--database-url", url]
    assert main(argv) == 0

    db = Database(url)
    try:
        store = UserStore(db)
        assert store.get_by_username("owner").email == "owner@example.com"
        assert authenticate_user(store, "owner", " pw ") is not None
        assert authenticate_user(store, "owner", "pw") is None
    finally:
        db.close()
