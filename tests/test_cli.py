"""
tests/test_cli.py -- Admin command line (main.py).

The command functions are tested against in-memory stores. main() itself
is exercised with get_engine patched to an in-memory engine so nothing
touches the real DATABASE_URL.
"""

from __future__ import annotations

import uuid

import pytest

import main as cli
from auth.store import UserStore
from auth.tokens import verify_password
from core.database import build_engine
from vendors.store import VendorStore


@pytest.fixture
def cli_engine(monkeypatch):
    engine = build_engine(f"sqlite:///file:cli_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")
    monkeypatch.setattr(cli, "get_engine", lambda: engine)
    yield engine
    engine.dispose()


class TestSeed:
    def test_seed_creates_demo_user_and_applications(self, stores):
        user_store, vendor_store = stores
        user_id = cli.seed(user_store, vendor_store)

        user = user_store.get_by_id(user_id)
        assert user.email == cli.DEMO_EMAIL
        assert verify_password(cli.DEMO_PASSWORD, user.hashed_password)
        assert vendor_store.get_status_counts(user_id) == {"Pending": 1, "Approved": 1, "Rejected": 1}

    def test_seed_is_idempotent(self, stores):
        user_store, vendor_store = stores
        assert cli.seed(user_store, vendor_store) is not None
        assert cli.seed(user_store, vendor_store) is None
        assert user_store.count_users() == 1
        assert len(vendor_store.list_applications()) == 3


class TestCreateUser:
    def test_create_user_normalizes_email(self, stores):
        user_store, _ = stores
        uid = cli.create_user(user_store, " Bob ", " Bob@Example.com ", "hunter22")
        user = user_store.get_by_id(uid)
        assert (user.name, user.email) == ("Bob", "bob@example.com")

    def test_create_user_short_password(self, stores):
        user_store, _ = stores
        with pytest.raises(ValueError, match="at least 6"):
            cli.create_user(user_store, "Bob", "bob@example.com", "123")

    def test_create_user_duplicate_email(self, stores):
        user_store, _ = stores
        cli.create_user(user_store, "Bob", "bob@example.com", "hunter22")
        with pytest.raises(ValueError, match="already exists"):
            cli.create_user(user_store, "Bobby", "BOB@example.com", "hunter22")


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert cli.main([]) == 1
        assert "seed" in capsys.readouterr().out

    def test_seed_command(self, cli_engine, capsys):
        assert cli.main(["seed"]) == 0
        assert cli.DEMO_EMAIL in capsys.readouterr().out
        assert UserStore(cli_engine).get_by_email(cli.DEMO_EMAIL) is not None

    def test_create_user_command_prompts_for_password(self, cli_engine, monkeypatch):
        monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": "hunter22")
        assert cli.main(["create-user", "--name", "Bob", "--email", "bob@example.com"]) == 0
        assert UserStore(cli_engine).get_by_email("bob@example.com") is not None

    def test_set_status_command(self, cli_engine):
        cli.main(["seed"])
        vendor_store = VendorStore(cli_engine)
        pending = next(a for a in vendor_store.list_applications() if a.status == "Pending")
        assert cli.main(["set-status", str(pending.id), "Approved"]) == 0
        assert vendor_store.get_application(pending.id).status == "Approved"

    def test_set_status_unknown_id(self, cli_engine, capsys):
        UserStore(cli_engine)
        VendorStore(cli_engine)
        assert cli.main(["set-status", "999", "Rejected"]) == 1
        assert "No application with ID 999" in capsys.readouterr().out
