import pytest

from sqlmigrator.checksum import compute_checksum
from sqlmigrator.errors import DuplicateMigrationNameError
from sqlmigrator.ledger import MigrationLedger


def test_ledger_keeps_add_order_and_checksums():
    ledger = MigrationLedger()
    ledger.add("zeta", "last alphabetically", "CREATE TABLE z (id INT)")
    ledger.add("alpha", "first alphabetically", "INSERT INTO z VALUES (?)", 7)

    assert ledger.names() == ["zeta", "alpha"]
    assert len(ledger) == 2
    assert "alpha" in ledger
    migration = ledger.get("alpha")
    assert migration is not None
    assert migration.args == (7,)
    assert migration.checksum == compute_checksum("INSERT INTO z VALUES (?)", [7])


def test_duplicate_name_is_rejected_and_first_kept():
    ledger = MigrationLedger()
    ledger.add("users", "create users", "CREATE TABLE users (id INT)")

    with pytest.raises(DuplicateMigrationNameError) as excinfo:
        ledger.add("users", "again", "CREATE TABLE users (id BIGINT)")

    assert excinfo.value.name == "users"
    assert len(ledger) == 1
    assert ledger.get("users").statement == "CREATE TABLE users (id INT)"


def test_names_are_case_sensitive():
    ledger = MigrationLedger()
    ledger.add("Users", "", "SELECT 1")
    ledger.add("users", "", "SELECT 1")
    assert ledger.names() == ["Users", "users"]
