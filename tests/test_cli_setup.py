"""Tests for user, professional, service and schedule commands."""

from salonbook.cli.main import cli


def _invoke(cli_runner, db, *args):
    return cli_runner.invoke(cli, ["--db-path", db.database_path, *args])


def test_help_does_not_need_a_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    for group in ("user", "professional", "service", "schedule", "appointment", "ledger", "report", "seed"):
        assert group in result.output


def test_user_create_and_list(cli_runner, file_db):
    result = _invoke(
        cli_runner, file_db, "user", "create", "ana", "--name", "Ana Souza", "--email", "ana@x.com", "--password", "pw"
    )

    assert result.exit_code == 0
    assert "Created client 'ana' (ID: 1)" in result.output

    result = _invoke(cli_runner, file_db, "user", "list", "--role", "client")
    assert result.exit_code == 0
    assert "Ana Souza" in result.output


def test_user_create_duplicate_username(cli_runner, file_db):
    args = ("user", "create", "ana", "--name", "Ana", "--email", "ana@x.com", "--password", "pw")
    assert _invoke(cli_runner, file_db, *args).exit_code == 0

    result = _invoke(cli_runner, file_db, "user", "create", "ana", "--name", "Ana", "--email", "b@x.com", "--password", "pw")

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_user_list_empty(cli_runner, file_db):
    result = _invoke(cli_runner, file_db, "user", "list")

    assert result.exit_code == 0
    assert "No users found" in result.output


def test_service_create_with_local_price_format(cli_runner, file_db):
    result = _invoke(cli_runner, file_db, "service", "create", "Haircut", "--duration", "30", "--price", "R$ 35,00")

    assert result.exit_code == 0
    assert "Created service 'Haircut' (ID: 1)" in result.output

    result = _invoke(cli_runner, file_db, "service", "list")
    assert "35.00" in result.output


def test_service_create_rejects_bad_duration(cli_runner, file_db):
    result = _invoke(cli_runner, file_db, "service", "create", "Haircut", "--duration", "0", "--price", "35")

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_service_create_rejects_bad_price(cli_runner, file_db):
    result = _invoke(cli_runner, file_db, "service", "create", "Haircut", "--duration", "30", "--price", "cheap")

    assert result.exit_code == 1
    assert "Invalid price" in result.output


def test_service_update_and_deactivate(cli_runner, file_db):
    _invoke(cli_runner, file_db, "service", "create", "Haircut", "--duration", "30", "--price", "35")

    result = _invoke(cli_runner, file_db, "service", "update", "1", "--price", "40", "--inactive")

    assert result.exit_code == 0
    result = _invoke(cli_runner, file_db, "service", "list")
    assert "40.00 (inactive)" in result.output


def _professional(cli_runner, db, name="John Smith", cpf="123.456.789-00"):
    return _invoke(
        cli_runner,
        db,
        "professional",
        "create",
        name,
        "--phone",
        "11 9999-8888",
        "--email",
        "john@salao.com",
        "--cpf",
        cpf,
        "--address",
        "123 Main St",
    )


def test_professional_create_assign_and_services(cli_runner, file_db):
    assert "Created professional 'John Smith' (ID: 1)" in _professional(cli_runner, file_db).output
    _invoke(cli_runner, file_db, "service", "create", "Haircut", "--duration", "30", "--price", "35")

    result = _invoke(cli_runner, file_db, "professional", "assign", "1", "1")
    assert result.exit_code == 0

    result = _invoke(cli_runner, file_db, "professional", "services", "1")
    assert result.exit_code == 0
    assert "Haircut" in result.output


def test_professional_duplicate_cpf(cli_runner, file_db):
    _professional(cli_runner, file_db)

    result = _professional(cli_runner, file_db, name="Other")

    assert result.exit_code == 1
    assert "cpf" in result.output


def test_professional_delete_needs_cascade(cli_runner, file_db):
    _professional(cli_runner, file_db)
    _invoke(cli_runner, file_db, "schedule", "add", "1", "monday", "09:00", "18:00")

    result = _invoke(cli_runner, file_db, "professional", "delete", "1", "--yes")
    assert result.exit_code == 1
    assert "work schedule" in result.output

    result = _invoke(cli_runner, file_db, "professional", "delete", "1", "--yes", "--cascade")
    assert result.exit_code == 0
    assert "Deleted professional 'John Smith'" in result.output


def test_professional_delete_can_be_cancelled(cli_runner, file_db):
    _professional(cli_runner, file_db)

    result = cli_runner.invoke(cli, ["--db-path", file_db.database_path, "professional", "delete", "1"], input="n\n")

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output


def test_professional_deactivate(cli_runner, file_db):
    _professional(cli_runner, file_db)

    _invoke(cli_runner, file_db, "professional", "update", "1", "--inactive")
    result = _invoke(cli_runner, file_db, "professional", "list", "--active-only")

    assert "No professionals found" in result.output


def test_schedule_add_accepts_names_abbreviations_and_numbers(cli_runner, file_db):
    _professional(cli_runner, file_db)

    result = _invoke(cli_runner, file_db, "schedule", "add", "1", "monday", "9:00", "18:00")
    assert result.exit_code == 0
    assert "Added schedule 1: Monday 09:00-18:00" in result.output

    assert "Tuesday" in _invoke(cli_runner, file_db, "schedule", "add", "1", "tue", "09:00", "18:00").output
    assert "Saturday" in _invoke(cli_runner, file_db, "schedule", "add", "1", "6", "10:00", "14:00").output

    result = _invoke(cli_runner, file_db, "schedule", "list", "--professional", "1")
    assert result.output.count("Professional   1") == 3


def test_schedule_add_rejects_duplicate_day(cli_runner, file_db):
    _professional(cli_runner, file_db)
    _invoke(cli_runner, file_db, "schedule", "add", "1", "monday", "09:00", "12:00")

    result = _invoke(cli_runner, file_db, "schedule", "add", "1", "mon", "13:00", "18:00")

    assert result.exit_code == 1
    assert "already has a schedule" in result.output


def test_schedule_add_rejects_bad_day(cli_runner, file_db):
    _professional(cli_runner, file_db)

    result = _invoke(cli_runner, file_db, "schedule", "add", "1", "someday", "09:00", "12:00")

    assert result.exit_code == 1
    assert "Invalid day" in result.output


def test_seed_is_idempotent(cli_runner, file_db):
    result = _invoke(cli_runner, file_db, "seed")
    assert result.exit_code == 0
    assert "Seeded 3 services and 2 professionals" in result.output

    result = _invoke(cli_runner, file_db, "seed")
    assert result.exit_code == 0
    assert "already present" in result.output

    result = _invoke(cli_runner, file_db, "schedule", "list")
    assert result.output.count("\n") == 10
