from scripts.migrate import main


def test_migrate_script_applies_and_shows(database_url, capsys):
    assert main(["--database-url", database_url, "--seed"]) == 0
    assert "0001_create_equipment" in capsys.readouterr().out

    assert main(["--database-url", database_url, "--show"]) == 0
    out = capsys.readouterr().out
    assert "current: 0001_create_equipment" in out
    assert "head:    0001_create_equipment" in out


def test_migrate_script_reports_failure(database_url, capsys):
    assert main(["--database-url", database_url, "--target", "bogus"]) == 1
    assert "Migration failed" in capsys.readouterr().err
