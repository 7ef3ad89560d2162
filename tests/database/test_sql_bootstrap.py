from src.ratio_engine.ratio_engine.database.bootstrap import _strip_create_db_and_use, iter_sql_statements


def test_splits_on_semicolons_outside_quotes():
    sql = "INSERT INTO staff (full_name) VALUES ('A; B');\nSELECT 1;"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO staff (full_name) VALUES ('A; B')",
        "SELECT 1",
    ]


def test_skips_line_comments():
    sql = "-- rooms;\nCREATE TABLE t (id INT); -- trailing; comment\nSELECT 2"

    assert list(iter_sql_statements(sql)) == ["CREATE TABLE t (id INT)", "SELECT 2"]


def test_escaped_quote_does_not_end_string():
    sql = "INSERT INTO children (first_name) VALUES ('O\\'Neil;');"

    assert list(iter_sql_statements(sql)) == ["INSERT INTO children (first_name) VALUES ('O\\'Neil;')"]


def test_blank_statements_are_dropped():
    assert list(iter_sql_statements(";;\n  ;")) == []


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS ratio_engine;\nUSE ratio_engine;\nCREATE TABLE x (id INT);"

    assert list(iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE x (id INT)"]
