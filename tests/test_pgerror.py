import pytest

from pqtypes.pgerror import (
    SEVERITY_FATAL,
    ErrorClass,
    ErrorCode,
    PGError,
    parse_error,
)


def _wire(*pairs):
    body = b"".join(kind + value.encode() + b"\x00" for kind, value in pairs)
    return body + b"\x00"


def test_error_code_condition_name():
    assert ErrorCode("23505").condition_name() == "unique_violation"


def test_unknown_error_code_has_empty_name():
    assert ErrorCode("ZZ999").condition_name() == ""


def test_error_code_class():
    assert ErrorCode("28P01").error_class() == "28"
    assert isinstance(ErrorCode("28P01").error_class(), ErrorClass)


def test_error_class_condition_name():
    assert ErrorClass("28").condition_name() == "invalid_authorization_specification"
    assert ErrorClass("XX").condition_name() == "internal_error"


def test_class_name_matches_standard_code_name():
    code = ErrorCode("42P01")
    assert code.error_class().condition_name() == ErrorCode("42000").condition_name()


@pytest.mark.parametrize(
    "code, name",
    [
        ("00000", "successful_completion"),
        ("0100C", "dynamic_result_sets_returned"),
        ("2F002", "modifying_sql_data_not_permitted"),
        ("38002", "modifying_sql_data_not_permitted"),
        ("HV00N", "fdw_unable_to_establish_connection"),
        ("XX002", "index_corrupted"),
    ],
)
def test_condition_names_across_classes(code, name):
    assert ErrorCode(code).condition_name() == name


def test_parse_error_fields():
    data = _wire(
        (b"S", "ERROR"),
        (b"C", "42P01"),
        (b"M", "relation does not exist"),
        (b"t", "users"),
        (b"R", "parserOpenTable"),
    )
    err = parse_error(data)
    assert err.severity == "ERROR"
    assert err.code == "42P01"
    assert err.code.condition_name() == "undefined_table"
    assert err.message == "relation does not exist"
    assert err.table == "users"
    assert err.routine == "parserOpenTable"
    assert err.detail == ""


def test_parse_error_skips_unknown_fields():
    err = parse_error(_wire((b"V", "ERROR"), (b"M", "boom")))
    assert err.message == "boom"
    assert err.severity == ""


def test_parse_error_empty_body():
    err = parse_error(b"\x00")
    assert err.message == ""
    assert err.sqlstate() == ""


@pytest.mark.parametrize("data", [b"", b"Mboom", b"Mboom\x00"])
def test_parse_error_truncated(data):
    with pytest.raises(ValueError):
        parse_error(data)


def test_str_prefixes_message():
    err = PGError(message="division by zero")
    assert str(err) == "pq: division by zero"


def test_fatal():
    assert PGError(severity=SEVERITY_FATAL).fatal() is True
    assert PGError(severity="ERROR").fatal() is False


def test_sqlstate_and_code_coercion():
    err = PGError(code="57014")
    assert isinstance(err.code, ErrorCode)
    assert err.sqlstate() == "57014"
    assert err.code.condition_name() == "query_canceled"


def test_get_by_letter_round_trips_parse():
    pairs = [
        (b"S", "ERROR"),
        (b"C", "23505"),
        (b"M", "msg"),
        (b"D", "detail text"),
        (b"H", "hint text"),
        (b"P", "7"),
        (b"p", "3"),
        (b"q", "SELECT 1"),
        (b"W", "where text"),
        (b"s", "public"),
        (b"t", "tbl"),
        (b"c", "col"),
        (b"d", "int4"),
        (b"n", "tbl_pkey"),
        (b"F", "nbtinsert.c"),
        (b"L", "42"),
        (b"R", "_bt_check_unique"),
    ]
    err = parse_error(_wire(*pairs))
    for kind, value in pairs:
        assert err.get(kind.decode()) == value
        assert err.get(kind[0]) == value


def test_get_unknown_field():
    assert PGError(message="x").get("Z") == ""


def test_parsed_error_can_be_raised_and_caught():
    err = parse_error(_wire((b"S", "FATAL"), (b"M", "terminating")))
    assert err.fatal() is True
    assert err.message == "terminating"
    with pytest.raises(PGError) as info:
        raise err
    assert info.value is err
    assert str(info.value) == "pq: terminating"


def test_as_dict_contains_parsed_values():
    err = parse_error(_wire((b"M", "hello"), (b"n", "chk")))
    mapping = err.as_dict()
    assert mapping["message"] == "hello"
    assert mapping["constraint"] == "chk"
    assert mapping["hint"] == ""