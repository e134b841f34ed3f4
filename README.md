# pqtypes

Pure-Python helpers for PostgreSQL's data formats: type OIDs, column
descriptions, server error fields, the text forms of timestamps, bytea and
hstore, COPY text escaping, and the client side of SCRAM authentication.

## Modules

- `pqtypes.oid` — `Oid`, an `IntEnum` of the built-in type OIDs (array types
  are named with an `_ARRAY` suffix, e.g. `Oid.INT4_ARRAY`), and
  `type_name(oid)`, which returns the server's upper-case name (`"INT4"`,
  `"_INT4"`, …) or `""` for an unknown OID.
- `pqtypes.fields` — `FieldDescription(oid, size=0, modifier=0)`, a frozen
  dataclass for one result column, with `scan_type()` (the Python type values
  decode to, `object` when there is no specific one), `type_name()`,
  `length()` (for `text`/`bytea`/`varchar`/`bpchar`, else `None`) and
  `precision_scale()` (a `(precision, scale)` pair for `numeric`, else `None`).
- `pqtypes.pgerror` — `PGError`, an exception holding every field of an
  ErrorResponse or NoticeResponse; `parse_error(data)` builds one from the
  message body and raises `ValueError` on a truncated body. `PGError.fatal()`,
  `PGError.sqlstate()`, `PGError.get(field)` (by one-letter field code) and
  `PGError.as_dict()`. `ErrorCode.condition_name()`, `ErrorCode.error_class()`
  and `ErrorClass.condition_name()` map SQLSTATE codes to condition names.
  Severity names are available as `SEVERITY_FATAL`, `SEVERITY_NOTICE` and so on.
- `pqtypes.timestamps` — `Timestamp`, a frozen dataclass of date, time,
  nanoseconds and a UTC offset in seconds that also holds years a `datetime`
  cannot (year 0 and earlier for BC dates, years above 9999), with
  `Timestamp.from_datetime()` and `to_datetime()`. `parse_timestamp(text,
  location)` and `format_timestamp(value)` handle the server's
  `"ISO, MDY"` text form including the `" BC"` suffix; `parse_time(text,
  with_tz)` decodes `time`/`timetz` values (24:00 rolls over to the next day).
  `enable_infinity_ts(negative, positive)` maps `-infinity`/`infinity` to and
  from two chosen times in `parse_ts` and `format_ts`; `disable_infinity_ts()`
  turns that off.
- `pqtypes.encode` — `encode(status, value, type_oid)` and
  `binary_encode(status, value)` for parameters, `decode(status, data,
  type_oid, fmt)` for column values (`Format.TEXT` or `Format.BINARY`),
  `encode_copy_text(status, value)` and `escape_copy_text(text)` for COPY text
  rows, and `encode_bytea(server_version, data)` / `parse_bytea(data)` for
  bytea in hex (server 9.0 and later) or escape form. `ParameterStatus` carries
  the server version and session time zone these depend on.
- `pqtypes.hstore` — `parse_hstore(data)` and `format_hstore(mapping)` for the
  hstore text form; `None` stands for SQL NULL, both for the whole value and
  for individual values.
- `pqtypes.scram` — `ScramClient(user, password, hash_name="sha256",
  nonce=None)`; call `step()` with each server message and send back what it
  returns until `done()` is true. Failures raise `ScramError`, also kept in
  `ScramClient.error`.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from pqtypes.timestamps import parse_timestamp, format_timestamp

ts = parse_timestamp("2001-02-03 04:05:06.123-07", None)
print(format_timestamp(ts))   # b'2001-02-03 04:05:06.123-07:00'
```

```python
from pqtypes.encode import encode_bytea, parse_bytea

wire = encode_bytea(90000, b"\x00\x01abc")   # b"\\x0001616263"
assert parse_bytea(wire) == b"\x00\x01abc"
```

```python
from pqtypes.hstore import parse_hstore, format_hstore

mapping = parse_hstore(b'"a"=>"1", "b"=>NULL')
assert mapping == {"a": "1", "b": None}
print(format_hstore(mapping))   # b'"a"=>"1","b"=>NULL'
```

```python
from pqtypes.scram import ScramClient

password = "password"
client = ScramClient("user", password)
first = client.step(b"")          # client-first message to send
# feed each server message back into client.step(...) until client.done()
```

## What it does not do

This package is not a database driver. It opens no network connections,
does not speak the message framing of the wire protocol, and has no
connection-string or environment handling, no statements or transactions,
no COPY streaming, and no LISTEN/NOTIFY support. It only converts values and
messages that some other code sends and receives.