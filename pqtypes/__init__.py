"""PostgreSQL value codecs: type OIDs, column descriptions, server errors,
timestamps, bytea, COPY text, hstore and a SCRAM client."""

__version__ = "0.1.0"

__all__ = ["oid", "fields", "pgerror", "timestamps", "encode", "hstore", "scram"]