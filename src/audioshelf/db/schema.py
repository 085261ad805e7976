# ABOUTME: SQL DDL statements for the audioshelf state database.
# ABOUTME: Defines the key-value table holding library snapshots and the schema version table.

SCHEMA_VERSION = 1

SCHEMA_V1 = """
-- One JSON document per key; the library snapshot lives under 'state'
CREATE TABLE kv_store (
    key           TEXT PRIMARY KEY,
    value         TEXT NOT NULL,
    date_added    TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now')),
    date_modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

-- Schema versioning for future migrations
CREATE TABLE schema_version (
    version    INTEGER NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%S', 'now'))
);

INSERT INTO schema_version (version) VALUES (1);
"""
