"""
Demo Backend
Same table operations as the remote backend, performed against the local
store. One key per table ("demo_<table>") holding the JSON array of rows.

Differences from the remote service, kept on purpose:
  - update() on an unknown id raises NotFoundError (remote returns nothing)
  - delete() on an unknown id is a silent no-op
  - file storage is simulated: uploads return "demo/<path>", downloads fail
"""

import json
import logging
import random
import string
from typing import Any, Dict, List

from prospectcrm.backends.base import Backend, TABLE_LABELS
from prospectcrm.errors import BackendError, NotFoundError
from prospectcrm.models import record_value
from prospectcrm.seed import SEEDED_TABLES, initial_records
from prospectcrm.store import LocalStore

logger = logging.getLogger(__name__)

KEY_PREFIX = 'demo_'
_ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_id() -> str:
    """Random 9-char base-36 id. Not guaranteed unique."""
    return ''.join(random.choices(_ID_ALPHABET, k=9))


def store_key(table: str) -> str:
    return f"{KEY_PREFIX}{table}"


class DemoBackend(Backend):
    """Local store implementation used when no remote service is configured."""

    name = 'demo'
    inline_files = True

    def __init__(self, store: LocalStore):
        self.store = store

    # ------------------------------------------------------------------
    # Raw table access
    # ------------------------------------------------------------------

    def read_table(self, table: str) -> List[Dict[str, Any]]:
        """Stored rows; seeds and persists sample rows the first time."""
        raw = self.store.get_item(store_key(table))
        if raw is None:
            rows = initial_records(table)
            if rows:
                self.write_table(table, rows)
                logger.info(f"Seeded {store_key(table)} with {len(rows)} demo rows")
            return rows
        return json.loads(raw)

    def write_table(self, table: str, rows: List[Dict[str, Any]]):
        self.store.set_item(store_key(table), json.dumps(rows, ensure_ascii=False))

    def load_seed(self, tables=SEEDED_TABLES):
        """Overwrite the given tables with the sample rows."""
        for table in tables:
            self.write_table(table, initial_records(table))
        logger.info(f"Loaded demo data for {len(tables)} tables")

    def clear(self):
        """Drop every demo table; the next read reseeds."""
        for key in [k for k in self.store.keys() if k.startswith(KEY_PREFIX)]:
            self.store.remove_item(key)
        logger.info("Cleared demo store")

    # ------------------------------------------------------------------
    # Table operations
    # ------------------------------------------------------------------

    def select(self, table, filters=None, order_by='created_at', ascending=False):
        # Rows are kept newest-first (inserts prepend); order_by is not applied
        rows = self.read_table(table)
        if filters:
            rows = [
                row for row in rows
                if all(record_value(row, col) == value for col, value in filters.items())
            ]
        logger.debug(f"select {table}: {len(rows)} rows (filters={filters})")
        return rows

    def insert(self, table, fields):
        record = {'id': generate_id(), **{k: v for k, v in fields.items() if k != 'id'}}
        rows = self.read_table(table)
        rows.insert(0, record)
        self.write_table(table, rows)
        logger.info(f"Inserted {table} row {record['id']}")
        return record

    def update(self, table, record_id, fields):
        rows = self.read_table(table)
        for index, row in enumerate(rows):
            if row.get('id') == record_id:
                rows[index] = {**row, **fields}
                self.write_table(table, rows)
                logger.info(f"Updated {table} row {record_id}: {sorted(fields)}")
                return rows[index]
        raise NotFoundError(f"{TABLE_LABELS.get(table, table)} not found")

    def delete(self, table, record_id):
        rows = self.read_table(table)
        remaining = [row for row in rows if row.get('id') != record_id]
        self.write_table(table, remaining)
        if len(remaining) == len(rows):
            logger.debug(f"delete {table} id={record_id}: nothing to delete")
        else:
            logger.info(f"Deleted {table} row {record_id}")

    # ------------------------------------------------------------------
    # Simulated storage
    # ------------------------------------------------------------------

    def upload_file(self, bucket, path, content, content_type=None):
        logger.info(f"Demo mode - upload of {bucket}/{path} simulated")
        return f"demo/{path}"

    def download_file(self, bucket, path):
        raise BackendError("File download not available in demo mode")

    def remove_file(self, bucket, path):
        logger.info(f"Demo mode - removal of {bucket}/{path} simulated")
