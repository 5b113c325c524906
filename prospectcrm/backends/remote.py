"""
Remote Backend
Talks to the hosted database service over its REST interface
(PostgREST-style tables under /rest/v1, object storage under /storage/v1).

Every operation is exactly one HTTP request. Errors reported by the service
are raised as BackendError with the service's own message; nothing is retried.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from prospectcrm.backends.base import Backend
from prospectcrm.config import BackendSettings, config
from prospectcrm.errors import BackendError

logger = logging.getLogger(__name__)


def _filter_value(value: Any) -> str:
    """Render a Python value as a PostgREST eq. operand."""
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    return str(value)


def _error_message(resp: requests.Response) -> str:
    """Pull the most useful message out of an error response."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ('message', 'error_description', 'msg', 'error', 'hint', 'details'):
            if body.get(key):
                return str(body[key])
    text = (resp.text or '').strip()
    return text or f"HTTP {resp.status_code}"


class RemoteBackend(Backend):
    """REST client for the hosted database and storage service."""

    name = 'remote'
    inline_files = False

    def __init__(self, settings: BackendSettings, session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        self.settings = settings
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT
        self.session = session if session is not None else requests.Session()
        self.session.headers.update({
            'apikey': settings.service_key,
            'Authorization': f"Bearer {settings.service_key}",
            'Content-Type': 'application/json',
        })

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------

    def _table_url(self, table: str) -> str:
        return f"{self.settings.service_url}/rest/v1/{table}"

    def _storage_url(self, bucket: str, path: str = '') -> str:
        url = f"{self.settings.service_url}/storage/v1/object/{bucket}"
        return f"{url}/{path.lstrip('/')}" if path else url

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        logger.debug(f"{method} {url} params={kwargs.get('params')}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise BackendError(f"Service unreachable: {e}") from e

        if not resp.ok:
            message = _error_message(resp)
            logger.error(f"{method} {url} -> {resp.status_code}: {message}")
            raise BackendError(message, status_code=resp.status_code)
        return resp

    @staticmethod
    def _rows(resp: requests.Response) -> List[Dict[str, Any]]:
        if not resp.content:
            return []
        try:
            data = resp.json()
        except ValueError as e:
            text = (resp.text or '').strip()[:200]
            logger.error(f"{resp.url} -> {resp.status_code}: body is not JSON: {text!r}")
            raise BackendError(f"Invalid JSON from service: {text}", status_code=resp.status_code) from e
        if data is None:
            return []
        return data if isinstance(data, list) else [data]

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def select(self, table, filters=None, order_by='created_at', ascending=False):
        params = {'select': '*'}
        if order_by:
            params['order'] = f"{order_by}.{'asc' if ascending else 'desc'}"
        for column, value in (filters or {}).items():
            params[column] = f"eq.{_filter_value(value)}"

        rows = self._rows(self._request('GET', self._table_url(table), params=params))
        logger.debug(f"select {table}: {len(rows)} rows (filters={filters})")
        return rows

    def insert(self, table, fields):
        resp = self._request(
            'POST', self._table_url(table),
            json=fields,
            headers={'Prefer': 'return=representation'},
        )
        rows = self._rows(resp)
        if not rows:
            raise BackendError(f"Insert into {table} returned no row")
        logger.info(f"Inserted {table} row {rows[0].get('id')}")
        return rows[0]

    def update(self, table, record_id, fields):
        resp = self._request(
            'PATCH', self._table_url(table),
            params={'id': f"eq.{record_id}"},
            json=fields,
            headers={'Prefer': 'return=representation'},
        )
        rows = self._rows(resp)
        if not rows:
            # The service matched nothing; that is an empty result, not an error
            logger.debug(f"update {table} id={record_id}: no matching row")
            return None
        logger.info(f"Updated {table} row {record_id}: {sorted(fields)}")
        return rows[0]

    def delete(self, table, record_id):
        self._request('DELETE', self._table_url(table), params={'id': f"eq.{record_id}"})
        logger.info(f"Deleted {table} row {record_id}")

    # ------------------------------------------------------------------
    # Object storage
    # ------------------------------------------------------------------

    def upload_file(self, bucket, path, content, content_type=None):
        self._request(
            'POST', self._storage_url(bucket, path),
            data=content,
            headers={'Content-Type': content_type or 'application/octet-stream', 'x-upsert': 'false'},
        )
        logger.info(f"Uploaded {bucket}/{path} ({len(content)} bytes)")
        return path

    def download_file(self, bucket, path):
        resp = self._request('GET', self._storage_url(bucket, path))
        return resp.content

    def remove_file(self, bucket, path):
        self._request('DELETE', self._storage_url(bucket), json={'prefixes': [path]})
        logger.info(f"Removed {bucket}/{path}")

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
