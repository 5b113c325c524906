"""
Contract document helpers.

Two representations coexist and are never converted into each other:
  - demo mode: the file is embedded in the contract row as a base64 data URI
  - remote mode: the file lives in object storage, the row keeps its path
Readers decide which one they hold by looking at which field is set.
"""

import base64
import logging
import mimetypes
import re
from pathlib import Path
from typing import Tuple, Union
from urllib.parse import unquote_to_bytes

import requests

from prospectcrm.backends.base import utc_now_iso
from prospectcrm.config import config
from prospectcrm.errors import BackendError, ValidationError
from prospectcrm.models import ContractDocument

logger = logging.getLogger(__name__)

_DATA_URI_RE = re.compile(r'^data:(?P<mime>[^;,]*)(?P<params>(;[^;,]+)*),(?P<payload>.*)$', re.DOTALL)


def guess_mime(name: str) -> str:
    return mimetypes.guess_type(name)[0] or 'application/octet-stream'


def to_data_uri(content: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode('ascii')}"


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    """Return (mime, bytes) for a data: URI."""
    match = _DATA_URI_RE.match(uri or '')
    if not match:
        raise ValidationError(["Document data is not a valid data URI"])
    payload = match.group('payload')
    if ';base64' in match.group('params'):
        try:
            content = base64.b64decode(payload, validate=True)
        except ValueError as e:
            raise ValidationError([f"Document data is not valid base64: {e}"]) from e
    else:
        content = unquote_to_bytes(payload)
    return match.group('mime') or 'text/plain', content


def read_file(path: Union[str, Path]) -> Tuple[str, bytes, str]:
    """(file name, content, mime) of a local file."""
    p = Path(path)
    if not p.is_file():
        raise ValidationError([f"File not found: {p}"])
    return p.name, p.read_bytes(), guess_mime(p.name)


def encode_file(path: Union[str, Path]) -> ContractDocument:
    """ContractDocument carrying the file inline (demo representation)."""
    name, content, mime = read_file(path)
    return ContractDocument(
        name=name,
        size=len(content),
        type=mime,
        upload_date=utc_now_iso(),
        data=to_data_uri(content, mime),
    )


def document_kind(doc: ContractDocument) -> str:
    """'inline', 'storage', 'url' or 'missing'."""
    if doc.data:
        return 'inline'
    if doc.path:
        return 'storage'
    if doc.url:
        return 'url'
    return 'missing'


def fetch_url(url: str) -> bytes:
    try:
        resp = requests.get(url, timeout=config.REQUEST_TIMEOUT)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise BackendError(f"Could not download {url}: {e}") from e
    return resp.content
