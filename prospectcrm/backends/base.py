"""
Backend interface.
Both storage modes (hosted REST service, local demo store) implement the same
table-level operations; the CRM facade picks one per call.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

# Table name -> human label used in error messages
TABLE_LABELS = {
    'organizations': 'Organization',
    'contacts': 'Contact',
    'appointments': 'Appointment',
    'contracts': 'Contract',
    'deals': 'Deal',
    'activities': 'Activity',
    'crm_documents': 'CRM Document',
    'admins': 'Admin',
    'commerciaux': 'Salesperson',
}


def utc_now_iso() -> str:
    """Timestamp format written to created_at / updated_at."""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class Backend(ABC):
    """Table-level CRUD plus object storage."""

    name = 'base'
    # True when file contents live inside the record (data URIs)
    inline_files = False

    @abstractmethod
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = 'created_at',
        ascending: bool = False,
    ) -> List[Dict[str, Any]]:
        """Rows of `table` whose columns equal every value in `filters`."""

    @abstractmethod
    def insert(self, table: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored (with id)."""

    @abstractmethod
    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Merge `fields` into the row with `record_id` and return the result."""

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """Remove the row with `record_id`. Missing ids are not an error."""

    @abstractmethod
    def upload_file(self, bucket: str, path: str, content: bytes, content_type: Optional[str] = None) -> str:
        """Store a file, return the path to reference it by."""

    @abstractmethod
    def download_file(self, bucket: str, path: str) -> bytes:
        ...

    @abstractmethod
    def remove_file(self, bucket: str, path: str) -> None:
        ...

    def close(self):
        pass
