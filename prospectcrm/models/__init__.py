"""
Data Models
Dataclasses for all entities. These are pure Python objects, no backend logic.

Rows coming back from either backend are loosely typed: older records carry
camelCase duplicates (organizationId, assignedTo, createdDate...). from_record()
folds those onto the snake_case field and keeps anything unrecognised in
`extra`, so a record survives a load/save cycle unchanged.
"""

import json
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


# camelCase / legacy column name -> field name
_ALIASES = {
    'organizationId': 'organization_id',
    'contactId': 'contact_id',
    'appointmentId': 'appointment_id',
    'contractId': 'contract_id',
    'dealId': 'deal_id',
    'assignedTo': 'assigned_to',
    'createdDate': 'created_at',
    'created_date': 'created_at',
    'updatedDate': 'updated_at',
    'updated_date': 'updated_at',
    'fullName': 'full_name',
    'mobilePhone': 'mobile_phone',
    'consentMarketing': 'consent_marketing',
    'lastContactDate': 'last_contact_date',
    'nextFollowUpDate': 'next_follow_up_date',
    'appointmentHistory': 'appointment_history',
    'prospectStatus': 'prospect_status',
    'signedDate': 'signed_date',
    'expirationDate': 'expiration_date',
    'expectedCloseDate': 'expected_close_date',
    'uploadDate': 'upload_date',
    'fileName': 'file_name',
    'filePath': 'file_path',
    'fileSize': 'file_size',
    'mimeType': 'mime_type',
    'subCategory': 'sub_category',
    'isActive': 'is_active',
}

ORGANIZATION_STATUSES = ('active', 'prospect', 'inactive', 'client')
PRIORITIES = ('low', 'medium', 'high')
PROSPECT_STATUSES = ('not_contacted', 'cold', 'warm', 'hot', 'converted', 'lost')
APPOINTMENT_TYPES = ('Meeting', 'Call', 'Demo', 'Follow-up')
APPOINTMENT_STATUSES = ('Scheduled', 'Completed', 'Cancelled', 'Rescheduled')
CONTRACT_STATUSES = ('draft', 'sent', 'contrat_envoye', 'signed', 'cancelled', 'expired')
# Statuses written by earlier versions of the app
LEGACY_CONTRACT_STATUSES = {'envoye': 'sent', 'signe': 'signed', 'annule': 'cancelled'}
ACTIVITY_TYPES = ('call', 'email', 'meeting', 'note', 'task', 'contract', 'deal')
DOCUMENT_CATEGORIES = ('presentation_commerciale', 'contrat')
REGIONS = ('Nord', 'Sud', 'Est', 'Ouest', 'Centre')


def parse_rooms(value: Any) -> Optional[int]:
    """'120 chambres' -> 120, 80.0 -> 80; None when there are no digits."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    digits = re.sub(r'\D', '', str(value))
    return int(digits) if digits else None


def normalize_keys(values: Dict[str, Any]) -> Dict[str, Any]:
    """Rename camelCase aliases in a field dict to their snake_case column."""
    out: Dict[str, Any] = {}
    for key, value in values.items():
        target = _ALIASES.get(key, key)
        if key == target or target not in out:
            out[target] = value
    return out


def record_value(record: Dict[str, Any], name: str) -> Any:
    """record[name], falling back to any camelCase alias of that column."""
    if name in record:
        return record[name]
    for alias, target in _ALIASES.items():
        if target == name and alias in record:
            return record[alias]
    return None


class RecordMixin:
    """Conversion between backend rows (dicts) and dataclasses."""

    @classmethod
    def from_record(cls, record: Optional[Dict[str, Any]]):
        names = {f.name for f in fields(cls)} - {'extra'}
        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in (record or {}).items():
            target = key if key in names else _ALIASES.get(key)
            if target in names:
                # the snake_case spelling wins when a row carries both
                if key == target or target not in values:
                    values[target] = value
            else:
                extra[key] = value
        obj = cls(**cls._coerce(values))
        obj.extra = extra
        return obj

    @classmethod
    def _coerce(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        return values

    def to_record(self, drop_none: bool = True) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == 'extra':
                continue
            value = getattr(self, f.name)
            if drop_none and value is None:
                continue
            out[f.name] = value
        for key, value in self.extra.items():
            out.setdefault(key, value)
        return out


@dataclass
class Organization(RecordMixin):
    """Business tracked as a prospect or client (hotel, pharmacy, restaurant...)"""
    id: Optional[str] = None
    name: str = ''
    industry: Optional[str] = None
    category: Optional[str] = None
    region: Optional[str] = None
    zone_geographique: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    address: Optional[str] = None
    secteur: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    nb_chambres: Optional[int] = None
    contact_principal: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    prospect_status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        # stored rows may hold the room count as text ("120", "120 chambres")
        self.nb_chambres = parse_rooms(self.nb_chambres)


@dataclass
class Contact(RecordMixin):
    """Person at an organization. organization_id is a soft reference."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    full_name: str = ''
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile_phone: Optional[str] = None
    consent_marketing: Optional[bool] = None
    notes: Optional[str] = None
    last_contact_date: Optional[str] = None
    next_follow_up_date: Optional[str] = None
    appointment_history: List[Any] = field(default_factory=list)
    prospect_status: Optional[str] = None
    priority: Optional[str] = None
    source: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def _coerce(cls, values):
        if values.get('appointment_history') is None:
            values['appointment_history'] = []
        return values


@dataclass
class Appointment(RecordMixin):
    """Scheduled meeting, call or demo with an organization and/or contact."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    contact_id: Optional[str] = None
    title: str = ''
    description: Optional[str] = None
    appointment_date: Optional[str] = None
    appointment_time: Optional[str] = None
    duration: Optional[int] = None
    location: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    reminder: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ContractDocument(RecordMixin):
    """
    File attached to a contract.
    Demo mode keeps the bytes inline as a data URI in `data`; remote mode
    uploads to object storage and keeps only `path` (or a public `url`).
    """
    name: str = ''
    size: int = 0
    type: Optional[str] = None
    upload_date: Optional[str] = None
    data: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Contract(RecordMixin):
    """Contract sent to an organization. organization_id is not enforced."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    contact_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    value: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    assigned_to: Optional[str] = None
    signed_date: Optional[str] = None
    expiration_date: Optional[str] = None
    notes: Optional[str] = None
    documents: List[ContractDocument] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def _coerce(cls, values):
        docs = values.get('documents')
        # some remote rows hold the list as a JSON string
        if isinstance(docs, str):
            docs = json.loads(docs) if docs.strip() else []
        values['documents'] = [
            d if isinstance(d, ContractDocument) else ContractDocument.from_record(d)
            for d in (docs or [])
        ]
        status = values.get('status')
        if status in LEGACY_CONTRACT_STATUSES:
            values['status'] = LEGACY_CONTRACT_STATUSES[status]
        return values

    def to_record(self, drop_none: bool = True) -> Dict[str, Any]:
        out = super().to_record(drop_none=drop_none)
        out['documents'] = [d.to_record(drop_none=drop_none) for d in self.documents]
        return out


@dataclass
class Deal(RecordMixin):
    """Sales opportunity. Kept in the data layer; nothing writes to it today."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    title: str = ''
    value: Optional[float] = None
    stage: Optional[str] = None
    probability: Optional[int] = None
    expected_close_date: Optional[str] = None
    source: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Activity(RecordMixin):
    """Timeline entry. Same status as Deal."""
    id: Optional[str] = None
    organization_id: Optional[str] = None
    contact_id: Optional[str] = None
    appointment_id: Optional[str] = None
    contract_id: Optional[str] = None
    deal_id: Optional[str] = None
    type: Optional[str] = None
    title: str = ''
    description: Optional[str] = None
    date: Optional[str] = None
    completed: Optional[bool] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class CRMDocument(RecordMixin):
    """Shared sales collateral (presentations, contract templates)."""
    id: Optional[str] = None
    title: str = ''
    description: Optional[str] = None
    file_name: str = ''
    file_path: str = ''
    file_size: int = 0
    mime_type: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    version: int = 1
    is_active: bool = True
    uploaded_by: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Admin(RecordMixin):
    """Back-office user allowed to manage the whole CRM."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    email: Optional[str] = None
    full_name: str = ''
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class Commercial(RecordMixin):
    """Salesperson. Contracts name them in assigned_to by full_name."""
    id: Optional[str] = None
    email: Optional[str] = None
    full_name: str = ''
    phone: Optional[str] = None
    region: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ImportResult:
    """Outcome of a batch import: per-row error strings plus counts."""
    success: bool = True
    imported: int = 0
    errors: List[str] = field(default_factory=list)
    duplicates: int = 0
