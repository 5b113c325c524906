"""
CRM Engine - Data Access Facade
Single surface for every CRUD operation. Each call checks the backend settings
and runs against either the hosted service or the local demo store; callers
never branch on mode.

Mutations are announced on the event bus after they succeed.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

from prospectcrm.backends.base import Backend, utc_now_iso
from prospectcrm.backends.demo import DemoBackend, generate_id
from prospectcrm.backends.remote import RemoteBackend
from prospectcrm.bus.events import EventBus, bus, EVENT_DEMO_DATA_LOADED
from prospectcrm.config import BackendSettings, config, load_backend_settings
from prospectcrm.engine import documents, validation
from prospectcrm.errors import NotFoundError, ValidationError
from prospectcrm.models import (
    Activity, Admin, Appointment, Commercial, Contact, Contract, ContractDocument, CRMDocument,
    Deal, Organization, normalize_keys,
)
from prospectcrm.store import LocalStore

logger = logging.getLogger(__name__)

MODE_REMOTE = 'remote'
MODE_DEMO = 'demo'

# Allowlists for updates: column names never come from user input directly
_ORGANIZATION_COLUMNS = {
    'name', 'industry', 'category', 'region', 'zone_geographique', 'district', 'city',
    'address', 'secteur', 'website', 'phone', 'email', 'nb_chambres', 'contact_principal',
    'status', 'priority', 'prospect_status', 'notes',
}
_CONTACT_COLUMNS = {
    'organization_id', 'full_name', 'role', 'email', 'phone', 'mobile_phone',
    'consent_marketing', 'notes', 'last_contact_date', 'next_follow_up_date',
    'appointment_history', 'prospect_status', 'priority', 'source',
}
_APPOINTMENT_COLUMNS = {
    'organization_id', 'contact_id', 'title', 'description', 'appointment_date',
    'appointment_time', 'duration', 'location', 'city', 'region', 'type', 'status', 'reminder',
}
_CONTRACT_COLUMNS = {
    'organization_id', 'contact_id', 'title', 'description', 'value', 'currency', 'status',
    'assigned_to', 'signed_date', 'expiration_date', 'notes', 'documents',
}
_DEAL_COLUMNS = {
    'organization_id', 'title', 'value', 'stage', 'probability', 'expected_close_date',
    'source', 'assigned_to',
}
_ACTIVITY_COLUMNS = {
    'organization_id', 'contact_id', 'appointment_id', 'contract_id', 'deal_id', 'type',
    'title', 'description', 'date', 'completed',
}
_DOCUMENT_COLUMNS = {
    'title', 'description', 'file_name', 'file_path', 'file_size', 'mime_type', 'category',
    'sub_category', 'version', 'is_active', 'uploaded_by',
}
_ADMIN_COLUMNS = {'user_id', 'email', 'full_name'}
_COMMERCIAL_COLUMNS = {'email', 'full_name', 'phone', 'region', 'notes'}


def _validate_columns(updates: Dict[str, Any], allowed: set, entity: str) -> None:
    """Raise ValueError if any key in updates is not an allowed column name."""
    invalid = set(updates.keys()) - allowed
    if invalid:
        raise ValueError(f"Invalid {entity} fields: {invalid}")


@dataclass(frozen=True)
class _Entity:
    """Per-entity wiring: table, model class, allowlist, event prefix, validator."""
    table: str
    model: Type
    columns: frozenset
    event: str
    validator: Optional[Callable[[Any], List[str]]] = None


ORGANIZATIONS = _Entity('organizations', Organization, frozenset(_ORGANIZATION_COLUMNS), 'organization',
                        validation.validate_organization)
CONTACTS = _Entity('contacts', Contact, frozenset(_CONTACT_COLUMNS), 'contact', validation.validate_contact)
APPOINTMENTS = _Entity('appointments', Appointment, frozenset(_APPOINTMENT_COLUMNS), 'appointment',
                       validation.validate_appointment)
CONTRACTS = _Entity('contracts', Contract, frozenset(_CONTRACT_COLUMNS), 'contract', validation.validate_contract)
DEALS = _Entity('deals', Deal, frozenset(_DEAL_COLUMNS), 'deal')
ACTIVITIES = _Entity('activities', Activity, frozenset(_ACTIVITY_COLUMNS), 'activity')
CRM_DOCUMENTS = _Entity('crm_documents', CRMDocument, frozenset(_DOCUMENT_COLUMNS), 'document',
                        validation.validate_document)
ADMINS = _Entity('admins', Admin, frozenset(_ADMIN_COLUMNS), 'admin', validation.validate_admin)
COMMERCIAUX = _Entity('commerciaux', Commercial, frozenset(_COMMERCIAL_COLUMNS), 'commercial',
                      validation.validate_commercial)


def _clean_payload(values: Dict[str, Any]) -> Dict[str, Any]:
    """Strip strings and drop empty ones; the service only receives filled fields."""
    out = {}
    for key, value in values.items():
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        out[key] = value
    return out


class CRM:
    """
    Data access facade.

    Args:
        store: Local store used in demo mode. Owned by the caller.
        settings_loader: Returns the current BackendSettings; called on every operation.
        remote_factory: Builds a RemoteBackend from settings (tests inject fakes).
        events: Event bus mutations are announced on.
    """

    def __init__(
        self,
        store: LocalStore,
        settings_loader: Callable[[], BackendSettings] = load_backend_settings,
        remote_factory: Callable[[BackendSettings], Backend] = RemoteBackend,
        events: EventBus = bus,
    ):
        self.store = store
        self.events = events
        self._settings_loader = settings_loader
        self._remote_factory = remote_factory
        self._demo = DemoBackend(store)
        self._remote: Optional[Backend] = None
        self._remote_settings: Optional[BackendSettings] = None

    # ------------------------------------------------------------------
    # Mode selection
    # ------------------------------------------------------------------

    @property
    def mode(self) -> str:
        return MODE_REMOTE if self._settings_loader().remote_enabled else MODE_DEMO

    def _backend(self) -> Backend:
        settings = self._settings_loader()
        if not settings.remote_enabled:
            logger.debug("Using demo backend")
            return self._demo
        # Reuse the HTTP session only while the credentials are unchanged
        if self._remote is None or self._remote_settings != settings:
            if self._remote is not None:
                self._remote.close()
            self._remote = self._remote_factory(settings)
            self._remote_settings = settings
        logger.debug("Using remote backend")
        return self._remote

    def close(self):
        if self._remote is not None:
            self._remote.close()
            self._remote = None
            self._remote_settings = None

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    def _list(self, entity: _Entity, filters: Optional[Dict[str, Any]] = None,
              order_by: Optional[str] = 'created_at', ascending: bool = False) -> List[Any]:
        rows = self._backend().select(entity.table, filters=filters, order_by=order_by, ascending=ascending)
        return [entity.model.from_record(row) for row in rows]

    def _get(self, entity: _Entity, record_id: str) -> Optional[Any]:
        rows = self._backend().select(entity.table, filters={'id': record_id}, order_by=None)
        if rows:
            return entity.model.from_record(rows[0])
        logger.debug(f"get {entity.table}: id={record_id} not found")
        return None

    def _create(self, entity: _Entity, obj: Any) -> Any:
        if entity.validator:
            errors = entity.validator(obj)
            if errors:
                raise ValidationError(errors)

        payload = _clean_payload(obj.to_record())
        payload.pop('id', None)
        now = utc_now_iso()
        payload['created_at'] = now
        payload['updated_at'] = now

        row = self._backend().insert(entity.table, payload)
        created = entity.model.from_record(row)
        logger.info(f"Created {entity.event} {created.id}")
        self.events.emit(f"{entity.event}_created", {'id': created.id, 'record': created})
        return created

    def _update(self, entity: _Entity, record_id: str, updates: Dict[str, Any]) -> Optional[Any]:
        """
        Merge `updates` into a record.
        Returns the updated record, or None when the remote service matched no row.
        Raises NotFoundError in demo mode when the id is unknown, even when
        `updates` is empty (the write then only bumps updated_at).
        """
        updates = normalize_keys(updates or {})
        # Guard: only known columns may be written
        _validate_columns(updates, entity.columns, entity.event)

        payload = {k: v for k, v in updates.items() if v is not None}
        if 'documents' in payload:
            payload['documents'] = [
                d.to_record() if isinstance(d, ContractDocument) else d for d in payload['documents']
            ]
        payload['updated_at'] = utc_now_iso()

        row = self._backend().update(entity.table, record_id, payload)
        if row is None:
            return None
        updated = entity.model.from_record(row)
        self.events.emit(f"{entity.event}_updated", {'id': record_id, 'updates': updates, 'record': updated})
        return updated

    def _delete(self, entity: _Entity, record_id: str) -> None:
        self._backend().delete(entity.table, record_id)
        self.events.emit(f"{entity.event}_deleted", {'id': record_id})

    # ==================================================================
    # ORGANIZATIONS
    # ==================================================================

    def list_organizations(self) -> List[Organization]:
        return self._list(ORGANIZATIONS)

    def get_organization(self, org_id: str) -> Optional[Organization]:
        return self._get(ORGANIZATIONS, org_id)

    def create_organization(self, org: Organization) -> Organization:
        if not org.status:
            org.status = 'prospect'
        return self._create(ORGANIZATIONS, org)

    def update_organization(self, org_id: str, updates: Dict[str, Any]) -> Optional[Organization]:
        return self._update(ORGANIZATIONS, org_id, updates)

    def delete_organization(self, org_id: str) -> None:
        # No cascade: contacts/contracts pointing here keep their dangling id
        self._delete(ORGANIZATIONS, org_id)

    # ==================================================================
    # CONTACTS
    # ==================================================================

    def list_contacts(self) -> List[Contact]:
        return self._list(CONTACTS)

    def create_contact(self, contact: Contact) -> Contact:
        return self._create(CONTACTS, contact)

    def contacts_by_organization(self, org_id: str) -> List[Contact]:
        return self._list(CONTACTS, filters={'organization_id': org_id})

    def update_contact(self, contact_id: str, updates: Dict[str, Any]) -> Optional[Contact]:
        return self._update(CONTACTS, contact_id, updates)

    def delete_contact(self, contact_id: str) -> None:
        self._delete(CONTACTS, contact_id)

    # ==================================================================
    # APPOINTMENTS
    # ==================================================================

    def list_appointments(self) -> List[Appointment]:
        return self._list(APPOINTMENTS, order_by='appointment_date', ascending=True)

    def appointments_by_contact(self, contact_id: str) -> List[Appointment]:
        return self._list(APPOINTMENTS, filters={'contact_id': contact_id},
                          order_by='appointment_date', ascending=True)

    def appointments_by_organization(self, org_id: str) -> List[Appointment]:
        return self._list(APPOINTMENTS, filters={'organization_id': org_id},
                          order_by='appointment_date', ascending=False)

    def create_appointment(self, appointment: Appointment) -> Appointment:
        return self._create(APPOINTMENTS, appointment)

    def update_appointment(self, appointment_id: str, updates: Dict[str, Any]) -> Optional[Appointment]:
        return self._update(APPOINTMENTS, appointment_id, updates)

    def delete_appointment(self, appointment_id: str) -> None:
        self._delete(APPOINTMENTS, appointment_id)

    # ==================================================================
    # CONTRACTS
    # ==================================================================

    def list_contracts(self) -> List[Contract]:
        return self._list(CONTRACTS)

    def get_contract(self, contract_id: str) -> Optional[Contract]:
        return self._get(CONTRACTS, contract_id)

    def contracts_by_organization(self, org_id: str) -> List[Contract]:
        return self._list(CONTRACTS, filters={'organization_id': org_id})

    def contracts_by_assignee(self, assigned_to: str) -> List[Contract]:
        return self._list(CONTRACTS, filters={'assigned_to': assigned_to})

    def create_contract(self, contract: Contract) -> Contract:
        if contract.assigned_to and contract.assigned_to not in self.salesperson_names():
            logger.warning(f"Contract assigned to unknown salesperson {contract.assigned_to!r}")
        return self._create(CONTRACTS, contract)

    def update_contract(self, contract_id: str, updates: Dict[str, Any]) -> Optional[Contract]:
        return self._update(CONTRACTS, contract_id, updates)

    def delete_contract(self, contract_id: str) -> None:
        self._delete(CONTRACTS, contract_id)

    def attach_contract_document(self, contract_id: str, path) -> Optional[Contract]:
        """
        Attach a local file to a contract.
        Demo mode embeds it as a data URI; remote mode uploads it to the
        contracts bucket and records the storage path.
        """
        contract = self.get_contract(contract_id)
        if contract is None:
            raise NotFoundError("Contract not found")

        backend = self._backend()
        if backend.inline_files:
            doc = documents.encode_file(path)
        else:
            name, content, mime = documents.read_file(path)
            storage_path = f"{contract_id}/{int(time.time())}_{name}"
            stored = backend.upload_file(config.CONTRACTS_BUCKET, storage_path, content, mime)
            doc = ContractDocument(name=name, size=len(content), type=mime,
                                   upload_date=utc_now_iso(), path=stored)

        logger.info(f"Attaching {doc.name} ({doc.size} bytes) to contract {contract_id}")
        return self.update_contract(contract_id, {'documents': contract.documents + [doc]})

    def download_contract_document(self, doc: ContractDocument) -> bytes:
        """File contents, from whichever representation the document carries."""
        kind = documents.document_kind(doc)
        if kind == 'inline':
            return documents.decode_data_uri(doc.data)[1]
        if kind == 'storage':
            return self._backend().download_file(config.CONTRACTS_BUCKET, doc.path)
        if kind == 'url':
            return documents.fetch_url(doc.url)
        raise ValidationError([f"Document {doc.name!r} has no content"])

    # ==================================================================
    # DEALS / ACTIVITIES
    # ==================================================================

    def list_deals(self) -> List[Deal]:
        return self._list(DEALS)

    def create_deal(self, deal: Deal) -> Deal:
        return self._create(DEALS, deal)

    def update_deal(self, deal_id: str, updates: Dict[str, Any]) -> Optional[Deal]:
        return self._update(DEALS, deal_id, updates)

    def delete_deal(self, deal_id: str) -> None:
        self._delete(DEALS, deal_id)

    def list_activities(self) -> List[Activity]:
        return self._list(ACTIVITIES)

    def create_activity(self, activity: Activity) -> Activity:
        return self._create(ACTIVITIES, activity)

    def update_activity(self, activity_id: str, updates: Dict[str, Any]) -> Optional[Activity]:
        return self._update(ACTIVITIES, activity_id, updates)

    def delete_activity(self, activity_id: str) -> None:
        self._delete(ACTIVITIES, activity_id)

    # ==================================================================
    # CRM DOCUMENTS
    # ==================================================================

    def list_documents(self) -> List[CRMDocument]:
        return self._list(CRM_DOCUMENTS, filters={'is_active': True}, order_by='updated_at')

    def documents_by_category(self, category: str) -> List[CRMDocument]:
        return self._list(CRM_DOCUMENTS, filters={'category': category, 'is_active': True},
                          order_by='updated_at')

    def documents_by_sub_category(self, sub_category: str) -> List[CRMDocument]:
        return self._list(CRM_DOCUMENTS, filters={'sub_category': sub_category, 'is_active': True},
                          order_by='updated_at')

    def create_document(self, document: CRMDocument) -> CRMDocument:
        return self._create(CRM_DOCUMENTS, document)

    def update_document(self, document_id: str, updates: Dict[str, Any]) -> Optional[CRMDocument]:
        return self._update(CRM_DOCUMENTS, document_id, updates)

    def delete_document(self, document_id: str) -> None:
        """Soft delete: the row stays, flagged inactive."""
        try:
            self._backend().update(CRM_DOCUMENTS.table, document_id,
                                   {'is_active': False, 'updated_at': utc_now_iso()})
        except NotFoundError:
            logger.debug(f"delete_document: id={document_id} not in demo store")
            return
        self.events.emit(f"{CRM_DOCUMENTS.event}_deleted", {'id': document_id})

    def upload_document_file(self, path, file_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Upload a local file to the documents bucket.
        Returns the fields to store on a CRMDocument (file_name, file_path, file_size, mime_type).
        """
        name, content, mime = documents.read_file(path)
        name = file_name or name
        stored = self._backend().upload_file(config.DOCUMENTS_BUCKET, name, content, mime)
        return {'file_name': name, 'file_path': stored, 'file_size': len(content), 'mime_type': mime}

    def download_document_file(self, file_path: str) -> bytes:
        return self._backend().download_file(config.DOCUMENTS_BUCKET, file_path)

    def delete_document_file(self, file_path: str) -> None:
        self._backend().remove_file(config.DOCUMENTS_BUCKET, file_path)

    # ==================================================================
    # USERS (admins, salespeople)
    # ==================================================================

    def list_admins(self) -> List[Admin]:
        return self._list(ADMINS)

    def create_admin(self, admin: Admin) -> Admin:
        # no auth provider behind this yet; the account id is generated locally
        if not admin.user_id:
            admin.user_id = generate_id()
        return self._create(ADMINS, admin)

    def delete_admin(self, admin_id: str) -> None:
        self._delete(ADMINS, admin_id)

    def list_commerciaux(self) -> List[Commercial]:
        return self._list(COMMERCIAUX)

    def create_commercial(self, commercial: Commercial) -> Commercial:
        return self._create(COMMERCIAUX, commercial)

    def delete_commercial(self, commercial_id: str) -> None:
        self._delete(COMMERCIAUX, commercial_id)

    def salesperson_names(self) -> List[str]:
        """Names contracts may be assigned to, oldest salesperson first."""
        return [c.full_name for c in reversed(self.list_commerciaux()) if c.full_name]

    # ==================================================================
    # DEMO DATA
    # ==================================================================

    def load_demo_data(self) -> None:
        """Overwrite the demo store with the sample records."""
        self._demo.load_seed()
        self.events.emit(EVENT_DEMO_DATA_LOADED, {'mode': self.mode})

    def reset_demo_data(self) -> None:
        """Forget all demo records; the next read reseeds."""
        self._demo.clear()


def open_crm(store_path=None) -> CRM:
    """CRM over the configured demo store; the caller closes crm.store when done."""
    store = LocalStore.open(store_path if store_path is not None else config.DEMO_STORE_PATH)
    return CRM(store)
