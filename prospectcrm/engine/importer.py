"""
Organization Importer
Loads organizations (and optionally their main contact) from a CSV or Excel
sheet into the CRM.

Features:
- Automatic column mapping from French/English header keywords
- Fuzzy header matching for anything the keywords miss
- Deduplication by name + city (existing records and within the file)
- Per-row error reporting; one bad row never stops the batch
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import pandas as pd
from rapidfuzz import fuzz

from prospectcrm.bus.events import EVENT_IMPORT_COMPLETE
from prospectcrm.errors import CRMError, ValidationError
from prospectcrm.models import Contact, ImportResult, Organization, parse_rooms

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx', '.xls')
FUZZY_THRESHOLD = 80
IMPORT_SOURCE = 'Import CSV'


# =============================================================================
# COLUMN KEYWORDS
# =============================================================================

# Field -> header fragments that identify it. Checked in this order; the first
# unclaimed column containing any fragment wins.
FIELD_KEYWORDS = {
    # before 'name': "nombre_chambres" contains "nom"
    'nb_chambres': ['chambres', 'rooms'],
    'name': ['nom', 'name', 'etablissement'],
    'industry': ['type', 'industrie', 'activite', 'industry'],
    'category': ['categorie', 'etoiles', 'category', 'stars'],
    'region': ['region'],
    'zone_geographique': ['zone'],
    'district': ['district'],
    'city': ['ville', 'city'],
    'address': ['adresse', 'address', 'precise'],
    'secteur': ['secteur'],
    'website': ['site', 'web', 'officiel'],
    'phone': ['tel', 'phone'],
    'email': ['email', 'mail'],
    'notes': ['commentaires', 'notes'],
    'status': ['statut', 'status'],
}

# Headers that need two fragments together
_COMPOUND_KEYWORDS = {
    'contact_principal': [('contact', 'principal')],
    'contact_name': [('contact', 'nom'), ('contact', 'name')],
}

# Contact-only columns carried through when the sheet has them
CONTACT_FIELDS = ('contact_name', 'role', 'mobile_phone', 'prospect_status', 'priority', 'source')

ORGANIZATION_FIELDS = (
    'name', 'industry', 'category', 'region', 'zone_geographique', 'district', 'city',
    'address', 'secteur', 'website', 'phone', 'email', 'nb_chambres', 'contact_principal',
    'status', 'priority', 'notes',
)


# =============================================================================
# READING
# =============================================================================

def normalize_header(header) -> str:
    return re.sub(r'\s+', '_', str(header).strip().lower())


def read_rows(path: Union[str, Path]) -> List[Dict[str, str]]:
    """
    Read a CSV/Excel file into a list of {header: value} dicts.
    Every value is a stripped string; fully blank rows are dropped.
    """
    path = Path(path)
    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ValidationError([f"Unsupported file format '{ext}'. Use CSV, XLS or XLSX files."])

    try:
        if ext == '.csv':
            df = pd.read_csv(path, dtype=str, keep_default_na=False)
        else:
            df = pd.read_excel(path, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        raise ValidationError([f"Failed to parse {path.name}: {e}"]) from e

    df = df.fillna('')
    df.columns = [normalize_header(c) for c in df.columns]

    rows = []
    for record in df.to_dict(orient='records'):
        row = {key: str(value).strip() for key, value in record.items()}
        if any(row.values()):
            rows.append(row)

    if not rows:
        raise ValidationError([f"No data found in {path.name}"])

    logger.info(f"Read {len(rows)} rows from {path.name} (columns: {list(df.columns)})")
    return rows


# =============================================================================
# COLUMN MAPPING
# =============================================================================

def _compound_match(column: str, field: str) -> bool:
    return any(all(part in column for part in parts) for parts in _COMPOUND_KEYWORDS.get(field, []))


def auto_map_columns(columns: List[str]) -> Dict[str, str]:
    """
    Guess which file column feeds which field.
    Returns {field: column}. Each column is used at most once.
    """
    mapping: Dict[str, str] = {}
    claimed = set()

    # Two-word headers first so "contact_nom" is not taken as the org name
    for field in _COMPOUND_KEYWORDS:
        for column in columns:
            if column not in claimed and _compound_match(column, field):
                mapping[field] = column
                claimed.add(column)
                break

    for field, keywords in FIELD_KEYWORDS.items():
        for column in columns:
            if column in claimed:
                continue
            if any(keyword in column for keyword in keywords):
                mapping[field] = column
                claimed.add(column)
                break

    # Fuzzy pass for the leftovers ("adress", "websit", "role"...)
    for field in ORGANIZATION_FIELDS + CONTACT_FIELDS:
        if field in mapping:
            continue
        match = _best_fuzzy_column(field, [c for c in columns if c not in claimed])
        if match:
            mapping[field] = match
            claimed.add(match)

    logger.debug(f"Auto mapping: {mapping}")
    return mapping


def _best_fuzzy_column(field: str, columns: List[str]) -> Optional[str]:
    best_score = 0
    best_column = None

    for column in columns:
        score = fuzz.ratio(field, column)
        if score > best_score:
            best_score = score
            best_column = column

    if best_score >= FUZZY_THRESHOLD:
        logger.info(f"Fuzzy matched column '{best_column}' to field '{field}' (score: {best_score:.0f})")
        return best_column
    return None


def apply_mapping(rows: List[Dict[str, str]], mapping: Dict[str, str]) -> List[Dict]:
    """Rename columns to fields; empty values are dropped."""
    mapped_rows = []
    for row in rows:
        mapped = {}
        for field, column in mapping.items():
            value = row.get(column)
            if value is None:
                continue
            if field == 'nb_chambres':
                rooms = parse_rooms(value)
                if rooms is not None:
                    mapped[field] = rooms
            elif str(value).strip():
                mapped[field] = str(value).strip()
        mapped_rows.append(mapped)
    return mapped_rows


# =============================================================================
# IMPORT
# =============================================================================

def make_dedup_key(name, city) -> str:
    """Create deduplication key from name + city."""
    name_clean = str(name).strip().lower() if name else ''
    city_clean = str(city).strip().lower() if city else ''
    return f"{name_clean}|{city_clean}"


def _organization_from_row(row: Dict) -> Organization:
    return Organization(**{k: row[k] for k in ORGANIZATION_FIELDS if k in row})


def _contact_from_row(row: Dict, org_id: str) -> Optional[Contact]:
    if not (row.get('contact_name') or row.get('email') or row.get('phone')):
        return None
    contact = Contact(
        organization_id=org_id,
        full_name=row.get('contact_name') or row.get('name', ''),
        role=row.get('role'),
        email=row.get('email'),
        phone=row.get('phone'),
        mobile_phone=row.get('mobile_phone'),
        consent_marketing=True,
        notes=row.get('notes'),
        prospect_status=row.get('prospect_status') or 'not_contacted',
        priority=row.get('priority') or 'medium',
        source=row.get('source') or IMPORT_SOURCE,
    )
    if not (contact.full_name or contact.email):
        return None
    return contact


def import_organizations(crm, rows: List[Dict]) -> ImportResult:
    """
    Create one organization per mapped row.

    Returns:
        ImportResult with the number created, duplicates skipped and one
        "Row N: ..." message per failed row (N is 1-based).
    """
    try:
        existing = {make_dedup_key(o.name, o.city) for o in crm.list_organizations()}
    except CRMError as e:
        logger.error(f"Import aborted, could not load organizations: {e}")
        return ImportResult(success=False, errors=[str(e)])

    result = ImportResult()

    for index, row in enumerate(rows, start=1):
        name = str(row.get('name') or '').strip()
        if not name:
            result.errors.append(f"Row {index}: Missing organization name")
            continue

        dedup_key = make_dedup_key(name, row.get('city'))
        if dedup_key in existing:
            logger.info(f"Row {index}: duplicate {name!r} skipped")
            result.duplicates += 1
            continue

        try:
            org = crm.create_organization(_organization_from_row(row))
        except CRMError as e:
            logger.warning(f"Row {index}: {e}")
            result.errors.append(f"Row {index}: {e}")
            continue

        existing.add(dedup_key)
        result.imported += 1

        contact = _contact_from_row(row, org.id)
        if contact:
            try:
                crm.create_contact(contact)
            except CRMError as e:
                # the organization stays; only the contact is reported
                logger.warning(f"Row {index}: organization {org.id} kept, contact failed: {e}")
                result.errors.append(f"Row {index}: Organization imported but contact not created: {e}")

    logger.info(
        f"Import complete: {result.imported} imported, {result.duplicates} duplicates, "
        f"{len(result.errors)} errors"
    )
    crm.events.emit(EVENT_IMPORT_COMPLETE, {
        'imported': result.imported,
        'duplicates': result.duplicates,
        'errors': list(result.errors),
    })
    return result


def import_file(crm, path: Union[str, Path], mapping: Optional[Dict[str, str]] = None) -> Tuple[ImportResult, Dict[str, str]]:
    """Read, map and import a file. Returns the result and the mapping used."""
    rows = read_rows(path)
    if mapping is None:
        mapping = auto_map_columns(list(rows[0].keys()))
    if 'name' not in mapping:
        raise ValidationError(["No column could be mapped to the organization name"])
    return import_organizations(crm, apply_mapping(rows, mapping)), mapping
