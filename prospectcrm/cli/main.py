#!/usr/bin/env python3
"""
Prospect CRM Terminal CLI
Command-line interface for all CRM operations.

Works the same against the hosted service and the local demo store; run
`mode` to see which one is active.
"""

import functools
import logging
from datetime import date
from pathlib import Path
from typing import Optional

import click

from prospectcrm.config import load_backend_settings
from prospectcrm.engine import dashboard as dash
from prospectcrm.engine import importer
from prospectcrm.engine.crm import MODE_DEMO, open_crm
from prospectcrm.engine.validation import is_valid_email
from prospectcrm.errors import CRMError
from prospectcrm.logging_config import configure_logging, log_call
from prospectcrm.models import (
    APPOINTMENT_STATUSES, APPOINTMENT_TYPES, CONTRACT_STATUSES, DOCUMENT_CATEGORIES,
    PRIORITIES, PROSPECT_STATUSES, REGIONS,
    Admin, Appointment, Commercial, Contact, Contract, CRMDocument, Organization, parse_rooms,
)

logger = logging.getLogger("prospectcrm")


def _prompt_date(label: str, default: Optional[date] = None) -> Optional[str]:
    """Prompt for a date, re-prompting on bad format. Returns None if left blank."""
    default_str = str(default) if default else ""
    while True:
        raw = click.prompt(label, default=default_str, show_default=bool(default_str)) or ""
        if not raw:
            return None
        try:
            return date.fromisoformat(raw).isoformat()
        except ValueError:
            logger.debug(f"_prompt_date | rejected input={raw!r}")
            click.echo("  Invalid format - please use YYYY-MM-DD.", err=True)


def _prompt_email() -> Optional[str]:
    """Prompt for an email address, re-prompting on bad format. Returns None if left blank."""
    while True:
        raw = click.prompt("Email", default="", show_default=False) or None
        if raw is None:
            return None
        if is_valid_email(raw):
            return raw
        logger.debug(f"_prompt_email | rejected input={raw!r}")
        click.echo("  Invalid email address - please try again or press Enter to skip.", err=True)


def _optional(label: str) -> Optional[str]:
    return click.prompt(label, default="", show_default=False) or None


def handle_errors(func):
    """Turn CRM failures into a one-line error and exit status 1; log_call (inside) logs them."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (CRMError, ValueError) as e:
            click.echo(f"Error: {e}", err=True)
            raise SystemExit(1)
    return wrapper


def _updates(**fields) -> dict:
    return {k: v for k, v in fields.items() if v is not None}


@click.group()
@click.pass_context
def cli(ctx):
    """Prospect CRM - Organizations, Contacts, Appointments & Contracts"""
    configure_logging()
    if ctx.obj is None:
        crm = open_crm()
        ctx.call_on_close(crm.store.close)
        ctx.call_on_close(crm.close)
        ctx.obj = crm


@cli.command('mode')
@click.pass_obj
@log_call
def mode(crm):
    """Show whether the hosted service or the demo store is in use"""
    if crm.mode == MODE_DEMO:
        click.echo(f"Mode: demo (local store: {crm.store.path or 'in memory'})")
        click.echo("Set CRM_SERVICE_URL and CRM_SERVICE_KEY to use the hosted service.")
    else:
        click.echo(f"Mode: remote ({load_backend_settings().service_url})")


# =============================================================================
# ORGANIZATIONS COMMANDS
# =============================================================================

@cli.group()
def orgs():
    """Manage organizations (hotels, restaurants, pharmacies, etc.)"""
    pass


@orgs.command('list')
@click.option('--region', help='Filter by region (Nord/Sud/Est/Ouest/Centre)')
@click.option('--status', help='Filter by status (prospect/active/etc)')
@click.pass_obj
@handle_errors
@log_call
def orgs_list(crm, region, status):
    """List all organizations"""
    results = crm.list_organizations()
    if region:
        results = [o for o in results if (o.region or '').lower() == region.lower()]
    if status:
        results = [o for o in results if (o.status or '').lower() == status.lower()]

    if not results:
        click.echo("No organizations found.")
        return

    click.echo(f"\nFound {len(results)} organizations:\n")
    click.echo(f"{'ID':<12} {'Name':<30} {'City':<15} {'Region':<8} {'Status':<10} {'Rooms':>6}")
    click.echo("-" * 86)

    for o in results:
        rooms = '' if o.nb_chambres is None else str(o.nb_chambres)
        click.echo(
            f"{o.id:<12} {o.name[:28]:<30} {(o.city or '')[:13]:<15} "
            f"{(o.region or '')[:7]:<8} {(o.status or '')[:9]:<10} {rooms:>6}"
        )


@orgs.command('show')
@click.argument('org_id')
@click.pass_obj
@handle_errors
@log_call
def orgs_show(crm, org_id):
    """Show full organization details"""
    org = crm.get_organization(org_id)

    if not org:
        logger.warning(f"orgs_show | org_id={org_id} not found")
        click.echo(f"Organization {org_id} not found.", err=True)
        raise SystemExit(1)

    click.echo(f"\n{'='*80}")
    click.echo(f"ORGANIZATION {org.id}: {org.name}")
    click.echo(f"{'='*80}")
    click.echo(f"Industry:    {org.industry or '(not set)'}")
    click.echo(f"Category:    {org.category or '(not set)'}")
    click.echo(f"Region:      {org.region or '(not set)'}")
    click.echo(f"District:    {org.district or '(not set)'}")
    click.echo(f"City:        {org.city or '(not set)'}")
    click.echo(f"Address:     {org.address or '(not set)'}")
    click.echo(f"Sector:      {org.secteur or '(not set)'}")
    click.echo(f"Website:     {org.website or '(not set)'}")
    click.echo(f"Phone:       {org.phone or '(not set)'}")
    click.echo(f"Email:       {org.email or '(not set)'}")
    click.echo(f"Rooms:       {org.nb_chambres if org.nb_chambres is not None else 'N/A'}")
    click.echo(f"Status:      {org.status or '(not set)'}")
    click.echo(f"Priority:    {org.priority or '(not set)'}")
    click.echo(f"Created:     {org.created_at}")
    click.echo(f"Updated:     {org.updated_at}")

    if org.notes:
        click.echo(f"\nNotes:\n{org.notes}")

    click.echo(f"\n{'='*80}")
    click.echo("CONTACTS")
    click.echo(f"{'='*80}")
    contacts_found = crm.contacts_by_organization(org_id)
    if contacts_found:
        for c in contacts_found:
            click.echo(f"  {c.full_name} ({c.role or 'no role'}) {c.email or ''} {c.phone or ''}".rstrip())
    else:
        click.echo("No contacts yet.")

    click.echo(f"\n{'='*80}")
    click.echo("APPOINTMENTS")
    click.echo(f"{'='*80}")
    appts = crm.appointments_by_organization(org_id)
    if appts:
        for a in appts:
            click.echo(f"  [{a.appointment_date} {a.appointment_time or ''}] {a.title} ({a.status or 'N/A'})")
    else:
        click.echo("No appointments yet.")

    click.echo(f"\n{'='*80}")
    click.echo("CONTRACTS")
    click.echo(f"{'='*80}")
    found = crm.contracts_by_organization(org_id)
    if found:
        for c in found:
            click.echo(f"  {c.id}: {c.title or c.description} [{c.status}] {len(c.documents)} document(s)")
    else:
        click.echo("No contracts yet.")

    click.echo()


@orgs.command('add')
@click.pass_obj
@handle_errors
@log_call
def orgs_add(crm):
    """Add a new organization (interactive)"""
    click.echo("\n=== ADD NEW ORGANIZATION ===\n")

    name = click.prompt("Name", type=str)
    industry = click.prompt("Industry (Hotel/Restaurant/Pharmacy/etc)", default="Hotel")
    region = click.prompt(
        "Region",
        type=click.Choice(list(REGIONS), case_sensitive=False),
        default="Nord"
    )
    district = _optional("District")
    city = _optional("City")
    address = _optional("Address")
    secteur = _optional("Sector")
    website = _optional("Website")
    phone = _optional("Phone")
    email = _prompt_email()
    rooms = click.prompt("Number of rooms", default="", show_default=False) or None
    notes = _optional("Notes")

    org = Organization(
        name=name,
        industry=industry,
        region=region,
        district=district,
        city=city,
        address=address,
        secteur=secteur,
        website=website,
        phone=phone,
        email=email,
        nb_chambres=parse_rooms(rooms),
        status='prospect',
        notes=notes
    )

    created = crm.create_organization(org)
    click.echo(f"\n✓ Created organization {created.id}: {name}")


@orgs.command('edit')
@click.argument('org_id')
@click.option('--name', help='Update name')
@click.option('--status', help='Update status')
@click.option('--priority', type=click.Choice(list(PRIORITIES)), help='Update priority')
@click.option('--region', help='Update region')
@click.option('--district', help='Update district')
@click.option('--city', help='Update city')
@click.option('--phone', help='Update phone')
@click.option('--email', help='Update email')
@click.option('--rooms', type=int, help='Update number of rooms')
@click.option('--notes', help='Update notes')
@click.pass_obj
@handle_errors
@log_call
def orgs_edit(crm, org_id, name, status, priority, region, district, city, phone, email, rooms, notes):
    """Edit an organization (use options to set fields)"""
    updates = _updates(name=name, status=status, priority=priority, region=region, district=district,
                       city=city, phone=phone, email=email, nb_chambres=rooms, notes=notes)

    if not updates:
        click.echo("No updates specified. Use --name, --status, --region, --city, --email, ...", err=True)
        return

    if crm.update_organization(org_id, updates):
        click.echo(f"✓ Updated organization {org_id}")
    else:
        logger.warning(f"orgs_edit | org_id={org_id} not found")
        click.echo(f"Organization {org_id} not found", err=True)


@orgs.command('delete')
@click.argument('org_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def orgs_delete(crm, org_id, yes):
    """Delete an organization (contacts and contracts are kept)"""
    if not yes and not click.confirm(f"Delete organization {org_id}?"):
        click.echo("Cancelled.")
        return
    crm.delete_organization(org_id)
    click.echo(f"✓ Deleted organization {org_id}")


@orgs.command('import')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--dry-run', is_flag=True, help='Show the column mapping without importing')
@click.pass_obj
@handle_errors
@log_call
def orgs_import(crm, file, dry_run):
    """Import organizations from a CSV or Excel file"""
    rows = importer.read_rows(file)
    mapping = importer.auto_map_columns(list(rows[0].keys()))

    click.echo(f"\nRead {len(rows)} rows from {Path(file).name}")
    click.echo("\nColumn mapping:")
    for field_name, column in mapping.items():
        click.echo(f"  {column:<25} -> {field_name}")

    if dry_run:
        click.echo("\nDry run - nothing imported.")
        return

    if 'name' not in mapping:
        click.echo("Error: No column could be mapped to the organization name", err=True)
        raise SystemExit(1)

    result = importer.import_organizations(crm, importer.apply_mapping(rows, mapping))

    click.echo(f"\n{'='*80}")
    click.echo("IMPORT COMPLETE")
    click.echo(f"{'='*80}")
    click.echo(f"Imported:   {result.imported}")
    click.echo(f"Duplicates: {result.duplicates}")
    click.echo(f"Errors:     {len(result.errors)}")
    for error in result.errors:
        click.echo(f"  {error}", err=True)


# =============================================================================
# CONTACTS COMMANDS
# =============================================================================

@cli.group()
def contacts():
    """Manage contacts (people at organizations)"""
    pass


@contacts.command('list')
@click.option('--org', 'org_id', help='Only contacts of this organization')
@click.pass_obj
@handle_errors
@log_call
def contacts_list(crm, org_id):
    """List contacts"""
    results = crm.contacts_by_organization(org_id) if org_id else crm.list_contacts()

    if not results:
        click.echo("No contacts found.")
        return

    click.echo(f"\nFound {len(results)} contacts:\n")
    click.echo(f"{'ID':<12} {'Name':<25} {'Email':<28} {'Status':<14} {'Priority':<8}")
    click.echo("-" * 90)

    for c in results:
        click.echo(
            f"{c.id:<12} {c.full_name[:23]:<25} {(c.email or '')[:26]:<28} "
            f"{(c.prospect_status or '')[:13]:<14} {(c.priority or ''):<8}"
        )


@contacts.command('add')
@click.pass_obj
@handle_errors
@log_call
def contacts_add(crm):
    """Add a new contact (interactive)"""
    click.echo("\n=== ADD NEW CONTACT ===\n")

    org_id = _optional("Organization ID")
    full_name = click.prompt("Full name", type=str)
    role = _optional("Role")
    email = _prompt_email()
    phone = _optional("Phone")
    prospect_status = click.prompt(
        "Prospect status",
        type=click.Choice(list(PROSPECT_STATUSES), case_sensitive=False),
        default="not_contacted"
    )
    priority = click.prompt(
        "Priority",
        type=click.Choice(list(PRIORITIES), case_sensitive=False),
        default="medium"
    )
    notes = _optional("Notes")

    contact = Contact(
        organization_id=org_id,
        full_name=full_name,
        role=role,
        email=email,
        phone=phone,
        prospect_status=prospect_status,
        priority=priority,
        notes=notes,
        source='CLI'
    )

    created = crm.create_contact(contact)
    click.echo(f"\n✓ Created contact {created.id}: {full_name}")


@contacts.command('edit')
@click.argument('contact_id')
@click.option('--status', 'prospect_status', type=click.Choice(list(PROSPECT_STATUSES)), help='Update prospect status')
@click.option('--priority', type=click.Choice(list(PRIORITIES)), help='Update priority')
@click.option('--email', help='Update email')
@click.option('--phone', help='Update phone')
@click.option('--follow-up', 'next_follow_up_date', help='Next follow-up date (YYYY-MM-DD)')
@click.option('--notes', help='Update notes')
@click.pass_obj
@handle_errors
@log_call
def contacts_edit(crm, contact_id, prospect_status, priority, email, phone, next_follow_up_date, notes):
    """Edit a contact (use options to set fields)"""
    updates = _updates(prospect_status=prospect_status, priority=priority, email=email, phone=phone,
                       next_follow_up_date=next_follow_up_date, notes=notes)

    if not updates:
        click.echo("No updates specified. Use --status, --priority, --email, --phone, --follow-up or --notes", err=True)
        return

    if crm.update_contact(contact_id, updates):
        click.echo(f"✓ Updated contact {contact_id}")
    else:
        logger.warning(f"contacts_edit | contact_id={contact_id} not found")
        click.echo(f"Contact {contact_id} not found", err=True)


@contacts.command('delete')
@click.argument('contact_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def contacts_delete(crm, contact_id, yes):
    """Delete a contact"""
    if not yes and not click.confirm(f"Delete contact {contact_id}?"):
        click.echo("Cancelled.")
        return
    crm.delete_contact(contact_id)
    click.echo(f"✓ Deleted contact {contact_id}")


# =============================================================================
# APPOINTMENTS COMMANDS
# =============================================================================

@cli.group()
def appointments():
    """Manage appointments (meetings, calls, demos)"""
    pass


@appointments.command('list')
@click.option('--org', 'org_id', help='Only appointments with this organization (latest first)')
@click.option('--contact', 'contact_id', help='Only appointments with this contact')
@click.pass_obj
@handle_errors
@log_call
def appointments_list(crm, org_id, contact_id):
    """List appointments"""
    if contact_id:
        results = crm.appointments_by_contact(contact_id)
    elif org_id:
        results = crm.appointments_by_organization(org_id)
    else:
        results = crm.list_appointments()

    if not results:
        click.echo("No appointments found.")
        return

    click.echo(f"\nFound {len(results)} appointments:\n")
    click.echo(f"{'ID':<12} {'Date':<11} {'Time':<6} {'Title':<30} {'Type':<10} {'Status':<10}")
    click.echo("-" * 84)

    for a in results:
        click.echo(
            f"{a.id:<12} {(a.appointment_date or '')[:10]:<11} {(a.appointment_time or '')[:5]:<6} "
            f"{a.title[:28]:<30} {(a.type or '')[:9]:<10} {(a.status or ''):<10}"
        )


@appointments.command('add')
@click.pass_obj
@handle_errors
@log_call
def appointments_add(crm):
    """Schedule an appointment (interactive)"""
    click.echo("\n=== NEW APPOINTMENT ===\n")

    org_id = _optional("Organization ID")
    contact_id = _optional("Contact ID")
    title = click.prompt("Title", type=str)
    appointment_date = _prompt_date("Date (YYYY-MM-DD)", default=date.today())
    appointment_time = click.prompt("Time (HH:MM)", default="09:00")
    duration = click.prompt("Duration (minutes)", type=int, default=60)
    appt_type = click.prompt(
        "Type",
        type=click.Choice(list(APPOINTMENT_TYPES), case_sensitive=False),
        default="Meeting"
    )
    location = _optional("Location")
    description = _optional("Description")

    appt = Appointment(
        organization_id=org_id,
        contact_id=contact_id,
        title=title,
        description=description,
        appointment_date=appointment_date,
        appointment_time=appointment_time,
        duration=duration,
        location=location,
        type=appt_type,
        status='Scheduled',
        reminder=True
    )

    created = crm.create_appointment(appt)
    click.echo(f"\n✓ Created appointment {created.id}: {title} on {appointment_date}")


@appointments.command('edit')
@click.argument('appointment_id')
@click.option('--status', type=click.Choice(list(APPOINTMENT_STATUSES)), help='Update status')
@click.option('--date', 'appointment_date', help='Move to date (YYYY-MM-DD)')
@click.option('--time', 'appointment_time', help='Move to time (HH:MM)')
@click.option('--location', help='Update location')
@click.pass_obj
@handle_errors
@log_call
def appointments_edit(crm, appointment_id, status, appointment_date, appointment_time, location):
    """Edit an appointment (use options to set fields)"""
    updates = _updates(status=status, appointment_date=appointment_date,
                       appointment_time=appointment_time, location=location)

    if not updates:
        click.echo("No updates specified. Use --status, --date, --time or --location", err=True)
        return

    if crm.update_appointment(appointment_id, updates):
        click.echo(f"✓ Updated appointment {appointment_id}")
    else:
        logger.warning(f"appointments_edit | appointment_id={appointment_id} not found")
        click.echo(f"Appointment {appointment_id} not found", err=True)


@appointments.command('delete')
@click.argument('appointment_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def appointments_delete(crm, appointment_id, yes):
    """Delete an appointment"""
    if not yes and not click.confirm(f"Delete appointment {appointment_id}?"):
        click.echo("Cancelled.")
        return
    crm.delete_appointment(appointment_id)
    click.echo(f"✓ Deleted appointment {appointment_id}")


# =============================================================================
# CONTRACTS COMMANDS
# =============================================================================

@cli.group()
def contracts():
    """Manage contracts and their documents"""
    pass


@contracts.command('list')
@click.option('--org', 'org_id', help='Only contracts of this organization')
@click.option('--assignee', help='Only contracts assigned to this salesperson')
@click.pass_obj
@handle_errors
@log_call
def contracts_list(crm, org_id, assignee):
    """List contracts"""
    if org_id:
        results = crm.contracts_by_organization(org_id)
    elif assignee:
        results = crm.contracts_by_assignee(assignee)
    else:
        results = crm.list_contracts()

    if not results:
        click.echo("No contracts found.")
        return

    rows = dash.contract_display_rows(results, crm.list_organizations())

    click.echo(f"\nFound {len(rows)} contracts:\n")
    click.echo(f"{'ID':<16} {'Title':<26} {'Organization':<24} {'Status':<10} {'Assigned':<16} {'Docs':>4}")
    click.echo("-" * 100)

    for r in rows:
        click.echo(
            f"{r['id']:<16} {r['title'][:24]:<26} {r['organization'][:22]:<24} "
            f"{(r['status'] or '')[:9]:<10} {(r['assigned_to'] or '')[:15]:<16} {r['documents']:>4}"
        )


@contracts.command('add')
@click.pass_obj
@handle_errors
@log_call
def contracts_add(crm):
    """Create a contract (interactive)"""
    click.echo("\n=== NEW CONTRACT ===\n")

    org_id = click.prompt("Organization ID", type=str)
    title = click.prompt("Title", type=str)
    description = _optional("Description")
    value = click.prompt("Value", type=float, default=0.0)
    currency = click.prompt("Currency", default="MUR")
    status = click.prompt(
        "Status",
        type=click.Choice(list(CONTRACT_STATUSES), case_sensitive=False),
        default="draft"
    )
    team = crm.salesperson_names()
    if team:
        assigned_to = click.prompt("Assigned to", type=click.Choice(team), default=team[0])
    else:
        logger.debug("contracts_add | no salespeople on file, free text assignee")
        assigned_to = _optional("Assigned to")

    contract = Contract(
        organization_id=org_id,
        title=title,
        description=description,
        value=value,
        currency=currency,
        status=status,
        assigned_to=assigned_to
    )

    created = crm.create_contract(contract)
    click.echo(f"\n✓ Created contract {created.id}: {title}")


@contracts.command('edit')
@click.argument('contract_id')
@click.option('--status', type=click.Choice(list(CONTRACT_STATUSES)), help='Update status')
@click.option('--value', type=float, help='Update value')
@click.option('--assignee', 'assigned_to', help='Reassign to a salesperson')
@click.option('--signed', 'signed_date', help='Signature date (YYYY-MM-DD)')
@click.option('--notes', help='Update notes')
@click.pass_obj
@handle_errors
@log_call
def contracts_edit(crm, contract_id, status, value, assigned_to, signed_date, notes):
    """Edit a contract (use options to set fields)"""
    updates = _updates(status=status, value=value, assigned_to=assigned_to,
                       signed_date=signed_date, notes=notes)

    if not updates:
        click.echo("No updates specified. Use --status, --value, --assignee, --signed or --notes", err=True)
        return

    if crm.update_contract(contract_id, updates):
        click.echo(f"✓ Updated contract {contract_id}")
    else:
        logger.warning(f"contracts_edit | contract_id={contract_id} not found")
        click.echo(f"Contract {contract_id} not found", err=True)


@contracts.command('delete')
@click.argument('contract_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def contracts_delete(crm, contract_id, yes):
    """Delete a contract"""
    if not yes and not click.confirm(f"Delete contract {contract_id}?"):
        click.echo("Cancelled.")
        return
    crm.delete_contract(contract_id)
    click.echo(f"✓ Deleted contract {contract_id}")


@contracts.command('attach')
@click.argument('contract_id')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
@handle_errors
@log_call
def contracts_attach(crm, contract_id, file):
    """Attach a document to a contract"""
    updated = crm.attach_contract_document(contract_id, file)
    if updated is None:
        click.echo(f"Contract {contract_id} not found", err=True)
        raise SystemExit(1)
    click.echo(f"✓ Attached {Path(file).name} to contract {contract_id} ({len(updated.documents)} document(s))")


@contracts.command('download')
@click.argument('contract_id')
@click.option('--index', default=1, show_default=True, help='Which document (1 = first)')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Where to save (default: document name)')
@click.pass_obj
@handle_errors
@log_call
def contracts_download(crm, contract_id, index, output):
    """Save one of a contract's documents to disk"""
    contract = crm.get_contract(contract_id)
    if contract is None:
        click.echo(f"Contract {contract_id} not found", err=True)
        raise SystemExit(1)
    if not 1 <= index <= len(contract.documents):
        click.echo(f"Contract {contract_id} has {len(contract.documents)} document(s)", err=True)
        raise SystemExit(1)

    doc = contract.documents[index - 1]
    content = crm.download_contract_document(doc)
    target = Path(output or doc.name)
    target.write_bytes(content)
    click.echo(f"✓ Saved {doc.name} ({len(content)} bytes) to {target}")


# =============================================================================
# DOCUMENTS COMMANDS
# =============================================================================

@cli.group()
def documents():
    """Manage shared sales documents"""
    pass


@documents.command('list')
@click.option('--category', type=click.Choice(list(DOCUMENT_CATEGORIES)), help='Filter by category')
@click.option('--sub-category', help='Filter by sub-category')
@click.pass_obj
@handle_errors
@log_call
def documents_list(crm, category, sub_category):
    """List active documents"""
    if category:
        results = crm.documents_by_category(category)
    elif sub_category:
        results = crm.documents_by_sub_category(sub_category)
    else:
        results = crm.list_documents()

    if not results:
        click.echo("No documents found.")
        return

    click.echo(f"\nFound {len(results)} documents:\n")
    click.echo(f"{'ID':<16} {'Title':<30} {'Category':<26} {'File':<24} {'v':>3}")
    click.echo("-" * 103)

    for d in results:
        click.echo(
            f"{d.id:<16} {d.title[:28]:<30} {(d.category or '')[:25]:<26} "
            f"{d.file_name[:22]:<24} {d.version:>3}"
        )


@documents.command('add')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.option('--title', required=True, help='Document title')
@click.option('--category', type=click.Choice(list(DOCUMENT_CATEGORIES)), required=True)
@click.option('--sub-category', help='Sub-category (e.g. hotel, restaurant)')
@click.option('--description', help='Short description')
@click.pass_obj
@handle_errors
@log_call
def documents_add(crm, file, title, category, sub_category, description):
    """Upload a file and register it as a document"""
    stored = crm.upload_document_file(file)
    doc = crm.create_document(CRMDocument(
        title=title,
        description=description,
        category=category,
        sub_category=sub_category,
        **stored
    ))
    click.echo(f"✓ Created document {doc.id}: {title} ({stored['file_path']})")


@documents.command('delete')
@click.argument('document_id')
@click.option('--purge-file', 'file_path', help='Also remove this file from storage')
@click.pass_obj
@handle_errors
@log_call
def documents_delete(crm, document_id, file_path):
    """Archive a document (it stays in the database, marked inactive)"""
    crm.delete_document(document_id)
    if file_path:
        crm.delete_document_file(file_path)
    click.echo(f"✓ Archived document {document_id}")


# =============================================================================
# USERS COMMANDS
# =============================================================================

ROLES = ('admin', 'salesperson')


@cli.group()
def users():
    """Manage admins and salespeople"""
    pass


@users.command('list')
@click.option('--role', type=click.Choice(ROLES), help='Only this role')
@click.pass_obj
@handle_errors
@log_call
def users_list(crm, role):
    """List admins and salespeople"""
    rows = []
    if role in (None, 'admin'):
        rows += [(a.id, 'admin', a.full_name, a.email, '') for a in crm.list_admins()]
    if role in (None, 'salesperson'):
        rows += [(c.id, 'salesperson', c.full_name, c.email, c.region) for c in crm.list_commerciaux()]

    if not rows:
        click.echo("No users found.")
        return

    click.echo(f"\nFound {len(rows)} users:\n")
    click.echo(f"{'ID':<14} {'Role':<12} {'Name':<26} {'Email':<28} {'Region':<8}")
    click.echo("-" * 92)
    for user_id, user_role, name, email, region in rows:
        click.echo(
            f"{user_id:<14} {user_role:<12} {(name or '')[:24]:<26} "
            f"{(email or '')[:26]:<28} {(region or '')[:7]:<8}"
        )


@users.command('add')
@click.option('--role', type=click.Choice(ROLES), default='salesperson', show_default=True)
@click.pass_obj
@handle_errors
@log_call
def users_add(crm, role):
    """Create an admin or a salesperson (interactive)"""
    click.echo(f"\n=== NEW {role.upper()} ===\n")

    full_name = click.prompt("Full name", default="", show_default=False)
    email = _prompt_email()

    if role == 'admin':
        created = crm.create_admin(Admin(full_name=full_name, email=email))
    else:
        region = _optional(f"Region ({'/'.join(REGIONS)})")
        created = crm.create_commercial(Commercial(
            full_name=full_name,
            email=email,
            phone=_optional("Phone"),
            region=region.capitalize() if region else None,
            notes=_optional("Notes"),
        ))

    click.echo(f"\n✓ Created {role} {created.id}: {created.full_name or created.email}")


@users.command('delete')
@click.argument('user_id')
@click.option('--role', type=click.Choice(ROLES), required=True)
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def users_delete(crm, user_id, role, yes):
    """Delete an admin or a salesperson"""
    if not yes and not click.confirm(f"Delete {role} {user_id}?"):
        click.echo("Cancelled.")
        return
    if role == 'admin':
        crm.delete_admin(user_id)
    else:
        crm.delete_commercial(user_id)
    click.echo(f"✓ Deleted {role} {user_id}")


# =============================================================================
# DEALS / DASHBOARD / DEMO
# =============================================================================

@cli.group()
def deals():
    """Sales opportunities"""
    pass


@deals.command('list')
@click.pass_obj
@handle_errors
@log_call
def deals_list(crm):
    """List deals"""
    results = crm.list_deals()

    if not results:
        click.echo("No deals found.")
        return

    click.echo(f"\nFound {len(results)} deals:\n")
    click.echo(f"{'ID':<16} {'Title':<30} {'Stage':<14} {'Value':>12} {'Prob':>5}")
    click.echo("-" * 81)

    for d in results:
        value = f"{d.value:,.0f}" if d.value is not None else ''
        prob = f"{d.probability}%" if d.probability is not None else ''
        click.echo(f"{d.id:<16} {d.title[:28]:<30} {(d.stage or '')[:13]:<14} {value:>12} {prob:>5}")


@cli.command('dashboard')
@click.pass_obj
@handle_errors
@log_call
def dashboard(crm):
    """Portfolio overview by zone, district and sector"""
    orgs_found = crm.list_organizations()
    appts = crm.list_appointments()
    found_contracts = crm.list_contracts()
    stats = dash.compute_stats(orgs_found, appts, found_contracts)

    click.echo(f"\n{'='*80}")
    click.echo(f"DASHBOARD ({crm.mode} mode)")
    click.echo(f"{'='*80}")
    click.echo(f"Organizations: {stats.total_organizations}")
    click.echo(f"  Active:      {stats.active_organizations}")
    click.echo(f"  Prospects:   {stats.prospect_organizations}")
    click.echo(f"Total rooms:   {stats.total_rooms}")
    click.echo(f"Appointments:  {stats.total_appointments}")
    click.echo(f"Contracts:     {stats.total_contracts}")

    click.echo("\nBy zone:")
    for g in dash.geographical_groups(orgs_found):
        click.echo(f"  {g.label:<12} {g.count:>4}  {g.percentage:>3}%")

    click.echo("\nBy district:")
    for g in dash.district_groups(orgs_found):
        click.echo(f"  {g.label[:20]:<20} {g.count:>4}  ({g.zone or '-'})")

    click.echo("\nBy sector:")
    for g in dash.sector_groups(orgs_found):
        click.echo(f"  {g.label[:20]:<20} {g.count:>4}  {g.percentage:>3}%")

    counts = dash.related_counts(orgs_found, appts, found_contracts)
    click.echo("\nActivity by organization:")
    click.echo(f"  {'Name':<30} {'Appts':>5} {'Contracts':>9}")
    for o in sorted(orgs_found, key=lambda o: (o.name or '').lower()):
        c = counts[o.id]
        click.echo(f"  {(o.name or '')[:30]:<30} {c['appointments']:>5} {c['contracts']:>9}")
    click.echo()


@cli.group()
def demo():
    """Demo store maintenance"""
    pass


@demo.command('load')
@click.pass_obj
@handle_errors
@log_call
def demo_load(crm):
    """Overwrite the demo store with sample data"""
    crm.load_demo_data()
    click.echo("✓ Demo data loaded")


@demo.command('reset')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@click.pass_obj
@handle_errors
@log_call
def demo_reset(crm, yes):
    """Forget all demo records (sample data returns on next read)"""
    if not yes and not click.confirm("Erase the demo store?"):
        click.echo("Cancelled.")
        return
    crm.reset_demo_data()
    click.echo("✓ Demo store cleared")


# =============================================================================
# MAIN
# =============================================================================

if __name__ == '__main__':
    cli()
