"""
Demo seed records.
Written to the local store the first time an entity is read in demo mode.
"""

import copy
from typing import Any, Dict, List

_SEED: Dict[str, List[Dict[str, Any]]] = {
    'organizations': [
        {
            'id': 'demo-org-1',
            'name': 'Hôtel Le Grand Mauricien',
            'industry': 'Hôtellerie',
            'category': '4 étoiles',
            'region': 'Ouest',
            'zone_geographique': 'Côte ouest',
            'district': 'Port Louis',
            'city': 'Port Louis',
            'address': '123 Royal Street, Port Louis',
            'secteur': 'Tourisme',
            'website': 'https://legrandmauricien.mu',
            'nb_chambres': 120,
            'phone': '+230 123 4567',
            'email': 'contact@legrandmauricien.mu',
            'contact_principal': 'Marie Lagesse',
            'notes': 'Hôtel de luxe au centre-ville avec vue sur le port',
            'status': 'active',
            'priority': 'high',
            'prospect_status': 'converted',
            'created_at': '2024-01-15T10:00:00Z',
            'updated_at': '2024-01-15T10:00:00Z',
        },
        {
            'id': 'demo-org-2',
            'name': 'Resort Tropical Paradise',
            'industry': 'Hôtellerie',
            'category': '5 étoiles',
            'region': 'Nord',
            'zone_geographique': 'Grand Baie',
            'district': 'Rivière du Rempart',
            'city': 'Grand Baie',
            'address': '456 Coastal Road, Grand Baie',
            'secteur': 'Tourisme',
            'website': 'https://tropicalparadise.mu',
            'nb_chambres': 200,
            'phone': '+230 987 6543',
            'email': 'info@tropicalparadise.mu',
            'contact_principal': 'Jean Dupont',
            'notes': 'Resort de luxe en bord de mer avec spa',
            'status': 'prospect',
            'priority': 'medium',
            'prospect_status': 'warm',
            'created_at': '2024-01-20T14:30:00Z',
            'updated_at': '2024-01-20T14:30:00Z',
        },
    ],
    'contacts': [
        {
            'id': 'demo-contact-1',
            'organization_id': 'demo-org-1',
            'full_name': 'Marie Lagesse',
            'role': 'Directrice Générale',
            'email': 'marie.lagesse@legrandmauricien.mu',
            'phone': '+230 123 4567',
            'mobile_phone': '+230 5123 4567',
            'consent_marketing': True,
            'notes': 'Très intéressée par nos solutions CRM',
            'last_contact_date': '2024-03-01T10:00:00Z',
            'next_follow_up_date': '2024-03-15T10:00:00Z',
            'appointment_history': [],
            'prospect_status': 'hot',
            'priority': 'high',
            'source': 'Référence',
            'created_at': '2024-02-15T10:00:00Z',
            'updated_at': '2024-03-01T10:00:00Z',
        },
        {
            'id': 'demo-contact-2',
            'organization_id': 'demo-org-2',
            'full_name': 'Jean Dupont',
            'role': 'Directeur Commercial',
            'email': 'jean.dupont@tropicalparadise.mu',
            'phone': '+230 987 6543',
            'consent_marketing': False,
            'appointment_history': [],
            'prospect_status': 'cold',
            'priority': 'medium',
            'source': 'Salon professionnel',
            'created_at': '2024-02-10T09:00:00Z',
            'updated_at': '2024-02-10T09:00:00Z',
        },
    ],
    'appointments': [
        {
            'id': 'demo-apt-1',
            'organization_id': 'demo-org-1',
            'contact_id': 'demo-contact-1',
            'title': 'Présentation solution CRM',
            'description': 'Démonstration des fonctionnalités principales',
            'appointment_date': '2024-03-15',
            'appointment_time': '10:00',
            'duration': 60,
            'location': 'Hôtel Le Grand Mauricien',
            'city': 'Port Louis',
            'region': 'Ouest',
            'type': 'Meeting',
            'status': 'Scheduled',
            'reminder': True,
            'created_at': '2024-03-01T10:00:00Z',
            'updated_at': '2024-03-01T10:00:00Z',
        },
        {
            'id': 'demo-apt-2',
            'organization_id': 'demo-org-2',
            'contact_id': 'demo-contact-2',
            'title': 'Appel de qualification',
            'appointment_date': '2024-03-20',
            'appointment_time': '14:30',
            'duration': 30,
            'location': 'Téléphone',
            'city': 'Grand Baie',
            'region': 'Nord',
            'type': 'Call',
            'status': 'Completed',
            'reminder': False,
            'created_at': '2024-03-05T08:00:00Z',
            'updated_at': '2024-03-20T15:00:00Z',
        },
    ],
    'contracts': [
        {
            'id': 'demo-contract-1',
            'organization_id': 'demo-org-1',
            'contact_id': 'demo-contact-1',
            'title': 'Contrat CRM Hôtel Le Grand Mauricien',
            'description': 'Solution CRM complète pour la gestion hôtelière',
            'value': 15000,
            'currency': 'MUR',
            'status': 'sent',
            'assigned_to': 'Marie Lagesse',
            'documents': [],
            'notes': 'Contrat envoyé suite à la démonstration',
            'created_at': '2024-03-01T00:00:00Z',
            'updated_at': '2024-03-01T00:00:00Z',
        },
        {
            'id': 'demo-contract-2',
            'organization_id': 'demo-org-2',
            'title': 'Contrat CRM Resort Tropical Paradise',
            'description': 'Module réservations et fidélité',
            'value': 22000,
            'currency': 'MUR',
            'status': 'draft',
            'assigned_to': 'Jean Dupont',
            'documents': [],
            'created_at': '2024-03-22T00:00:00Z',
            'updated_at': '2024-03-22T00:00:00Z',
        },
    ],
    'deals': [
        {
            'id': 'demo-deal-1',
            'organization_id': 'demo-org-1',
            'title': 'CRM Solution - Hôtel Le Grand Mauricien',
            'value': 25000,
            'stage': 'proposal',
            'probability': 75,
            'expected_close_date': '2024-04-15',
            'created_at': '2024-03-01T10:00:00Z',
            'updated_at': '2024-03-01T10:00:00Z',
        },
        {
            'id': 'demo-deal-2',
            'organization_id': 'demo-org-2',
            'title': 'Extension spa - Resort Tropical Paradise',
            'value': 8000,
            'stage': 'qualification',
            'probability': 30,
            'expected_close_date': '2024-06-30',
            'created_at': '2024-03-10T10:00:00Z',
            'updated_at': '2024-03-10T10:00:00Z',
        },
    ],
    'activities': [
        {
            'id': 'demo-activity-1',
            'organization_id': 'demo-org-1',
            'contact_id': 'demo-contact-1',
            'type': 'email',
            'title': 'Envoi de la proposition',
            'date': '2024-03-01',
            'completed': True,
            'created_at': '2024-03-01T11:00:00Z',
            'updated_at': '2024-03-01T11:00:00Z',
        },
        {
            'id': 'demo-activity-2',
            'organization_id': 'demo-org-2',
            'type': 'task',
            'title': 'Préparer la démonstration',
            'date': '2024-03-25',
            'completed': False,
            'created_at': '2024-03-20T09:00:00Z',
            'updated_at': '2024-03-20T09:00:00Z',
        },
    ],
    'crm_documents': [
        {
            'id': 'demo-doc-1',
            'title': 'Présentation CRM Hôtellerie Maurice',
            'description': 'Présentation commerciale adaptée au secteur hôtelier mauricien',
            'file_name': 'crm_hotels_maurice.pdf',
            'file_path': 'demo/crm_hotels_maurice.pdf',
            'file_size': 2850000,
            'mime_type': 'application/pdf',
            'category': 'presentation_commerciale',
            'sub_category': 'hotel',
            'version': 1,
            'is_active': True,
            'uploaded_by': 'demo-user',
            'created_at': '2024-01-15T10:00:00Z',
            'updated_at': '2024-01-15T10:00:00Z',
        },
        {
            'id': 'demo-doc-2',
            'title': 'Modèle de contrat standard',
            'file_name': 'contrat_standard.docx',
            'file_path': 'demo/contrat_standard.docx',
            'file_size': 48000,
            'mime_type': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
            'category': 'contrat',
            'sub_category': 'standard',
            'version': 2,
            'is_active': True,
            'uploaded_by': 'demo-user',
            'created_at': '2024-02-01T10:00:00Z',
            'updated_at': '2024-02-12T16:00:00Z',
        },
    ],
    'admins': [
        {
            'id': 'demo-admin-1',
            'user_id': 'demo-user-1',
            'email': 'admin@crm.mu',
            'full_name': 'Administrateur Principal',
            'created_at': '2024-01-01T00:00:00Z',
            'updated_at': '2024-01-01T00:00:00Z',
        },
    ],
    'commerciaux': [
        {
            'id': 'demo-comm-2',
            'email': 'jean.dupont@crm.mu',
            'full_name': 'Jean Dupont',
            'phone': '+230 5234 5678',
            'region': 'Ouest',
            'notes': 'Resorts et hôtels de la côte ouest',
            'created_at': '2024-01-10T00:00:00Z',
            'updated_at': '2024-01-10T00:00:00Z',
        },
        {
            'id': 'demo-comm-1',
            'email': 'marie.lagesse@crm.mu',
            'full_name': 'Marie Lagesse',
            'phone': '+230 5123 4567',
            'region': 'Nord',
            'notes': "Spécialisée dans l'hôtellerie de luxe à Maurice",
            'created_at': '2024-01-05T00:00:00Z',
            'updated_at': '2024-01-05T00:00:00Z',
        },
    ],
}

SEEDED_TABLES = tuple(_SEED)


def initial_records(table: str) -> List[Dict[str, Any]]:
    """Fresh copy of the seed rows for a table (empty list if none)."""
    return copy.deepcopy(_SEED.get(table, []))
