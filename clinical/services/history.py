"""Per-patient illness and allergy records."""
import logging

from django.db import IntegrityError, transaction

from clinical.exceptions import (
    CatalogEntryNotFound,
    DuplicateEntry,
    InvalidInput,
    PatientNotFound,
)
from clinical.models import PatientAllergy, PatientIllness
from clinical.services import directory
from clinical.services.dates import as_date

logger = logging.getLogger(__name__)


def _patient(patient_id):
    patient = directory.get('patient', patient_id)
    if patient is None:
        raise PatientNotFound(patient_id=patient_id)
    return patient


def _catalog_entry(kind: str, label: str, code):
    if not code:
        raise InvalidInput(f'{label} code is required.', field=f'{kind}Code')
    entry = directory.get_by_code(kind, code)
    if entry is None:
        raise CatalogEntryNotFound(f"{label} with code '{code}' not found.", catalog=kind, code=code)
    return entry


def add_illness(*, patient_id, illness_code, diagnosed_date=None) -> PatientIllness:
    patient = _patient(patient_id)
    illness = _catalog_entry('illness', 'Illness', illness_code)
    diagnosed = as_date(diagnosed_date, 'diagnosedDate') if diagnosed_date else None

    try:
        with transaction.atomic():
            record = PatientIllness.objects.create(
                patient=patient, illness=illness, diagnosed_date=diagnosed,
            )
    except IntegrityError as exc:
        raise DuplicateEntry(
            'Patient already diagnosed with this illness.',
            patient_id=patient.id, code=illness.code,
        ) from exc

    logger.info('illness recorded patient_id=%s code=%s', patient.id, illness.code)
    return record


def add_allergy(*, patient_id, allergy_code) -> PatientAllergy:
    patient = _patient(patient_id)
    allergy = _catalog_entry('allergy', 'Allergy', allergy_code)

    try:
        with transaction.atomic():
            record = PatientAllergy.objects.create(patient=patient, allergy=allergy)
    except IntegrityError as exc:
        raise DuplicateEntry(
            'Patient already has this allergy recorded.',
            patient_id=patient.id, code=allergy.code,
        ) from exc

    logger.info('allergy recorded patient_id=%s code=%s', patient.id, allergy.code)
    return record


def medical_history(patient_id) -> dict:
    patient = _patient(patient_id)
    illnesses = [
        {
            'code': r.illness.code,
            'description': r.illness.description,
            'diagnosedDate': r.diagnosed_date.isoformat() if r.diagnosed_date else None,
        }
        for r in patient.illnesses.select_related('illness').order_by('illness__code')
    ]
    allergies = [
        {'code': r.allergy.code, 'name': r.allergy.name}
        for r in patient.allergies.select_related('allergy').order_by('allergy__code')
    ]
    return {
        'patientId': patient.id,
        'patientName': patient.name,
        'illnesses': illnesses,
        'allergies': allergies,
    }


def list_catalog(kind: str) -> list[dict]:
    """Illness or allergy catalog as ``code``/``name`` rows."""
    if kind == 'illness':
        return [{'code': e.code, 'name': e.description} for e in sorted(directory.find('illness'), key=lambda e: e.code)]
    if kind == 'allergy':
        return [{'code': e.code, 'name': e.name} for e in sorted(directory.find('allergy'), key=lambda e: e.code)]
    raise InvalidInput(f"Unknown catalog '{kind}'.", field='catalog', value=kind)
