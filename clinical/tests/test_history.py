import datetime as dt

import pytest

from clinical.exceptions import CatalogEntryNotFound, DuplicateEntry, InvalidInput, PatientNotFound
from clinical.models import PatientAllergy, PatientIllness
from clinical.services import history

pytestmark = pytest.mark.django_db


def test_add_illness(patient, catalogs):
    rec = history.add_illness(patient_id=patient.id, illness_code='FLU001', diagnosed_date='2024-07-30')
    assert rec.diagnosed_date == dt.date(2024, 7, 30)
    assert PatientIllness.objects.filter(patient=patient).count() == 1


def test_unknown_illness_code(patient, catalogs):
    with pytest.raises(CatalogEntryNotFound) as exc:
        history.add_illness(patient_id=patient.id, illness_code='NOPE')
    assert exc.value.message == "Illness with code 'NOPE' not found."
    assert not PatientIllness.objects.exists()


def test_duplicate_illness(patient, catalogs):
    history.add_illness(patient_id=patient.id, illness_code='FLU001')
    with pytest.raises(DuplicateEntry):
        history.add_illness(patient_id=patient.id, illness_code='FLU001')
    assert PatientIllness.objects.filter(patient=patient).count() == 1


def test_missing_code(patient, catalogs):
    with pytest.raises(InvalidInput):
        history.add_illness(patient_id=patient.id, illness_code='')


def test_unknown_patient(catalogs):
    with pytest.raises(PatientNotFound):
        history.add_allergy(patient_id=999, allergy_code='PNCL01')


def test_allergies(patient, other_patient, catalogs):
    history.add_allergy(patient_id=patient.id, allergy_code='PNCL01')
    history.add_allergy(patient_id=other_patient.id, allergy_code='PNCL01')
    with pytest.raises(DuplicateEntry):
        history.add_allergy(patient_id=patient.id, allergy_code='PNCL01')
    with pytest.raises(CatalogEntryNotFound):
        history.add_allergy(patient_id=patient.id, allergy_code='XXX')
    assert PatientAllergy.objects.count() == 2


def test_medical_history(patient, catalogs):
    history.add_illness(patient_id=patient.id, illness_code='HYP001')
    history.add_illness(patient_id=patient.id, illness_code='FLU001', diagnosed_date='2024-01-02')
    history.add_allergy(patient_id=patient.id, allergy_code='ALR001')

    h = history.medical_history(patient.id)
    assert h['patientName'] == 'John Doe'
    assert [i['code'] for i in h['illnesses']] == ['FLU001', 'HYP001']
    assert h['illnesses'][0]['diagnosedDate'] == '2024-01-02'
    assert h['illnesses'][1]['diagnosedDate'] is None
    assert h['allergies'] == [{'code': 'ALR001', 'name': 'Pollen'}]


def test_catalog_listing(catalogs):
    assert [e['code'] for e in history.list_catalog('allergy')] == ['ALR001', 'PNCL01']
    assert history.list_catalog('illness')[0] == {'code': 'FLU001', 'name': 'Influenza'}
    with pytest.raises(InvalidInput):
        history.list_catalog('drugs')
