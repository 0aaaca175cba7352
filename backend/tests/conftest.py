# backend/tests/conftest.py
"""
Fixture bersama untuk test gudang.

Menyediakan:
- user per role (staff gudang, supervisor, admin, staf lembar kerja)
- APIClient yang sudah membawa header `Authorization: Bearer <token>`
- master barang dan helper pembuat barang masuk
"""
import pytest
from django.utils import timezone
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

from gudang import services
from gudang.models import Barang
from users.models import CustomUser


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def buat_user(username, role, password='rahasia123', **extra):
    return CustomUser.objects.create_user(
        username=username, password=password, name=username.title(), role=role, **extra
    )


def client_untuk(user):
    client = APIClient()
    token, _ = Token.objects.get_or_create(user=user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token.key}')
    return client


def data_barang_masuk(kode='KD001', no_form='F001', details=None, tanggal=None, **extra):
    data = {
        'tanggal': (tanggal or timezone.localdate()).isoformat(),
        'kodeKedatangan': kode,
        'namaSupplier': 'PT Sumber Makmur',
        'noForm': no_form,
        'details': details if details is not None else [{'namaBarang': 'Kompresor Angin', 'jumlah': 5}],
    }
    data.update(extra)
    return data


# ---------------------------------------------------------------------------
# Fixtures: users & clients
# ---------------------------------------------------------------------------

@pytest.fixture
def staff_gudang(db):
    return buat_user('gudang1', CustomUser.Role.STAFF_GUDANG)


@pytest.fixture
def supervisor(db):
    return buat_user('spv1', CustomUser.Role.SUPERVISOR, job_type=CustomUser.JobType.SUPERVISOR)


@pytest.fixture
def admin_user(db):
    return buat_user('admin1', CustomUser.Role.ADMIN, job_type=CustomUser.JobType.ADMIN)


@pytest.fixture
def qc_staff(db):
    return buat_user('qc1', CustomUser.Role.QC)


@pytest.fixture
def staff_pindah(db):
    return buat_user('pindah1', CustomUser.Role.PINDAH_LOKASI)


@pytest.fixture
def client_gudang(staff_gudang):
    return client_untuk(staff_gudang)


@pytest.fixture
def client_spv(supervisor):
    return client_untuk(supervisor)


@pytest.fixture
def client_admin(admin_user):
    return client_untuk(admin_user)


@pytest.fixture
def client_qc(qc_staff):
    return client_untuk(qc_staff)


@pytest.fixture
def client_pindah(staff_pindah):
    return client_untuk(staff_pindah)


@pytest.fixture
def anon_client():
    return APIClient()


# ---------------------------------------------------------------------------
# Fixtures: data gudang
# ---------------------------------------------------------------------------

@pytest.fixture
def kompresor(db):
    return Barang.objects.create(kode='BRG-001', nama='Kompresor Angin', satuan='unit')


@pytest.fixture
def genset(db):
    return Barang.objects.create(kode='BRG-002', nama='Genset 5000W', satuan='unit')


@pytest.fixture
def barang_masuk_kd001(kompresor, staff_gudang):
    """KD001/F001: 5 unit Kompresor Angin, nomor seri 0000001-0000005."""
    return services.create_barang_masuk(data_barang_masuk(), staff_gudang)

