# backend/tests/test_barang_keluar.py
"""
Barang keluar: jumlah tersedia per nomor seri, approval/penolakan,
serta pengembalian stok saat ditolak, diubah, atau dihapus.
"""
import re

import pytest
from django.utils import timezone

from gudang import services
from gudang.exceptions import NotFoundError, ValidationError
from gudang.models import Barang, BarangKeluar, DetailBarangKeluar, DetailBarangMasukNoSeri

from .conftest import data_barang_masuk

pytestmark = pytest.mark.django_db


# ---------------------------------------------------------------------------
# Helpers / Fixtures
# ---------------------------------------------------------------------------

def data_keluar(*items, tujuan='Cabang Bekasi'):
    return {
        'tanggal': '2024-05-02',
        'tujuan': tujuan,
        'deliveryNo': 'DO-17',
        'shipVia': 'Truk',
        'items': list(items),
    }


def stok(barang):
    return Barang.objects.get(pk=barang.pk).stok


@pytest.fixture
def unit_lima(kompresor, staff_gudang):
    """Satu nomor seri dengan jumlah 5."""
    services.create_barang_masuk(
        data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 5, 'units': [{'jumlah': 5}]}]),
        staff_gudang,
    )
    return DetailBarangMasukNoSeri.objects.get()


# ---------------------------------------------------------------------------
# Jumlah tersedia
# ---------------------------------------------------------------------------

class TestJumlahTersedia:

    def test_melebihi_tersedia_ditolak_tanpa_menulis(self, unit_lima, kompresor, staff_gudang):
        with pytest.raises(ValidationError) as excinfo:
            services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 6}), staff_gudang)

        assert 'melebihi stok tersedia (maksimal 5)' in excinfo.value.message
        assert excinfo.value.title == 'Jumlah Melebihi Stok'
        assert not BarangKeluar.objects.exists()
        assert stok(kompresor) == 5

    def test_baris_untuk_unit_sama_dijumlahkan(self, unit_lima, staff_gudang):
        items = [{'noSeri': unit_lima.no_seri, 'qty': 3}, {'detailBarangMasukNoSeriId': unit_lima.pk, 'qty': 3}]
        # id dan noSeri dianggap kunci berbeda, tapi tetap diperiksa terhadap sisa setelah baris pertama
        with pytest.raises(ValidationError, match='maksimal 2'):
            services.create_barang_keluar(data_keluar(*items), staff_gudang)

        items = [{'noSeri': unit_lima.no_seri, 'qty': 3}, {'noSeri': unit_lima.no_seri, 'qty': 3}]
        with pytest.raises(ValidationError, match='maksimal 5'):
            services.create_barang_keluar(data_keluar(*items), staff_gudang)

    def test_create_mengurangi_stok_dan_tersedia(self, unit_lima, kompresor, staff_gudang):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 3}), staff_gudang)

        assert barang_keluar.status == BarangKeluar.Status.PENDING
        assert re.match(r'^BK\d{8}001$', barang_keluar.no_transaksi)
        assert stok(kompresor) == 2
        assert services.available_quantity(unit_lima) == 2

    def test_nomor_transaksi_berurutan(self, unit_lima, staff_gudang):
        pertama = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 1}), staff_gudang)
        kedua = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 1}), staff_gudang)
        assert int(kedua.no_transaksi[-3:]) == int(pertama.no_transaksi[-3:]) + 1

    def test_nomor_transaksi_setelah_seribu(self, unit_lima, staff_gudang):
        prefix = f"BK{timezone.localdate().strftime('%Y%m%d')}"
        BarangKeluar.objects.create(no_transaksi=f'{prefix}999', tanggal='2024-05-02', tujuan='Cabang Bekasi')
        BarangKeluar.objects.create(no_transaksi=f'{prefix}1000', tanggal='2024-05-02', tujuan='Cabang Bekasi')

        baru = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 1}), staff_gudang)
        assert baru.no_transaksi == f'{prefix}1001'

    def test_nomor_seri_tidak_ada(self, unit_lima, staff_gudang):
        with pytest.raises(ValidationError, match='9999999 tidak ditemukan'):
            services.create_barang_keluar(data_keluar({'noSeri': '9999999', 'qty': 1}), staff_gudang)

    def test_barang_tidak_cocok(self, unit_lima, genset, staff_gudang):
        with pytest.raises(ValidationError, match='bukan milik barang'):
            services.create_barang_keluar(
                data_keluar({'noSeri': unit_lima.no_seri, 'qty': 1, 'barangId': genset.pk}), staff_gudang,
            )

    def test_detail_wajib_diisi(self, staff_gudang):
        with pytest.raises(ValidationError, match='Detail barang wajib diisi'):
            services.create_barang_keluar(data_keluar(), staff_gudang)


# ---------------------------------------------------------------------------
# Approval, update, delete
# ---------------------------------------------------------------------------

class TestProsesBarangKeluar:

    def test_reject_mengembalikan_stok_dan_unit(self, unit_lima, kompresor, staff_gudang, supervisor):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 3}), staff_gudang)
        services.proses_barang_keluar(barang_keluar.pk, 'reject', supervisor)

        barang_keluar.refresh_from_db()
        assert barang_keluar.status == BarangKeluar.Status.REJECTED
        assert barang_keluar.approved_by == supervisor
        assert stok(kompresor) == 5
        assert services.available_quantity(unit_lima) == 5

    def test_approve_hanya_sekali(self, unit_lima, kompresor, staff_gudang, supervisor):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 2}), staff_gudang)
        services.proses_barang_keluar(barang_keluar.pk, 'approve', supervisor)
        assert stok(kompresor) == 3

        with pytest.raises(ValidationError, match='sudah diproses'):
            services.proses_barang_keluar(barang_keluar.pk, 'reject', supervisor)
        with pytest.raises(ValidationError, match='sudah disetujui'):
            services.delete_barang_keluar(barang_keluar.pk)

    def test_update_pending(self, unit_lima, kompresor, staff_gudang):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 4}), staff_gudang)
        services.update_barang_keluar(
            barang_keluar.pk, data_keluar({'noSeri': unit_lima.no_seri, 'qty': 5}, tujuan='Cabang Depok'), staff_gudang,
        )

        barang_keluar.refresh_from_db()
        assert barang_keluar.tujuan == 'Cabang Depok'
        assert barang_keluar.details.get().jumlah == 5
        assert stok(kompresor) == 0

    def test_delete_pending_mengembalikan_stok(self, unit_lima, kompresor, staff_gudang):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 4}), staff_gudang)
        services.delete_barang_keluar(barang_keluar.pk)

        assert stok(kompresor) == 5
        assert not DetailBarangKeluar.objects.exists()

    def test_delete_rejected_tidak_menambah_stok_lagi(self, unit_lima, kompresor, staff_gudang, supervisor):
        barang_keluar = services.create_barang_keluar(data_keluar({'noSeri': unit_lima.no_seri, 'qty': 4}), staff_gudang)
        services.proses_barang_keluar(barang_keluar.pk, 'reject', supervisor)
        services.delete_barang_keluar(barang_keluar.pk)
        assert stok(kompresor) == 5

    def test_tidak_ditemukan(self, supervisor):
        with pytest.raises(NotFoundError):
            services.proses_barang_keluar(404, 'approve', supervisor)


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

class TestBarangKeluarApi:

    def test_alur_lengkap(self, client_gudang, client_spv, unit_lima, kompresor):
        response = client_gudang.post('/api/barang-keluar', data_keluar({'noSeri': unit_lima.no_seri, 'qty': 2}), format='json')
        assert response.status_code == 201
        data = response.json()['data']
        assert data['details'][0]['noSeri'] == unit_lima.no_seri
        assert data['createdBy'] == 'gudang1'

        response = client_gudang.put(f"/api/barang-keluar/{data['id']}/approve", {'action': 'approve'}, format='json')
        assert response.status_code == 403

        response = client_spv.put(f"/api/barang-keluar/{data['id']}/approve", {'action': 'approve'}, format='json')
        assert response.status_code == 200
        assert response.json()['data']['status'] == 'approved'
        assert response.json()['data']['approvedBy'] == 'spv1'

        response = client_gudang.get('/api/barang-keluar', {'status': 'approved'})
        assert response.json()['pagination']['total'] == 1

    def test_melebihi_tersedia_400(self, client_gudang, unit_lima):
        response = client_gudang.post('/api/barang-keluar', data_keluar({'noSeri': unit_lima.no_seri, 'qty': 6}), format='json')
        assert response.status_code == 400
        body = response.json()
        assert body['success'] is False
        assert body['error'] == f'Jumlah untuk No Seri {unit_lima.no_seri} melebihi stok tersedia (maksimal 5)'

    def test_delete_lewat_query(self, client_gudang, unit_lima, kompresor):
        response = client_gudang.post('/api/barang-keluar', data_keluar({'noSeri': unit_lima.no_seri, 'qty': 2}), format='json')
        pk = response.json()['data']['id']
        response = client_gudang.delete(f'/api/barang-keluar?id={pk}')
        assert response.status_code == 200
        assert stok(kompresor) == 5
