# backend/tests/test_laporan.py
"""
Laporan inventaris: totalQty dari jumlah tersedia, qtyReady dari unit
yang lembar kerja QC-nya sudah disetujui.
"""
import datetime

import pytest
from django.utils import timezone

from gudang import laporan, services
from lembar_kerja import services as lembar_services
from lembar_kerja.models import JenisPekerjaan

from .conftest import data_barang_masuk

pytestmark = pytest.mark.django_db


@pytest.fixture
def qc_disetujui(barang_masuk_kd001, qc_staff, supervisor):
    """Unit 0000001 dan 0000002 lulus QC dan disetujui."""
    for no_seri in ('0000001', '0000002'):
        transaksi = lembar_services.save_lembar_kerja(
            no_seri, JenisPekerjaan.QC, {'items': [{'parameter': 'Cek regulator', 'aktual': 'OK'}]}, qc_staff,
        )
        lembar_services.set_approval(transaksi.pk, 'approve', supervisor)


def baris(rows, kode):
    return next(row for row in rows if row['kodeBarang'] == kode)


def test_total_ready_not_ready(qc_disetujui, kompresor, genset, staff_gudang):
    services.create_barang_keluar(
        {'tanggal': '2024-05-02', 'tujuan': 'Cabang', 'items': [{'noSeri': '0000005', 'qty': 1}]}, staff_gudang,
    )
    rows = laporan.hitung_inventaris(laporan.barang_queryset())

    kompresor_row = baris(rows, 'BRG-001')
    assert (kompresor_row['totalQty'], kompresor_row['qtyReady'], kompresor_row['qtyNotReady']) == (4, 2, 2)
    genset_row = baris(rows, 'BRG-002')
    assert (genset_row['totalQty'], genset_row['qtyReady'], genset_row['qtyNotReady']) == (0, 0, 0)
    assert [row['no'] for row in rows] == [1, 2]


def test_qc_belum_disetujui_tidak_ready(barang_masuk_kd001, kompresor, qc_staff):
    lembar_services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': [{'parameter': 'Cek', 'aktual': 'OK'}]}, qc_staff)
    row = baris(laporan.hitung_inventaris(laporan.barang_queryset()), 'BRG-001')
    assert row['qtyReady'] == 0


def test_periode_membatasi_tanggal_barang_masuk(kompresor, staff_gudang):
    lama = timezone.localdate() - datetime.timedelta(days=400)
    services.create_barang_masuk(data_barang_masuk(tanggal=lama), staff_gudang)
    services.create_barang_masuk(data_barang_masuk(kode='KD002', no_form='F002'), staff_gudang)

    assert baris(laporan.hitung_inventaris(laporan.barang_queryset(), 'today'), 'BRG-001')['totalQty'] == 5
    assert baris(laporan.hitung_inventaris(laporan.barang_queryset(), ''), 'BRG-001')['totalQty'] == 10


def test_nama_file_ekspor():
    hari_ini = timezone.localdate().isoformat()
    assert laporan.nama_file_ekspor('this-month') == f'laporan-inventaris-this-month-{hari_ini}.csv'
    assert laporan.nama_file_ekspor('', 'xlsx') == f'laporan-inventaris-semua-{hari_ini}.xlsx'


def test_api_laporan(client_gudang, qc_disetujui, genset):
    response = client_gudang.get('/api/laporan/inventaris', {'page': 2, 'limit': 1, 'period': 'all'})
    body = response.json()
    assert response.status_code == 200
    assert body['pagination'] == {'page': 2, 'limit': 1, 'total': 2, 'totalPages': 2, 'hasNext': False, 'hasPrev': True}
    # Urut nama: Genset 5000W, Kompresor Angin
    assert body['data'] == [{
        'no': 2, 'id': body['data'][0]['id'], 'kodeBarang': 'BRG-001', 'namaBarang': 'Kompresor Angin',
        'totalQty': 5, 'qtyReady': 2, 'qtyNotReady': 3,
    }]


def test_api_ekspor_csv(client_gudang, qc_disetujui):
    response = client_gudang.get('/api/laporan/inventaris/export', {'period': 'this-year'})
    assert response.status_code == 200
    assert response['Content-Type'].startswith('text/csv')
    assert 'laporan-inventaris-this-year-' in response['Content-Disposition']

    lines = response.content.decode('utf-8').splitlines()
    assert lines[0] == 'No,Kode Barang,Nama Barang,Total Qty,Qty Ready,Qty Not Ready'
    assert lines[1] == '1,BRG-001,Kompresor Angin,5,2,3'


def test_api_ekspor_xlsx(client_gudang, kompresor):
    response = client_gudang.get('/api/laporan/inventaris/export', {'format': 'xlsx'})
    assert response.status_code == 200
    assert response.content[:2] == b'PK'
    assert response['Content-Disposition'].endswith('.xlsx"')


def test_api_ekspor_format_salah(client_gudang, db):
    response = client_gudang.get('/api/laporan/inventaris/export', {'format': 'pdf'})
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

def test_ringkasan_dashboard(barang_masuk_kd001, kompresor, genset, staff_gudang):
    lama = timezone.localdate() - datetime.timedelta(days=45)
    lama_masuk = services.create_barang_masuk(data_barang_masuk(kode='KD002', no_form='F002', tanggal=lama), staff_gudang)
    keluar = services.create_barang_keluar(
        {'tanggal': timezone.localdate().isoformat(), 'tujuan': 'Cabang', 'items': [{'noSeri': '0000001', 'qty': 1}]},
        staff_gudang,
    )

    data = laporan.ringkasan_dashboard()

    assert data['totalBarang'] == 2
    assert data['barangMasuk'] == 1
    assert data['barangKeluar'] == 1
    assert data['totalPengguna'] == 1
    assert {row['id'] for row in data['activities']} == {
        f'masuk-{barang_masuk_kd001.pk}', f'masuk-{lama_masuk.pk}', f'keluar-{keluar.pk}',
    }
    aktivitas_keluar = next(row for row in data['activities'] if row['type'] == 'barang_keluar')
    assert aktivitas_keluar['title'] == 'Barang Keluar: Kompresor Angin'
    timestamps = [row['timestamp'] for row in data['activities']]
    assert timestamps == sorted(timestamps, reverse=True)


def test_dashboard_api(client_qc, barang_masuk_kd001):
    response = client_qc.get('/api/dashboard')
    assert response.status_code == 200
    data = response.json()['data']
    assert data['barangMasuk'] == 1
    assert data['activities'][0]['title'] == 'Barang Masuk: Kompresor Angin'


def test_dashboard_tanpa_token(anon_client):
    assert anon_client.get('/api/dashboard').status_code == 401
