# backend/tests/test_nomor_seri.py
import pytest

from gudang import services
from gudang.exceptions import ValidationError
from gudang.models import Barang, DetailBarangMasukNoSeri, SerialNumberLock

from .conftest import data_barang_masuk

pytestmark = pytest.mark.django_db


def test_alokasi_pertama_mulai_dari_satu():
    assert services.allocate_serial_numbers(3) == ['0000001', '0000002', '0000003']
    assert SerialNumberLock.objects.filter(pk=1).exists()


def test_alokasi_setelah_nomor_terbesar(barang_masuk_kd001):
    assert services.allocate_serial_numbers(2) == ['0000006', '0000007']


def test_alokasi_melewati_nomor_manual_dalam_request():
    assert services.allocate_serial_numbers(2, reserved=['0000040', '0000012']) == ['0000041', '0000042']


def test_alokasi_nol():
    assert services.allocate_serial_numbers(0) == []


def test_alokasi_tidak_mengubah_data(barang_masuk_kd001):
    services.allocate_serial_numbers(4)
    # Alokasi hanya menghitung; nomor baru tercatat saat unit disimpan
    assert DetailBarangMasukNoSeri.objects.count() == 5


def test_barang_masuk_berurutan_tidak_bentrok(kompresor, staff_gudang):
    pertama = services.create_barang_masuk(data_barang_masuk(), staff_gudang)
    kedua = services.create_barang_masuk(data_barang_masuk(kode='KD002', no_form='F002'), staff_gudang)

    semua = list(DetailBarangMasukNoSeri.objects.values_list('no_seri', flat=True))
    assert len(semua) == len(set(semua)) == 10
    assert max(
        DetailBarangMasukNoSeri.objects.filter(detail__barang_masuk=pertama).values_list('no_seri', flat=True)
    ) < min(
        DetailBarangMasukNoSeri.objects.filter(detail__barang_masuk=kedua).values_list('no_seri', flat=True)
    )


def test_format_nomor_seri():
    assert services.format_no_seri(42) == '0000042'


# ---------------------------------------------------------------------------
# Batas atas nomor seri
# ---------------------------------------------------------------------------

def test_alokasi_tepat_sampai_batas():
    assert services.allocate_serial_numbers(2, reserved=['9999997']) == ['9999998', '9999999']


def test_alokasi_melewati_batas_ditolak():
    with pytest.raises(ValidationError) as exc:
        services.allocate_serial_numbers(1, reserved=['9999999'])
    assert exc.value.message == 'Nomor seri sudah mencapai batas 9999999'
    assert exc.value.details == {'tersisa': 0, 'dibutuhkan': 1}


def test_nomor_seri_manual_terbesar_dengan_unit_otomatis_ditolak(kompresor, staff_gudang):
    data = data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 2, 'units': [{'noSeri': '9999999'}]}])
    with pytest.raises(ValidationError):
        services.create_barang_masuk(data, staff_gudang)

    assert DetailBarangMasukNoSeri.objects.count() == 0
    assert Barang.objects.get(pk=kompresor.pk).stok == 0


def test_barang_masuk_berikutnya_tetap_bisa_setelah_penolakan(kompresor, staff_gudang):
    ditolak = data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 2, 'units': [{'noSeri': '9999999'}]}])
    with pytest.raises(ValidationError):
        services.create_barang_masuk(ditolak, staff_gudang)

    services.create_barang_masuk(data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 2}]), staff_gudang)
    assert sorted(DetailBarangMasukNoSeri.objects.values_list('no_seri', flat=True)) == ['0000001', '0000002']


def test_nomor_seri_manual_terbesar_tanpa_unit_otomatis_diterima(kompresor, staff_gudang):
    data = data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 1, 'units': [{'noSeri': '9999999'}]}])
    services.create_barang_masuk(data, staff_gudang)

    assert list(DetailBarangMasukNoSeri.objects.values_list('no_seri', flat=True)) == ['9999999']
    with pytest.raises(ValidationError):
        services.allocate_serial_numbers(1)


def test_api_barang_masuk_melewati_batas_mengembalikan_400(client_gudang, kompresor):
    data = data_barang_masuk(details=[{'namaBarang': 'Kompresor Angin', 'jumlah': 2, 'units': [{'noSeri': '9999999'}]}])
    response = client_gudang.post('/api/barang-masuk', data, format='json')

    assert response.status_code == 400
    body = response.json()
    assert body['success'] is False
    assert body['error'] == 'Nomor seri sudah mencapai batas 9999999'
    assert body['title'] == 'Nomor Seri Habis'
