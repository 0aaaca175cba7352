# backend/tests/test_lembar_kerja.py
"""
Lembar kerja per nomor seri: checklist bawaan, simpan/ambil ulang,
versi optimistis, pindah lokasi, dan riwayat transaksi.
"""
import pytest

from gudang.exceptions import ConflictError, NotFoundError, ValidationError
from gudang.models import DetailBarangMasukNoSeri
from lembar_kerja import checklists, services
from lembar_kerja.models import JenisPekerjaan, PindahLokasi, Transaksi
from lembar_kerja.urls import SLUG_JENIS

pytestmark = pytest.mark.django_db


def baris_qc(aktual='7 bar'):
    return [
        {'parameter': 'Cek tekanan angin dengan max 7-8 bar', 'aktual': aktual, 'standar': 'Max 7-8 bar', 'keterangan': 'OK'},
        {'parameter': '', 'aktual': 'dibuang', 'standar': ''},
        {'parameter': 'Pengecekan fungsi Air Gun', 'aktual': 'Normal', 'standar': ''},
    ]


# ---------------------------------------------------------------------------
# Tabel jenis pekerjaan
# ---------------------------------------------------------------------------

class TestTabelJenisPekerjaan:

    def test_setiap_jenis_terdaftar(self):
        for jenis in JenisPekerjaan:
            assert jenis in checklists.MODEL_HASIL
            assert jenis in checklists.INISIAL_FORM
            assert jenis in checklists.CHECKLIST_BAWAAN
        assert set(SLUG_JENIS.values()) == set(JenisPekerjaan)

    @pytest.mark.parametrize('jenis, jumlah', [
        (JenisPekerjaan.INSPEKSI_MESIN, 10),
        (JenisPekerjaan.ASSEMBLY, 30),
        (JenisPekerjaan.QC, 19),
        (JenisPekerjaan.PDI, 21),
        (JenisPekerjaan.PAINTING, 10),
        (JenisPekerjaan.PINDAH_LOKASI, 1),
    ])
    def test_jumlah_checklist_bawaan(self, jenis, jumlah):
        assert len(checklists.default_items(jenis, 'Gudang A')) == jumlah

    def test_pindah_lokasi_membawa_lokasi_asal(self):
        assert checklists.default_items(JenisPekerjaan.PINDAH_LOKASI, 'Rak B2') == [
            {'parameter': checklists.PARAMETER_PINDAH_LOKASI, 'aktual': '', 'standar': 'Rak B2', 'keterangan': ''},
        ]

    def test_nomor_form(self):
        assert checklists.nomor_form(JenisPekerjaan.QC, '0000003', 2024) == 'QC/V1/0000003/2024'

    def test_jenis_tidak_valid(self):
        with pytest.raises(ValidationError, match='Jenis pekerjaan tidak valid'):
            checklists.parse_jenis('las')

    def test_kolom_pdi(self):
        items = checklists.parse_items(JenisPekerjaan.PDI, [{'parameter': 'Cek oli', 'pdi': 'true'}])
        assert items == [{'parameter': 'Cek oli', 'keterangan': '', 'hasil': True}]


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TestLembarKerjaService:

    def test_belum_ada_mengembalikan_checklist_bawaan(self, barang_masuk_kd001):
        lembar = services.get_lembar_kerja('0000001', JenisPekerjaan.INSPEKSI_MESIN)
        assert lembar['transaksi'] is None
        assert len(lembar['items']) == 10
        assert lembar['items'][0]['hasil'] is None
        assert not Transaksi.objects.exists()

    def test_simpan_lalu_ambil_sama(self, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc(), 'keterangan': 'cek awal'}, qc_staff)

        assert transaksi.no_form.startswith('QC/V1/0000001/')
        assert transaksi.version == 1
        assert transaksi.staff == qc_staff

        lembar = services.get_lembar_kerja('0000001', JenisPekerjaan.QC)
        items = [{key: value for key, value in item.items() if key != 'id'} for item in lembar['items']]
        assert items == [
            {'parameter': 'Cek tekanan angin dengan max 7-8 bar', 'aktual': '7 bar', 'standar': 'Max 7-8 bar', 'keterangan': 'OK'},
            {'parameter': 'Pengecekan fungsi Air Gun', 'aktual': 'Normal', 'standar': '', 'keterangan': ''},
        ]

    def test_simpan_ulang_menaikkan_versi(self, barang_masuk_kd001, qc_staff):
        services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        transaksi = services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc('8 bar'), 'version': 1}, qc_staff)

        assert transaksi.version == 2
        assert Transaksi.objects.count() == 1
        assert transaksi.items.first().aktual == '8 bar'

    def test_versi_basi_ditolak(self, barang_masuk_kd001, qc_staff):
        services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc('8 bar'), 'version': 1}, qc_staff)

        with pytest.raises(ConflictError) as excinfo:
            services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc('6 bar'), 'version': 1}, qc_staff)
        assert excinfo.value.details == {'currentVersion': 2}
        assert Transaksi.objects.get().items.first().aktual == '8 bar'

    def test_checklist_kosong_ditolak(self, barang_masuk_kd001, qc_staff):
        with pytest.raises(ValidationError, match='Minimal satu parameter'):
            services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': [{'parameter': ' '}]}, qc_staff)

    def test_nomor_seri_tidak_ada(self, db, qc_staff):
        with pytest.raises(NotFoundError):
            services.get_lembar_kerja('7777777', JenisPekerjaan.QC)

    def test_pindah_lokasi(self, barang_masuk_kd001, staff_pindah):
        transaksi = services.save_lembar_kerja(
            '0000002', JenisPekerjaan.PINDAH_LOKASI, {'lokasiBaru': 'Gudang B', 'keterangan': 'rak penuh'}, staff_pindah,
        )

        unit = DetailBarangMasukNoSeri.objects.get(no_seri='0000002')
        assert unit.lokasi == 'Gudang B'
        assert transaksi.lokasi == 'Gudang B'
        riwayat = PindahLokasi.objects.get()
        assert (riwayat.dari_lokasi, riwayat.ke_lokasi) == (services.LOKASI_DEFAULT, 'Gudang B')

        item = transaksi.items.get()
        assert (item.parameter, item.standar, item.aktual) == ('Pindah Lokasi', services.LOKASI_DEFAULT, 'Gudang B')

    def test_pindah_ke_lokasi_sama_ditolak(self, barang_masuk_kd001, staff_pindah):
        with pytest.raises(ValidationError, match='tidak boleh sama'):
            services.pindah_lokasi('0000002', {'lokasiBaru': services.LOKASI_DEFAULT}, staff_pindah)
        with pytest.raises(ValidationError, match='Lokasi baru harus diisi'):
            services.pindah_lokasi('0000002', {'lokasiBaru': ''}, staff_pindah)


# ---------------------------------------------------------------------------
# Transaksi & riwayat
# ---------------------------------------------------------------------------

class TestTransaksi:

    def test_create_transaksi_dengan_checklist_bawaan(self, barang_masuk_kd001, staff_gudang, qc_staff):
        transaksi = services.create_transaksi(
            {'jenisPekerjaan': 'qc_staff', 'noSeri': '0000003', 'staffId': qc_staff.pk}, staff_gudang,
        )
        assert transaksi.items.count() == 19
        assert transaksi.staff == qc_staff
        assert transaksi.pic == staff_gudang
        assert transaksi.status == Transaksi.STATUS_AWAL

        with pytest.raises(ValidationError, match='sudah ada'):
            services.create_transaksi({'jenisPekerjaan': 'qc_staff', 'noSeri': '0000003'}, staff_gudang)

    def test_riwayat_gabungan(self, barang_masuk_kd001, qc_staff):
        services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)

        rows = services.list_riwayat()
        assert len(rows) == 6
        assert sum(1 for row in rows if row['jenisPekerjaan'] == 'Barang Masuk') == 5
        barang_masuk = next(row for row in rows if row['tipe'] == 'barang_masuk')
        assert (barang_masuk['staff'], barang_masuk['status']) == ('Admin', 'Diterima')

        rows = services.list_riwayat(jenis='qc_staff')
        assert [row['noSeri'] for row in rows] == ['0000001']

    def test_update_status(self, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000001', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        services.update_status_transaksi(transaksi.pk, 'Selesai')
        assert Transaksi.objects.get().status == 'Selesai'

        with pytest.raises(NotFoundError, match='Transaksi tidak ditemukan'):
            services.update_status_transaksi(9999, 'Selesai')


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

class TestLembarKerjaApi:

    def test_get_dan_put(self, client_qc, barang_masuk_kd001):
        response = client_qc.get('/api/qc/0000001')
        assert response.status_code == 200
        data = response.json()['data']
        assert data['transaksi'] is None
        assert len(data['items']) == 19

        response = client_qc.put('/api/qc/0000001', {'items': baris_qc()}, format='json')
        assert response.status_code == 200
        data = response.json()['data']
        assert data['transaksi']['version'] == 1
        assert data['transaksi']['noForm'].startswith('QC/V1/0000001/')
        assert len(data['items']) == 2

        response = client_qc.put('/api/qc/0000001', {'items': baris_qc(), 'version': 5}, format='json')
        assert response.status_code == 409
        assert response.json()['details'] == {'currentVersion': 1}

    def test_role_lain_tidak_boleh_menyimpan(self, client_gudang, client_admin, barang_masuk_kd001):
        assert client_gudang.get('/api/qc/0000001').status_code == 200
        assert client_gudang.put('/api/qc/0000001', {'items': baris_qc()}, format='json').status_code == 403
        assert client_admin.put('/api/qc/0000001', {'items': baris_qc()}, format='json').status_code == 403

    def test_pindah_lokasi_api(self, client_pindah, barang_masuk_kd001):
        response = client_pindah.put('/api/pindah-lokasi/0000004', {'lokasiBaru': 'Gudang C'}, format='json')
        assert response.status_code == 200
        assert response.json()['data']['lokasi'] == 'Gudang C'

    def test_nomor_seri_tidak_ada_404(self, client_qc, db):
        response = client_qc.get('/api/qc/1234567')
        assert response.status_code == 404
        assert response.json()['error'] == 'No Seri 1234567 tidak ditemukan'

    def test_transaksi_api(self, client_gudang, barang_masuk_kd001):
        response = client_gudang.post('/api/transaksi', {'jenisPekerjaan': 'painting_staff', 'noSeri': '0000005'}, format='json')
        assert response.status_code == 201
        pk = response.json()['data']['id']

        response = client_gudang.put('/api/transaksi/status', {'id': pk, 'status': 'Selesai'}, format='json')
        assert response.status_code == 200
        assert response.json()['data']['status'] == 'Selesai'

        response = client_gudang.get('/api/transaksi', {'limit': 3})
        body = response.json()
        assert body['pagination']['total'] == 6
        assert len(body['data']) == 3


# ---------------------------------------------------------------------------
# Lembar kerja lewat nomor form
# ---------------------------------------------------------------------------

class TestLembarKerjaByForm:

    def test_service_cari_nomor_form(self, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000003', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        assert services.ambil_transaksi_by_form(transaksi.no_form) == transaksi

        with pytest.raises(NotFoundError, match='Transaksi tidak ditemukan'):
            services.ambil_transaksi_by_form('QC/V1/7777777/2024')

    def test_lembar_nonaktif_tidak_ditemukan(self, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000003', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        Transaksi.objects.filter(pk=transaksi.pk).update(is_active=False)

        with pytest.raises(NotFoundError):
            services.ambil_transaksi_by_form(transaksi.no_form)

    def test_get_dan_put_lewat_nomor_form(self, client_qc, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000003', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)

        response = client_qc.get(f'/api/lembar-kerja/{transaksi.no_form}')
        assert response.status_code == 200
        data = response.json()['data']
        assert data['noSeri'] == '0000003'
        assert data['jenisPekerjaan'] == 'qc_staff'
        assert data['transaksi']['noForm'] == transaksi.no_form

        response = client_qc.put(
            f'/api/lembar-kerja/{transaksi.no_form}',
            {'items': baris_qc('6 bar'), 'keterangan': 'cek ulang', 'version': 1},
            format='json',
        )
        assert response.status_code == 200
        data = response.json()['data']
        assert data['transaksi']['version'] == 2
        assert data['transaksi']['keterangan'] == 'cek ulang'
        assert data['items'][0]['aktual'] == '6 bar'

    def test_put_hanya_untuk_staf_jenis_terkait(self, client_gudang, barang_masuk_kd001, qc_staff):
        transaksi = services.save_lembar_kerja('0000003', JenisPekerjaan.QC, {'items': baris_qc()}, qc_staff)
        response = client_gudang.put(f'/api/lembar-kerja/{transaksi.no_form}', {'items': baris_qc()}, format='json')
        assert response.status_code == 403

    def test_nomor_form_tidak_ada_404(self, client_qc, db):
        response = client_qc.get('/api/lembar-kerja/QC/V1/7777777/2024')
        assert response.status_code == 404
        assert response.json()['error'] == 'Transaksi tidak ditemukan'

        response = client_qc.put('/api/lembar-kerja/QC/V1/7777777/2024', {'items': baris_qc()}, format='json')
        assert response.status_code == 404
