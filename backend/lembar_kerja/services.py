# backend/lembar_kerja/services.py
import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from gudang.exceptions import ConflictError, NotFoundError, ValidationError
from gudang.models import DetailBarangMasukNoSeri
from gudang.utils import parse_int, teks

from . import checklists
from .models import ChecklistItem, JenisPekerjaan, PindahLokasi, Transaksi

logger = logging.getLogger(__name__)

LOKASI_DEFAULT = 'Gudang A'
AKSI_APPROVAL = ('approve', 'unapprove')


def _ambil_unit(no_seri, lock=False):
    queryset = DetailBarangMasukNoSeri.objects.select_related('detail__barang', 'detail__barang_masuk')
    if lock:
        queryset = queryset.select_for_update()
    unit = queryset.filter(no_seri=teks(no_seri)).first()
    if unit is None:
        raise NotFoundError(f"No Seri {no_seri} tidak ditemukan")
    return unit


def _lembar_aktif(unit, jenis, lock=False):
    queryset = Transaksi.objects.filter(unit=unit, jenis_pekerjaan=jenis, is_active=True)
    if lock:
        queryset = queryset.select_for_update()
    return queryset.first()


def lokasi_sekarang(unit):
    return unit.lokasi or LOKASI_DEFAULT


def get_lembar_kerja(no_seri, jenis):
    """
    Lembar kerja satu nomor seri. Jika belum pernah disimpan, item berisi
    checklist bawaan (tidak disimpan). Jika sudah ada, item dikembalikan apa adanya.
    """
    jenis = checklists.parse_jenis(jenis)
    unit = _ambil_unit(no_seri)
    transaksi = _lembar_aktif(unit, jenis)

    if transaksi is None:
        items = checklists.default_items(jenis, lokasi_sekarang(unit))
    else:
        items = [checklists.serialize_item(jenis, item) for item in transaksi.items.all()]
    return {'unit': unit, 'jenis': jenis, 'transaksi': transaksi, 'items': items}


def _cek_versi(transaksi, version):
    version = parse_int(version)
    if version is not None and version != transaksi.version:
        raise ConflictError(
            'Lembar kerja sudah diubah oleh pengguna lain. Muat ulang data lalu simpan kembali.',
            details={'currentVersion': transaksi.version},
        )


def _buat_transaksi(unit, jenis, user, staff=None, **fields):
    return Transaksi.objects.create(
        unit=unit,
        jenis_pekerjaan=jenis,
        no_form=checklists.nomor_form(jenis, unit.no_seri, timezone.localdate().year),
        staff=staff or user,
        pic=user,
        **fields
    )


def _ganti_items(transaksi, items):
    transaksi.items.all().delete()
    ChecklistItem.objects.bulk_create([
        ChecklistItem(transaksi=transaksi, urutan=urutan, **item)
        for urutan, item in enumerate(items, start=1)
    ])


@transaction.atomic
def save_lembar_kerja(no_seri, jenis, data, user):
    """
    Simpan checklist lembar kerja (buat jika belum ada).
    Bila data membawa `version`, simpanan ditolak kalau versi tersimpan sudah berbeda.
    """
    jenis = checklists.parse_jenis(jenis)
    if jenis == JenisPekerjaan.PINDAH_LOKASI:
        return pindah_lokasi(no_seri, data, user)

    unit = _ambil_unit(no_seri, lock=True)
    items = checklists.parse_items(jenis, data.get('items'))
    transaksi = _lembar_aktif(unit, jenis, lock=True)

    if transaksi is None:
        transaksi = _buat_transaksi(unit, jenis, user, keterangan=teks(data.get('keterangan')))
    else:
        _cek_versi(transaksi, data.get('version'))
        transaksi.version += 1
        transaksi.keterangan = teks(data.get('keterangan'))
    if teks(data.get('status')):
        transaksi.status = teks(data.get('status'))
    transaksi.save()

    _ganti_items(transaksi, items)
    logger.info("Lembar kerja %s disimpan oleh %s (versi %d)", transaksi.no_form, user, transaksi.version)
    return transaksi


@transaction.atomic
def pindah_lokasi(no_seri, data, user):
    unit = _ambil_unit(no_seri, lock=True)
    lokasi_baru = teks(data.get('lokasiBaru'))
    if not lokasi_baru:
        raise ValidationError('Lokasi baru harus diisi', title='Data Tidak Lengkap')
    lokasi_asal = lokasi_sekarang(unit)
    if lokasi_baru == lokasi_asal:
        raise ValidationError('Lokasi baru tidak boleh sama dengan lokasi sekarang', title='Data Tidak Valid')

    keterangan = teks(data.get('keterangan'))
    transaksi = _lembar_aktif(unit, JenisPekerjaan.PINDAH_LOKASI, lock=True)
    if transaksi is None:
        transaksi = _buat_transaksi(unit, JenisPekerjaan.PINDAH_LOKASI, user, keterangan=keterangan, lokasi=lokasi_baru)
    else:
        _cek_versi(transaksi, data.get('version'))
        transaksi.version += 1
        transaksi.keterangan = keterangan
        transaksi.lokasi = lokasi_baru
        transaksi.save()

    _ganti_items(transaksi, [{
        'parameter': checklists.PARAMETER_PINDAH_LOKASI,
        'aktual': lokasi_baru,
        'standar': lokasi_asal,
        'keterangan': keterangan,
    }])
    PindahLokasi.objects.create(
        unit=unit, transaksi=transaksi, dari_lokasi=lokasi_asal, ke_lokasi=lokasi_baru,
        keterangan=keterangan, dipindah_oleh=user,
    )
    unit.lokasi = lokasi_baru
    unit.save(update_fields=['lokasi'])
    logger.info("No Seri %s dipindah dari %s ke %s oleh %s", unit.no_seri, lokasi_asal, lokasi_baru, user)
    return transaksi


# --- Transaksi baru & status ---

@transaction.atomic
def create_transaksi(data, user):
    """Buat lembar kerja baru berisi checklist bawaan untuk satu nomor seri."""
    jenis = checklists.parse_jenis(data.get('jenisPekerjaan'))
    unit_id = parse_int(data.get('detailBarangMasukNoSeriId'))
    if unit_id is not None:
        unit = DetailBarangMasukNoSeri.objects.select_for_update().filter(pk=unit_id).first()
        if unit is None:
            raise NotFoundError('No Seri tidak ditemukan')
    elif teks(data.get('noSeri')):
        unit = _ambil_unit(data.get('noSeri'), lock=True)
    else:
        raise ValidationError('No Seri wajib dipilih', title='Data Tidak Lengkap')

    if _lembar_aktif(unit, jenis) is not None:
        raise ValidationError(
            f"Lembar kerja {jenis.label} untuk No Seri {unit.no_seri} sudah ada",
            title='Duplikasi Data',
        )

    staff = None
    staff_id = parse_int(data.get('staffId'))
    if staff_id is not None:
        staff = get_user_model().objects.filter(pk=staff_id, is_active=True).first()
        if staff is None:
            raise ValidationError('Staff tidak ditemukan', title='Data Tidak Valid')

    transaksi = _buat_transaksi(
        unit, jenis, user,
        staff=staff,
        status=teks(data.get('status')) or Transaksi.STATUS_AWAL,
        keterangan=teks(data.get('ket', data.get('keterangan'))),
        lokasi=teks(data.get('lokasi')),
    )
    _ganti_items(transaksi, checklists.parse_items(jenis, checklists.default_items(jenis, lokasi_sekarang(unit))))
    logger.info("Lembar kerja %s dibuat oleh %s", transaksi.no_form, user)
    return transaksi


@transaction.atomic
def update_status_transaksi(pk, status):
    status = teks(status)
    if not status:
        raise ValidationError('Status wajib diisi', title='Data Tidak Lengkap')
    transaksi = ambil_transaksi(pk, lock=True)
    transaksi.status = status
    transaksi.save(update_fields=['status', 'updated_at'])
    return transaksi


def ambil_transaksi(pk, lock=False):
    queryset = Transaksi.objects.filter(pk=parse_int(pk), is_active=True)
    if lock:
        queryset = queryset.select_for_update()
    transaksi = queryset.first()
    if transaksi is None:
        raise NotFoundError('Transaksi tidak ditemukan')
    return transaksi


def ambil_transaksi_by_form(no_form):
    """Lembar kerja aktif dengan nomor form persis sama, misal QC/V1/0000003/2024."""
    transaksi = (
        Transaksi.objects.filter(no_form=teks(no_form), is_active=True)
        .select_related('unit')
        .order_by('-tanggal', '-id')
        .first()
    )
    if transaksi is None:
        raise NotFoundError('Transaksi tidak ditemukan')
    return transaksi


def list_riwayat(search='', jenis=''):
    """
    Gabungan baris 'Barang Masuk' (satu per unit) dan lembar kerja, terbaru dulu.
    Setiap baris berupa dict siap kirim.
    """
    search = teks(search)
    jenis = teks(jenis)

    baris = []
    if not jenis or jenis == 'barang_masuk':
        units = DetailBarangMasukNoSeri.objects.filter(detail__barang_masuk__is_active=True).select_related(
            'detail__barang', 'detail__barang_masuk',
        )
        if search:
            units = units.filter(
                Q(no_seri__icontains=search) | Q(detail__barang__nama__icontains=search) |
                Q(detail__barang_masuk__kode_kedatangan__icontains=search) | Q(lokasi__icontains=search)
            )
        for unit in units:
            barang_masuk = unit.detail.barang_masuk
            baris.append({
                'id': f"unit-{unit.pk}",
                'tipe': 'barang_masuk',
                'tanggal': barang_masuk.tanggal.isoformat(),
                'noSeri': unit.no_seri,
                'kodeBarang': unit.detail.barang.kode,
                'namaBarang': unit.detail.barang.nama,
                'kodeKedatangan': barang_masuk.kode_kedatangan,
                'jenisPekerjaan': 'Barang Masuk',
                'noForm': barang_masuk.no_form,
                'staff': 'Admin',
                'status': 'Diterima',
                'lokasi': unit.lokasi,
                'isApproved': None,
            })

    if jenis != 'barang_masuk':
        transaksi_qs = Transaksi.objects.filter(is_active=True).select_related(
            'unit__detail__barang', 'unit__detail__barang_masuk', 'staff',
        )
        if jenis:
            transaksi_qs = transaksi_qs.filter(jenis_pekerjaan=checklists.parse_jenis(jenis))
        if search:
            transaksi_qs = transaksi_qs.filter(
                Q(unit__no_seri__icontains=search) | Q(unit__detail__barang__nama__icontains=search) |
                Q(unit__detail__barang_masuk__kode_kedatangan__icontains=search) |
                Q(lokasi__icontains=search) | Q(no_form__icontains=search)
            )
        for transaksi in transaksi_qs:
            unit = transaksi.unit
            baris.append({
                'id': transaksi.pk,
                'tipe': 'transaksi',
                'tanggal': timezone.localtime(transaksi.tanggal).date().isoformat(),
                'noSeri': unit.no_seri,
                'kodeBarang': unit.detail.barang.kode,
                'namaBarang': unit.detail.barang.nama,
                'kodeKedatangan': unit.detail.barang_masuk.kode_kedatangan,
                'jenisPekerjaan': transaksi.get_jenis_pekerjaan_display(),
                'noForm': transaksi.no_form,
                'staff': str(transaksi.staff) if transaksi.staff else '',
                'status': transaksi.status,
                'lokasi': transaksi.lokasi or unit.lokasi,
                'isApproved': transaksi.is_approved,
            })

    baris.sort(key=lambda row: row['tanggal'], reverse=True)
    return baris


# --- Approval ---

@transaction.atomic
def set_approval(transaksi_id, action, user):
    """
    approve   : isApproved=True, approvedAt=sekarang, approvedBy=user (stempel ulang bila sudah disetujui)
    unapprove : ketiganya dikosongkan
    """
    if action not in AKSI_APPROVAL:
        raise ValidationError('Action harus approve atau unapprove')
    transaksi = ambil_transaksi(transaksi_id, lock=True)

    if action == 'approve':
        transaksi.is_approved = True
        transaksi.approved_at = timezone.now()
        transaksi.approved_by = user
    else:
        transaksi.is_approved = False
        transaksi.approved_at = None
        transaksi.approved_by = None
    transaksi.save(update_fields=['is_approved', 'approved_at', 'approved_by', 'updated_at'])
    logger.info("Lembar kerja %s %s oleh %s", transaksi.no_form, action, user)
    return transaksi


def list_approval(search='', jenis='', is_approved=None):
    queryset = Transaksi.objects.filter(is_active=True).select_related(
        'unit__detail__barang', 'staff', 'pic', 'approved_by',
    )
    if teks(jenis):
        queryset = queryset.filter(jenis_pekerjaan=checklists.parse_jenis(jenis))
    if teks(search):
        search = teks(search)
        queryset = queryset.filter(
            Q(unit__no_seri__icontains=search) | Q(no_form__icontains=search) |
            Q(unit__detail__barang__nama__icontains=search)
        )
    if is_approved is not None:
        queryset = queryset.filter(is_approved=is_approved)
    return queryset
