# backend/gudang/services.py
"""
Logika inti gudang: buku stok, alokasi nomor seri, barang masuk, barang keluar.

Setiap operasi yang mengubah lebih dari satu baris dibungkus transaction.atomic,
sehingga error di langkah mana pun membatalkan seluruh perubahan.
"""
import logging
import re

from django.db import transaction
from django.db.models import Max, Q
from django.utils import timezone

from .exceptions import NotFoundError, ReferenceNotFoundError, ValidationError
from .models import (
    Barang, BarangKeluar, BarangMasuk, DetailBarangKeluar, DetailBarangMasuk,
    DetailBarangMasukNoSeri, JenisBarang, SerialNumberLock,
)
from .utils import parse_int, parse_tanggal, teks

logger = logging.getLogger(__name__)

PANJANG_NO_SERI = 7
POLA_NO_SERI = re.compile(r'^\d{7}$')
NO_SERI_MAKSIMUM = 10 ** PANJANG_NO_SERI - 1
MIN_KATA_CARI_NO_SERI = 2
BATAS_HASIL_CARI_NO_SERI = 20


# --- Buku Stok ---

def tambah_stok(barang_id, jumlah):
    barang = Barang.objects.select_for_update().get(pk=barang_id)
    barang.stok += jumlah
    barang.save(update_fields=['stok', 'updated_at'])
    return barang


def kurangi_stok(barang_id, jumlah):
    barang = Barang.objects.select_for_update().get(pk=barang_id)
    if barang.stok < jumlah:
        raise ValidationError(
            f"Stok {barang.nama} tidak mencukupi (stok {barang.stok}, dibutuhkan {jumlah})",
            title='Stok Tidak Cukup',
        )
    barang.stok -= jumlah
    barang.save(update_fields=['stok', 'updated_at'])
    return barang


# --- Jenis Barang ---

@transaction.atomic
def assign_jenis(barang_id, jenis_id):
    """Pasang barang ke satu jenis; jenis_id None melepas barang dari jenisnya."""
    barang = Barang.objects.select_for_update().filter(pk=parse_int(barang_id)).first()
    if barang is None:
        raise NotFoundError('Barang tidak ditemukan')
    jenis = None
    if jenis_id is not None:
        jenis = JenisBarang.objects.filter(pk=parse_int(jenis_id), is_active=True).first()
        if jenis is None:
            raise NotFoundError('Jenis barang tidak ditemukan')
    barang.jenis = jenis
    barang.save(update_fields=['jenis', 'updated_at'])
    logger.info("Barang %s dipasang ke jenis %s", barang.kode, jenis.nama if jenis else '-')
    return barang


def nonaktifkan_jenis(jenis):
    if jenis.barang_set.exists():
        raise ValidationError(
            'Jenis barang tidak dapat dihapus karena masih digunakan oleh barang lain',
            title='Data Sedang Digunakan',
        )
    jenis.is_active = False
    jenis.save(update_fields=['is_active', 'updated_at'])
    logger.info("Jenis barang %s dinonaktifkan", jenis.nama)


# --- Alokasi Nomor Seri ---

def format_no_seri(nomor):
    return f"{nomor:0{PANJANG_NO_SERI}d}"


def allocate_serial_numbers(count, reserved=()):
    """
    Alokasikan `count` nomor seri berurutan setelah nomor seri terbesar yang ada.

    `reserved` berisi nomor seri manual dari request yang sama; nomor otomatis
    dimulai setelah yang terbesar di antara keduanya. Baris SerialNumberLock
    dikunci sampai transaksi pemanggil selesai, jadi dua barang masuk yang
    berjalan bersamaan tidak bisa membaca nilai maksimum yang sama.

    Semua nomor seri selalu 7 digit, sehingga Max() pada kolom teks sama
    dengan maksimum numeriknya. Alokasi yang akan melewati 9999999 ditolak.
    """
    if count <= 0:
        return []
    with transaction.atomic():
        SerialNumberLock.objects.select_for_update().get_or_create(pk=1)
        terakhir = DetailBarangMasukNoSeri.objects.aggregate(terbesar=Max('no_seri'))['terbesar']
        dasar = int(terakhir) if terakhir else 0
        for no_seri in reserved:
            dasar = max(dasar, int(no_seri))
        if dasar + count > NO_SERI_MAKSIMUM:
            raise ValidationError(
                f"Nomor seri sudah mencapai batas {format_no_seri(NO_SERI_MAKSIMUM)}",
                title='Nomor Seri Habis',
                details={'tersisa': max(NO_SERI_MAKSIMUM - dasar, 0), 'dibutuhkan': count},
            )
        return [format_no_seri(dasar + offset) for offset in range(1, count + 1)]


# --- Barang Masuk ---

FIELD_HEADER_MASUK = (
    ('tanggal', 'Tanggal'),
    ('kodeKedatangan', 'Kode Kedatangan'),
    ('namaSupplier', 'Nama Supplier'),
    ('noForm', 'No Form'),
)


def _validasi_header_masuk(data):
    kosong = [label for field, label in FIELD_HEADER_MASUK if not teks(data.get(field))]
    if kosong:
        raise ValidationError(f"Field wajib diisi: {', '.join(kosong)}", title='Data Tidak Lengkap')

    status = teks(data.get('status')) or BarangMasuk.Status.DITERIMA
    if status not in BarangMasuk.Status.values:
        raise ValidationError(f"Status barang masuk tidak valid: {status}", title='Data Tidak Valid')

    return {
        'tanggal': parse_tanggal(data.get('tanggal')),
        'kode_kedatangan': teks(data.get('kodeKedatangan')),
        'nama_supplier': teks(data.get('namaSupplier')),
        'no_form': teks(data.get('noForm')),
        'status': status,
    }


def _saring_detail_masuk(details):
    """Buang baris tanpa nama barang atau dengan jumlah bukan bilangan positif."""
    hasil = []
    for row in details or []:
        if not isinstance(row, dict):
            continue
        nama = teks(row.get('namaBarang'))
        jumlah = parse_int(row.get('jumlah'), 0)
        if nama and jumlah > 0:
            hasil.append({'nama_barang': nama, 'jumlah': jumlah, 'units': row.get('units') or []})
    if not hasil:
        raise ValidationError(
            'Minimal satu detail barang dengan jumlah minimal 1 harus ditambahkan',
            title='Data Tidak Lengkap',
        )
    return hasil


def _cek_duplikasi_masuk(header, exclude_pk=None):
    aktif = BarangMasuk.objects.filter(is_active=True)
    if exclude_pk is not None:
        aktif = aktif.exclude(pk=exclude_pk)
    if aktif.filter(kode_kedatangan=header['kode_kedatangan']).exists():
        raise ValidationError('Kode Kedatangan sudah ada', title='Duplikasi Data')
    if aktif.filter(no_form=header['no_form']).exists():
        raise ValidationError('No Form sudah ada', title='Duplikasi Data')


def _cari_barang(nama):
    barang = Barang.objects.filter(nama=nama, is_active=True).first()
    if barang is None:
        raise ReferenceNotFoundError(
            f'Barang dengan nama "{nama}" tidak ditemukan. '
            'Silakan tambahkan barang terlebih dahulu di Master Barang.',
            title='Barang Tidak Ditemukan',
        )
    return barang


def _susun_unit(detail):
    """
    Susun spesifikasi unit untuk satu detail. Unit yang dikirim caller boleh
    membawa noSeri/lokasi/keterangan/jumlah (default 1); kekurangan terhadap
    jumlah detail diisi unit otomatis berjumlah 1.
    """
    units = []
    for kiriman in detail['units']:
        if not isinstance(kiriman, dict):
            continue
        jumlah = parse_int(kiriman.get('jumlah'), 1)
        if jumlah <= 0:
            raise ValidationError(f"Jumlah per unit untuk {detail['nama_barang']} harus lebih dari 0", title='Data Tidak Valid')
        units.append({
            'no_seri': teks(kiriman.get('noSeri')),
            'lokasi': teks(kiriman.get('lokasi')),
            'keterangan': teks(kiriman.get('keterangan')),
            'jumlah': jumlah,
        })

    dideklarasikan = sum(unit['jumlah'] for unit in units)
    if dideklarasikan > detail['jumlah']:
        raise ValidationError(
            f"Jumlah unit untuk {detail['nama_barang']} ({dideklarasikan}) melebihi jumlah detail ({detail['jumlah']})",
            title='Data Tidak Valid',
        )
    for _ in range(detail['jumlah'] - dideklarasikan):
        units.append({'no_seri': '', 'lokasi': '', 'keterangan': '', 'jumlah': 1})
    return units


def _validasi_no_seri_manual(semua_unit):
    manual = [unit['no_seri'] for unit in semua_unit if unit['no_seri']]
    for no_seri in manual:
        if not POLA_NO_SERI.match(no_seri):
            raise ValidationError(f"No Seri {no_seri} harus terdiri dari {PANJANG_NO_SERI} digit angka", title='Data Tidak Valid')
    dobel = sorted({no_seri for no_seri in manual if manual.count(no_seri) > 1})
    if dobel:
        raise ValidationError(f"No Seri duplikat dalam satu input: {', '.join(dobel)}", title='Duplikasi Data')
    terpakai = list(DetailBarangMasukNoSeri.objects.filter(no_seri__in=manual).values_list('no_seri', flat=True))
    if terpakai:
        raise ValidationError(f"No Seri sudah digunakan: {', '.join(sorted(terpakai))}", title='Duplikasi Data')
    return manual


def _simpan_detail_masuk(barang_masuk, details):
    rencana = []
    for detail in details:
        barang = _cari_barang(detail['nama_barang'])
        rencana.append((barang, detail, _susun_unit(detail)))

    semua_unit = [unit for _, _, units in rencana for unit in units]
    manual = _validasi_no_seri_manual(semua_unit)
    otomatis = iter(allocate_serial_numbers(
        sum(1 for unit in semua_unit if not unit['no_seri']),
        reserved=manual,
    ))

    jumlah_unit = 0
    for barang, detail, units in rencana:
        detail_obj = DetailBarangMasuk.objects.create(barang_masuk=barang_masuk, barang=barang, jumlah=detail['jumlah'])
        DetailBarangMasukNoSeri.objects.bulk_create([
            DetailBarangMasukNoSeri(
                detail=detail_obj,
                no_seri=unit['no_seri'] or next(otomatis),
                jumlah=unit['jumlah'],
                lokasi=unit['lokasi'],
                keterangan=unit['keterangan'],
            )
            for unit in units
        ])
        tambah_stok(barang.pk, detail['jumlah'])
        jumlah_unit += len(units)
    return jumlah_unit


def _ambil_barang_masuk(pk):
    barang_masuk = BarangMasuk.objects.select_for_update().filter(pk=parse_int(pk), is_active=True).first()
    if barang_masuk is None:
        raise NotFoundError('Barang masuk tidak ditemukan')
    return barang_masuk


def _pastikan_unit_bebas(barang_masuk):
    units = DetailBarangMasukNoSeri.objects.filter(detail__barang_masuk=barang_masuk)
    if DetailBarangKeluar.objects.filter(unit__in=units).exists():
        raise ValidationError(
            'Barang masuk tidak dapat diubah atau dihapus karena sebagian unit sudah tercatat di barang keluar',
            title='Data Sedang Digunakan',
        )
    if units.filter(transaksi_set__isnull=False).exists():
        raise ValidationError(
            'Barang masuk tidak dapat diubah atau dihapus karena sebagian unit sudah memiliki lembar kerja',
            title='Data Sedang Digunakan',
        )


def _kembalikan_stok_masuk(barang_masuk):
    for detail in barang_masuk.details.all():
        kurangi_stok(detail.barang_id, detail.jumlah)


def _hapus_detail_masuk(barang_masuk):
    # Urutan anak sebelum induk: unit, lalu detail
    DetailBarangMasukNoSeri.objects.filter(detail__barang_masuk=barang_masuk).delete()
    barang_masuk.details.all().delete()


@transaction.atomic
def create_barang_masuk(data, user=None):
    header = _validasi_header_masuk(data)
    details = _saring_detail_masuk(data.get('details'))
    _cek_duplikasi_masuk(header)

    barang_masuk = BarangMasuk.objects.create(created_by=user, **header)
    jumlah_unit = _simpan_detail_masuk(barang_masuk, details)
    logger.info("Barang masuk %s dibuat: %d detail, %d unit", barang_masuk.kode_kedatangan, len(details), jumlah_unit)
    return barang_masuk


@transaction.atomic
def update_barang_masuk(pk, data, user=None):
    barang_masuk = _ambil_barang_masuk(pk)
    header = _validasi_header_masuk(data)
    details = _saring_detail_masuk(data.get('details'))
    _cek_duplikasi_masuk(header, exclude_pk=barang_masuk.pk)
    _pastikan_unit_bebas(barang_masuk)

    _kembalikan_stok_masuk(barang_masuk)
    _hapus_detail_masuk(barang_masuk)
    for field, value in header.items():
        setattr(barang_masuk, field, value)
    barang_masuk.save()

    jumlah_unit = _simpan_detail_masuk(barang_masuk, details)
    logger.info("Barang masuk %s diubah: %d detail, %d unit", barang_masuk.kode_kedatangan, len(details), jumlah_unit)
    return barang_masuk


@transaction.atomic
def delete_barang_masuk(pk):
    barang_masuk = _ambil_barang_masuk(pk)
    _pastikan_unit_bebas(barang_masuk)
    _kembalikan_stok_masuk(barang_masuk)
    _hapus_detail_masuk(barang_masuk)
    kode = barang_masuk.kode_kedatangan
    barang_masuk.delete()
    logger.info("Barang masuk %s dihapus", kode)


# --- Unit (nomor seri) per detail barang masuk ---

def _ambil_detail_masuk(detail_id, lock=False):
    queryset = DetailBarangMasuk.objects.filter(pk=parse_int(detail_id), barang_masuk__is_active=True)
    if lock:
        queryset = queryset.select_for_update()
    detail = queryset.select_related('barang').first()
    if detail is None:
        raise NotFoundError('Detail barang tidak ditemukan')
    return detail


def _ambil_unit_detail(detail, unit_id):
    unit = detail.units.select_for_update().filter(pk=parse_int(unit_id)).first()
    if unit is None:
        raise NotFoundError('No Seri tidak ditemukan pada detail barang ini')
    return unit


def _unit_dipakai(unit):
    return DetailBarangKeluar.objects.filter(unit=unit).exists() or unit.transaksi_set.exists()


def list_unit_detail(detail_id):
    return _ambil_detail_masuk(detail_id).units.order_by('created_at', 'id')


@transaction.atomic
def tambah_unit(detail_id, data):
    """
    Tambah satu unit ke detail barang masuk. Jumlah detail dan stok barang
    ikut bertambah sebesar jumlah unit, sehingga total unit tetap sama dengan
    jumlah detail. noSeri kosong berarti nomor otomatis.
    """
    detail = _ambil_detail_masuk(detail_id, lock=True)
    jumlah = parse_int(data.get('jumlah'), 1)
    if jumlah <= 0:
        raise ValidationError('Jumlah unit harus lebih dari 0', title='Data Tidak Valid')

    no_seri = teks(data.get('noSeri'))
    if no_seri:
        _validasi_no_seri_manual([{'no_seri': no_seri}])
    else:
        no_seri = allocate_serial_numbers(1)[0]

    unit = DetailBarangMasukNoSeri.objects.create(
        detail=detail, no_seri=no_seri, jumlah=jumlah,
        lokasi=teks(data.get('lokasi')), keterangan=teks(data.get('keterangan')),
    )
    detail.jumlah += jumlah
    detail.save(update_fields=['jumlah'])
    tambah_stok(detail.barang_id, jumlah)
    logger.info("No Seri %s ditambahkan ke detail %s (%s)", unit.no_seri, detail.pk, detail.barang.nama)
    return unit


@transaction.atomic
def ganti_no_seri_unit(detail_id, unit_id, data):
    """Koreksi nomor seri dan lokasi satu unit. Nomor seri unit yang sudah dipakai tidak boleh diganti."""
    detail = _ambil_detail_masuk(detail_id, lock=True)
    unit = _ambil_unit_detail(detail, unit_id)
    no_seri = teks(data.get('noSeri'))
    if not no_seri:
        raise ValidationError('No Seri wajib diisi', title='Data Tidak Lengkap')

    if no_seri != unit.no_seri:
        if not POLA_NO_SERI.match(no_seri):
            raise ValidationError(f"No Seri {no_seri} harus terdiri dari {PANJANG_NO_SERI} digit angka", title='Data Tidak Valid')
        if DetailBarangMasukNoSeri.objects.filter(no_seri=no_seri).exclude(pk=unit.pk).exists():
            raise ValidationError(f"No Seri {no_seri} sudah digunakan", title='Duplikasi Data')
        if _unit_dipakai(unit):
            raise ValidationError(
                f"No Seri {unit.no_seri} sudah tercatat di barang keluar atau lembar kerja dan tidak dapat diganti",
                title='Data Sedang Digunakan',
            )
        logger.info("No Seri %s diganti menjadi %s", unit.no_seri, no_seri)
        unit.no_seri = no_seri
    if 'lokasi' in data:
        unit.lokasi = teks(data.get('lokasi'))
    unit.save(update_fields=['no_seri', 'lokasi'])
    return unit


@transaction.atomic
def hapus_unit(detail_id, unit_id):
    """Hapus unit yang belum dipakai; jumlah detail dan stok berkurang sebesar jumlah unit."""
    detail = _ambil_detail_masuk(detail_id, lock=True)
    unit = _ambil_unit_detail(detail, unit_id)
    if _unit_dipakai(unit):
        raise ValidationError(
            f"No Seri {unit.no_seri} sudah tercatat di barang keluar atau lembar kerja dan tidak dapat dihapus",
            title='Data Sedang Digunakan',
        )
    if detail.units.count() == 1:
        raise ValidationError(
            'Unit terakhir tidak dapat dihapus. Hapus atau ubah barang masuknya.',
            title='Data Tidak Valid',
        )

    kurangi_stok(detail.barang_id, unit.jumlah)
    detail.jumlah -= unit.jumlah
    detail.save(update_fields=['jumlah'])
    no_seri = unit.no_seri
    unit.delete()
    logger.info("No Seri %s dihapus dari detail %s", no_seri, detail.pk)


@transaction.atomic
def ubah_keterangan_unit(pk, data):
    """Ubah keterangan (`ket`) dan/atau lokasi satu unit; field yang tidak dikirim dibiarkan."""
    if 'ket' not in data and 'keterangan' not in data and 'lokasi' not in data:
        raise ValidationError('Minimal satu field (ket atau lokasi) harus diisi', title='Data Tidak Lengkap')
    unit = DetailBarangMasukNoSeri.objects.select_for_update().filter(pk=parse_int(pk)).first()
    if unit is None:
        raise NotFoundError('Detail barang masuk no seri tidak ditemukan')

    if 'ket' in data or 'keterangan' in data:
        unit.keterangan = teks(data.get('ket', data.get('keterangan')))
    if 'lokasi' in data:
        unit.lokasi = teks(data.get('lokasi'))
    unit.save(update_fields=['keterangan', 'lokasi'])
    return unit


def list_barang_masuk(search='', start_date=None, end_date=None):
    queryset = BarangMasuk.objects.filter(is_active=True).prefetch_related('details__barang', 'details__units')
    search = teks(search)
    if search:
        queryset = queryset.filter(
            Q(kode_kedatangan__icontains=search) | Q(nama_supplier__icontains=search) |
            Q(no_form__icontains=search) | Q(status__icontains=search)
        )
    if teks(start_date):
        queryset = queryset.filter(tanggal__gte=parse_tanggal(start_date, 'Tanggal awal'))
    if teks(end_date):
        queryset = queryset.filter(tanggal__lte=parse_tanggal(end_date, 'Tanggal akhir'))
    return queryset


# --- Barang Keluar ---

def available_quantity(unit):
    """Jumlah unit yang belum dipesan oleh barang keluar yang tidak ditolak."""
    return DetailBarangMasukNoSeri.objects.with_tersedia().values_list('tersedia', flat=True).get(pk=unit.pk)


def unit_tersedia_queryset():
    """Unit dari barang masuk aktif berstatus diterima yang masih punya sisa."""
    return (
        DetailBarangMasukNoSeri.objects.with_tersedia()
        .filter(
            detail__barang_masuk__is_active=True,
            detail__barang_masuk__status=BarangMasuk.Status.DITERIMA,
            tersedia__gt=0,
        )
        .select_related('detail__barang', 'detail__barang_masuk')
    )


def search_units(term):
    term = teks(term)
    if len(term) < MIN_KATA_CARI_NO_SERI:
        return []
    queryset = unit_tersedia_queryset().filter(
        Q(no_seri__icontains=term) | Q(detail__barang__kode__icontains=term) |
        Q(detail__barang__nama__icontains=term)
    )
    return list(queryset[:BATAS_HASIL_CARI_NO_SERI])


def _validasi_header_keluar(data):
    kosong = [label for field, label in (('tanggal', 'Tanggal'), ('tujuan', 'Tujuan')) if not teks(data.get(field))]
    if kosong:
        raise ValidationError(f"Field wajib diisi: {', '.join(kosong)}", title='Data Tidak Lengkap')
    return {
        'tanggal': parse_tanggal(data.get('tanggal')),
        'tujuan': teks(data.get('tujuan')),
        'delivery_no': teks(data.get('deliveryNo')),
        'ship_via': teks(data.get('shipVia')),
        'keterangan': teks(data.get('keterangan')),
    }


def _validasi_item_keluar(items):
    """Kembalikan {kunci unit: {...}} dengan qty baris yang merujuk unit sama dijumlahkan."""
    if not items:
        raise ValidationError('Detail barang wajib diisi', title='Data Tidak Lengkap')
    per_unit = {}
    for row in items:
        if not isinstance(row, dict):
            raise ValidationError('Format detail barang tidak valid', title='Data Tidak Valid')
        unit_id = parse_int(row.get('detailBarangMasukNoSeriId'))
        no_seri = teks(row.get('noSeri'))
        if unit_id is None and not no_seri:
            raise ValidationError('Setiap detail barang wajib memilih No Seri', title='Data Tidak Lengkap')
        qty = parse_int(row.get('qty', row.get('jumlah')), 0)
        if qty <= 0:
            raise ValidationError(f"Jumlah untuk No Seri {no_seri or unit_id} harus lebih dari 0", title='Data Tidak Valid')
        key = ('id', unit_id) if unit_id is not None else ('no_seri', no_seri)
        baris = per_unit.setdefault(key, {'qty': 0, 'barang_id': parse_int(row.get('barangId'))})
        baris['qty'] += qty
    return per_unit


def _kunci_unit(key):
    field, value = key
    lookup = {'pk': value} if field == 'id' else {'no_seri': value}
    unit = (
        DetailBarangMasukNoSeri.objects.select_for_update()
        .select_related('detail__barang', 'detail__barang_masuk')
        .filter(**lookup).first()
    )
    if unit is None:
        raise ValidationError(f"No Seri {value} tidak ditemukan", title='Data Tidak Ditemukan')
    return unit


def _simpan_item_keluar(barang_keluar, items):
    for key, baris in _validasi_item_keluar(items).items():
        unit = _kunci_unit(key)
        barang_masuk = unit.detail.barang_masuk
        if not barang_masuk.is_active or barang_masuk.status != BarangMasuk.Status.DITERIMA:
            raise ValidationError(f"No Seri {unit.no_seri} belum berstatus diterima", title='Data Tidak Valid')
        if baris['barang_id'] is not None and baris['barang_id'] != unit.detail.barang_id:
            raise ValidationError(f"No Seri {unit.no_seri} bukan milik barang yang dipilih", title='Data Tidak Valid')

        tersedia = available_quantity(unit)
        if baris['qty'] > tersedia:
            raise ValidationError(
                f"Jumlah untuk No Seri {unit.no_seri} melebihi stok tersedia (maksimal {tersedia})",
                title='Jumlah Melebihi Stok',
            )
        DetailBarangKeluar.objects.create(
            barang_keluar=barang_keluar,
            barang_id=unit.detail.barang_id,
            unit=unit,
            jumlah=baris['qty'],
        )
        kurangi_stok(unit.detail.barang_id, baris['qty'])


def _ambil_barang_keluar(pk):
    barang_keluar = BarangKeluar.objects.select_for_update().filter(pk=parse_int(pk)).first()
    if barang_keluar is None:
        raise NotFoundError('Barang keluar tidak ditemukan')
    return barang_keluar


def _kembalikan_stok_keluar(barang_keluar):
    for detail in barang_keluar.details.all():
        tambah_stok(detail.barang_id, detail.jumlah)


@transaction.atomic
def create_barang_keluar(data, user=None):
    header = _validasi_header_keluar(data)
    barang_keluar = BarangKeluar.objects.create(created_by=user, **header)
    _simpan_item_keluar(barang_keluar, data.get('items'))
    logger.info("Barang keluar %s dibuat", barang_keluar.no_transaksi)
    return barang_keluar


@transaction.atomic
def update_barang_keluar(pk, data, user=None):
    barang_keluar = _ambil_barang_keluar(pk)
    if barang_keluar.status != BarangKeluar.Status.PENDING:
        raise ValidationError('Barang keluar yang sudah diproses tidak dapat diubah', title='Data Terkunci')
    header = _validasi_header_keluar(data)

    _kembalikan_stok_keluar(barang_keluar)
    barang_keluar.details.all().delete()
    for field, value in header.items():
        setattr(barang_keluar, field, value)
    barang_keluar.save()

    _simpan_item_keluar(barang_keluar, data.get('items'))
    logger.info("Barang keluar %s diubah", barang_keluar.no_transaksi)
    return barang_keluar


@transaction.atomic
def delete_barang_keluar(pk):
    barang_keluar = _ambil_barang_keluar(pk)
    if barang_keluar.status == BarangKeluar.Status.APPROVED:
        raise ValidationError('Barang keluar yang sudah disetujui tidak dapat dihapus', title='Data Terkunci')
    if barang_keluar.status == BarangKeluar.Status.PENDING:
        _kembalikan_stok_keluar(barang_keluar)
    no_transaksi = barang_keluar.no_transaksi
    barang_keluar.details.all().delete()
    barang_keluar.delete()
    logger.info("Barang keluar %s dihapus", no_transaksi)


@transaction.atomic
def proses_barang_keluar(pk, action, user):
    """Setujui atau tolak barang keluar yang masih pending."""
    if action not in ('approve', 'reject'):
        raise ValidationError('Action harus approve atau reject')
    barang_keluar = _ambil_barang_keluar(pk)
    if barang_keluar.status != BarangKeluar.Status.PENDING:
        raise ValidationError('Barang keluar sudah diproses')

    if action == 'approve':
        barang_keluar.status = BarangKeluar.Status.APPROVED
    else:
        # Unit kembali tersedia karena with_tersedia() mengabaikan barang keluar yang ditolak
        _kembalikan_stok_keluar(barang_keluar)
        barang_keluar.status = BarangKeluar.Status.REJECTED
    barang_keluar.approved_by = user
    barang_keluar.approved_at = timezone.now()
    barang_keluar.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])
    logger.info("Barang keluar %s -> %s oleh %s", barang_keluar.no_transaksi, barang_keluar.status, user)
    return barang_keluar


def list_barang_keluar(search='', status=''):
    queryset = BarangKeluar.objects.select_related('created_by', 'approved_by').prefetch_related(
        'details__barang', 'details__unit',
    )
    search = teks(search)
    if search:
        queryset = queryset.filter(
            Q(no_transaksi__icontains=search) | Q(tujuan__icontains=search) |
            Q(keterangan__icontains=search) | Q(details__unit__no_seri__icontains=search)
        ).distinct()
    if teks(status):
        queryset = queryset.filter(status=teks(status))
    return queryset
