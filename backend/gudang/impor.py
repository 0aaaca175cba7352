# backend/gudang/impor.py
import logging

import pandas as pd
from django.db import transaction

from .exceptions import ValidationError
from .models import Barang, JenisBarang

logger = logging.getLogger(__name__)

KOLOM_WAJIB = ['Kode_Barang', 'Nama_Barang']


def baca_berkas(file):
    """Baca file Excel (.xlsx); jika gagal, coba sebagai CSV dengan separator ';'."""
    try:
        return pd.read_excel(file, engine='openpyxl', dtype=str)
    except Exception:
        try:
            file.seek(0)
            return pd.read_csv(file, sep=';', dtype=str)
        except Exception as e_csv:
            raise ValidationError(
                f"Gagal membaca file. Pastikan format Excel (.xlsx) atau CSV (separator ';') valid. Detail: {e_csv}",
                title='File Tidak Valid',
            )


def _sel(row, kolom):
    value = row.get(kolom)
    if value is None or pd.isna(value):
        return ''
    return str(value).strip()


@transaction.atomic
def impor_barang(df):
    """
    Tambah/ubah master barang dari DataFrame berkolom Kode_Barang, Nama_Barang, Satuan (opsional).
    Satu baris gagal membatalkan seluruh impor; stok tidak pernah disentuh.
    """
    missing_cols = [col for col in KOLOM_WAJIB if col not in df.columns]
    if missing_cols:
        raise ValidationError(f"Kolom berikut tidak ditemukan di file: {', '.join(missing_cols)}", title='File Tidak Valid')

    dibuat = 0
    diubah = 0
    error_rows = []
    kode_terlihat = set()

    for index, row in df.iterrows():
        row_num = index + 2
        kode = _sel(row, 'Kode_Barang')
        nama = _sel(row, 'Nama_Barang')
        satuan = _sel(row, 'Satuan') or 'unit'

        if not kode or not nama:
            error_rows.append({'row': row_num, 'error': 'Kode_Barang dan Nama_Barang tidak boleh kosong'})
            continue
        if kode.lower() in kode_terlihat:
            error_rows.append({'row': row_num, 'error': f"Kode_Barang '{kode}' muncul lebih dari sekali di file"})
            continue
        kode_terlihat.add(kode.lower())

        barang = Barang.objects.filter(kode__iexact=kode).first()
        if barang is None:
            Barang.objects.create(kode=kode, nama=nama, satuan=satuan)
            dibuat += 1
        else:
            barang.nama = nama
            barang.satuan = satuan
            barang.is_active = True
            barang.save(update_fields=['nama', 'satuan', 'is_active', 'updated_at'])
            diubah += 1

    if error_rows:
        # Raise membatalkan transaksi, tidak ada baris yang tersimpan
        raise ValidationError(
            f"Gagal memproses {len(error_rows)} baris dari file.",
            title='Impor Gagal',
            details={'errors': error_rows},
        )

    logger.info("Impor barang selesai: %d dibuat, %d diubah", dibuat, diubah)
    return {'created': dibuat, 'updated': diubah}


@transaction.atomic
def impor_jenis_barang(rows, user=None):
    """
    Tambah jenis barang dari list {nama, deskripsi?}. Berbeda dari impor barang,
    baris bermasalah hanya dilewati: nama kosong dihitung error, nama yang
    sudah ada dihitung skipped.
    """
    if not isinstance(rows, list):
        raise ValidationError('Data impor harus berupa list', title='Data Tidak Valid')

    dibuat = 0
    dilewati = 0
    errors = []
    for nomor, row in enumerate(rows, start=1):
        nama = str(row.get('nama') or '').strip() if isinstance(row, dict) else ''
        if not nama:
            errors.append({'row': nomor, 'error': 'Nama jenis barang wajib diisi'})
            continue
        if JenisBarang.objects.filter(nama__iexact=nama, is_active=True).exists():
            errors.append({'row': nomor, 'error': f'Nama "{nama}" sudah ada'})
            dilewati += 1
            continue
        JenisBarang.objects.create(nama=nama, deskripsi=str(row.get('deskripsi') or '').strip(), created_by=user)
        dibuat += 1

    logger.info("Impor jenis barang selesai: %d dibuat, %d dilewati, %d error", dibuat, dilewati, len(errors) - dilewati)
    return {
        'successCount': dibuat,
        'skippedCount': dilewati,
        'errorCount': len(errors) - dilewati,
        'errors': errors,
    }
