# backend/gudang/laporan.py
"""
Laporan inventaris per barang dan ringkasan dashboard.

totalQty    = jumlah tersedia seluruh unit barang dari barang masuk aktif
qtyReady    = bagian dari totalQty yang unitnya punya lembar kerja QC yang sudah disetujui
qtyNotReady = totalQty - qtyReady

Jika periode diberikan, unit dibatasi pada tanggal barang masuk dalam periode
dan lembar kerja QC pada tanggal lembar kerja dalam periode.
"""
import io
from datetime import timedelta

import pandas as pd
from django.contrib.auth import get_user_model
from django.db.models import Exists, OuterRef, Q
from django.utils import timezone

from lembar_kerja.models import JenisPekerjaan, Transaksi

from .models import Barang, BarangKeluar, BarangMasuk, DetailBarangMasukNoSeri
from .utils import get_date_range, teks

KOLOM_EKSPOR = ['No', 'Kode Barang', 'Nama Barang', 'Total Qty', 'Qty Ready', 'Qty Not Ready']


def barang_queryset(search=''):
    queryset = Barang.objects.filter(is_active=True).order_by('nama')
    search = teks(search)
    if search:
        queryset = queryset.filter(Q(kode__icontains=search) | Q(nama__icontains=search))
    return queryset


def hitung_inventaris(barang_list, period='', offset=0):
    barang_list = list(barang_list)
    rentang = get_date_range(period)

    qc_approved = Transaksi.objects.filter(
        unit=OuterRef('pk'),
        jenis_pekerjaan=JenisPekerjaan.QC,
        is_approved=True,
        is_active=True,
    )
    units = DetailBarangMasukNoSeri.objects.with_tersedia().filter(
        detail__barang__in=barang_list,
        detail__barang_masuk__is_active=True,
    )
    if rentang:
        start, end = rentang
        units = units.filter(detail__barang_masuk__tanggal__range=(start, end))
        qc_approved = qc_approved.filter(tanggal__date__range=(start, end))
    units = units.annotate(siap=Exists(qc_approved))

    total = {}
    ready = {}
    for barang_id, tersedia, siap in units.values_list('detail__barang_id', 'tersedia', 'siap'):
        total[barang_id] = total.get(barang_id, 0) + tersedia
        if siap:
            ready[barang_id] = ready.get(barang_id, 0) + tersedia

    rows = []
    for index, barang in enumerate(barang_list, start=offset + 1):
        total_qty = total.get(barang.pk, 0)
        qty_ready = ready.get(barang.pk, 0)
        rows.append({
            'no': index,
            'id': barang.pk,
            'kodeBarang': barang.kode,
            'namaBarang': barang.nama,
            'totalQty': total_qty,
            'qtyReady': qty_ready,
            'qtyNotReady': total_qty - qty_ready,
        })
    return rows


def nama_file_ekspor(period, ext='csv'):
    return f"laporan-inventaris-{teks(period) or 'semua'}-{timezone.localdate().isoformat()}.{ext}"


def ekspor_inventaris(rows, fmt='csv'):
    """Tulis baris laporan ke CSV atau Excel; mengembalikan (bytes, content_type, ext)."""
    df = pd.DataFrame(
        [[row['no'], row['kodeBarang'], row['namaBarang'], row['totalQty'], row['qtyReady'], row['qtyNotReady']] for row in rows],
        columns=KOLOM_EKSPOR,
    )
    if fmt == 'xlsx':
        buffer = io.BytesIO()
        df.to_excel(buffer, index=False, sheet_name='Inventaris', engine='openpyxl')
        return buffer.getvalue(), 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet', 'xlsx'
    return df.to_csv(index=False).encode('utf-8'), 'text/csv', 'csv'


# --- Ringkasan dashboard ---

HARI_DASHBOARD = 30
JUMLAH_AKTIVITAS = 5


def _aktivitas_masuk(barang_masuk):
    detail = next(iter(barang_masuk.details.all()), None)
    return {
        'id': f"masuk-{barang_masuk.pk}",
        'type': 'barang_masuk',
        'title': f"Barang Masuk: {detail.barang.nama if detail else '-'}",
        'description': f"Barang masuk dengan kode {barang_masuk.kode_kedatangan or barang_masuk.no_form}",
        'timestamp': barang_masuk.created_at,
        'status': barang_masuk.status,
    }


def _aktivitas_keluar(barang_keluar):
    detail = next(iter(barang_keluar.details.all()), None)
    return {
        'id': f"keluar-{barang_keluar.pk}",
        'type': 'barang_keluar',
        'title': f"Barang Keluar: {detail.barang.nama if detail else '-'}",
        'description': f"Barang keluar dengan kode {barang_keluar.no_transaksi}",
        'timestamp': barang_keluar.created_at,
        'status': barang_keluar.status,
    }


def ringkasan_dashboard(today=None):
    """
    Angka ringkas halaman depan: barang aktif, barang masuk/keluar
    30 hari terakhir (berdasarkan tanggal dokumen), pengguna aktif, dan
    aktivitas terbaru gabungan barang masuk dan keluar.
    """
    today = today or timezone.localdate()
    sejak = today - timedelta(days=HARI_DASHBOARD)

    masuk_terbaru = (
        BarangMasuk.objects.filter(is_active=True)
        .prefetch_related('details__barang')
        .order_by('-created_at', '-id')[:JUMLAH_AKTIVITAS]
    )
    keluar_terbaru = (
        BarangKeluar.objects.prefetch_related('details__barang')
        .order_by('-created_at', '-id')[:JUMLAH_AKTIVITAS]
    )
    aktivitas = [_aktivitas_masuk(item) for item in masuk_terbaru] + [_aktivitas_keluar(item) for item in keluar_terbaru]
    aktivitas.sort(key=lambda row: row['timestamp'], reverse=True)

    return {
        'totalBarang': Barang.objects.filter(is_active=True).count(),
        'barangMasuk': BarangMasuk.objects.filter(is_active=True, tanggal__gte=sejak).count(),
        'barangKeluar': BarangKeluar.objects.filter(tanggal__gte=sejak).count(),
        'totalPengguna': get_user_model().objects.filter(is_active=True).count(),
        'activities': aktivitas,
    }
