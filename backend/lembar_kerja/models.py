# backend/lembar_kerja/models.py

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from gudang.models import DetailBarangMasukNoSeri


class JenisPekerjaan(models.TextChoices):
    """Jenis lembar kerja. Nilainya sama dengan role staf yang mengerjakannya."""
    INSPEKSI_MESIN = 'inspeksi_mesin', _('Inspeksi Mesin')
    ASSEMBLY = 'assembly_staff', _('Assembly')
    QC = 'qc_staff', _('QC')
    PDI = 'pdi_staff', _('PDI')
    PAINTING = 'painting_staff', _('Painting')
    PINDAH_LOKASI = 'pindah_lokasi', _('Pindah Lokasi')

# --- LEMBAR KERJA (TRANSAKSI PER NOMOR SERI) ---

class Transaksi(models.Model):
    STATUS_AWAL = 'Proses'

    unit = models.ForeignKey(DetailBarangMasukNoSeri, related_name='transaksi_set', on_delete=models.PROTECT, verbose_name=_('nomor seri'))
    jenis_pekerjaan = models.CharField(_('jenis pekerjaan'), max_length=30, choices=JenisPekerjaan.choices)
    no_form = models.CharField(_('nomor form'), max_length=100)
    tanggal = models.DateTimeField(_('tanggal'), default=timezone.now)
    staff = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='transaksi_dikerjakan', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('staf'))
    pic = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='transaksi_dibuat', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('PIC'))
    status = models.CharField(_('status'), max_length=50, default=STATUS_AWAL)
    keterangan = models.TextField(_('keterangan'), blank=True)
    lokasi = models.CharField(_('lokasi'), max_length=100, blank=True)
    qty = models.PositiveIntegerField(_('jumlah'), default=1)
    is_approved = models.BooleanField(_('disetujui'), default=False)
    approved_at = models.DateTimeField(_('disetujui tanggal'), null=True, blank=True)
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='transaksi_disetujui', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('disetujui oleh'))
    # Naik setiap kali checklist disimpan; dipakai untuk menolak simpanan dari data basi
    version = models.PositiveIntegerField(_('versi'), default=1)
    is_active = models.BooleanField(_('aktif'), default=True)
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)
    updated_at = models.DateTimeField(_('diubah tanggal'), auto_now=True)

    class Meta:
        verbose_name = _('Lembar Kerja')
        verbose_name_plural = _('Lembar Kerja')
        ordering = ['-tanggal', '-id']
        constraints = [
            models.UniqueConstraint(fields=['unit', 'jenis_pekerjaan'], condition=Q(is_active=True), name='uniq_lembar_kerja_aktif'),
        ]

    def __str__(self):
        return f"{self.no_form} ({self.get_jenis_pekerjaan_display()})"

class ChecklistItem(models.Model):
    transaksi = models.ForeignKey(Transaksi, related_name='items', on_delete=models.CASCADE, verbose_name=_('lembar kerja'))
    urutan = models.PositiveIntegerField(_('urutan'))
    parameter = models.CharField(_('parameter'), max_length=500)
    hasil = models.BooleanField(_('hasil'), null=True, blank=True)
    aktual = models.CharField(_('aktual'), max_length=255, blank=True)
    standar = models.CharField(_('standar'), max_length=255, blank=True)
    keterangan = models.TextField(_('keterangan'), blank=True)

    class Meta:
        verbose_name = _('Item Checklist')
        verbose_name_plural = _('Item Checklist')
        ordering = ['urutan', 'id']

    def __str__(self):
        return self.parameter

class PindahLokasi(models.Model):
    """Riwayat perpindahan lokasi satu unit."""
    unit = models.ForeignKey(DetailBarangMasukNoSeri, related_name='riwayat_lokasi', on_delete=models.CASCADE, verbose_name=_('nomor seri'))
    transaksi = models.ForeignKey(Transaksi, related_name='riwayat_lokasi', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('lembar kerja'))
    dari_lokasi = models.CharField(_('dari lokasi'), max_length=100)
    ke_lokasi = models.CharField(_('ke lokasi'), max_length=100)
    keterangan = models.TextField(_('keterangan'), blank=True)
    dipindah_oleh = models.ForeignKey(settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('dipindah oleh'))
    created_at = models.DateTimeField(_('waktu'), auto_now_add=True)

    class Meta:
        verbose_name = _('Riwayat Pindah Lokasi')
        verbose_name_plural = _('Riwayat Pindah Lokasi')
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.unit}: {self.dari_lokasi} -> {self.ke_lokasi}"
