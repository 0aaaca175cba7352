# backend/gudang/models.py

from django.conf import settings
from django.db import models
from django.db.models import F, OuterRef, Q, Subquery, Sum, Value
from django.db.models.functions import Coalesce
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

# --- MASTER BARANG ---

class JenisBarang(models.Model):
    nama = models.CharField(_('nama jenis'), max_length=100)
    deskripsi = models.TextField(_('deskripsi'), blank=True)
    is_active = models.BooleanField(_('aktif'), default=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='jenis_barang_dibuat', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('dibuat oleh'))
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)
    updated_at = models.DateTimeField(_('diubah tanggal'), auto_now=True)

    class Meta:
        verbose_name = _('Jenis Barang')
        verbose_name_plural = _('Jenis Barang')
        ordering = ['-created_at', '-id']

    def __str__(self):
        return self.nama

class Barang(models.Model):
    kode = models.CharField(_('kode barang'), max_length=50, unique=True)
    nama = models.CharField(_('nama barang'), max_length=200)
    satuan = models.CharField(_('satuan'), max_length=20, default='unit')
    jenis = models.ForeignKey(JenisBarang, related_name='barang_set', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('jenis barang'))
    # Hanya diubah oleh proses barang masuk/keluar, tidak pernah langsung oleh user
    stok = models.PositiveIntegerField(_('stok'), default=0, editable=False)
    is_active = models.BooleanField(_('aktif'), default=True)
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)
    updated_at = models.DateTimeField(_('diubah tanggal'), auto_now=True)

    class Meta:
        verbose_name = _('Barang')
        verbose_name_plural = _('Barang')
        ordering = ['nama']

    def __str__(self):
        return f"{self.kode} - {self.nama}"

# --- BARANG MASUK ---

class BarangMasuk(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        DITERIMA = 'diterima', _('Diterima')
        DITOLAK = 'ditolak', _('Ditolak')

    tanggal = models.DateField(_('tanggal'))
    kode_kedatangan = models.CharField(_('kode kedatangan'), max_length=50)
    nama_supplier = models.CharField(_('nama supplier'), max_length=200)
    no_form = models.CharField(_('nomor form'), max_length=50)
    status = models.CharField(_('status'), max_length=20, choices=Status.choices, default=Status.DITERIMA)
    is_active = models.BooleanField(_('aktif'), default=True)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='barang_masuk_dibuat', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('dibuat oleh'))
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)
    updated_at = models.DateTimeField(_('diubah tanggal'), auto_now=True)

    class Meta:
        verbose_name = _('Barang Masuk')
        verbose_name_plural = _('Barang Masuk')
        ordering = ['-tanggal', '-id']
        constraints = [
            models.UniqueConstraint(fields=['kode_kedatangan'], condition=Q(is_active=True), name='uniq_kode_kedatangan_aktif'),
            models.UniqueConstraint(fields=['no_form'], condition=Q(is_active=True), name='uniq_no_form_barang_masuk_aktif'),
        ]

    def __str__(self):
        return f"{self.kode_kedatangan} ({self.nama_supplier})"

class DetailBarangMasuk(models.Model):
    barang_masuk = models.ForeignKey(BarangMasuk, related_name='details', on_delete=models.CASCADE, verbose_name=_('barang masuk'))
    barang = models.ForeignKey(Barang, related_name='detail_masuk_set', on_delete=models.PROTECT, verbose_name=_('barang'))
    jumlah = models.PositiveIntegerField(_('jumlah'))

    class Meta:
        verbose_name = _('Detail Barang Masuk')
        verbose_name_plural = _('Detail Barang Masuk')
        ordering = ['id']

    def __str__(self):
        return f"{self.barang} x {self.jumlah}"


class UnitQuerySet(models.QuerySet):
    def with_tersedia(self):
        """
        Anotasi `terpakai` (jumlah yang sudah dipesan barang keluar yang tidak
        ditolak) dan `tersedia` (= jumlah unit - terpakai).
        Satu-satunya tempat perhitungan jumlah tersedia per unit.
        """
        terpakai = (
            DetailBarangKeluar.objects
            .filter(unit=OuterRef('pk'))
            .exclude(barang_keluar__status=BarangKeluar.Status.REJECTED)
            .values('unit')
            .annotate(total=Sum('jumlah'))
            .values('total')
        )
        return self.annotate(
            terpakai=Coalesce(Subquery(terpakai, output_field=models.IntegerField()), Value(0)),
        ).annotate(tersedia=F('jumlah') - F('terpakai'))

class DetailBarangMasukNoSeri(models.Model):
    """Satu unit fisik hasil barang masuk, diidentifikasi nomor seri 7 digit."""
    detail = models.ForeignKey(DetailBarangMasuk, related_name='units', on_delete=models.CASCADE, verbose_name=_('detail barang masuk'))
    no_seri = models.CharField(_('nomor seri'), max_length=7, unique=True)
    jumlah = models.PositiveIntegerField(_('jumlah'), default=1)
    lokasi = models.CharField(_('lokasi'), max_length=100, blank=True)
    keterangan = models.TextField(_('keterangan'), blank=True)
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)

    objects = UnitQuerySet.as_manager()

    class Meta:
        verbose_name = _('Nomor Seri Barang Masuk')
        verbose_name_plural = _('Nomor Seri Barang Masuk')
        ordering = ['no_seri']

    def __str__(self):
        return self.no_seri

    @property
    def barang(self):
        return self.detail.barang

class SerialNumberLock(models.Model):
    """Baris tunggal yang dikunci (SELECT ... FOR UPDATE) selama alokasi nomor seri."""
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Kunci Nomor Seri')
        verbose_name_plural = _('Kunci Nomor Seri')

# --- BARANG KELUAR ---

class BarangKeluar(models.Model):
    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        APPROVED = 'approved', _('Disetujui')
        REJECTED = 'rejected', _('Ditolak')

    no_transaksi = models.CharField(_('nomor transaksi'), max_length=30, unique=True, editable=False)
    tanggal = models.DateField(_('tanggal'))
    tujuan = models.CharField(_('tujuan'), max_length=200)
    delivery_no = models.CharField(_('nomor delivery'), max_length=100, blank=True)
    ship_via = models.CharField(_('dikirim via'), max_length=100, blank=True)
    keterangan = models.TextField(_('keterangan'), blank=True)
    status = models.CharField(_('status'), max_length=20, choices=Status.choices, default=Status.PENDING)
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='barang_keluar_dibuat', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('dibuat oleh'))
    approved_by = models.ForeignKey(settings.AUTH_USER_MODEL, related_name='barang_keluar_disetujui', null=True, blank=True, on_delete=models.SET_NULL, verbose_name=_('diproses oleh'))
    approved_at = models.DateTimeField(_('diproses tanggal'), null=True, blank=True)
    created_at = models.DateTimeField(_('dibuat tanggal'), auto_now_add=True)
    updated_at = models.DateTimeField(_('diubah tanggal'), auto_now=True)

    class Meta:
        verbose_name = _('Barang Keluar')
        verbose_name_plural = _('Barang Keluar')
        ordering = ['-tanggal', '-id']

    def __str__(self):
        return self.no_transaksi

    def save(self, *args, **kwargs):
        if not self.no_transaksi:
            self.no_transaksi = self._generate_no_transaksi()
        super().save(*args, **kwargs)

    def _generate_no_transaksi(self):
        prefix = f"BK{timezone.localdate().strftime('%Y%m%d')}"
        # Urutan = akhiran numerik terbesar + 1
        nomor = BarangKeluar.objects.filter(no_transaksi__startswith=prefix).exclude(pk=self.pk).values_list('no_transaksi', flat=True)
        akhiran = [int(no[len(prefix):]) for no in nomor if no[len(prefix):].isdigit()]
        sequence = max(akhiran, default=0) + 1
        return f"{prefix}{sequence:03d}"

class DetailBarangKeluar(models.Model):
    barang_keluar = models.ForeignKey(BarangKeluar, related_name='details', on_delete=models.CASCADE, verbose_name=_('barang keluar'))
    barang = models.ForeignKey(Barang, related_name='detail_keluar_set', on_delete=models.PROTECT, verbose_name=_('barang'))
    unit = models.ForeignKey(DetailBarangMasukNoSeri, related_name='keluar_set', on_delete=models.PROTECT, verbose_name=_('nomor seri'))
    jumlah = models.PositiveIntegerField(_('jumlah'))

    class Meta:
        verbose_name = _('Detail Barang Keluar')
        verbose_name_plural = _('Detail Barang Keluar')
        ordering = ['id']

    def __str__(self):
        return f"{self.unit} x {self.jumlah}"
