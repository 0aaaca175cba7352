# backend/gudang/serializers.py
from rest_framework import serializers

from .models import (
    Barang, BarangKeluar, BarangMasuk, DetailBarangKeluar, DetailBarangMasuk,
    DetailBarangMasukNoSeri, JenisBarang,
)

# --- Serializer Master Barang ---

class JenisBarangSerializer(serializers.ModelSerializer):
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = JenisBarang
        fields = ('id', 'nama', 'deskripsi', 'isActive', 'createdAt', 'updatedAt')
        extra_kwargs = {
            'nama': {'error_messages': {'blank': 'Nama jenis barang wajib diisi', 'required': 'Nama jenis barang wajib diisi'}},
            'deskripsi': {'required': False, 'allow_blank': True, 'allow_null': True},
        }

    def validate_nama(self, value):
        return value.strip()

    def validate_deskripsi(self, value):
        return (value or '').strip()

    def validate(self, attrs):
        nama = attrs.get('nama')
        if nama:
            duplikat = JenisBarang.objects.filter(nama__iexact=nama, is_active=True)
            if self.instance is not None:
                duplikat = duplikat.exclude(pk=self.instance.pk)
            if duplikat.exists():
                raise serializers.ValidationError('Nama jenis barang sudah ada')
        return attrs

class JenisBarangRingkasSerializer(serializers.ModelSerializer):
    class Meta:
        model = JenisBarang
        fields = ('id', 'nama', 'deskripsi')

class BarangSerializer(serializers.ModelSerializer):
    jenisId = serializers.IntegerField(source='jenis_id', read_only=True)
    jenis = JenisBarangRingkasSerializer(read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Barang
        fields = ('id', 'kode', 'nama', 'satuan', 'stok', 'jenisId', 'jenis', 'isActive', 'createdAt', 'updatedAt')
        # stok hanya berubah lewat barang masuk/keluar
        read_only_fields = ('stok',)
        extra_kwargs = {
            'kode': {
                'validators': [],
                'error_messages': {'blank': 'Kode barang wajib diisi', 'required': 'Kode barang wajib diisi'},
            },
            'nama': {'error_messages': {'blank': 'Nama barang wajib diisi', 'required': 'Nama barang wajib diisi'}},
        }

    def validate_kode(self, value):
        return value.strip()

    def validate_nama(self, value):
        return value.strip()

    def validate(self, attrs):
        kode = attrs.get('kode')
        if kode:
            duplikat = Barang.objects.filter(kode__iexact=kode)
            if self.instance is not None:
                duplikat = duplikat.exclude(pk=self.instance.pk)
            if duplikat.exists():
                raise serializers.ValidationError('Kode barang sudah ada')
        return attrs

class BarangImportSerializer(serializers.Serializer):
    file = serializers.FileField()

# --- Serializer Barang Masuk ---

class UnitSerializer(serializers.ModelSerializer):
    noSeri = serializers.CharField(source='no_seri', read_only=True)

    class Meta:
        model = DetailBarangMasukNoSeri
        fields = ('id', 'noSeri', 'jumlah', 'lokasi', 'keterangan')

class DetailBarangMasukSerializer(serializers.ModelSerializer):
    barangId = serializers.IntegerField(source='barang_id', read_only=True)
    kodeBarang = serializers.CharField(source='barang.kode', read_only=True)
    namaBarang = serializers.CharField(source='barang.nama', read_only=True)
    units = UnitSerializer(many=True, read_only=True)

    class Meta:
        model = DetailBarangMasuk
        fields = ('id', 'barangId', 'kodeBarang', 'namaBarang', 'jumlah', 'units')

class BarangMasukSerializer(serializers.ModelSerializer):
    kodeKedatangan = serializers.CharField(source='kode_kedatangan')
    namaSupplier = serializers.CharField(source='nama_supplier')
    noForm = serializers.CharField(source='no_form')
    isActive = serializers.BooleanField(source='is_active')
    createdAt = serializers.DateTimeField(source='created_at')
    details = DetailBarangMasukSerializer(many=True, read_only=True)

    class Meta:
        model = BarangMasuk
        fields = ('id', 'tanggal', 'kodeKedatangan', 'namaSupplier', 'noForm', 'status', 'isActive', 'createdAt', 'details')
        read_only_fields = fields

class UnitTersediaSerializer(serializers.ModelSerializer):
    """Hasil pencarian nomor seri untuk form barang keluar (butuh anotasi with_tersedia)."""
    noSeri = serializers.CharField(source='no_seri')
    barangId = serializers.IntegerField(source='detail.barang_id')
    kodeBarang = serializers.CharField(source='detail.barang.kode')
    namaBarang = serializers.CharField(source='detail.barang.nama')
    kodeKedatangan = serializers.CharField(source='detail.barang_masuk.kode_kedatangan')
    tersedia = serializers.IntegerField()

    class Meta:
        model = DetailBarangMasukNoSeri
        fields = ('id', 'noSeri', 'barangId', 'kodeBarang', 'namaBarang', 'kodeKedatangan', 'lokasi', 'jumlah', 'tersedia')
        read_only_fields = fields

# --- Serializer Barang Keluar ---

class DetailBarangKeluarSerializer(serializers.ModelSerializer):
    barangId = serializers.IntegerField(source='barang_id')
    kodeBarang = serializers.CharField(source='barang.kode')
    namaBarang = serializers.CharField(source='barang.nama')
    detailBarangMasukNoSeriId = serializers.IntegerField(source='unit_id')
    noSeri = serializers.CharField(source='unit.no_seri')

    class Meta:
        model = DetailBarangKeluar
        fields = ('id', 'barangId', 'kodeBarang', 'namaBarang', 'detailBarangMasukNoSeriId', 'noSeri', 'jumlah')
        read_only_fields = fields

class BarangKeluarSerializer(serializers.ModelSerializer):
    noTransaksi = serializers.CharField(source='no_transaksi')
    deliveryNo = serializers.CharField(source='delivery_no')
    shipVia = serializers.CharField(source='ship_via')
    createdBy = serializers.CharField(source='created_by.username', default=None)
    approvedBy = serializers.CharField(source='approved_by.username', default=None)
    approvedAt = serializers.DateTimeField(source='approved_at')
    createdAt = serializers.DateTimeField(source='created_at')
    details = DetailBarangKeluarSerializer(many=True)

    class Meta:
        model = BarangKeluar
        fields = (
            'id', 'noTransaksi', 'tanggal', 'tujuan', 'deliveryNo', 'shipVia', 'keterangan', 'status',
            'createdBy', 'approvedBy', 'approvedAt', 'createdAt', 'details',
        )
        read_only_fields = fields

# --- Serializer Laporan ---

class InventarisReportSerializer(serializers.Serializer):
    """Baris laporan inventaris; data berasal dari agregasi di laporan.py."""
    no = serializers.IntegerField(read_only=True)
    id = serializers.IntegerField(read_only=True)
    kodeBarang = serializers.CharField(read_only=True)
    namaBarang = serializers.CharField(read_only=True)
    totalQty = serializers.IntegerField(read_only=True)
    qtyReady = serializers.IntegerField(read_only=True)
    qtyNotReady = serializers.IntegerField(read_only=True)
