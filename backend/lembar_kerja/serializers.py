# backend/lembar_kerja/serializers.py
from rest_framework import serializers

from .models import Transaksi


class TransaksiSerializer(serializers.ModelSerializer):
    """Header lembar kerja (tanpa item checklist)."""
    noSeri = serializers.CharField(source='unit.no_seri')
    noForm = serializers.CharField(source='no_form')
    jenisPekerjaan = serializers.CharField(source='jenis_pekerjaan')
    jenisPekerjaanDisplay = serializers.CharField(source='get_jenis_pekerjaan_display')
    staff = serializers.CharField(source='staff.username', default=None)
    pic = serializers.CharField(source='pic.username', default=None)
    isApproved = serializers.BooleanField(source='is_approved')
    approvedAt = serializers.DateTimeField(source='approved_at')
    approvedBy = serializers.CharField(source='approved_by.username', default=None)
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = Transaksi
        fields = (
            'id', 'noSeri', 'noForm', 'jenisPekerjaan', 'jenisPekerjaanDisplay', 'tanggal', 'staff', 'pic',
            'status', 'keterangan', 'lokasi', 'qty', 'isApproved', 'approvedAt', 'approvedBy', 'version', 'updatedAt',
        )
        read_only_fields = fields

class ApprovalSerializer(TransaksiSerializer):
    """Baris daftar approval: header lembar kerja plus identitas barang."""
    kodeBarang = serializers.CharField(source='unit.detail.barang.kode')
    namaBarang = serializers.CharField(source='unit.detail.barang.nama')

    class Meta(TransaksiSerializer.Meta):
        fields = TransaksiSerializer.Meta.fields + ('kodeBarang', 'namaBarang')
        read_only_fields = fields


def lembar_kerja_data(lembar):
    """Bentuk respons GET/PUT lembar kerja dari dict hasil services.get_lembar_kerja."""
    unit = lembar['unit']
    transaksi = lembar['transaksi']
    return {
        'noSeri': unit.no_seri,
        'kodeBarang': unit.detail.barang.kode,
        'namaBarang': unit.detail.barang.nama,
        'kodeKedatangan': unit.detail.barang_masuk.kode_kedatangan,
        'lokasi': unit.lokasi,
        'jenisPekerjaan': lembar['jenis'].value,
        'transaksi': TransaksiSerializer(transaksi).data if transaksi is not None else None,
        'items': lembar['items'],
    }
