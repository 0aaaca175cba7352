# backend/gudang/admin.py
from django.contrib import admin
from .models import (
    Barang, BarangMasuk, DetailBarangMasuk, DetailBarangMasukNoSeri,
    BarangKeluar, DetailBarangKeluar, JenisBarang,
)

# --- Master Barang ---

@admin.register(Barang)
class BarangAdmin(admin.ModelAdmin):
    list_display = ('kode', 'nama', 'satuan', 'stok', 'is_active', 'updated_at')
    search_fields = ('kode', 'nama')
    list_filter = ('is_active', 'satuan')
    # stok hanya berubah lewat barang masuk/keluar
    readonly_fields = ('stok', 'created_at', 'updated_at')
    ordering = ('nama',)

@admin.register(JenisBarang)
class JenisBarangAdmin(admin.ModelAdmin):
    list_display = ('nama', 'is_active', 'created_by', 'updated_at')
    search_fields = ('nama',)
    list_filter = ('is_active',)
    readonly_fields = ('created_by', 'created_at', 'updated_at')


# --- Barang Masuk ---

class DetailBarangMasukInline(admin.TabularInline):
    model = DetailBarangMasuk
    extra = 0
    raw_id_fields = ('barang',)
    readonly_fields = ('barang', 'jumlah')
    can_delete = False

@admin.register(BarangMasuk)
class BarangMasukAdmin(admin.ModelAdmin):
    list_display = ('kode_kedatangan', 'no_form', 'tanggal', 'nama_supplier', 'status', 'is_active', 'created_by')
    search_fields = ('kode_kedatangan', 'no_form', 'nama_supplier')
    list_filter = ('status', 'is_active', 'tanggal')
    date_hierarchy = 'tanggal'
    readonly_fields = ('created_by', 'created_at', 'updated_at')
    inlines = [DetailBarangMasukInline]

@admin.register(DetailBarangMasukNoSeri)
class DetailBarangMasukNoSeriAdmin(admin.ModelAdmin):
    list_display = ('no_seri', 'barang', 'jumlah', 'lokasi', 'created_at')
    search_fields = ('no_seri', 'detail__barang__nama', 'detail__barang__kode', 'detail__barang_masuk__kode_kedatangan')
    list_filter = ('lokasi',)
    # Nomor seri dibuat otomatis oleh alokator
    readonly_fields = ('no_seri', 'detail', 'jumlah', 'created_at')


# --- Barang Keluar ---

class DetailBarangKeluarInline(admin.TabularInline):
    model = DetailBarangKeluar
    extra = 0
    raw_id_fields = ('barang', 'unit')
    readonly_fields = ('barang', 'unit', 'jumlah')
    can_delete = False

@admin.register(BarangKeluar)
class BarangKeluarAdmin(admin.ModelAdmin):
    list_display = ('no_transaksi', 'tanggal', 'tujuan', 'status', 'created_by', 'approved_by')
    search_fields = ('no_transaksi', 'tujuan', 'delivery_no')
    list_filter = ('status', 'tanggal')
    date_hierarchy = 'tanggal'
    readonly_fields = ('no_transaksi', 'status', 'created_by', 'approved_by', 'approved_at', 'created_at', 'updated_at')
    inlines = [DetailBarangKeluarInline]
