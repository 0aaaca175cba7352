# backend/lembar_kerja/admin.py
from django.contrib import admin
from .models import ChecklistItem, PindahLokasi, Transaksi


class ChecklistItemInline(admin.TabularInline):
    model = ChecklistItem
    extra = 0
    fields = ('urutan', 'parameter', 'hasil', 'aktual', 'standar', 'keterangan')

@admin.register(Transaksi)
class TransaksiAdmin(admin.ModelAdmin):
    list_display = ('no_form', 'unit', 'jenis_pekerjaan', 'status', 'staff', 'is_approved', 'version', 'is_active')
    search_fields = ('no_form', 'unit__no_seri', 'unit__detail__barang__nama')
    list_filter = ('jenis_pekerjaan', 'is_approved', 'is_active')
    date_hierarchy = 'tanggal'
    raw_id_fields = ('unit', 'staff', 'pic', 'approved_by')
    # Approval dan versi diatur lewat API
    readonly_fields = ('is_approved', 'approved_at', 'approved_by', 'version', 'created_at', 'updated_at')
    inlines = [ChecklistItemInline]

@admin.register(PindahLokasi)
class PindahLokasiAdmin(admin.ModelAdmin):
    list_display = ('unit', 'dari_lokasi', 'ke_lokasi', 'dipindah_oleh', 'created_at')
    search_fields = ('unit__no_seri', 'dari_lokasi', 'ke_lokasi')
    readonly_fields = ('unit', 'transaksi', 'dari_lokasi', 'ke_lokasi', 'keterangan', 'dipindah_oleh', 'created_at')
