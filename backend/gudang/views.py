# backend/gudang/views.py
import logging

from django.http import HttpResponse
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from . import laporan, services
from .exceptions import ValidationError
from .impor import baca_berkas, impor_barang, impor_jenis_barang
from .models import Barang, JenisBarang
from .permissions import IsApprover, IsStaffGudangOrReadOnly
from .serializers import (
    BarangImportSerializer, BarangKeluarSerializer, BarangMasukSerializer,
    BarangSerializer, InventarisReportSerializer, JenisBarangSerializer,
    UnitSerializer, UnitTersediaSerializer,
)
from .utils import PERIODE_LAPORAN, paginate_queryset, teks

logger = logging.getLogger(__name__)


def sukses(data=None, message=None, status_code=status.HTTP_200_OK, **extra):
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    body.update(extra)
    return Response(body, status=status_code)

# --- Views Master Barang ---

class JenisBarangViewSet(viewsets.ModelViewSet):
    """API endpoint untuk master jenis barang. Hapus = nonaktifkan, ditolak bila masih dipakai barang."""
    queryset = JenisBarang.objects.filter(is_active=True)
    serializer_class = JenisBarangSerializer
    permission_classes = [IsStaffGudangOrReadOnly]

    def get_queryset(self):
        queryset = super().get_queryset()
        search = teks(self.request.query_params.get('search'))
        if self.action == 'list' and search:
            queryset = queryset.filter(nama__icontains=search)
        return queryset

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        if teks(request.query_params.get('export')).lower() == 'true':
            return sukses(self.get_serializer(queryset, many=True).data)
        items, pagination = paginate_queryset(queryset, request.query_params.get('page'), request.query_params.get('limit'))
        return sukses(self.get_serializer(items, many=True).data, pagination=pagination)

    def retrieve(self, request, *args, **kwargs):
        return sukses(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save(created_by=request.user)
        logger.info("Jenis barang %s ditambahkan oleh %s", serializer.instance.nama, request.user)
        return sukses(serializer.data, 'Jenis barang berhasil ditambahkan', status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return sukses(serializer.data, 'Jenis barang berhasil diperbarui')

    def destroy(self, request, *args, **kwargs):
        services.nonaktifkan_jenis(self.get_object())
        return sukses(message='Jenis barang berhasil dihapus')

    @action(detail=False, methods=['post'], url_path='import')
    def import_data(self, request):
        """Impor banyak jenis barang sekaligus: {"data": [{"nama", "deskripsi"}, ...]}."""
        hasil = impor_jenis_barang(request.data.get('data'), request.user)
        return sukses(hasil, 'Import selesai')

class BarangViewSet(viewsets.ModelViewSet):
    """API endpoint untuk mengelola master barang. Hapus = nonaktifkan."""
    queryset = Barang.objects.all()
    serializer_class = BarangSerializer
    permission_classes = [IsStaffGudangOrReadOnly]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action == 'list':
            queryset = laporan.barang_queryset(self.request.query_params.get('search'))
        return queryset

    def list(self, request, *args, **kwargs):
        items, pagination = paginate_queryset(
            self.get_queryset(), request.query_params.get('page'), request.query_params.get('limit'),
        )
        return sukses(self.get_serializer(items, many=True).data, pagination=pagination)

    def retrieve(self, request, *args, **kwargs):
        return sukses(self.get_serializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        logger.info("Barang %s ditambahkan oleh %s", serializer.instance.kode, request.user)
        return sukses(serializer.data, 'Barang berhasil ditambahkan', status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=kwargs.pop('partial', False))
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return sukses(serializer.data, 'Barang berhasil diperbarui')

    def destroy(self, request, *args, **kwargs):
        barang = self.get_object()
        barang.is_active = False
        barang.save(update_fields=['is_active', 'updated_at'])
        logger.info("Barang %s dinonaktifkan oleh %s", barang.kode, request.user)
        return sukses(message='Barang berhasil dinonaktifkan')

    @action(detail=False, methods=['post'], url_path='import', serializer_class=BarangImportSerializer)
    def import_file(self, request):
        """
        Unggah file Excel/CSV master barang.
        Format file: Kode_Barang, Nama_Barang, Satuan?
        """
        upload_serializer = BarangImportSerializer(data=request.data)
        upload_serializer.is_valid(raise_exception=True)
        hasil = impor_barang(baca_berkas(upload_serializer.validated_data['file']))
        return sukses(
            hasil,
            f"Berhasil memproses {hasil['created'] + hasil['updated']} barang dari file.",
            status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['put'], url_path='assign-jenis')
    def assign_jenis(self, request, pk=None):
        """Pasang barang ke jenis barang; jenisId null melepasnya."""
        if 'jenisId' not in request.data:
            raise ValidationError('ID jenis barang wajib diisi')
        barang = services.assign_jenis(pk, request.data.get('jenisId'))
        if barang.jenis is None:
            pesan = f'Barang "{barang.nama}" berhasil dilepas dari jenis barang'
        else:
            pesan = f'Barang "{barang.nama}" berhasil diassign ke jenis "{barang.jenis.nama}"'
        return sukses(BarangSerializer(barang).data, pesan)

# --- Views Barang Masuk ---

class BarangMasukView(APIView):
    permission_classes = [IsStaffGudangOrReadOnly]

    def get(self, request):
        params = request.query_params
        queryset = services.list_barang_masuk(params.get('search'), params.get('startDate'), params.get('endDate'))
        items, pagination = paginate_queryset(queryset, params.get('page'), params.get('limit'))
        return sukses(BarangMasukSerializer(items, many=True).data, pagination=pagination)

    def post(self, request):
        barang_masuk = services.create_barang_masuk(request.data, request.user)
        return sukses(BarangMasukSerializer(barang_masuk).data, 'Barang masuk berhasil disimpan', status.HTTP_201_CREATED)

    def put(self, request):
        if not request.data.get('id'):
            raise ValidationError('ID barang masuk wajib diisi')
        barang_masuk = services.update_barang_masuk(request.data.get('id'), request.data, request.user)
        return sukses(BarangMasukSerializer(barang_masuk).data, 'Barang masuk berhasil diperbarui')

    def delete(self, request):
        if not request.query_params.get('id'):
            raise ValidationError('ID barang masuk wajib diisi')
        services.delete_barang_masuk(request.query_params.get('id'))
        return sukses(message='Barang masuk berhasil dihapus')

class UnitDetailMasukView(APIView):
    """
    Nomor seri milik satu detail barang masuk.
    PUT dan DELETE memilih unit lewat ?noSeriId=.
    """
    permission_classes = [IsStaffGudangOrReadOnly]

    def _unit_id(self, request):
        unit_id = request.query_params.get('noSeriId')
        if not unit_id:
            raise ValidationError('ID No Seri wajib diisi')
        return unit_id

    def get(self, request, detail_id):
        return sukses(UnitSerializer(services.list_unit_detail(detail_id), many=True).data)

    def post(self, request, detail_id):
        unit = services.tambah_unit(detail_id, request.data)
        return sukses(UnitSerializer(unit).data, 'No Seri berhasil ditambahkan', status.HTTP_201_CREATED)

    def put(self, request, detail_id):
        unit = services.ganti_no_seri_unit(detail_id, self._unit_id(request), request.data)
        return sukses(UnitSerializer(unit).data, 'No Seri berhasil diperbarui')

    def delete(self, request, detail_id):
        services.hapus_unit(detail_id, self._unit_id(request))
        return sukses(message='No Seri berhasil dihapus')

class UnitKeteranganView(APIView):
    """Ubah keterangan/lokasi satu unit tanpa menyentuh nomor seri dan jumlahnya."""
    permission_classes = [IsStaffGudangOrReadOnly]

    def put(self, request, pk):
        unit = services.ubah_keterangan_unit(pk, request.data)
        return sukses(UnitSerializer(unit).data, 'Detail barang berhasil diupdate')

class CariNoSeriView(APIView):
    """Autocomplete nomor seri yang masih tersedia untuk barang keluar."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        units = services.search_units(request.query_params.get('search'))
        return sukses(UnitTersediaSerializer(units, many=True).data)

# --- Views Barang Keluar ---

class BarangKeluarView(APIView):
    permission_classes = [IsStaffGudangOrReadOnly]

    def get(self, request):
        params = request.query_params
        queryset = services.list_barang_keluar(params.get('search'), params.get('status'))
        items, pagination = paginate_queryset(queryset, params.get('page'), params.get('limit'))
        return sukses(BarangKeluarSerializer(items, many=True).data, pagination=pagination)

    def post(self, request):
        barang_keluar = services.create_barang_keluar(request.data, request.user)
        return sukses(BarangKeluarSerializer(barang_keluar).data, 'Barang keluar berhasil disimpan', status.HTTP_201_CREATED)

    def put(self, request):
        if not request.data.get('id'):
            raise ValidationError('ID barang keluar wajib diisi')
        barang_keluar = services.update_barang_keluar(request.data.get('id'), request.data, request.user)
        return sukses(BarangKeluarSerializer(barang_keluar).data, 'Barang keluar berhasil diperbarui')

    def delete(self, request):
        if not request.query_params.get('id'):
            raise ValidationError('ID barang keluar wajib diisi')
        services.delete_barang_keluar(request.query_params.get('id'))
        return sukses(message='Barang keluar berhasil dihapus')

class BarangKeluarApproveView(APIView):
    permission_classes = [IsApprover]

    def put(self, request, pk):
        aksi = request.data.get('action')
        barang_keluar = services.proses_barang_keluar(pk, aksi, request.user)
        pesan = 'disetujui' if aksi == 'approve' else 'ditolak'
        return sukses(BarangKeluarSerializer(barang_keluar).data, f"Barang keluar berhasil {pesan}")

# --- Views Laporan ---

class DashboardView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return sukses(laporan.ringkasan_dashboard())

def _periode(request):
    # Periode tidak dikenal berarti tanpa filter tanggal
    period = teks(request.query_params.get('period'))
    return period if period in PERIODE_LAPORAN else ''

class LaporanInventarisView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        period = _periode(request)
        items, pagination = paginate_queryset(
            laporan.barang_queryset(request.query_params.get('search')),
            request.query_params.get('page'), request.query_params.get('limit'),
        )
        offset = (pagination['page'] - 1) * pagination['limit']
        rows = laporan.hitung_inventaris(items, period, offset=offset)
        return sukses(InventarisReportSerializer(rows, many=True).data, pagination=pagination)

class LaporanInventarisExportView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        period = _periode(request)
        fmt = teks(request.query_params.get('format')).lower() or 'csv'
        if fmt not in ('csv', 'xlsx'):
            raise ValidationError('Format ekspor harus csv atau xlsx')

        rows = laporan.hitung_inventaris(laporan.barang_queryset(request.query_params.get('search')), period)
        content, content_type, ext = laporan.ekspor_inventaris(rows, fmt)
        response = HttpResponse(content, content_type=content_type)
        response['Content-Disposition'] = f'attachment; filename="{laporan.nama_file_ekspor(period, ext)}"'
        return response
