# backend/lembar_kerja/views.py
from rest_framework import permissions
from rest_framework.views import APIView

from gudang.exceptions import ValidationError
from gudang.permissions import IsApprover, IsStaffPekerjaanOrReadOnly
from gudang.utils import paginate_queryset, teks
from gudang.views import sukses

from . import services
from .serializers import ApprovalSerializer, TransaksiSerializer, lembar_kerja_data

# --- Lembar kerja per nomor seri ---

class LembarKerjaView(APIView):
    """
    GET/PUT /api/<jenis>/<noSeri>. Jenis pekerjaan datang dari kwargs URL,
    sehingga satu view melayani inspeksi, assembly, qc, pdi, painting dan pindah lokasi.
    """
    permission_classes = [IsStaffPekerjaanOrReadOnly]

    def get_jenis_pekerjaan(self, request):
        return self.kwargs['jenis_pekerjaan']

    def get(self, request, no_seri, jenis_pekerjaan):
        return sukses(lembar_kerja_data(services.get_lembar_kerja(no_seri, jenis_pekerjaan)))

    def put(self, request, no_seri, jenis_pekerjaan):
        transaksi = services.save_lembar_kerja(no_seri, jenis_pekerjaan, request.data, request.user)
        data = lembar_kerja_data(services.get_lembar_kerja(no_seri, jenis_pekerjaan))
        return sukses(data, f"Lembar kerja {transaksi.no_form} berhasil disimpan")

class LembarKerjaByFormView(APIView):
    """
    GET/PUT /api/lembar-kerja/<noForm>. Nomor form menentukan nomor seri
    dan jenis pekerjaan; selebihnya sama dengan LembarKerjaView.
    """
    permission_classes = [IsStaffPekerjaanOrReadOnly]

    def get_transaksi(self):
        if not hasattr(self, '_transaksi'):
            self._transaksi = services.ambil_transaksi_by_form(self.kwargs['no_form'])
        return self._transaksi

    def get_jenis_pekerjaan(self, request):
        return self.get_transaksi().jenis_pekerjaan

    def get(self, request, no_form):
        transaksi = self.get_transaksi()
        return sukses(lembar_kerja_data(services.get_lembar_kerja(transaksi.unit.no_seri, transaksi.jenis_pekerjaan)))

    def put(self, request, no_form):
        transaksi = self.get_transaksi()
        services.save_lembar_kerja(transaksi.unit.no_seri, transaksi.jenis_pekerjaan, request.data, request.user)
        data = lembar_kerja_data(services.get_lembar_kerja(transaksi.unit.no_seri, transaksi.jenis_pekerjaan))
        return sukses(data, f"Lembar kerja {no_form} berhasil disimpan")

# --- Transaksi (riwayat gabungan) ---

class TransaksiView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        params = request.query_params
        rows = services.list_riwayat(params.get('search'), params.get('jenisPekerjaan'))
        items, pagination = paginate_queryset(rows, params.get('page'), params.get('limit'))
        return sukses(items, pagination=pagination)

    def post(self, request):
        transaksi = services.create_transaksi(request.data, request.user)
        return sukses(TransaksiSerializer(transaksi).data, 'Lembar kerja berhasil dibuat', 201)

class TransaksiStatusView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def put(self, request):
        if not request.data.get('id'):
            raise ValidationError('ID transaksi wajib diisi')
        transaksi = services.update_status_transaksi(request.data.get('id'), request.data.get('status'))
        return sukses(TransaksiSerializer(transaksi).data, 'Status berhasil diperbarui')

# --- Approval ---

def _filter_approved(value):
    value = teks(value).lower()
    if value in ('true', '1'):
        return True
    if value in ('false', '0'):
        return False
    return None

class ApprovalView(APIView):
    permission_classes = [IsApprover]

    def get(self, request):
        params = request.query_params
        queryset = services.list_approval(
            params.get('search'), params.get('jenisPekerjaan'), _filter_approved(params.get('isApproved')),
        )
        items, pagination = paginate_queryset(queryset, params.get('page'), params.get('limit'))
        return sukses(ApprovalSerializer(items, many=True).data, pagination=pagination)

    def put(self, request):
        aksi = request.data.get('action')
        transaksi = services.set_approval(request.data.get('transaksiId'), aksi, request.user)
        pesan = 'disetujui' if aksi == 'approve' else 'dibatalkan persetujuannya'
        return sukses(ApprovalSerializer(transaksi).data, f"Lembar kerja berhasil {pesan}")
