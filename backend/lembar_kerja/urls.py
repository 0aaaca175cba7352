# backend/lembar_kerja/urls.py
from django.urls import path
from . import views
from .models import JenisPekerjaan

# Segmen URL untuk tiap jenis lembar kerja
SLUG_JENIS = {
    'inspeksi': JenisPekerjaan.INSPEKSI_MESIN,
    'assembly': JenisPekerjaan.ASSEMBLY,
    'qc': JenisPekerjaan.QC,
    'pdi': JenisPekerjaan.PDI,
    'painting': JenisPekerjaan.PAINTING,
    'pindah-lokasi': JenisPekerjaan.PINDAH_LOKASI,
}

urlpatterns = [
    path('transaksi', views.TransaksiView.as_view(), name='transaksi'),
    path('transaksi/status', views.TransaksiStatusView.as_view(), name='transaksi-status'),
    path('approval', views.ApprovalView.as_view(), name='approval'),
    path('lembar-kerja/<path:no_form>', views.LembarKerjaByFormView.as_view(), name='lembar-kerja-by-form'),
] + [
    path(f'{slug}/<str:no_seri>', views.LembarKerjaView.as_view(), {'jenis_pekerjaan': jenis.value}, name=f'lembar-kerja-{slug}')
    for slug, jenis in SLUG_JENIS.items()
]
