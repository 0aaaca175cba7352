# backend/gudang/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter(trailing_slash=False)
router.register(r'barang', views.BarangViewSet, basename='barang')
router.register(r'jenis-barang', views.JenisBarangViewSet, basename='jenis-barang')

urlpatterns = [
    path('', include(router.urls)),
    path('dashboard', views.DashboardView.as_view(), name='dashboard'),
    path('barang-masuk', views.BarangMasukView.as_view(), name='barang-masuk'),
    path('barang-masuk/search-with-no-seri', views.CariNoSeriView.as_view(), name='barang-masuk-search-no-seri'),
    path('barang-masuk/<int:detail_id>/no-seri', views.UnitDetailMasukView.as_view(), name='barang-masuk-no-seri'),
    path('detail-barang-masuk-no-seri/<int:pk>', views.UnitKeteranganView.as_view(), name='detail-barang-masuk-no-seri'),
    path('barang-keluar', views.BarangKeluarView.as_view(), name='barang-keluar'),
    path('barang-keluar/<int:pk>/approve', views.BarangKeluarApproveView.as_view(), name='barang-keluar-approve'),
    path('laporan/inventaris', views.LaporanInventarisView.as_view(), name='laporan-inventaris'),
    path('laporan/inventaris/export', views.LaporanInventarisExportView.as_view(), name='laporan-inventaris-export'),
]
