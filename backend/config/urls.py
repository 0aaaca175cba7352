# backend/config/urls.py
from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    path('admin/', admin.site.urls),
    # Semua endpoint API di bawah /api/
    path('api/', include('users.urls')),
    path('api/', include('gudang.urls')),
    path('api/', include('lembar_kerja.urls')),
]
