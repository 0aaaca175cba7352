# backend/gudang/permissions.py
from rest_framework import permissions

from users.models import CustomUser # Impor model user kustom


def _login(request):
    return bool(request.user and request.user.is_authenticated)


class IsAdminUser(permissions.BasePermission):
    """Hanya mengizinkan akses untuk user dengan role admin atau superuser."""
    message = 'Hanya administrator yang dapat mengakses data ini.'

    def has_permission(self, request, view):
        return _login(request) and (request.user.role == CustomUser.Role.ADMIN or request.user.is_superuser)

class IsApprover(permissions.BasePermission):
    """Hanya Supervisor atau Admin yang bisa menyetujui."""
    message = 'Hanya supervisor atau administrator yang dapat melakukan approval.'

    def has_permission(self, request, view):
        return _login(request) and request.user.is_approver

class IsStaffGudangOrReadOnly(permissions.BasePermission):
    """Read-only untuk semua user login, write hanya untuk Staff Gudang, Supervisor atau Admin."""
    message = 'Hanya staff gudang, supervisor atau administrator yang dapat mengubah data gudang.'

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return _login(request)
        return _login(request) and request.user.is_staff_gudang

class IsStaffPekerjaanOrReadOnly(permissions.BasePermission):
    """
    Lembar kerja hanya boleh diubah oleh staf dengan role yang sama dengan
    jenis pekerjaannya. View menyediakan get_jenis_pekerjaan(request).
    """
    message = 'Lembar kerja ini hanya dapat diubah oleh staf bagian terkait.'

    def has_permission(self, request, view):
        if not _login(request):
            return False
        if request.method in permissions.SAFE_METHODS:
            return True
        return request.user.bisa_mengerjakan(view.get_jenis_pekerjaan(request))
