# backend/users/models.py
from django.contrib.auth.models import AbstractUser, UserManager
from django.db import models
from django.utils.translation import gettext_lazy as _

# --- CUSTOM USER MANAGER ---
class CustomUserManager(UserManager):
    """
    Manager user berbasis username. Superuser otomatis mendapat role ADMIN
    dan job type admin.
    """
    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault('role', CustomUser.Role.ADMIN)
        extra_fields.setdefault('job_type', CustomUser.JobType.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)

# --- CUSTOM USER MODEL ---
class CustomUser(AbstractUser):
    class Role(models.TextChoices):
        # Nilai role staf sama dengan nilai JenisPekerjaan di lembar_kerja
        INSPEKSI_MESIN = 'inspeksi_mesin', _('Inspeksi Mesin')
        ASSEMBLY = 'assembly_staff', _('Assembly')
        QC = 'qc_staff', _('QC')
        PDI = 'pdi_staff', _('PDI')
        PAINTING = 'painting_staff', _('Painting')
        PINDAH_LOKASI = 'pindah_lokasi', _('Pindah Lokasi')
        STAFF_GUDANG = 'user', _('Staff Gudang')
        SUPERVISOR = 'supervisor', _('Supervisor')
        ADMIN = 'admin', _('Administrator')

    class JobType(models.TextChoices):
        STAFF = 'staff', _('Staff')
        SUPERVISOR = 'supervisor', _('Supervisor')
        ADMIN = 'admin', _('Admin')

    name = models.CharField(_('nama'), max_length=150)
    email = models.EmailField(_('email address'), blank=True)
    role = models.CharField(
        _('Role'),
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF_GUDANG
    )
    job_type = models.CharField(
        _('jenis jabatan'),
        max_length=20,
        choices=JobType.choices,
        default=JobType.STAFF
    )

    REQUIRED_FIELDS = ['name']

    objects = CustomUserManager()

    class Meta:
        verbose_name = _('Pengguna')
        verbose_name_plural = _('Pengguna')
        ordering = ['username']

    def __str__(self):
        return self.name or self.username

    # Properties untuk cek role
    @property
    def is_admin(self):
        # Superuser juga dianggap admin dalam konteks aplikasi ini
        return self.role == self.Role.ADMIN or self.is_superuser

    @property
    def is_supervisor(self):
        return self.role == self.Role.SUPERVISOR

    @property
    def is_approver(self):
        return self.is_admin or self.is_supervisor

    @property
    def is_staff_gudang(self):
        """Boleh mencatat barang masuk/keluar dan mengelola master barang."""
        return self.role == self.Role.STAFF_GUDANG or self.is_approver

    def bisa_mengerjakan(self, jenis_pekerjaan):
        return self.role == jenis_pekerjaan
