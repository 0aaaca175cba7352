# backend/users/views.py
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q

from rest_framework import generics, viewsets, status
from rest_framework.decorators import action
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import IsAuthenticated, AllowAny
from rest_framework.views import APIView
from rest_framework.authtoken.models import Token

from gudang.exceptions import ValidationError
from gudang.permissions import IsAdminUser
from gudang.utils import paginate_queryset, teks
from gudang.views import sukses
from .serializers import (
    UserSerializer,
    UserWriteSerializer,
    ChangePasswordSerializer,
    LoginSerializer,
    UpdateProfileSerializer,
)

logger = logging.getLogger(__name__)

CustomUser = get_user_model()

class UserViewSet(viewsets.ModelViewSet):
    """
    API endpoint untuk mengelola user. Hanya Admin, kecuali lookup
    job-types dan roles yang boleh dibaca semua user login.
    Hapus = nonaktifkan user dan cabut tokennya.
    """
    queryset = CustomUser.objects.all().order_by('username')
    serializer_class = UserSerializer
    permission_classes = [IsAdminUser]

    def get_permissions(self):
        if self.action in ('job_types', 'roles'):
            return [IsAuthenticated()]
        return super().get_permissions()

    def get_serializer_class(self):
        if self.action in ('create', 'update', 'partial_update'):
            return UserWriteSerializer
        return UserSerializer

    def get_queryset(self):
        queryset = super().get_queryset()
        search = teks(self.request.query_params.get('search'))
        role = teks(self.request.query_params.get('role'))
        if search:
            queryset = queryset.filter(Q(username__icontains=search) | Q(name__icontains=search) | Q(email__icontains=search))
        if role:
            queryset = queryset.filter(role=role)
        return queryset

    def list(self, request, *args, **kwargs):
        items, pagination = paginate_queryset(
            self.get_queryset(), request.query_params.get('page'), request.query_params.get('limit'),
        )
        return sukses(UserSerializer(items, many=True).data, pagination=pagination)

    def retrieve(self, request, *args, **kwargs):
        return sukses(UserSerializer(self.get_object()).data)

    def create(self, request, *args, **kwargs):
        serializer = UserWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User %s dibuat oleh %s", user.username, request.user)
        return sukses(UserSerializer(user).data, 'User berhasil ditambahkan', status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = UserWriteSerializer(self.get_object(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return sukses(UserSerializer(user).data, 'User berhasil diperbarui')

    def destroy(self, request, *args, **kwargs):
        user = self.get_object()
        user.is_active = False
        user.save(update_fields=['is_active'])
        Token.objects.filter(user=user).delete()
        logger.info("User %s dinonaktifkan oleh %s", user.username, request.user)
        return sukses(message='User berhasil dinonaktifkan')

    @action(detail=False, methods=['get'], url_path='job-types')
    def job_types(self, request):
        """User aktif per jenis jabatan (?jobType=staff|supervisor|admin)."""
        queryset = CustomUser.objects.filter(is_active=True).order_by('name', 'username')
        job_type = teks(request.query_params.get('jobType'))
        if job_type:
            queryset = queryset.filter(job_type=job_type)
        return sukses(UserSerializer(queryset, many=True).data)

    @action(detail=False, methods=['get'])
    def roles(self, request):
        return sukses([{'value': value, 'label': str(label)} for value, label in CustomUser.Role.choices])

class CurrentUserView(generics.RetrieveAPIView):
    """
    API endpoint untuk mendapatkan detail user yang sedang login.
    """
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated]

    def retrieve(self, request, *args, **kwargs):
        return sukses(self.get_serializer(request.user).data)

class LoginView(APIView):
    """
    API View untuk user login menggunakan username dan password.
    Mengembalikan auth token dan data user.
    """
    permission_classes = [AllowAny]
    serializer_class = LoginSerializer

    def post(self, request, *args, **kwargs):
        if not (request.data.get('username') and request.data.get('password')):
            raise ValidationError('Username dan password wajib diisi')
        serializer = self.serializer_class(data=request.data, context={'request': request})
        if not serializer.is_valid():
            logger.warning("Login gagal untuk username %r", request.data.get('username'))
            # Kredensial salah selalu 401
            raise AuthenticationFailed(serializer.errors['non_field_errors'][0])

        user = serializer.validated_data['user']
        token, created = Token.objects.get_or_create(user=user)
        logger.info("User %s login", user.username)
        return sukses({
            'token': token.key,
            'user': UserSerializer(user).data,
        })

class LogoutView(APIView):
    """
    API endpoint untuk logout (menghapus token autentikasi).
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        Token.objects.filter(user=request.user).delete()
        return sukses(message='Logout berhasil')

class ChangePasswordView(APIView):
    """
    API endpoint untuk mengubah password (membutuhkan password lama).
    """
    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = ChangePasswordSerializer(data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data['newPassword'])
        request.user.save(update_fields=['password'])
        return sukses(message='Password berhasil diubah.')

class UpdateProfileView(APIView):
    """
    API endpoint untuk mengubah profil sendiri (nama, username, dan opsional password).
    """
    permission_classes = [IsAuthenticated]

    def put(self, request, *args, **kwargs):
        serializer = UpdateProfileSerializer(request.user, data=request.data, context={'request': request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info("User %s memperbarui profil", user.username)
        return sukses(UserSerializer(user).data, 'Profil berhasil diupdate')
