# backend/users/serializers.py
from rest_framework import serializers
from django.contrib.auth import get_user_model, authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.translation import gettext_lazy as _

CustomUser = get_user_model()

class UserSerializer(serializers.ModelSerializer):
    """Serializer dasar untuk menampilkan data user."""
    roleDisplay = serializers.CharField(source='get_role_display', read_only=True)
    jobType = serializers.CharField(source='job_type', read_only=True)
    isActive = serializers.BooleanField(source='is_active', read_only=True)
    createdAt = serializers.DateTimeField(source='date_joined', read_only=True)

    class Meta:
        model = CustomUser
        fields = ('id', 'username', 'name', 'email', 'role', 'roleDisplay', 'jobType', 'isActive', 'createdAt')
        read_only_fields = fields

class UserWriteSerializer(serializers.ModelSerializer):
    """Tambah/ubah user oleh admin. Password hanya diubah bila diisi."""
    password = serializers.CharField(write_only=True, required=False, allow_blank=True, trim_whitespace=False)
    jobType = serializers.ChoiceField(source='job_type', choices=CustomUser.JobType.choices, required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)

    class Meta:
        model = CustomUser
        fields = ('username', 'password', 'name', 'email', 'role', 'jobType', 'isActive')
        extra_kwargs = {
            # Username unik dicek di validate() agar pesannya seragam
            'username': {'validators': [], 'required': False, 'allow_blank': True},
            'name': {'required': False, 'allow_blank': True},
            'role': {'required': False},
        }

    def validate(self, attrs):
        username = (attrs.get('username') or '').strip()
        if self.instance is None:
            if not username or not attrs.get('password') or not (attrs.get('name') or '').strip():
                raise serializers.ValidationError(_('Username, password, dan nama wajib diisi'))
        elif 'username' in attrs and not username:
            raise serializers.ValidationError(_('Username tidak boleh kosong'))

        if username:
            duplikat = CustomUser.objects.filter(username__iexact=username)
            if self.instance is not None:
                duplikat = duplikat.exclude(pk=self.instance.pk)
            if duplikat.exists():
                raise serializers.ValidationError(_('Username sudah ada'))
            attrs['username'] = username
        return attrs

    def create(self, validated_data):
        password = validated_data.pop('password')
        user = CustomUser(**validated_data)
        user.set_password(password)
        user.save()
        return user

    def update(self, instance, validated_data):
        password = validated_data.pop('password', '')
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance

class ChangePasswordSerializer(serializers.Serializer):
    """Serializer untuk mengubah password user yang sedang login."""
    oldPassword = serializers.CharField(write_only=True, trim_whitespace=False)
    newPassword = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate_oldPassword(self, value):
        if not self.context['request'].user.check_password(value):
            raise serializers.ValidationError(_('Password lama salah.'))
        return value

class UpdateProfileSerializer(serializers.Serializer):
    """
    Ubah nama/username milik sendiri. Password ikut diganti hanya bila
    newPassword diisi, dan wajib disertai currentPassword yang benar.
    """
    name = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    currentPassword = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, write_only=True)
    newPassword = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False, write_only=True)

    def validate(self, attrs):
        user = self.context['request'].user
        name = (attrs.get('name') or '').strip()
        username = (attrs.get('username') or '').strip()
        if not name or not username:
            raise serializers.ValidationError(_('Nama dan username wajib diisi'))
        if CustomUser.objects.filter(username__iexact=username).exclude(pk=user.pk).exists():
            raise serializers.ValidationError(_('Username sudah digunakan'))

        new_password = attrs.get('newPassword') or ''
        if new_password:
            if not attrs.get('currentPassword'):
                raise serializers.ValidationError(_('Password saat ini wajib diisi untuk mengubah password'))
            if not user.check_password(attrs['currentPassword']):
                raise serializers.ValidationError(_('Password saat ini tidak benar'))
            try:
                validate_password(new_password, user)
            except DjangoValidationError as e:
                raise serializers.ValidationError({'newPassword': list(e.messages)})
        return {'name': name, 'username': username, 'new_password': new_password}

    def update(self, instance, validated_data):
        instance.name = validated_data['name']
        instance.username = validated_data['username']
        if validated_data['new_password']:
            instance.set_password(validated_data['new_password'])
        instance.save()
        return instance

class LoginSerializer(serializers.Serializer):
    """Serializer untuk login menggunakan username dan password."""
    username = serializers.CharField(label=_("Username"), write_only=True, required=False, allow_blank=True)
    password = serializers.CharField(
        label=_("Password"),
        style={'input_type': 'password'},
        trim_whitespace=False,
        write_only=True,
        required=False,
        allow_blank=True,
    )

    def validate(self, attrs):
        username = attrs.get('username')
        password = attrs.get('password')

        if not (username and password):
            raise serializers.ValidationError(_('Username dan password wajib diisi'), code='authorization')

        user = authenticate(request=self.context.get('request'), username=username, password=password)
        # authenticate() mengembalikan None juga untuk user tidak aktif
        if not user:
            raise serializers.ValidationError(_('Username atau password salah'), code='authorization')

        attrs['user'] = user
        return attrs
