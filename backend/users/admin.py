# backend/users/admin.py
from django.contrib import admin
from django import forms
from django.contrib.auth import get_user_model
from django.utils.translation import gettext_lazy as _

CustomUser = get_user_model()

# --- Form Kustom ---

class CustomUserAdminForm(forms.ModelForm):
    password = forms.CharField(widget=forms.PasswordInput, required=False, help_text=_("Kosongkan jika tidak ingin mengubah password saat edit. Wajib diisi saat menambah user baru."))
    password2 = forms.CharField(label=_("Konfirmasi password"), widget=forms.PasswordInput, required=False)

    class Meta:
        model = CustomUser
        fields = ('username', 'name', 'email', 'role', 'job_type', 'is_active', 'is_staff', 'is_superuser')

    def clean_password2(self):
        password = self.cleaned_data.get("password")
        password2 = self.cleaned_data.get("password2")
        if password and password != password2:
            raise forms.ValidationError(_("Kedua password tidak sama."), code='password_mismatch')
        return password2

    def clean(self):
        cleaned_data = super().clean()
        if not (self.instance and self.instance.pk) and not cleaned_data.get("password"):
            raise forms.ValidationError(_("Password wajib diisi untuk user baru."), code='password_required')
        return cleaned_data


# --- Admin Kustom ---
class CustomUserAdmin(admin.ModelAdmin):
    form = CustomUserAdminForm

    list_display = ('username', 'name', 'role', 'job_type', 'is_staff', 'is_active')
    list_filter = ('role', 'job_type', 'is_staff', 'is_active')
    search_fields = ('username', 'name', 'email')
    ordering = ('username',)

    fieldsets = (
        (None, {'fields': ('username', 'password', 'password2')}),
        (_('Data pribadi'), {'fields': ('name', 'email')}),
        (_('Peran'), {'fields': ('role', 'job_type')}),
        (_('Permissions'), {'fields': ('is_active', 'is_staff', 'is_superuser')}),
    )

    def save_model(self, request, obj, form, change):
        password = form.cleaned_data.get('password')
        if password:
            obj.set_password(password)
        super().save_model(request, obj, form, change)


admin.site.register(CustomUser, CustomUserAdmin)
