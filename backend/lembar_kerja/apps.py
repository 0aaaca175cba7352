# backend/lembar_kerja/apps.py
from django.apps import AppConfig


class LembarKerjaConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'lembar_kerja'
    verbose_name = 'Lembar Kerja'
