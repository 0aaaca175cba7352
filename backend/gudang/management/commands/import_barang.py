# backend/gudang/management/commands/import_barang.py

from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from gudang.exceptions import ValidationError
from gudang.impor import baca_berkas, impor_barang


class Command(BaseCommand):
    help = 'Impor master barang dari file Excel (.xlsx) atau CSV (separator ;)'

    def add_arguments(self, parser):
        parser.add_argument('filepath', type=str, help='Path lengkap ke file Excel/CSV')

    def handle(self, *args, **options):
        filepath = Path(options['filepath'])
        if not filepath.is_file():
            raise CommandError(f"File tidak ditemukan: {filepath}")

        self.stdout.write(f"Mulai impor dari {filepath}...")
        try:
            with open(filepath, 'rb') as file:
                hasil = impor_barang(baca_berkas(file))
        except ValidationError as e:
            for row in (e.details or {}).get('errors', []):
                self.stderr.write(self.style.WARNING(f"Baris {row['row']}: {row['error']}"))
            raise CommandError(e.message)

        self.stdout.write(self.style.SUCCESS(
            f"Impor selesai. Barang baru: {hasil['created']}, barang diperbarui: {hasil['updated']}."
        ))
