#!/usr/bin/env python
# backend/manage.py
"""Utilitas command-line Django untuk proyek gudang."""
import os
import sys


def main():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Django tidak dapat diimpor. Pastikan sudah terpasang dan virtualenv aktif."
        ) from exc
    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
