# backend/gudang/utils.py
from datetime import timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date

from .exceptions import ValidationError

PERIODE_LAPORAN = (
    'today', 'yesterday', 'this-week', 'last-week',
    'this-month', 'last-month', 'this-year',
)


def parse_int(value, default=None):
    """Konversi longgar ke int; None/teks kosong/bukan angka menjadi default."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def parse_tanggal(value, field_label='Tanggal'):
    """Terima date, datetime, atau string ISO (YYYY-MM-DD, boleh diikuti jam)."""
    if hasattr(value, 'year'):
        return value.date() if hasattr(value, 'hour') else value
    text = str(value or '').strip()
    hasil = parse_date(text[:10]) if text else None
    if hasil is None:
        raise ValidationError(f"{field_label} tidak valid", title='Data Tidak Valid')
    return hasil


def teks(value):
    return str(value).strip() if value is not None else ''


def paginate_queryset(queryset, page=1, limit=10):
    """
    Potong queryset/list per halaman.
    Mengembalikan (items, pagination) dengan kunci page, limit, total,
    totalPages, hasNext, hasPrev.
    """
    page = max(1, parse_int(page, 1))
    limit = min(max(1, parse_int(limit, 10)), 100)

    total = len(queryset) if isinstance(queryset, list) else queryset.count()
    total_pages = (total + limit - 1) // limit
    offset = (page - 1) * limit
    items = list(queryset[offset:offset + limit])

    return items, {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': total_pages,
        'hasNext': page < total_pages,
        'hasPrev': page > 1,
    }


def get_date_range(period, today=None):
    """
    Rentang tanggal (awal, akhir) inklusif untuk periode laporan.
    Periode tidak dikenal (termasuk 'all' atau kosong) menghasilkan None.
    Minggu dimulai hari Senin.
    """
    today = today or timezone.localdate()

    if period == 'today':
        return today, today
    elif period == 'yesterday':
        kemarin = today - timedelta(days=1)
        return kemarin, kemarin
    elif period == 'this-week':
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    elif period == 'last-week':
        end = today - timedelta(days=today.weekday() + 1)
        return end - timedelta(days=6), end
    elif period == 'this-month':
        start = today.replace(day=1)
        next_month = (start + timedelta(days=32)).replace(day=1)
        return start, next_month - timedelta(days=1)
    elif period == 'last-month':
        end = today.replace(day=1) - timedelta(days=1)
        return end.replace(day=1), end
    elif period == 'this-year':
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    return None
