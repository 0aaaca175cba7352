# backend/gudang/exceptions.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

PESAN_SERVER_ERROR = 'Terjadi kesalahan pada server'


# --- Error Layanan ---

class ServiceError(Exception):
    """Error dasar dari lapisan service, selalu membawa pesan untuk pengguna."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_title = None

    def __init__(self, message, title=None, details=None):
        self.message = message
        self.title = title or self.default_title
        self.details = details
        super().__init__(message)


class ValidationError(ServiceError):
    default_title = 'Validasi Gagal'


class ReferenceNotFoundError(ServiceError):
    """Data master yang dirujuk (misal barang) belum ada."""
    default_title = 'Data Tidak Ditemukan'


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_title = 'Data Tidak Ditemukan'


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_title = 'Konflik Data'


class PersistenceError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message=PESAN_SERVER_ERROR, title=None, details=None):
        super().__init__(message, title, details)


# --- Exception handler DRF ---

def _pesan_pertama(detail):
    """Ambil pesan pertama dari detail ValidationError DRF (list/dict bersarang)."""
    if isinstance(detail, dict):
        for field, value in detail.items():
            pesan = _pesan_pertama(value)
            if field in ('non_field_errors', 'detail'):
                return pesan
            return f"{field}: {pesan}"
    if isinstance(detail, (list, tuple)):
        return _pesan_pertama(detail[0]) if detail else ''
    return str(detail)


def error_body(message, title=None, details=None):
    body = {'success': False, 'error': message}
    if title:
        body['title'] = title
    if details:
        body['details'] = details
    return body


def api_exception_handler(exc, context):
    """
    Semua error API dirender dalam bentuk {success: false, error, title?}.
    Error database dan error tak terduga dicatat lengkap di log server,
    tapi pengguna hanya melihat pesan umum.
    """
    view = context.get('view')
    view_name = type(view).__name__ if view else '?'

    if isinstance(exc, ServiceError):
        if isinstance(exc, PersistenceError):
            logger.error("%s gagal: %s", view_name, exc.message, exc_info=exc)
        else:
            logger.warning("%s ditolak: %s", view_name, exc.message)
        return Response(error_body(exc.message, exc.title, exc.details), status=exc.status_code)

    response = exception_handler(exc, context)
    if response is not None:
        detail = response.data
        message = _pesan_pertama(detail)
        details = detail if isinstance(detail, dict) and 'detail' not in detail else None
        response.data = error_body(message, details=details)
        return response

    if isinstance(exc, DatabaseError):
        logger.error("%s: error database", view_name, exc_info=exc)
    else:
        logger.error("%s: error tak terduga", view_name, exc_info=exc)
    return Response(error_body(PESAN_SERVER_ERROR), status=status.HTTP_500_INTERNAL_SERVER_ERROR)
