# backend/users/authentication.py
from rest_framework.authentication import TokenAuthentication


class BearerTokenAuthentication(TokenAuthentication):
    """Token DRF dengan header `Authorization: Bearer <token>`."""
    keyword = 'Bearer'
