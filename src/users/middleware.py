import logging
from datetime import datetime, timezone

from django.conf import settings
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken, AccessToken

logger = logging.getLogger(__name__)


class JWTAuthCookieMiddleware:
    """
    Lets the browser pages authenticate with httpOnly cookies.

    The access cookie is copied into the Authorization header; an expired
    access cookie is replaced from a valid refresh cookie. An explicit
    Authorization header sent by the client always wins.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.META.get('HTTP_AUTHORIZATION'):
            return self.get_response(request)

        access_cookie = request.COOKIES.get('access_token')
        if access_cookie and self._is_valid_access(access_cookie):
            request.META['HTTP_AUTHORIZATION'] = f'Bearer {access_cookie}'
            return self.get_response(request)

        refresh_cookie = request.COOKIES.get('refresh_token')
        if not refresh_cookie:
            return self.get_response(request)

        try:
            new_access = RefreshToken(refresh_cookie).access_token
        except TokenError:
            logger.debug("refresh cookie rejected")
            return self.get_response(request)

        request.META['HTTP_AUTHORIZATION'] = f'Bearer {new_access}'
        response = self.get_response(request)
        response.set_cookie(
            key='access_token',
            value=str(new_access),
            httponly=True,
            secure=getattr(settings, 'AUTH_COOKIE_SECURE', not settings.DEBUG),
            samesite=getattr(settings, 'AUTH_COOKIE_SAMESITE', 'Lax'),
            expires=datetime.fromtimestamp(new_access['exp'], tz=timezone.utc),
            path='/',
        )
        return response

    @staticmethod
    def _is_valid_access(raw):
        # AccessToken() verifies the signature and expiry
        try:
            AccessToken(raw)
        except TokenError:
            return False
        return True
