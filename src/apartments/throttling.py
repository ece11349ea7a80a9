from rest_framework.throttling import ScopedRateThrottle


class BookingCreateThrottle(ScopedRateThrottle):
    scope = "bookings_create"


class BookingMutationThrottle(ScopedRateThrottle):
    scope = "bookings_mutation"


class SearchThrottle(ScopedRateThrottle):
    scope = "search"


class MediaUploadThrottle(ScopedRateThrottle):
    scope = "media_upload"


class ScopedRateThrottleIsolated(ScopedRateThrottle):
    """
    Include the resolved rate in the cache key to avoid collisions
    when tests or environments override DEFAULT_THROTTLE_RATES.
    """
    def get_cache_key(self, request, view):
        key = super().get_cache_key(request, view)
        if key is None:
            return None
        return f"{key}:{self.get_rate() or 'none'}"
