import math

from django.conf import settings
from django.core.paginator import InvalidPage
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class SearchPagination(PageNumberPagination):
    """
    ?page= and ?limit= over apartment search results.
    Response: {count, total, page, totalPages, apartments}; a page past
    the end comes back empty instead of 404.
    """
    page_size = getattr(settings, "SEARCH_PAGE_SIZE", 10)
    page_size_query_param = "limit"
    max_page_size = getattr(settings, "SEARCH_MAX_PAGE_SIZE", 50)
    results_key = "apartments"

    def paginate_queryset(self, queryset, request, view=None):
        self.request = request
        self.page_size_value = self.get_page_size(request)
        self.total = len(queryset) if isinstance(queryset, list) else queryset.count()
        self.page_number = self._page_number(request)

        paginator = self.django_paginator_class(queryset, self.page_size_value)
        try:
            self.page = paginator.page(self.page_number)
        except InvalidPage:
            self.page = None
            return []
        return list(self.page)

    def _page_number(self, request):
        try:
            number = int(request.query_params.get(self.page_query_param, 1))
        except (TypeError, ValueError):
            return 1
        return max(number, 1)

    def get_paginated_response(self, data):
        return Response({
            "count": len(data),
            "total": self.total,
            "page": self.page_number,
            "totalPages": math.ceil(self.total / self.page_size_value) if self.total else 0,
            self.results_key: data,
        })

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "count": {"type": "integer"},
                "total": {"type": "integer"},
                "page": {"type": "integer"},
                "totalPages": {"type": "integer"},
                self.results_key: schema,
            },
        }
