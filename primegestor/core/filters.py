import django_filters
from .models import ActivityLog


class ActivityLogFilter(django_filters.FilterSet):
    """Filter for the activity log list"""

    action = django_filters.CharFilter(field_name='action', lookup_expr='iexact')
    entity_type = django_filters.CharFilter(field_name='entity_type', lookup_expr='iexact')
    date_from = django_filters.DateFilter(field_name='created_at', lookup_expr='date__gte')
    date_to = django_filters.DateFilter(field_name='created_at', lookup_expr='date__lte')

    class Meta:
        model = ActivityLog
        fields = ['action', 'entity_type', 'date_from', 'date_to']
