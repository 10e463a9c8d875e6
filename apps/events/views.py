import hmac

from django.conf import settings
from django.db.models import Q
from rest_framework import viewsets, status, serializers as drf_serializers
from rest_framework.decorators import action, api_view, authentication_classes, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema, OpenApiParameter
from apps.billing.permissions import HasPremiumPlan
from apps.core.exports import build_csv_response, build_jsonl_response
from apps.core.permissions import IsAdmin
from .models import CommunityEvent
from .serializers import (
    CommunityEventSerializer,
    EventFilterSerializer,
    ScrapeRequestSerializer,
    EXPORT_FIELDS,
)
from .services import EventScraperManager, EventServiceError

MAX_REPORTED_ERRORS = 10
EXPORT_FORMATS = ('csv', 'jsonl')


class ScrapeSummarySerializer(drf_serializers.Serializer):
    events_found = drf_serializers.IntegerField()
    total_added = drf_serializers.IntegerField()
    total_updated = drf_serializers.IntegerField()
    total_removed = drf_serializers.IntegerField()
    total_active = drf_serializers.IntegerField()
    errors = drf_serializers.ListField(child=drf_serializers.CharField())


class EventPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'limit'
    max_page_size = 100


class CommunityEventViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Upcoming and recent ceremonies found by the scrapers (Pro and Business plans).

    list: Events ordered by start date, filterable by type, state, text and dates
    retrieve: One event
    """

    serializer_class = CommunityEventSerializer
    permission_classes = [IsAuthenticated, HasPremiumPlan]
    pagination_class = EventPagination

    def get_queryset(self):
        filter_serializer = EventFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        events = CommunityEvent.objects.all().order_by('date_start', 'title')
        if params.get('event_type'):
            events = events.filter(event_type=params['event_type'])
        if params.get('location_state'):
            events = events.filter(location_state__iexact=params['location_state'])
        if params.get('q'):
            q = params['q']
            events = events.filter(
                Q(title__icontains=q)
                | Q(location_raw__icontains=q)
                | Q(venue_name__icontains=q)
                | Q(contact_name__icontains=q)
            )
        if params.get('date_from'):
            events = events.filter(date_start__gte=params['date_from'])
        if params.get('date_to'):
            events = events.filter(date_start__lte=params['date_to'])
        return events

    def perform_content_negotiation(self, request, force=False):
        # On export, ?format= names the file type rather than a renderer
        return super().perform_content_negotiation(request, force=force or self.action == 'export')

    @extend_schema(
        parameters=[OpenApiParameter('format', str, enum=EXPORT_FORMATS, description="Defaults to csv")],
        responses={(200, 'text/csv'): OpenApiTypes.STR, (200, 'application/jsonlines'): OpenApiTypes.STR},
        description="Download the events feed as CSV or JSON lines, ordered by start date.",
    )
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        GET /api/events/export/?format=csv|jsonl
        """
        export_format = request.query_params.get('format') or 'csv'
        if export_format not in EXPORT_FORMATS:
            return Response(
                {'error': 'Invalid format. Use csv or jsonl'},
                status=status.HTTP_400_BAD_REQUEST,
            )

        records = CommunityEventSerializer(self.get_queryset(), many=True).data
        if export_format == 'jsonl':
            return build_jsonl_response('events', records)
        return build_csv_response(
            'events',
            EXPORT_FIELDS,
            ([record[field] for field in EXPORT_FIELDS] for record in records),
        )


def _report(summary):
    summary = dict(summary)
    summary['error_count'] = len(summary['errors'])
    summary['errors'] = summary['errors'][:MAX_REPORTED_ERRORS]
    return summary


@extend_schema(
    request=ScrapeRequestSerializer,
    responses={200: ScrapeSummarySerializer},
    description="Run every scraper, or only `source`, and store the results (admin only).",
    tags=['events'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def scrape_events(request):
    serializer = ScrapeRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    source = serializer.validated_data.get('source')

    manager = EventScraperManager()
    try:
        summary = manager.run_single(source) if source else manager.run_all()
    except EventServiceError as e:
        return Response(e.as_dict(), status=e.status_code)

    return Response(_report(summary))


@extend_schema(
    request=None,
    responses={200: ScrapeSummarySerializer},
    description="Daily scraping trigger for an external scheduler; send `Authorization: Bearer <CRON_SECRET>`.",
    tags=['events'],
)
@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def scrape_events_cron(request):
    cron_secret = settings.CRON_SECRET
    if cron_secret:
        provided = request.META.get('HTTP_AUTHORIZATION', '')
        if not hmac.compare_digest(provided.encode(), f'Bearer {cron_secret}'.encode()):
            return Response({'error': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)

    summary = EventScraperManager().run_all()
    return Response(_report(summary))
