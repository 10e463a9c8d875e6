from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'events'

router = DefaultRouter()
router.register(r'', views.CommunityEventViewSet, basename='event')

urlpatterns = [
    # POST /api/events/scrape/   - Run scrapers (admin)
    # GET  /api/events/cron/     - Run all scrapers (cron secret)
    # GET  /api/events/          - List events (premium)
    # GET  /api/events/export/   - Download events as CSV or JSONL (premium)
    # GET  /api/events/{id}/     - Get event (premium)
    path('scrape/', views.scrape_events, name='scrape'),
    path('cron/', views.scrape_events_cron, name='cron'),
    path('', include(router.urls)),
]
