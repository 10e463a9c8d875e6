# Generated manually for the events app

import uuid
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CommunityEvent',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('event_id', models.CharField(max_length=40, unique=True)),
                ('event_type', models.CharField(choices=[('wedding', 'Wedding'), ('traditional_marriage', 'Traditional marriage'), ('burial', 'Burial'), ('memorial', 'Memorial'), ('child_dedication', 'Child dedication'), ('christening', 'Christening'), ('naming', 'Naming ceremony'), ('thanksgiving', 'Thanksgiving'), ('anniversary', 'Anniversary'), ('birthday', 'Birthday'), ('other_ceremony', 'Other ceremony')], default='other_ceremony', max_length=30)),
                ('title', models.CharField(max_length=200)),
                ('date_start', models.DateField()),
                ('date_end', models.DateField(blank=True, null=True)),
                ('location_raw', models.CharField(blank=True, max_length=300)),
                ('location_state', models.CharField(blank=True, max_length=50)),
                ('location_city_lga', models.CharField(blank=True, max_length=100)),
                ('venue_name', models.CharField(blank=True, max_length=200)),
                ('contact_name', models.CharField(blank=True, max_length=100)),
                ('contact_role', models.CharField(blank=True, max_length=100)),
                ('contact_phone', models.CharField(blank=True, max_length=20)),
                ('contact_email', models.EmailField(blank=True, max_length=254)),
                ('organizer_org', models.CharField(blank=True, max_length=200)),
                ('organizer_social', models.CharField(blank=True, max_length=500)),
                ('source_platform', models.CharField(max_length=100)),
                ('source_url', models.URLField(max_length=1000)),
                ('source_published_at', models.DateField(blank=True, null=True)),
                ('extracted_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('confidence', models.FloatField(default=0.6)),
                ('notes', models.CharField(blank=True, max_length=500)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'community_events',
                'ordering': ['date_start', 'title'],
                'indexes': [
                    models.Index(fields=['event_type', 'date_start'], name='events_type_start_idx'),
                    models.Index(fields=['location_state', 'date_start'], name='events_state_start_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EventSourceLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('run_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('source_platform', models.CharField(max_length=100)),
                ('source_url', models.URLField(blank=True, max_length=1000)),
                ('events_found', models.PositiveIntegerField(default=0)),
                ('events_added', models.PositiveIntegerField(default=0)),
                ('events_updated', models.PositiveIntegerField(default=0)),
                ('events_removed', models.PositiveIntegerField(default=0)),
                ('errors', models.JSONField(blank=True, default=list)),
                ('total_active', models.PositiveIntegerField(default=0)),
                ('execution_time_ms', models.PositiveIntegerField(default=0)),
            ],
            options={
                'db_table': 'event_source_logs',
                'ordering': ['-run_at'],
                'indexes': [
                    models.Index(fields=['source_platform', 'run_at'], name='event_logs_source_run_idx'),
                ],
            },
        ),
    ]
