"""
Initial migration for Rackman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Rackman models: Warehouse, Rack, Item, StorageUnit, Reservation, audit tables."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Warehouse',
                'verbose_name_plural': 'Warehouses',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Item',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('code', models.CharField(blank=True, help_text='14-digit base identifier embedded in placement codes', max_length=14, null=True, unique=True, verbose_name='Code')),
                ('weight', models.FloatField(verbose_name='Weight (kg)')),
                ('size_x', models.FloatField(verbose_name='Width')),
                ('size_y', models.FloatField(verbose_name='Height')),
                ('size_z', models.FloatField(verbose_name='Depth')),
                ('min_temp', models.FloatField(verbose_name='Min temperature')),
                ('max_temp', models.FloatField(verbose_name='Max temperature')),
                ('dangerous', models.BooleanField(default=False, verbose_name='Dangerous')),
                ('expire_after_days', models.PositiveIntegerField(blank=True, help_text='Empty = placed units never expire', null=True, verbose_name='Expire after (days)')),
            ],
            options={
                'verbose_name': 'Item',
                'verbose_name_plural': 'Items',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Rack',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('marker', models.CharField(blank=True, default='', max_length=32, verbose_name='Marker')),
                ('size_x', models.PositiveIntegerField(verbose_name='Columns')),
                ('size_y', models.PositiveIntegerField(verbose_name='Rows')),
                ('max_weight', models.FloatField(verbose_name='Max weight (kg)')),
                ('min_temp', models.FloatField(verbose_name='Min temperature')),
                ('max_temp', models.FloatField(verbose_name='Max temperature')),
                ('max_size_x', models.FloatField(verbose_name='Max item width')),
                ('max_size_y', models.FloatField(verbose_name='Max item height')),
                ('max_size_z', models.FloatField(verbose_name='Max item depth')),
                ('accepts_dangerous', models.BooleanField(default=False, verbose_name='Accepts dangerous items')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='racks', to='rackman.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Rack',
                'verbose_name_plural': 'Racks',
                'ordering': ['warehouse', 'marker'],
            },
        ),
        migrations.CreateModel(
            name='StorageUnit',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position_x', models.PositiveIntegerField(verbose_name='Column')),
                ('position_y', models.PositiveIntegerField(verbose_name='Row')),
                ('code', models.CharField(max_length=40, unique=True, verbose_name='Placement code')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Placed at')),
                ('expires_at', models.DateTimeField(blank=True, db_index=True, null=True, verbose_name='Expires at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Placed by')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='units', to='rackman.item', verbose_name='Item')),
                ('rack', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='units', to='rackman.rack', verbose_name='Rack')),
            ],
            options={
                'verbose_name': 'Storage unit',
                'verbose_name_plural': 'Storage units',
                'indexes': [models.Index(fields=['item', 'created_at'], name='rackman_unit_item_fifo_idx')],
                'constraints': [models.UniqueConstraint(fields=('rack', 'position_x', 'position_y'), name='unique_storage_unit_position')],
            },
        ),
        migrations.CreateModel(
            name='Reservation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position_x', models.PositiveIntegerField(verbose_name='Column')),
                ('position_y', models.PositiveIntegerField(verbose_name='Row')),
                ('expires_at', models.DateTimeField(db_index=True, verbose_name='Expires at')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Reserved by')),
                ('rack', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reservations', to='rackman.rack', verbose_name='Rack')),
            ],
            options={
                'verbose_name': 'Reservation',
                'verbose_name_plural': 'Reservations',
                'indexes': [models.Index(fields=['rack', 'expires_at'], name='rackman_resv_rack_exp_idx')],
                'constraints': [models.UniqueConstraint(fields=('rack', 'position_x', 'position_y'), name='unique_reservation_position')],
            },
        ),
        migrations.CreateModel(
            name='InboundOperation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position_x', models.PositiveIntegerField(verbose_name='Column')),
                ('position_y', models.PositiveIntegerField(verbose_name='Row')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantity')),
                ('unit_code', models.CharField(max_length=40, verbose_name='Placement code')),
                ('item_name', models.CharField(max_length=200, verbose_name='Item name')),
                ('item_code', models.CharField(blank=True, default='', max_length=14, verbose_name='Item code')),
                ('rack_marker', models.CharField(blank=True, default='', max_length=32, verbose_name='Rack marker')),
                ('operation_timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Date/Time')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='rackman.item', verbose_name='Item')),
                ('rack', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='rackman.rack', verbose_name='Rack')),
                ('received_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Received by')),
                ('unit', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inbound_operations', to='rackman.storageunit', verbose_name='Storage unit')),
            ],
            options={
                'verbose_name': 'Inbound operation',
                'verbose_name_plural': 'Inbound operations',
                'ordering': ['operation_timestamp'],
                'abstract': False,
                'indexes': [models.Index(fields=['item', 'operation_timestamp'], name='rackman_in_item_ts_idx')],
            },
        ),
        migrations.CreateModel(
            name='OutboundOperation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('position_x', models.PositiveIntegerField(verbose_name='Column')),
                ('position_y', models.PositiveIntegerField(verbose_name='Row')),
                ('quantity', models.PositiveIntegerField(default=1, verbose_name='Quantity')),
                ('unit_code', models.CharField(max_length=40, verbose_name='Placement code')),
                ('item_name', models.CharField(max_length=200, verbose_name='Item name')),
                ('item_code', models.CharField(blank=True, default='', max_length=14, verbose_name='Item code')),
                ('rack_marker', models.CharField(blank=True, default='', max_length=32, verbose_name='Rack marker')),
                ('operation_timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Date/Time')),
                ('batch_arrival_date', models.DateTimeField(verbose_name='Placed at')),
                ('fifo_compliant', models.BooleanField(default=True, verbose_name='FIFO compliant')),
                ('issued_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Issued by')),
                ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='rackman.item', verbose_name='Item')),
                ('rack', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='rackman.rack', verbose_name='Rack')),
            ],
            options={
                'verbose_name': 'Outbound operation',
                'verbose_name_plural': 'Outbound operations',
                'ordering': ['operation_timestamp'],
                'abstract': False,
                'indexes': [models.Index(fields=['item', 'operation_timestamp'], name='rackman_out_item_ts_idx')],
            },
        ),
    ]
