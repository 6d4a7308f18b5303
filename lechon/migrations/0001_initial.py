"""
Initial migration for Lechon Slots module.
"""

from decimal import Decimal
import uuid

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.core.validators


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Slot',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(max_length=50, unique=True, verbose_name='Name')),
                ('slot_type', models.CharField(choices=[('whole_pig', 'Whole Pig'), ('chicken', 'Chicken'), ('pig_belly', 'Pig Belly'), ('whole_cow', 'Whole Cow'), ('multi_purpose', 'Multi Purpose')], default='multi_purpose', max_length=20, verbose_name='Type')),
                ('status', models.CharField(choices=[('available', 'Available'), ('occupied', 'Occupied'), ('maintenance', 'Maintenance'), ('out_of_order', 'Out of Order')], default='available', max_length=20, verbose_name='Status')),
                ('capacity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Capacity')),
                ('current_order_ids', models.JSONField(blank=True, default=list, editable=False, verbose_name='Current Orders')),
                ('notes', models.CharField(blank=True, default='', max_length=200, verbose_name='Notes')),
                ('version', models.PositiveIntegerField(default=0, editable=False)),
            ],
            options={
                'verbose_name': 'Slot',
                'verbose_name_plural': 'Slots',
                'db_table': 'lechon_slot',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('code', models.CharField(blank=True, db_index=True, default='', max_length=20, verbose_name='Code')),
                ('first_name', models.CharField(blank=True, default='', max_length=50, verbose_name='First Name')),
                ('last_name', models.CharField(max_length=50, verbose_name='Last Name')),
                ('order_type', models.CharField(choices=[('order', 'Order'), ('labor', 'Labor')], default='order', max_length=10, verbose_name='Order Type')),
                ('lechon_type', models.CharField(choices=[('whole_pig', 'Whole Pig'), ('chicken', 'Chicken'), ('pig_belly', 'Pig Belly'), ('whole_cow', 'Whole Cow')], max_length=20, verbose_name='Lechon Type')),
                ('number_kilos', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, validators=[django.core.validators.MaxValueValidator(Decimal('100'))], verbose_name='Kilos')),
                ('special_instructions', models.TextField(blank=True, default='', max_length=500)),
                ('price', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Price')),
                ('down_payment', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Down Payment')),
                ('is_paid', models.BooleanField(default=False, verbose_name='Paid')),
                ('date_received', models.DateField(verbose_name='Date Received')),
                ('time_received', models.TimeField(verbose_name='Time Received')),
                ('date_cooked', models.DateField(verbose_name='Date Cooked')),
                ('time_cooked', models.TimeField(verbose_name='Time Cooked')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('preparing', 'Preparing'), ('cooking', 'Cooking'), ('cooked', 'Cooked'), ('packed', 'Packed'), ('picked_up', 'Picked Up'), ('ready', 'Ready'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='Status')),
                ('cooking_date', models.DateTimeField(blank=True, null=True, verbose_name='Cooking Started')),
                ('cooked_date', models.DateTimeField(blank=True, null=True, verbose_name='Cooking Ended')),
                ('slot', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='occupants', to='lechon.slot', verbose_name='Slot')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='lechon_orders', to=settings.AUTH_USER_MODEL, verbose_name='Created By')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'db_table': 'lechon_order',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='SlotHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('start_cooking', models.DateTimeField(verbose_name='Start Cooking')),
                ('end_cooking', models.DateTimeField(blank=True, null=True, verbose_name='End Cooking')),
                ('slot', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='history', to='lechon.slot', verbose_name='Slot')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='cooking_sessions', to='lechon.order', verbose_name='Order')),
            ],
            options={
                'verbose_name': 'Cooking Session',
                'verbose_name_plural': 'Cooking History',
                'db_table': 'lechon_slot_history',
                'ordering': ['start_cooking', 'created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='slot',
            index=models.Index(fields=['status'], name='lechon_slot_status_idx'),
        ),
        migrations.AddIndex(
            model_name='slot',
            index=models.Index(fields=['slot_type'], name='lechon_slot_type_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['status'], name='lechon_order_status_idx'),
        ),
        migrations.AddIndex(
            model_name='order',
            index=models.Index(fields=['date_cooked'], name='lechon_order_cooked_idx'),
        ),
        migrations.AddIndex(
            model_name='slothistory',
            index=models.Index(fields=['slot', 'end_cooking'], name='lechon_hist_open_idx'),
        ),
    ]
