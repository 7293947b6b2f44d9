"""
Initial migration for Textileman models.
"""

from decimal import Decimal
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


STOCK_TYPES = [('Gray Stock', 'Gray Stock'), ('Factory Stock', 'Factory Stock'), ('Design Stock', 'Design Stock')]
UNITS = [('METERS', 'Meters'), ('SETS', 'Sets')]


class Migration(migrations.Migration):
    """Create Textileman models."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Customer',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(max_length=200, unique=True, verbose_name='Name')),
                ('customer_type', models.CharField(choices=[('Wholesale', 'Wholesale'), ('Retail', 'Retail')], max_length=20, verbose_name='Customer type')),
                ('email', models.EmailField(max_length=254, verbose_name='Email')),
                ('phone', models.CharField(max_length=30, verbose_name='Phone')),
                ('city', models.CharField(max_length=100, verbose_name='City')),
                ('address', models.TextField(verbose_name='Address')),
                ('credit_limit', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14, verbose_name='Credit limit')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Customer',
                'verbose_name_plural': 'Customers',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationMessage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('message', models.TextField(verbose_name='Message')),
                ('type', models.CharField(choices=[('order_update', 'Order update'), ('stock_alert', 'Stock alert'), ('return_request', 'Return request'), ('product_update', 'Product update'), ('customer_update', 'Customer update')], max_length=30, verbose_name='Type')),
                ('sent_to_count', models.PositiveIntegerField(default=0, verbose_name='Sent to')),
                ('status', models.CharField(choices=[('Delivered', 'Delivered'), ('Not Delivered', 'Not Delivered')], max_length=20, verbose_name='Status')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
            ],
            options={
                'verbose_name': 'Notification message',
                'verbose_name_plural': 'Notification messages',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationRecipient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('number', models.CharField(max_length=30, verbose_name='Number')),
                ('role', models.CharField(choices=[('owner', 'Owner'), ('manager', 'Manager'), ('sales', 'Sales'), ('inventory head', 'Inventory head')], default='manager', max_length=20, verbose_name='Role')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
            ],
            options={
                'verbose_name': 'Notification recipient',
                'verbose_name_plural': 'Notification recipients',
                'ordering': ['name', 'id'],
            },
        ),
        migrations.CreateModel(
            name='NotificationSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_updates', models.BooleanField(default=False, verbose_name='Order updates')),
                ('stock_alerts', models.BooleanField(default=False, verbose_name='Stock alerts')),
                ('low_stock_warnings', models.BooleanField(default=False, verbose_name='Low stock warnings')),
                ('new_customers', models.BooleanField(default=False, verbose_name='New customers')),
                ('return_requests', models.BooleanField(default=False, verbose_name='Return requests')),
                ('product_updates', models.BooleanField(default=False, verbose_name='Product updates')),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Notification settings',
                'verbose_name_plural': 'Notification settings',
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer', models.CharField(db_index=True, max_length=200, verbose_name='Customer')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed')], db_index=True, default='pending', max_length=20, verbose_name='Status')),
                ('order_date', models.DateField(verbose_name='Order date')),
                ('delivery_date', models.DateField(verbose_name='Delivery date')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, unique=True, verbose_name='Name')),
                ('sku', models.CharField(blank=True, max_length=20, unique=True, verbose_name='SKU')),
                ('category', models.CharField(choices=[('Cotton Fabrics', 'Cotton Fabrics'), ('Silk Fabrics', 'Silk Fabrics'), ('Polyester Fabrics', 'Polyester Fabrics'), ('Blended Fabrics', 'Blended Fabrics'), ('Designer Prints', 'Designer Prints'), ('Solid Colors', 'Solid Colors'), ('Textured Fabrics', 'Textured Fabrics'), ('Seasonal Collection', 'Seasonal Collection')], max_length=30, verbose_name='Category')),
                ('unit', models.CharField(choices=UNITS, default='METERS', max_length=10, verbose_name='Unit')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='StockLot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('stock_type', models.CharField(choices=STOCK_TYPES, max_length=20, verbose_name='Stock type')),
                ('status', models.CharField(choices=[('available', 'Available'), ('low', 'Low'), ('out', 'Out of stock'), ('processing', 'Processing'), ('quality_check', 'Quality check')], db_index=True, default='available', max_length=20, verbose_name='Status')),
                ('product', models.CharField(db_index=True, max_length=200, verbose_name='Product')),
                ('details', models.JSONField(blank=True, default=dict, verbose_name='Stock details')),
                ('batch_number', models.CharField(max_length=50, verbose_name='Batch number')),
                ('quality_grade', models.CharField(choices=[('A+', 'A+'), ('A', 'A'), ('B+', 'B+'), ('B', 'B')], max_length=2, verbose_name='Quality grade')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Stock lot',
                'verbose_name_plural': 'Stock lots',
                'ordering': ['id'],
                'indexes': [
                    models.Index(fields=['product', 'status'], name='tm_lot_product_status_idx'),
                    models.Index(fields=['stock_type'], name='tm_lot_stock_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Variant',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('color', models.CharField(max_length=50, verbose_name='Color')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('unit', models.CharField(choices=UNITS, default='METERS', max_length=10, verbose_name='Unit')),
                ('lot', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='variants', to='textileman.stocklot', verbose_name='Lot')),
            ],
            options={
                'verbose_name': 'Variant',
                'verbose_name_plural': 'Variants',
                'ordering': ['id'],
                'constraints': [
                    models.UniqueConstraint(fields=('lot', 'color'), name='unique_variant_color_per_lot'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='variant_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product', models.CharField(db_index=True, max_length=200, verbose_name='Product')),
                ('color', models.CharField(max_length=50, verbose_name='Color')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('unit', models.CharField(choices=UNITS, default='METERS', max_length=10, verbose_name='Unit')),
                ('price_per_meter', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Price per meter')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='textileman.order', verbose_name='Order')),
                ('stock', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='order_items', to='textileman.stocklot', verbose_name='Stock lot')),
            ],
            options={
                'verbose_name': 'Order item',
                'verbose_name_plural': 'Order items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='Adjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product', models.CharField(db_index=True, max_length=200, verbose_name='Product')),
                ('stock_type', models.CharField(choices=STOCK_TYPES, max_length=20, verbose_name='Stock type')),
                ('color', models.CharField(max_length=50, verbose_name='Color')),
                ('prev_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Previous quantity')),
                ('new_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='New quantity')),
                ('reason', models.CharField(max_length=255, verbose_name='Reason')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
                ('stock', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='adjustments', to='textileman.stocklot', verbose_name='Stock lot')),
            ],
            options={
                'verbose_name': 'Adjustment',
                'verbose_name_plural': 'Adjustments',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='ReturnRequest',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('return_id', models.CharField(max_length=20, unique=True, verbose_name='Return ID')),
                ('customer', models.CharField(db_index=True, max_length=200, verbose_name='Customer')),
                ('product', models.CharField(max_length=200, verbose_name='Product')),
                ('color', models.CharField(max_length=50, verbose_name='Color')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('reason', models.TextField(verbose_name='Reason')),
                ('is_approved', models.BooleanField(default=False, verbose_name='Approved')),
                ('is_rejected', models.BooleanField(default=False, verbose_name='Rejected')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='returns', to='textileman.order', verbose_name='Order')),
            ],
            options={
                'verbose_name': 'Return request',
                'verbose_name_plural': 'Return requests',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
