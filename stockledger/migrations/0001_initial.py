"""
Initial migration for Stockledger models.
"""

from decimal import Decimal

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockledger models: Product, Movement, shrinkage taxonomy, orders."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('sku', models.CharField(max_length=50, unique=True, verbose_name='Código')),
                ('name', models.CharField(max_length=200, verbose_name='Nombre')),
                ('unit', models.CharField(default='kg', max_length=20, verbose_name='Unidad de medida')),
                ('_quantity', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Stock')),
                ('min_quantity', models.DecimalField(decimal_places=2, default=Decimal('0'), help_text='Se alerta cuando el stock queda por debajo de este valor', max_digits=12, verbose_name='Stock mínimo')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activo')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Producto',
                'verbose_name_plural': 'Productos',
                'ordering': ['name'],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('_quantity__gte', 0)), name='stockledger_product_quantity_non_negative'),
                    models.CheckConstraint(condition=models.Q(('min_quantity__gte', 0)), name='stockledger_product_min_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Movement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('inbound', 'Entrada'), ('outbound', 'Salida'), ('adjustment', 'Ajuste')], max_length=20, verbose_name='Tipo')),
                ('delta', models.DecimalField(decimal_places=2, help_text='Positivo = entrada, Negativo = salida', max_digits=12, verbose_name='Variación')),
                ('quantity_before', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Cantidad anterior')),
                ('quantity_after', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Cantidad nueva')),
                ('reference_id', models.PositiveBigIntegerField(blank=True, null=True, verbose_name='ID de referencia')),
                ('reason', models.CharField(help_text='Obligatorio. Ej: "Salida por pedido de venta PV-001", "Merma"', max_length=255, verbose_name='Motivo')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadatos')),
                ('actor', models.CharField(blank=True, default='', help_text='Usuario o proceso que originó el movimiento', max_length=100, verbose_name='Actor')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Fecha/Hora')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockledger.product', verbose_name='Producto')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Tipo de referencia')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Movimiento',
                'verbose_name_plural': 'Movimientos',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['product', 'created_at'], name='stockledger_mov_product_idx'),
                    models.Index(fields=['kind', 'created_at'], name='stockledger_mov_kind_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ShrinkageType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Nombre')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activo')),
            ],
            options={
                'verbose_name': 'Tipo de merma',
                'verbose_name_plural': 'Tipos de merma',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ShrinkageCause',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Nombre')),
                ('is_active', models.BooleanField(default=True, verbose_name='Activo')),
                ('type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='causes', to='stockledger.shrinkagetype', verbose_name='Tipo')),
            ],
            options={
                'verbose_name': 'Causa de merma',
                'verbose_name_plural': 'Causas de merma',
                'ordering': ['type__name', 'name'],
                'constraints': [
                    models.UniqueConstraint(fields=('type', 'name'), name='unique_shrinkage_cause_per_type'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Shrinkage',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Cantidad')),
                ('classification', models.CharField(choices=[('normal', 'Normal'), ('extraordinary', 'Extraordinaria')], default='normal', max_length=20, verbose_name='Clasificación')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Observaciones')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True, verbose_name='Fecha')),
                ('cause', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='shrinkages', to='stockledger.shrinkagecause', verbose_name='Causa')),
                ('movement', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='shrinkage', to='stockledger.movement', verbose_name='Movimiento')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shrinkages', to='stockledger.product', verbose_name='Producto')),
                ('type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='shrinkages', to='stockledger.shrinkagetype', verbose_name='Tipo')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Usuario')),
            ],
            options={
                'verbose_name': 'Merma',
                'verbose_name_plural': 'Mermas',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('kind', models.CharField(choices=[('sale', 'Venta'), ('purchase', 'Compra')], max_length=20, verbose_name='Tipo')),
                ('number', models.CharField(max_length=50, unique=True, verbose_name='Número')),
                ('counterparty', models.CharField(blank=True, default='', max_length=200, verbose_name='Cliente / Proveedor')),
                ('guide_number', models.CharField(blank=True, default='', max_length=100, verbose_name='Número de guía')),
                ('status', models.CharField(choices=[('pending', 'Pendiente'), ('completed', 'Completado'), ('cancelled', 'Anulado')], db_index=True, default='pending', max_length=20, verbose_name='Estado')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Creado')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completado')),
            ],
            options={
                'verbose_name': 'Pedido',
                'verbose_name_plural': 'Pedidos',
                'ordering': ['-created_at', '-id'],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Cantidad')),
                ('price', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=12, verbose_name='Precio')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='stockledger.order', verbose_name='Pedido')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockledger.product', verbose_name='Producto')),
            ],
            options={
                'verbose_name': 'Item de pedido',
                'verbose_name_plural': 'Items de pedido',
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('quantity__gt', 0)), name='stockledger_order_item_quantity_positive'),
                ],
            },
        ),
    ]
