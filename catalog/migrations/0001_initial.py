from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('name', models.CharField(help_text='Unique category name', max_length=100, primary_key=True, serialize=False)),
                ('description', models.TextField(blank=True, default='', help_text='Optional category description')),
                ('image_url', models.CharField(blank=True, default='', help_text='Category image reference', max_length=255)),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(db_index=True, help_text='Product name for display', max_length=200)),
                ('price', models.DecimalField(decimal_places=2, help_text='Unit price', max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('units_stored', models.PositiveIntegerField(default=0, help_text='Units currently in stock', validators=[django.core.validators.MinValueValidator(0)])),
                ('description', models.TextField(blank=True, default='', help_text='Optional product description')),
                ('image_url', models.CharField(blank=True, default='', help_text='Product image reference', max_length=255)),
                ('category', models.ForeignKey(blank=True, help_text='Product category', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='products', to='catalog.category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['category', 'name'], name='product_category_name_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('units_stored__gte', 0)), name='product_units_stored_non_negative')],
            },
        ),
    ]
