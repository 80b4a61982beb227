"""
Management command to seed the database with sample data.

Generates:
- Categories with descriptions and images
- Products with prices and stock levels
- Demo users (username demoN, password demoN-password)

Usage:
    python manage.py seed_data
    python manage.py seed_data --clear  # Clear existing data first
"""
import random
from decimal import Decimal
from django.core.management.base import BaseCommand
from django.db import transaction

from accounts.models import User
from accounts.services import register_user
from catalog.models import Category, Product
from catalog.services import create_categories, create_products


class Command(BaseCommand):
    help = 'Seed the database with sample categories, products and demo users'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before seeding',
        )
        parser.add_argument(
            '--categories',
            type=int,
            default=6,
            help='Number of categories to create (default: 6)',
        )
        parser.add_argument(
            '--products',
            type=int,
            default=200,
            help='Number of products to create (default: 200)',
        )
        parser.add_argument(
            '--users',
            type=int,
            default=3,
            help='Number of demo users to create (default: 3)',
        )

    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self._clear_data()

        self.stdout.write('Starting database seeding...')

        with transaction.atomic():
            categories = self._create_categories(options['categories'])
            self._create_products(options['products'], categories)
            self._create_users(options['users'])

        self.stdout.write(self.style.SUCCESS('Database seeding completed successfully!'))

    def _clear_data(self):
        """Clear all existing data."""
        from orders.models import OrderLine, Order

        OrderLine.objects.all().delete()
        Order.objects.all().delete()
        Product.objects.all().delete()
        Category.objects.all().delete()
        User.objects.all().delete()

        self.stdout.write(self.style.WARNING('All existing data cleared.'))

    def _create_categories(self, count):
        """Create sample categories, skipping names that already exist."""
        category_names = [
            'Electronics', 'Clothing', 'Home & Garden', 'Sports & Outdoors',
            'Books', 'Toys & Games', 'Health & Beauty', 'Food & Beverages',
        ]

        existing = set(Category.objects.values_list('name', flat=True))
        rows = [
            {
                'name': name,
                'description': f"Everything in {name.lower()}.",
                'image_url': f"{name.lower().replace(' & ', '_').replace(' ', '_')}.png",
            }
            for name in category_names[:count]
            if name not in existing
        ]
        create_categories(rows)

        categories = list(Category.objects.filter(name__in=category_names[:count]))
        self.stdout.write(self.style.SUCCESS(f'Seeded {len(categories)} categories'))
        return categories

    def _create_products(self, count, categories):
        """Create sample products with realistic data."""
        product_templates = {
            'Electronics': [
                'Wireless Headphones', 'Bluetooth Speaker', 'USB-C Cable',
                'Power Bank', 'Smart Watch', 'Gaming Mouse', 'Mechanical Keyboard',
            ],
            'Clothing': [
                'Cotton T-Shirt', 'Denim Jeans', 'Wool Sweater', 'Rain Jacket',
                'Running Shoes', 'Winter Coat',
            ],
            'Home & Garden': [
                'Garden Hose', 'Plant Pot Set', 'LED Light Bulbs', 'Throw Pillow',
                'Kitchen Knife Set', 'Wall Clock',
            ],
            'Sports & Outdoors': [
                'Yoga Mat', 'Dumbbells Set', 'Water Bottle', 'Camping Tent',
                'Hiking Backpack', 'Bicycle Helmet',
            ],
            'Books': [
                'Fiction Bestseller', 'Cookbook', 'Biography', 'Sci-Fi Novel',
                'Programming Guide', 'Travel Guide',
            ],
        }

        adjectives = [
            'Premium', 'Deluxe', 'Classic', 'Modern', 'Compact',
            'Portable', 'Organic', 'Handmade', 'Essential', 'Ultimate'
        ]

        if not categories:
            self.stdout.write(self.style.WARNING('No categories, skipping products'))
            return []

        rows = []
        for i in range(count):
            category = random.choice(categories)
            base_name = random.choice(product_templates.get(category.name, ['Product']))
            name = f"{random.choice(adjectives)} {base_name}"

            rows.append({
                'name': name,
                # Random price between $5 and $500
                'price': Decimal(random.randint(500, 50000)) / 100,
                'units_stored': random.randint(0, 100),
                'description': f"High-quality {base_name.lower()} for everyday use.",
                'image_url': f"product_{i + 1}.jpg",
                'category': category,
            })

        products = create_products(rows)
        self.stdout.write(self.style.SUCCESS(f'Created {len(products)} products'))
        return products

    def _create_users(self, count):
        """Create demo users with predictable credentials."""
        created = 0
        for i in range(1, count + 1):
            username = f"demo{i}"
            if User.objects.filter(username=username).exists():
                continue
            register_user(
                first_name='Demo',
                last_name=f"User {i}",
                username=username,
                password=f"{username}-password"
            )
            created += 1

        self.stdout.write(self.style.SUCCESS(f'Created {created} demo users'))
