"""
Tests for the catalog reader, the registry writer and the catalog endpoints.
"""
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

from django.core.management import call_command
from django.db import DatabaseError, IntegrityError
from django.test import TestCase
from rest_framework.test import APITestCase

from accounts.models import User
from accounts.services import verify_credentials
from catalog import services
from catalog.models import Category, Product
from core.exceptions import NotFound


class CatalogReaderTestCase(TestCase):

    def setUp(self):
        self.books = Category.objects.create(name='Books', description='Paper', image_url='books.png')
        self.games = Category.objects.create(name='Games')
        self.novel = Product.objects.create(
            name='Novel', price=Decimal('12.50'), units_stored=7, category=self.books
        )
        self.chess = Product.objects.create(
            name='Chess', price=Decimal('30.00'), units_stored=0, category=self.games
        )

    def test_list_categories(self):
        self.assertEqual(
            list(services.list_categories().values_list('name', flat=True)),
            ['Books', 'Games']
        )

    def test_list_products(self):
        self.assertEqual(list(services.list_products()), [self.novel, self.chess])

    def test_list_products_by_category(self):
        self.assertEqual(list(services.list_products('Books')), [self.novel])

    def test_list_products_category_is_exact_match(self):
        self.assertEqual(list(services.list_products('book')), [])
        self.assertEqual(list(services.list_products('Unknown')), [])

    def test_get_product(self):
        self.assertEqual(services.get_product(self.novel.id), self.novel)

    def test_get_missing_product(self):
        with self.assertRaises(NotFound):
            services.get_product(99999)

    def test_get_units_stored(self):
        self.assertEqual(services.get_units_stored(self.novel.id), 7)
        self.assertEqual(services.get_units_stored(self.chess.id), 0)

    def test_get_units_stored_missing(self):
        with self.assertRaises(NotFound):
            services.get_units_stored(99999)


class RegistryWriterTestCase(TestCase):

    def test_create_product_round_trip(self):
        category = services.create_category('Tools', 'Hand tools', 'tools.png')
        created = services.create_product(
            name='Hammer',
            price=Decimal('9.99'),
            units_stored=3,
            description='Claw hammer',
            image_url='hammer.jpg',
            category=category
        )

        fetched = services.get_product(created.id)

        self.assertEqual(
            (fetched.name, fetched.price, fetched.units_stored,
             fetched.description, fetched.image_url, fetched.category_id),
            ('Hammer', Decimal('9.99'), 3, 'Claw hammer', 'hammer.jpg', 'Tools')
        )

    def test_bulk_categories_roll_back_on_failure(self):
        """A failing row leaves none of the batch behind."""
        with self.assertRaises(IntegrityError):
            services.create_categories([
                {'name': 'Garden'},
                {'name': 'Kitchen'},
                {'name': 'Garden'},
            ])

        self.assertEqual(Category.objects.count(), 0)

    def test_bulk_products_roll_back_on_failure(self):
        rows = [
            {'name': 'Saw', 'price': Decimal('5.00')},
            {'name': 'Drill', 'price': Decimal('40.00'), 'units_stored': -5},
        ]
        with self.assertRaises(IntegrityError):
            services.create_products(rows)

        self.assertEqual(Product.objects.count(), 0)

    def test_bulk_products_roll_back_on_store_error(self):
        saved = []

        def create_then_fail(**row):
            if saved:
                raise DatabaseError('disk full')
            saved.append(Product.objects.create(**row))
            return saved[-1]

        with patch('catalog.services.create_product', side_effect=create_then_fail):
            with self.assertRaises(DatabaseError):
                services.create_products([
                    {'name': 'Saw', 'price': Decimal('5.00')},
                    {'name': 'Drill', 'price': Decimal('40.00')},
                ])

        self.assertEqual(Product.objects.count(), 0)


class CatalogApiTestCase(APITestCase):

    def setUp(self):
        self.books = Category.objects.create(name='Books', description='Paper', image_url='books.png')
        self.novel = Product.objects.create(
            name='Novel',
            price=Decimal('12.50'),
            units_stored=7,
            description='A long story',
            image_url='novel.jpg',
            category=self.books
        )

    def test_list_categories(self):
        response = self.client.get('/categories')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [
            {'categoryName': 'Books', 'categoryDescription': 'Paper', 'imageUrl': 'books.png'}
        ])

    def test_add_categories(self):
        response = self.client.post('/categories', [
            {'categoryName': 'Games', 'description': 'Board games', 'imageUrl': 'games.png'},
            {'categoryName': 'Music'},
        ], format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'Categories added!')
        games = Category.objects.get(pk='Games')
        self.assertEqual((games.description, games.image_url), ('Board games', 'games.png'))
        self.assertTrue(Category.objects.filter(pk='Music').exists())

    def test_add_categories_is_all_or_nothing(self):
        response = self.client.post('/categories', [
            {'categoryName': 'Games'},
            {'categoryName': 'Books'},  # Already exists
        ], format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Category.objects.filter(pk='Games').exists())

    def test_add_categories_rejects_duplicates_in_batch(self):
        response = self.client.post('/categories', [
            {'categoryName': 'Games'},
            {'categoryName': 'Games'},
        ], format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Category.objects.filter(pk='Games').exists())

    def test_add_categories_requires_array(self):
        response = self.client.post('/categories', {'categoryName': 'Games'}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_list_products(self):
        response = self.client.get('/products')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [{
            'id': self.novel.id,
            'productName': 'Novel',
            'price': '12.50',
            'unitsStored': 7,
            'productDescription': 'A long story',
            'imageUrl': 'novel.jpg',
            'category': 'Books',
        }])

    def test_list_products_by_category(self):
        Category.objects.create(name='Games')

        self.assertEqual(len(self.client.get('/products', {'category': 'Books'}).json()), 1)
        self.assertEqual(self.client.get('/products', {'category': 'Games'}).json(), [])

    def test_add_products_round_trip(self):
        payload = {
            'productName': 'Dictionary',
            'price': '45.00',
            'unitsStored': 3,
            'productDescription': 'Every word',
            'imageUrl': 'dictionary.jpg',
            'category': 'Books',
        }

        response = self.client.post('/products', [payload], format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.content, b'Products added!')
        product = Product.objects.get(name='Dictionary')

        fetched = self.client.get(f'/products/{product.id}').json()
        self.assertEqual(fetched, {'id': product.id, **payload})

    def test_add_products_rejects_unknown_category(self):
        response = self.client.post('/products', [{
            'productName': 'Kite', 'price': '5.00', 'category': 'Toys'
        }], format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(Product.objects.filter(name='Kite').exists())

    def test_add_products_rejects_negative_stock(self):
        response = self.client.post('/products', [
            {'productName': 'Kite', 'price': '5.00'},
            {'productName': 'Yo-yo', 'price': '2.00', 'unitsStored': -1},
        ], format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(Product.objects.count(), 1)

    def test_get_product(self):
        response = self.client.get(f'/products/{self.novel.id}')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['productName'], 'Novel')

    def test_get_missing_product(self):
        response = self.client.get('/products/99999')

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'Not Found')

    def test_units_stored(self):
        response = self.client.post('/units_stored', {'productId': self.novel.id}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'units_stored': 7})

    def test_units_stored_missing_product(self):
        response = self.client.post('/units_stored', {'productId': 99999}, format='json')

        self.assertEqual(response.status_code, 404)

    def test_units_stored_requires_product_id(self):
        response = self.client.post('/units_stored', {}, format='json')

        self.assertEqual(response.status_code, 400)

    def test_store_error(self):
        with patch('catalog.services.list_categories', side_effect=DatabaseError('connection refused')):
            response = self.client.get('/categories')

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {
            'error': 'Store Unavailable',
            'detail': 'connection refused',
        })


class SeedDataCommandTestCase(TestCase):

    def test_seed(self):
        out = StringIO()

        call_command('seed_data', categories=3, products=20, users=2, stdout=out)

        self.assertEqual(Category.objects.count(), 3)
        self.assertEqual(Product.objects.count(), 20)
        self.assertEqual(User.objects.count(), 2)
        self.assertEqual(verify_credentials('demo1', 'demo1-password').username, 'demo1')
        self.assertIn('completed successfully', out.getvalue())

    def test_seed_is_repeatable(self):
        call_command('seed_data', categories=2, products=5, users=1, stdout=StringIO())
        call_command('seed_data', categories=2, products=5, users=1, stdout=StringIO())

        self.assertEqual(Category.objects.count(), 2)
        self.assertEqual(Product.objects.count(), 10)
        self.assertEqual(User.objects.count(), 1)

    def test_clear(self):
        call_command('seed_data', categories=2, products=5, users=1, stdout=StringIO())
        call_command('seed_data', '--clear', categories=1, products=2, users=0, stdout=StringIO())

        self.assertEqual(Category.objects.count(), 1)
        self.assertEqual(Product.objects.count(), 2)
        self.assertEqual(User.objects.count(), 0)
