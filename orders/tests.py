"""
Tests for order placement.

Test Cases:
1. Order placed with sufficient stock, stock decremented
2. Order rejected with insufficient stock, nothing persisted
3. Failing line aborts the rest of the order
4. Store failure reported as TransactionFailed with no partial state
5. Concurrent order race condition prevention
6. HTTP contract of POST /order and GET /myorders
"""
from decimal import Decimal
from unittest.mock import patch
import threading

from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase, skipUnlessDBFeature
from rest_framework.test import APITestCase

from accounts.services import register_user
from accounts.tokens import issue_token
from catalog.models import Category, Product
from core.exceptions import (
    InsufficientStock,
    InvalidInput,
    ProductNotFound,
    ShopError,
    TransactionFailed,
)
from orders.models import Order, OrderLine
from orders.services import place_order, list_order_lines_for_user


class OrderTransactionTestCase(TestCase):
    """Test cases for order transaction logic."""

    def setUp(self):
        """Set up test data."""
        self.category = Category.objects.create(name='Test Category')

        self.product1 = Product.objects.create(
            name='Test Product 1',
            price=Decimal('10.00'),
            units_stored=100,
            category=self.category
        )
        self.product2 = Product.objects.create(
            name='Test Product 2',
            price=Decimal('25.00'),
            units_stored=50,
            category=self.category
        )
        self.product3 = Product.objects.create(
            name='Test Product 3',
            price=Decimal('15.50'),
            units_stored=10,  # Low stock
            category=self.category
        )

        self.user = register_user('Test', 'Buyer', 'buyer', 'secret-pw')

    def assertStock(self, product, expected):
        product.refresh_from_db()
        self.assertEqual(product.units_stored, expected)

    def test_order_placed_with_sufficient_stock(self):
        """
        Test: Order is created when all lines have enough stock.

        Given: Products with sufficient stock
        When: Placing an order within stock limits
        Then: One order, one line per product, stock decremented exactly
        """
        lines = [
            {'id': self.product1.id, 'quantity': 5},
            {'id': self.product2.id, 'quantity': 3}
        ]

        order = place_order(self.user, lines)

        self.assertIsNotNone(order.id)
        self.assertEqual(order.customer, self.user)
        self.assertEqual(order.lines.count(), 2)
        self.assertEqual(
            list(order.lines.values_list('product_id', 'quantity')),
            [(self.product1.id, 5), (self.product2.id, 3)]
        )

        self.assertStock(self.product1, 95)  # 100 - 5
        self.assertStock(self.product2, 47)  # 50 - 3

    def test_second_order_rejected_once_stock_runs_low(self):
        """
        Test: stock=5, two orders of 3.

        Then: first succeeds leaving 2, second is InsufficientStock and
              stock stays 2
        """
        product = Product.objects.create(name='Product 42', price=Decimal('1.00'), units_stored=5)

        first = place_order(self.user, [{'id': product.id, 'quantity': 3}])
        self.assertIsNotNone(first.id)
        self.assertStock(product, 2)

        with self.assertRaises(InsufficientStock) as context:
            place_order(self.user, [{'id': product.id, 'quantity': 3}])

        self.assertEqual(context.exception.product_id, product.id)
        self.assertEqual(context.exception.requested, 3)
        self.assertEqual(context.exception.available, 2)
        self.assertStock(product, 2)
        self.assertEqual(Order.objects.count(), 1)

    def test_no_partial_order_on_insufficient_stock(self):
        """
        Test: Nothing persists when any line lacks stock.

        Given: Product3 has only 10 units
        When: The last line requests 20 units of product3
        Then: No order, no lines, no stock change on ANY product
        """
        lines = [
            {'id': self.product1.id, 'quantity': 5},
            {'id': self.product2.id, 'quantity': 10},
            {'id': self.product3.id, 'quantity': 20}  # Exceeds available
        ]

        with self.assertRaises(InsufficientStock) as context:
            place_order(self.user, lines)

        self.assertEqual(context.exception.product_id, self.product3.id)
        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderLine.objects.count(), 0)
        self.assertStock(self.product1, 100)
        self.assertStock(self.product2, 50)
        self.assertStock(self.product3, 10)

    def test_order_with_exact_stock(self):
        """
        Test: Order succeeds when requesting exactly available stock.
        """
        place_order(self.user, [{'id': self.product3.id, 'quantity': 10}])

        self.assertStock(self.product3, 0)

    def test_repeated_product_lines_draw_from_same_stock(self):
        """
        Test: Each line sees the stock left by the previous lines.
        """
        with self.assertRaises(InsufficientStock):
            place_order(self.user, [
                {'id': self.product3.id, 'quantity': 6},
                {'id': self.product3.id, 'quantity': 6},
            ])
        self.assertStock(self.product3, 10)

        place_order(self.user, [
            {'id': self.product3.id, 'quantity': 6},
            {'id': self.product3.id, 'quantity': 4},
        ])
        self.assertStock(self.product3, 0)

    def test_unknown_product_rejected(self):
        """
        Test: ProductNotFound for a non-existent product, nothing persisted.
        """
        with self.assertRaises(ProductNotFound) as context:
            place_order(self.user, [
                {'id': self.product1.id, 'quantity': 1},
                {'id': 99999, 'quantity': 5}
            ])

        self.assertEqual(context.exception.product_id, 99999)
        self.assertEqual(Order.objects.count(), 0)
        self.assertStock(self.product1, 100)

    def test_failing_line_stops_processing(self):
        """
        Test: Lines after the first failure are never applied.
        """
        with self.assertRaises(InvalidInput):
            place_order(self.user, [
                {'id': self.product1.id, 'quantity': 0},
                {'id': self.product2.id, 'quantity': 1},
            ])

        self.assertStock(self.product2, 50)
        self.assertEqual(OrderLine.objects.count(), 0)

    def test_validation_error_empty_lines(self):
        with self.assertRaises(InvalidInput) as context:
            place_order(self.user, [])

        self.assertIn('at least one product', str(context.exception))

    def test_validation_error_invalid_quantity(self):
        """
        Test: Non-positive and non-integer quantities are InvalidInput.
        """
        for quantity in (0, -1, 2.5, '3', True, None):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidInput):
                    place_order(self.user, [{'id': self.product1.id, 'quantity': quantity}])

        self.assertEqual(Order.objects.count(), 0)
        self.assertStock(self.product1, 100)

    def test_store_failure_reported_as_transaction_failed(self):
        """
        Test: A database error mid-order is TransactionFailed with no
        partial state left behind.
        """
        with patch('orders.services._place_line', side_effect=DatabaseError('connection lost')):
            with self.assertRaises(TransactionFailed) as context:
                place_order(self.user, [{'id': self.product1.id, 'quantity': 1}])

        self.assertIn('connection lost', str(context.exception))
        self.assertEqual(Order.objects.count(), 0)
        self.assertStock(self.product1, 100)

    def test_conditional_decrement_detects_lost_race(self):
        """
        Test: If the guarded UPDATE matches no row, the order fails.

        Simulates a concurrent decrement landing between the stock check
        and the update.
        """
        with patch('django.db.models.query.QuerySet.update', return_value=0):
            with self.assertRaises(InsufficientStock):
                place_order(self.user, [{'id': self.product1.id, 'quantity': 1}])

        self.assertEqual(Order.objects.count(), 0)
        self.assertEqual(OrderLine.objects.count(), 0)
        self.assertStock(self.product1, 100)

    def test_order_lines_for_user(self):
        """Test: History only includes the caller's lines, in order."""
        other = register_user('Other', 'Buyer', 'other', 'other-pw')
        first = place_order(self.user, [
            {'id': self.product2.id, 'quantity': 1},
            {'id': self.product1.id, 'quantity': 2},
        ])
        place_order(other, [{'id': self.product1.id, 'quantity': 1}])
        second = place_order(self.user, [{'id': self.product3.id, 'quantity': 3}])

        lines = list(list_order_lines_for_user(self.user))

        self.assertEqual(
            [(line.order_id, line.product_id, line.quantity) for line in lines],
            [
                (first.id, self.product2.id, 1),
                (first.id, self.product1.id, 2),
                (second.id, self.product3.id, 3),
            ]
        )


class ConcurrentOrderTestCase(TransactionTestCase):
    """
    Test concurrent order handling to verify stock cannot be oversold.
    Uses TransactionTestCase for proper multi-threading support.
    """

    def setUp(self):
        """Set up test data for concurrent testing."""
        self.product = Product.objects.create(
            name='Limited Stock Product',
            price=Decimal('50.00'),
            units_stored=5
        )
        self.user = register_user('Race', 'Buyer', 'racer', 'race-pw')

    def race(self):
        """Start two orders for the whole stock at the same moment."""
        results = {}
        barrier = threading.Barrier(2)

        def place(key):
            try:
                barrier.wait()
                place_order(self.user, [{'id': self.product.id, 'quantity': 5}])
                results[key] = 'PLACED'
            except ShopError as e:
                results[key] = type(e).__name__
            finally:
                connection.close()

        threads = [threading.Thread(target=place, args=(key,)) for key in ('order1', 'order2')]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return sorted(results.values())

    def assertSoldOnce(self):
        self.product.refresh_from_db()
        self.assertEqual(self.product.units_stored, 0)
        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(OrderLine.objects.count(), 1)

    def test_concurrent_orders_no_overselling(self):
        """
        Test: Concurrent orders don't oversell stock.

        Given: 5 units in stock
        When: Two concurrent orders of 5 units each
        Then: Exactly one succeeds; the other fails without leaving rows behind
        """
        outcomes = self.race()

        self.assertEqual(len(outcomes), 2)
        self.assertEqual(outcomes.count('PLACED'), 1)
        outcomes.remove('PLACED')
        # Backends without row locks may reject the loser before it reads stock
        self.assertIn(outcomes[0], ('InsufficientStock', 'TransactionFailed'))
        self.assertSoldOnce()

    @skipUnlessDBFeature('has_select_for_update')
    def test_loser_waits_for_lock_and_sees_no_stock(self):
        """
        Test: With row locks the second order waits, then fails on stock.

        Given: 5 units in stock on a backend with SELECT ... FOR UPDATE
        When: Two concurrent orders of 5 units each
        Then: One PLACED and one InsufficientStock
        """
        self.assertEqual(self.race(), ['InsufficientStock', 'PLACED'])
        self.assertSoldOnce()


class OrderApiTestCase(APITestCase):
    """HTTP contract of the order endpoints."""

    def setUp(self):
        self.category = Category.objects.create(name='Gadgets')
        self.product = Product.objects.create(
            name='Gadget',
            price=Decimal('19.90'),
            units_stored=5,
            image_url='gadget.jpg',
            category=self.category
        )
        self.user = register_user('Api', 'Buyer', 'apibuyer', 'api-pw')
        self.token = issue_token(self.user)

    def authenticate(self, token=None):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token or self.token}")

    def post_order(self, body):
        return self.client.post('/order', body, format='json')

    def test_place_order(self):
        self.authenticate()

        response = self.post_order({'products': [{'id': self.product.id, 'quantity': 3}]})

        self.assertEqual(response.status_code, 200)
        order = Order.objects.get()
        self.assertEqual(response.json(), {'orderId': order.id})
        self.assertEqual(order.customer, self.user)
        self.product.refresh_from_db()
        self.assertEqual(self.product.units_stored, 2)

    def test_order_requires_token(self):
        response = self.post_order({'products': [{'id': self.product.id, 'quantity': 1}]})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(Order.objects.count(), 0)

    def test_order_rejects_invalid_token(self):
        self.authenticate('not-a-token')

        response = self.post_order({'products': [{'id': self.product.id, 'quantity': 1}]})

        self.assertEqual(response.status_code, 403)

    def assertOrderFailed(self, response, error):
        """Every order failure is a 500 with the underlying error label."""
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['error'], error)
        self.assertEqual(Order.objects.count(), 0)

    def test_insufficient_stock(self):
        self.authenticate()

        response = self.post_order({'products': [{'id': self.product.id, 'quantity': 6}]})

        self.assertOrderFailed(response, 'Insufficient Stock')
        self.assertIn(f"product {self.product.id}", response.json()['detail'])
        self.product.refresh_from_db()
        self.assertEqual(self.product.units_stored, 5)

    def test_unknown_product(self):
        self.authenticate()

        response = self.post_order({'products': [{'id': 424242, 'quantity': 1}]})

        self.assertOrderFailed(response, 'Not Found')
        self.assertEqual(response.json()['detail'], 'Product 424242 not found')

    def test_body_customer_id_refused(self):
        other = register_user('Victim', 'User', 'victim', 'victim-pw')
        self.authenticate()

        response = self.post_order({
            'customerId': other.id,
            'products': [{'id': self.product.id, 'quantity': 1}]
        })

        self.assertOrderFailed(response, 'Invalid Input')
        self.assertIn('customerId', response.json()['detail'])

    def test_malformed_bodies(self):
        self.authenticate()

        for body in (
            {},
            {'products': []},
            {'products': [{'id': self.product.id}]},
            {'products': [{'id': self.product.id, 'quantity': 0}]},
            {'products': [{'id': self.product.id, 'quantity': 'many'}]},
        ):
            with self.subTest(body=body):
                self.assertOrderFailed(self.post_order(body), 'Invalid Input')

        self.product.refresh_from_db()
        self.assertEqual(self.product.units_stored, 5)

    def test_unparseable_body(self):
        self.authenticate()

        response = self.client.post('/order', '{"products": [', content_type='application/json')

        self.assertOrderFailed(response, 'Invalid Input')

    def test_token_checked_before_body(self):
        response = self.post_order({'products': [{'id': 424242, 'quantity': 0}]})

        self.assertEqual(response.status_code, 403)
        self.assertEqual(Order.objects.count(), 0)

    def test_store_failure(self):
        self.authenticate()

        with patch('orders.views.place_order', side_effect=TransactionFailed('deadlock detected')):
            response = self.post_order({'products': [{'id': self.product.id, 'quantity': 1}]})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()['detail'], 'deadlock detected')

    def test_my_orders(self):
        order = place_order(self.user, [{'id': self.product.id, 'quantity': 2}])
        self.authenticate()

        response = self.client.get('/myorders')

        self.assertEqual(response.status_code, 200)
        rows = response.json()
        self.assertEqual(len(rows), 1)
        row = rows[0]
        self.assertEqual(row['orderId'], order.id)
        self.assertEqual(row['productId'], self.product.id)
        self.assertEqual(row['productName'], 'Gadget')
        self.assertEqual(row['price'], '19.90')
        self.assertEqual(row['imageUrl'], 'gadget.jpg')
        self.assertEqual(row['category'], 'Gadgets')
        self.assertEqual(row['quantity'], 2)
        self.assertIn('orderDate', row)

    def test_my_orders_empty(self):
        self.authenticate()

        response = self.client.get('/myorders')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_my_orders_invalid_token(self):
        self.authenticate('a.b.c')

        self.assertEqual(self.client.get('/myorders').status_code, 403)
