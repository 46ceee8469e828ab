#!/usr/bin/env python
import unittest

import mock
import boto3
from botocore.stub import Stubber
from botocore.exceptions import EndpointConnectionError

from actionlock.errors import ConditionFailed, StoreError
from actionlock.store import DynamoDBLockStore, MemoryLockStore, LockStore

class MemoryLockStoreTest(unittest.TestCase):

    def setUp(self):
        self.store = MemoryLockStore()

    def test_insert_then_get(self):
        self.store.conditional_insert('locks', 'LockID', 'ci-job-42', {'Owner': 'a'})
        record = self.store.consistent_get('locks', 'LockID', 'ci-job-42')
        self.assertEqual({'LockID': 'ci-job-42', 'Owner': 'a'}, record)

    def test_insert_existing_fails(self):
        self.store.conditional_insert('locks', 'LockID', 'ci-job-42')
        with self.assertRaises(ConditionFailed) as ctx:
            self.store.conditional_insert('locks', 'LockID', 'ci-job-42', {'Owner': 'b'})
        self.assertEqual('ci-job-42', ctx.exception.name)
        self.assertNotIn('Owner', self.store.consistent_get('locks', 'LockID', 'ci-job-42'))

    def test_tables_are_separate(self):
        self.store.conditional_insert('one', 'LockID', 'x')
        self.store.conditional_insert('two', 'LockID', 'x')
        self.assertIsNone(self.store.consistent_get('three', 'LockID', 'x'))

    def test_delete_is_unconditional(self):
        self.store.delete('locks', 'LockID', 'missing')
        self.store.conditional_insert('locks', 'LockID', 'x')
        self.store.delete('locks', 'LockID', 'x')
        self.assertIsNone(self.store.consistent_get('locks', 'LockID', 'x'))

    def test_get_returns_a_copy(self):
        self.store.conditional_insert('locks', 'LockID', 'x', {'Owner': 'a'})
        self.store.consistent_get('locks', 'LockID', 'x')['Owner'] = 'b'
        self.assertEqual('a', self.store.consistent_get('locks', 'LockID', 'x')['Owner'])

    def test_interface_is_abstract(self):
        store = LockStore()
        self.assertRaises(NotImplementedError, store.conditional_insert, 't', 'k', 'n')
        self.assertRaises(NotImplementedError, store.consistent_get, 't', 'k', 'n')
        self.assertRaises(NotImplementedError, store.delete, 't', 'k', 'n')


class DynamoDBLockStoreTest(unittest.TestCase):

    def setUp(self):
        self.client = boto3.client('dynamodb', region_name='eu-west-2',
            aws_access_key_id='testing', aws_secret_access_key='testing')
        self.stubber = Stubber(self.client)
        self.stubber.activate()
        self.store = DynamoDBLockStore(client=self.client)

    def tearDown(self):
        self.stubber.deactivate()

    def test_conditional_insert(self):
        expected = {
            'TableName': 'locks',
            'Item': {'LockID': {'S': 'ci-job-42'}, 'Owner': {'S': 'runner-1'}},
            'ConditionExpression': 'attribute_not_exists(#k)',
            'ExpressionAttributeNames': {'#k': 'LockID'},
        }
        self.stubber.add_response('put_item', {}, expected)
        self.store.conditional_insert('locks', 'LockID', 'ci-job-42', {'Owner': 'runner-1'})
        self.stubber.assert_no_pending_responses()

    def test_conditional_insert_condition_failed(self):
        self.stubber.add_client_error('put_item',
            service_error_code='ConditionalCheckFailedException', http_status_code=400)
        with self.assertRaises(ConditionFailed):
            self.store.conditional_insert('locks', 'LockID', 'ci-job-42')

    def test_conditional_insert_other_error(self):
        self.stubber.add_client_error('put_item',
            service_error_code='ProvisionedThroughputExceededException', http_status_code=400)
        with self.assertRaises(StoreError) as ctx:
            self.store.conditional_insert('locks', 'LockID', 'ci-job-42')
        self.assertEqual('put', ctx.exception.operation)
        self.assertIn('ProvisionedThroughputExceededException', str(ctx.exception))

    def test_consistent_get_found(self):
        expected = {
            'TableName': 'locks',
            'Key': {'LockID': {'S': 'ci-job-42'}},
            'ConsistentRead': True,
        }
        response = {'Item': {'LockID': {'S': 'ci-job-42'}, 'Owner': {'S': 'runner-1'}}}
        self.stubber.add_response('get_item', response, expected)
        record = self.store.consistent_get('locks', 'LockID', 'ci-job-42')
        self.assertEqual({'LockID': 'ci-job-42', 'Owner': 'runner-1'}, record)

    def test_consistent_get_missing(self):
        self.stubber.add_response('get_item', {})
        self.assertIsNone(self.store.consistent_get('locks', 'LockID', 'ci-job-42'))

    def test_consistent_get_error(self):
        self.stubber.add_client_error('get_item', service_error_code='AccessDeniedException')
        with self.assertRaises(StoreError) as ctx:
            self.store.consistent_get('locks', 'LockID', 'ci-job-42')
        self.assertEqual('get', ctx.exception.operation)

    def test_delete(self):
        expected = {'TableName': 'locks', 'Key': {'LockID': {'S': 'ci-job-42'}}}
        self.stubber.add_response('delete_item', {}, expected)
        self.store.delete('locks', 'LockID', 'ci-job-42')
        self.stubber.assert_no_pending_responses()

    def test_delete_error(self):
        self.stubber.add_client_error('delete_item', service_error_code='ResourceNotFoundException')
        with self.assertRaises(StoreError) as ctx:
            self.store.delete('locks', 'LockID', 'ci-job-42')
        self.assertEqual('delete', ctx.exception.operation)

    def test_transport_error_is_store_error(self):
        client = mock.Mock()
        client.put_item.side_effect = EndpointConnectionError(endpoint_url='https://dynamodb')
        store = DynamoDBLockStore(client=client)
        with self.assertRaises(StoreError) as ctx:
            store.conditional_insert('locks', 'LockID', 'ci-job-42')
        self.assertIsInstance(ctx.exception.__cause__, EndpointConnectionError)

    def test_transport_error_on_get_and_delete(self):
        client = mock.Mock()
        client.get_item.side_effect    = EndpointConnectionError(endpoint_url='https://dynamodb')
        client.delete_item.side_effect = EndpointConnectionError(endpoint_url='https://dynamodb')
        store = DynamoDBLockStore(client=client)

        with self.assertRaises(StoreError) as ctx:
            store.consistent_get('locks', 'LockID', 'ci-job-42')
        self.assertEqual('get', ctx.exception.operation)
        self.assertIsInstance(ctx.exception.__cause__, EndpointConnectionError)

        with self.assertRaises(StoreError) as ctx:
            store.delete('locks', 'LockID', 'ci-job-42')
        self.assertEqual('delete', ctx.exception.operation)
        self.assertIsInstance(ctx.exception.__cause__, EndpointConnectionError)

    @mock.patch('actionlock.store.boto3')
    def test_client_created_lazily(self, boto):
        store = DynamoDBLockStore()
        boto.client.assert_not_called()
        self.assertIs(boto.client.return_value, store.client)
        boto.client.assert_called_once_with('dynamodb')

#---------------------------------------------------------------------------#
# main
#---------------------------------------------------------------------------#
if __name__ == "__main__":
    unittest.main()
