from threading import Event

from .errors import ConditionFailed, LockTimeout
from .policy import ActionLockPolicy
from .schema import ActionLockSchema
from .store  import DynamoDBLockStore

#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class ActionLockClient(object):

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the ActionLockClient class

        :param policy: The timing policy for taking and timing out locks
        :param schema: The schema of the database table to work with
        :param owner: The owner recorded with the locks created by this client
        :param store: The store holding the lock table, default DynamoDB
        '''
        self.policy = kwargs.get('policy', None) or ActionLockPolicy()
        self.schema = kwargs.get('schema', None) or ActionLockSchema()
        self.owner  = kwargs.get('owner', '')
        self.store  = kwargs.get('store', None) or DynamoDBLockStore()
        self._cancelled = Event()

    def cancel(self):
        ''' Abandon any acquire that is currently waiting on this
        client. The waiting call raises LockTimeout without issuing
        another store call, and the client will not wait again.
        '''
        self._cancelled.set()

    # ------------------------------------------------------------
    # locking manipulation methods
    # ------------------------------------------------------------

    def acquire_lock(self, name, owner=None, timeout=None):
        ''' Attempt to acquire the lock, retrying every policy
        `retry_period` until it is created or the timeout passes.

        :param name: The name of the lock to acquire
        :param owner: The owner to record, default the client owner
        :param timeout: A timedelta overriding the policy acquire_timeout
        :returns: The acquired lock
        :raises LockTimeout: If the lock is still held at the deadline
        :raises StoreError: If the store fails for any other reason
        '''
        if not self.policy.is_name_valid(name):
            raise ValueError("invalid lock name: %r" % (name,))

        owner        = self.owner if owner is None else owner
        lock_timeout = self.policy.acquire_timeout if timeout is None else timeout.total_seconds()
        initial_time = self.policy.get_elapsed_clock()  # the time we started trying to acquire
        attempts     = 0                                # the number of conditional inserts made

        _logger.info("acquiring lock %s in %s.%s (timeout %d secs)",
            name, self.schema.table_name, self.schema.key, lock_timeout)

        while True:
            attempts += 1
            created_lock = self._create_entry(name, owner)
            if created_lock:
                _logger.info("lock %s acquired after %d attempt(s)", name, attempts)
                return created_lock

            # ------------------------------------------------------------
            # Waiting:
            # ------------------------------------------------------------
            # The lock is held by someone else, so we race the retry
            # delay against the deadline. Whichever comes first decides
            # if we try again or give up; the wait is a single bounded
            # call so nothing is left scheduled once we return.
            # ------------------------------------------------------------
            waited_time = self.policy.get_elapsed_clock() - initial_time
            remaining   = lock_timeout - waited_time
            delay       = self.policy.get_retry_delay()

            if remaining > 0:
                self._cancelled.wait(min(delay, remaining))
                waited_time = self.policy.get_elapsed_clock() - initial_time

            if (remaining <= delay
             or waited_time >= lock_timeout
             or self._cancelled.is_set()):
                _logger.error("timed out waiting to acquire lock %s", name)
                raise LockTimeout(name, waited_time)

            _logger.info("failed to acquire lock %s, trying again", name)

    def try_acquire_lock(self, name, owner=None):
        ''' Attempt to acquire the lock without waiting, instead
        simply fail fast.

        :param name: The name of the lock to acquire
        :param owner: The owner to record, default the client owner
        :returns: The lock on success, None if it is already held
        :raises StoreError: If the store fails for any other reason
        '''
        if not self.policy.is_name_valid(name):
            raise ValueError("invalid lock name: %r" % (name,))

        owner = self.owner if owner is None else owner
        return self._create_entry(name, owner)

    def release_lock(self, name):
        ''' Release the lock with the supplied name by deleting it.
        Releasing a lock that does not exist is not an error. The
        owner of the lock is not checked, anyone able to reach the
        table can release any lock.

        :param name: The name of the lock to release
        :returns: True if a lock was deleted, False if there was none
        :raises StoreError: If the lock could not be read or deleted
        '''
        current_lock = self._retrieve_entry(name)

        # ------------------------------------------------------------
        # Case 1:
        # ------------------------------------------------------------
        # There is no lock in the database, so there is nothing for
        # us to do and we leave the table untouched.
        # ------------------------------------------------------------
        if not current_lock:
            _logger.info("lock %s does not exist, nothing to release", name)
            return False

        # ------------------------------------------------------------
        # Case 2:
        # ------------------------------------------------------------
        # The lock exists, so we remove it whoever the owner is.
        # ------------------------------------------------------------
        _logger.info("releasing lock %s held by %s", name, current_lock.owner or "<unknown>")
        self.store.delete(self.schema.table_name, self.schema.key, name)
        return True

    def does_lock_exist(self, name):
        ''' Check if a lock with the given name exists on the
        backend database.

        :param name: The name of the lock to check for existance
        :returns: True if the lock exists, False otherwise
        '''
        return bool(self.retrieve_lock(name))

    def retrieve_lock(self, name):
        ''' Retrieve the lock by the supplied name strictly
        to view its data, but not to perform any updates.

        :param name: The lock name to retrieve
        :returns: The lock at the supplied name or None
        '''
        if not self.policy.is_name_valid(name):
            _logger.debug("cannot retrieve lock with invalid name: %s", name)
            return None
        return self._retrieve_entry(name)

    # ------------------------------------------------------------
    # raw store methods
    # ------------------------------------------------------------

    def _retrieve_entry(self, name):
        ''' Given the name of a lock, read it with a strongly
        consistent read.

        :param name: The name of the lock to retrieve
        :returns: The lock if it exists, None otherwise
        '''
        record = self.store.consistent_get(self.schema.table_name, self.schema.key, name)
        if record is None:
            return None
        return self.schema.to_lock(record, self.policy.get_new_timestamp())

    def _create_entry(self, name, owner):
        ''' Attempt to create the lock record, which only succeeds
        if no one else has created it before us.

        :param name: The name of the lock to create
        :param owner: The owner to record with the lock
        :returns: The new lock if created, None if it already exists
        '''
        attributes = self.schema.to_attributes(owner)

        try:
            self.store.conditional_insert(self.schema.table_name, self.schema.key, name, attributes)
        except ConditionFailed:
            _logger.debug("lock %s is already held", name)
            return None

        return self.schema.to_lock(dict(attributes, **{ self.schema.key: name }),
            self.policy.get_new_timestamp())
