#--------------------------------------------------------------------------------
# logging
#--------------------------------------------------------------------------------

import logging
_logger = logging.getLogger(__name__)

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class ActionLockContext(object):
    ''' A context manager to help using locks in a `with` statement.

    .. code-block:: python

        from actionlock import locker

        with locker(client=client, name="lock-to-get") as handle:
            pass # perform locked activity here
        # upon leaving the lock will be removed
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the ActionLockContext

        :param client: The client to acquire the lock with
        :param name: The name of the lock to acquire
        :param owner: The owner to record, default the client owner
        :param timeout: A timedelta overriding the client policy timeout
        '''
        self.client  = kwargs.get('client')
        self.name    = kwargs.get('name')
        self.owner   = kwargs.get('owner', None)
        self.timeout = kwargs.get('timeout', None)
        self.lock    = None

    def __enter__(self):
        ''' On enter of the context manager, this will acquire
        the specified lock. When the lock has been acquired,
        this will return; if it cannot be, the error is raised
        and the body never runs.
        '''
        self.lock = self.client.acquire_lock(self.name, owner=self.owner, timeout=self.timeout)
        return self

    def __exit__(self, ex_type, value, traceback):
        ''' On exit of the context manager, this will release
        the currently being held lock. When this operation is
        finished, this will return.
        '''
        if ex_type is not None:
            _logger.debug("releasing lock %s after %s", self.name, ex_type.__name__)
        self.client.release_lock(self.name)
        self.lock = None
