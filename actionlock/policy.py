import time
import json
import random
from datetime import timedelta

#--------------------------------------------------------------------------------
# classes
#--------------------------------------------------------------------------------

class ActionLockPolicy(object):
    '''
    Along with the timing policy, this class also includes the policy
    for getting a new timestamp, the next retry delay and checking if
    a lock name is valid. All of these can be overridden to customize
    the use case for the system::

        import time
        from actionlock import ActionLockPolicy

        class MyPolicy(ActionLockPolicy):

            def is_name_valid(self, name):
                return name.startswith("deploy.")

            def get_new_timestamp(self):
                return round(time.time())
    '''

    def __init__(self, **kwargs):
        ''' Initialize a new instance of the ActionLockPolicy class

        :param acquire_timeout: The amount of time to wait trying to get a lock
        :param retry_period: The time to wait between attempts to take the lock
        :param retry_jitter: The maximum random time added to each retry wait
        :raises ValueError: If the retry period is not positive or the jitter is negative
        '''
        acquire_timeout = kwargs.get('acquire_timeout', timedelta(minutes=30))
        retry_period    = kwargs.get('retry_period', timedelta(seconds=5))
        retry_jitter    = kwargs.get('retry_jitter', timedelta(seconds=0))

        self.acquire_timeout = acquire_timeout.total_seconds()
        self.retry_period    = retry_period.total_seconds()
        self.retry_jitter    = retry_jitter.total_seconds()

        if self.retry_period <= 0:
            raise ValueError("retry period must be positive: %s" % self.retry_period)
        if self.retry_jitter < 0:
            raise ValueError("retry jitter must not be negative: %s" % self.retry_jitter)

    def is_name_valid(self, name):
        ''' Helper method to check if the supplied name is valid
        to use as a key or not.

        :param name: The name to check for validity
        :returns: True if a valid name, False otherwise
        '''
        return bool(name)

    def get_retry_delay(self):
        ''' Helper method to retrieve how long to wait before the
        next attempt at the lock. A random jitter is added when one
        is configured so that many waiters do not retry in step.

        :returns: The delay in seconds
        '''
        if self.retry_jitter <= 0:
            return self.retry_period
        return self.retry_period + random.uniform(0, self.retry_jitter)

    def get_new_timestamp(self):
        ''' Helper method to retrieve the current time since
        the epoch in seconds, stamped on the locks we observe.

        :returns: The current time in seconds
        '''
        return time.time()

    def get_elapsed_clock(self):
        ''' Helper method to retrieve the monotonic time used to
        track the acquire deadline, unaffected by clock changes.

        :returns: The current monotonic time in seconds
        '''
        return time.monotonic()

    # ------------------------------------------------------------
    # magic methods
    # ------------------------------------------------------------

    def __str__(self):
        return json.dumps(self.__dict__)

    __repr__ = __str__
