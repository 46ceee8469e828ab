from .lock     import ActionLock
from .errors   import LockError, ConditionFailed, StoreError, LockTimeout
from .policy   import ActionLockPolicy
from .schema   import ActionLockSchema
from .store    import LockStore, DynamoDBLockStore, MemoryLockStore
from .client   import ActionLockClient
from .settings import ActionLockSettings
from .context  import ActionLockContext as locker
