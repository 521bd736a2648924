from .persister import VideoPersister
from .poller import Poller

__all__ = ['VideoPersister', 'Poller']
