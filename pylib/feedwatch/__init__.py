'''feedwatch: proxy-backed RSS aggregation with incremental polling.'''

from feedwatch.config import FeedwatchConfig
from feedwatch.ingest import Aggregator
from feedwatch.models import Feed, Post
from feedwatch.poller import CycleReport, Poller
from feedwatch.state import AggregateState, OperationPhase, StateChange

__all__ = [
    'AggregateState',
    'Aggregator',
    'CycleReport',
    'Feed',
    'FeedwatchConfig',
    'OperationPhase',
    'Poller',
    'Post',
    'StateChange',
]
