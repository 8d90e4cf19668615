"""
engine/
-------
Execution & playback layer.

    from engine import PlaybackSession, PlaybackConfig, play
"""

from engine.config    import PlaybackConfig
from engine.recorder  import RunLog, RunMetrics, LogFrozenError
from engine.scheduler import Scheduler, RunPhase
from engine.hold      import HoldRepeater, HoldPhase
from engine.transport import Transport
from engine.session   import PlaybackSession
from engine.driver    import play

__all__ = [
    "PlaybackConfig",
    "RunLog",
    "RunMetrics",
    "LogFrozenError",
    "Scheduler",
    "RunPhase",
    "HoldRepeater",
    "HoldPhase",
    "Transport",
    "PlaybackSession",
    "play",
]
