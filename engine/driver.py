"""
driver.py — asyncio Real-Time Driver
====================================
Runs a PlaybackSession on an asyncio loop without busy-waiting.

    session.begin_run(nodes, edges)
    await play(session)            # returns when the run completes / is cancelled

The driver sleeps exactly until the next pacing (or hold-repeat)
deadline.  Pausing leaves nothing scheduled, so the driver blocks on an
asyncio.Event until the session publishes a change (resume, cancel,
speed change, a held button …) and re-evaluates from there.
"""

import asyncio
import logging
from typing import Optional

from engine.session import PlaybackSession


logger = logging.getLogger(__name__)


async def play(session: PlaybackSession, timeout: Optional[float] = None) -> int:
    """
    Drive `session` until its run is no longer active.  Returns the number
    of states and hold moves taken.  `timeout` bounds the whole call.
    """
    woken = asyncio.Event()
    unsubscribe = session.subscribe(lambda view: woken.set())
    taken = 0
    try:
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while session.is_active:
            woken.clear()
            taken += session.tick()
            if not session.is_active:
                break

            wait = session.seconds_until_next_event()
            if deadline is not None:
                left = deadline - loop.time()
                if left <= 0:
                    logger.warning("driver timed out with the run still %s", session.phase.value)
                    break
                wait = left if wait is None else min(wait, left)

            if woken.is_set():
                continue
            try:
                await asyncio.wait_for(woken.wait(), wait)
            except asyncio.TimeoutError:
                pass
    finally:
        unsubscribe()
    return taken
