"""
Async helper utilities for the Streamlit view.

Streamlit scripts run synchronously, while the controller's round trips are
coroutines. run_async_safely runs a coroutine to completion on a private event
loop in a worker thread so it never clashes with Streamlit's own loop.
"""

import asyncio
import queue
import threading
from typing import Any, Coroutine, Optional


def run_async_safely(coro: Coroutine, timeout: Optional[float] = None) -> Any:
    """
    Run a coroutine from synchronous Streamlit code and return its result.

    Args:
        coro: The coroutine to run
        timeout: Maximum time to wait in seconds, None to wait until it finishes

    Returns:
        The result of the coroutine

    Raises:
        TimeoutError: If the operation times out
        Exception: Any exception raised by the coroutine
    """
    result_queue = queue.Queue()
    exception_queue = queue.Queue()

    def run_in_thread():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        try:
            if timeout is None:
                result = loop.run_until_complete(coro)
            else:
                result = loop.run_until_complete(asyncio.wait_for(coro, timeout=timeout))
            result_queue.put(result)
        except Exception as e:
            exception_queue.put(e)
        finally:
            loop.close()

    thread = threading.Thread(target=run_in_thread)
    thread.daemon = True
    thread.start()

    thread.join(None if timeout is None else timeout + 1)  # Give extra second for cleanup

    if thread.is_alive():
        raise TimeoutError(f"Async operation timed out after {timeout} seconds")

    if not exception_queue.empty():
        raise exception_queue.get()

    return result_queue.get() if not result_queue.empty() else None

