"Fan-out/fan-in helpers built on trio nurseries and memory channels."
from __future__ import annotations
import trio
import contextlib
import typing as t

T = t.TypeVar('T')
async def run_all(callables: t.Sequence[t.Callable[[], t.Awaitable[T]]]) -> t.List[T]:
    "Call all the functions passed to it, and return all the results."
    count = len(callables)
    results: t.List[t.Any] = [None]*count
    async with trio.open_nursery() as nursery:
        async def open_nth(n: int) -> None:
            results[n] = await callables[n]()
        for i in range(count):
            nursery.start_soon(open_nth, i)
    return results

Producer = t.Callable[[trio.MemorySendChannel], t.Awaitable[None]]

@contextlib.asynccontextmanager
async def merged(producers: t.Iterable[Producer], max_buffer_size: int=0,
) -> t.AsyncIterator[trio.MemoryReceiveChannel[T]]:
    """Run all these producers in parallel, and yield a channel carrying all their output.

    Each producer gets its own clone of the send side of a memory channel, and
    the clone is closed when the producer returns. So iterating over the
    yielded receive channel finishes exactly when every producer has finished.

    Producers are expected to handle their own errors; an exception from a
    producer cancels the rest of them and propagates out of the nursery.

    If the caller stops consuming early, the remaining producers are cancelled.

    """
    send_channel, receive_channel = trio.open_memory_channel(max_buffer_size)
    async with trio.open_nursery() as nursery:
        async def run_producer(producer: Producer, send: trio.MemorySendChannel[T]) -> None:
            async with send:
                await producer(send)
        async with send_channel:
            for producer in producers:
                nursery.start_soon(run_producer, producer, send_channel.clone())
        async with receive_channel:
            try:
                yield receive_channel
            finally:
                nursery.cancel_scope.cancel()
