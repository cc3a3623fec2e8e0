"""Test the termination monitor."""

import threading
import time

from domain_crawler.core.monitor import TerminationMonitor
from domain_crawler.pipeline.crawl_context import CrawlContext
from domain_crawler.pipeline.frontier import STOP


def start(monitor):
    thread = threading.Thread(target=monitor.run, daemon=True)
    thread.start()
    return thread


class TestTerminationMonitor:
    """Test stop detection."""

    def test_idle_context_stops_once(self):
        context = CrawlContext(seed_url="https://example.com/")
        monitor = TerminationMonitor(context, interval=0.01)

        thread = start(monitor)
        thread.join(timeout=2)

        assert not thread.is_alive()
        assert monitor.stop_requests == 1
        assert monitor.polls == 1
        assert context.frontier.stop_requested

    def test_waits_while_workers_active(self):
        context = CrawlContext(seed_url="https://example.com/")
        context.active_workers.increment()
        monitor = TerminationMonitor(context, interval=0.01)

        thread = start(monitor)
        time.sleep(0.1)
        assert thread.is_alive()
        assert monitor.stop_requests == 0

        context.active_workers.decrement()
        thread.join(timeout=2)

        assert not thread.is_alive()
        assert monitor.stop_requests == 1

    def test_waits_while_queue_not_empty(self):
        context = CrawlContext(seed_url="https://example.com/")
        context.frontier.push("https://example.com/")
        monitor = TerminationMonitor(context, interval=0.01)

        thread = start(monitor)
        time.sleep(0.1)
        assert monitor.stop_requests == 0

        assert context.frontier.pop() == "https://example.com/"
        thread.join(timeout=2)

        assert monitor.stop_requests == 1

    def test_stops_when_no_worker_alive(self):
        context = CrawlContext(seed_url="https://example.com/")
        context.frontier.push("https://example.com/")
        monitor = TerminationMonitor(context, interval=0.01, live_workers=lambda: 0)

        thread = start(monitor)
        thread.join(timeout=2)

        assert not thread.is_alive()
        assert monitor.stop_requests == 1
        # Queued items are left in place; nobody is around to drain them
        assert context.frontier.pop() == "https://example.com/"
        assert context.frontier.pop() is STOP

    def test_cancel_does_not_request_stop(self):
        context = CrawlContext(seed_url="https://example.com/")
        context.active_workers.increment()
        monitor = TerminationMonitor(context, interval=0.01)

        thread = start(monitor)
        time.sleep(0.05)
        monitor.cancel()
        thread.join(timeout=2)

        assert not thread.is_alive()
        assert monitor.stop_requests == 0
        assert not context.frontier.stop_requested
