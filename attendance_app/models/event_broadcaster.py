"""
Event Broadcaster - Server-Sent Events (SSE)
Pushes operator notifications and attendance updates to connected browsers
"""
import json
import logging
import queue
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional


class EventBroadcaster:
    """Fan-out of SSE messages, one bounded queue per client"""

    def __init__(self, queue_size: int = 50, logger=None):
        self.clients: List[queue.Queue] = []
        self.clients_lock = threading.Lock()
        self.queue_size = queue_size
        self.logger = logger or logging.getLogger(__name__)

    def add_client(self) -> queue.Queue:
        """Register a new client and return its queue"""
        client_queue = queue.Queue(maxsize=self.queue_size)

        with self.clients_lock:
            self.clients.append(client_queue)
            total = len(self.clients)

        self.logger.info(f"[SSE] ✅ New client connected. Total: {total}")
        return client_queue

    def remove_client(self, client_queue: queue.Queue):
        """Drop a client on disconnect"""
        with self.clients_lock:
            if client_queue in self.clients:
                self.clients.remove(client_queue)
                self.logger.info(f"[SSE] Client disconnected. Remaining: {len(self.clients)}")

    def broadcast_event(self, event_data: Dict[str, Any]):
        """
        Send an event to every client

        Args:
            event_data: dictionary with
                - type: event type (e.g. 'notification', 'attendance_updated')
                - data: event payload
                - timestamp: optional, filled in when missing
        """
        if 'timestamp' not in event_data:
            event_data['timestamp'] = datetime.now().isoformat()

        message = self.format_sse_message(event_data)

        full_clients = []
        with self.clients_lock:
            for client_queue in self.clients:
                try:
                    client_queue.put_nowait(message)
                except queue.Full:
                    full_clients.append(client_queue)
                    self.logger.warning("[SSE] Client queue full, marking for removal")

        for client_queue in full_clients:
            self.remove_client(client_queue)

        self.logger.debug(f"[SSE] Broadcast {event_data.get('type', 'unknown')}")

    @staticmethod
    def format_sse_message(event_data: Dict[str, Any]) -> str:
        """SSE wire format: ``event: type`` / ``data: json`` / blank line"""
        event_type = event_data.get('type', 'message')
        message_lines = [
            f"event: {event_type}",
            f"data: {json.dumps(event_data)}",
            "",
            "",
        ]
        return "\n".join(message_lines)

    def broadcast_notification(self, title: str, description: str, variant: str = 'default'):
        """Operator-facing notification ('default' or 'destructive')"""
        self.broadcast_event({
            'type': 'notification',
            'data': {
                'title': title,
                'description': description,
                'variant': variant,
            }
        })

    def broadcast_attendance_update(
        self,
        student: Dict[str, Any],
        record: Dict[str, Any],
        confidence: Optional[float] = None
    ):
        self.broadcast_event({
            'type': 'attendance_updated',
            'data': {
                'student': student,
                'record': record,
                'confidence': confidence,
            }
        })

    def broadcast_student_event(self, event_type: str, student: Dict[str, Any]):
        """'student_enrolled' or 'student_deleted'"""
        self.broadcast_event({
            'type': event_type,
            'data': student,
        })

    def get_client_count(self) -> int:
        with self.clients_lock:
            return len(self.clients)

    def cleanup(self):
        """Drop all clients"""
        with self.clients_lock:
            self.clients.clear()
        self.logger.info("[SSE] All clients removed")
