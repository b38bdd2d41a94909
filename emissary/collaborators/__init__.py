"""External collaborators the pipeline writes to."""

from emissary.collaborators.audio import AudioGenerator, InMemoryAudioGenerator
from emissary.collaborators.board import InMemoryTaskBoard, Task, TaskBoard
from emissary.collaborators.feed import FeedItem, FeedPublisher, InMemoryFeedPublisher
from emissary.collaborators.mail import InMemoryOutboundMailer, OutboundEmail, OutboundMailer

__all__ = [
    "AudioGenerator",
    "FeedItem",
    "FeedPublisher",
    "InMemoryAudioGenerator",
    "InMemoryFeedPublisher",
    "InMemoryOutboundMailer",
    "InMemoryTaskBoard",
    "OutboundEmail",
    "OutboundMailer",
    "Task",
    "TaskBoard",
]
