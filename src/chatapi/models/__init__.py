from chatapi.models.thread import Thread
from chatapi.models.message import Message, MessageType

__all__ = ["Thread", "Message", "MessageType"]
