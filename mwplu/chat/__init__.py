from .client import AiChatClient
from .session import ChatMessage, ChatSession
