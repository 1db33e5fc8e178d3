"""multichat: conversation encoding and cost accounting for multi-model chats."""

from .app import Application, IApplication
from .chat import ChatService, IChatService
from .costs import CostRollup, ModelPricing, calculate_cost, format_cost
from .encoding import (
    encode_conversation,
    encode_conversation_for_synthesis,
    is_message_set_shape_empty,
)
from .llm import ILLMProvider, LLMProvider
from .storage import IStorage, Storage

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Encoding
    "encode_conversation",
    "encode_conversation_for_synthesis",
    "is_message_set_shape_empty",
    # Costs
    "CostRollup",
    "ModelPricing",
    "calculate_cost",
    "format_cost",
    # Components
    "ChatService",
    "IChatService",
    "ILLMProvider",
    "LLMProvider",
    "IStorage",
    "Storage",
]
