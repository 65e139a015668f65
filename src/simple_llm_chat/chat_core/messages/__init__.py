from .models import AssistantMessage, BaseMessage, Role, SystemMessage, ToolMessage, UserMessage

__all__ = ["AssistantMessage", "BaseMessage", "Role", "SystemMessage", "ToolMessage", "UserMessage"]
