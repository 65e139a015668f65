from typing import Any, Dict, Iterable, List

from simple_llm_chat.chat_core.messages import AssistantMessage, BaseMessage, ToolMessage, UserMessage

IMAGE_MIME_TYPE = "image/png"


def image_data_url(image: str) -> str:
    return f"data:{IMAGE_MIME_TYPE};base64,{image}"


def convert_message(message: BaseMessage) -> Dict[str, Any]:
    """
    Converts one history entry into an OpenAI chat message dictionary.

    Args:
        message: The message to convert.

    Returns:
        The wire representation. User messages carrying an image use multi-part
        content; everything else uses plain string content.
    """
    if isinstance(message, UserMessage) and message.image is not None:
        parts: List[Dict[str, Any]] = []
        if message.content:
            parts.append({"type": "text", "text": message.content})
        if message.image:
            parts.append({"type": "image_url", "image_url": {"url": image_data_url(message.image)}})
        if not parts:
            # Never send an empty content array.
            parts.append({"type": "text", "text": ""})
        return {"role": message.role.value, "content": parts}

    wire: Dict[str, Any] = {"role": message.role.value, "content": message.content}
    if isinstance(message, AssistantMessage) and message.tool_calls:
        wire["tool_calls"] = [
            {
                "id": call.id,
                "type": "function",
                "function": {"name": call.name, "arguments": call.arguments},
            }
            for call in message.tool_calls
        ]
    elif isinstance(message, ToolMessage) and message.tool_call_id:
        wire["tool_call_id"] = message.tool_call_id
    return wire


def convert_messages(messages: Iterable[BaseMessage]) -> List[Dict[str, Any]]:
    """Converts a provider-agnostic message list to OpenAI wire format, preserving order."""
    return [convert_message(message) for message in messages]
