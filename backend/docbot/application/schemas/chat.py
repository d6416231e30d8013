"""Pydantic v2 schemas (DTOs) for the chat proxy request."""

from pydantic import BaseModel, Field, model_validator

from docbot.domain.entities import ChatMessage


class ChatMessageSchema(BaseModel):
    """A chat message as sent by the docs site widget."""

    role: str = Field(..., pattern=r"^(system|user|assistant|function)$")
    content: str
    name: str | None = Field(
        default=None, min_length=1, description="Function name, required for role 'function'"
    )

    @model_validator(mode="after")
    def _function_messages_are_named(self) -> "ChatMessageSchema":
        if self.role == "function" and not self.name:
            raise ValueError("function messages require a name")
        return self

    def to_domain(self) -> ChatMessage:
        return ChatMessage(role=self.role, content=self.content, name=self.name)


class ChatRequest(BaseModel):
    """Request schema for the chat proxy endpoint."""

    messages: list[ChatMessageSchema] = Field(
        ..., min_length=1, description="Conversation messages"
    )

    def to_domain_messages(self) -> list[ChatMessage]:
        """Convert message schemas to domain entities, preserving order."""
        return [message.to_domain() for message in self.messages]


class ErrorResponse(BaseModel):
    """Error body returned for 400/500 responses."""

    error: str
    data: dict | None = None
