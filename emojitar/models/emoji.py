"""Custom emoji reference model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

IMAGE_EXT = "png"
ANIMATED_EXT = "gif"


class EmojiRef(BaseModel):
    """A custom emoji referenced from message text.

    Uniqueness is decided by ``id`` alone; ``name`` and ``animated`` only
    shape the archive path and the CDN filename.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Emoji snowflake identifier")
    name: str = Field(default="", description="Display name as written in the token")
    animated: bool = Field(default=False, description="Token carried the 'a' flag")

    @property
    def ext(self) -> str:
        """File extension served by the CDN for this emoji."""
        return ANIMATED_EXT if self.animated else IMAGE_EXT
