"""Authentication-related Pydantic models."""

from pydantic import BaseModel, ConfigDict


class LarkUser(BaseModel):
    """Lark user data from the user_info endpoint."""

    model_config = ConfigDict(extra="ignore")

    user_id: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.name or self.user_id

    @property
    def normalized_email(self) -> str | None:
        """Lark sends an empty string when the email is not shared."""
        return self.email or None
