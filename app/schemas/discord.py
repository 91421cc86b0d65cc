"""Discord interaction payload schemas"""

import enum
from typing import Any, List, Optional
from pydantic import BaseModel

from app.schemas.audit import Actor


class InteractionType(int, enum.Enum):
    PING = 1
    APPLICATION_COMMAND = 2
    MESSAGE_COMPONENT = 3
    APPLICATION_COMMAND_AUTOCOMPLETE = 4
    MODAL_SUBMIT = 5


class InteractionCallbackType(int, enum.Enum):
    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5
    APPLICATION_COMMAND_AUTOCOMPLETE_RESULT = 8


class ChannelType(int, enum.Enum):
    GUILD_TEXT = 0
    DM = 1
    PUBLIC_THREAD = 11


EPHEMERAL_FLAG = 1 << 6


class DiscordUser(BaseModel):
    id: str
    username: str
    global_name: Optional[str] = None


class GuildMember(BaseModel):
    user: DiscordUser
    nick: Optional[str] = None


class PartialChannel(BaseModel):
    id: str
    type: int
    name: Optional[str] = None


class CommandOption(BaseModel):
    name: str
    type: int
    value: Optional[Any] = None
    focused: bool = False


class InteractionData(BaseModel):
    id: Optional[str] = None
    name: str
    type: int = 1
    options: List[CommandOption] = []


class Interaction(BaseModel):
    """Incoming interaction (only the fields the bot reads)"""
    id: str
    application_id: str
    type: InteractionType
    token: str = ""
    data: Optional[InteractionData] = None
    guild_id: Optional[str] = None
    channel_id: Optional[str] = None
    channel: Optional[PartialChannel] = None
    member: Optional[GuildMember] = None
    user: Optional[DiscordUser] = None

    @property
    def invoking_user(self) -> Optional[DiscordUser]:
        """Guild interactions carry the user under member, DMs at top level"""
        if self.member is not None:
            return self.member.user
        return self.user

    @property
    def actor(self) -> Actor:
        user = self.invoking_user
        if user is None:
            return Actor(name="unknown", id=0)
        return Actor(name=user.username, id=int(user.id))

    def option(self, name: str) -> Optional[str]:
        """Raw string value of a command option, None when not supplied"""
        if self.data is None:
            return None
        for opt in self.data.options:
            if opt.name == name:
                return None if opt.value is None else str(opt.value)
        return None

    def focused_option(self) -> Optional[CommandOption]:
        if self.data is None:
            return None
        for opt in self.data.options:
            if opt.focused:
                return opt
        return None
